"""Models package - Import all models for SQLAlchemy registration."""
from app.models.user import User
from app.models.trip import Trip, TripParticipant, TripStatus
from app.models.expense import Expense, ExpenseParticipant
from app.models.settlement import SettlementResult

__all__ = [
    "User",
    "Trip",
    "TripParticipant",
    "TripStatus",
    "Expense",
    "ExpenseParticipant",
    "SettlementResult",
]

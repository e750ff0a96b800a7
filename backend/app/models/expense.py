"""
Expense model for tracking expenditure events.
"""
from sqlalchemy import Column, String, Date, ForeignKey, Integer, UniqueConstraint
from sqlalchemy.orm import relationship
from app.db.base import BaseModel

# Largest amount a participant can pay toward one expense, in cents
MAX_PAID_CENTS = 2 ** 53


class Expense(BaseModel):
    """Expense model representing a single expenditure event."""
    __tablename__ = "expenses"
    
    trip_id = Column(Integer, ForeignKey("trips.id"), nullable=False, index=True)
    date = Column(Date, nullable=False, index=True)
    description = Column(String(512), nullable=True)
    
    # Relationships
    trip = relationship("Trip", back_populates="expenses")
    participants = relationship(
        "ExpenseParticipant",
        back_populates="expense",
        cascade="all, delete-orphan",
        order_by="ExpenseParticipant.id"
    )
    
    @property
    def total_cents(self) -> int:
        return sum(p.paid_cents for p in self.participants)


class ExpenseParticipant(BaseModel):
    """How much one user paid toward one expense."""
    __tablename__ = "expense_participants"
    __table_args__ = (UniqueConstraint("expense_id", "user_id", name="uq_expense_participant"),)
    
    expense_id = Column(Integer, ForeignKey("expenses.id"), nullable=False, index=True)
    user_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)
    paid_cents = Column(Integer, nullable=False, default=0)
    
    # Relationships
    expense = relationship("Expense", back_populates="participants")
    user = relationship("User", back_populates="expense_participants")

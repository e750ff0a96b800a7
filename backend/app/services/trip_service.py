"""
Trip service for trip and expense related business logic.
"""
import logging
from datetime import date
from typing import Dict, List, Mapping, Optional
from sqlalchemy.orm import Session, joinedload
from app.core.utils import normalize_email, normalize_name
from app.models.expense import MAX_PAID_CENTS, Expense, ExpenseParticipant
from app.models.trip import Trip, TripParticipant, TripStatus
from app.models.user import User
from app.services.settlement_engine import ExpenditureEvent, ParticipantPayment
from app.services.user_service import load_or_create_user

logger = logging.getLogger(__name__)


class TripNotFoundError(ValueError):
    """Raised when a trip does not exist."""


class TripClosedError(ValueError):
    """Raised when modifying a trip that has already been closed."""


class ExpenseValidationError(ValueError):
    """Raised when an expense cannot be recorded for a trip."""


def create_trip(
    db: Session,
    name: str,
    owner: str,
    start_date: date,
    description: str = "",
    participants: Optional[List[str]] = None
) -> Trip:
    """
    Create a trip with its owner and participants.
    Participants are given by email; unknown users are registered on the way.
    """
    owner_email = normalize_email(owner)
    emails = []
    for email in participants or []:
        email = normalize_email(email)
        if email == owner_email:
            logger.warning(
                f"Owner '{owner_email}' is also in the list of participants {participants}, ignoring."
            )
            continue
        if email in emails:
            continue
        emails.append(email)
    
    try:
        trip = Trip(
            name=name,
            name_lower=normalize_name(name),
            description=description,
            start_date=start_date,
            status=TripStatus.ACTIVE
        )
        db.add(trip)
        db.flush()
        
        owner_user = load_or_create_user(db, owner_email)
        db.add(TripParticipant(trip_id=trip.id, user_id=owner_user.id, is_owner=True))
        for email in emails:
            user = load_or_create_user(db, email)
            db.add(TripParticipant(trip_id=trip.id, user_id=user.id, is_owner=False))
        
        db.commit()
    except Exception:
        db.rollback()
        raise
    
    db.refresh(trip)
    logger.info(f"Created trip {trip.id} '{trip.name}' with {len(emails) + 1} participants")
    return trip


def get_trip(db: Session, trip_id: int) -> Trip:
    """Load a trip by primary key."""
    trip = db.query(Trip).options(
        joinedload(Trip.participants).joinedload(TripParticipant.user)
    ).filter(Trip.id == trip_id).first()
    if not trip:
        raise TripNotFoundError(f"Trip {trip_id} not found")
    return trip


def load_trips_by_owner(db: Session, owner: str) -> Dict[str, Trip]:
    """Active trips owned by the given user, keyed by normalized trip name."""
    trips = db.query(Trip).join(
        TripParticipant, TripParticipant.trip_id == Trip.id
    ).join(
        User, User.id == TripParticipant.user_id
    ).filter(
        User.email == normalize_email(owner),
        TripParticipant.is_owner.is_(True),
        Trip.status == TripStatus.ACTIVE
    ).order_by(Trip.id).all()
    return {trip.name_lower: trip for trip in trips}


def add_expense(
    db: Session,
    trip: Trip,
    expense_date: date,
    description: str,
    participants: Mapping[str, int]
) -> Expense:
    """
    Record an expenditure event on a trip.
    `participants` maps participant email to the amount paid, in cents.
    """
    if trip.is_closed:
        raise TripClosedError(f"Trip {trip.id} is already closed")
    if not participants:
        raise ExpenseValidationError("An expense needs at least one participant")
    
    members = {p.user.email: p.user for p in trip.participants}
    payments = []
    seen = set()
    for raw_email, paid in participants.items():
        email = normalize_email(raw_email)
        if email not in members:
            raise ExpenseValidationError(f"Expense participant '{email}' not part of the trip")
        if email in seen:
            raise ExpenseValidationError(f"Expense participant '{email}' listed more than once")
        if paid < 0:
            raise ExpenseValidationError(f"Amount paid by '{email}' cannot be negative")
        if paid > MAX_PAID_CENTS:
            raise ExpenseValidationError(f"Amount paid by '{email}' exceeds {MAX_PAID_CENTS} cents")
        seen.add(email)
        payments.append((members[email], paid))
    
    try:
        expense = Expense(trip_id=trip.id, date=expense_date, description=description)
        db.add(expense)
        db.flush()
        for user, paid in payments:
            db.add(ExpenseParticipant(expense_id=expense.id, user_id=user.id, paid_cents=paid))
        db.commit()
    except Exception:
        db.rollback()
        raise
    
    db.refresh(expense)
    logger.info(f"Added expense {expense.id} to trip {trip.id}: {expense.total_cents} cents")
    return expense


def get_expenses(db: Session, trip_id: int) -> List[Expense]:
    """Expenses of a trip in creation order (created_at, then id)."""
    return db.query(Expense).options(
        joinedload(Expense.participants).joinedload(ExpenseParticipant.user)
    ).filter(Expense.trip_id == trip_id).order_by(Expense.created_at, Expense.id).all()


def load_trip_events(db: Session, trip_id: int) -> List[ExpenditureEvent]:
    """Expenses of a trip as expenditure events, keyed by participant email."""
    return [
        ExpenditureEvent(
            participants=[
                ParticipantPayment(identity=ep.user.email, paid_cents=ep.paid_cents)
                for ep in expense.participants
            ],
            description=expense.description or "",
            event_date=expense.date
        )
        for expense in get_expenses(db, trip_id)
    ]

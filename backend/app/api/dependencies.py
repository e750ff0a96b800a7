"""
Shared route dependencies and response builders.
"""
from fastapi import Depends, HTTPException, status
from sqlalchemy.orm import Session
from app.db.session import get_db
from app.models.expense import Expense
from app.models.trip import Trip
from app.schemas.expense import ExpenseParticipantResponse, ExpenseResponse
from app.schemas.trip import TripParticipantResponse, TripResponse
from app.services.trip_service import TripNotFoundError, get_trip


def get_trip_or_404(trip_id: int, db: Session = Depends(get_db)) -> Trip:
    """Dependency resolving the trip in the URL path."""
    try:
        return get_trip(db, trip_id)
    except TripNotFoundError as e:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=str(e)
        )


def build_expense_response(expense: Expense) -> ExpenseResponse:
    """Build expense response with participant emails."""
    return ExpenseResponse(
        id=expense.id,
        trip_id=expense.trip_id,
        date=expense.date,
        description=expense.description or "",
        total_cents=expense.total_cents,
        participants=[
            ExpenseParticipantResponse(
                user_id=ep.user_id,
                email=ep.user.email,
                paid_cents=ep.paid_cents
            )
            for ep in expense.participants
        ],
        created_at=expense.created_at
    )


def build_trip_response(trip: Trip) -> TripResponse:
    """Build trip response with participants and expenses."""
    owner = trip.owner
    expenses = [
        build_expense_response(e)
        for e in sorted(trip.expenses, key=lambda e: (e.created_at, e.id))
    ]
    return TripResponse(
        id=trip.id,
        name=trip.name,
        description=trip.description or "",
        start_date=trip.start_date,
        end_date=trip.end_date,
        status=trip.status,
        owner=owner.email if owner else None,
        participants=[
            TripParticipantResponse(
                id=p.user.id,
                email=p.user.email,
                verified=p.user.verified,
                is_owner=p.is_owner
            )
            for p in trip.participants
        ],
        expenses=expenses,
        total_cents=sum(e.total_cents for e in expenses),
        created_at=trip.created_at
    )

"""
Expense management routes.
"""
from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session
from typing import List
from app.db.session import get_db
from app.models.trip import Trip
from app.schemas.expense import ExpenseCreate, ExpenseCreatedResponse, ExpenseResponse
from app.api.dependencies import get_trip_or_404, build_expense_response
from app.services.trip_service import (
    ExpenseValidationError, TripClosedError, add_expense, get_expenses
)

router = APIRouter(prefix="/trips", tags=["expenses"])


@router.post(
    "/{trip_id}/expenses",
    response_model=ExpenseCreatedResponse,
    status_code=status.HTTP_202_ACCEPTED
)
async def post_expense(
    expense_data: ExpenseCreate,
    trip: Trip = Depends(get_trip_or_404),
    db: Session = Depends(get_db)
):
    """Add an expenditure event to a trip."""
    try:
        expense = add_expense(
            db,
            trip,
            expense_date=expense_data.date,
            description=expense_data.description,
            participants=expense_data.participants
        )
    except TripClosedError as e:
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail=str(e)
        )
    except ExpenseValidationError as e:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=str(e)
        )
    
    return ExpenseCreatedResponse(expense_id=expense.id)


@router.get("/{trip_id}/expenses", response_model=List[ExpenseResponse])
async def list_expenses(
    trip: Trip = Depends(get_trip_or_404),
    db: Session = Depends(get_db)
):
    """Get the expenses incurred during the trip, in the order they were recorded."""
    return [build_expense_response(e) for e in get_expenses(db, trip.id)]

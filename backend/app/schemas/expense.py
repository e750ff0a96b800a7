"""
Pydantic schemas for Expense entity.
"""
from pydantic import BaseModel, Field
from typing import Annotated, Dict, List
from datetime import date, datetime
from app.models.expense import MAX_PAID_CENTS

PaidCents = Annotated[int, Field(ge=0, le=MAX_PAID_CENTS)]


class ExpenseCreate(BaseModel):
    """Schema for expense creation."""
    date: date
    description: str = Field("", max_length=511)
    participants: Dict[str, PaidCents]  # email -> amount paid in cents


class ExpenseCreatedResponse(BaseModel):
    """Schema returned after an expense is recorded."""
    expense_id: int


class ExpenseParticipantResponse(BaseModel):
    """Schema for expense participant response."""
    user_id: int
    email: str
    paid_cents: int


class ExpenseResponse(BaseModel):
    """Schema for expense response."""
    id: int
    trip_id: int
    date: date
    description: str = ""
    total_cents: int
    participants: List[ExpenseParticipantResponse] = []
    created_at: datetime

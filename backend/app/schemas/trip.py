"""
Pydantic schemas for Trip entity.
"""
from pydantic import BaseModel, Field
from typing import List, Optional
from datetime import date, datetime
from app.models.trip import TripStatus
from app.schemas.expense import ExpenseResponse


class TripBase(BaseModel):
    """Base trip schema."""
    name: str = Field(..., min_length=1, max_length=127)
    start_date: date
    description: str = Field("", max_length=511)


class TripCreate(TripBase):
    """Schema for trip creation. Only email addresses are provided."""
    owner: str = Field(..., min_length=1)
    participants: List[str]


class TripCreatedResponse(BaseModel):
    """Schema returned after a trip is created."""
    trip_id: int


class TripParticipantResponse(BaseModel):
    """Schema for trip participant response."""
    id: int
    email: str
    verified: bool
    is_owner: bool


class TripResponse(TripBase):
    """Schema for trip response with participants and expenses."""
    id: int
    owner: Optional[str] = None
    status: TripStatus
    end_date: Optional[date] = None
    participants: List[TripParticipantResponse] = []
    expenses: List[ExpenseResponse] = []
    total_cents: int = 0
    created_at: datetime

"""
Trip management routes.
"""
from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session
from app.db.session import get_db
from app.models.trip import Trip
from app.schemas.trip import TripCreate, TripCreatedResponse, TripResponse
from app.api.dependencies import get_trip_or_404, build_trip_response
from app.services.trip_service import create_trip

router = APIRouter(prefix="/trips", tags=["trips"])


@router.post("", response_model=TripCreatedResponse, status_code=status.HTTP_201_CREATED)
async def post_trip(
    trip_data: TripCreate,
    db: Session = Depends(get_db)
):
    """Create a new trip with its owner and participants."""
    trip = create_trip(
        db,
        name=trip_data.name,
        owner=trip_data.owner,
        start_date=trip_data.start_date,
        description=trip_data.description,
        participants=trip_data.participants
    )
    return TripCreatedResponse(trip_id=trip.id)


@router.get("/{trip_id}", response_model=TripResponse)
async def get_trip_detail(trip: Trip = Depends(get_trip_or_404)):
    """Get trip details including expenses."""
    return build_trip_response(trip)

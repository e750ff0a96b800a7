"""
User related routes.
"""
from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session
from typing import Dict
from app.db.session import get_db
from app.schemas.trip import TripResponse
from app.api.dependencies import build_trip_response
from app.services.trip_service import load_trips_by_owner

router = APIRouter(prefix="/users", tags=["users"])


@router.get("/{owner}/trips", response_model=Dict[str, TripResponse])
async def list_owner_trips(
    owner: str,
    db: Session = Depends(get_db)
):
    """List the active trips owned by a user, keyed by normalized trip name."""
    trips = load_trips_by_owner(db, owner)
    return {name: build_trip_response(trip) for name, trip in trips.items()}

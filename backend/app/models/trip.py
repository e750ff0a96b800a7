"""
Trip model for group travel expense tracking.
"""
from sqlalchemy import Column, String, Date, Boolean, Enum as SQLEnum, ForeignKey, Integer, UniqueConstraint
from sqlalchemy.orm import relationship
from app.db.base import BaseModel
import enum


class TripStatus(str, enum.Enum):
    """Trip status enumeration. Closing a trip is one-way."""
    ACTIVE = "Active"
    CLOSED = "Closed"


class Trip(BaseModel):
    """Trip model representing a group travel event."""
    __tablename__ = "trips"
    
    name = Column(String(128), nullable=False)
    name_lower = Column(String(128), nullable=False, index=True)
    description = Column(String(512), nullable=True)
    start_date = Column(Date, nullable=False, index=True)
    end_date = Column(Date, nullable=True)  # Set when the trip is closed
    status = Column(SQLEnum(TripStatus), default=TripStatus.ACTIVE, nullable=False)
    
    # Relationships
    participants = relationship("TripParticipant", back_populates="trip", cascade="all, delete-orphan")
    expenses = relationship("Expense", back_populates="trip", cascade="all, delete-orphan")
    settlement_result = relationship(
        "SettlementResult", back_populates="trip", uselist=False, cascade="all, delete-orphan"
    )
    
    @property
    def is_closed(self) -> bool:
        return self.status == TripStatus.CLOSED
    
    @property
    def owner(self):
        """The user who created the trip."""
        for p in self.participants:
            if p.is_owner:
                return p.user
        return None


class TripParticipant(BaseModel):
    """Junction table for Trip and User many-to-many relationship."""
    __tablename__ = "trip_participants"
    __table_args__ = (UniqueConstraint("trip_id", "user_id", name="uq_trip_participant"),)
    
    trip_id = Column(Integer, ForeignKey("trips.id"), nullable=False, index=True)
    user_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)
    is_owner = Column(Boolean, default=False, nullable=False)
    
    # Relationships
    trip = relationship("Trip", back_populates="participants")
    user = relationship("User", back_populates="trips")

"""
User model. Every trip participant is a user, identified by email.
"""
from sqlalchemy import Column, String, Boolean
from sqlalchemy.orm import relationship
from app.db.base import BaseModel


class User(BaseModel):
    """User model keyed by normalized email address."""
    __tablename__ = "users"
    
    email = Column(String(256), unique=True, nullable=False, index=True)
    verified = Column(Boolean, default=False, nullable=False)
    
    # Relationships
    trips = relationship("TripParticipant", back_populates="user", cascade="all, delete-orphan")
    expense_participants = relationship("ExpenseParticipant", back_populates="user", cascade="all, delete-orphan")

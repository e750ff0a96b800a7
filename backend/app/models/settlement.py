"""
Settlement model storing the ledger computed when a trip is closed.
"""
from sqlalchemy import Column, Text, ForeignKey, Integer, JSON
from sqlalchemy.orm import relationship
from app.db.base import BaseModel


class SettlementResult(BaseModel):
    """Settlement result model storing the netted ledger of a closed trip."""
    __tablename__ = "settlement_results"
    
    trip_id = Column(Integer, ForeignKey("trips.id"), nullable=False, unique=True, index=True)
    ledger = Column(JSON, nullable=False)  # payer email -> payee email -> cents
    summary = Column(Text, nullable=True)
    
    # Relationships
    trip = relationship("Trip", back_populates="settlement_result")

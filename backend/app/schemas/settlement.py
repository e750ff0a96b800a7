"""
Pydantic schemas for Settlement entity.
"""
from pydantic import BaseModel
from typing import List, Dict
from datetime import datetime


class TransferResponse(BaseModel):
    """Schema for a single transfer in settlement."""
    payer: str
    payee: str
    amount_cents: int


class SettlementResultResponse(BaseModel):
    """Schema for settlement result response."""
    trip_id: int
    ledger: Dict[str, Dict[str, int]]  # payer -> payee -> cents
    transfers: List[TransferResponse]
    summary: str
    created_at: datetime

"""
Settlement management routes.
"""
from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session
from app.db.session import get_db
from app.models.settlement import SettlementResult
from app.models.trip import Trip
from app.schemas.settlement import SettlementResultResponse, TransferResponse
from app.api.dependencies import get_trip_or_404
from app.services.settlement_service import close_trip_settlement, get_settlement_result

router = APIRouter(prefix="/trips", tags=["settlement"])


def build_settlement_response(settlement: SettlementResult) -> SettlementResultResponse:
    """Build settlement response with the ledger flattened into transfers."""
    return SettlementResultResponse(
        trip_id=settlement.trip_id,
        ledger=settlement.ledger,
        transfers=[
            TransferResponse(payer=payer, payee=payee, amount_cents=amount)
            for payer, payees in settlement.ledger.items()
            for payee, amount in payees.items()
        ],
        summary=settlement.summary or "",
        created_at=settlement.created_at
    )


@router.post("/{trip_id}/settle", response_model=SettlementResultResponse)
async def trigger_settlement(
    trip: Trip = Depends(get_trip_or_404),
    db: Session = Depends(get_db)
):
    """Close the trip and compute who owes whom."""
    settlement = close_trip_settlement(db, trip.id)
    return build_settlement_response(settlement)


@router.get("/{trip_id}/settlement", response_model=SettlementResultResponse)
async def get_settlement(
    trip: Trip = Depends(get_trip_or_404),
    db: Session = Depends(get_db)
):
    """Get the settlement of a closed trip."""
    settlement = get_settlement_result(db, trip.id)
    if not settlement:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Settlement not found"
        )
    
    return build_settlement_response(settlement)

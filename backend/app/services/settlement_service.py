"""
Settlement service: closes a trip and stores its settlement ledger.
"""
import logging
from datetime import date
from typing import Optional
from sqlalchemy.orm import Session
from app.core.utils import format_cents
from app.models.settlement import SettlementResult
from app.models.trip import Trip, TripStatus
from app.services.settlement_engine import SettlementLedger, close_trip
from app.services.trip_service import TripNotFoundError, load_trip_events

logger = logging.getLogger(__name__)


def build_summary(trip: Trip, ledger: SettlementLedger, total_cents: int, event_count: int) -> str:
    """Human readable summary of a trip settlement."""
    summary_lines = [
        f"Trip: {trip.name}",
        f"Total expenses: {format_cents(total_cents)}",
        f"Expenses: {event_count}",
        "\nTransfers:",
    ]
    if not ledger:
        summary_lines.append("  (nothing to settle)")
    for transfer in ledger.transfers():
        summary_lines.append(
            f"  {transfer.payer} -> {transfer.payee}: {format_cents(transfer.amount_cents)}"
        )
    return "\n".join(summary_lines)


def get_settlement_result(db: Session, trip_id: int) -> Optional[SettlementResult]:
    """Stored settlement of a closed trip, or None if it was never closed."""
    return db.query(SettlementResult).filter(SettlementResult.trip_id == trip_id).first()


def close_trip_settlement(db: Session, trip_id: int, today: Optional[date] = None) -> SettlementResult:
    """
    Compute the settlement of a trip and mark the trip as closed.

    Closing is one-way: once the trip is closed the stored settlement is
    returned as is and never recomputed.
    """
    trip = db.query(Trip).filter(Trip.id == trip_id).with_for_update().first()
    if not trip:
        raise TripNotFoundError(f"Trip {trip_id} not found")

    if trip.is_closed:
        existing = get_settlement_result(db, trip_id)
        if existing is not None:
            logger.info(f"Trip {trip_id} is already closed, returning stored settlement")
            return existing

    events = load_trip_events(db, trip_id)
    ledger = close_trip(events)
    total_cents = sum(event.total_cents for event in events)

    try:
        # Drop a stale result left by a trip closed without one
        db.query(SettlementResult).filter(SettlementResult.trip_id == trip_id).delete()

        settlement = SettlementResult(
            trip_id=trip_id,
            ledger=ledger.as_dict(),
            summary=build_summary(trip, ledger, total_cents, len(events))
        )
        db.add(settlement)

        trip.status = TripStatus.CLOSED
        trip.end_date = today or date.today()

        db.commit()
    except Exception:
        db.rollback()
        raise

    db.refresh(settlement)
    logger.info(
        f"Closed trip {trip_id}: {len(events)} expenses, {len(ledger)} transfers"
    )
    return settlement

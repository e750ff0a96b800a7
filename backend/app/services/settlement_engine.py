"""
Settlement engine for splitting trip expenses.

Each expenditure event is settled on its own: everyone should end up having
paid the fair share of that event, and whoever is short pays whoever is over.
The per-event transfers are then folded into a single trip ledger, where
opposite debts between the same two people are netted against each other.

The engine is pure computation. It never touches the database; the services
load events and persist the resulting ledger.
"""
from dataclasses import dataclass, field
from datetime import date
from typing import Dict, Hashable, Iterable, Iterator, List, Optional, Set, Tuple
import logging

logger = logging.getLogger(__name__)


class SettlementInputError(ValueError):
    """Raised when an expenditure event is malformed."""


@dataclass(frozen=True)
class ParticipantPayment:
    """How much one participant actually paid toward one event (in cents)."""
    identity: Hashable
    paid_cents: int


@dataclass(frozen=True)
class ExpenditureEvent:
    """A single expenditure event and what each participant paid toward it."""
    participants: Tuple[ParticipantPayment, ...]
    description: str = ""
    event_date: Optional[date] = None

    def __post_init__(self):
        # Accept any iterable but keep the event immutable
        object.__setattr__(self, "participants", tuple(self.participants))

    @property
    def total_cents(self) -> int:
        return sum(p.paid_cents for p in self.participants)


@dataclass(frozen=True)
class Transfer:
    """Payer owes payee amount_cents."""
    payer: Hashable
    payee: Hashable
    amount_cents: int


def validate_event(event: ExpenditureEvent) -> None:
    """
    Reject events the settler cannot handle.

    An event needs at least one participant, non-negative integer amounts and
    at most one entry per identity.
    """
    if not event.participants:
        raise SettlementInputError("Expenditure event has no participants")

    seen = set()
    for participant in event.participants:
        paid = participant.paid_cents
        if isinstance(paid, bool) or not isinstance(paid, int):
            raise SettlementInputError(
                f"Amount paid by '{participant.identity}' must be an integer number of cents"
            )
        if paid < 0:
            raise SettlementInputError(
                f"Amount paid by '{participant.identity}' is negative: {paid}"
            )
        if participant.identity in seen:
            raise SettlementInputError(
                f"Participant '{participant.identity}' appears more than once"
            )
        seen.add(participant.identity)


def fair_share(total_cents: int, count: int) -> int:
    """Per-head share of total_cents, rounded half-up to the nearest cent."""
    if count <= 0:
        raise SettlementInputError("Cannot share an amount among zero participants")
    # floor(total / count + 0.5) without going through floats
    return (2 * total_cents + count) // (2 * count)


def settle_event(event: ExpenditureEvent) -> List[Transfer]:
    """
    Compute the transfers that bring every participant to the fair share.

    Greedy two-pointer matching: the participant with the largest surplus is
    paired with the one at the tail of the list (smallest payment) until one
    of them reaches the fair share. This is a heuristic; it does not promise
    the minimum number of transfers.
    """
    validate_event(event)

    total = event.total_cents
    count = len(event.participants)
    if total == 0 or count == 1:
        return []

    avg = fair_share(total, count)

    # Largest payer first; the sort is stable so ties keep the input order
    working = sorted(
        ([p.identity, p.paid_cents] for p in event.participants),
        key=lambda item: -item[1],
    )

    transfers: List[Transfer] = []
    i, j = 0, count - 1
    while i < j:
        creditor, debtor = working[i], working[j]
        if creditor[1] <= avg:
            i += 1
        elif debtor[1] >= avg:
            j -= 1
        else:
            amount = min(avg - debtor[1], creditor[1] - avg)
            transfers.append(Transfer(payer=debtor[0], payee=creditor[0], amount_cents=amount))
            debtor[1] += amount
            creditor[1] -= amount

    logger.debug(
        f"Settled event '{event.description}': total={total} share={avg} transfers={len(transfers)}"
    )
    return transfers


@dataclass
class SettlementLedger:
    """
    Net debts of a trip: payer -> payee -> amount in cents.

    `seen` indexes the directed pairs currently present in `entries` so the
    reverse direction can be looked up when a new transfer comes in. Both are
    owned by the ledger instance; nothing is shared between trips.
    """
    entries: Dict[Hashable, Dict[Hashable, int]] = field(default_factory=dict)
    seen: Set[Tuple[Hashable, Hashable]] = field(default_factory=set)

    def record(self, transfer: Transfer) -> None:
        """Fold one transfer into the ledger, netting against the reverse debt."""
        payer, payee, amount = transfer.payer, transfer.payee, transfer.amount_cents
        if payer == payee:
            raise SettlementInputError(f"Self-transfer for '{payer}' is not allowed")
        if amount <= 0:
            raise SettlementInputError(f"Transfer amount must be positive, got {amount}")

        if (payee, payer) in self.seen:
            existing = self.entries[payee][payer]
            if existing >= amount:
                # Absorbed entirely by the opposite debt
                self._set(payee, payer, existing - amount)
            else:
                self._set(payee, payer, 0)
                self._set(payer, payee, self.amount(payer, payee) + amount - existing)
        else:
            self._set(payer, payee, self.amount(payer, payee) + amount)

    def _set(self, payer: Hashable, payee: Hashable, amount: int) -> None:
        if amount > 0:
            self.entries.setdefault(payer, {})[payee] = amount
            self.seen.add((payer, payee))
            return

        payees = self.entries.get(payer)
        if payees is not None:
            payees.pop(payee, None)
            if not payees:
                del self.entries[payer]
        self.seen.discard((payer, payee))

    def amount(self, payer: Hashable, payee: Hashable) -> int:
        """Amount payer owes payee, 0 if there is no such debt."""
        return self.entries.get(payer, {}).get(payee, 0)

    def transfers(self) -> List[Transfer]:
        """Flatten the ledger into transfers, in insertion order."""
        return [
            Transfer(payer=payer, payee=payee, amount_cents=amount)
            for payer, payees in self.entries.items()
            for payee, amount in payees.items()
        ]

    def as_dict(self) -> Dict[Hashable, Dict[Hashable, int]]:
        """Nested plain-dict copy of the ledger."""
        return {payer: dict(payees) for payer, payees in self.entries.items()}

    def __iter__(self) -> Iterator[Transfer]:
        return iter(self.transfers())

    def __len__(self) -> int:
        return len(self.seen)

    def __bool__(self) -> bool:
        return bool(self.seen)


def close_trip(events: Iterable[ExpenditureEvent]) -> SettlementLedger:
    """
    Settle every event of a trip, in order, into one netted ledger.

    Each event is validated before any of its transfers are recorded, so a
    malformed event never leaves a partially folded ledger behind for it.
    """
    ledger = SettlementLedger()
    for event in events:
        for transfer in settle_event(event):
            ledger.record(transfer)
    return ledger

"""
Tests for trip, expense and settlement services.
"""
import pytest
from datetime import date, timedelta
from app.models.trip import TripStatus
from app.models.settlement import SettlementResult
from app.services.settlement_service import close_trip_settlement, get_settlement_result
from app.services.trip_service import (
    ExpenseValidationError,
    TripClosedError,
    TripNotFoundError,
    add_expense,
    create_trip,
    get_trip,
    load_trip_events,
    load_trips_by_owner,
)
from app.services.user_service import get_user_by_email, load_or_create_user

ALICE = "alice@test.com"
BOB = "bob@test.com"
CHARLIE = "charlie@test.com"


@pytest.fixture
def trip(db_session):
    return create_trip(
        db_session,
        name="Trip 1",
        owner=ALICE,
        start_date=date(2025, 1, 1),
        description="Trip 1 for testing",
        participants=[BOB, CHARLIE]
    )


def test_load_or_create_user_normalizes_email(db_session):
    """Test users are keyed by lowercased email."""
    user = load_or_create_user(db_session, "  Dave@Test.COM ")
    assert user.email == "dave@test.com"
    assert user.verified is False
    assert load_or_create_user(db_session, "dave@test.com").id == user.id
    assert get_user_by_email(db_session, "DAVE@test.com").id == user.id


def test_create_trip(db_session, trip):
    """Test trip creation with owner and participants."""
    loaded = get_trip(db_session, trip.id)
    assert loaded.name == "Trip 1"
    assert loaded.name_lower == "trip 1"
    assert loaded.status == TripStatus.ACTIVE
    assert loaded.end_date is None
    assert loaded.owner.email == ALICE
    assert sorted(p.user.email for p in loaded.participants) == [ALICE, BOB, CHARLIE]


def test_create_trip_ignores_owner_in_participants(db_session):
    """Test the owner listed again as participant is not duplicated."""
    trip = create_trip(
        db_session,
        name="Trip 2",
        owner=ALICE,
        start_date=date(2025, 2, 1),
        participants=["Alice@Test.com", BOB, "BOB@test.com"]
    )
    emails = sorted((p.user.email, p.is_owner) for p in trip.participants)
    assert emails == [(ALICE, True), (BOB, False)]


def test_get_trip_not_found(db_session):
    """Test loading a missing trip."""
    with pytest.raises(TripNotFoundError):
        get_trip(db_session, 999)


def test_load_trips_by_owner(db_session, trip):
    """Test only active trips owned by the user are returned."""
    create_trip(db_session, name="Ski Week", owner=BOB, start_date=date(2025, 3, 1), participants=[ALICE])
    closed = create_trip(db_session, name="Old Trip", owner=ALICE, start_date=date(2024, 1, 1), participants=[])
    close_trip_settlement(db_session, closed.id)
    
    trips = load_trips_by_owner(db_session, "ALICE@test.com")
    assert list(trips.keys()) == ["trip 1"]
    assert trips["trip 1"].id == trip.id
    assert list(load_trips_by_owner(db_session, BOB).keys()) == ["ski week"]
    assert load_trips_by_owner(db_session, "nobody@test.com") == {}


def test_add_expense(db_session, trip):
    """Test recording an expense."""
    expense = add_expense(
        db_session, trip, date(2025, 1, 2), "tickets",
        {"Alice@test.com": 6000, BOB: 0, CHARLIE: 0}
    )
    assert expense.total_cents == 6000
    assert [(p.user.email, p.paid_cents) for p in expense.participants] == [
        (ALICE, 6000), (BOB, 0), (CHARLIE, 0)
    ]


@pytest.mark.parametrize("participants", [
    {},
    {ALICE: 100, "stranger@test.com": 0},
    {ALICE: 100, "ALICE@test.com": 0},
    {ALICE: 100, BOB: -5},
    {ALICE: 2 ** 70},
])
def test_add_expense_rejects_invalid_participants(db_session, trip, participants):
    """Test expense validation."""
    with pytest.raises(ExpenseValidationError):
        add_expense(db_session, trip, date(2025, 1, 2), "bad", participants)
    assert load_trip_events(db_session, trip.id) == []


def test_load_trip_events_in_creation_order(db_session, trip):
    """Test expenses are handed to the engine as events in order."""
    add_expense(db_session, trip, date(2025, 1, 3), "dinner", {ALICE: 6000, BOB: 0, CHARLIE: 0})
    add_expense(db_session, trip, date(2025, 1, 2), "taxi", {ALICE: 3000, CHARLIE: 0})
    
    events = load_trip_events(db_session, trip.id)
    assert [e.description for e in events] == ["dinner", "taxi"]
    assert [e.total_cents for e in events] == [6000, 3000]
    assert [p.identity for p in events[1].participants] == [ALICE, CHARLIE]


def test_load_trip_events_orders_by_creation_time(db_session, trip):
    """Test expenses are ordered by created_at before id."""
    first = add_expense(db_session, trip, date(2025, 1, 2), "first", {ALICE: 100, BOB: 0})
    second = add_expense(db_session, trip, date(2025, 1, 2), "second", {ALICE: 0, BOB: 100})
    second.created_at = first.created_at - timedelta(minutes=5)
    db_session.commit()
    
    events = load_trip_events(db_session, trip.id)
    assert [e.description for e in events] == ["second", "first"]


def test_close_trip_settlement(db_session, trip):
    """Test closing a trip stores the netted ledger and marks it closed."""
    add_expense(db_session, trip, date(2025, 1, 2), "dinner", {ALICE: 6000, BOB: 0, CHARLIE: 0})
    add_expense(db_session, trip, date(2025, 1, 3), "taxi", {ALICE: 3000, CHARLIE: 0})
    
    settlement = close_trip_settlement(db_session, trip.id, today=date(2025, 1, 5))
    
    assert settlement.ledger == {BOB: {ALICE: 2000}, CHARLIE: {ALICE: 3500}}
    assert "Total expenses: 90.00" in settlement.summary
    assert f"{CHARLIE} -> {ALICE}: 35.00" in settlement.summary
    
    trip = get_trip(db_session, trip.id)
    assert trip.status == TripStatus.CLOSED
    assert trip.end_date == date(2025, 1, 5)
    assert get_settlement_result(db_session, trip.id).id == settlement.id


def test_close_trip_settlement_is_one_way(db_session, trip):
    """Test closing twice returns the stored settlement."""
    add_expense(db_session, trip, date(2025, 1, 2), "dinner", {ALICE: 0, BOB: 2000})
    first = close_trip_settlement(db_session, trip.id, today=date(2025, 1, 5))
    second = close_trip_settlement(db_session, trip.id, today=date(2025, 1, 9))
    
    assert second.id == first.id
    assert second.ledger == {ALICE: {BOB: 1000}}
    assert get_trip(db_session, trip.id).end_date == date(2025, 1, 5)
    assert db_session.query(SettlementResult).count() == 1


def test_add_expense_to_closed_trip(db_session, trip):
    """Test a closed trip accepts no more expenses."""
    close_trip_settlement(db_session, trip.id)
    with pytest.raises(TripClosedError):
        add_expense(db_session, get_trip(db_session, trip.id), date(2025, 1, 2), "late", {ALICE: 100})


def test_close_trip_without_expenses(db_session, trip):
    """Test closing an empty trip."""
    settlement = close_trip_settlement(db_session, trip.id)
    assert settlement.ledger == {}
    assert "(nothing to settle)" in settlement.summary


def test_close_missing_trip(db_session):
    """Test closing a trip that does not exist."""
    with pytest.raises(TripNotFoundError):
        close_trip_settlement(db_session, 42)

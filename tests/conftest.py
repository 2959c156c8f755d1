"""
Pytest fixtures for the ledger kernel test suite.

Provides:
- In-memory SQLite engine and sessions (StaticPool: one shared connection,
  so worker threads spawned by the statement controller see the same data)
- Record factories for firms, parties and movements
- An in-memory TransactionStore that counts calls
- Deterministic clock and log capture
"""

import json
import logging
from collections.abc import Callable
from datetime import UTC, date, datetime, timedelta
from decimal import Decimal
from io import StringIO
from uuid import UUID, uuid4

import pytest
from sqlalchemy.orm import Session

from ledger_kernel.db.engine import (
    create_tables,
    drop_tables,
    get_session_factory,
    init_engine_from_url,
    reset_engine,
)
from ledger_kernel.domain.clock import DeterministicClock
from ledger_kernel.domain.movement import OPENING_BALANCE, Movement, PartyInfo
from ledger_kernel.logging_config import (
    JsonLineFormatter,
    LogContext,
    configure_logging,
    reset_logging,
)
from ledger_kernel.models import Firm, MovementModel, Party
from tests.fakes import InMemoryTransactionStore

# Test actor ID for all created records
TEST_ACTOR_ID = uuid4()

SQLITE_URL = "sqlite:///:memory:"


# =============================================================================
# Logging fixtures
# =============================================================================


@pytest.fixture(autouse=True, scope="session")
def _configure_test_logging():
    """Configure structured logging for the test suite."""
    reset_logging()
    configure_logging(level=logging.DEBUG)
    yield
    reset_logging()


@pytest.fixture(autouse=True)
def _clear_log_context():
    """Clear LogContext between tests to prevent cross-test contamination."""
    LogContext.clear()
    yield
    LogContext.clear()


@pytest.fixture
def captured_logs():
    """
    Capture ledger_kernel logs as parsed JSON dicts.

    Usage::

        def test_something(captured_logs):
            service.compute(request)
            logs = captured_logs()
            assert any(r["message"] == "statement_computed" for r in logs)
    """
    stream = StringIO()
    handler = logging.StreamHandler(stream)
    handler.setFormatter(JsonLineFormatter())
    root = logging.getLogger("ledger_kernel")
    previous_level = root.level
    root.setLevel(logging.DEBUG)
    root.addHandler(handler)

    def _get_records() -> list[dict]:
        lines = stream.getvalue().strip().split("\n")
        return [json.loads(line) for line in lines if line]

    yield _get_records

    root.removeHandler(handler)
    root.setLevel(previous_level)


# =============================================================================
# Database fixtures
# =============================================================================


@pytest.fixture
def engine():
    """Fresh in-memory database with all tables."""
    eng = init_engine_from_url(SQLITE_URL)
    create_tables()
    yield eng
    drop_tables()
    reset_engine()


@pytest.fixture
def session_factory(engine):
    return get_session_factory()


@pytest.fixture
def session(session_factory) -> Session:
    """Session for arranging data; tests commit what other sessions must see."""
    s = session_factory()
    yield s
    s.rollback()
    s.close()


@pytest.fixture
def create_firm(session) -> Callable[..., Firm]:
    def _create(name: str | None = None) -> Firm:
        firm = Firm(name=name or f"Firm {uuid4().hex[:8]}", created_by_id=TEST_ACTOR_ID)
        session.add(firm)
        session.flush()
        return firm

    return _create


@pytest.fixture
def create_party(session) -> Callable[..., Party]:
    def _create(
        firm: Firm,
        name: str = "Acme Retail",
        opening_balance: Decimal | None = None,
        party_type: str = "customer",
        is_active: bool = True,
    ) -> Party:
        party = Party(
            firm_id=firm.id,
            name=name,
            party_type=party_type,
            opening_balance=opening_balance,
            is_active=is_active,
            created_by_id=TEST_ACTOR_ID,
        )
        session.add(party)
        session.flush()
        return party

    return _create


@pytest.fixture
def create_movement(session) -> Callable[..., MovementModel]:
    """
    Insert a movement row.

    created_at increases by one second per call unless given, so rows on
    the same date have a known creation order.
    """
    base = datetime(2024, 1, 1, 9, 0, tzinfo=UTC)
    counter = {"n": 0}

    def _create(
        party: Party,
        kind: str,
        amount: str | Decimal,
        on: date,
        status: str = "approved",
        created_at: datetime | None = None,
        **fields,
    ) -> MovementModel:
        counter["n"] += 1
        row = MovementModel(
            firm_id=party.firm_id,
            party_id=party.id,
            kind=kind,
            amount=Decimal(str(amount)),
            status=status,
            transaction_date=on,
            created_at=created_at or base + timedelta(seconds=counter["n"]),
            created_by_id=TEST_ACTOR_ID,
            **fields,
        )
        session.add(row)
        session.flush()
        return row

    return _create


# =============================================================================
# DTO fixtures and in-memory store
# =============================================================================


@pytest.fixture
def firm_id() -> UUID:
    return uuid4()


@pytest.fixture
def party_info(firm_id) -> PartyInfo:
    return PartyInfo(
        id=uuid4(),
        firm_id=firm_id,
        name="Acme Retail",
        party_type="customer",
        opening_balance=Decimal("1000"),
    )


@pytest.fixture
def memory_store(party_info) -> InMemoryTransactionStore:
    store = InMemoryTransactionStore()
    store.add_party(party_info)
    return store


@pytest.fixture
def make_movement(party_info) -> Callable[..., Movement]:
    """Build Movement DTOs for ``party_info`` with increasing created_at."""
    base = datetime(2024, 1, 1, 9, 0, tzinfo=UTC)
    counter = {"n": 0}

    def _make(kind: str, amount: str, on: date, **fields) -> Movement:
        counter["n"] += 1
        fields.setdefault("created_at", base + timedelta(seconds=counter["n"]))
        fields.setdefault("firm_id", party_info.firm_id)
        fields.setdefault("party_id", party_info.id)
        return Movement(
            id=fields.pop("id", uuid4()),
            kind=kind,
            amount=Decimal(amount),
            transaction_date=on,
            **fields,
        )

    return _make


@pytest.fixture
def opening_movement(make_movement) -> Callable[..., Movement]:
    def _make(amount: str, on: date) -> Movement:
        return make_movement(OPENING_BALANCE, amount, on)

    return _make


# =============================================================================
# Clock
# =============================================================================


@pytest.fixture
def clock() -> DeterministicClock:
    return DeterministicClock(datetime(2024, 1, 31, 12, 0, tzinfo=UTC))

"""
Statement -- Request and result value objects for party statements.

Responsibility:
    Frozen dataclasses that flow through the statement pipeline:
    ``StatementRequest`` (validated input), ``OpeningBalance`` (resolver
    output), ``LedgerEntry`` (one statement row), ``StatementSummary`` and
    ``Statement`` (the result handed to rendering/export).  Also the pure
    default-range rule and the plain-dict rendering used by exporters.

Architecture position:
    Kernel > Domain -- pure data definitions with ZERO I/O.

Invariants enforced:
    - StatementRequest rejects date_from > date_to at construction, before
      any I/O is possible (InvalidDateRangeError).
    - All monetary fields are Decimal.
    - Results are rebuilt per request and never cached.
"""

from __future__ import annotations

import dataclasses
from dataclasses import dataclass
from datetime import date, datetime
from decimal import Decimal
from enum import Enum
from uuid import UUID

from ledger_kernel.domain.classification import OpeningBalanceSource
from ledger_kernel.domain.movement import OPENING_BALANCE, PartyInfo
from ledger_kernel.exceptions import InvalidDateRangeError

OPENING_ENTRY_ID = "opening-balance"


def _as_date(value: date) -> date:
    if isinstance(value, datetime):
        return value.date()
    if not isinstance(value, date):
        raise TypeError(f"Expected a date, got {type(value).__name__}")
    return value


@dataclass(frozen=True)
class StatementRequest:
    """
    Validated statement input.

    Firm and party are explicit parameters; nothing is read from ambient
    selection state.

    Raises:
        InvalidDateRangeError: If date_from is after date_to.
        TypeError: If either bound is not a date.
    """

    firm_id: UUID
    party_id: UUID
    date_from: date
    date_to: date

    def __post_init__(self) -> None:
        object.__setattr__(self, "date_from", _as_date(self.date_from))
        object.__setattr__(self, "date_to", _as_date(self.date_to))
        if self.date_from > self.date_to:
            raise InvalidDateRangeError(self.date_from, self.date_to)

    def with_range(self, date_from: date, date_to: date) -> StatementRequest:
        """Same party, new date range (validated)."""
        return StatementRequest(self.firm_id, self.party_id, date_from, date_to)


@dataclass(frozen=True)
class OpeningBalance:
    """Balance anchoring a statement at the start of its window."""

    amount: Decimal
    anchor_date: date
    source: OpeningBalanceSource
    base_amount: Decimal
    carried_forward: Decimal


@dataclass(frozen=True)
class LedgerEntry:
    """
    One statement row.

    Exactly one of debit/credit is non-zero, except the synthetic opening
    entry which carries only a balance.
    """

    id: str
    date: date
    description: str
    debit: Decimal
    credit: Decimal
    balance: Decimal
    kind: str
    reference: str | None = None
    payment_method: str | None = None

    @property
    def is_opening(self) -> bool:
        return self.kind == OPENING_BALANCE and self.id == OPENING_ENTRY_ID


@dataclass(frozen=True)
class StatementSummary:
    """
    Summary totals of a statement.

    entry_count counts every entry including the opening entry.
    """

    opening_balance: Decimal
    closing_balance: Decimal
    total_debit: Decimal
    total_credit: Decimal
    entry_count: int
    date_from: date
    date_to: date

    @property
    def movement_count(self) -> int:
        return self.entry_count - 1


@dataclass(frozen=True)
class Statement:
    """
    A computed party statement: the sole contract exposed to rendering.

    Carries no formatting, currency symbol or locale decisions.
    """

    party: PartyInfo
    entries: tuple[LedgerEntry, ...]
    summary: StatementSummary
    opening: OpeningBalance

    @property
    def date_from(self) -> date:
        return self.summary.date_from

    @property
    def date_to(self) -> date:
        return self.summary.date_to

    def to_dict(self) -> dict:
        """Plain, JSON-ready structure for exporters."""
        return render_to_dict(self)


def resolve_default_range(earliest: date | None, today: date) -> tuple[date, date]:
    """
    Default statement window for a freshly opened party.

    ``[earliest, today]`` when the party has history on or before today,
    otherwise ``[today, today]``.
    """
    if earliest is None or earliest > today:
        return today, today
    return earliest, today


def render_to_dict(obj: object) -> dict | list | str | int | float | bool | None:
    """
    Convert any statement dataclass to a plain dict for JSON serialization.

    Handles:
    - Decimal -> str (preserving precision)
    - UUID -> str
    - date -> ISO format string
    - Enum -> .value
    - Nested frozen dataclasses -> nested dicts
    - Tuples -> lists
    - None preserved
    """
    if obj is None:
        return None
    if isinstance(obj, Decimal):
        return str(obj)
    if isinstance(obj, UUID):
        return str(obj)
    if isinstance(obj, date):
        return obj.isoformat()
    if isinstance(obj, Enum):
        return obj.value
    if isinstance(obj, (list, tuple)):
        return [render_to_dict(item) for item in obj]
    if isinstance(obj, dict):
        return {str(k): render_to_dict(v) for k, v in obj.items()}
    if dataclasses.is_dataclass(obj) and not isinstance(obj, type):
        return {
            f.name: render_to_dict(getattr(obj, f.name))
            for f in dataclasses.fields(obj)
        }
    if isinstance(obj, (str, int, float, bool)):
        return obj
    return str(obj)

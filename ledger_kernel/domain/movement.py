"""
Movement -- Immutable transaction records as seen by the statement engine.

Responsibility:
    Defines the closed schema the statement pipeline works on: ``Movement``
    (one raw transaction) and ``PartyInfo`` (the trading partner).  Both are
    frozen DTOs built by selectors from ORM rows, or directly by tests.

Architecture position:
    Kernel > Domain -- pure functional core, zero I/O.

Invariants enforced:
    - amount is a Decimal (float rejected with TypeError) and strictly
      positive (InvalidMovementAmountError).  The sign of a movement comes
      from its kind, never from the amount.
    - transaction_date is a ``date`` -- a ``datetime`` is truncated to its
      calendar date.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime
from decimal import Decimal
from enum import Enum
from uuid import UUID

from ledger_kernel.db.types import ZERO, to_money
from ledger_kernel.exceptions import InvalidMovementAmountError


class MovementStatus(str, Enum):
    """Approval status of a raw movement."""

    PENDING = "pending"
    APPROVED = "approved"
    REJECTED = "rejected"


# Kinds known to the surrounding system.  The set is open: any other string
# may appear in the store and must be classified explicitly.
SALE = "sale"
COLLECTION = "collection"
PAYMENT = "payment"
OPENING_BALANCE = "opening_balance"


@dataclass(frozen=True)
class Movement:
    """
    A raw transaction between a firm and one of its parties.

    Contract:
        Built from a store row.  Only approved movements of real financial
        kinds reach the accumulator; the opening-balance pseudo-kind is
        consumed by the opening-balance resolver.

    Guarantees:
        - amount is a positive Decimal.
        - transaction_date is a calendar date.
        - created_at (when known) is the first tie-break after the date.
    """

    id: UUID
    firm_id: UUID
    party_id: UUID
    kind: str
    amount: Decimal
    transaction_date: date
    status: MovementStatus = MovementStatus.APPROVED
    bill_number: str | None = None
    payment_method: str | None = None
    reference_number: str | None = None
    notes: str | None = None
    created_at: datetime | None = None

    def __post_init__(self) -> None:
        object.__setattr__(self, "amount", to_money(self.amount))
        if self.amount <= ZERO:
            raise InvalidMovementAmountError(str(self.id), str(self.amount))

        if isinstance(self.transaction_date, datetime):
            object.__setattr__(
                self, "transaction_date", self.transaction_date.date()
            )

        if not isinstance(self.status, MovementStatus):
            object.__setattr__(self, "status", MovementStatus(self.status))

    @property
    def is_approved(self) -> bool:
        return self.status == MovementStatus.APPROVED

    @property
    def sort_key(self) -> tuple:
        """Deterministic statement order: date, creation time, id."""
        created = self.created_at.isoformat() if self.created_at else ""
        return (self.transaction_date, created, str(self.id))


@dataclass(frozen=True)
class PartyInfo:
    """
    Immutable DTO for the trading partner a statement is built for.

    opening_balance is the stored, signed field; None means no stored value.
    """

    id: UUID
    firm_id: UUID
    name: str
    party_type: str
    opening_balance: Decimal | None = None
    contact_person: str | None = None
    phone: str | None = None
    email: str | None = None
    address: str | None = None

    def __post_init__(self) -> None:
        if self.opening_balance is not None:
            object.__setattr__(
                self, "opening_balance", to_money(self.opening_balance)
            )

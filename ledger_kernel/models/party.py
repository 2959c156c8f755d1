"""
Module: ledger_kernel.models.party
Responsibility: ORM persistence for trading parties (customers, suppliers)
    scoped to a firm.  Party rows are the identity anchor for statements and
    carry the stored opening balance, one of the two opening-balance sources.
Architecture position: Kernel > Models.  May import from db/base.py only.
    MUST NOT import from services/, selectors/, domain/, or outer layers.

Invariants enforced:
    - A party belongs to exactly one firm (firm_id NOT NULL, FK).
    - opening_balance is signed and nullable; absent means zero.

Failure modes:
    - IntegrityError on a missing firm_id or unknown firm.

Audit relevance:
    Party is the counterparty identity for every movement.  Movements
    reference parties; parties never own movement state.
"""

from decimal import Decimal
from enum import Enum
from uuid import UUID

from sqlalchemy import Boolean, ForeignKey, Index, String
from sqlalchemy.orm import Mapped, mapped_column

from ledger_kernel.db.base import TrackedBase, UUIDString


class PartyType(str, Enum):
    """Classification of trading parties."""

    CUSTOMER = "customer"
    SUPPLIER = "supplier"


class Party(TrackedBase):
    """
    Trading partner of a firm.

    Contract:
        Each Party belongs to one firm and is referenced, never owned, by
        movements.  The stored opening_balance is a signed amount that
        the opening-balance resolver may use as its base.

    Non-goals:
        - This model does NOT hold a running balance; balances are always
          derived from movements at statement time.
    """

    __tablename__ = "parties"

    __table_args__ = (
        Index("idx_party_firm", "firm_id"),
        Index("idx_party_active", "is_active"),
    )

    firm_id: Mapped[UUID] = mapped_column(
        UUIDString(),
        ForeignKey("firms.id", ondelete="CASCADE"),
        nullable=False,
    )

    name: Mapped[str] = mapped_column(
        String(255),
        nullable=False,
    )

    # customer | supplier (PartyType values)
    party_type: Mapped[str] = mapped_column(
        String(20),
        nullable=False,
        default=PartyType.CUSTOMER.value,
    )

    contact_person: Mapped[str | None] = mapped_column(
        String(255),
        nullable=True,
    )

    phone: Mapped[str | None] = mapped_column(
        String(50),
        nullable=True,
    )

    email: Mapped[str | None] = mapped_column(
        String(255),
        nullable=True,
    )

    address: Mapped[str | None] = mapped_column(
        String(1000),
        nullable=True,
    )

    is_active: Mapped[bool] = mapped_column(
        Boolean,
        nullable=False,
        default=True,
    )

    # Signed balance carried in from before the first recorded movement
    opening_balance: Mapped[Decimal | None] = mapped_column(
        nullable=True,
    )

    def __repr__(self) -> str:
        return f"<Party {self.name} ({self.party_type})>"

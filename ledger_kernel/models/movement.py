"""
Module: ledger_kernel.models.movement
Responsibility: ORM persistence for raw party transactions (sales,
    collections, payments and the synthetic opening-balance movement).
    Movements are created, approved and rejected by the surrounding CRUD
    system; the kernel only reads them.
Architecture position: Kernel > Models.  May import from db/base.py only.
    MUST NOT import from services/, selectors/, domain/, or outer layers.

Invariants enforced:
    - amount is a positive magnitude (ck_movement_amount_positive); its sign
      meaning comes from the kind classification, never from the column.
    - transaction_date is a calendar date (no time of day).
    - status is one of pending / approved / rejected (ck_movement_status).

Failure modes:
    - IntegrityError on a non-positive amount or an unknown status.

Audit relevance:
    The statement is a pure function of the approved rows in this table
    plus the party's stored opening balance.  Indexes cover the statement
    query path (firm, party, status, transaction_date).
"""

from datetime import date
from decimal import Decimal
from uuid import UUID

from sqlalchemy import CheckConstraint, ForeignKey, Index, String
from sqlalchemy.orm import Mapped, mapped_column

from ledger_kernel.db.base import TrackedBase, UUIDString


class MovementModel(TrackedBase):
    """
    A single transaction between a firm and one of its parties.

    Contract:
        kind is an open string set (sale, collection, payment,
        opening_balance, ...).  Statement code must classify every kind it
        encounters explicitly; the model does not restrict kinds so that
        new kinds surface as classification failures instead of being
        silently dropped.

    Non-goals:
        - Does NOT store running balances or ledger entries.
        - Does NOT enforce approval workflow transitions.
    """

    __tablename__ = "movements"

    __table_args__ = (
        CheckConstraint("amount > 0", name="ck_movement_amount_positive"),
        CheckConstraint(
            "status IN ('pending', 'approved', 'rejected')",
            name="ck_movement_status",
        ),
        Index(
            "idx_movement_statement",
            "firm_id",
            "party_id",
            "status",
            "transaction_date",
        ),
        Index("idx_movement_kind", "kind"),
    )

    firm_id: Mapped[UUID] = mapped_column(
        UUIDString(),
        ForeignKey("firms.id", ondelete="CASCADE"),
        nullable=False,
    )

    party_id: Mapped[UUID] = mapped_column(
        UUIDString(),
        ForeignKey("parties.id", ondelete="CASCADE"),
        nullable=False,
    )

    kind: Mapped[str] = mapped_column(
        String(30),
        nullable=False,
    )

    amount: Mapped[Decimal] = mapped_column(
        nullable=False,
    )

    status: Mapped[str] = mapped_column(
        String(20),
        nullable=False,
        default="pending",
    )

    transaction_date: Mapped[date] = mapped_column(
        nullable=False,
    )

    bill_number: Mapped[str | None] = mapped_column(
        String(100),
        nullable=True,
    )

    # cash, upi, cheque, bank_transfer, goods_return
    payment_method: Mapped[str | None] = mapped_column(
        String(30),
        nullable=True,
    )

    reference_number: Mapped[str | None] = mapped_column(
        String(100),
        nullable=True,
    )

    notes: Mapped[str | None] = mapped_column(
        String(4000),
        nullable=True,
    )

    approved_by_id: Mapped[UUID | None] = mapped_column(
        UUIDString(),
        nullable=True,
    )

    def __repr__(self) -> str:
        return (
            f"<Movement {self.kind} {self.amount} on "
            f"{self.transaction_date} ({self.status})>"
        )

"""
Module: ledger_kernel.models.firm
Responsibility: ORM persistence for firms, the tenant boundary that owns
    parties and movements.
Architecture position: Kernel > Models.  May import from db/base.py only.
"""

from sqlalchemy import String, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column

from ledger_kernel.db.base import TrackedBase


class Firm(TrackedBase):
    """A business whose trading parties are tracked."""

    __tablename__ = "firms"

    __table_args__ = (
        UniqueConstraint("name", name="uq_firm_name"),
    )

    name: Mapped[str] = mapped_column(
        String(255),
        nullable=False,
    )

    def __repr__(self) -> str:
        return f"<Firm {self.name}>"

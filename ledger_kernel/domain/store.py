"""TransactionStore -- Read interface the statement pipeline consumes.

The backing store (relational, remote API, in-memory) is an external
collaborator.  SqlTransactionStore (ledger_kernel.selectors.store) is the
SQLAlchemy implementation; tests use in-memory fakes.

Implementations report backing-store failures as DataAccessError and never
raise for "no data".
"""

from __future__ import annotations

from datetime import date
from typing import Protocol, runtime_checkable
from uuid import UUID

from ledger_kernel.domain.movement import Movement, PartyInfo


@runtime_checkable
class TransactionStore(Protocol):
    """Protocol for reading parties and their movements."""

    def get_party(self, firm_id: UUID, party_id: UUID) -> PartyInfo | None:
        """Return the party, or None when it does not exist in the firm."""
        ...

    def find_opening_movement(
        self, firm_id: UUID, party_id: UUID, opening_kind: str
    ) -> Movement | None:
        """Earliest approved opening-balance pseudo-movement, if any."""
        ...

    def list_approved_movements(
        self,
        firm_id: UUID,
        party_id: UUID,
        date_from: date | None,
        date_to: date | None,
        exclude_kind: str,
    ) -> list[Movement]:
        """Approved movements in the inclusive range (None = unbounded),
        excluding ``exclude_kind``, ordered by (date, created_at, id)."""
        ...

    def find_earliest_movement_date(
        self, firm_id: UUID, party_id: UUID
    ) -> date | None:
        """Date of the party's earliest approved movement of any kind."""
        ...

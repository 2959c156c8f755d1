"""
TransactionSelector -- Movements that enter a statement window.

Responsibility:
    Fetches the approved, real (non opening-balance) movements of one party
    dated inside the inclusive window, in deterministic chronological
    order.

Architecture position:
    Kernel > Services -- thin policy layer over the TransactionStore.

Invariants enforced:
    - CHRONOLOGICAL_ORDER: the result is sorted by (date, created_at, id)
      even when the store already orders it, so a store with a weaker
      ordering cannot make two identical requests diverge.
    - The range is validated before any store call.

Failure modes:
    - InvalidDateRangeError: date_from > date_to (no I/O performed).
    - DataAccessError: propagated from the store.  "No data" is an empty
      tuple, never an error.
"""

from __future__ import annotations

from datetime import date
from uuid import UUID

from ledger_kernel.domain.classification import MovementClassifier
from ledger_kernel.domain.movement import Movement, MovementStatus
from ledger_kernel.domain.store import TransactionStore
from ledger_kernel.exceptions import InvalidDateRangeError
from ledger_kernel.logging_config import get_logger

logger = get_logger("services.transaction_selector")


class TransactionSelector:
    """Selects the ordered movements of a statement window."""

    def __init__(
        self,
        store: TransactionStore,
        classifier: MovementClassifier | None = None,
    ):
        self._store = store
        self._classifier = classifier or MovementClassifier.default()

    def select(
        self,
        firm_id: UUID,
        party_id: UUID,
        date_from: date,
        date_to: date,
    ) -> tuple[Movement, ...]:
        if date_from > date_to:
            raise InvalidDateRangeError(date_from, date_to)

        rows = self._store.list_approved_movements(
            firm_id,
            party_id,
            date_from,
            date_to,
            self._classifier.opening_kind,
        )
        selected = tuple(
            sorted(
                (
                    m
                    for m in rows
                    if m.firm_id == firm_id
                    and m.party_id == party_id
                    and m.status == MovementStatus.APPROVED
                    and not self._classifier.is_opening(m.kind)
                    and date_from <= m.transaction_date <= date_to
                ),
                key=lambda m: m.sort_key,
            )
        )

        logger.debug(
            "movements_selected",
            extra={
                "date_from": date_from.isoformat(),
                "date_to": date_to.isoformat(),
                "movement_count": len(selected),
            },
        )
        return selected

"""
OpeningBalanceResolver -- Balance carried into a statement window.

Responsibility:
    Determines the balance that anchors a statement at ``date_from``: a
    base amount from the configured opening-balance source plus the net of
    every approved real movement dated before the window.

Architecture position:
    Kernel > Services -- reads through the TransactionStore protocol, pure
    arithmetic otherwise.

Invariants enforced:
    - Never fails for a party without history: no source yields
      ``(0, date_from)``.
    - Only a missing party fails (PartyNotFoundError).
    - The opening-balance pseudo-movement contributes to the base only; it
      is never folded as a real movement.  One dated after ``date_from``
      is ignored for that window.

Failure modes:
    - PartyNotFoundError: party does not exist in the firm.
    - DataAccessError: propagated from the store.
    - UnclassifiedMovementKindError: a movement before the window has a
      kind without a classification.
"""

from __future__ import annotations

from datetime import date, timedelta
from decimal import Decimal
from uuid import UUID

from ledger_kernel.db.types import ZERO
from ledger_kernel.domain.classification import (
    MovementClassifier,
    OpeningBalanceSource,
)
from ledger_kernel.domain.movement import PartyInfo
from ledger_kernel.domain.statement import OpeningBalance
from ledger_kernel.domain.store import TransactionStore
from ledger_kernel.exceptions import PartyNotFoundError
from ledger_kernel.logging_config import get_logger

logger = get_logger("services.opening_balance")


class OpeningBalanceResolver:
    """
    Resolves the opening balance of a party at a date.

    Contract:
        ``resolve(firm_id, party_id, date_from)`` returns an OpeningBalance
        whose ``amount == base_amount + carried_forward`` and whose
        ``anchor_date == date_from``.
    """

    def __init__(
        self,
        store: TransactionStore,
        classifier: MovementClassifier | None = None,
        source: OpeningBalanceSource = OpeningBalanceSource.MERGED,
    ):
        self._store = store
        self._classifier = classifier or MovementClassifier.default()
        self._source = OpeningBalanceSource(source)

    @property
    def source(self) -> OpeningBalanceSource:
        return self._source

    def get_party(self, firm_id: UUID, party_id: UUID) -> PartyInfo:
        party = self._store.get_party(firm_id, party_id)
        if party is None:
            raise PartyNotFoundError(str(party_id), str(firm_id))
        return party

    def _base_amount(
        self, firm_id: UUID, party: PartyInfo, date_from: date
    ) -> Decimal:
        if self._source == OpeningBalanceSource.PARTY_FIELD:
            return party.opening_balance or ZERO

        movement = self._store.find_opening_movement(
            firm_id, party.id, self._classifier.opening_kind
        )
        # an opening dated after the window start does not exist yet
        if movement is not None and movement.transaction_date <= date_from:
            return movement.amount
        if self._source == OpeningBalanceSource.OPENING_MOVEMENT:
            return ZERO
        return party.opening_balance or ZERO

    def resolve(
        self,
        firm_id: UUID,
        party_id: UUID,
        date_from: date,
        party: PartyInfo | None = None,
    ) -> OpeningBalance:
        """
        Opening balance of the party at the start of ``date_from``.

        Args:
            party: Already-loaded party, to avoid a second lookup.

        Raises:
            PartyNotFoundError: If the party does not exist in the firm.
        """
        if party is None:
            party = self.get_party(firm_id, party_id)

        base = self._base_amount(firm_id, party, date_from)

        if date_from == date.min:
            prior = []
        else:
            prior = self._store.list_approved_movements(
                firm_id,
                party_id,
                None,
                date_from - timedelta(days=1),
                self._classifier.opening_kind,
            )
        carried = self._classifier.net(prior)

        opening = OpeningBalance(
            amount=base + carried,
            anchor_date=date_from,
            source=self._source,
            base_amount=base,
            carried_forward=carried,
        )
        logger.debug(
            "opening_balance_resolved",
            extra={
                "source": self._source.value,
                "base_amount": str(base),
                "carried_forward": str(carried),
                "prior_movement_count": len(prior),
                "anchor_date": date_from.isoformat(),
            },
        )
        return opening

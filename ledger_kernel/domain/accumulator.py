"""
LedgerAccumulator -- Running-balance fold over selected movements.

Responsibility:
    Turns an opening balance and an ordered movement sequence into ledger
    rows: one synthetic opening entry followed by exactly one entry per
    movement, each carrying the balance after it.

Architecture position:
    Kernel > Domain -- pure functional core, zero I/O.

Invariants enforced:
    - OPENING_ENTRY_FIRST: the opening entry is emitted first, dated at the
      anchor date, with debit = credit = 0.
    - Strict left-to-right fold: no reordering, no skipped movements.
    - EXPLICIT_CLASSIFICATION: every kind goes through MovementClassifier;
      unknown kinds abort the fold.
    - DECIMAL_ONLY: balance arithmetic is Decimal throughout.

Failure modes:
    - UnclassifiedMovementKindError for a kind without a rule (including a
      stray opening-balance pseudo-movement).
"""

from __future__ import annotations

from datetime import date
from decimal import Decimal
from typing import Iterable

from ledger_kernel.db.types import ZERO, to_money
from ledger_kernel.domain.classification import MovementClassifier, MovementSide
from ledger_kernel.domain.movement import OPENING_BALANCE, Movement
from ledger_kernel.domain.statement import OPENING_ENTRY_ID, LedgerEntry
from ledger_kernel.exceptions import UnclassifiedMovementKindError
from ledger_kernel.logging_config import get_logger

logger = get_logger("domain.accumulator")


class LedgerAccumulator:
    """
    Folds movements into running-balance ledger entries.

    Contract:
        ``accumulate(opening_balance, anchor_date, movements)`` returns a
        tuple whose length is ``len(movements) + 1``.

    Guarantees:
        - entries[0] is the opening entry with balance == opening_balance.
        - entries[i].balance == entries[i-1].balance + debit - credit.
        - Deterministic: same inputs always produce equal entries.
    """

    def __init__(
        self,
        classifier: MovementClassifier | None = None,
        opening_label: str = "Opening Balance",
    ):
        self._classifier = classifier or MovementClassifier.default()
        self._opening_label = opening_label

    def opening_entry(self, opening_balance: Decimal, anchor_date: date) -> LedgerEntry:
        return LedgerEntry(
            id=OPENING_ENTRY_ID,
            date=anchor_date,
            description=self._opening_label,
            debit=ZERO,
            credit=ZERO,
            balance=opening_balance,
            kind=OPENING_BALANCE,
            reference="OB",
        )

    def entry_for(self, movement: Movement, previous_balance: Decimal) -> LedgerEntry:
        """Ledger entry for one movement given the balance before it."""
        if self._classifier.is_opening(movement.kind):
            raise UnclassifiedMovementKindError(movement.kind, str(movement.id))

        rule = self._classifier.classify(movement.kind, str(movement.id))
        if rule.side == MovementSide.DEBIT:
            debit, credit = movement.amount, ZERO
        else:
            debit, credit = ZERO, movement.amount

        return LedgerEntry(
            id=str(movement.id),
            date=movement.transaction_date,
            description=rule.describe(movement),
            debit=debit,
            credit=credit,
            balance=previous_balance + debit - credit,
            kind=movement.kind,
            reference=movement.bill_number or movement.reference_number,
            payment_method=movement.payment_method,
        )

    def accumulate(
        self,
        opening_balance: Decimal,
        anchor_date: date,
        movements: Iterable[Movement],
    ) -> tuple[LedgerEntry, ...]:
        opening_balance = to_money(opening_balance)
        entries = [self.opening_entry(opening_balance, anchor_date)]

        balance = opening_balance
        for movement in movements:
            entry = self.entry_for(movement, balance)
            balance = entry.balance
            entries.append(entry)

        logger.debug(
            "ledger_accumulated",
            extra={
                "entry_count": len(entries),
                "opening_balance": str(opening_balance),
                "closing_balance": str(balance),
            },
        )
        return tuple(entries)

"""
StatementAggregator -- Summary totals with the closing-balance cross-check.

Responsibility:
    Derives opening, total debit, total credit and closing balance from
    accumulated ledger entries, then re-derives the closing balance
    independently and refuses to return a summary that disagrees with the
    running balance.

Architecture position:
    Kernel > Domain -- pure functional core, zero I/O (logging only).

Invariants enforced:
    - CLOSING_BALANCE: closing == opening + total_debit - total_credit and
      closing == entries[-1].balance.
    - OPENING_ENTRY_FIRST: exactly one opening entry, at index 0.

Failure modes:
    - MalformedLedgerError when the opening entry is missing, misplaced or
      duplicated.
    - ClosingBalanceMismatchError when the cross-check fails.  Both are
      InvariantViolationError: programming defects, logged at ERROR with
      the full ledger, never swallowed.
"""

from __future__ import annotations

from datetime import date
from typing import Sequence

from ledger_kernel.db.types import ZERO
from ledger_kernel.domain.statement import (
    LedgerEntry,
    StatementSummary,
    render_to_dict,
)
from ledger_kernel.exceptions import (
    ClosingBalanceMismatchError,
    MalformedLedgerError,
)
from ledger_kernel.logging_config import get_logger

logger = get_logger("domain.aggregator")


class StatementAggregator:
    """
    Builds a StatementSummary from ledger entries.

    Contract:
        ``aggregate(entries, date_from, date_to)`` either returns a summary
        satisfying the closing-balance invariant or raises an
        InvariantViolationError.  When the range is omitted it is taken
        from the first and last entry dates.
    """

    def aggregate(
        self,
        entries: Sequence[LedgerEntry],
        date_from: date | None = None,
        date_to: date | None = None,
    ) -> StatementSummary:
        self._check_shape(entries)

        opening = entries[0].balance
        total_debit = ZERO
        total_credit = ZERO
        for entry in entries[1:]:
            total_debit += entry.debit
            total_credit += entry.credit

        running_closing = entries[-1].balance
        expected_closing = opening + total_debit - total_credit

        if expected_closing != running_closing:
            logger.error(
                "closing_balance_invariant_violated",
                extra={
                    "opening_balance": str(opening),
                    "total_debit": str(total_debit),
                    "total_credit": str(total_credit),
                    "expected_closing": str(expected_closing),
                    "running_closing": str(running_closing),
                    "entries": render_to_dict(tuple(entries)),
                },
            )
            raise ClosingBalanceMismatchError(
                opening_balance=str(opening),
                total_debit=str(total_debit),
                total_credit=str(total_credit),
                expected_closing=str(expected_closing),
                running_closing=str(running_closing),
            )

        return StatementSummary(
            opening_balance=opening,
            closing_balance=running_closing,
            total_debit=total_debit,
            total_credit=total_credit,
            entry_count=len(entries),
            date_from=date_from if date_from is not None else entries[0].date,
            date_to=date_to if date_to is not None else entries[-1].date,
        )

    def _check_shape(self, entries: Sequence[LedgerEntry]) -> None:
        if not entries:
            reason = "no entries"
        elif not entries[0].is_opening:
            reason = f"first entry {entries[0].id} is not the opening entry"
        else:
            extra = [e.id for e in entries[1:] if e.is_opening]
            if not extra:
                return
            reason = "opening entry appears more than once"

        logger.error(
            "ledger_shape_invariant_violated",
            extra={"reason": reason, "entries": render_to_dict(tuple(entries))},
        )
        raise MalformedLedgerError(reason)

"""
Kernel Invariants Contract.

These invariants are structural law for every computed statement.  No
configuration, opening-balance source or movement classification may
override them.

This module exists solely to declare these invariants explicitly. The
enforcement is distributed across the Movement DTO, TransactionSelector,
LedgerAccumulator, StatementAggregator and StatementRequestController.
"""

from enum import Enum, unique


@unique
class StatementInvariant(str, Enum):
    """Non-configurable invariants enforced by the kernel.

    Each value names one structural guarantee that the kernel provides
    unconditionally. Configuration may influence *how* movements are
    described or classified, but never *whether* these rules apply.
    """

    CLOSING_BALANCE = "closing_balance"
    """closing == opening + total_debit - total_credit, and the last entry's
    balance equals closing. Enforced by StatementAggregator."""

    OPENING_ENTRY_FIRST = "opening_entry_first"
    """Exactly one synthetic opening entry, always first. Enforced by
    LedgerAccumulator and re-checked by StatementAggregator."""

    CHRONOLOGICAL_ORDER = "chronological_order"
    """Movement entries are non-decreasing by date with a stable tie-break
    (created_at, id). Enforced by MovementSelector ordering."""

    DECIMAL_ONLY = "decimal_only"
    """Monetary values are Decimal, never float. Enforced at the Movement
    boundary and by Numeric(38, 9) columns."""

    EXPLICIT_CLASSIFICATION = "explicit_classification"
    """Every movement kind maps to exactly one side (debit or credit); an
    unknown kind fails the request instead of being skipped. Enforced by
    MovementClassifier."""

    LATEST_REQUEST_WINS = "latest_request_wins"
    """Only the most recently issued statement request may update the
    presented state. Enforced by StatementRequestController."""


# All invariants as a frozenset for programmatic checks.
ALL_STATEMENT_INVARIANTS: frozenset[StatementInvariant] = frozenset(StatementInvariant)

# The kernel package may not import from these packages.
# This is enforced by tests/architecture/test_kernel_boundary.py.
FORBIDDEN_KERNEL_IMPORTS: tuple[str, ...] = (
    "ledger_config",
    "scripts",
)

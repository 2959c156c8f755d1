"""Read-only query selectors and the SQL-backed TransactionStore."""

from ledger_kernel.selectors.base import BaseSelector
from ledger_kernel.selectors.movement_selector import MovementSelector
from ledger_kernel.selectors.party_selector import PartySelector
from ledger_kernel.selectors.store import SqlTransactionStore

__all__ = [
    "BaseSelector",
    "MovementSelector",
    "PartySelector",
    "SqlTransactionStore",
]

"""Pure statement domain: value objects, classification, fold and aggregation."""

from ledger_kernel.domain.accumulator import LedgerAccumulator
from ledger_kernel.domain.aggregator import StatementAggregator
from ledger_kernel.domain.cancellation import CancellationToken
from ledger_kernel.domain.classification import (
    KindRule,
    MovementClassifier,
    MovementSide,
    OpeningBalanceSource,
)
from ledger_kernel.domain.clock import Clock, DeterministicClock, SystemClock
from ledger_kernel.domain.movement import Movement, MovementStatus, PartyInfo
from ledger_kernel.domain.statement import (
    LedgerEntry,
    OpeningBalance,
    Statement,
    StatementRequest,
    StatementSummary,
    resolve_default_range,
)
from ledger_kernel.domain.store import TransactionStore

__all__ = [
    "CancellationToken",
    "Clock",
    "DeterministicClock",
    "KindRule",
    "LedgerAccumulator",
    "LedgerEntry",
    "Movement",
    "MovementClassifier",
    "MovementSide",
    "MovementStatus",
    "OpeningBalance",
    "OpeningBalanceSource",
    "PartyInfo",
    "Statement",
    "StatementAggregator",
    "StatementRequest",
    "StatementSummary",
    "SystemClock",
    "TransactionStore",
    "resolve_default_range",
]

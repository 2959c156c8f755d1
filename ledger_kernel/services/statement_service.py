"""
StatementService -- The synchronous statement pipeline.

Responsibility:
    Runs OpeningBalanceResolver -> TransactionSelector -> LedgerAccumulator
    -> StatementAggregator for one StatementRequest and returns a fresh
    Statement.  All-or-nothing: any stage failure aborts the request and
    no partial statement is ever returned.

Architecture position:
    Kernel > Services -- composes the domain fold/aggregation with the
    store-backed resolver and selector.  Knows nothing about sessions
    beyond the ``from_session`` convenience constructor.

Invariants enforced:
    - Validation happens before I/O: a StatementRequest cannot exist with
      date_from > date_to.
    - Determinism: the same request over unchanged data yields an equal
      Statement.
    - No caching: every call recomputes from the store.

Failure modes:
    - PartyNotFoundError, DataAccessError, UnclassifiedMovementKindError,
      InvariantViolationError: propagated unchanged.
    - StatementCancelledError: the cancellation token was set between
      stages.

Usage:
    from ledger_kernel.services.statement_service import StatementService

    with read_only_session_scope() as session:
        service = StatementService.from_session(session)
        statement = service.compute(
            StatementRequest(firm_id, party_id, date(2024, 1, 1), date(2024, 3, 31))
        )
"""

from __future__ import annotations

import time

from sqlalchemy.orm import Session

from ledger_kernel.domain.accumulator import LedgerAccumulator
from ledger_kernel.domain.aggregator import StatementAggregator
from ledger_kernel.domain.cancellation import CancellationToken
from ledger_kernel.domain.classification import (
    MovementClassifier,
    OpeningBalanceSource,
)
from ledger_kernel.domain.statement import Statement, StatementRequest
from ledger_kernel.domain.store import TransactionStore
from ledger_kernel.logging_config import LogContext, get_logger
from ledger_kernel.selectors.store import SqlTransactionStore
from ledger_kernel.services.opening_balance import OpeningBalanceResolver
from ledger_kernel.services.transaction_selector import TransactionSelector

logger = get_logger("services.statement")


class StatementService:
    """
    Computes party statements.

    Contract:
        ``compute(request)`` returns a Statement whose summary satisfies
        closing == opening + total_debit - total_credit, or raises.

    Non-goals:
        - Does NOT resolve default date ranges (StatementRequestController).
        - Does NOT format or render the statement.
    """

    def __init__(
        self,
        store: TransactionStore,
        classifier: MovementClassifier | None = None,
        source: OpeningBalanceSource = OpeningBalanceSource.MERGED,
        opening_label: str = "Opening Balance",
    ):
        classifier = classifier or MovementClassifier.default()
        self._store = store
        self._resolver = OpeningBalanceResolver(store, classifier, source)
        self._selector = TransactionSelector(store, classifier)
        self._accumulator = LedgerAccumulator(classifier, opening_label)
        self._aggregator = StatementAggregator()

    @classmethod
    def from_session(
        cls,
        session: Session,
        classifier: MovementClassifier | None = None,
        source: OpeningBalanceSource = OpeningBalanceSource.MERGED,
        opening_label: str = "Opening Balance",
    ) -> StatementService:
        """Service reading through a SqlTransactionStore on ``session``."""
        return cls(SqlTransactionStore(session), classifier, source, opening_label)

    @property
    def store(self) -> TransactionStore:
        return self._store

    def compute(
        self,
        request: StatementRequest,
        cancel: CancellationToken | None = None,
    ) -> Statement:
        """
        Compute the statement for ``request``.

        Args:
            request: Validated firm/party/date range.
            cancel: Optional token checked between pipeline stages.

        Raises:
            StatementCancelledError: If ``cancel`` is set between stages.
        """
        cancel = cancel or CancellationToken()
        started = time.monotonic()

        with LogContext.bind(firm_id=request.firm_id, party_id=request.party_id):
            cancel.raise_if_cancelled("opening_balance")
            party = self._resolver.get_party(request.firm_id, request.party_id)
            opening = self._resolver.resolve(
                request.firm_id, request.party_id, request.date_from, party=party
            )

            cancel.raise_if_cancelled("selection")
            movements = self._selector.select(
                request.firm_id,
                request.party_id,
                request.date_from,
                request.date_to,
            )

            cancel.raise_if_cancelled("accumulation")
            entries = self._accumulator.accumulate(
                opening.amount, opening.anchor_date, movements
            )
            summary = self._aggregator.aggregate(
                entries, request.date_from, request.date_to
            )

            logger.info(
                "statement_computed",
                extra={
                    "date_from": request.date_from.isoformat(),
                    "date_to": request.date_to.isoformat(),
                    "entry_count": summary.entry_count,
                    "opening_balance": str(summary.opening_balance),
                    "closing_balance": str(summary.closing_balance),
                    "opening_source": opening.source.value,
                    "duration_ms": round((time.monotonic() - started) * 1000, 2),
                },
            )

        return Statement(
            party=party,
            entries=entries,
            summary=summary,
            opening=opening,
        )

"""
StatementRequestController -- Keeps the presented statement consistent with
the latest user input.

Responsibility:
    Owns the (firm, party, date range) inputs of one statement view,
    triggers recomputation when they change and guarantees that only the
    result of the most recently issued request is ever presented.

Architecture position:
    Kernel > Services -- asyncio boundary around the synchronous
    StatementService.  I/O is delegated to a StatementLoader;
    SessionStatementLoader runs the pipeline in a worker thread with a
    fresh read-only session per request.

State machine:
    IDLE --open()--> LOADING --success--> READY
                             --failure--> FAILED
    READY / FAILED --change_date_range()--> LOADING

Invariants enforced:
    - LATEST_REQUEST_WINS: every transition into LOADING gets a strictly
      increasing sequence number.  An outcome (success or failure) whose
      number is not the latest issued is discarded on arrival.
    - An invalid date range fails before any I/O and supersedes every
      in-flight request.
    - FAILED keeps the previous READY statement as ``last_ready`` for
      display fallback; ``statement`` is only ever the current result.

Failure modes:
    - Component errors are captured in the view (state FAILED, ``error``),
      never raised out of the load task.
    - InvalidDateRangeError is raised by change_date_range() itself.
    - RuntimeError when a range is changed before a party is opened.
"""

from __future__ import annotations

import asyncio
from collections.abc import Callable
from dataclasses import dataclass, replace
from datetime import date
from enum import Enum
from typing import Protocol
from uuid import UUID

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session, sessionmaker

from ledger_kernel.db.engine import read_only_session_scope
from ledger_kernel.domain.cancellation import CancellationToken
from ledger_kernel.domain.classification import (
    MovementClassifier,
    OpeningBalanceSource,
)
from ledger_kernel.domain.clock import Clock, SystemClock
from ledger_kernel.domain.statement import (
    Statement,
    StatementRequest,
    resolve_default_range,
)
from ledger_kernel.exceptions import (
    DataAccessError,
    InvalidDateRangeError,
    InvariantViolationError,
    StatementCancelledError,
)
from ledger_kernel.logging_config import LogContext, get_logger
from ledger_kernel.selectors.store import SqlTransactionStore
from ledger_kernel.services.statement_service import StatementService

logger = get_logger("services.statement_controller")


class StatementState(str, Enum):
    IDLE = "idle"
    LOADING = "loading"
    READY = "ready"
    FAILED = "failed"


@dataclass(frozen=True)
class StatementView:
    """
    What the caller should present right now.

    ``request`` is None while a freshly opened party's default range is
    still being resolved.
    """

    state: StatementState
    seq: int = 0
    request: StatementRequest | None = None
    statement: Statement | None = None
    error: BaseException | None = None
    last_ready: Statement | None = None

    @property
    def date_from(self) -> date | None:
        return self.request.date_from if self.request else None

    @property
    def date_to(self) -> date | None:
        return self.request.date_to if self.request else None


class StatementLoader(Protocol):
    """Asynchronous I/O boundary used by the controller."""

    async def earliest_movement_date(
        self, firm_id: UUID, party_id: UUID
    ) -> date | None: ...

    async def load(
        self, request: StatementRequest, cancel: CancellationToken
    ) -> Statement: ...


class SessionStatementLoader:
    """
    StatementLoader over a SQLAlchemy session factory.

    Each call runs in a worker thread inside its own
    read_only_session_scope(), so one statement reads one snapshot where
    the database supports it.
    """

    def __init__(
        self,
        session_factory: sessionmaker[Session] | None = None,
        classifier: MovementClassifier | None = None,
        source: OpeningBalanceSource = OpeningBalanceSource.MERGED,
        opening_label: str = "Opening Balance",
    ):
        self._session_factory = session_factory
        self._classifier = classifier or MovementClassifier.default()
        self._source = source
        self._opening_label = opening_label

    def _earliest(self, firm_id: UUID, party_id: UUID) -> date | None:
        try:
            with read_only_session_scope(self._session_factory) as session:
                store = SqlTransactionStore(session)
                return store.find_earliest_movement_date(firm_id, party_id)
        except SQLAlchemyError as exc:
            raise DataAccessError("read_only_session", str(exc)) from exc

    def _load(self, request: StatementRequest, cancel: CancellationToken) -> Statement:
        try:
            with read_only_session_scope(self._session_factory) as session:
                service = StatementService.from_session(
                    session, self._classifier, self._source, self._opening_label
                )
                return service.compute(request, cancel)
        except SQLAlchemyError as exc:
            raise DataAccessError("read_only_session", str(exc)) from exc

    async def earliest_movement_date(
        self, firm_id: UUID, party_id: UUID
    ) -> date | None:
        return await asyncio.to_thread(self._earliest, firm_id, party_id)

    async def load(
        self, request: StatementRequest, cancel: CancellationToken
    ) -> Statement:
        return await asyncio.to_thread(self._load, request, cancel)


class StatementRequestController:
    """
    Request sequencing for one statement view.

    Contract:
        ``open()`` and ``change_date_range()`` issue a new request and
        return the asyncio.Task computing it.  The task resolves to the
        view it published, or None when its outcome was discarded.
        ``view`` always reflects the latest issued request.

    Non-goals:
        - Does NOT retry failed requests; the caller re-issues the range.
        - Does NOT cache statements between requests.
    """

    def __init__(
        self,
        loader: StatementLoader,
        clock: Clock | None = None,
        on_change: Callable[[StatementView], None] | None = None,
    ):
        self._loader = loader
        self._clock = clock or SystemClock()
        self._on_change = on_change
        self._seq = 0
        self._firm_id: UUID | None = None
        self._party_id: UUID | None = None
        self._view = StatementView(state=StatementState.IDLE)
        self._last_ready: Statement | None = None
        self._tokens: dict[int, CancellationToken] = {}
        self._tasks: set[asyncio.Task] = set()
        self._latest_task: asyncio.Task | None = None

    @property
    def view(self) -> StatementView:
        return self._view

    @property
    def state(self) -> StatementState:
        return self._view.state

    @property
    def latest_seq(self) -> int:
        return self._seq

    def open(
        self,
        firm_id: UUID,
        party_id: UUID,
        date_from: date | None = None,
        date_to: date | None = None,
    ) -> asyncio.Task:
        """
        Open a party.

        Without an explicit range the default is ``[earliest movement date,
        today]``, or ``[today, today]`` for a party without history.

        Raises:
            ValueError: If only one bound of the range is given.
            InvalidDateRangeError: As for change_date_range().
        """
        if (date_from is None) != (date_to is None):
            raise ValueError("Give both date_from and date_to, or neither")
        if (firm_id, party_id) != (self._firm_id, self._party_id):
            self._last_ready = None
        self._firm_id = firm_id
        self._party_id = party_id
        if date_from is not None:
            return self.change_date_range(date_from, date_to)

        seq = self._issue()
        self._publish(
            StatementView(
                state=StatementState.LOADING,
                seq=seq,
                last_ready=self._last_ready,
            )
        )
        return self._spawn(seq, self._run_open(seq, firm_id, party_id))

    def change_date_range(self, date_from: date, date_to: date) -> asyncio.Task:
        """
        Recompute the open party's statement for a new range.

        Raises:
            RuntimeError: If no party has been opened.
            InvalidDateRangeError: If date_from > date_to.  The controller
                moves to FAILED without performing any I/O.
        """
        if self._firm_id is None or self._party_id is None:
            raise RuntimeError("No party is open. Call open() first.")

        seq = self._issue()
        try:
            request = StatementRequest(
                self._firm_id, self._party_id, date_from, date_to
            )
        except InvalidDateRangeError as exc:
            self._latest_task = None
            logger.info(
                "statement_request_rejected",
                extra={"seq": seq, "error_code": exc.code},
            )
            self._publish(
                StatementView(
                    state=StatementState.FAILED,
                    seq=seq,
                    error=exc,
                    last_ready=self._last_ready,
                )
            )
            raise

        self._publish(
            StatementView(
                state=StatementState.LOADING,
                seq=seq,
                request=request,
                last_ready=self._last_ready,
            )
        )
        return self._spawn(seq, self._run_load(seq, request))

    async def settle(self) -> StatementView:
        """Wait until the latest issued request has resolved."""
        while True:
            task = self._latest_task
            if task is None:
                return self._view
            await asyncio.wait({task})
            if task is self._latest_task:
                return self._view

    async def close(self) -> None:
        """Cancel all in-flight work and return to IDLE."""
        self._issue()
        tasks = list(self._tasks)
        for task in tasks:
            task.cancel()
        if tasks:
            await asyncio.wait(tasks)
        self._firm_id = None
        self._party_id = None
        self._latest_task = None
        self._publish(
            StatementView(
                state=StatementState.IDLE,
                seq=self._seq,
                last_ready=self._last_ready,
            )
        )

    # -- internals ---------------------------------------------------------

    def _issue(self) -> int:
        """Next sequence number; cancels every superseded request."""
        for token in self._tokens.values():
            token.cancel()
        self._seq += 1
        return self._seq

    def _spawn(self, seq, coro) -> asyncio.Task:
        token = CancellationToken()
        self._tokens[seq] = token
        task = asyncio.get_running_loop().create_task(coro)
        self._tasks.add(task)
        self._latest_task = task

        def _done(t: asyncio.Task) -> None:
            self._tasks.discard(t)
            self._tokens.pop(seq, None)

        task.add_done_callback(_done)
        logger.info("statement_request_issued", extra={"seq": seq})
        return task

    def _is_latest(self, seq: int) -> bool:
        return seq == self._seq

    def _publish(self, view: StatementView) -> None:
        self._view = view
        if self._on_change is not None:
            self._on_change(view)

    def _discard(self, seq: int, outcome: str) -> None:
        logger.info(
            "statement_result_discarded",
            extra={"seq": seq, "latest_seq": self._seq, "outcome": outcome},
        )

    async def _run_open(
        self, seq: int, firm_id: UUID, party_id: UUID
    ) -> StatementView | None:
        with LogContext.bind(firm_id=firm_id, party_id=party_id, request_seq=seq):
            try:
                earliest = await self._loader.earliest_movement_date(firm_id, party_id)
            except Exception as exc:
                return self._fail(seq, exc)

            if not self._is_latest(seq):
                self._discard(seq, "default_range")
                return None

            date_from, date_to = resolve_default_range(earliest, self._clock.today())
            request = StatementRequest(firm_id, party_id, date_from, date_to)
            self._publish(replace(self._view, request=request))

        return await self._run_load(seq, request)

    async def _run_load(
        self, seq: int, request: StatementRequest
    ) -> StatementView | None:
        token = self._tokens.get(seq) or CancellationToken()
        with LogContext.bind(
            firm_id=request.firm_id, party_id=request.party_id, request_seq=seq
        ):
            try:
                statement = await self._loader.load(request, token)
            except StatementCancelledError as exc:
                self._discard(seq, f"cancelled:{exc.stage}")
                return None
            except Exception as exc:
                return self._fail(seq, exc, request)

            if not self._is_latest(seq):
                self._discard(seq, "ready")
                return None

            self._last_ready = statement
            view = StatementView(
                state=StatementState.READY,
                seq=seq,
                request=request,
                statement=statement,
                last_ready=statement,
            )
            self._publish(view)
            logger.info(
                "statement_ready",
                extra={"seq": seq, "entry_count": statement.summary.entry_count},
            )
            return view

    def _fail(
        self,
        seq: int,
        exc: Exception,
        request: StatementRequest | None = None,
    ) -> StatementView | None:
        if not self._is_latest(seq):
            self._discard(seq, f"failed:{type(exc).__name__}")
            return None

        if isinstance(exc, InvariantViolationError):
            logger.error("statement_failed", extra={"seq": seq}, exc_info=exc)
        else:
            logger.warning("statement_failed", extra={"seq": seq}, exc_info=exc)

        view = StatementView(
            state=StatementState.FAILED,
            seq=seq,
            request=request or self._view.request,
            error=exc,
            last_ready=self._last_ready,
        )
        self._publish(view)
        return view

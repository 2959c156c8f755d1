"""Cooperative cancellation for statement computations.

A superseded request sets its token; the pipeline checks it between stages
and stops with StatementCancelledError.  Correctness never depends on the
check firing -- stale results are discarded by the request controller
regardless.
"""

import threading

from ledger_kernel.exceptions import StatementCancelledError


class CancellationToken:
    """Thread-safe cancel flag shared between the controller and a worker."""

    def __init__(self) -> None:
        self._event = threading.Event()

    def cancel(self) -> None:
        self._event.set()

    @property
    def cancelled(self) -> bool:
        return self._event.is_set()

    def raise_if_cancelled(self, stage: str) -> None:
        if self._event.is_set():
            raise StatementCancelledError(stage)

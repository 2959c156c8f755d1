"""
Structured JSON logging for the ledger kernel.

Every record under the ``ledger_kernel`` logger is written as one JSON
line.  The statement scope bound with ``LogContext.bind`` (firm, party
and the controller's request sequence) is stamped onto each record
emitted inside it, so a ``statement_result_discarded`` line can be
matched to the ``statement_computed`` line of the same request.
"""

__all__ = [
    "JsonLineFormatter",
    "LogContext",
    "get_logger",
    "configure_logging",
    "reset_logging",
]

import json
import logging
import sys
import threading
from contextlib import contextmanager
from contextvars import ContextVar
from datetime import UTC, date, datetime
from decimal import Decimal
from typing import Any, Iterator
from uuid import UUID

LOGGER_ROOT = "ledger_kernel"

_SCOPE_FIELDS = ("firm_id", "party_id", "request_seq")

_scope: dict[str, ContextVar[str | None]] = {
    name: ContextVar(f"ledger_log_{name}", default=None) for name in _SCOPE_FIELDS
}


class LogContext:
    """Statement scope attached to every ledger_kernel log record."""

    @staticmethod
    @contextmanager
    def bind(**fields: Any) -> Iterator[None]:
        """
        Bind scope fields for the duration of a ``with`` block.

        Values are stored as strings; None leaves the outer value in place.
        Nested binds restore the outer scope on exit, also across awaits,
        since each asyncio task runs in its own context copy.

        Raises:
            TypeError: For a field outside firm_id, party_id, request_seq.
        """
        unknown = sorted(set(fields) - set(_SCOPE_FIELDS))
        if unknown:
            raise TypeError(f"Unknown log scope field(s): {', '.join(unknown)}")

        tokens = [
            (_scope[name], _scope[name].set(str(value)))
            for name, value in fields.items()
            if value is not None
        ]
        try:
            yield
        finally:
            for var, token in reversed(tokens):
                var.reset(token)

    @staticmethod
    def current() -> dict[str, str]:
        values = {name: var.get() for name, var in _scope.items()}
        return {name: value for name, value in values.items() if value is not None}

    @staticmethod
    def clear() -> None:
        for var in _scope.values():
            var.set(None)


# Attributes every LogRecord has; anything else arrived through ``extra``.
_RECORD_ATTRS: frozenset[str] = frozenset(
    vars(logging.LogRecord("", 0, "", 0, "", (), None))
) | {"message", "taskName"}


def _json_default(value: Any) -> Any:
    if isinstance(value, (date, datetime)):
        return value.isoformat()
    # UUID and Decimal are written as strings to keep exact digits
    if isinstance(value, (UUID, Decimal)):
        return str(value)
    return repr(value)


def _exception_fields(exc: BaseException) -> dict[str, Any]:
    fields: dict[str, Any] = {
        "exc_type": type(exc).__name__,
        "exc_message": str(exc),
    }
    code = getattr(exc, "code", None)
    if code is not None:
        fields["exc_code"] = code
    # kernel errors keep their context (dates, amounts, operation) as attributes
    for key, value in vars(exc).items():
        if not key.startswith("_") and key != "code":
            fields[f"exc_{key}"] = value
    return fields


class JsonLineFormatter(logging.Formatter):
    """
    Header fields, then the bound scope, then ``extra`` fields.

    An ``extra`` key never overrides a header or scope field.
    """

    def format(self, record: logging.LogRecord) -> str:
        payload: dict[str, Any] = {
            "ts": datetime.fromtimestamp(record.created, tz=UTC).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }
        payload.update(LogContext.current())

        for key, value in vars(record).items():
            if key not in _RECORD_ATTRS and key not in payload:
                payload[key] = value

        if record.exc_info and record.exc_info[1] is not None:
            payload.update(_exception_fields(record.exc_info[1]))
            payload["traceback"] = self.formatException(record.exc_info)

        return json.dumps(payload, default=_json_default)


def get_logger(name: str) -> logging.Logger:
    """Logger named ``ledger_kernel.<name>``."""
    return logging.getLogger(f"{LOGGER_ROOT}.{name}")


_configured = False
_lock = threading.Lock()


def configure_logging(
    *,
    level: int = logging.INFO,
    handler: logging.Handler | None = None,
) -> None:
    """
    Install a JSON handler on the ``ledger_kernel`` logger.

    Only the first call takes effect.  Engine initialization calls this
    with defaults, so an entry point that wants another level or handler
    must call it first.  ``handler`` defaults to a stderr stream.
    """
    global _configured
    with _lock:
        if _configured:
            return
        _configured = True

    if handler is None:
        handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(JsonLineFormatter())

    root = logging.getLogger(LOGGER_ROOT)
    root.setLevel(level)
    root.propagate = False
    root.addHandler(handler)


def reset_logging() -> None:
    """Drop the installed handler so the next configure_logging() applies. Tests only."""
    global _configured
    with _lock:
        _configured = False
    root = logging.getLogger(LOGGER_ROOT)
    root.handlers.clear()
    root.setLevel(logging.WARNING)

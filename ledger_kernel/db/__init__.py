"""Database layer - engine, base classes, types."""

from ledger_kernel.db.base import UUID, Base, TrackedBase, UUIDString
from ledger_kernel.db.engine import (
    create_tables,
    get_engine,
    get_session,
    read_only_session_scope,
    session_scope,
)
from ledger_kernel.db.types import ZERO, to_money

__all__ = [
    "get_engine",
    "get_session",
    "session_scope",
    "read_only_session_scope",
    "create_tables",
    "Base",
    "TrackedBase",
    "UUIDString",
    "UUID",
    "ZERO",
    "to_money",
]

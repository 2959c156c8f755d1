"""Statement pipeline services and the asyncio request controller."""

from ledger_kernel.services.opening_balance import OpeningBalanceResolver
from ledger_kernel.services.statement_controller import (
    SessionStatementLoader,
    StatementLoader,
    StatementRequestController,
    StatementState,
    StatementView,
)
from ledger_kernel.services.statement_service import StatementService
from ledger_kernel.services.transaction_selector import TransactionSelector

__all__ = [
    "OpeningBalanceResolver",
    "SessionStatementLoader",
    "StatementLoader",
    "StatementRequestController",
    "StatementService",
    "StatementState",
    "StatementView",
    "TransactionSelector",
]

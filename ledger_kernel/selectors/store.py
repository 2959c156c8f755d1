"""
Module: ledger_kernel.selectors.store
Responsibility: SQLAlchemy implementation of the TransactionStore protocol.
Architecture position: Kernel > Selectors.  Composes PartySelector and
    MovementSelector over one caller-owned Session.

Failure modes:
    - Any SQLAlchemyError raised by the driver is translated to
      DataAccessError(operation, detail) with the original chained, so the
      statement pipeline never sees driver-specific exceptions.
"""

from collections.abc import Callable
from datetime import date
from typing import TypeVar
from uuid import UUID

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from ledger_kernel.domain.movement import Movement, PartyInfo
from ledger_kernel.exceptions import DataAccessError
from ledger_kernel.logging_config import get_logger
from ledger_kernel.selectors.movement_selector import MovementSelector
from ledger_kernel.selectors.party_selector import PartySelector

logger = get_logger("selectors.store")

T = TypeVar("T")


class SqlTransactionStore:
    """TransactionStore backed by the parties and movements tables."""

    def __init__(self, session: Session):
        self.session = session
        self._parties = PartySelector(session)
        self._movements = MovementSelector(session)

    def _read(self, operation: str, fn: Callable[[], T]) -> T:
        try:
            return fn()
        except SQLAlchemyError as exc:
            logger.error(
                "data_access_failed",
                extra={"operation": operation, "error": str(exc)},
            )
            raise DataAccessError(operation, str(exc)) from exc

    def get_party(self, firm_id: UUID, party_id: UUID) -> PartyInfo | None:
        return self._read(
            "get_party", lambda: self._parties.get(firm_id, party_id)
        )

    def find_opening_movement(
        self, firm_id: UUID, party_id: UUID, opening_kind: str
    ) -> Movement | None:
        return self._read(
            "find_opening_movement",
            lambda: self._movements.opening_movement(firm_id, party_id, opening_kind),
        )

    def list_approved_movements(
        self,
        firm_id: UUID,
        party_id: UUID,
        date_from: date | None,
        date_to: date | None,
        exclude_kind: str,
    ) -> list[Movement]:
        return self._read(
            "list_approved_movements",
            lambda: self._movements.approved_in_range(
                firm_id, party_id, date_from, date_to, exclude_kind
            ),
        )

    def find_earliest_movement_date(
        self, firm_id: UUID, party_id: UUID
    ) -> date | None:
        return self._read(
            "find_earliest_movement_date",
            lambda: self._movements.earliest_date(firm_id, party_id),
        )

    def list_parties(self, firm_id: UUID, active_only: bool = True) -> list[PartyInfo]:
        """Parties of a firm, for party pickers and the CLI."""
        return self._read(
            "list_parties",
            lambda: self._parties.list_for_firm(firm_id, active_only=active_only),
        )

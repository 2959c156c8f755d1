"""
Module: ledger_kernel.selectors.movement_selector
Responsibility: Read-only movement queries for statement computation:
    approved movements in a date window, the opening-balance pseudo-movement,
    and the earliest movement date used for default ranges.
Architecture position: Kernel > Selectors.  May import from models/ and
    selectors/base.py.  MUST NOT import from services/ or outer layers.

Invariants enforced:
    CHRONOLOGICAL_ORDER -- results are ordered by transaction_date, then
        created_at, then id, so repeated calls over unchanged data return
        the identical sequence.
    Only status == 'approved' rows are ever returned.

Failure modes:
    - Returns empty lists / None when nothing qualifies; never raises for
      "no data".  Driver errors propagate as SQLAlchemyError and are
      translated by SqlTransactionStore.
"""

from datetime import date
from uuid import UUID

from sqlalchemy import func, select
from sqlalchemy.orm import Session

from ledger_kernel.domain.movement import Movement, MovementStatus
from ledger_kernel.models.movement import MovementModel
from ledger_kernel.selectors.base import BaseSelector


class MovementSelector(BaseSelector[MovementModel]):
    """
    Selector for approved party movements.

    Non-goals:
        - Does NOT classify kinds; unknown kinds are returned as-is so the
          accumulator can reject them explicitly.
    """

    def __init__(self, session: Session):
        super().__init__(session)

    @staticmethod
    def _to_dto(row: MovementModel) -> Movement:
        return Movement(
            id=row.id,
            firm_id=row.firm_id,
            party_id=row.party_id,
            kind=row.kind,
            amount=row.amount,
            transaction_date=row.transaction_date,
            status=MovementStatus(row.status),
            bill_number=row.bill_number,
            payment_method=row.payment_method,
            reference_number=row.reference_number,
            notes=row.notes,
            created_at=row.created_at,
        )

    def _approved(self, firm_id: UUID, party_id: UUID):
        return select(MovementModel).where(
            MovementModel.firm_id == firm_id,
            MovementModel.party_id == party_id,
            MovementModel.status == MovementStatus.APPROVED.value,
        )

    @staticmethod
    def _ordered(query):
        return query.order_by(
            MovementModel.transaction_date,
            MovementModel.created_at,
            MovementModel.id,
        )

    def approved_in_range(
        self,
        firm_id: UUID,
        party_id: UUID,
        date_from: date | None,
        date_to: date | None,
        exclude_kind: str,
    ) -> list[Movement]:
        """
        Approved movements with date_from <= transaction_date <= date_to.

        Either bound may be None (unbounded).  Rows of ``exclude_kind`` (the
        opening-balance pseudo-kind) are left out.
        """
        query = self._approved(firm_id, party_id).where(
            MovementModel.kind != exclude_kind
        )
        if date_from is not None:
            query = query.where(MovementModel.transaction_date >= date_from)
        if date_to is not None:
            query = query.where(MovementModel.transaction_date <= date_to)

        rows = self.session.execute(self._ordered(query)).scalars().all()
        return [self._to_dto(row) for row in rows]

    def opening_movement(
        self, firm_id: UUID, party_id: UUID, opening_kind: str
    ) -> Movement | None:
        """Earliest approved movement of the opening-balance kind."""
        query = self._approved(firm_id, party_id).where(
            MovementModel.kind == opening_kind
        )
        row = self.session.execute(self._ordered(query).limit(1)).scalars().first()
        if row is None:
            return None
        return self._to_dto(row)

    def earliest_date(self, firm_id: UUID, party_id: UUID) -> date | None:
        """Earliest transaction_date among the party's approved movements."""
        stmt = select(func.min(MovementModel.transaction_date)).where(
            MovementModel.firm_id == firm_id,
            MovementModel.party_id == party_id,
            MovementModel.status == MovementStatus.APPROVED.value,
        )
        return self.session.execute(stmt).scalar_one_or_none()

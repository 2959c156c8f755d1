"""
Module: ledger_kernel.selectors.party_selector
Responsibility: Read-only party lookups returning PartyInfo DTOs.
Architecture position: Kernel > Selectors.
"""

from uuid import UUID

from sqlalchemy import select
from sqlalchemy.orm import Session

from ledger_kernel.domain.movement import PartyInfo
from ledger_kernel.models.party import Party
from ledger_kernel.selectors.base import BaseSelector


class PartySelector(BaseSelector[Party]):
    """Selector for parties scoped to a firm."""

    def __init__(self, session: Session):
        super().__init__(session)

    @staticmethod
    def _to_dto(party: Party) -> PartyInfo:
        return PartyInfo(
            id=party.id,
            firm_id=party.firm_id,
            name=party.name,
            party_type=str(getattr(party.party_type, "value", party.party_type)),
            opening_balance=party.opening_balance,
            contact_person=party.contact_person,
            phone=party.phone,
            email=party.email,
            address=party.address,
        )

    def get(self, firm_id: UUID, party_id: UUID) -> PartyInfo | None:
        """
        Return the party if it exists in the firm.

        A party id that exists under another firm is treated as missing.
        """
        stmt = select(Party).where(
            Party.id == party_id,
            Party.firm_id == firm_id,
        )
        party = self.session.execute(stmt).scalar_one_or_none()
        if party is None:
            return None
        return self._to_dto(party)

    def list_for_firm(self, firm_id: UUID, active_only: bool = True) -> list[PartyInfo]:
        """Parties of a firm ordered by name."""
        stmt = select(Party).where(Party.firm_id == firm_id)
        if active_only:
            stmt = stmt.where(Party.is_active.is_(True))
        stmt = stmt.order_by(Party.name, Party.id)
        return [self._to_dto(p) for p in self.session.execute(stmt).scalars()]

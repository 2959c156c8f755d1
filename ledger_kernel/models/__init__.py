"""ORM models for the ledger kernel."""

from ledger_kernel.models.firm import Firm
from ledger_kernel.models.movement import MovementModel
from ledger_kernel.models.party import Party, PartyType

__all__ = [
    "Firm",
    "Party",
    "PartyType",
    "MovementModel",
]

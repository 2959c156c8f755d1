"""
Classification -- Explicit debit/credit mapping for movement kinds.

Responsibility:
    Maps every movement kind the statement may encounter to exactly one
    side (debit increases what the party owes, credit decreases it) and to
    the formatting rule for its ledger description.  Also names the
    opening-balance pseudo-kind and the opening-balance source policy.

Architecture position:
    Kernel > Domain -- pure functional core, zero I/O.  Built from
    configuration by ``ledger_config.bridges``; the kernel never reads
    configuration itself.

Invariants enforced:
    - EXPLICIT_CLASSIFICATION: ``classify()`` raises
      UnclassifiedMovementKindError for an unknown kind; there is no
      default side.
    - The opening-balance pseudo-kind can never be classified as a real
      movement.

Failure modes:
    - ValueError at construction on duplicate kinds or a rule for the
      opening-balance kind.
"""

from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal
from enum import Enum
from typing import Iterable

from ledger_kernel.db.types import ZERO
from ledger_kernel.domain.movement import (
    COLLECTION,
    OPENING_BALANCE,
    PAYMENT,
    SALE,
    Movement,
)
from ledger_kernel.exceptions import UnclassifiedMovementKindError


class MovementSide(str, Enum):
    """Effect of a movement on the party's balance."""

    DEBIT = "debit"  # increases the amount the party owes
    CREDIT = "credit"  # decreases it


class OpeningBalanceSource(str, Enum):
    """Where the base of the opening balance comes from."""

    PARTY_FIELD = "party_field"
    OPENING_MOVEMENT = "opening_movement"
    MERGED = "merged"  # movement if present, else the stored field


@dataclass(frozen=True)
class KindRule:
    """
    Classification and description rule for one movement kind.

    ``reference_field`` names the Movement attribute shown after the label
    (``bill_number``, ``payment_method``, ``reference_number``);
    ``missing_reference`` replaces it when empty.
    """

    kind: str
    side: MovementSide
    label: str
    reference_field: str | None = None
    missing_reference: str | None = None
    include_notes: bool = False

    def describe(self, movement: Movement) -> str:
        """Human-readable ledger description for a movement of this kind."""
        parts = [self.label]
        if self.reference_field is not None:
            reference = getattr(movement, self.reference_field, None)
            if reference:
                parts.append(str(reference))
            elif self.missing_reference:
                parts.append(self.missing_reference)
        if self.include_notes and movement.notes:
            parts.append(movement.notes)
        return " - ".join(parts)


DEFAULT_RULES: tuple[KindRule, ...] = (
    KindRule(
        kind=SALE,
        side=MovementSide.DEBIT,
        label="Sale",
        reference_field="bill_number",
        missing_reference="No Bill Number",
    ),
    KindRule(
        kind=COLLECTION,
        side=MovementSide.CREDIT,
        label="Payment received",
        reference_field="payment_method",
        missing_reference="Unknown method",
        include_notes=True,
    ),
    KindRule(
        kind=PAYMENT,
        side=MovementSide.CREDIT,
        label="Payment made",
        reference_field="payment_method",
        missing_reference="Unknown method",
        include_notes=True,
    ),
)


class MovementClassifier:
    """
    Closed registry of kind rules.

    Contract:
        ``classify(kind)`` returns the rule for a known kind and raises
        UnclassifiedMovementKindError otherwise.

    Guarantees:
        - Each kind appears at most once.
        - ``opening_kind`` never has a rule.
    """

    def __init__(
        self,
        rules: Iterable[KindRule],
        opening_kind: str = OPENING_BALANCE,
    ):
        self._opening_kind = opening_kind
        self._rules: dict[str, KindRule] = {}
        for rule in rules:
            if rule.kind in self._rules:
                raise ValueError(f"Duplicate classification for kind '{rule.kind}'")
            if rule.kind == opening_kind:
                raise ValueError(
                    f"Opening-balance kind '{opening_kind}' cannot be classified "
                    "as a movement"
                )
            self._rules[rule.kind] = rule

    @classmethod
    def default(cls) -> MovementClassifier:
        """Classifier with the built-in sale/collection/payment rules."""
        return cls(DEFAULT_RULES)

    @property
    def opening_kind(self) -> str:
        return self._opening_kind

    @property
    def kinds(self) -> tuple[str, ...]:
        return tuple(sorted(self._rules))

    def is_opening(self, kind: str) -> bool:
        return kind == self._opening_kind

    def classify(self, kind: str, movement_id: str | None = None) -> KindRule:
        """
        Return the rule for ``kind``.

        Raises:
            UnclassifiedMovementKindError: If the kind has no rule.
        """
        rule = self._rules.get(kind)
        if rule is None:
            raise UnclassifiedMovementKindError(kind, movement_id)
        return rule

    def signed_amount(self, movement: Movement) -> Decimal:
        """Movement amount with the sign of its side (debit positive)."""
        rule = self.classify(movement.kind, str(movement.id))
        if rule.side == MovementSide.DEBIT:
            return movement.amount
        return -movement.amount

    def net(self, movements: Iterable[Movement]) -> Decimal:
        """Net balance effect of a sequence of movements."""
        total = ZERO
        for movement in movements:
            total += self.signed_amount(movement)
        return total

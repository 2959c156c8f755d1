"""
Statement configuration schema.

Human-authored YAML is parsed into these frozen types by the loader and
translated into kernel inputs by the bridges.
"""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class MovementKindDef:
    """Debit/credit side and description rule for one movement kind."""

    kind: str
    side: str  # debit | credit
    label: str
    reference_field: str | None = None
    missing_reference: str | None = None
    include_notes: bool = False


@dataclass(frozen=True)
class StatementConfig:
    """A complete, validated statement configuration."""

    config_id: str
    version: int
    opening_balance_source: str
    opening_kind: str
    opening_label: str
    movement_kinds: tuple[MovementKindDef, ...]
    checksum: str = ""

    @property
    def kinds(self) -> tuple[str, ...]:
        return tuple(k.kind for k in self.movement_kinds)

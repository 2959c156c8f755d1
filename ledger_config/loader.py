"""
Configuration Loader (``ledger_config.loader``).

Responsibility
--------------
Loads a statement configuration YAML file and parses it into the typed
``ledger_config.schema`` dataclasses.  Runtime callers go through
``ledger_config.get_active_config()``.

Invariants enforced
-------------------
* No silent defaults for required fields: a missing key raises
  ``KeyError``, an invalid value raises ``ValueError``.
* Every movement kind names an explicit side.
* ``compute_checksum`` is deterministic for identical input.

Failure modes
-------------
* Missing YAML file  -> ``FileNotFoundError`` propagates.
* Malformed YAML  -> ``yaml.YAMLError`` propagates.
* Missing required keys  -> ``KeyError`` propagates.
* Unknown side / source / reference field, duplicate kind  -> ``ValueError``.
"""

from __future__ import annotations

import hashlib
import json
from pathlib import Path
from typing import Any

import yaml

from ledger_config.schema import MovementKindDef, StatementConfig

VALID_SIDES = frozenset({"debit", "credit"})
VALID_SOURCES = frozenset({"party_field", "opening_movement", "merged"})
VALID_REFERENCE_FIELDS = frozenset(
    {"bill_number", "payment_method", "reference_number"}
)


def load_yaml_file(path: Path) -> dict[str, Any]:
    """
    Load a single YAML file and return its contents as a dict.

    Raises:
        FileNotFoundError: if the file does not exist.
        yaml.YAMLError: if the file contains invalid YAML.
    """
    with open(path) as f:
        return yaml.safe_load(f) or {}


def parse_kind(data: dict[str, Any]) -> MovementKindDef:
    """Parse a MovementKindDef from a dict."""
    side = str(data["side"]).lower()
    if side not in VALID_SIDES:
        raise ValueError(
            f"Movement kind '{data['kind']}' has invalid side {data['side']!r}; "
            f"expected one of {sorted(VALID_SIDES)}"
        )
    reference_field = data.get("reference_field")
    if reference_field is not None and reference_field not in VALID_REFERENCE_FIELDS:
        raise ValueError(
            f"Movement kind '{data['kind']}' has unknown reference_field "
            f"{reference_field!r}"
        )
    return MovementKindDef(
        kind=str(data["kind"]),
        side=side,
        label=str(data["label"]),
        reference_field=reference_field,
        missing_reference=data.get("missing_reference"),
        include_notes=bool(data.get("include_notes", False)),
    )


def parse_config(data: dict[str, Any]) -> StatementConfig:
    """
    Parse a StatementConfig from the top-level YAML dict.

    Raises:
        KeyError: if a required key is missing.
        ValueError: on invalid values or duplicate kinds.
    """
    opening = data["opening_balance"]
    source = str(opening.get("source", "merged"))
    if source not in VALID_SOURCES:
        raise ValueError(
            f"Invalid opening_balance.source {source!r}; "
            f"expected one of {sorted(VALID_SOURCES)}"
        )
    opening_kind = str(opening.get("kind", "opening_balance"))

    kinds = tuple(parse_kind(k) for k in data["movement_kinds"])
    seen: set[str] = set()
    for k in kinds:
        if k.kind in seen:
            raise ValueError(f"Duplicate movement kind '{k.kind}'")
        if k.kind == opening_kind:
            raise ValueError(
                f"Opening-balance kind '{opening_kind}' cannot be listed "
                "as a movement kind"
            )
        seen.add(k.kind)

    return StatementConfig(
        config_id=str(data["config_id"]),
        version=int(data.get("version", 1)),
        opening_balance_source=source,
        opening_kind=opening_kind,
        opening_label=str(opening.get("label", "Opening Balance")),
        movement_kinds=kinds,
        checksum=compute_checksum(data),
    )


def compute_checksum(data: dict[str, Any]) -> str:
    """
    Compute SHA-256 checksum of canonical JSON serialization.

    Identical ``data`` always produces identical checksums.
    """
    canonical = json.dumps(data, sort_keys=True, default=str)
    return hashlib.sha256(canonical.encode()).hexdigest()

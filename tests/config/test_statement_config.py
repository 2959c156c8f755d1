"""Tests for statement configuration loading, validation and bridges."""
from __future__ import annotations

from datetime import date
from decimal import Decimal
from uuid import uuid4

import pytest
import yaml

from ledger_config import DEFAULT_CONFIG_PATH, get_active_config
from ledger_config.bridges import (
    build_classifier,
    build_opening_balance_source,
    build_statement_loader,
    build_statement_service,
)
from ledger_config.loader import compute_checksum, load_yaml_file, parse_config
from ledger_kernel.domain.classification import MovementSide, OpeningBalanceSource
from ledger_kernel.domain.movement import Movement
from ledger_kernel.exceptions import UnclassifiedMovementKindError
from ledger_kernel.services import SessionStatementLoader, StatementService
from tests.fakes import InMemoryTransactionStore


def _raw() -> dict:
    return load_yaml_file(DEFAULT_CONFIG_PATH)


def _write(tmp_path, data: dict):
    path = tmp_path / "statement.yaml"
    path.write_text(yaml.safe_dump(data))
    return path


class TestDefaultConfig:
    def test_loads(self):
        config = get_active_config()

        assert config.config_id == "party-ledger-default"
        assert config.opening_balance_source == "merged"
        assert config.opening_kind == "opening_balance"
        assert config.opening_label == "Opening Balance"
        assert config.kinds == ("sale", "collection", "payment")

    def test_payment_is_credit(self):
        config = get_active_config()
        sides = {k.kind: k.side for k in config.movement_kinds}
        assert sides == {"sale": "debit", "collection": "credit", "payment": "credit"}

    def test_trace_logged(self, captured_logs):
        config = get_active_config()

        traces = [r for r in captured_logs() if r["message"] == "LEDGER_CONFIG_TRACE"]
        assert len(traces) == 1
        assert traces[0]["checksum"] == config.checksum
        assert traces[0]["movement_kinds"] == ["sale", "collection", "payment"]

    def test_override_path(self, tmp_path):
        data = _raw()
        data["config_id"] = "custom"
        config = get_active_config(_write(tmp_path, data))
        assert config.config_id == "custom"

    def test_missing_file(self, tmp_path):
        with pytest.raises(FileNotFoundError):
            get_active_config(tmp_path / "missing.yaml")


class TestValidation:
    def test_invalid_side(self):
        data = _raw()
        data["movement_kinds"][0]["side"] = "sideways"
        with pytest.raises(ValueError, match="invalid side"):
            parse_config(data)

    def test_invalid_source(self):
        data = _raw()
        data["opening_balance"]["source"] = "guess"
        with pytest.raises(ValueError, match="opening_balance.source"):
            parse_config(data)

    def test_unknown_reference_field(self):
        data = _raw()
        data["movement_kinds"][0]["reference_field"] = "invoice_no"
        with pytest.raises(ValueError, match="reference_field"):
            parse_config(data)

    def test_duplicate_kind(self):
        data = _raw()
        data["movement_kinds"].append(dict(data["movement_kinds"][0]))
        with pytest.raises(ValueError, match="Duplicate"):
            parse_config(data)

    def test_opening_kind_cannot_be_a_movement_kind(self):
        data = _raw()
        data["movement_kinds"][0]["kind"] = "opening_balance"
        with pytest.raises(ValueError, match="Opening-balance kind"):
            parse_config(data)

    def test_missing_side(self):
        data = _raw()
        del data["movement_kinds"][0]["side"]
        with pytest.raises(KeyError):
            parse_config(data)

    def test_missing_opening_section(self):
        data = _raw()
        del data["opening_balance"]
        with pytest.raises(KeyError):
            parse_config(data)


class TestChecksum:
    def test_deterministic(self):
        assert compute_checksum(_raw()) == compute_checksum(_raw())

    def test_key_order_irrelevant(self):
        assert compute_checksum({"a": 1, "b": 2}) == compute_checksum({"b": 2, "a": 1})

    def test_changes_with_content(self):
        data = _raw()
        before = compute_checksum(data)
        data["version"] = 2
        assert compute_checksum(data) != before


class TestBridges:
    def test_classifier(self):
        classifier = build_classifier(get_active_config())

        assert classifier.kinds == ("collection", "payment", "sale")
        assert classifier.classify("payment").side == MovementSide.CREDIT
        assert classifier.classify("collection").side == MovementSide.CREDIT
        with pytest.raises(UnclassifiedMovementKindError):
            classifier.classify("refund")

    def test_classifier_with_custom_kind(self, tmp_path):
        data = _raw()
        data["movement_kinds"].append(
            {"kind": "refund", "side": "credit", "label": "Refund issued"}
        )
        classifier = build_classifier(get_active_config(_write(tmp_path, data)))

        movement = Movement(
            id=uuid4(), firm_id=uuid4(), party_id=uuid4(), kind="refund",
            amount=Decimal("40"), transaction_date=date(2024, 1, 9),
        )
        assert classifier.signed_amount(movement) == Decimal("-40")

    def test_opening_balance_source(self):
        config = get_active_config()
        assert build_opening_balance_source(config) == OpeningBalanceSource.MERGED

    def test_service(self):
        store = InMemoryTransactionStore()
        service = build_statement_service(get_active_config(), store)
        assert isinstance(service, StatementService)
        assert service.store is store

    def test_loader(self):
        assert isinstance(
            build_statement_loader(get_active_config()), SessionStatementLoader
        )

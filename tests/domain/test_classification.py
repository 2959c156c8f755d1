"""Tests for MovementClassifier and KindRule."""

from datetime import date
from decimal import Decimal

import pytest

from ledger_kernel.domain.classification import (
    DEFAULT_RULES,
    KindRule,
    MovementClassifier,
    MovementSide,
)
from ledger_kernel.exceptions import UnclassifiedMovementKindError


class TestDefaultClassifier:
    def test_default_kinds(self):
        assert MovementClassifier.default().kinds == ("collection", "payment", "sale")

    @pytest.mark.parametrize(
        "kind, side",
        [
            ("sale", MovementSide.DEBIT),
            ("collection", MovementSide.CREDIT),
            ("payment", MovementSide.CREDIT),
        ],
    )
    def test_sides(self, kind, side):
        assert MovementClassifier.default().classify(kind).side == side

    def test_no_default_side_for_unknown_kind(self):
        with pytest.raises(UnclassifiedMovementKindError) as exc_info:
            MovementClassifier.default().classify("cheque_bounce", "m-1")
        assert exc_info.value.kind == "cheque_bounce"
        assert "m-1" in str(exc_info.value)

    def test_opening_kind(self):
        classifier = MovementClassifier.default()
        assert classifier.opening_kind == "opening_balance"
        assert classifier.is_opening("opening_balance")
        assert not classifier.is_opening("sale")
        with pytest.raises(UnclassifiedMovementKindError):
            classifier.classify("opening_balance")


class TestConstruction:
    def test_duplicate_kind_rejected(self):
        rule = KindRule("sale", MovementSide.DEBIT, "Sale")
        with pytest.raises(ValueError, match="Duplicate"):
            MovementClassifier([rule, rule])

    def test_rule_for_opening_kind_rejected(self):
        with pytest.raises(ValueError, match="Opening-balance kind"):
            MovementClassifier([KindRule("opening_balance", MovementSide.DEBIT, "OB")])

    def test_custom_opening_kind(self):
        classifier = MovementClassifier(DEFAULT_RULES, opening_kind="ob")
        assert classifier.is_opening("ob")
        assert not classifier.is_opening("opening_balance")


class TestNet:
    def test_signed_amounts(self, make_movement):
        classifier = MovementClassifier.default()
        sale = make_movement("sale", "100", date(2024, 1, 1))
        collection = make_movement("collection", "30", date(2024, 1, 2))

        assert classifier.signed_amount(sale) == Decimal("100")
        assert classifier.signed_amount(collection) == Decimal("-30")
        assert classifier.net([sale, collection]) == Decimal("70")

    def test_net_of_nothing_is_zero(self):
        assert MovementClassifier.default().net([]) == Decimal("0")

    def test_net_rejects_unknown_kind(self, make_movement):
        with pytest.raises(UnclassifiedMovementKindError):
            MovementClassifier.default().net([make_movement("odd", "1", date(2024, 1, 1))])


class TestDescribe:
    def test_label_only(self, make_movement):
        rule = KindRule("adjustment", MovementSide.CREDIT, "Adjustment")
        m = make_movement("adjustment", "1", date(2024, 1, 1), bill_number="B-1")
        assert rule.describe(m) == "Adjustment"

    def test_missing_reference_without_placeholder(self, make_movement):
        rule = KindRule("adjustment", MovementSide.CREDIT, "Adjustment", "reference_number")
        m = make_movement("adjustment", "1", date(2024, 1, 1))
        assert rule.describe(m) == "Adjustment"

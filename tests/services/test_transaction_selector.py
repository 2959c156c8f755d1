"""Tests for TransactionSelector filtering and ordering."""

from datetime import UTC, date, datetime
from uuid import UUID, uuid4

import pytest

from ledger_kernel.exceptions import DataAccessError, InvalidDateRangeError
from ledger_kernel.services.transaction_selector import TransactionSelector

JAN_1 = date(2024, 1, 1)
JAN_31 = date(2024, 1, 31)


def _select(store, party, date_from=JAN_1, date_to=JAN_31):
    return TransactionSelector(store).select(party.firm_id, party.id, date_from, date_to)


class TestFilters:
    def test_bounds_are_inclusive(self, memory_store, party_info, make_movement):
        first = memory_store.add(make_movement("sale", "1", JAN_1))
        last = memory_store.add(make_movement("sale", "2", JAN_31))
        memory_store.add(make_movement("sale", "3", date(2023, 12, 31)))
        memory_store.add(make_movement("sale", "4", date(2024, 2, 1)))

        assert [m.id for m in _select(memory_store, party_info)] == [first.id, last.id]

    def test_only_approved(self, memory_store, party_info, make_movement):
        kept = memory_store.add(make_movement("sale", "1", date(2024, 1, 2)))
        memory_store.add(make_movement("sale", "1", date(2024, 1, 2), status="pending"))
        memory_store.add(make_movement("sale", "1", date(2024, 1, 2), status="rejected"))

        assert [m.id for m in _select(memory_store, party_info)] == [kept.id]

    def test_opening_movement_excluded(self, memory_store, party_info, opening_movement):
        memory_store.add(opening_movement("100", date(2024, 1, 2)))
        assert _select(memory_store, party_info) == ()

    def test_other_parties_excluded(self, memory_store, party_info, make_movement):
        memory_store.add(make_movement("sale", "1", date(2024, 1, 2), party_id=uuid4()))
        assert _select(memory_store, party_info) == ()

    def test_unknown_kinds_pass_through(self, memory_store, party_info, make_movement):
        """Classification happens in the accumulator, not here."""
        memory_store.add(make_movement("barter", "1", date(2024, 1, 2)))
        assert [m.kind for m in _select(memory_store, party_info)] == ["barter"]

    def test_empty_result_is_not_an_error(self, memory_store, party_info):
        assert _select(memory_store, party_info) == ()


class TestOrdering:
    def test_sorted_by_date_then_created_at_then_id(
        self, memory_store, party_info, make_movement
    ):
        same_time = datetime(2024, 1, 3, 10, tzinfo=UTC)
        b = make_movement(
            "sale", "1", date(2024, 1, 3),
            id=UUID("00000000-0000-0000-0000-00000000000b"), created_at=same_time,
        )
        a = make_movement(
            "sale", "1", date(2024, 1, 3),
            id=UUID("00000000-0000-0000-0000-00000000000a"), created_at=same_time,
        )
        late_created = make_movement(
            "sale", "1", date(2024, 1, 2), created_at=datetime(2024, 1, 9, tzinfo=UTC)
        )
        early_created = make_movement(
            "sale", "1", date(2024, 1, 2), created_at=datetime(2024, 1, 1, tzinfo=UTC)
        )
        for m in (b, late_created, a, early_created):
            memory_store.add(m)

        selected = _select(memory_store, party_info)

        assert [m.id for m in selected] == [early_created.id, late_created.id, a.id, b.id]

    def test_resorts_unordered_store_output(self, party_info, make_movement):
        later = make_movement("sale", "1", date(2024, 1, 9))
        earlier = make_movement("sale", "1", date(2024, 1, 2))

        class UnorderedStore:
            def list_approved_movements(self, *args):
                return [later, earlier]

        selected = TransactionSelector(UnorderedStore()).select(
            party_info.firm_id, party_info.id, JAN_1, JAN_31
        )
        assert [m.id for m in selected] == [earlier.id, later.id]

    def test_repeated_calls_identical(self, memory_store, party_info, make_movement):
        for day in (5, 2, 2, 9, 5):
            memory_store.add(make_movement("sale", "1", date(2024, 1, day)))
        assert _select(memory_store, party_info) == _select(memory_store, party_info)


class TestFailures:
    def test_reversed_range_performs_no_io(self, memory_store, party_info):
        with pytest.raises(InvalidDateRangeError):
            _select(memory_store, party_info, JAN_31, JAN_1)
        assert memory_store.calls == []

    def test_store_failure_propagates(self, memory_store, party_info):
        memory_store.fail_with = DataAccessError("list_approved_movements", "boom")
        with pytest.raises(DataAccessError):
            _select(memory_store, party_info)

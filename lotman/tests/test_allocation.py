"""
Tests for FIFO allocation.
"""

import pytest

from lotman import ledger
from lotman.exceptions import LedgerError
from lotman.services.allocation import allocate, check_sufficiency, require_sufficient


def _lines(result):
    return [(line.lot.batch_number, line.quantity) for line in result.lines]


class TestAllocate:
    """Tests for allocate() over an in-memory snapshot."""

    def test_oldest_batch_first(self, snapshot):
        """2000 takes all of 2501 before touching 2510."""
        lots = [snapshot(batch_number='2510', on_hand=1000), snapshot(batch_number='2501', on_hand=1500)]

        result = allocate({'B001003': 2000}, lots)

        assert _lines(result) == [('2501', 1500), ('2510', 500)]
        assert result.shortages == {}

    def test_shortage_is_reported(self, snapshot):
        lots = [snapshot(batch_number='2501', on_hand=1500), snapshot(batch_number='2510', on_hand=1000)]

        result = allocate({'B001003': 2600}, lots)

        assert _lines(result) == [('2501', 1500), ('2510', 1000)]
        assert result.shortages == {'B001003': 100}

    def test_allocated_plus_shortage_equals_demand(self, snapshot):
        lots = [snapshot(batch_number='2501', on_hand=30), snapshot(batch_number='05020003', on_hand=12)]
        demand = {'B001003': 50}

        result = allocate(demand, lots)

        assert result.allocated_for('B001003') + result.shortages.get('B001003', 0) == 50
        for line in result.lines:
            assert 0 < line.quantity <= line.lot.on_hand

    def test_prefix_variant_lots_are_used(self, snapshot):
        lots = [snapshot(item_code='P030105_B', batch_number='051234', on_hand=40)]

        result = allocate({'P030105': 30}, lots)

        assert _lines(result) == [('051234', 30)]

    def test_short_code_does_not_match_longer_lot(self, snapshot):
        lots = [snapshot(item_code='P030105', on_hand=40)]

        result = allocate({'P0301': 10}, lots)

        assert result.lines == []
        assert result.shortages == {'P0301': 10}

    def test_overlapping_codes_share_stock(self, snapshot):
        """A lot matched by two demand codes is not over-allocated."""
        lots = [snapshot(item_code='P030105_B', on_hand=50, pk=1)]

        result = allocate({'P030105': 40, 'P030105_B': 40}, lots)

        assert sum(line.quantity for line in result.lines) == 50
        assert result.shortages == {'P030105_B': 30}

    def test_factory_scope(self, snapshot):
        lots = [snapshot(on_hand=100, factory='ASM2')]

        assert check_sufficiency({'B001003': 10}, lots, factory='ASM1') == {'B001003': 10}

    def test_deterministic(self, snapshot):
        lots = [snapshot(batch_number=b, on_hand=10) for b in ('2510', '2501', '051234')]

        first = allocate({'B001003': 25}, lots)
        second = allocate({'B001003': 25}, list(reversed(lots)))

        assert _lines(first) == _lines(second)

    def test_keys_differing_in_case_are_merged(self, snapshot):
        """b001003 and B001003 are one demand entry, with one shortage."""
        lots = [snapshot(on_hand=1500, pk=1)]

        result = allocate({'b001003': 1000, 'B001003 ': 1000}, lots)

        assert [line.quantity for line in result.lines] == [1500]
        assert result.shortages == {'B001003': 500}

    def test_require_sufficient(self, snapshot):
        result = allocate({'B001003': 20}, [snapshot(on_hand=5)])

        with pytest.raises(LedgerError) as exc:
            require_sufficient(result)

        assert exc.value.code == 'INSUFFICIENT_STOCK'
        assert exc.value.data['shortages'] == {'B001003': 15}
        assert exc.value.data['allocated'] == {'B001003': 5}


@pytest.mark.django_db
class TestLedgerAllocate:
    """Tests for ledger.allocate() against stored lots."""

    def test_allocate_from_store(self, older_lot, newer_lot):
        result = ledger.allocate({'B001003': 2000})

        assert [(line.lot.pk, line.quantity) for line in result.lines] == [
            (older_lot.pk, 1500),
            (newer_lot.pk, 500),
        ]

    def test_allocate_writes_nothing(self, older_lot):
        ledger.allocate({'B001003': 100})

        older_lot.refresh_from_db()
        assert older_lot.on_hand == 1500

    def test_empty_lots_are_skipped(self, make_lot, newer_lot):
        make_lot(batch_number='2401', on_hand=0)

        result = ledger.allocate({'B001003': 10})

        assert [line.lot.pk for line in result.lines] == [newer_lot.pk]

    def test_allocate_shipment(self, shipment_lines, older_lot, newer_lot):
        result = ledger.allocate_shipment('SHIP-0412')

        assert result.allocated_for('B001003') == 2000

    def test_check_sufficiency(self, older_lot):
        assert ledger.check_sufficiency({'B001003': 1600}) == {'B001003': 100}

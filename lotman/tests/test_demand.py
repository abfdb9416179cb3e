"""
Tests for demand aggregation.
"""

import pytest

from lotman import ledger
from lotman.exceptions import LedgerError
from lotman.models import ShipmentStatus
from lotman.services.demand import aggregate_demand


class TestAggregateDemand:
    """Tests for aggregate_demand()."""

    def test_repeated_codes_are_summed(self):
        demand = aggregate_demand([('b001003', 1200), ('B001003 ', 800)])

        assert demand == {'B001003': 2000}

    def test_non_positive_and_blank_are_dropped(self):
        demand = aggregate_demand([('P030105', 0), ('P030106', -5), ('', 10), (None, 3), ('X1', None)])

        assert demand == {}

    def test_first_seen_order(self):
        demand = aggregate_demand([('Z9', 1), ('A1', 1), ('Z9', 1)])

        assert list(demand) == ['Z9', 'A1']

    def test_fractional_quantity_is_rejected(self):
        with pytest.raises(LedgerError) as exc:
            aggregate_demand([('B001003', 1.5)])

        assert exc.value.code == 'INVALID_QUANTITY'


@pytest.mark.django_db
class TestShipmentDemand:
    """Tests for ledger.shipment_demand()."""

    def test_open_lines_only(self, shipment_lines):
        """DONE lines carry no demand."""
        assert ledger.shipment_demand('SHIP-0412') == {'B001003': 2000}

    def test_explicit_statuses(self, shipment_lines):
        demand = ledger.shipment_demand('SHIP-0412', statuses=[ShipmentStatus.DONE])

        assert demand == {'P030105': 300}

    def test_unknown_shipment(self, shipment_lines):
        assert ledger.shipment_demand('SHIP-9999') == {}

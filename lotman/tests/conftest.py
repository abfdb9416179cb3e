"""
Pytest fixtures for Lotman tests.
"""

import pytest

from lotman.adapters.catalog import reset_packing_source
from lotman.models import Lot, ShipmentLine, ShipmentStatus, StandardPacking
from lotman.protocols.records import LotSnapshot


@pytest.fixture(autouse=True)
def fresh_packing_source():
    """Each test sees a freshly loaded packing catalogue."""
    reset_packing_source()
    yield
    reset_packing_source()


@pytest.fixture
def make_lot(db):
    """Factory for Lot rows in ASM1."""
    def _make(item_code='B001003', batch_number='2501', on_hand=0, **kwargs):
        kwargs.setdefault('factory', 'ASM1')
        kwargs.setdefault('production_order', 'LSX-01')
        return Lot.objects.create(
            item_code=item_code,
            batch_number=batch_number,
            on_hand=on_hand,
            **kwargs,
        )
    return _make


@pytest.fixture
def older_lot(make_lot):
    """B001003, batch 2501, 1500 on hand."""
    return make_lot(batch_number='2501', on_hand=1500, lot_ref='L1', location='A-01')


@pytest.fixture
def newer_lot(make_lot):
    """B001003, batch 2510, 1000 on hand."""
    return make_lot(batch_number='2510', on_hand=1000, lot_ref='L2', location='A-02')


@pytest.fixture
def packing(db):
    """Standard packing: 250 per carton for B001003."""
    return StandardPacking.objects.create(item_code='B001003', standard=250)


@pytest.fixture
def shipment_lines(db):
    """Open demand for SHIP-0412 (B001003 x 2000 split across two lines)."""
    return [
        ShipmentLine.objects.create(
            factory='ASM1', shipment_code='SHIP-0412', item_code='B001003',
            quantity=1200, status=ShipmentStatus.PENDING,
        ),
        ShipmentLine.objects.create(
            factory='ASM1', shipment_code='SHIP-0412', item_code='b001003 ',
            quantity=800, status=ShipmentStatus.PREPARING,
        ),
        ShipmentLine.objects.create(
            factory='ASM1', shipment_code='SHIP-0412', item_code='P030105',
            quantity=300, status=ShipmentStatus.DONE,
        ),
    ]


@pytest.fixture
def snapshot():
    """Factory for in-memory LotSnapshot (no database)."""
    def _make(item_code='B001003', batch_number='2501', on_hand=0, **kwargs):
        kwargs.setdefault('factory', 'ASM1')
        kwargs.setdefault('production_order', 'LSX-01')
        kwargs.setdefault('lot_ref', '')
        return LotSnapshot(
            item_code=item_code,
            batch_number=batch_number,
            on_hand=on_hand,
            **kwargs,
        )
    return _make

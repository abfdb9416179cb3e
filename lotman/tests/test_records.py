"""
Tests for typed boundary records.
"""

from decimal import Decimal

import pytest

from lotman.exceptions import LedgerError
from lotman.protocols.records import AllocationLine, AllocationResult, LotIdentity, LotSnapshot


class TestLotSnapshotFromDocument:
    """Tests for LotSnapshot.from_document()."""

    def test_valid_document(self):
        lot = LotSnapshot.from_document({
            'factory': 'ASM1',
            'item_code': ' b001003 ',
            'batch_number': '2501',
            'on_hand': '1500',
            'exported': 20.0,
            'pk': 7,
        })

        assert lot.item_code == 'B001003'
        assert lot.on_hand == 1500
        assert lot.exported == 20
        assert lot.planned_export == 0
        assert lot.pk == 7
        assert lot.identity == LotIdentity('ASM1', 'B001003', '2501', '', '')

    @pytest.mark.parametrize('missing', ['factory', 'item_code', 'on_hand'])
    def test_missing_required_field(self, missing):
        """Missing fields fail loudly instead of defaulting to zero."""
        doc = {'factory': 'ASM1', 'item_code': 'B001003', 'on_hand': 10}
        del doc[missing]

        with pytest.raises(LedgerError) as exc:
            LotSnapshot.from_document(doc)

        assert exc.value.code == 'MISSING_FIELD'
        assert exc.value.data['field'] == missing

    def test_non_numeric_quantity(self):
        with pytest.raises(LedgerError) as exc:
            LotSnapshot.from_document({'factory': 'ASM1', 'item_code': 'B1', 'on_hand': 'abc'})

        assert exc.value.code == 'INVALID_FIELD'

    @pytest.mark.parametrize('value', [1.5, Decimal('1.5'), '1.5', float('nan')])
    def test_fractional_quantity(self, value):
        """Fractional quantities are rejected, never truncated."""
        with pytest.raises(LedgerError) as exc:
            LotSnapshot.from_document({'factory': 'ASM1', 'item_code': 'B1', 'on_hand': value})

        assert exc.value.code == 'INVALID_FIELD'
        assert exc.value.data['field'] == 'on_hand'

    def test_whole_decimal_is_accepted(self):
        lot = LotSnapshot.from_document({'factory': 'ASM1', 'item_code': 'B1', 'on_hand': Decimal('12')})

        assert lot.on_hand == 12

    def test_negative_on_hand(self):
        with pytest.raises(LedgerError) as exc:
            LotSnapshot.from_document({'factory': 'ASM1', 'item_code': 'B1', 'on_hand': -5})

        assert exc.value.code == 'INVALID_FIELD'


class TestAllocationRecords:
    """Tests for AllocationLine and AllocationResult."""

    def test_line_is_immutable_copy_on_change(self, snapshot):
        line = AllocationLine(lot=snapshot(on_hand=100), quantity=40, demand_code='B001003')

        changed = line.with_quantity(30).deselect()

        assert line.quantity == 40 and line.selected
        assert changed.quantity == 30 and not changed.selected

    def test_result_helpers(self, snapshot):
        lot = snapshot(on_hand=100)
        result = AllocationResult(
            lines=[
                AllocationLine(lot=lot, quantity=60, demand_code='B001003'),
                AllocationLine(lot=lot, quantity=40, demand_code='B001003', selected=False),
            ],
            shortages={'B001003': 5},
        )

        assert result.has_shortage
        assert result.allocated_for('B001003') == 100
        assert len(result.selected()) == 1


class TestLedgerError:
    """Tests for LedgerError."""

    def test_default_message_and_data(self):
        err = LedgerError('STALE_ALLOCATION', committed=[1, 2])

        assert err.code == 'STALE_ALLOCATION'
        assert err.committed == [1, 2]
        assert 'STALE_ALLOCATION' in str(err)
        assert err.as_dict()['data'] == {'committed': [1, 2]}

    def test_committed_defaults_to_empty(self):
        assert LedgerError('WRITE_FAILURE').committed == []

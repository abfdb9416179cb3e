"""
Tests for lot consolidation.
"""

from datetime import datetime, timezone as dt_timezone

import pytest
from django.core.management import call_command
from django.test import override_settings

from lotman import ledger
from lotman.models import ExportRecord, Lot
from lotman.services.consolidation import merge_lots


def _day(day):
    return datetime(2026, 1, day, tzinfo=dt_timezone.utc)


class TestMergeLots:
    """Tests for merge_lots() on snapshots."""

    def test_exact_duplicates_are_summed(self, snapshot):
        lots = [
            snapshot(on_hand=100, location='A-01', notes='pallet 1', import_date=_day(5), expiry_date=_day(20)),
            snapshot(on_hand=50, location='a-01 ', notes='pallet 2', import_date=_day(3), expiry_date=_day(25)),
        ]

        merged = merge_lots(lots)

        assert len(merged) == 1
        lot = merged[0]
        assert lot.on_hand == 150
        assert lot.notes == 'pallet 1; pallet 2'
        assert lot.import_date == _day(3)
        assert lot.expiry_date == _day(25)
        assert lot.location == 'A-01'

    def test_different_orders_stay_apart(self, snapshot):
        lots = [snapshot(on_hand=1, production_order='LSX-01'), snapshot(on_hand=1, production_order='LSX-02')]

        assert len(merge_lots(lots)) == 2

    def test_collapse_locations(self, snapshot):
        lots = [
            snapshot(on_hand=10, location='A-01'),
            snapshot(on_hand=20, location='B-02'),
            snapshot(on_hand=5, location='A-01'),
        ]

        merged = merge_lots(lots, collapse_locations=True)

        assert len(merged) == 1
        assert merged[0].on_hand == 35
        assert merged[0].location == 'A-01; B-02'

    def test_idempotent(self, snapshot):
        lots = [
            snapshot(on_hand=10, location='A-01', supplier='ACME'),
            snapshot(on_hand=20, location='B-02'),
            snapshot(on_hand=5, location='A-01', supplier='ACME'),
            snapshot(item_code='P030105', on_hand=7),
        ]

        for collapse in (False, True):
            once = merge_lots(lots, collapse_locations=collapse)
            assert merge_lots(once, collapse_locations=collapse) == once

    def test_total_quantity_preserved(self, snapshot):
        lots = [snapshot(on_hand=n, location=loc) for n, loc in [(3, 'A'), (4, 'B'), (5, 'A')]]

        merged = merge_lots(lots, collapse_locations=True)

        assert sum(lot.on_hand for lot in merged) == 12


@pytest.mark.django_db
class TestConsolidate:
    """Tests for ledger.consolidate()."""

    def test_merges_rows_and_repoints_ledger(self, make_lot):
        first = make_lot(batch_number='2501', on_hand=100, location='A-01')
        second = make_lot(batch_number='2501', on_hand=40, location='A-01')
        make_lot(item_code='P030105', on_hand=5)

        records = ledger.reserve(
            [line for line in ledger.allocate({'B001003': 140}).lines if line.lot.pk == second.pk],
            shipment='SHIP-0412',
        )

        report = ledger.consolidate()

        assert (report.before, report.after, report.merged_groups) == (3, 2, 1)
        assert report.deleted == [second.pk]
        first.refresh_from_db()
        assert (first.on_hand, first.exported) == (100, 40)
        assert not Lot.objects.filter(pk=second.pk).exists()
        assert ExportRecord.objects.get().lot_id == first.pk
        records[0].refresh_from_db()
        assert records[0].lot_id == first.pk

    def test_dry_run_writes_nothing(self, make_lot):
        make_lot(on_hand=1, location='A-01')
        make_lot(on_hand=2, location='A-01')

        report = ledger.consolidate(dry_run=True)

        assert report.reduced == 1
        assert Lot.objects.count() == 2

    def test_factory_scope(self, make_lot):
        make_lot(on_hand=1, factory='ASM2')
        make_lot(on_hand=2, factory='ASM2')
        make_lot(on_hand=3)

        report = ledger.consolidate(factory='ASM2')

        assert report.after == 1
        assert Lot.objects.filter(factory='ASM1').count() == 1

    @override_settings(LOTMAN={'WRITE_BATCH_SIZE': 2})
    def test_deletes_in_batches(self, make_lot):
        for _ in range(5):
            make_lot(on_hand=1, location='A-01')

        ledger.consolidate()

        lot = Lot.objects.get()
        assert lot.on_hand == 5

    def test_second_run_is_noop(self, make_lot):
        make_lot(on_hand=1, location='A-01')
        make_lot(on_hand=2, location='B-01')

        ledger.consolidate(collapse_locations=True)
        report = ledger.consolidate(collapse_locations=True)

        assert report.merged_groups == 0
        assert Lot.objects.get().location == 'A-01; B-01'

    def test_duplicate_keys(self, make_lot):
        make_lot(on_hand=1, location='A-01')
        make_lot(on_hand=2, location='A-01')

        assert ledger.duplicate_keys() == [('ASM1', 'B001003', 'LSX-01', 'A-01')]


@pytest.mark.django_db
class TestConsolidateCommand:
    """Tests for the consolidate_lots management command."""

    def test_command(self, make_lot, capsys):
        make_lot(on_hand=1, location='A-01')
        make_lot(on_hand=2, location='A-01')

        call_command('consolidate_lots')

        out = capsys.readouterr().out
        assert Lot.objects.count() == 1
        assert '2 dòng → 1 dòng' in out
        assert '1 dòng đã xoá' in out

    def test_command_dry_run(self, make_lot, capsys):
        make_lot(on_hand=1, location='A-01')
        make_lot(on_hand=2, location='B-01')

        call_command('consolidate_lots', '--collapse-locations', '--dry-run')

        assert Lot.objects.count() == 2
        assert 'sẽ được gộp' in capsys.readouterr().out

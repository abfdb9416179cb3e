"""
Lot consolidation — fold duplicate lot records into one.

Two granularities:
    - exact:     (factory, item_code, production_order, location)
    - collapsed: (factory, item_code, production_order), locations
                 joined as "A; B"

Merge rule per group: quantities are summed, the earliest import date
and the latest expiry date are kept, free text is joined with "; "
(empties skipped). The first record of a group provides everything else.

merge_lots(merge_lots(S)) == merge_lots(S).
"""

import logging
from dataclasses import dataclass, field, replace
from typing import Iterable

from django.db import transaction
from django.utils import timezone

from lotman.conf import lotman_settings
from lotman.matching import normalize_code
from lotman.protocols.records import LotSnapshot

logger = logging.getLogger('lotman')

SEPARATOR = '; '

SUMMED_FIELDS = ('on_hand', 'exported', 'planned_export', 'opening_stock')
JOINED_FIELDS = ('notes', 'remarks', 'supplier')


def group_key(lot: LotSnapshot, collapse_locations: bool = False) -> tuple:
    key = (lot.factory, normalize_code(lot.item_code), lot.production_order.strip().upper())
    if collapse_locations:
        return key
    return key + (lot.location.strip().upper(),)


def group_lots(lots: Iterable[LotSnapshot],
               collapse_locations: bool = False) -> list[list[LotSnapshot]]:
    """Group records by natural key, preserving first-seen order."""
    groups: dict[tuple, list[LotSnapshot]] = {}
    for lot in lots:
        groups.setdefault(group_key(lot, collapse_locations), []).append(lot)
    return list(groups.values())


def _join(values: Iterable[str]) -> str:
    return SEPARATOR.join(v.strip() for v in values if v and v.strip())


def _unique_locations(group: list[LotSnapshot]) -> str:
    seen: list[str] = []
    for lot in group:
        for part in lot.location.split(';'):
            part = part.strip()
            if part and part not in seen:
                seen.append(part)
    return SEPARATOR.join(seen)


def merge_group(group: list[LotSnapshot], collapse_locations: bool = False) -> LotSnapshot:
    """Merge one group into a single record (a singleton is returned as is)."""
    if len(group) == 1:
        return group[0]

    base = group[0]
    import_dates = [lot.import_date for lot in group if lot.import_date is not None]
    expiry_dates = [lot.expiry_date for lot in group if lot.expiry_date is not None]

    changes = {name: sum(getattr(lot, name) for lot in group) for name in SUMMED_FIELDS}
    changes.update({name: _join(getattr(lot, name) for lot in group) for name in JOINED_FIELDS})
    changes['import_date'] = min(import_dates) if import_dates else None
    changes['expiry_date'] = max(expiry_dates) if expiry_dates else None
    if collapse_locations:
        changes['location'] = _unique_locations(group)

    return replace(base, **changes)


def merge_lots(lots: Iterable[LotSnapshot],
               collapse_locations: bool = False) -> list[LotSnapshot]:
    """
    Consolidate a factory's records.

    With collapse_locations, the exact pass runs first and a second pass
    folds the remaining per-location records of the same item + order.
    """
    merged = [merge_group(group) for group in group_lots(lots)]
    if collapse_locations:
        merged = [
            merge_group(group, collapse_locations=True)
            for group in group_lots(merged, collapse_locations=True)
        ]
    return merged


@dataclass
class ConsolidationReport:
    """What a consolidation run changed (or would change, on dry run)."""

    factory: str
    before: int = 0
    after: int = 0
    merged_groups: int = 0
    deleted: list[int] = field(default_factory=list)
    dry_run: bool = False

    @property
    def reduced(self) -> int:
        return self.before - self.after


def _chunks(items: list, size: int):
    for start in range(0, len(items), size):
        yield items[start:start + size]


class LedgerConsolidation:
    """Persisted consolidation of duplicate lots."""

    @classmethod
    def consolidate(cls, factory=None, collapse_locations=False, dry_run=False):
        """
        Merge duplicate lots of a factory in the store.

        The first row of each group (lowest pk) receives the merged
        values; the other rows are deleted in chunks of WRITE_BATCH_SIZE
        after their ledger references are moved to the surviving row.

        Returns:
            ConsolidationReport
        """
        from lotman.models.export import ExportRecord
        from lotman.models.lot import Lot
        from lotman.models.outbound import OutboundRecord

        factory = factory or lotman_settings.DEFAULT_FACTORY
        batch_size = lotman_settings.WRITE_BATCH_SIZE
        report = ConsolidationReport(factory=factory, dry_run=dry_run)

        with transaction.atomic():
            rows = list(
                Lot.objects.select_for_update().filter(factory=factory).order_by('pk')
            )
            report.before = len(rows)

            snapshots = [row.snapshot() for row in rows]
            groups = group_lots(snapshots)
            if collapse_locations:
                groups = cls._regroup(groups)

            report.after = len(groups)
            for group in groups:
                if len(group) < 2:
                    continue

                report.merged_groups += 1
                merged = merge_group(group, collapse_locations=collapse_locations)
                survivor = group[0].pk
                doomed = [lot.pk for lot in group[1:]]
                report.deleted.extend(doomed)

                logger.warning(
                    "ledger.consolidate.group",
                    extra={
                        "factory": factory,
                        "item_code": merged.item_code,
                        "production_order": merged.production_order,
                        "rows": len(group),
                        "on_hand": merged.on_hand,
                        "dry_run": dry_run,
                    },
                )
                if dry_run:
                    continue

                Lot.objects.filter(pk=survivor).update(
                    **{name: getattr(merged, name) for name in SUMMED_FIELDS + JOINED_FIELDS},
                    location=merged.location,
                    import_date=merged.import_date,
                    expiry_date=merged.expiry_date,
                    updated_at=timezone.now(),
                )
                for chunk in _chunks(doomed, batch_size):
                    ExportRecord.objects.filter(lot_id__in=chunk).update(lot_id=survivor)
                    OutboundRecord.objects.filter(lot_id__in=chunk).update(lot_id=survivor)
                    Lot.objects.filter(pk__in=chunk).delete()

        logger.info(
            "ledger.consolidate.done",
            extra={
                "factory": factory,
                "before": report.before,
                "after": report.after,
                "dry_run": dry_run,
            },
        )
        return report

    @staticmethod
    def _regroup(groups):
        """
        Second pass: fold exact groups sharing item + order.

        Keeps every original row (not the merged view) so the store
        update can address them by pk.
        """
        folded: dict[tuple, list[LotSnapshot]] = {}
        for group in groups:
            key = group_key(group[0], collapse_locations=True)
            folded.setdefault(key, []).extend(group)
        return list(folded.values())

    @classmethod
    def duplicate_keys(cls, factory=None):
        """Natural keys that occur on more than one lot row."""
        from lotman.models.lot import Lot

        factory = factory or lotman_settings.DEFAULT_FACTORY
        snapshots = [lot.snapshot() for lot in Lot.objects.filter(factory=factory).order_by('pk')]
        return [
            group_key(group[0])
            for group in group_lots(snapshots)
            if len(group) > 1
        ]

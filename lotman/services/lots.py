"""
Lot queries — read-only operations against the lots collection.

No locking here: results are snapshots that may be stale by the time a
reservation commits (the reservation re-checks under lock).
"""

from django.db.models import Sum
from django.db.models.functions import Coalesce

from lotman.conf import lotman_settings
from lotman.fifo import sort_fifo
from lotman.matching import normalize_code
from lotman.models.export import ExportRecord
from lotman.models.lot import Lot
from lotman.protocols.records import LotIdentity, LotSnapshot


class LedgerQueries:
    """Read-only lot query methods."""

    @classmethod
    def lots_for(cls, item_code, factory=None, include_empty=False) -> list[Lot]:
        """
        Lots matching `item_code` (exact or prefix variant), oldest first.

        Args:
            item_code: Demand item code
            factory: Factory scope (None = DEFAULT_FACTORY)
            include_empty: Keep lots with nothing on hand
        """
        factory = factory or lotman_settings.DEFAULT_FACTORY
        qs = Lot.objects.for_factory(factory).candidates_for(item_code)
        if not include_empty:
            qs = qs.in_stock()
        return sort_fifo(lot for lot in qs if lot.matches(item_code))

    @classmethod
    def snapshot_for(cls, item_codes, factory=None) -> list[LotSnapshot]:
        """
        One consistent snapshot covering several demand codes.

        A lot matched by two codes appears once.
        """
        seen: dict[int, LotSnapshot] = {}
        for code in item_codes:
            for lot in cls.lots_for(code, factory):
                seen.setdefault(lot.pk, lot.snapshot())
        return sort_fifo(seen.values())

    @classmethod
    def on_hand(cls, item_code, factory=None) -> int:
        """Total on hand across all lots matching `item_code`."""
        return sum(lot.on_hand for lot in cls.lots_for(item_code, factory))

    @classmethod
    def get_lot(cls, identity: LotIdentity) -> Lot | None:
        """Lot by exact identity (oldest row if duplicates exist)."""
        return Lot.objects.with_identity(identity).order_by('pk').first()

    @classmethod
    def exported_total(cls, identity: LotIdentity) -> int:
        """Sum of export entries recorded against a lot identity."""
        return ExportRecord.objects.filter(**identity.as_filter()).aggregate(
            t=Coalesce(Sum('quantity'), 0)
        )['t']

    @classmethod
    def list_lots(cls, factory=None, item_code=None, include_empty=False):
        """List lots with filters (queryset, unsorted)."""
        qs = Lot.objects.for_factory(factory or lotman_settings.DEFAULT_FACTORY)
        if item_code:
            qs = qs.filter(item_code__iexact=normalize_code(item_code))
        if not include_empty:
            qs = qs.in_stock()
        return qs

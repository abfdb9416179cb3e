"""
Lot model — a separately tracked quantity of one item.
"""

from django.db import models
from django.utils.translation import gettext_lazy as _

from lotman.matching import codes_match, search_prefix
from lotman.protocols.records import LotIdentity, LotSnapshot


class LotQuerySet(models.QuerySet):
    """Custom QuerySet for Lot with convenience filters."""

    def for_factory(self, factory):
        """Filter lots in one factory scope."""
        return self.filter(factory=factory)

    def candidates_for(self, item_code):
        """
        Lots whose item code may match `item_code`.

        Store-side narrowing only: refine with matching.codes_match().
        """
        value, is_prefix = search_prefix(item_code)
        if is_prefix:
            return self.filter(item_code__istartswith=value)
        return self.filter(item_code__iexact=value)

    def in_stock(self):
        """Lots with something left on hand."""
        return self.filter(on_hand__gt=0)

    def with_identity(self, identity: LotIdentity):
        """Exact identity lookup (factory, item, batch, order, lot)."""
        return self.filter(**identity.as_filter())


class Lot(models.Model):
    """
    On-hand quantity of an item for one (batch, production order, lot ref).

    Identity = (factory, item_code, batch_number, production_order, lot_ref).
    The identity is not enforced as unique: imports can create duplicates,
    which consolidation folds back together.

    on_hand only changes through reservation (decrement) and reversal
    (re-increment), both under a row lock.
    """

    factory = models.CharField(
        max_length=20,
        db_index=True,
        verbose_name=_('Nhà máy'),
    )
    item_code = models.CharField(
        max_length=50,
        db_index=True,
        verbose_name=_('Mã hàng'),
    )
    batch_number = models.CharField(
        max_length=50,
        blank=True,
        default='',
        verbose_name=_('Batch'),
    )
    production_order = models.CharField(
        max_length=50,
        blank=True,
        default='',
        verbose_name=_('LSX / PO'),
    )
    lot_ref = models.CharField(
        max_length=50,
        blank=True,
        default='',
        verbose_name=_('Lot'),
    )
    location = models.CharField(
        max_length=255,
        blank=True,
        default='',
        verbose_name=_('Vị trí'),
    )

    # Quantities
    on_hand = models.PositiveIntegerField(
        default=0,
        verbose_name=_('Tồn kho'),
    )
    opening_stock = models.PositiveIntegerField(
        default=0,
        verbose_name=_('Tồn đầu'),
    )
    exported = models.PositiveIntegerField(
        default=0,
        verbose_name=_('Đã xuất'),
    )
    planned_export = models.PositiveIntegerField(
        default=0,
        verbose_name=_('Cần xuất'),
    )

    # Dates
    import_date = models.DateTimeField(
        null=True,
        blank=True,
        verbose_name=_('Ngày nhập'),
    )
    expiry_date = models.DateTimeField(
        null=True,
        blank=True,
        verbose_name=_('Hạn sử dụng'),
    )

    # Free text
    notes = models.TextField(blank=True, default='', verbose_name=_('Ghi chú'))
    remarks = models.TextField(blank=True, default='', verbose_name=_('Nhận xét'))
    supplier = models.CharField(
        max_length=255,
        blank=True,
        default='',
        verbose_name=_('Nhà cung cấp'),
    )

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    objects = LotQuerySet.as_manager()

    class Meta:
        verbose_name = _('Lô hàng')
        verbose_name_plural = _('Lô hàng')
        indexes = [
            models.Index(fields=['factory', 'item_code'], name='lotman_lot_factory_item_idx'),
            models.Index(fields=['factory', 'item_code', 'batch_number',
                                 'production_order', 'lot_ref'],
                         name='lotman_lot_identity_idx'),
        ]

    @property
    def identity(self) -> LotIdentity:
        return LotIdentity(
            self.factory, self.item_code, self.batch_number,
            self.production_order, self.lot_ref,
        )

    def matches(self, item_code: str) -> bool:
        """Does this lot satisfy a demand for `item_code`?"""
        return codes_match(item_code, self.item_code)

    def snapshot(self) -> LotSnapshot:
        """Typed, immutable view of this row."""
        return LotSnapshot(
            factory=self.factory,
            item_code=self.item_code.strip().upper(),
            batch_number=self.batch_number,
            production_order=self.production_order,
            lot_ref=self.lot_ref,
            on_hand=self.on_hand,
            location=self.location,
            exported=self.exported,
            planned_export=self.planned_export,
            opening_stock=self.opening_stock,
            import_date=self.import_date,
            expiry_date=self.expiry_date,
            notes=self.notes,
            remarks=self.remarks,
            supplier=self.supplier,
            pk=self.pk,
        )

    def __str__(self) -> str:
        batch = f" #{self.batch_number}" if self.batch_number else ""
        return f"{self.item_code}{batch} [{self.factory}]: {self.on_hand}"

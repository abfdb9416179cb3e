"""
OutboundRecord model — one committed allocation line of a shipment.
"""

from django.db import models
from django.utils import timezone
from django.utils.translation import gettext_lazy as _

from lotman.protocols.records import LotIdentity


class OutboundQuerySet(models.QuerySet):
    """Custom QuerySet for OutboundRecord."""

    def approved(self):
        return self.filter(approved=True)

    def pending(self):
        return self.filter(approved=False)

    def for_shipment(self, shipment, factory=None):
        qs = self.filter(shipment=shipment)
        if factory is not None:
            qs = qs.filter(factory=factory)
        return qs


class OutboundRecord(models.Model):
    """
    Outbound ("Xuất kho") line.

    INVARIANT:

        approved == True  ⇔  a matching ExportRecord exists
                          ⇔  the lot was decremented by `quantity` once

    The flag only flips inside the same transaction that writes (or
    deletes) the export entry and moves the lot quantity.
    """

    factory = models.CharField(max_length=20, db_index=True, verbose_name=_('Nhà máy'))
    shipment = models.CharField(max_length=50, db_index=True, verbose_name=_('Shipment'))
    customer_code = models.CharField(max_length=50, blank=True, default='', verbose_name=_('Mã khách'))

    item_code = models.CharField(max_length=50, db_index=True, verbose_name=_('Mã hàng'))
    batch_number = models.CharField(max_length=50, blank=True, default='', verbose_name=_('Batch'))
    production_order = models.CharField(max_length=50, blank=True, default='', verbose_name=_('LSX / PO'))
    lot_ref = models.CharField(max_length=50, blank=True, default='', verbose_name=_('Lot'))
    location = models.CharField(max_length=255, blank=True, default='', verbose_name=_('Vị trí'))

    quantity = models.PositiveIntegerField(verbose_name=_('Số lượng'))
    standard = models.PositiveIntegerField(default=0, verbose_name=_('Standard'))
    carton = models.PositiveIntegerField(default=0, verbose_name=_('Carton'))
    odd = models.PositiveIntegerField(default=0, verbose_name=_('ODD'))

    push_no = models.CharField(max_length=20, blank=True, default='', verbose_name=_('PushNo'))
    notes = models.TextField(blank=True, default='', verbose_name=_('Ghi chú'))

    lot = models.ForeignKey(
        'lotman.Lot',
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name='outbound_records',
        verbose_name=_('Lô hàng'),
    )

    approved = models.BooleanField(default=False, db_index=True, verbose_name=_('Đã duyệt'))
    approved_by = models.CharField(max_length=150, blank=True, default='', verbose_name=_('Người duyệt'))
    approved_at = models.DateTimeField(null=True, blank=True, verbose_name=_('Ngày duyệt'))

    export_date = models.DateTimeField(default=timezone.now, verbose_name=_('Ngày xuất'))
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    objects = OutboundQuerySet.as_manager()

    class Meta:
        verbose_name = _('Phiếu xuất')
        verbose_name_plural = _('Phiếu xuất')
        ordering = ['export_date', 'pk']
        indexes = [
            models.Index(fields=['factory', 'shipment'], name='lotman_outbound_shipment_idx'),
            models.Index(fields=['approved', 'factory'], name='lotman_outbound_approved_idx'),
        ]

    @property
    def identity(self) -> LotIdentity:
        return LotIdentity(
            self.factory, self.item_code, self.batch_number,
            self.production_order, self.lot_ref,
        )

    def export_key(self) -> dict[str, str]:
        """Filter kwargs locating the export entry that mirrors this record."""
        return {
            **self.identity.as_filter(),
            'shipment': self.shipment,
            'push_no': self.push_no,
        }

    def __str__(self) -> str:
        mark = '✓' if self.approved else '⏳'
        return f"{mark} {self.quantity}x {self.item_code} #{self.batch_number} → {self.shipment}"

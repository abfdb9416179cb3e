"""
ExportRecord model — "this quantity left this lot for this shipment".
"""

from django.db import models
from django.utils import timezone
from django.utils.translation import gettext_lazy as _

from lotman.protocols.records import LotIdentity


class ExportRecord(models.Model):
    """
    Immutable export ledger entry.

    Rules:
    - Key and quantity never change (only the lot link follows consolidation)
    - Created only by reservation, deleted only by reversal
    - Identity = lot identity + shipment + push_no
    """

    factory = models.CharField(max_length=20, db_index=True, verbose_name=_('Nhà máy'))
    item_code = models.CharField(max_length=50, db_index=True, verbose_name=_('Mã hàng'))
    batch_number = models.CharField(max_length=50, blank=True, default='', verbose_name=_('Batch'))
    production_order = models.CharField(max_length=50, blank=True, default='', verbose_name=_('LSX / PO'))
    lot_ref = models.CharField(max_length=50, blank=True, default='', verbose_name=_('Lot'))
    shipment = models.CharField(max_length=50, db_index=True, verbose_name=_('Shipment'))
    push_no = models.CharField(max_length=20, blank=True, default='', verbose_name=_('PushNo'))

    quantity = models.PositiveIntegerField(verbose_name=_('Số lượng'))

    lot = models.ForeignKey(
        'lotman.Lot',
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name='exports',
        verbose_name=_('Lô hàng'),
    )
    outbound = models.ForeignKey(
        'lotman.OutboundRecord',
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name='exports',
        verbose_name=_('Phiếu xuất'),
    )

    approved_by = models.CharField(max_length=150, blank=True, default='', verbose_name=_('Người duyệt'))
    approved_at = models.DateTimeField(default=timezone.now, db_index=True, verbose_name=_('Ngày duyệt'))
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        verbose_name = _('Bản ghi xuất kho')
        verbose_name_plural = _('Bản ghi xuất kho')
        ordering = ['approved_at']
        indexes = [
            models.Index(fields=['factory', 'item_code', 'batch_number',
                                 'production_order', 'lot_ref', 'shipment', 'push_no'],
                         name='lotman_export_key_idx'),
        ]

    @property
    def identity(self) -> LotIdentity:
        return LotIdentity(
            self.factory, self.item_code, self.batch_number,
            self.production_order, self.lot_ref,
        )

    def save(self, *args, **kwargs):
        """Save export entry; existing entries are immutable."""
        if self.pk:
            raise ValueError(
                "Bản ghi xuất kho không được sửa. "
                "Để hoàn tác, hãy bỏ duyệt phiếu xuất tương ứng."
            )
        if self.quantity is None or self.quantity <= 0:
            raise ValueError("Số lượng xuất phải dương")
        super().save(*args, **kwargs)

    def __str__(self) -> str:
        return f"-{self.quantity} {self.item_code} #{self.batch_number} → {self.shipment}"

"""
ShipmentLine model — what a shipment needs, per item.
"""

from django.db import models
from django.utils.translation import gettext_lazy as _

from lotman.models.enums import ShipmentStatus


class ShipmentLine(models.Model):
    """
    One requested item of a shipment.

    Several lines may carry the same item code; demand aggregation sums
    them.
    """

    factory = models.CharField(max_length=20, db_index=True, verbose_name=_('Nhà máy'))
    shipment_code = models.CharField(max_length=50, db_index=True, verbose_name=_('Shipment'))
    item_code = models.CharField(max_length=50, verbose_name=_('Mã hàng'))
    customer_code = models.CharField(max_length=50, blank=True, default='', verbose_name=_('Mã khách'))
    quantity = models.IntegerField(verbose_name=_('Số lượng'))
    po_ship = models.CharField(max_length=50, blank=True, default='', verbose_name=_('PO Ship'))
    push_no = models.CharField(max_length=20, blank=True, default='', verbose_name=_('PushNo'))
    status = models.CharField(
        max_length=20,
        choices=ShipmentStatus.choices,
        default=ShipmentStatus.PENDING,
        db_index=True,
        verbose_name=_('Trạng thái'),
    )
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        verbose_name = _('Dòng shipment')
        verbose_name_plural = _('Dòng shipment')
        ordering = ['shipment_code', 'pk']
        indexes = [
            models.Index(fields=['shipment_code', 'status'], name='lotman_shipment_status_idx'),
        ]

    def __str__(self) -> str:
        return f"{self.shipment_code}: {self.quantity}x {self.item_code}"

"""
StandardPacking model — units per carton for an item.
"""

from django.db import models
from django.utils.translation import gettext_lazy as _


class StandardPacking(models.Model):
    """Catalogue entry: how many units of an item fill one carton."""

    item_code = models.CharField(
        max_length=50,
        unique=True,
        verbose_name=_('Mã hàng'),
    )
    standard = models.PositiveIntegerField(
        verbose_name=_('Standard'),
        help_text=_('Số lượng trên một thùng'),
    )
    customer = models.CharField(max_length=100, blank=True, default='', verbose_name=_('Khách hàng'))
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        verbose_name = _('Quy cách đóng gói')
        verbose_name_plural = _('Quy cách đóng gói')
        ordering = ['item_code']

    def save(self, *args, **kwargs):
        self.item_code = (self.item_code or '').strip().upper()
        super().save(*args, **kwargs)

    def __str__(self) -> str:
        return f"{self.item_code}: {self.standard}/thùng"

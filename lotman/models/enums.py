"""
Enums for Lotman models.
"""

from django.db import models
from django.utils.translation import gettext_lazy as _


class ShipmentStatus(models.TextChoices):
    """Shipment line lifecycle status."""
    PENDING = 'pending', _('Chờ soạn')         # Waiting to be picked
    PREPARING = 'preparing', _('Đang soạn')    # Picking in progress
    DONE = 'done', _('Đã xong')                # Picked and approved
    SHIPPED = 'shipped', _('Đã ship')          # Left the warehouse
    DELAYED = 'delayed', _('Delay')            # Postponed by the customer


class ReversalStatus(models.TextChoices):
    """Outcome of undoing an approved outbound record."""
    REVERSED = 'reversed', _('Đã hoàn tác')
    MISSING_EXPORT = 'missing_export', _('Thiếu bản ghi xuất')
    RELEASED_WITHOUT_EXPORT = 'released_without_export', _('Bỏ duyệt, thiếu bản ghi xuất')

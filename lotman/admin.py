"""
Lotman Admin.

Provides views for warehouse operators:
- Lot: read-only (stock only changes via the ledger service)
- ExportRecord: read-only audit trail
- OutboundRecord: read-only with "reverse approval" action
- ShipmentLine: editable demand
- StandardPacking: editable packing catalogue
"""

import logging

from django.contrib import admin
from django.utils.translation import gettext_lazy as _

from lotman.adapters.catalog import get_packing_source
from lotman.exceptions import LedgerError
from lotman.models import ExportRecord, Lot, OutboundRecord, ShipmentLine, StandardPacking

logger = logging.getLogger(__name__)


class ReadOnlyAdmin(admin.ModelAdmin):
    """Admin without add/change/delete."""

    def has_add_permission(self, request):
        return False

    def has_change_permission(self, request, obj=None):
        return False

    def has_delete_permission(self, request, obj=None):
        return False


# =========================================================================
# LOT ADMIN (read-only)
# =========================================================================

@admin.register(Lot)
class LotAdmin(ReadOnlyAdmin):
    """Lot admin — read-only."""

    list_display = ['item_code', 'batch_number', 'production_order', 'lot_ref',
                    'factory', 'location', 'on_hand', 'exported', 'import_date']
    list_filter = ['factory']
    search_fields = ['item_code', 'batch_number', 'production_order', 'lot_ref']
    readonly_fields = ['factory', 'item_code', 'batch_number', 'production_order',
                       'lot_ref', 'location', 'on_hand', 'opening_stock', 'exported',
                       'planned_export', 'import_date', 'expiry_date', 'notes',
                       'remarks', 'supplier', 'created_at', 'updated_at']
    ordering = ['factory', 'item_code', 'batch_number']


# =========================================================================
# EXPORT RECORD ADMIN (read-only audit trail)
# =========================================================================

@admin.register(ExportRecord)
class ExportRecordAdmin(ReadOnlyAdmin):
    """ExportRecord admin — read-only. Immutable ledger."""

    list_display = ['approved_at', 'shipment', 'push_no', 'item_code',
                    'batch_number', 'quantity', 'approved_by']
    list_filter = ['factory', 'approved_at']
    search_fields = ['shipment', 'item_code', 'batch_number', 'push_no']
    readonly_fields = ['factory', 'item_code', 'batch_number', 'production_order',
                       'lot_ref', 'shipment', 'push_no', 'quantity', 'lot',
                       'outbound', 'approved_by', 'approved_at', 'created_at']
    date_hierarchy = 'approved_at'


# =========================================================================
# OUTBOUND RECORD ADMIN (read-only with reverse action)
# =========================================================================

@admin.register(OutboundRecord)
class OutboundRecordAdmin(ReadOnlyAdmin):
    """OutboundRecord admin — read-only with reverse action."""

    list_display = ['id', 'shipment', 'item_code', 'batch_number', 'quantity',
                    'carton', 'odd', 'push_no', 'approved', 'approved_by']
    list_filter = ['approved', 'factory']
    search_fields = ['shipment', 'item_code', 'batch_number', 'push_no', 'customer_code']
    readonly_fields = ['factory', 'shipment', 'customer_code', 'item_code',
                       'batch_number', 'production_order', 'lot_ref', 'location',
                       'quantity', 'standard', 'carton', 'odd', 'push_no', 'notes',
                       'lot', 'approved', 'approved_by', 'approved_at',
                       'export_date', 'created_at', 'updated_at']
    actions = ['reverse_records']

    @admin.action(description=_('Bỏ duyệt các phiếu xuất đã chọn'))
    def reverse_records(self, request, queryset):
        from lotman import ledger

        count = 0
        for record in queryset.filter(approved=True):
            try:
                result = ledger.reverse(record, actor=request.user.get_username())
            except LedgerError as exc:
                logger.warning("reverse_records: failed to reverse %s: %s", record.pk, exc)
                continue
            if result.reversed:
                count += 1

        self.message_user(request, _('{count} phiếu xuất đã bỏ duyệt.').format(count=count))


# =========================================================================
# SHIPMENT LINE ADMIN
# =========================================================================

@admin.register(ShipmentLine)
class ShipmentLineAdmin(admin.ModelAdmin):
    """ShipmentLine admin — demand entry."""

    list_display = ['shipment_code', 'item_code', 'quantity', 'customer_code',
                    'po_ship', 'status', 'factory']
    list_filter = ['status', 'factory']
    search_fields = ['shipment_code', 'item_code', 'po_ship']
    readonly_fields = ['created_at', 'updated_at']


# =========================================================================
# STANDARD PACKING ADMIN
# =========================================================================

@admin.register(StandardPacking)
class StandardPackingAdmin(admin.ModelAdmin):
    """StandardPacking admin — units per carton."""

    list_display = ['item_code', 'standard', 'customer', 'updated_at']
    search_fields = ['item_code', 'customer']
    readonly_fields = ['updated_at']

    def save_model(self, request, obj, form, change):
        super().save_model(request, obj, form, change)
        get_packing_source().invalidate()

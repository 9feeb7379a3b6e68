"""
Ledgerman Admin.

- Product: cost metadata and thresholds editable, on_hand read-only
  (stock only changes via the Stock service), "audit" action
- StockMovement: read-only audit trail
"""

import logging

from django.contrib import admin
from django.utils.translation import gettext_lazy as _

from ledgerman.exceptions import StockError
from ledgerman.models import Product, StockMovement
from ledgerman.services.audit import audit_product

logger = logging.getLogger(__name__)


# =========================================================================
# PRODUCT ADMIN
# =========================================================================

@admin.register(Product)
class ProductAdmin(admin.ModelAdmin):
    """Product admin — on_hand is read-only."""

    list_display = ['id', 'name', 'on_hand', 'low_stock_threshold', 'cost_cny',
                    'is_low_stock_display', 'updated_at']
    search_fields = ['id', 'name']
    readonly_fields = ['on_hand', 'updated_at']
    actions = ['audit_ledger']

    def has_delete_permission(self, request, obj=None):
        return False

    @admin.display(description=_('재고 부족'), boolean=True)
    def is_low_stock_display(self, obj):
        return obj.is_low_stock

    @admin.action(description=_('선택한 상품의 재고 원장 검증'))
    def audit_ledger(self, request, queryset):
        broken = 0
        for product in queryset:
            try:
                report = audit_product(product.pk)
            except StockError as exc:
                logger.warning("audit_ledger: failed to audit %s: %s", product.pk, exc)
                continue
            if not report.ok:
                broken += 1
                for issue in report.issues:
                    self.message_user(request, f"{product.pk}: {issue}", level='warning')

        self.message_user(
            request,
            _('{count}개 상품 검증, {broken}개 불일치.').format(
                count=queryset.count(), broken=broken,
            ),
        )


# =========================================================================
# STOCK MOVEMENT ADMIN (read-only audit trail)
# =========================================================================

@admin.register(StockMovement)
class StockMovementAdmin(admin.ModelAdmin):
    """StockMovement admin — read-only. Immutable audit trail."""

    list_display = ['created_at', 'product', 'movement_type', 'quantity',
                    'previous_quantity', 'new_quantity', 'reason', 'created_by']
    list_filter = ['movement_type', 'skip_cashbook', 'created_at']
    search_fields = ['product__id', 'product__name', 'reason', 'notes', 'reference_no']
    readonly_fields = ['product', 'movement_type', 'quantity', 'previous_quantity',
                       'new_quantity', 'cost_per_unit', 'reason', 'notes',
                       'reference_no', 'skip_cashbook', 'created_by', 'created_at']
    date_hierarchy = 'created_at'

    def has_add_permission(self, request):
        return False

    def has_change_permission(self, request, obj=None):
        return False

    def has_delete_permission(self, request, obj=None):
        return False

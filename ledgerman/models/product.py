"""
Product model — on-hand balance and cost metadata.
"""

import uuid
from decimal import Decimal

from django.db import models
from django.db.models import F
from django.utils.translation import gettext_lazy as _


def _new_product_id() -> str:
    return uuid.uuid4().hex


class ProductQuerySet(models.QuerySet):
    """QuerySet helpers for stock-level filters."""

    def low_stock(self):
        """Products at or below their (non-zero) low stock threshold."""
        return self.filter(
            low_stock_threshold__gt=0,
            on_hand__lte=F('low_stock_threshold'),
        )

    def out_of_stock(self):
        return self.filter(on_hand=0)


class Product(models.Model):
    """
    Stock-relevant slice of a catalog product.

    Name, SKU, pricing and images belong to the catalog. This model only
    holds what the ledger needs.

    IMPORTANT: ``on_hand`` is written exclusively by ReconciliationEngine
    through ProductStore.set_on_hand(). Everything else reads it.
    """

    id = models.CharField(
        primary_key=True,
        max_length=64,
        default=_new_product_id,
        editable=False,
        verbose_name=_('상품 ID'),
    )
    name = models.CharField(
        max_length=200,
        blank=True,
        default='',
        verbose_name=_('상품명'),
    )
    on_hand = models.PositiveIntegerField(
        default=0,
        verbose_name=_('현재 재고'),
    )
    low_stock_threshold = models.PositiveIntegerField(
        default=0,
        verbose_name=_('재고 부족 기준'),
        help_text=_('0 = 알림 없음'),
    )
    cost_cny = models.DecimalField(
        max_digits=12,
        decimal_places=2,
        default=Decimal('0'),
        verbose_name=_('원가 (CNY)'),
    )
    updated_at = models.DateTimeField(auto_now=True, verbose_name=_('수정일시'))

    objects = ProductQuerySet.as_manager()

    class Meta:
        verbose_name = _('상품 재고')
        verbose_name_plural = _('상품 재고')
        ordering = ['id']
        indexes = [
            models.Index(fields=['on_hand'], name='ledgerman_product_onhand_idx'),
        ]

    def save(self, *args, **kwargs):
        """
        Insert writes every field. Updates never write on_hand, so a stale
        instance (e.g. an admin change form) cannot revert the balance.
        """
        if not self._state.adding:
            update_fields = kwargs.get('update_fields')
            if update_fields is None:
                update_fields = [
                    f.name for f in self._meta.concrete_fields if not f.primary_key
                ]
            kwargs['update_fields'] = [f for f in update_fields if f != 'on_hand']
        super().save(*args, **kwargs)

    @property
    def is_low_stock(self) -> bool:
        return 0 < self.low_stock_threshold and self.on_hand <= self.low_stock_threshold

    def __str__(self) -> str:
        label = self.name or self.id
        return f"{label}: {self.on_hand}"

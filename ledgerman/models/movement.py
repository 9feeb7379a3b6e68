"""
StockMovement model — Immutable ledger of on-hand changes.
"""

from django.db import models
from django.utils import timezone
from django.utils.translation import gettext_lazy as _

from ledgerman.models.enums import MovementType


IMMUTABLE_MESSAGE = (
    "재고 이동 기록은 변경할 수 없습니다. "
    "정정하려면 반대 수량의 조정 이동을 새로 기록하세요."
)


class StockMovementQuerySet(models.QuerySet):
    """QuerySet that refuses bulk mutation of ledger rows."""

    def update(self, **kwargs):
        raise ValueError(IMMUTABLE_MESSAGE)

    def delete(self):
        raise ValueError(IMMUTABLE_MESSAGE)

    def for_product(self, product_id):
        return self.filter(product_id=product_id)

    def newest_first(self):
        return self.order_by('-created_at', '-id')

    def causal(self):
        """Order in which the balance changes were applied."""
        return self.order_by('id')


class StockMovement(models.Model):
    """
    Immutable record of one on-hand change.

    Rules:
    - NEVER update() or delete()
    - Corrections are new ADJUSTMENT movements with the opposite delta
    - Created only by ReconciliationEngine, in the same transaction as the
      Product.on_hand write it describes

    Continuity:
        new_quantity == max(0, previous_quantity + quantity)
    """

    product = models.ForeignKey(
        'ledgerman.Product',
        on_delete=models.PROTECT,
        related_name='movements',
        verbose_name=_('상품'),
    )
    movement_type = models.CharField(
        max_length=20,
        choices=MovementType.choices,
        verbose_name=_('유형'),
    )
    quantity = models.IntegerField(
        verbose_name=_('변동 수량'),
        help_text=_('양수 = 입고/회수, 음수 = 판매/손실'),
    )
    previous_quantity = models.PositiveIntegerField(verbose_name=_('변경 전 재고'))
    new_quantity = models.PositiveIntegerField(verbose_name=_('변경 후 재고'))

    cost_per_unit = models.DecimalField(
        max_digits=12,
        decimal_places=2,
        null=True,
        blank=True,
        verbose_name=_('단가'),
    )
    reason = models.CharField(max_length=255, blank=True, default='', verbose_name=_('사유'))
    notes = models.TextField(blank=True, default='', verbose_name=_('메모'))
    reference_no = models.CharField(
        max_length=100,
        blank=True,
        default='',
        verbose_name=_('참조 번호'),
        help_text=_('예: 입고 송장 번호, 발주 번호'),
    )
    skip_cashbook = models.BooleanField(
        default=False,
        verbose_name=_('출납장부 제외'),
    )

    created_by = models.CharField(max_length=100, blank=True, default='', verbose_name=_('작성자'))
    created_at = models.DateTimeField(default=timezone.now, db_index=True, verbose_name=_('일시'))

    objects = StockMovementQuerySet.as_manager()

    class Meta:
        verbose_name = _('재고 이동')
        verbose_name_plural = _('재고 이동')
        ordering = ['-created_at', '-id']
        indexes = [
            models.Index(fields=['product', 'created_at'], name='ledgerman_move_product_idx'),
            models.Index(fields=['movement_type'], name='ledgerman_move_type_idx'),
        ]

    @property
    def applied_delta(self) -> int:
        """Delta that actually reached on_hand (differs when clamped)."""
        return self.new_quantity - self.previous_quantity

    @property
    def was_clamped(self) -> bool:
        return self.applied_delta != self.quantity

    def save(self, *args, **kwargs):
        """Insert only."""
        if self.pk:
            raise ValueError(IMMUTABLE_MESSAGE)

        if self.new_quantity != max(0, self.previous_quantity + self.quantity):
            raise ValueError(
                f"Balance discontinuity: {self.previous_quantity} "
                f"{self.quantity:+d} != {self.new_quantity}"
            )

        super().save(*args, **kwargs)

    def delete(self, *args, **kwargs):
        """Prevent deletion — movements are immutable."""
        raise ValueError(IMMUTABLE_MESSAGE)

    def __str__(self) -> str:
        signal = '+' if self.quantity > 0 else ''
        return (
            f"{signal}{self.quantity} ({self.get_movement_type_display()}) "
            f"{self.previous_quantity} → {self.new_quantity}"
        )

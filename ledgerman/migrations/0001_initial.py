"""
Initial migration for Ledgerman models.
"""

from decimal import Decimal
import django.db.models.deletion
import django.utils.timezone
from django.db import migrations, models

import ledgerman.models.product


class Migration(migrations.Migration):
    """Create Ledgerman models: Product, StockMovement."""

    initial = True

    dependencies = []

    operations = [
        migrations.CreateModel(
            name='Product',
            fields=[
                ('id', models.CharField(default=ledgerman.models.product._new_product_id, editable=False, max_length=64, primary_key=True, serialize=False, verbose_name='상품 ID')),
                ('name', models.CharField(blank=True, default='', max_length=200, verbose_name='상품명')),
                ('on_hand', models.PositiveIntegerField(default=0, verbose_name='현재 재고')),
                ('low_stock_threshold', models.PositiveIntegerField(default=0, help_text='0 = 알림 없음', verbose_name='재고 부족 기준')),
                ('cost_cny', models.DecimalField(decimal_places=2, default=Decimal('0'), max_digits=12, verbose_name='원가 (CNY)')),
                ('updated_at', models.DateTimeField(auto_now=True, verbose_name='수정일시')),
            ],
            options={
                'verbose_name': '상품 재고',
                'verbose_name_plural': '상품 재고',
                'ordering': ['id'],
            },
        ),
        migrations.CreateModel(
            name='StockMovement',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('movement_type', models.CharField(choices=[('inbound', '입고'), ('sale', '판매'), ('adjustment', '조정')], max_length=20, verbose_name='유형')),
                ('quantity', models.IntegerField(help_text='양수 = 입고/회수, 음수 = 판매/손실', verbose_name='변동 수량')),
                ('previous_quantity', models.PositiveIntegerField(verbose_name='변경 전 재고')),
                ('new_quantity', models.PositiveIntegerField(verbose_name='변경 후 재고')),
                ('cost_per_unit', models.DecimalField(blank=True, decimal_places=2, max_digits=12, null=True, verbose_name='단가')),
                ('reason', models.CharField(blank=True, default='', max_length=255, verbose_name='사유')),
                ('notes', models.TextField(blank=True, default='', verbose_name='메모')),
                ('reference_no', models.CharField(blank=True, default='', help_text='예: 입고 송장 번호, 발주 번호', max_length=100, verbose_name='참조 번호')),
                ('skip_cashbook', models.BooleanField(default=False, verbose_name='출납장부 제외')),
                ('created_by', models.CharField(blank=True, default='', max_length=100, verbose_name='작성자')),
                ('created_at', models.DateTimeField(db_index=True, default=django.utils.timezone.now, verbose_name='일시')),
                ('product', models.ForeignKey(on_delete=django.db.models.deletion.PROTECT, related_name='movements', to='ledgerman.product', verbose_name='상품')),
            ],
            options={
                'verbose_name': '재고 이동',
                'verbose_name_plural': '재고 이동',
                'ordering': ['-created_at', '-id'],
            },
        ),
        # Indexes
        migrations.AddIndex(
            model_name='product',
            index=models.Index(fields=['on_hand'], name='ledgerman_product_onhand_idx'),
        ),
        migrations.AddIndex(
            model_name='stockmovement',
            index=models.Index(fields=['product', 'created_at'], name='ledgerman_move_product_idx'),
        ),
        migrations.AddIndex(
            model_name='stockmovement',
            index=models.Index(fields=['movement_type'], name='ledgerman_move_type_idx'),
        ),
    ]

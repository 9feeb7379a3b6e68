"""
Management command to audit the stock ledger.

Usage:
    python manage.py audit_stock_ledger
    python manage.py audit_stock_ledger --product P1
"""

from django.core.management.base import BaseCommand, CommandError

from ledgerman.exceptions import NotFoundError
from ledgerman.services.audit import audit_all, audit_product


class Command(BaseCommand):
    """Verify movement chains against on_hand."""

    help = '재고 원장과 현재 재고의 일치 여부를 검증합니다'

    def add_arguments(self, parser):
        parser.add_argument(
            '--product',
            help='이 상품만 검증'
        )

    def handle(self, *args, **options):
        if options['product']:
            try:
                reports = [audit_product(options['product'])]
            except NotFoundError as e:
                raise CommandError(f"{e.message}: {options['product']}") from e
        else:
            reports = audit_all()

        checked = 0
        broken = 0
        for report in reports:
            checked += 1
            if report.ok:
                continue
            broken += 1
            self.stdout.write(
                self.style.WARNING(f'{report.product_id} (재고 {report.on_hand}):')
            )
            for issue in report.issues:
                self.stdout.write(f'  {issue}')

        if broken:
            raise CommandError(f'{checked}개 중 {broken}개 상품 불일치')

        self.stdout.write(self.style.SUCCESS(f'{checked}개 상품 검증 완료, 불일치 없음'))

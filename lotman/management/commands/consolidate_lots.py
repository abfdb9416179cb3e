"""
Management command to merge duplicate lot rows.

Usage:
    python manage.py consolidate_lots
    python manage.py consolidate_lots --factory ASM2 --collapse-locations
    python manage.py consolidate_lots --dry-run
"""

from django.core.management.base import BaseCommand

from lotman import ledger


class Command(BaseCommand):
    """Consolidate duplicate lots command."""

    help = 'Gộp các dòng tồn kho trùng (cùng mã hàng, LSX, vị trí)'

    def add_arguments(self, parser):
        parser.add_argument(
            '--factory',
            default=None,
            help='Nhà máy (mặc định: DEFAULT_FACTORY)'
        )
        parser.add_argument(
            '--collapse-locations',
            action='store_true',
            help='Gộp cả các dòng khác vị trí'
        )
        parser.add_argument(
            '--dry-run',
            action='store_true',
            help='Chỉ báo cáo, không ghi'
        )

    def handle(self, *args, **options):
        report = ledger.consolidate(
            factory=options['factory'],
            collapse_locations=options['collapse_locations'],
            dry_run=options['dry_run'],
        )

        if report.dry_run:
            self.stdout.write(
                f'{report.before} dòng → {report.after} dòng '
                f'({report.merged_groups} nhóm sẽ được gộp)'
            )
        else:
            self.stdout.write(
                self.style.SUCCESS(
                    f'{report.before} dòng → {report.after} dòng '
                    f'({report.merged_groups} nhóm đã gộp, {len(report.deleted)} dòng đã xoá)'
                )
            )

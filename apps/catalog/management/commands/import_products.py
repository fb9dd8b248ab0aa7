"""
Management command to import an AccPac item export.

Usage:
    python manage.py import_products path/to/items.csv
    python manage.py import_products path/to/items.csv --batch-size 500
"""

from django.core.management.base import BaseCommand, CommandError

from apps.catalog.services import import_products_csv, CSVImportError


class Command(BaseCommand):
    help = 'Import products from an AccPac CSV export'

    def add_arguments(self, parser):
        parser.add_argument('path', help='CSV file to import')
        parser.add_argument(
            '--batch-size',
            type=int,
            default=None,
            help='Rows per batch (defaults to CSV_IMPORT_BATCH_SIZE)',
        )

    def handle(self, *args, **options):
        try:
            with open(options['path'], 'rb') as handle:
                result = import_products_csv(file=handle, batch_size=options['batch_size'])
        except FileNotFoundError:
            raise CommandError(f"File not found: {options['path']}")
        except CSVImportError as e:
            raise CommandError(str(e))

        self.stdout.write(self.style.SUCCESS(
            f"Inserted {result['inserted']}, updated {result['updated']}, "
            f"unchanged {result['unchanged']}"
        ))
        for error in result['errors']:
            self.stdout.write(self.style.WARNING(error))

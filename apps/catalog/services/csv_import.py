"""
AccPac catalog import service.

Reads the item export from the accounting system and brings the catalog in
line with it. Exports carry a few banner lines before the real header, so
the header row is located by its 'ACCPAC ITEM CODE' column. Existing codes
are renamed when the description changed; unknown codes become new products
with a generated system barcode and zero pricing, ready to be priced by
staff.

Insert batches run in their own savepoint: a failing batch is reported and
the import carries on with the next one.
"""

import csv
import io
import logging
import random
import time

from django.conf import settings
from django.db import transaction, DatabaseError
from django.utils import timezone

from ..models import Product, DEFAULT_MIN_STOCK_LEVEL
from .exceptions import CSVImportError

logger = logging.getLogger(__name__)

CODE_HEADER = 'ACCPAC ITEM CODE'
MAX_CODE_LENGTH = 50
MAX_NAME_LENGTH = 300
IMPORT_LOCATION = 'N/A'


def generate_system_barcode(offset: int = 0) -> str:
    """Return a SYS-<millis>-<3 digits> barcode for items that have none."""
    seq = int(time.time() * 1000) + offset
    return f"SYS-{seq}-{random.randint(0, 999):03d}"


def _read_text(file) -> str:
    content = file.read() if hasattr(file, 'read') else file
    if isinstance(content, bytes):
        content = content.decode('utf-8-sig', errors='replace')
    return content.lstrip('\ufeff')


def _strip_banner(text: str) -> str:
    lines = text.splitlines()
    for index, line in enumerate(lines):
        if CODE_HEADER in line.upper():
            return '\n'.join(lines[index:])
    return text


def _find_column(keys, *needles):
    for key in keys:
        upper = key.upper()
        if any(needle in upper for needle in needles):
            return key
    return None


def parse_accpac_rows(file) -> list[dict]:
    """
    Parse an AccPac export into unique {'accpac', 'name'} rows.

    Codes are trimmed, upper-cased and cut to 50 characters, names to 300.
    Rows missing either value are dropped. When a code repeats, the last
    occurrence wins.

    Raises:
        CSVImportError: If the file has no data rows or no usable columns
    """
    reader = csv.DictReader(io.StringIO(_strip_banner(_read_text(file))))
    rows = [
        row for row in reader
        if any((value or '').strip() for key, value in row.items() if key is not None)
    ]
    if not rows:
        raise CSVImportError("No data found or invalid header.")

    keys = [key for key in (reader.fieldnames or []) if key is not None]
    code_key = _find_column(keys, CODE_HEADER)
    name_key = _find_column(keys, 'ITEM DESCRIPTION', 'DESCRIPTION')

    unique = {}
    if code_key and name_key:
        for row in rows:
            code = (row.get(code_key) or '').strip().upper()[:MAX_CODE_LENGTH]
            name = (row.get(name_key) or '').strip().upper()[:MAX_NAME_LENGTH]
            if code and name:
                unique[code] = {'accpac': code, 'name': name}

    if not unique:
        raise CSVImportError(
            "Could not parse columns. Ensure 'ACCPAC ITEM CODE' and "
            "'ITEM DESCRIPTION' headers exist."
        )
    return list(unique.values())


def import_products_csv(*, file, batch_size: int = None) -> dict:
    """
    Import an AccPac item export into the catalog.

    Args:
        file: Uploaded file, binary/text file object or raw CSV string
        batch_size: Rows per batch (defaults to settings.CSV_IMPORT_BATCH_SIZE)

    Returns:
        {'inserted': int, 'updated': int, 'unchanged': int, 'errors': [str]}

    Raises:
        CSVImportError: If the file cannot be parsed
    """
    batch_size = batch_size or settings.CSV_IMPORT_BATCH_SIZE
    rows = parse_accpac_rows(file)

    result = {'inserted': 0, 'updated': 0, 'unchanged': 0, 'errors': []}

    for start in range(0, len(rows), batch_size):
        batch = rows[start:start + batch_size]
        batch_number = start // batch_size + 1

        existing = {
            product.accpac_code.upper(): product
            for product in Product.objects.filter(accpac_code__in=[r['accpac'] for r in batch])
        }

        to_insert = []
        to_update = []
        for batch_index, row in enumerate(batch):
            product = existing.get(row['accpac'])
            if product is None:
                to_insert.append(Product(
                    barcode=generate_system_barcode(start + batch_index),
                    accpac_code=row['accpac'],
                    name=row['name'],
                    price=0,
                    unit_cost=0,
                    min_stock_level=DEFAULT_MIN_STOCK_LEVEL,
                    current_stock=0,
                    location=IMPORT_LOCATION,
                ))
            elif product.name != row['name']:
                product.name = row['name']
                product.last_updated = timezone.now()
                to_update.append(product)
            else:
                result['unchanged'] += 1

        if to_insert:
            try:
                with transaction.atomic():
                    Product.objects.bulk_create(to_insert)
            except DatabaseError as e:
                logger.error("CSV import batch %s insert failed: %s", batch_number, e)
                result['errors'].append(f"Batch {batch_number} Failed: {e}")
            else:
                result['inserted'] += len(to_insert)

        if to_update:
            Product.objects.bulk_update(to_update, ['name', 'last_updated'])
            result['updated'] += len(to_update)

    logger.info(
        "CSV import finished: %s inserted, %s updated, %s unchanged, %s failed batches",
        result['inserted'], result['updated'], result['unchanged'], len(result['errors'])
    )
    return result

"""Shared helpers for the simple registry CSV imports."""

import csv
import io

from .exceptions import RegistryImportError


def read_csv_rows(file, columns: tuple) -> list[dict]:
    """
    Read a headered CSV into dicts keyed by the expected column names.

    Header matching ignores case and surrounding spaces. Rows whose first
    column is blank are dropped.

    Raises:
        RegistryImportError: If the first column header is missing or no
            row survives
    """
    content = file.read() if hasattr(file, 'read') else file
    if isinstance(content, bytes):
        content = content.decode('utf-8-sig', errors='replace')

    reader = csv.DictReader(io.StringIO(content))
    header_map = {
        (name or '').strip().lower(): name for name in (reader.fieldnames or [])
    }
    if columns[0] not in header_map:
        raise RegistryImportError(f"Missing '{columns[0]}' column")

    rows = []
    for raw in reader:
        row = {
            column: (raw.get(header_map[column]) or '').strip() if column in header_map else ''
            for column in columns
        }
        if row[columns[0]]:
            rows.append(row)

    if not rows:
        raise RegistryImportError("No data found")
    return rows

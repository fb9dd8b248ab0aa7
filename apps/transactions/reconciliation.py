"""
Void-aware receipt reconstruction.

Transaction rows are line items; a receipt is every row sharing one
reference number. Voiding a receipt appends a VOID marker row and flags the
original lines, so a page of rows cut by date, type or pagination can hold
only one side of a voided receipt:

- a marker whose originals fell outside the page (orphan void), or
- voided originals whose marker fell outside the page.

reconcile_receipts() groups a page into receipts and, when given a fetcher,
pulls the missing counterparts in a single call so every voided receipt is
shown with its lines and its void metadata.

This module is pure: rows are plain mappings and the only I/O is the
injected fetcher.

Example:
    receipts = reconcile_receipts(rows, fetch_missing=fetch_rows_by_reference)
"""

import logging
from decimal import Decimal, InvalidOperation

logger = logging.getLogger(__name__)

NO_REF = 'NO_REF'
VOID = 'VOID'

# Stock movements valued at cost; everything else is valued at price
COST_VALUED_TYPES = ('RECEIVING', 'PULL_OUT')

HEADER_FIELDS = (
    'bis_number',
    'type',
    'transaction_mode',
    'timestamp',
    'student_id',
    'student_name',
    'course',
    'year_level',
    'supplier',
    'remarks',
    'staff_name',
    'user_id',
)


def to_decimal(value) -> Decimal:
    if value is None or value == '':
        return Decimal('0')
    if isinstance(value, Decimal):
        return value
    try:
        return Decimal(str(value))
    except InvalidOperation:
        return Decimal('0')


def unit_value(row) -> Decimal:
    """Cost snapshot for receiving/pull-out lines, price snapshot otherwise."""
    if row.get('type') in COST_VALUED_TYPES:
        return to_decimal(row.get('unit_cost_snapshot'))
    return to_decimal(row.get('price_snapshot'))


def line_amount(row) -> Decimal:
    return int(row.get('qty') or 0) * unit_value(row)


class _ReceiptGroup:
    """Rows collected for one reference number."""

    def __init__(self):
        self.markers = []
        self.originals = []
        self._seen_ids = set()

    def add(self, row):
        row_id = row.get('id')
        if row_id is not None:
            if row_id in self._seen_ids:
                return
            self._seen_ids.add(row_id)

        if row.get('type') == VOID:
            self.markers.append(row)
        else:
            self.originals.append(row)

    @property
    def is_voided(self):
        return bool(self.markers) or any(row.get('is_voided') for row in self.originals)

    @property
    def needs_counterpart(self):
        if self.markers and not self.originals:
            return True
        return not self.markers and any(row.get('is_voided') for row in self.originals)


def _group_rows(rows) -> dict:
    groups = {}
    for row in rows:
        key = row.get('reference_number') or NO_REF
        groups.setdefault(key, _ReceiptGroup()).add(row)
    return groups


def _merge_counterparts(groups: dict, fetch_missing) -> None:
    orphan_refs = sorted(
        ref for ref, group in groups.items()
        if ref != NO_REF and group.needs_counterpart
    )
    if not orphan_refs:
        return

    try:
        fetched = list(fetch_missing(orphan_refs) or ())
    except Exception:
        logger.warning(
            "Could not fetch void counterparts for %s; showing page data only",
            orphan_refs,
            exc_info=True,
        )
        return

    wanted = set(orphan_refs)
    for row in fetched:
        ref = row.get('reference_number')
        if ref in wanted:
            groups[ref].add(row)


def _build_receipt(reference_number: str, group: _ReceiptGroup) -> dict:
    marker = group.markers[0] if group.markers else None
    originals = group.originals
    header = originals[0] if originals else marker

    void_reason = marker.get('void_reason') if marker else None
    if not void_reason and originals:
        void_reason = originals[0].get('void_reason') or None

    receipt = {'reference_number': reference_number}
    for field in HEADER_FIELDS:
        receipt[field] = header.get(field)

    receipt.update({
        'lines': list(originals),
        'total_qty': sum(int(row.get('qty') or 0) for row in originals),
        'total_value': sum((line_amount(row) for row in originals), Decimal('0')),
        'is_voided': group.is_voided,
        'is_orphan_void': not originals,
        'void_reason': void_reason if group.is_voided else None,
        'voided_by': marker.get('user_id') if marker else None,
        'voided_by_name': marker.get('staff_name') if marker else None,
        'voided_at': marker.get('timestamp') if marker else None,
    })
    return receipt


def reconcile_receipts(rows, fetch_missing=None) -> list[dict]:
    """
    Group transaction rows into receipts, completing voided receipts.

    Args:
        rows: Iterable of row mappings (reference_number, type, is_voided,
            void_reason, and optionally id, qty, snapshots, header fields)
        fetch_missing: Optional callable taking a sorted list of reference
            numbers and returning their rows. Called at most once.

    Returns:
        One receipt dict per reference number, in first-seen order. Rows
        without a reference number are grouped under NO_REF.
    """
    groups = _group_rows(rows)

    if fetch_missing is not None:
        _merge_counterparts(groups, fetch_missing)

    return [_build_receipt(ref, group) for ref, group in groups.items()]

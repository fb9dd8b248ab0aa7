"""Today's transaction history with keyset ("load older") pagination."""

import base64
import uuid

from django.utils import timezone
from django.utils.dateparse import parse_datetime
from django.db.models import Q

from ..models import Transaction
from ..reconciliation import reconcile_receipts
from .exceptions import InvalidCursorError
from .ledger import transaction_to_row, fetch_rows_by_reference, period_start

DEFAULT_HISTORY_LIMIT = 10
MAX_HISTORY_LIMIT = 100


def encode_cursor(tx: Transaction) -> str:
    raw = f"{tx.timestamp.isoformat()}|{tx.id}"
    return base64.urlsafe_b64encode(raw.encode()).decode()


def decode_cursor(cursor: str):
    try:
        raw = base64.urlsafe_b64decode(cursor.encode()).decode()
        raw_timestamp, raw_id = raw.split("|", 1)
        timestamp = parse_datetime(raw_timestamp)
        row_id = uuid.UUID(raw_id)
    except (ValueError, AttributeError):
        raise InvalidCursorError("Invalid history cursor")
    if timestamp is None:
        raise InvalidCursorError("Invalid history cursor")
    return timestamp, row_id


def get_today_history(
    *,
    cursor: str = None,
    limit: int = DEFAULT_HISTORY_LIMIT,
    fetch_missing=fetch_rows_by_reference
) -> dict:
    """
    Return today's rows newest first, starting below the cursor.

    Args:
        cursor: Opaque cursor from a previous call (None for the newest rows)
        limit: Rows per call

    Returns:
        {'rows': [...], 'receipts': [...], 'next_cursor': str | None}

    Raises:
        InvalidCursorError: If the cursor cannot be decoded
    """
    limit = max(1, min(limit or DEFAULT_HISTORY_LIMIT, MAX_HISTORY_LIMIT))

    queryset = (
        Transaction.objects
        .select_related('user')
        .filter(timestamp__gte=period_start('TODAY', timezone.now()))
        .order_by('-timestamp', '-id')
    )

    if cursor:
        timestamp, row_id = decode_cursor(cursor)
        queryset = queryset.filter(
            Q(timestamp__lt=timestamp) |
            Q(timestamp=timestamp, id__lt=row_id)
        )

    page = list(queryset[:limit + 1])
    has_more = len(page) > limit
    page = page[:limit]

    rows = [transaction_to_row(tx) for tx in page]
    return {
        'rows': rows,
        'receipts': reconcile_receipts(rows, fetch_missing=fetch_missing),
        'next_cursor': encode_cursor(page[-1]) if has_more else None,
    }

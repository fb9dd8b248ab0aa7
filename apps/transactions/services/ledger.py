"""
Transaction ledger service.

Turns Transaction rows into the plain mappings reconcile_receipts() works
on, and serves the filtered, row-paginated ledger as receipts.
"""

from datetime import timedelta
from typing import Optional

from django.conf import settings
from django.core.paginator import Paginator
from django.db.models import Q, QuerySet
from django.utils import timezone

from ..models import Transaction
from ..reconciliation import reconcile_receipts

LEDGER_PERIODS = ('TODAY', '7DAYS', '30DAYS', 'ALL')
DEFAULT_PERIOD = '7DAYS'
UNKNOWN_STAFF = 'Unknown'

PERIOD_DAYS = {
    '7DAYS': 7,
    '30DAYS': 30,
}


def staff_name_for(user) -> str:
    if user is None:
        return UNKNOWN_STAFF
    return user.get_display_name()


def transaction_to_row(tx: Transaction) -> dict:
    """Flatten a Transaction (with its user loaded) into a row mapping."""
    return {
        'id': str(tx.id),
        'reference_number': tx.reference_number,
        'bis_number': tx.bis_number,
        'type': tx.type,
        'transaction_mode': tx.transaction_mode,
        'product_id': str(tx.product_id) if tx.product_id else None,
        'product_name_snapshot': tx.product_name_snapshot,
        'qty': tx.qty,
        'price_snapshot': tx.price_snapshot,
        'unit_cost_snapshot': tx.unit_cost_snapshot,
        'previous_stock': tx.previous_stock,
        'new_stock': tx.new_stock,
        'student_id': tx.student_id,
        'student_name': tx.student_name,
        'course': tx.course,
        'year_level': tx.year_level,
        'supplier': tx.supplier,
        'remarks': tx.remarks,
        'user_id': str(tx.user_id) if tx.user_id else None,
        'staff_name': staff_name_for(tx.user),
        'timestamp': tx.timestamp,
        'is_voided': tx.is_voided,
        'void_reason': tx.void_reason,
    }


def fetch_rows_by_reference(reference_numbers: list[str]) -> list[dict]:
    """Load every row of the given receipts (originals and VOID markers)."""
    queryset = (
        Transaction.objects
        .filter(reference_number__in=reference_numbers)
        .select_related('user')
        .order_by('timestamp', 'id')
    )
    return [transaction_to_row(tx) for tx in queryset]


def period_start(period: str, now=None):
    """
    Return the lower timestamp bound for a ledger period.

    TODAY starts at local midnight; 7DAYS/30DAYS count back from now;
    ALL has no bound (None).
    """
    now = now or timezone.now()
    if period == 'TODAY':
        return timezone.localtime(now).replace(hour=0, minute=0, second=0, microsecond=0)
    if period in PERIOD_DAYS:
        return now - timedelta(days=PERIOD_DAYS[period])
    return None


def ledger_queryset(
    *,
    period: str = DEFAULT_PERIOD,
    type: str = 'ALL',
    mode: str = 'ALL',
    search: Optional[str] = None
) -> QuerySet[Transaction]:
    """
    Filter transaction rows for the ledger, newest first.

    Args:
        period: TODAY, 7DAYS, 30DAYS or ALL
        type: ALL or one transaction type
        mode: ALL or one transaction mode
        search: Matches reference number or student name (icontains)
    """
    queryset = Transaction.objects.select_related('user')

    start = period_start(period or DEFAULT_PERIOD)
    if start is not None:
        queryset = queryset.filter(timestamp__gte=start)

    if type and type != 'ALL':
        queryset = queryset.filter(type=type)

    if mode and mode != 'ALL':
        queryset = queryset.filter(transaction_mode=mode)

    if search:
        term = search.strip()
        queryset = queryset.filter(
            Q(reference_number__icontains=term) |
            Q(student_name__icontains=term)
        )

    return queryset.order_by('-timestamp', '-id')


def get_ledger_page(
    *,
    period: str = DEFAULT_PERIOD,
    type: str = 'ALL',
    mode: str = 'ALL',
    search: Optional[str] = None,
    page: int = 1,
    page_size: Optional[int] = None,
    fetch_missing=fetch_rows_by_reference
) -> dict:
    """
    Return one page of ledger rows reconstructed into receipts.

    Pagination is by row; receipts whose void counterpart sits outside the
    page are completed through fetch_missing.

    Returns:
        {'count', 'page', 'page_size', 'num_pages', 'receipts'}
    """
    page_size = page_size or settings.LEDGER_PAGE_SIZE
    paginator = Paginator(
        ledger_queryset(period=period, type=type, mode=mode, search=search),
        page_size,
    )
    page_obj = paginator.get_page(page)
    rows = [transaction_to_row(tx) for tx in page_obj.object_list]

    return {
        'count': paginator.count,
        'page': page_obj.number,
        'page_size': page_size,
        'num_pages': paginator.num_pages,
        'receipts': reconcile_receipts(rows, fetch_missing=fetch_missing),
    }

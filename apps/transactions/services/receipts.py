"""Receipt lookup service."""

from decimal import Decimal

from ..models import Transaction, TransactionType
from ..reconciliation import line_amount, to_decimal
from .exceptions import ReceiptNotFoundError
from .ledger import staff_name_for


def get_receipt(*, reference_number: str) -> dict:
    """
    Rebuild a printable receipt from its rows.

    VOID markers are left out of the item list; when a receipt only has a
    marker the marker itself is shown.

    Args:
        reference_number: Receipt reference (exact match)

    Returns:
        Receipt dict with header, staff name, void info and items

    Raises:
        ReceiptNotFoundError: If no row carries the reference number
    """
    reference_number = (reference_number or '').strip()
    rows = list(
        Transaction.objects
        .filter(reference_number=reference_number)
        .select_related('user')
        .order_by('timestamp', 'id')
    )
    if not rows:
        raise ReceiptNotFoundError("Reference number not found.")

    markers = [row for row in rows if row.type == TransactionType.VOID]
    items = [row for row in rows if row.type != TransactionType.VOID] or rows
    header = items[0]
    marker = markers[0] if markers else None

    lines = []
    for item in items:
        row = {
            'type': item.type,
            'qty': item.qty,
            'price_snapshot': item.price_snapshot,
            'unit_cost_snapshot': item.unit_cost_snapshot,
        }
        lines.append({
            'item_name': item.product_name_snapshot,
            'qty': item.qty,
            'price': to_decimal(item.price_snapshot),
            'cost': to_decimal(item.unit_cost_snapshot),
            'amount': line_amount(row),
        })

    is_voided = bool(markers) or any(row.is_voided for row in rows)
    void_reason = (marker.void_reason if marker else '') or header.void_reason

    return {
        'reference_number': header.reference_number,
        'bis_number': header.bis_number,
        'type': header.type,
        'transaction_mode': header.transaction_mode,
        'timestamp': header.timestamp,
        'student_id': header.student_id,
        'student_name': header.student_name,
        'course': header.course,
        'year_level': header.year_level,
        'supplier': header.supplier,
        'remarks': header.remarks,
        'staff_name': staff_name_for(header.user),
        'is_voided': is_voided,
        'void_reason': void_reason if is_voided else None,
        'voided_by_name': staff_name_for(marker.user) if marker else None,
        'voided_at': marker.timestamp if marker else None,
        'items': lines,
        'total_qty': sum(line['qty'] for line in lines),
        'total_amount': sum((line['amount'] for line in lines), Decimal('0')),
    }

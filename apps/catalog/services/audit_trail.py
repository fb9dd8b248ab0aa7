"""Per-product movement history."""

from uuid import UUID

from apps.transactions.models import Transaction, TransactionType
from apps.transactions.services import transaction_to_row, staff_name_for
from ..models import Product
from .exceptions import ProductNotFoundError


def get_product_audit_trail(*, product_id: UUID) -> list[dict]:
    """
    Return a product's movements newest first.

    VOID markers are not listed; instead each voided movement carries
    void_details ({'reason', 'who', 'when'}) from the marker of its receipt.

    Raises:
        ProductNotFoundError: If product doesn't exist
    """
    if not Product.objects.filter(internal_id=product_id).exists():
        raise ProductNotFoundError(f"Product {product_id} not found")

    movements = list(
        Transaction.objects
        .filter(product_id=product_id)
        .exclude(type=TransactionType.VOID)
        .select_related('user')
        .order_by('-timestamp', '-id')
    )

    voided_refs = {tx.reference_number for tx in movements if tx.is_voided}
    markers = {}
    for marker in (
        Transaction.objects
        .filter(reference_number__in=voided_refs, type=TransactionType.VOID)
        .select_related('user')
        .order_by('timestamp')
    ):
        markers.setdefault(marker.reference_number, marker)

    trail = []
    for tx in movements:
        row = transaction_to_row(tx)
        marker = markers.get(tx.reference_number) if tx.is_voided else None
        if marker is not None:
            row['void_details'] = {
                'reason': marker.void_reason,
                'who': staff_name_for(marker.user),
                'when': marker.timestamp,
            }
        elif tx.is_voided:
            row['void_details'] = {'reason': tx.void_reason, 'who': None, 'when': None}
        else:
            row['void_details'] = None
        trail.append(row)
    return trail


"""Receipt void (reversal) service."""

import logging
from typing import Optional

from django.db import transaction
from django.contrib.auth import get_user_model
from django.utils import timezone

from apps.catalog.models import Product
from ..models import Transaction, TransactionType, STOCK_IN_TYPES
from ..reconciliation import reconcile_receipts
from .exceptions import (
    ReceiptNotFoundError,
    AlreadyVoidedError,
    InsufficientStockError,
    InvalidVoidRequestError,
)
from .ledger import fetch_rows_by_reference

User = get_user_model()
logger = logging.getLogger(__name__)


@transaction.atomic
def void_transaction_by_ref(
    *,
    reference_number: str,
    reason: str,
    user: Optional[User]
) -> dict:
    """
    Reverse every line of a receipt and append its VOID marker.

    The original rows are locked first, so two voids racing on one
    reference are serialized and the second sees the receipt as voided.

    Args:
        reference_number: Receipt to void
        reason: Why the receipt is voided (required)
        user: Staff member voiding the receipt

    Returns:
        The reconciled (voided) receipt dict

    Raises:
        InvalidVoidRequestError: If reason is blank
        ReceiptNotFoundError: If no line carries the reference number
        AlreadyVoidedError: If the receipt was voided before
        InsufficientStockError: If reversing a stock-in line would drive
            stock negative
    """
    reason = (reason or '').strip()
    if not reason:
        raise InvalidVoidRequestError("Void reason is required")

    reference_number = (reference_number or '').strip()
    originals = list(
        Transaction.objects
        .select_for_update()
        .filter(reference_number=reference_number)
        .exclude(type=TransactionType.VOID)
        .order_by('timestamp', 'id')
    )
    if not originals:
        raise ReceiptNotFoundError(f"Reference number {reference_number} not found")

    already_marked = Transaction.objects.filter(
        reference_number=reference_number, type=TransactionType.VOID
    ).exists()
    if already_marked or any(line.is_voided for line in originals):
        raise AlreadyVoidedError(f"Receipt {reference_number} is already voided")

    product_ids = {line.product_id for line in originals if line.product_id}
    products = {
        product.pk: product
        for product in (
            Product.objects
            .select_for_update()
            .filter(pk__in=product_ids)
            .order_by('barcode')
        )
    }

    for line in originals:
        product = products.get(line.product_id)
        if product is None:
            continue
        if line.type in STOCK_IN_TYPES:
            if product.current_stock < line.qty:
                raise InsufficientStockError(
                    f"Cannot void {reference_number}: only {product.current_stock} "
                    f"of {product.name} left to reverse {line.qty}"
                )
            product.current_stock -= line.qty
        else:
            product.current_stock += line.qty

    for product in products.values():
        product.save(update_fields=['current_stock', 'last_updated'])

    Transaction.objects.filter(pk__in=[line.pk for line in originals]).update(
        is_voided=True, void_reason=reason
    )

    header = originals[0]
    Transaction.objects.create(
        reference_number=reference_number,
        type=TransactionType.VOID,
        transaction_mode=header.transaction_mode,
        qty=0,
        student_id=header.student_id,
        student_name=header.student_name,
        course=header.course,
        year_level=header.year_level,
        supplier=header.supplier,
        user=user,
        timestamp=timezone.now(),
        void_reason=reason,
    )

    logger.info(
        "Receipt %s voided by %s: %s",
        reference_number, user.email if user else 'system', reason
    )
    return reconcile_receipts(fetch_rows_by_reference([reference_number]))[0]

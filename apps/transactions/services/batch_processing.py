"""
Inventory batch processing service.

A batch is one receipt: a header (movement type, payment mode, student or
supplier context, remarks) and the scanned line items. The whole batch is
written in one database transaction; any failing line leaves nothing
behind.
"""

import logging
import secrets
from typing import Optional

from django.db import transaction, IntegrityError
from django.contrib.auth import get_user_model
from django.utils import timezone

from apps.catalog.models import Product
from apps.registry.services import upsert_student
from ..models import (
    Transaction,
    TransactionType,
    TransactionMode,
    DocumentSequence,
    ReceiptReference,
    STOCK_OUT_TYPES,
    STUDENT_TYPES,
)
from ..reconciliation import reconcile_receipts
from .exceptions import (
    InvalidBatchError,
    ProductNotFoundError,
    InsufficientStockError,
    DuplicateReferenceError,
)
from .ledger import transaction_to_row

User = get_user_model()
logger = logging.getLogger(__name__)

BIS_SEQUENCE = 'BIS'
BATCH_TYPES = [t for t in TransactionType.values if t != TransactionType.VOID]


def generate_reference_number(today=None) -> str:
    """Return REF-YYYYMMDD-<6 hex>."""
    today = today or timezone.localdate()
    return f"REF-{today:%Y%m%d}-{secrets.token_hex(3).upper()}"


def _clean(value) -> str:
    return str(value).strip() if value is not None else ''


def validate_header(header: dict) -> dict:
    """
    Normalize and check a batch header.

    Raises:
        InvalidBatchError: On an unknown type, a missing mode for issuance,
            missing student context for issuance/returns, or a missing
            supplier for receiving
    """
    tx_type = _clean(header.get('type')).upper()
    if tx_type not in BATCH_TYPES:
        raise InvalidBatchError(f"Invalid transaction type: {tx_type or 'missing'}")

    mode = _clean(header.get('transaction_mode')).upper()
    if tx_type == TransactionType.ISSUANCE and not mode:
        raise InvalidBatchError("Transaction mode is required for issuance")
    if mode and mode not in TransactionMode.values:
        raise InvalidBatchError(f"Invalid transaction mode: {mode}")

    clean = {
        'type': tx_type,
        'transaction_mode': mode if tx_type in STUDENT_TYPES else '',
        'reference_number': _clean(header.get('reference_number')).upper(),
        'student_id': _clean(header.get('student_id')),
        'student_name': _clean(header.get('student_name')).upper(),
        'course': _clean(header.get('course')).upper(),
        'year_level': _clean(header.get('year_level')),
        'supplier': _clean(header.get('supplier')).upper(),
        'remarks': _clean(header.get('remarks')),
    }

    if tx_type in STUDENT_TYPES and not (clean['student_id'] and clean['student_name']):
        raise InvalidBatchError("Student ID and name are required for issuance and returns")
    if tx_type == TransactionType.RECEIVING and not clean['supplier']:
        raise InvalidBatchError("Supplier is required for receiving")

    return clean


def merge_items(items) -> dict:
    """
    Collapse repeated barcodes into one line each.

    Returns:
        {barcode: qty} in first-scanned order

    Raises:
        InvalidBatchError: On an empty batch, a missing barcode or qty < 1
    """
    if not items:
        raise InvalidBatchError("Batch has no items")

    merged = {}
    for item in items:
        barcode = _clean(item.get('barcode')).upper()
        if not barcode:
            raise InvalidBatchError("Every item needs a barcode")
        try:
            qty = int(item.get('qty'))
        except (TypeError, ValueError):
            raise InvalidBatchError(f"Invalid quantity for {barcode}")
        if qty < 1:
            raise InvalidBatchError(f"Quantity for {barcode} must be at least 1")
        merged[barcode] = merged.get(barcode, 0) + qty
    return merged


def _lock_products(barcodes) -> dict:
    products = {
        product.barcode: product
        for product in (
            Product.objects
            .select_for_update()
            .filter(barcode__in=barcodes)
            .order_by('barcode')
        )
    }
    for barcode in barcodes:
        if barcode not in products:
            raise ProductNotFoundError(f"Product not found: {barcode}")
    return products


def _claim_reference(reference_number: str) -> bool:
    try:
        with transaction.atomic():
            ReceiptReference.objects.create(reference_number=reference_number)
    except IntegrityError:
        return False
    return True


def _assign_reference(requested: str) -> str:
    """Claim the requested reference, or a fresh generated one."""
    if requested:
        if not _claim_reference(requested):
            raise DuplicateReferenceError(f"Reference number {requested} already exists")
        return requested

    reference_number = generate_reference_number()
    while not _claim_reference(reference_number):
        reference_number = generate_reference_number()
    return reference_number


@transaction.atomic
def process_inventory_batch(
    *,
    header: dict,
    items: list,
    user: Optional[User]
) -> dict:
    """
    Record a receipt and move stock for each of its lines.

    Args:
        header: type, transaction_mode, reference_number (optional),
            student_id/student_name/course/year_level, supplier, remarks
        items: [{'barcode': str, 'qty': int}, ...]
        user: Staff member recording the batch

    Returns:
        The reconciled receipt dict

    Raises:
        InvalidBatchError: If header or items fail validation
        ProductNotFoundError: If a barcode matches no product
        InsufficientStockError: If a stock-out line exceeds current stock
        DuplicateReferenceError: If the supplied reference number exists
    """
    clean = validate_header(header)
    quantities = merge_items(items)

    products = _lock_products(sorted(quantities))
    reference_number = _assign_reference(clean['reference_number'])
    bis_number = DocumentSequence.next_value(BIS_SEQUENCE)
    timestamp = timezone.now()

    rows = []
    for barcode, qty in quantities.items():
        product = products[barcode]
        previous_stock = product.current_stock

        if clean['type'] in STOCK_OUT_TYPES:
            if previous_stock < qty:
                raise InsufficientStockError(
                    f"Insufficient stock for {product.name}: "
                    f"{previous_stock} available, {qty} requested"
                )
            new_stock = previous_stock - qty
        else:
            new_stock = previous_stock + qty

        tx = Transaction.objects.create(
            reference_number=reference_number,
            bis_number=bis_number,
            type=clean['type'],
            transaction_mode=clean['transaction_mode'],
            product=product,
            product_name_snapshot=product.name,
            qty=qty,
            price_snapshot=product.price,
            unit_cost_snapshot=product.unit_cost,
            previous_stock=previous_stock,
            new_stock=new_stock,
            student_id=clean['student_id'],
            student_name=clean['student_name'],
            course=clean['course'],
            year_level=clean['year_level'],
            supplier=clean['supplier'],
            remarks=clean['remarks'],
            user=user,
            timestamp=timestamp,
        )

        product.current_stock = new_stock
        product.save(update_fields=['current_stock', 'last_updated'])
        rows.append(transaction_to_row(tx))

    if clean['type'] in STUDENT_TYPES:
        upsert_student(
            student_id=clean['student_id'],
            name=clean['student_name'],
            course=clean['course'],
            year_level=clean['year_level'],
        )

    logger.info(
        "Batch %s (BIS %s) recorded: %s %s line(s) by %s",
        reference_number, bis_number, clean['type'], len(rows),
        user.email if user else 'system',
    )
    return reconcile_receipts(rows)[0]

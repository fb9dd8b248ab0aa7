"""Product CRUD operations service."""

import logging

from django.db import transaction, IntegrityError
from django.db.models import Q
from decimal import Decimal
from uuid import UUID
from typing import Optional, Dict, Any

from ..models import Product, DEFAULT_MIN_STOCK_LEVEL
from .exceptions import (
    ProductNotFoundError,
    DuplicateProductError,
    ProductInUseError,
    ProductHasStockError,
)

logger = logging.getLogger(__name__)

EDITABLE_FIELDS = ['barcode', 'accpac_code', 'name', 'price', 'unit_cost', 'min_stock_level', 'location']


def _clean_code(value: Optional[str]) -> Optional[str]:
    value = (value or '').strip().upper()
    return value or None


def _check_duplicates(*, barcode: Optional[str], accpac_code: Optional[str], exclude_id=None):
    """Raise DuplicateProductError naming the colliding identifier."""
    lookup = Q()
    if barcode:
        lookup |= Q(barcode=barcode)
    if accpac_code:
        lookup |= Q(accpac_code=accpac_code)
    if not lookup:
        return

    queryset = Product.objects.filter(lookup)
    if exclude_id is not None:
        queryset = queryset.exclude(internal_id=exclude_id)

    existing = queryset.first()
    if existing is None:
        return
    if barcode and existing.barcode == barcode:
        raise DuplicateProductError("Barcode already exists.")
    raise DuplicateProductError("AccPac Code already exists.")


@transaction.atomic
def create_product(
    *,
    barcode: str,
    name: str,
    accpac_code: Optional[str] = None,
    price: Decimal = Decimal('0'),
    unit_cost: Decimal = Decimal('0'),
    min_stock_level: int = DEFAULT_MIN_STOCK_LEVEL,
    initial_stock: int = 0,
    location: str = ''
) -> Product:
    """
    Register a new product in the catalog.

    Args:
        barcode: Scannable identifier (upper-cased)
        name: Product name (upper-cased)
        accpac_code: Optional AccPac item code (upper-cased)
        price: Selling price
        unit_cost: Acquisition cost
        min_stock_level: Low stock threshold
        initial_stock: Opening stock count
        location: Shelf location (upper-cased)

    Returns:
        Created Product instance

    Raises:
        DuplicateProductError: If barcode or AccPac code is already used
    """
    clean_barcode = _clean_code(barcode)
    clean_accpac = _clean_code(accpac_code)
    _check_duplicates(barcode=clean_barcode, accpac_code=clean_accpac)

    try:
        product = Product.objects.create(
            barcode=clean_barcode,
            accpac_code=clean_accpac,
            name=name,
            price=price,
            unit_cost=unit_cost,
            min_stock_level=min_stock_level,
            current_stock=initial_stock,
            location=location or '',
        )
    except IntegrityError:
        raise DuplicateProductError("Barcode already exists.")

    logger.info("Product %s (%s) added to catalog", product.name, product.barcode)
    return product


@transaction.atomic
def update_product(
    *,
    product_id: UUID,
    data: Dict[str, Any]
) -> Product:
    """
    Update product details.

    Stock is not editable here: it only moves through inventory
    transactions.

    Raises:
        ProductNotFoundError: If product doesn't exist
        DuplicateProductError: If the new barcode or AccPac code is taken
    """
    try:
        product = Product.objects.select_for_update().get(internal_id=product_id)
    except Product.DoesNotExist:
        raise ProductNotFoundError(f"Product {product_id} not found")

    changes = {field: value for field, value in data.items() if field in EDITABLE_FIELDS}
    if 'barcode' in changes:
        changes['barcode'] = _clean_code(changes['barcode'])
        if not changes['barcode']:
            changes.pop('barcode')
    if 'accpac_code' in changes:
        changes['accpac_code'] = _clean_code(changes['accpac_code'])

    _check_duplicates(
        barcode=changes.get('barcode'),
        accpac_code=changes.get('accpac_code'),
        exclude_id=product.internal_id,
    )

    for field, value in changes.items():
        setattr(product, field, value)

    try:
        product.save()
    except IntegrityError:
        raise DuplicateProductError("AccPac Code already in use.")
    return product


@transaction.atomic
def delete_product(*, product_id: UUID) -> None:
    """
    Delete an empty product that has never been moved.

    Raises:
        ProductNotFoundError: If product doesn't exist
        ProductHasStockError: If the product still has stock on hand
        ProductInUseError: If any transaction references the product
    """
    try:
        product = Product.objects.select_for_update().get(internal_id=product_id)
    except Product.DoesNotExist:
        raise ProductNotFoundError(f"Product {product_id} not found")

    if product.current_stock > 0:
        raise ProductHasStockError("Stock must be 0 to delete item.")

    if product.transactions.exists():
        raise ProductInUseError("Item has existing transaction history.")

    product.delete()

    logger.info("Product %s (%s) deleted", product.name, product.barcode)


def get_product_by_id(*, product_id: UUID) -> Product:
    try:
        return Product.objects.get(internal_id=product_id)
    except Product.DoesNotExist:
        raise ProductNotFoundError(f"Product {product_id} not found")


def get_product_by_barcode(*, barcode: str) -> Product:
    try:
        return Product.objects.get(barcode=_clean_code(barcode))
    except Product.DoesNotExist:
        raise ProductNotFoundError(f"Product {barcode} not found")

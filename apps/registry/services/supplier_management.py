"""Supplier registry service."""

import logging

from django.db import transaction, IntegrityError
from django.db.models import Q, QuerySet
from typing import Optional, Dict, Any

from ..models import Supplier
from .csv_rows import read_csv_rows
from .exceptions import SupplierNotFoundError, DuplicateSupplierError

logger = logging.getLogger(__name__)

SUPPLIER_COLUMNS = ('name', 'contact_info')


def _clean_name(name: str) -> str:
    return (name or '').strip().upper()


def search_suppliers(*, search: Optional[str] = None) -> QuerySet[Supplier]:
    queryset = Supplier.objects.all()
    if search:
        term = search.strip()
        queryset = queryset.filter(
            Q(name__icontains=term) |
            Q(contact_info__icontains=term)
        )
    return queryset.order_by('name')


def _get_locked(supplier_id: int) -> Supplier:
    try:
        return Supplier.objects.select_for_update().get(id=supplier_id)
    except Supplier.DoesNotExist:
        raise SupplierNotFoundError(f"Supplier {supplier_id} not found")


@transaction.atomic
def create_supplier(*, name: str, contact_info: str = '') -> Supplier:
    """
    Raises:
        DuplicateSupplierError: If a supplier with the same name exists
    """
    clean_name = _clean_name(name)
    if Supplier.objects.filter(name=clean_name).exists():
        raise DuplicateSupplierError("Supplier already exists.")

    try:
        supplier = Supplier.objects.create(name=clean_name, contact_info=contact_info.strip())
    except IntegrityError:
        raise DuplicateSupplierError("Supplier already exists.")

    logger.info("Supplier %s added", supplier.name)
    return supplier


@transaction.atomic
def update_supplier(*, supplier_id: int, data: Dict[str, Any]) -> Supplier:
    """
    Raises:
        SupplierNotFoundError: If the supplier doesn't exist
        DuplicateSupplierError: If the new name is taken
    """
    supplier = _get_locked(supplier_id)

    if 'name' in data:
        clean_name = _clean_name(data['name'])
        if Supplier.objects.filter(name=clean_name).exclude(id=supplier.id).exists():
            raise DuplicateSupplierError("Supplier already exists.")
        supplier.name = clean_name
    if 'contact_info' in data:
        supplier.contact_info = (data['contact_info'] or '').strip()

    supplier.save()
    return supplier


@transaction.atomic
def delete_supplier(*, supplier_id: int) -> None:
    """Delete a supplier; past receipts keep the stored name."""
    supplier = _get_locked(supplier_id)
    supplier.delete()
    logger.info("Supplier %s deleted", supplier.name)


def import_suppliers_csv(*, file) -> dict:
    """
    Add suppliers from a name,contact_info CSV, skipping known names.

    Returns:
        {'created': int, 'skipped': int}
    """
    created = skipped = 0
    with transaction.atomic():
        for row in read_csv_rows(file, SUPPLIER_COLUMNS):
            _, was_created = Supplier.objects.get_or_create(
                name=_clean_name(row['name']),
                defaults={'contact_info': row['contact_info']},
            )
            if was_created:
                created += 1
            else:
                skipped += 1

    logger.info("Supplier import: %s created, %s skipped", created, skipped)
    return {'created': created, 'skipped': skipped}

"""Product search and filtering service."""

import re

from django.db.models import F, Q, QuerySet
from typing import Optional

from ..models import Product


def search_products(
    *,
    search: Optional[str] = None,
    low_stock_only: bool = False
) -> QuerySet[Product]:
    """
    Search the catalog.

    Args:
        search: Term matched case-insensitively against name, barcode and
            AccPac code. Commas act as single-character wildcards.
        low_stock_only: Only return products at or below their minimum level

    Returns:
        Filtered QuerySet of Product ordered by name
    """
    queryset = Product.objects.all()

    if search:
        term = search.strip().replace(',', '_')
        if '_' in term:
            pattern = _like_to_regex(term)
            queryset = queryset.filter(
                Q(name__iregex=pattern) |
                Q(barcode__iregex=pattern) |
                Q(accpac_code__iregex=pattern)
            )
        elif term:
            queryset = queryset.filter(
                Q(name__icontains=term) |
                Q(barcode__icontains=term) |
                Q(accpac_code__icontains=term)
            )

    if low_stock_only:
        queryset = queryset.filter(current_stock__lte=F('min_stock_level'))

    return queryset.order_by('name')


def _like_to_regex(term: str) -> str:
    """Translate a term where '_' means any single character into a regex."""
    return '.'.join(re.escape(part) for part in term.split('_'))

"""Services for catalog business logic."""

from .exceptions import (
    CatalogServiceError,
    ProductNotFoundError,
    DuplicateProductError,
    ProductInUseError,
    ProductHasStockError,
    CSVImportError,
)
from .product_management import (
    create_product,
    update_product,
    delete_product,
    get_product_by_id,
    get_product_by_barcode,
)
from .product_search import search_products
from .csv_import import import_products_csv, parse_accpac_rows, generate_system_barcode
from .audit_trail import get_product_audit_trail

__all__ = [
    # Exceptions
    'CatalogServiceError',
    'ProductNotFoundError',
    'DuplicateProductError',
    'ProductInUseError',
    'ProductHasStockError',
    'CSVImportError',
    # Product CRUD
    'create_product',
    'update_product',
    'delete_product',
    'get_product_by_id',
    'get_product_by_barcode',
    # Search
    'search_products',
    # Import
    'import_products_csv',
    'parse_accpac_rows',
    'generate_system_barcode',
    # History
    'get_product_audit_trail',
]

"""Domain-specific exceptions for catalog services."""


class CatalogServiceError(Exception):
    """Base exception for catalog services."""
    pass


class ProductNotFoundError(CatalogServiceError):
    """Raised when product does not exist."""
    pass


class DuplicateProductError(CatalogServiceError):
    """Raised when a barcode or AccPac code is already taken."""
    pass


class ProductInUseError(CatalogServiceError):
    """Raised when deleting a product that has transaction history."""
    pass


class ProductHasStockError(ProductInUseError):
    """Raised when deleting a product that still has stock on hand."""
    pass


class CSVImportError(CatalogServiceError):
    """Raised when an import file has no usable rows or columns."""
    pass

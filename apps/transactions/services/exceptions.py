"""Domain-specific exceptions for transactions services."""


class TransactionsServiceError(Exception):
    """Base exception for transactions services."""
    pass


class InvalidBatchError(TransactionsServiceError):
    """Raised when a batch header or its items fail validation."""
    pass


class ProductNotFoundError(TransactionsServiceError):
    """Raised when a scanned barcode matches no product."""
    pass


class InsufficientStockError(TransactionsServiceError):
    """Raised when a movement would drive stock below zero."""
    pass


class DuplicateReferenceError(TransactionsServiceError):
    """Raised when a supplied reference number already exists."""
    pass


class ReceiptNotFoundError(TransactionsServiceError):
    """Raised when no rows carry the reference number."""
    pass


class AlreadyVoidedError(TransactionsServiceError):
    """Raised when voiding a receipt a second time."""
    pass


class InvalidVoidRequestError(TransactionsServiceError):
    """Raised when a void request is missing its reason."""
    pass


class InvalidCursorError(TransactionsServiceError):
    """Raised when a history cursor cannot be decoded."""
    pass

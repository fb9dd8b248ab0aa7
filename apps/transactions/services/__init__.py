"""Services for transactions business logic."""

from .exceptions import (
    TransactionsServiceError,
    InvalidBatchError,
    ProductNotFoundError,
    InsufficientStockError,
    DuplicateReferenceError,
    ReceiptNotFoundError,
    AlreadyVoidedError,
    InvalidVoidRequestError,
    InvalidCursorError,
)
from .ledger import (
    LEDGER_PERIODS,
    staff_name_for,
    transaction_to_row,
    fetch_rows_by_reference,
    ledger_queryset,
    get_ledger_page,
)
from .batch_processing import process_inventory_batch, generate_reference_number
from .void_processing import void_transaction_by_ref
from .receipts import get_receipt
from .history import get_today_history

__all__ = [
    # Exceptions
    'TransactionsServiceError',
    'InvalidBatchError',
    'ProductNotFoundError',
    'InsufficientStockError',
    'DuplicateReferenceError',
    'ReceiptNotFoundError',
    'AlreadyVoidedError',
    'InvalidVoidRequestError',
    'InvalidCursorError',
    # Ledger
    'LEDGER_PERIODS',
    'staff_name_for',
    'transaction_to_row',
    'fetch_rows_by_reference',
    'ledger_queryset',
    'get_ledger_page',
    # Batches and voids
    'process_inventory_batch',
    'generate_reference_number',
    'void_transaction_by_ref',
    # Lookups
    'get_receipt',
    'get_today_history',
]

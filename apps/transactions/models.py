from django.db import models, transaction
from django.conf import settings
from django.core.validators import MinValueValidator
from django.utils import timezone
from decimal import Decimal
import uuid


class TransactionType(models.TextChoices):
    RECEIVING = 'RECEIVING', 'Receiving'
    ISSUANCE = 'ISSUANCE', 'Issuance'
    ISSUANCE_RETURN = 'ISSUANCE_RETURN', 'Issuance Return'
    PULL_OUT = 'PULL_OUT', 'Pull Out'
    VOID = 'VOID', 'Void'


class TransactionMode(models.TextChoices):
    CASH = 'CASH', 'Cash'
    CHARGED = 'CHARGED', 'Charged'
    SIP = 'SIP', 'SIP'
    TRANSMITTAL = 'TRANSMITTAL', 'Transmittal'


# Stock direction per movement type
STOCK_IN_TYPES = (TransactionType.RECEIVING, TransactionType.ISSUANCE_RETURN)
STOCK_OUT_TYPES = (TransactionType.ISSUANCE, TransactionType.PULL_OUT)

# Movements that need student context / carry a payment mode
STUDENT_TYPES = (TransactionType.ISSUANCE, TransactionType.ISSUANCE_RETURN)


class Transaction(models.Model):
    """
    One line item of a receipt.

    Rows are append-only. All lines of a receipt share reference_number and
    bis_number. Voiding appends a VOID marker row (qty 0, no product) with
    the same reference and flags every original line is_voided.
    """

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    reference_number = models.CharField(max_length=50, db_index=True)
    bis_number = models.PositiveBigIntegerField(null=True, blank=True)
    type = models.CharField(max_length=20, choices=TransactionType.choices)
    transaction_mode = models.CharField(max_length=20, choices=TransactionMode.choices, blank=True)

    product = models.ForeignKey(
        'catalog.Product',
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name='transactions'
    )
    product_name_snapshot = models.CharField(max_length=300, blank=True)
    qty = models.PositiveIntegerField(default=0)
    price_snapshot = models.DecimalField(
        max_digits=12, decimal_places=2, default=Decimal('0.00'),
        validators=[MinValueValidator(Decimal('0.00'))]
    )
    unit_cost_snapshot = models.DecimalField(
        max_digits=12, decimal_places=2, default=Decimal('0.00'),
        validators=[MinValueValidator(Decimal('0.00'))]
    )
    previous_stock = models.PositiveIntegerField(null=True, blank=True)
    new_stock = models.PositiveIntegerField(null=True, blank=True)

    # Student context (issuance / returns)
    student_id = models.CharField(max_length=50, blank=True)
    student_name = models.CharField(max_length=200, blank=True)
    course = models.CharField(max_length=100, blank=True)
    year_level = models.CharField(max_length=20, blank=True)

    # Supplier context (receiving / pull-out)
    supplier = models.CharField(max_length=200, blank=True)
    remarks = models.TextField(blank=True)

    user = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name='transactions'
    )
    timestamp = models.DateTimeField(default=timezone.now, db_index=True)

    is_voided = models.BooleanField(default=False)
    void_reason = models.TextField(blank=True)

    class Meta:
        db_table = 'transactions'
        indexes = [
            models.Index(fields=['type', 'timestamp'], name='tx_type_timestamp_idx'),
            models.Index(fields=['timestamp', 'id'], name='tx_timestamp_id_idx'),
            models.Index(fields=['student_name'], name='tx_student_name_idx'),
        ]
        ordering = ['-timestamp', '-id']

    def __str__(self):
        return f"{self.reference_number} {self.type} {self.product_name_snapshot} x{self.qty}"

    @property
    def is_void_marker(self):
        return self.type == TransactionType.VOID


class DocumentSequence(models.Model):
    """Named monotonic counter (BIS numbers)."""

    name = models.CharField(max_length=50, primary_key=True)
    last_value = models.PositiveBigIntegerField(default=0)

    class Meta:
        db_table = 'document_sequences'

    def __str__(self):
        return f"{self.name}={self.last_value}"

    @classmethod
    def next_value(cls, name):
        """
        Reserve and return the next number of the sequence.

        Must run inside the caller's transaction so the number is released
        when the caller rolls back.
        """
        with transaction.atomic():
            sequence, _ = cls.objects.select_for_update().get_or_create(name=name)
            sequence.last_value += 1
            sequence.save(update_fields=['last_value'])
        return sequence.last_value


class ReceiptReference(models.Model):
    """
    One row per receipt reference number.

    Claimed inside the batch transaction; the primary key makes a second
    batch with the same reference fail even while the first is uncommitted.
    """

    reference_number = models.CharField(max_length=50, primary_key=True)
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        db_table = 'receipt_references'

    def __str__(self):
        return self.reference_number

from rest_framework import serializers

from .models import Transaction, TransactionType, TransactionMode
from .services import LEDGER_PERIODS

BATCH_TYPE_CHOICES = [
    choice for choice in TransactionType.choices if choice[0] != TransactionType.VOID
]


class TransactionSerializer(serializers.ModelSerializer):
    """Single ledger row."""

    staff_name = serializers.SerializerMethodField()
    product_barcode = serializers.CharField(source='product.barcode', read_only=True, default=None)

    class Meta:
        model = Transaction
        fields = [
            'id',
            'reference_number',
            'bis_number',
            'type',
            'transaction_mode',
            'product',
            'product_barcode',
            'product_name_snapshot',
            'qty',
            'price_snapshot',
            'unit_cost_snapshot',
            'previous_stock',
            'new_stock',
            'student_id',
            'student_name',
            'course',
            'year_level',
            'supplier',
            'remarks',
            'user',
            'staff_name',
            'timestamp',
            'is_voided',
            'void_reason',
        ]
        read_only_fields = fields

    def get_staff_name(self, obj) -> str:
        return obj.user.get_display_name() if obj.user else 'Unknown'


# =============================================================================
# Input serializers
# =============================================================================

class BatchItemSerializer(serializers.Serializer):
    barcode = serializers.CharField(max_length=100)
    qty = serializers.IntegerField(min_value=1)


class BatchHeaderSerializer(serializers.Serializer):
    type = serializers.ChoiceField(choices=BATCH_TYPE_CHOICES)
    transaction_mode = serializers.ChoiceField(
        choices=TransactionMode.choices, required=False, allow_blank=True, default=''
    )
    reference_number = serializers.CharField(max_length=50, required=False, allow_blank=True, default='')
    student_id = serializers.CharField(max_length=50, required=False, allow_blank=True, default='')
    student_name = serializers.CharField(max_length=200, required=False, allow_blank=True, default='')
    course = serializers.CharField(max_length=100, required=False, allow_blank=True, default='')
    year_level = serializers.CharField(max_length=20, required=False, allow_blank=True, default='')
    supplier = serializers.CharField(max_length=200, required=False, allow_blank=True, default='')
    remarks = serializers.CharField(required=False, allow_blank=True, default='')


class BatchInputSerializer(serializers.Serializer):
    """One receipt: header plus scanned items."""

    header = BatchHeaderSerializer()
    items = BatchItemSerializer(many=True, allow_empty=False)


class VoidInputSerializer(serializers.Serializer):
    reference_number = serializers.CharField(max_length=50)
    reason = serializers.CharField(allow_blank=True, default='')


class LedgerFilterSerializer(serializers.Serializer):
    """Query parameters of the ledger view."""

    period = serializers.ChoiceField(choices=LEDGER_PERIODS, default='7DAYS')
    type = serializers.ChoiceField(
        choices=['ALL'] + list(TransactionType.values), default='ALL'
    )
    mode = serializers.ChoiceField(
        choices=['ALL'] + list(TransactionMode.values), default='ALL'
    )
    search = serializers.CharField(required=False, allow_blank=True, default='')
    page = serializers.IntegerField(min_value=1, default=1)
    page_size = serializers.IntegerField(min_value=1, max_value=200, required=False)
    seq = serializers.CharField(required=False, allow_blank=True)


class HistoryFilterSerializer(serializers.Serializer):
    cursor = serializers.CharField(required=False, allow_blank=True, default='')
    limit = serializers.IntegerField(min_value=1, max_value=100, default=10)


# =============================================================================
# Output serializers
# =============================================================================

class TransactionRowSerializer(serializers.Serializer):
    id = serializers.CharField()
    reference_number = serializers.CharField(allow_blank=True)
    bis_number = serializers.IntegerField(allow_null=True)
    type = serializers.CharField()
    transaction_mode = serializers.CharField(allow_blank=True)
    product_id = serializers.CharField(allow_null=True)
    product_name_snapshot = serializers.CharField(allow_blank=True)
    qty = serializers.IntegerField()
    price_snapshot = serializers.DecimalField(max_digits=12, decimal_places=2)
    unit_cost_snapshot = serializers.DecimalField(max_digits=12, decimal_places=2)
    previous_stock = serializers.IntegerField(allow_null=True)
    new_stock = serializers.IntegerField(allow_null=True)
    student_id = serializers.CharField(allow_blank=True)
    student_name = serializers.CharField(allow_blank=True)
    supplier = serializers.CharField(allow_blank=True)
    remarks = serializers.CharField(allow_blank=True)
    staff_name = serializers.CharField()
    timestamp = serializers.DateTimeField()
    is_voided = serializers.BooleanField()
    void_reason = serializers.CharField(allow_blank=True)


class ReceiptSerializer(serializers.Serializer):
    """Receipt reconstructed from ledger rows."""

    reference_number = serializers.CharField()
    bis_number = serializers.IntegerField(allow_null=True)
    type = serializers.CharField()
    transaction_mode = serializers.CharField(allow_blank=True, allow_null=True)
    timestamp = serializers.DateTimeField(allow_null=True)
    student_id = serializers.CharField(allow_blank=True, allow_null=True)
    student_name = serializers.CharField(allow_blank=True, allow_null=True)
    course = serializers.CharField(allow_blank=True, allow_null=True)
    year_level = serializers.CharField(allow_blank=True, allow_null=True)
    supplier = serializers.CharField(allow_blank=True, allow_null=True)
    remarks = serializers.CharField(allow_blank=True, allow_null=True)
    staff_name = serializers.CharField(allow_null=True)
    user_id = serializers.CharField(allow_null=True)
    lines = TransactionRowSerializer(many=True)
    total_qty = serializers.IntegerField()
    total_value = serializers.DecimalField(max_digits=14, decimal_places=2)
    is_voided = serializers.BooleanField()
    is_orphan_void = serializers.BooleanField()
    void_reason = serializers.CharField(allow_null=True)
    voided_by = serializers.CharField(allow_null=True)
    voided_by_name = serializers.CharField(allow_null=True)
    voided_at = serializers.DateTimeField(allow_null=True)


class LedgerPageSerializer(serializers.Serializer):
    count = serializers.IntegerField()
    page = serializers.IntegerField()
    page_size = serializers.IntegerField()
    num_pages = serializers.IntegerField()
    seq = serializers.CharField(allow_null=True)
    receipts = ReceiptSerializer(many=True)


class TodayHistorySerializer(serializers.Serializer):
    next_cursor = serializers.CharField(allow_null=True)
    rows = TransactionRowSerializer(many=True)
    receipts = ReceiptSerializer(many=True)


class ReceiptItemSerializer(serializers.Serializer):
    item_name = serializers.CharField(allow_blank=True)
    qty = serializers.IntegerField()
    price = serializers.DecimalField(max_digits=12, decimal_places=2)
    cost = serializers.DecimalField(max_digits=12, decimal_places=2)
    amount = serializers.DecimalField(max_digits=14, decimal_places=2)


class ReceiptLookupSerializer(serializers.Serializer):
    """Printable receipt returned by the lookup endpoint."""

    reference_number = serializers.CharField()
    bis_number = serializers.IntegerField(allow_null=True)
    type = serializers.CharField()
    transaction_mode = serializers.CharField(allow_blank=True)
    timestamp = serializers.DateTimeField()
    student_id = serializers.CharField(allow_blank=True)
    student_name = serializers.CharField(allow_blank=True)
    course = serializers.CharField(allow_blank=True)
    year_level = serializers.CharField(allow_blank=True)
    supplier = serializers.CharField(allow_blank=True)
    remarks = serializers.CharField(allow_blank=True)
    staff_name = serializers.CharField()
    is_voided = serializers.BooleanField()
    void_reason = serializers.CharField(allow_null=True, allow_blank=True)
    voided_by_name = serializers.CharField(allow_null=True)
    voided_at = serializers.DateTimeField(allow_null=True)
    items = ReceiptItemSerializer(many=True)
    total_qty = serializers.IntegerField()
    total_amount = serializers.DecimalField(max_digits=14, decimal_places=2)

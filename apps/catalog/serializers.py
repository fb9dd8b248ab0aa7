from rest_framework import serializers
from .models import Product, DEFAULT_MIN_STOCK_LEVEL


class ProductSerializer(serializers.ModelSerializer):
    """Catalog entry with derived stock indicators."""

    is_low_stock = serializers.BooleanField(read_only=True)
    stock_value = serializers.DecimalField(max_digits=14, decimal_places=2, read_only=True)

    class Meta:
        model = Product
        fields = [
            'internal_id',
            'barcode',
            'accpac_code',
            'name',
            'price',
            'unit_cost',
            'min_stock_level',
            'current_stock',
            'location',
            'is_low_stock',
            'stock_value',
            'last_updated',
        ]
        read_only_fields = ['internal_id', 'current_stock', 'last_updated']


class ProductCreateSerializer(serializers.Serializer):
    """Input for registering a product; identifiers are upper-cased by the service."""

    barcode = serializers.CharField(max_length=100)
    name = serializers.CharField(max_length=300)
    accpac_code = serializers.CharField(max_length=50, required=False, allow_blank=True, allow_null=True)
    price = serializers.DecimalField(max_digits=12, decimal_places=2, min_value=0, default=0)
    unit_cost = serializers.DecimalField(max_digits=12, decimal_places=2, min_value=0, default=0)
    min_stock_level = serializers.IntegerField(min_value=0, default=DEFAULT_MIN_STOCK_LEVEL)
    initial_stock = serializers.IntegerField(min_value=0, default=0)
    location = serializers.CharField(max_length=100, required=False, allow_blank=True, default='')


class ProductUpdateSerializer(serializers.Serializer):
    """Editable product fields. Stock is deliberately absent."""

    barcode = serializers.CharField(max_length=100, required=False)
    name = serializers.CharField(max_length=300, required=False)
    accpac_code = serializers.CharField(max_length=50, required=False, allow_blank=True, allow_null=True)
    price = serializers.DecimalField(max_digits=12, decimal_places=2, min_value=0, required=False)
    unit_cost = serializers.DecimalField(max_digits=12, decimal_places=2, min_value=0, required=False)
    min_stock_level = serializers.IntegerField(min_value=0, required=False)
    location = serializers.CharField(max_length=100, required=False, allow_blank=True)


class ProductFilterSerializer(serializers.Serializer):
    search = serializers.CharField(required=False, allow_blank=True)
    low_stock = serializers.BooleanField(required=False, default=False)


class CSVImportSerializer(serializers.Serializer):
    file = serializers.FileField()


class CSVImportResultSerializer(serializers.Serializer):
    inserted = serializers.IntegerField()
    updated = serializers.IntegerField()
    unchanged = serializers.IntegerField()
    errors = serializers.ListField(child=serializers.CharField())


class VoidDetailsSerializer(serializers.Serializer):
    reason = serializers.CharField(allow_blank=True)
    who = serializers.CharField(allow_null=True)
    when = serializers.DateTimeField(allow_null=True)


class AuditTrailEntrySerializer(serializers.Serializer):
    id = serializers.CharField()
    reference_number = serializers.CharField()
    bis_number = serializers.IntegerField(allow_null=True)
    type = serializers.CharField()
    transaction_mode = serializers.CharField(allow_blank=True)
    qty = serializers.IntegerField()
    price_snapshot = serializers.DecimalField(max_digits=12, decimal_places=2)
    unit_cost_snapshot = serializers.DecimalField(max_digits=12, decimal_places=2)
    previous_stock = serializers.IntegerField(allow_null=True)
    new_stock = serializers.IntegerField(allow_null=True)
    student_name = serializers.CharField(allow_blank=True)
    supplier = serializers.CharField(allow_blank=True)
    remarks = serializers.CharField(allow_blank=True)
    staff_name = serializers.CharField()
    timestamp = serializers.DateTimeField()
    is_voided = serializers.BooleanField()
    void_details = VoidDetailsSerializer(allow_null=True)

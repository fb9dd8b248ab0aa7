"""
Serializers for analytics app.

Input Serializers:
    DateRangeQuerySerializer - Validates the start/end date range
    LowStockQuerySerializer - Validates the low stock list limit

Response Serializers:
    PeriodStatsSerializer - Movement totals for a range
    InventorySummarySerializer - Beginning/inflow/outflow/ending blocks
    StockOverviewSerializer - Stock on hand
    LowStockProductSerializer - One low stock alert
"""

from rest_framework import serializers


# =============================================================================
# Input Serializers (Query Parameter Validation)
# =============================================================================

class DateRangeQuerySerializer(serializers.Serializer):
    """
    Validate the date range query parameters.

    Used by: period_stats, inventory_summary

    Query Parameters:
        start_date (date): First day, defaults to the first of this month
        end_date (date): Last day, defaults to today
    """

    start_date = serializers.DateField(required=False)
    end_date = serializers.DateField(required=False)

    def validate(self, attrs):
        start = attrs.get('start_date')
        end = attrs.get('end_date')
        if start and end and start > end:
            raise serializers.ValidationError({
                'start_date': 'Start date must be before end date'
            })
        return attrs


class LowStockQuerySerializer(serializers.Serializer):
    limit = serializers.IntegerField(
        min_value=1,
        max_value=100,
        required=False,
        default=20,
        help_text='Number of results (1-100)'
    )


# =============================================================================
# Response Serializers (API Documentation)
# =============================================================================

class PeriodStatsSerializer(serializers.Serializer):
    start_date = serializers.DateField()
    end_date = serializers.DateField()
    inflow_qty = serializers.IntegerField()
    inflow_cost = serializers.DecimalField(max_digits=14, decimal_places=2)
    outflow_qty = serializers.IntegerField()
    cogs = serializers.DecimalField(max_digits=14, decimal_places=2)
    sales_revenue = serializers.DecimalField(max_digits=14, decimal_places=2)
    current_qty = serializers.IntegerField()
    current_val = serializers.DecimalField(max_digits=14, decimal_places=2)


class QtyValueSerializer(serializers.Serializer):
    qty = serializers.IntegerField()
    val = serializers.DecimalField(max_digits=14, decimal_places=2)


class OutflowSerializer(QtyValueSerializer):
    revenue = serializers.DecimalField(max_digits=14, decimal_places=2)


class InventorySummarySerializer(serializers.Serializer):
    """Response serializer for the inventory summary."""
    start_date = serializers.DateField()
    end_date = serializers.DateField()
    beginning = QtyValueSerializer()
    inflow = QtyValueSerializer()
    outflow = OutflowSerializer()
    ending = QtyValueSerializer()


class StockOverviewSerializer(serializers.Serializer):
    product_count = serializers.IntegerField()
    total_units = serializers.IntegerField()
    total_value = serializers.DecimalField(max_digits=14, decimal_places=2)
    low_stock_count = serializers.IntegerField()


class LowStockProductSerializer(serializers.Serializer):
    internal_id = serializers.CharField()
    barcode = serializers.CharField()
    name = serializers.CharField()
    location = serializers.CharField(allow_blank=True)
    current_stock = serializers.IntegerField()
    min_stock_level = serializers.IntegerField()
    shortfall = serializers.IntegerField()


class ErrorSerializer(serializers.Serializer):
    """Standard error response serializer."""
    error = serializers.CharField()

"""
Analytics Module
=================

Read-only inventory figures for the dashboard: movement totals for a date
range, the beginning/ending inventory summary derived from them, the stock
overview and the low stock list.

Classes:
    AnalyticsQueries: Static methods for the dashboard queries.

Key Features:
    - Inflow/outflow quantities valued at unit cost
    - Sales revenue net of issuance returns
    - Beginning inventory derived backwards from current stock
    - Low stock alerts

Example:
    Getting this month's inventory summary::

        from apps.analytics.analytics import AnalyticsQueries

        summary = AnalyticsQueries.get_inventory_summary()
        print(f"Ending value: {summary['ending']['val']}")

Note:
    Voided lines and VOID markers never count toward any figure. All
    methods return plain dictionaries or lists.
"""

from datetime import datetime, time, timedelta
from decimal import Decimal

from django.db.models import Sum, Count, F, Q, DecimalField
from django.utils import timezone

from apps.catalog.models import Product
from apps.transactions.models import Transaction, TransactionType
from .exceptions import InvalidDateRangeError

MONEY = DecimalField(max_digits=14, decimal_places=2)

INFLOW_TYPES = (TransactionType.RECEIVING, TransactionType.ISSUANCE_RETURN)
OUTFLOW_TYPES = (TransactionType.ISSUANCE, TransactionType.PULL_OUT)

DEFAULT_LOW_STOCK_LIMIT = 20


def _zero_if_none(value, default=Decimal('0.00')):
    return default if value is None else value


def _resolve_range(start_date=None, end_date=None):
    """
    Default to the first of the current month through today.

    Raises:
        InvalidDateRangeError: If start_date is after end_date
    """
    today = timezone.localdate()
    start_date = start_date or today.replace(day=1)
    end_date = end_date or today
    if start_date > end_date:
        raise InvalidDateRangeError("Start date must be before end date")
    return start_date, end_date


def _day_bounds(start_date, end_date):
    """Aware [start, end) datetimes covering both dates in local time."""
    tz = timezone.get_current_timezone()
    start = timezone.make_aware(datetime.combine(start_date, time.min), tz)
    end = timezone.make_aware(datetime.combine(end_date + timedelta(days=1), time.min), tz)
    return start, end


class AnalyticsQueries:
    """
    Aggregate queries behind the analytics endpoints.

    Methods:
        get_period_stats: Movement totals for a date range plus current stock.
        get_inventory_summary: Beginning/inflow/outflow/ending blocks.
        get_stock_overview: Units, value and low stock count on hand.
        low_stock_products: Products at or below their minimum level.
    """

    @staticmethod
    def get_period_stats(start_date=None, end_date=None):
        """
        Movement totals for non-voided lines within the date range.

        Args:
            start_date: First day (inclusive, local time)
            end_date: Last day (inclusive, local time)

        Returns:
            dict: inflow_qty, inflow_cost, outflow_qty, cogs, sales_revenue,
            current_qty, current_val

        Raises:
            InvalidDateRangeError: If start_date is after end_date
        """
        start_date, end_date = _resolve_range(start_date, end_date)
        start, end = _day_bounds(start_date, end_date)

        movements = (
            Transaction.objects
            .filter(timestamp__gte=start, timestamp__lt=end, is_voided=False)
            .exclude(type=TransactionType.VOID)
        )

        cost = F('qty') * F('unit_cost_snapshot')
        price = F('qty') * F('price_snapshot')
        totals = movements.aggregate(
            inflow_qty=Sum('qty', filter=Q(type__in=INFLOW_TYPES)),
            inflow_cost=Sum(cost, filter=Q(type__in=INFLOW_TYPES), output_field=MONEY),
            outflow_qty=Sum('qty', filter=Q(type__in=OUTFLOW_TYPES)),
            cogs=Sum(cost, filter=Q(type__in=OUTFLOW_TYPES), output_field=MONEY),
            issued_revenue=Sum(price, filter=Q(type=TransactionType.ISSUANCE), output_field=MONEY),
            returned_revenue=Sum(price, filter=Q(type=TransactionType.ISSUANCE_RETURN), output_field=MONEY),
        )

        stock = Product.objects.aggregate(
            current_qty=Sum('current_stock'),
            current_val=Sum(F('current_stock') * F('unit_cost'), output_field=MONEY),
        )

        return {
            'start_date': start_date,
            'end_date': end_date,
            'inflow_qty': _zero_if_none(totals['inflow_qty'], 0),
            'inflow_cost': _zero_if_none(totals['inflow_cost']),
            'outflow_qty': _zero_if_none(totals['outflow_qty'], 0),
            'cogs': _zero_if_none(totals['cogs']),
            'sales_revenue': (
                _zero_if_none(totals['issued_revenue']) - _zero_if_none(totals['returned_revenue'])
            ),
            'current_qty': _zero_if_none(stock['current_qty'], 0),
            'current_val': _zero_if_none(stock['current_val']),
        }

    @staticmethod
    def get_inventory_summary(start_date=None, end_date=None):
        """
        Beginning, inflow, outflow and ending inventory for a date range.

        Ending is the stock on hand now. Beginning is worked backwards from
        it: qty = ending - inflow + outflow, value = ending value - inflow
        cost + cogs.

        Raises:
            InvalidDateRangeError: If start_date is after end_date
        """
        stats = AnalyticsQueries.get_period_stats(start_date, end_date)

        return {
            'start_date': stats['start_date'],
            'end_date': stats['end_date'],
            'beginning': {
                'qty': stats['current_qty'] - stats['inflow_qty'] + stats['outflow_qty'],
                'val': stats['current_val'] - stats['inflow_cost'] + stats['cogs'],
            },
            'inflow': {
                'qty': stats['inflow_qty'],
                'val': stats['inflow_cost'],
            },
            'outflow': {
                'qty': stats['outflow_qty'],
                'val': stats['cogs'],
                'revenue': stats['sales_revenue'],
            },
            'ending': {
                'qty': stats['current_qty'],
                'val': stats['current_val'],
            },
        }

    @staticmethod
    def get_stock_overview():
        """Units on hand, their value at selling price, and the low stock count."""
        totals = Product.objects.aggregate(
            product_count=Count('internal_id'),
            total_units=Sum('current_stock'),
            total_value=Sum(F('current_stock') * F('price'), output_field=MONEY),
            low_stock_count=Count('internal_id', filter=Q(current_stock__lte=F('min_stock_level'))),
        )
        return {
            'product_count': totals['product_count'],
            'total_units': _zero_if_none(totals['total_units'], 0),
            'total_value': _zero_if_none(totals['total_value']),
            'low_stock_count': totals['low_stock_count'],
        }

    @staticmethod
    def low_stock_products(limit=DEFAULT_LOW_STOCK_LIMIT):
        """Products at or below their minimum level, emptiest first."""
        products = (
            Product.objects
            .filter(current_stock__lte=F('min_stock_level'))
            .order_by('current_stock', 'name')[:limit]
        )
        return [
            {
                'internal_id': str(product.internal_id),
                'barcode': product.barcode,
                'name': product.name,
                'location': product.location,
                'current_stock': product.current_stock,
                'min_stock_level': product.min_stock_level,
                'shortfall': product.min_stock_level - product.current_stock,
            }
            for product in products
        ]

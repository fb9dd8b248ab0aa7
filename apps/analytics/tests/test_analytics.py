import pytest
from datetime import timedelta
from decimal import Decimal
from django.utils import timezone

from apps.analytics.analytics import AnalyticsQueries
from apps.analytics.exceptions import InvalidDateRangeError
from apps.transactions.models import Transaction


@pytest.mark.django_db
class TestPeriodStats:

    def test_totals_exclude_voided_lines(self, analytics_movements):
        stats = AnalyticsQueries.get_period_stats()

        assert stats['inflow_qty'] == 11
        assert stats['inflow_cost'] == Decimal('110.00')
        assert stats['outflow_qty'] == 6
        assert stats['cogs'] == Decimal('100.00')
        assert stats['sales_revenue'] == Decimal('45.00')
        assert stats['current_qty'] == 30
        assert stats['current_val'] == Decimal('360.00')

    def test_range_outside_movements(self, analytics_movements):
        Transaction.objects.update(timestamp=timezone.now() - timedelta(days=40))
        today = timezone.localdate()

        stats = AnalyticsQueries.get_period_stats(start_date=today - timedelta(days=7), end_date=today)

        assert stats['inflow_qty'] == 0
        assert stats['cogs'] == Decimal('0.00')
        assert stats['current_qty'] == 30

    def test_empty_database(self, db):
        stats = AnalyticsQueries.get_period_stats()

        assert stats['inflow_qty'] == 0
        assert stats['current_val'] == Decimal('0.00')

    def test_inverted_range(self, db):
        today = timezone.localdate()

        with pytest.raises(InvalidDateRangeError):
            AnalyticsQueries.get_period_stats(start_date=today, end_date=today - timedelta(days=1))


@pytest.mark.django_db
class TestInventorySummary:

    def test_beginning_reconstructed_from_ending(self, analytics_movements):
        summary = AnalyticsQueries.get_inventory_summary()

        assert summary['ending'] == {'qty': 30, 'val': Decimal('360.00')}
        assert summary['inflow'] == {'qty': 11, 'val': Decimal('110.00')}
        assert summary['outflow'] == {
            'qty': 6, 'val': Decimal('100.00'), 'revenue': Decimal('45.00')
        }
        # Opening stock was 20 pens at 10.00 and 5 notebooks at 30.00
        assert summary['beginning'] == {'qty': 25, 'val': Decimal('350.00')}

    def test_defaults_to_current_month(self, db):
        summary = AnalyticsQueries.get_inventory_summary()

        today = timezone.localdate()
        assert summary['start_date'] == today.replace(day=1)
        assert summary['end_date'] == today


@pytest.mark.django_db
class TestStockQueries:

    def test_overview(self, analytics_movements):
        overview = AnalyticsQueries.get_stock_overview()

        # 27 pens at 15.00 + 3 notebooks at 45.00
        assert overview['product_count'] == 2
        assert overview['total_units'] == 30
        assert overview['total_value'] == Decimal('540.00')
        assert overview['low_stock_count'] == 1

    def test_low_stock_products(self, analytics_movements):
        rows = AnalyticsQueries.low_stock_products()

        assert [row['barcode'] for row in rows] == ['NB-001']
        assert rows[0]['current_stock'] == 3
        assert rows[0]['shortfall'] == 7

    def test_low_stock_limit(self, analytics_pen, analytics_notebook):
        analytics_pen.current_stock = 1
        analytics_pen.save()

        rows = AnalyticsQueries.low_stock_products(limit=1)

        assert [row['barcode'] for row in rows] == ['PEN-001']

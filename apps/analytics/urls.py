from django.urls import path
from . import views

app_name = 'analytics'

urlpatterns = [
    # Period figures
    path('period-stats/', views.period_stats, name='period-stats'),
    path('inventory-summary/', views.inventory_summary, name='inventory-summary'),

    # Stock on hand
    path('stock-overview/', views.stock_overview, name='stock-overview'),
    path('low-stock/', views.low_stock, name='low-stock'),
]

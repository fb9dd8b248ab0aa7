from django.contrib import admin
from django.utils.html import format_html
from .models import Product


@admin.register(Product)
class ProductAdmin(admin.ModelAdmin):
    """Catalog administration; stock is read-only and only moves through transactions."""

    list_display = [
        'barcode',
        'accpac_code',
        'name',
        'price',
        'unit_cost',
        'current_stock',
        'stock_badge',
        'location',
        'last_updated',
    ]
    list_filter = ['location']
    search_fields = ['barcode', 'accpac_code', 'name']
    ordering = ['name']
    readonly_fields = ['internal_id', 'current_stock', 'last_updated']

    fieldsets = (
        ('Identification', {
            'fields': ('internal_id', 'barcode', 'accpac_code', 'name', 'location')
        }),
        ('Pricing', {
            'fields': ('price', 'unit_cost'),
        }),
        ('Stock', {
            'fields': ('current_stock', 'min_stock_level', 'last_updated'),
        }),
    )

    def stock_badge(self, obj):
        if obj.is_low_stock:
            return format_html(
                '<span style="background: #B85C5C; color: white; padding: 3px 8px; '
                'border-radius: 10px; font-size: 11px;">Low</span>'
            )
        return format_html(
            '<span style="background: #6B8E5E; color: white; padding: 3px 8px; '
            'border-radius: 10px; font-size: 11px;">OK</span>'
        )
    stock_badge.short_description = 'Stock'

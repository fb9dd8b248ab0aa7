from django.contrib import admin
from django.utils.html import format_html
from .models import Transaction, DocumentSequence


@admin.register(Transaction)
class TransactionAdmin(admin.ModelAdmin):
    """Read-only ledger; rows are only written by batches and voids."""

    list_display = [
        'reference_number',
        'bis_number',
        'type_badge',
        'transaction_mode',
        'product_name_snapshot',
        'qty',
        'student_name',
        'supplier',
        'user',
        'timestamp',
        'is_voided',
    ]
    list_filter = ['type', 'transaction_mode', 'is_voided', 'timestamp']
    search_fields = ['reference_number', 'student_name', 'student_id', 'product_name_snapshot']
    ordering = ['-timestamp']
    date_hierarchy = 'timestamp'
    raw_id_fields = ['product', 'user']

    fieldsets = (
        ('Receipt', {
            'fields': ('id', 'reference_number', 'bis_number', 'type', 'transaction_mode', 'timestamp', 'user')
        }),
        ('Line', {
            'fields': (
                'product', 'product_name_snapshot', 'qty',
                'price_snapshot', 'unit_cost_snapshot', 'previous_stock', 'new_stock'
            ),
        }),
        ('Context', {
            'fields': ('student_id', 'student_name', 'course', 'year_level', 'supplier', 'remarks'),
        }),
        ('Void', {
            'fields': ('is_voided', 'void_reason'),
        }),
    )

    def get_readonly_fields(self, request, obj=None):
        return [field.name for field in self.model._meta.fields]

    def has_add_permission(self, request):
        return False

    def has_delete_permission(self, request, obj=None):
        return False

    def type_badge(self, obj):
        colors = {
            'RECEIVING': '#6B8E5E',
            'ISSUANCE': '#4A6FA5',
            'ISSUANCE_RETURN': '#C4A35A',
            'PULL_OUT': '#8B6F47',
            'VOID': '#B85C5C',
        }
        return format_html(
            '<span style="background: {}; color: white; padding: 3px 8px; '
            'border-radius: 10px; font-size: 11px;">{}</span>',
            colors.get(obj.type, '#999'),
            obj.get_type_display()
        )
    type_badge.short_description = 'Type'


@admin.register(DocumentSequence)
class DocumentSequenceAdmin(admin.ModelAdmin):
    list_display = ['name', 'last_value']

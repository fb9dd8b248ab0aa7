from django.contrib import admin
from .models import ChangeEvent


@admin.register(ChangeEvent)
class ChangeEventAdmin(admin.ModelAdmin):
    list_display = ['id', 'channel', 'table', 'event', 'action', 'object_id', 'created_at']
    list_filter = ['channel', 'action', 'table']
    search_fields = ['object_id', 'event']
    ordering = ['-id']

    def has_add_permission(self, request):
        return False

    def has_change_permission(self, request, obj=None):
        return False

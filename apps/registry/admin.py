from django.contrib import admin
from .models import Student, Supplier


@admin.register(Student)
class StudentAdmin(admin.ModelAdmin):
    list_display = ['student_id', 'name', 'course', 'year_level', 'last_updated']
    list_filter = ['course', 'year_level']
    search_fields = ['student_id', 'name']
    ordering = ['name']


@admin.register(Supplier)
class SupplierAdmin(admin.ModelAdmin):
    list_display = ['name', 'contact_info', 'created_at', 'updated_at']
    search_fields = ['name', 'contact_info']
    ordering = ['name']
    readonly_fields = ['created_at', 'updated_at']

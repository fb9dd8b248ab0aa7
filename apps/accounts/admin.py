from django.contrib import admin
from django.contrib.auth.admin import UserAdmin as BaseUserAdmin
from django.utils.html import format_html

from .models import User, StaffRole, StaffStatus, ADMIN_ROLES


def _badge(label, background, color='white'):
    return format_html(
        '<span style="background: {}; color: {}; padding: 3px 8px; '
        'border-radius: 10px; font-size: 11px;">{}</span>',
        background, color, label
    )


@admin.register(User)
class StaffAdmin(BaseUserAdmin):
    """
    Staff whitelist administration.

    Mirrors the in-app staff screen: role, invitation status and access
    are visible at a glance, with bulk revoke/restore actions.
    """

    list_display = [
        'email',
        'full_name',
        'role_badge',
        'status_badge',
        'is_active',
        'invited_at',
        'last_login',
    ]
    list_filter = ['role', 'status', 'is_active']
    search_fields = ['email', 'full_name']
    ordering = ['full_name', 'email']

    fieldsets = (
        ('Basic Information', {
            'fields': ('email', 'full_name', 'password')
        }),
        ('Authorization', {
            'fields': ('role', 'status', 'is_active', 'is_staff', 'is_superuser'),
        }),
        ('Invitation', {
            'fields': ('invited_by', 'invited_at', 'registered_at'),
            'classes': ('collapse',),
        }),
        ('Timestamps', {
            'fields': ('created_at', 'last_login'),
            'classes': ('collapse',),
        }),
    )

    add_fieldsets = (
        ('Invite Staff', {
            'classes': ('wide',),
            'fields': ('email', 'full_name', 'role'),
        }),
    )

    readonly_fields = ['invited_at', 'registered_at', 'created_at', 'last_login']
    filter_horizontal = []

    def role_badge(self, obj):
        if obj.role in ADMIN_ROLES:
            return _badge(obj.get_role_display(), '#A47449')
        return _badge(obj.get_role_display(), '#ccc', '#666')
    role_badge.short_description = 'Role'
    role_badge.admin_order_field = 'role'

    def status_badge(self, obj):
        if obj.status == StaffStatus.REGISTERED:
            return _badge('Registered', '#6B8E5E')
        return _badge('Pending', '#E5C49A', '#2C1810')
    status_badge.short_description = 'Status'
    status_badge.admin_order_field = 'status'

    actions = ['revoke_access', 'restore_access']

    @admin.action(description='Revoke access for selected staff')
    def revoke_access(self, request, queryset):
        """Deactivate selected staff (super admins are skipped)."""
        safe_queryset = queryset.exclude(role=StaffRole.SUPER_ADMIN).exclude(pk=request.user.pk)
        count = safe_queryset.update(is_active=False)
        self.message_user(request, f'Revoked access for {count} staff member(s).')

    @admin.action(description='Restore access for selected staff')
    def restore_access(self, request, queryset):
        count = queryset.update(is_active=True)
        self.message_user(request, f'Restored access for {count} staff member(s).')

"""
Admin configuration for accounts app.

Liaison reminder thresholds are edited inline on the user page.
"""

from django.contrib import admin
from django.contrib.auth.admin import UserAdmin as BaseUserAdmin

from apps.reminders.models import ReminderSettings
from .models import User


class ReminderSettingsInline(admin.StackedInline):
    model = ReminderSettings
    can_delete = False
    extra = 0
    max_num = 1
    fields = (
        ('suggest_threshold', 'urgent_threshold'),
        ('push_enabled', 'urgent_reminder', 'vibration_enabled'),
        ('daily_report', 'weekly_report', 'reminder_time'),
    )


@admin.register(User)
class UserAdmin(BaseUserAdmin):
    """Email-based user admin with role and department scoping."""

    list_display = ('email', 'get_full_name', 'role', 'department', 'is_active')
    list_filter = ('role', 'department', 'is_active')
    search_fields = ('email', 'first_name', 'last_name', 'phone')
    ordering = ('email',)
    inlines = [ReminderSettingsInline]

    fieldsets = (
        (None, {'fields': ('email', 'password')}),
        ('Liaison', {'fields': ('first_name', 'last_name', 'phone', 'role', 'department')}),
        ('Permissions', {
            'fields': ('is_active', 'is_staff', 'is_superuser', 'groups'),
            'classes': ('collapse',),
        }),
        ('Activity', {'fields': ('last_login', 'created_at', 'updated_at')}),
    )

    add_fieldsets = (
        (None, {
            'classes': ('wide',),
            'fields': ('email', 'role', 'department', 'password1', 'password2'),
        }),
    )

    readonly_fields = ('last_login', 'created_at', 'updated_at')

    def get_queryset(self, request):
        return super().get_queryset(request).select_related('department')

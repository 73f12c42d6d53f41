"""
Admin configuration for reminders app.
"""

from django.contrib import admin

from .models import JobLock, Reminder, ReminderSettings


@admin.register(Reminder)
class ReminderAdmin(admin.ModelAdmin):
    """Admin for Reminder model."""

    list_display = ('reminder_date', 'reminder_type', 'priority', 'person', 'is_handled', 'handled_by')
    list_filter = ('reminder_type', 'priority', 'is_handled')
    search_fields = ('person__name',)
    date_hierarchy = 'reminder_date'
    readonly_fields = ('created_at',)

    def get_queryset(self, request):
        return super().get_queryset(request).select_related('person', 'handled_by')


@admin.register(ReminderSettings)
class ReminderSettingsAdmin(admin.ModelAdmin):
    """Admin for per-liaison reminder thresholds."""

    list_display = ('user', 'urgent_threshold', 'suggest_threshold', 'push_enabled', 'reminder_time')
    search_fields = ('user__email', 'user__first_name', 'user__last_name')


@admin.register(JobLock)
class JobLockAdmin(admin.ModelAdmin):
    """Lock rows are written by the batch only."""

    list_display = ('name', 'last_run_date', 'last_started_at', 'last_finished_at')
    readonly_fields = ('name', 'last_run_date', 'last_started_at', 'last_finished_at')

    def has_add_permission(self, request):
        return False

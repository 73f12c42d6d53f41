"""
Admin configuration for personnel app.

The admin stands in for the CRUD screens of persons, leave periods and
contacts.
"""

from django.contrib import admin

from .models import ContactEvent, LeavePeriod, Person


class LeavePeriodInline(admin.TabularInline):
    """Inline admin for leave periods on person detail."""
    model = LeavePeriod
    extra = 0
    fields = ('leave_type', 'start_date', 'end_date', 'status', 'location')
    fk_name = 'person'


class ContactEventInline(admin.TabularInline):
    """Read-only contact history on person detail."""
    model = ContactEvent
    extra = 0
    fields = ('contact_date', 'contact_by', 'contact_method', 'notes')
    readonly_fields = fields
    can_delete = False

    def has_add_permission(self, request, obj=None):
        return False


@admin.register(Person)
class PersonAdmin(admin.ModelAdmin):
    """Admin for Person model."""

    list_display = ('name', 'department', 'person_type', 'last_contact_date', 'created_by', 'created_at')
    list_filter = ('department', 'person_type')
    search_fields = ('name', 'phone')
    readonly_fields = ('last_contact_date', 'last_contact_by', 'created_at', 'updated_at')
    inlines = [LeavePeriodInline, ContactEventInline]

    def get_queryset(self, request):
        return super().get_queryset(request).select_related('department', 'created_by')


@admin.register(LeavePeriod)
class LeavePeriodAdmin(admin.ModelAdmin):
    """Admin for LeavePeriod model."""

    list_display = ('person', 'leave_type', 'start_date', 'end_date', 'days', 'status')
    list_filter = ('status', 'leave_type')
    search_fields = ('person__name', 'location')
    date_hierarchy = 'start_date'

    def get_queryset(self, request):
        return super().get_queryset(request).select_related('person')


@admin.register(ContactEvent)
class ContactEventAdmin(admin.ModelAdmin):
    """Contacts are immutable once logged."""

    list_display = ('person', 'contact_date', 'contact_by', 'contact_method')
    list_filter = ('contact_method',)
    search_fields = ('person__name', 'notes')
    date_hierarchy = 'contact_date'

    def has_change_permission(self, request, obj=None):
        return False

    def get_queryset(self, request):
        return super().get_queryset(request).select_related('person', 'contact_by')

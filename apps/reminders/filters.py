"""
Reminder filters using django-filter.

Provides filtering for the reminder list endpoint:
- Reminder type and priority (choices from the Reminder model)
- Handled flag
- Date range on reminder_date
- Person
"""

import django_filters

from .models import Reminder


class ReminderFilter(django_filters.FilterSet):
    """
    Filter for the reminder list.

    Usage in views:
        filterset = ReminderFilter(request.GET, queryset=queryset)
        if filterset.is_valid():
            reminders = filterset.qs
    """

    reminder_type = django_filters.ChoiceFilter(
        choices=[
            choice for choice in Reminder.ReminderType.choices
            if choice[0] != Reminder.ReminderType.SYSTEM
        ],
    )
    priority = django_filters.ChoiceFilter(choices=Reminder.Priority.choices)
    is_handled = django_filters.BooleanFilter()
    date_from = django_filters.DateFilter(field_name='reminder_date', lookup_expr='gte')
    date_to = django_filters.DateFilter(field_name='reminder_date', lookup_expr='lte')
    person = django_filters.NumberFilter(field_name='person_id')
    department = django_filters.NumberFilter(field_name='person__department_id')

    class Meta:
        model = Reminder
        fields = ['reminder_type', 'priority', 'is_handled', 'reminder_date', 'person']

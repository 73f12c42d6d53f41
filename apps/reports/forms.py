"""
Forms for reports app.

Query-string validation for the report endpoints:
- HealthScoreForm: optional department and as-of date
- ReportPeriodForm: period bounds plus optional department
"""

from django import forms
from django.core.exceptions import ValidationError

from apps.departments.models import Department
from apps.reminders.clock import local_today


class DepartmentScopeMixin(forms.Form):
    department = forms.ModelChoiceField(
        queryset=Department.objects.filter(is_active=True),
        required=False,
    )


class HealthScoreForm(DepartmentScopeMixin):
    as_of = forms.DateField(required=False, input_formats=['%Y-%m-%d'])


class ReportPeriodForm(DepartmentScopeMixin):
    """
    Reporting period, both bounds inclusive.

    A missing end defaults to today and a missing start to the first of the
    end date's month.
    """

    start = forms.DateField(required=False, input_formats=['%Y-%m-%d'])
    end = forms.DateField(required=False, input_formats=['%Y-%m-%d'])

    def clean(self):
        cleaned_data = super().clean()
        if 'start' in self.errors or 'end' in self.errors:
            return cleaned_data

        end = cleaned_data.get('end') or local_today()
        start = cleaned_data.get('start') or end.replace(day=1)

        if start > end:
            raise ValidationError('Start date must be on or before end date.')

        cleaned_data['start'] = start
        cleaned_data['end'] = end
        return cleaned_data

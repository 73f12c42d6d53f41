"""
Personnel models.

Models:
- Person: employee who may go on leave and needs to be kept in touch with
- LeavePeriod: bounded absence (vacation, business trip, hospitalization...)
- ContactEvent: one logged instance of a liaison reaching a person

Status workflow (LeavePeriod):
- active → completed (only by the daily reminder run once end_date has passed)
- active → cancelled (manual)
- completed and cancelled are terminal
"""

from django.conf import settings
from django.core.exceptions import ValidationError
from django.db import models


class Person(models.Model):
    """
    A person being monitored.

    `last_contact_date` is a denormalized cache maintained by
    `record_contact()`; the reminder engine always reads contact history
    from ContactEvent instead.
    """

    class PersonType(models.TextChoices):
        EMPLOYEE = 'employee', 'Employee'
        INTERN = 'intern', 'Intern'
        MANAGER = 'manager', 'Manager'

    name = models.CharField(max_length=50)
    phone = models.CharField(max_length=20, blank=True)
    emergency_contact = models.CharField(max_length=50, blank=True)
    emergency_phone = models.CharField(max_length=20, blank=True)
    department = models.ForeignKey(
        'departments.Department',
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name='persons',
    )
    person_type = models.CharField(
        max_length=20,
        choices=PersonType.choices,
        default=PersonType.EMPLOYEE,
    )
    notes = models.TextField(blank=True)

    last_contact_date = models.DateField(null=True, blank=True)
    last_contact_by = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name='last_contacted_persons',
    )
    created_by = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name='created_persons',
        help_text='Liaison whose reminder thresholds apply to this person'
    )

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        verbose_name = 'person'
        verbose_name_plural = 'persons'
        ordering = ['name']
        indexes = [
            models.Index(fields=['department'], name='person_department_idx'),
            models.Index(fields=['created_by'], name='person_created_by_idx'),
        ]

    def __str__(self):
        return self.name


class LeavePeriod(models.Model):
    """A bounded interval during which a person is away."""

    class LeaveType(models.TextChoices):
        VACATION = 'vacation', 'Vacation'
        BUSINESS = 'business', 'Business Trip'
        STUDY = 'study', 'Study'
        HOSPITALIZATION = 'hospitalization', 'Hospitalization'
        CARE = 'care', 'Family Care'

    class Status(models.TextChoices):
        ACTIVE = 'active', 'Active'
        COMPLETED = 'completed', 'Completed'
        CANCELLED = 'cancelled', 'Cancelled'

    person = models.ForeignKey(
        Person,
        on_delete=models.CASCADE,
        related_name='leave_periods',
    )
    leave_type = models.CharField(max_length=20, choices=LeaveType.choices)
    location = models.CharField(max_length=200, blank=True)
    start_date = models.DateField()
    end_date = models.DateField()
    days = models.PositiveIntegerField(default=0)
    status = models.CharField(
        max_length=20,
        choices=Status.choices,
        default=Status.ACTIVE,
        db_index=True,
    )
    created_by = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name='created_leave_periods',
    )
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        verbose_name = 'leave period'
        verbose_name_plural = 'leave periods'
        ordering = ['-start_date']
        indexes = [
            models.Index(fields=['status', 'end_date'], name='leave_status_end_idx'),
            models.Index(fields=['person', 'status'], name='leave_person_status_idx'),
        ]

    def __str__(self):
        return f"{self.person} {self.get_leave_type_display()} {self.start_date}→{self.end_date}"

    def clean(self):
        if self.start_date and self.end_date and self.end_date < self.start_date:
            raise ValidationError({'end_date': 'End date cannot be before start date.'})

    def save(self, *args, **kwargs):
        # Inclusive day count
        if self.start_date and self.end_date and not self.days:
            self.days = (self.end_date - self.start_date).days + 1
        super().save(*args, **kwargs)

    def covers(self, day):
        """Check if `day` falls inside [start_date, end_date]."""
        return self.start_date <= day <= self.end_date


class ContactEvent(models.Model):
    """
    One contact between a liaison and a person. Immutable once created.

    `contact_date` is an aware timestamp; it is truncated to a calendar
    day in REMINDER_TIME_ZONE wherever the engine compares dates.
    """

    class Method(models.TextChoices):
        PHONE = 'phone', 'Phone'
        MESSAGE = 'message', 'Message'
        VISIT = 'visit', 'Visit'

    person = models.ForeignKey(
        Person,
        on_delete=models.CASCADE,
        related_name='contact_events',
    )
    leave_period = models.ForeignKey(
        LeavePeriod,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name='contact_events',
    )
    contact_date = models.DateTimeField(db_index=True)
    contact_by = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name='contact_events',
    )
    contact_method = models.CharField(
        max_length=20,
        choices=Method.choices,
        blank=True,
    )
    notes = models.TextField(blank=True)
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        verbose_name = 'contact event'
        verbose_name_plural = 'contact events'
        ordering = ['contact_date']
        indexes = [
            models.Index(fields=['person', 'contact_date'], name='contact_person_date_idx'),
        ]

    def __str__(self):
        return f"Contact with {self.person} on {self.contact_date:%Y-%m-%d}"

"""
Reminder models.

Models:
- Reminder: generated task record telling a liaison a person needs contact
- ReminderSettings: per-liaison urgency thresholds and preferences
- JobLock: named row locked for the duration of a batch run

Reminder rows with reminder_type='system' are the run ledger: one handled,
low-priority row per day the batch completed.
"""

import datetime

from django.conf import settings
from django.core.exceptions import ValidationError
from django.core.validators import MaxValueValidator, MinValueValidator
from django.db import models
from django.db.models import Case, IntegerField, Q, Value, When


class ReminderQuerySet(models.QuerySet):

    def non_system(self):
        return self.exclude(reminder_type=Reminder.ReminderType.SYSTEM)

    def system(self):
        return self.filter(reminder_type=Reminder.ReminderType.SYSTEM)

    def for_date(self, day):
        return self.filter(reminder_date=day)

    def unhandled(self):
        return self.filter(is_handled=False)

    def by_urgency(self):
        """Newest date first, then high before medium before low."""
        return self.annotate(
            priority_rank=Case(
                When(priority=Reminder.Priority.HIGH, then=Value(0)),
                When(priority=Reminder.Priority.MEDIUM, then=Value(1)),
                default=Value(2),
                output_field=IntegerField(),
            ),
        ).order_by('-reminder_date', 'priority_rank', 'id')


class Reminder(models.Model):
    """
    A reminder generated by the daily run.

    Rules:
    - At most one row per (person, reminder_date, reminder_type)
    - System rows have no person
    - Rows are marked handled when a contact is recorded for the person
    """

    class ReminderType(models.TextChoices):
        BEFORE = 'before', 'Leave Starts Tomorrow'
        DURING = 'during', 'On Leave Without Contact'
        ENDING = 'ending', 'Leave Ends Tomorrow'
        OVERDUE = 'overdue', 'Contact Overdue'
        SYSTEM = 'system', 'System Run Log'

    class Priority(models.TextChoices):
        HIGH = 'high', 'High'
        MEDIUM = 'medium', 'Medium'
        LOW = 'low', 'Low'

    person = models.ForeignKey(
        'personnel.Person',
        on_delete=models.CASCADE,
        null=True,
        blank=True,
        related_name='reminders',
    )
    leave_period = models.ForeignKey(
        'personnel.LeavePeriod',
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name='reminders',
    )
    reminder_type = models.CharField(
        max_length=20,
        choices=ReminderType.choices,
        db_index=True,
    )
    reminder_date = models.DateField(db_index=True)
    priority = models.CharField(
        max_length=10,
        choices=Priority.choices,
        default=Priority.MEDIUM,
    )
    is_handled = models.BooleanField(default=False)
    handled_by = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name='handled_reminders',
    )
    handled_at = models.DateTimeField(null=True, blank=True)
    created_at = models.DateTimeField(auto_now_add=True)

    objects = ReminderQuerySet.as_manager()

    class Meta:
        verbose_name = 'reminder'
        verbose_name_plural = 'reminders'
        ordering = ['-reminder_date', '-created_at']
        constraints = [
            models.UniqueConstraint(
                fields=['person', 'reminder_date', 'reminder_type'],
                condition=Q(person__isnull=False),
                name='unique_person_reminder_per_day',
            ),
        ]
        indexes = [
            models.Index(fields=['reminder_date', 'reminder_type'], name='reminder_date_type_idx'),
            models.Index(fields=['person', 'is_handled'], name='reminder_person_handled_idx'),
        ]

    def __str__(self):
        who = self.person or 'system'
        return f"{self.get_reminder_type_display()} [{self.priority}] {who} on {self.reminder_date}"

    @property
    def is_urgent(self):
        return self.priority == self.Priority.HIGH


class ReminderSettings(models.Model):
    """
    Per-liaison configuration.

    Thresholds apply to persons the liaison created: a gap of
    `suggest_threshold` days raises a medium reminder, `urgent_threshold`
    days a high one.
    """

    DEFAULT_URGENT_THRESHOLD = 10
    DEFAULT_SUGGEST_THRESHOLD = 7

    user = models.OneToOneField(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        related_name='reminder_settings',
    )
    urgent_threshold = models.PositiveSmallIntegerField(
        default=DEFAULT_URGENT_THRESHOLD,
        validators=[MinValueValidator(3), MaxValueValidator(30)],
        help_text='Days without contact before a high-priority reminder'
    )
    suggest_threshold = models.PositiveSmallIntegerField(
        default=DEFAULT_SUGGEST_THRESHOLD,
        validators=[MinValueValidator(1), MaxValueValidator(14)],
        help_text='Days without contact before a medium-priority reminder'
    )

    # Delivery preferences (read by the mobile client)
    push_enabled = models.BooleanField(default=True)
    urgent_reminder = models.BooleanField(default=True)
    daily_report = models.BooleanField(default=False)
    weekly_report = models.BooleanField(default=True)
    vibration_enabled = models.BooleanField(default=True)
    reminder_time = models.TimeField(default=datetime.time(9, 0))

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        verbose_name = 'reminder settings'
        verbose_name_plural = 'reminder settings'

    def __str__(self):
        return f"Reminder settings for {self.user}"

    def clean(self):
        if self.suggest_threshold >= self.urgent_threshold:
            raise ValidationError({
                'suggest_threshold': 'Suggest threshold must be lower than the urgent threshold.'
            })


class JobLock(models.Model):
    """
    Row-level lock for batch jobs.

    A run selects its row FOR UPDATE inside its transaction; a concurrent
    run blocks until the first commits or rolls back.
    """

    name = models.CharField(max_length=100, unique=True)
    last_run_date = models.DateField(null=True, blank=True)
    last_started_at = models.DateTimeField(null=True, blank=True)
    last_finished_at = models.DateTimeField(null=True, blank=True)

    class Meta:
        verbose_name = 'job lock'
        verbose_name_plural = 'job locks'

    def __str__(self):
        return self.name

    @classmethod
    def acquire(cls, name):
        """Lock and return the named row. Must be called inside a transaction."""
        cls.objects.get_or_create(name=name)
        return cls.objects.select_for_update().get(name=name)

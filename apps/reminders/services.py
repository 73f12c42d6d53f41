"""
Service layer for reminders app.

The daily batch is assembled from these steps and always runs them in this
order inside one transaction:

- delete_reminders_for_date: clear today's non-system reminders
- complete_ended_leaves: active → completed once end_date has passed
- generate_leave_event_reminders: before / ending / during rules
- generate_contact_gap_reminders: overdue rules for persons not on leave
- delete_system_reminders_older_than: prune the run ledger
- write_completion_marker: one system row for today

`run_daily_batch` wraps the sequence with the job lock and the ledger check.
"""

import logging
from dataclasses import dataclass
from datetime import timedelta
from typing import NamedTuple, Optional

from django.conf import settings
from django.db import transaction
from django.utils import timezone

from apps.personnel.models import ContactEvent, LeavePeriod, Person
from apps.personnel.services import (
    list_active_leave_periods,
    mark_leave_completed,
    qualifying_contacts,
)
from .clock import days_between, end_of_day_exclusive, start_of_day, to_local_date
from .models import JobLock, Reminder, ReminderSettings

logger = logging.getLogger(__name__)

DAILY_RUN_LOCK = 'daily-reminders'


class Thresholds(NamedTuple):
    urgent: int
    suggest: int


@dataclass
class BatchSummary:
    """Counts produced by one pass of the daily batch."""

    run_date: object
    skipped: bool = False
    cleared: int = 0
    leaves_completed: int = 0
    leave_event_reminders: int = 0
    contact_gap_reminders: int = 0
    system_rows_pruned: int = 0

    @property
    def reminders_created(self):
        return self.leave_event_reminders + self.contact_gap_reminders


def default_thresholds():
    return Thresholds(
        urgent=settings.REMINDER_DEFAULT_URGENT_THRESHOLD,
        suggest=settings.REMINDER_DEFAULT_SUGGEST_THRESHOLD,
    )


def get_reminder_settings(user):
    """
    Thresholds configured by a liaison.

    Users without a ReminderSettings row, and persons without a creator,
    fall back to the configured defaults.
    """
    if user is None:
        return default_thresholds()

    row = (
        ReminderSettings.objects
        .filter(user=user)
        .values_list('urgent_threshold', 'suggest_threshold')
        .first()
    )
    if row is None:
        return default_thresholds()
    return Thresholds(*row)


def _load_thresholds_by_user():
    return {
        user_id: Thresholds(urgent, suggest)
        for user_id, urgent, suggest in ReminderSettings.objects.values_list(
            'user_id', 'urgent_threshold', 'suggest_threshold'
        )
    }


def classify_contact_gap(days_since_contact: Optional[int], thresholds: Thresholds):
    """
    Priority for an overdue reminder, or None when no reminder is due.

    `None` days means the person has never been contacted.
    """
    if days_since_contact is None or days_since_contact >= thresholds.urgent:
        return Reminder.Priority.HIGH
    if days_since_contact >= thresholds.suggest:
        return Reminder.Priority.MEDIUM
    return None


def days_since_last_contact(person, today, tz=None) -> Optional[int]:
    """
    Whole days between the latest qualifying contact and `today`.

    Returns None when the person has no qualifying contact.
    """
    latest = (
        qualifying_contacts(person)
        .filter(contact_date__lt=end_of_day_exclusive(today, tz))
        .order_by('-contact_date')
        .first()
    )
    if latest is None:
        return None
    return max(0, days_between(to_local_date(latest.contact_date, tz), today))


def upsert_reminder(person, reminder_date, reminder_type, priority, leave_period=None):
    """
    Create or refresh the reminder for (person, date, type).

    Returns:
        Tuple of (Reminder, created)
    """
    reminder, created = Reminder.objects.get_or_create(
        person=person,
        reminder_date=reminder_date,
        reminder_type=reminder_type,
        defaults={
            'priority': priority,
            'leave_period': leave_period,
        },
    )
    if not created and reminder.priority != priority:
        reminder.priority = priority
        reminder.save(update_fields=['priority'])
    return reminder, created


def delete_reminders_for_date(day, exclude_type=Reminder.ReminderType.SYSTEM):
    """Delete reminders dated `day`, keeping rows of `exclude_type`."""
    reminders = Reminder.objects.for_date(day)
    if exclude_type:
        reminders = reminders.exclude(reminder_type=exclude_type)
    deleted, _ = reminders.delete()
    return deleted


def delete_system_reminders_older_than(day):
    """Prune run-ledger rows dated strictly before `day`."""
    deleted, _ = Reminder.objects.system().filter(reminder_date__lt=day).delete()
    return deleted


def completion_marker_exists(day):
    return Reminder.objects.system().for_date(day).exists()


def write_completion_marker(day):
    """Record that the batch for `day` committed. Replaces an existing marker."""
    Reminder.objects.system().for_date(day).delete()
    return Reminder.objects.create(
        person=None,
        reminder_type=Reminder.ReminderType.SYSTEM,
        reminder_date=day,
        priority=Reminder.Priority.LOW,
        is_handled=True,
        handled_at=timezone.now(),
    )


def complete_ended_leaves(today):
    """Move every active leave whose end_date precedes `today` to completed."""
    ended = LeavePeriod.objects.filter(
        status=LeavePeriod.Status.ACTIVE,
        end_date__lt=today,
    ).values_list('id', flat=True)

    updated = mark_leave_completed(ended, today)
    if updated:
        logger.info("Completed %d ended leave period(s) as of %s", updated, today)
    return updated


def generate_leave_event_reminders(today):
    """
    Reminders driven by leave boundaries.

    For each active leave still running on `today`:
    - starts tomorrow → before / medium
    - ends tomorrow → ending / medium
    - already started and the person was never contacted → during / medium

    Returns:
        Number of reminders created
    """
    leaves = list(list_active_leave_periods(today))
    tomorrow = today + timedelta(days=1)

    contacted = set(
        ContactEvent.objects
        .filter(person_id__in={leave.person_id for leave in leaves})
        .values_list('person_id', flat=True)
        .distinct()
    )

    created_count = 0
    for leave in leaves:
        due = []
        if leave.start_date == tomorrow:
            due.append(Reminder.ReminderType.BEFORE)
        if leave.end_date == tomorrow:
            due.append(Reminder.ReminderType.ENDING)
        if leave.start_date < today and leave.person_id not in contacted:
            due.append(Reminder.ReminderType.DURING)

        for reminder_type in due:
            _, created = upsert_reminder(
                leave.person, today, reminder_type,
                Reminder.Priority.MEDIUM, leave_period=leave,
            )
            created_count += int(created)

    return created_count


def _current_leaves(today):
    """
    The leave each person is away on right now, started before `today`.

    Bookings that have not begun yet are ignored; with overlapping windows
    the latest-started one wins.
    """
    leaves = (
        LeavePeriod.objects
        .filter(
            status=LeavePeriod.Status.ACTIVE,
            start_date__lt=today,
            end_date__gte=today,
        )
        .select_related('person')
        .order_by('person_id', '-start_date', '-id')
    )
    current = {}
    for leave in leaves:
        current.setdefault(leave.person_id, leave)
    return current


def generate_contact_gap_reminders(today, tz=None):
    """
    Overdue reminders for persons not currently on leave, plus a `during`
    reminder for persons on leave who have not been contacted since it began.

    Thresholds come from the ReminderSettings of the liaison who created the
    person. Persons without a department are skipped unless
    REMINDER_INCLUDE_ORPHANED_PERSONS is set, in which case they count as
    never contacted.

    Returns:
        Number of reminders created
    """
    thresholds_by_user = _load_thresholds_by_user()
    fallback = default_thresholds()
    include_orphans = settings.REMINDER_INCLUDE_ORPHANED_PERSONS

    on_leave = set(
        LeavePeriod.objects.filter(
            status=LeavePeriod.Status.ACTIVE,
            start_date__lte=today,
            end_date__gte=today,
        ).values_list('person_id', flat=True)
    )

    created_count = 0
    for person in Person.objects.exclude(id__in=on_leave).order_by('id'):
        if person.department_id is None:
            if not include_orphans:
                logger.warning("Skipping person %s: no department assigned", person.pk)
                continue
            days = None
        else:
            days = days_since_last_contact(person, today, tz)

        thresholds = thresholds_by_user.get(person.created_by_id, fallback)
        priority = classify_contact_gap(days, thresholds)
        if priority is None:
            continue

        _, created = upsert_reminder(person, today, Reminder.ReminderType.OVERDUE, priority)
        created_count += int(created)

    for leave in _current_leaves(today).values():
        contacted_since_start = ContactEvent.objects.filter(
            person_id=leave.person_id,
            contact_date__gte=start_of_day(leave.start_date, tz),
        ).exists()
        if contacted_since_start:
            continue

        _, created = upsert_reminder(
            leave.person, today, Reminder.ReminderType.DURING,
            Reminder.Priority.MEDIUM, leave_period=leave,
        )
        created_count += int(created)

    return created_count


def run_daily_batch(today, tz=None, force=False, retention_days=None):
    """
    Run every batch step for `today` as a single unit of work.

    The job lock row is held until commit, so concurrent runs serialize.
    Without `force`, a day that already has a completion marker is skipped.
    Any exception rolls back every step including the marker.

    Returns:
        BatchSummary
    """
    if retention_days is None:
        retention_days = settings.REMINDER_LOG_RETENTION_DAYS

    summary = BatchSummary(run_date=today)

    with transaction.atomic():
        lock = JobLock.acquire(DAILY_RUN_LOCK)

        if not force and completion_marker_exists(today):
            logger.info("Reminder run for %s already completed, skipping", today)
            summary.skipped = True
            return summary

        lock.last_started_at = timezone.now()

        summary.cleared = delete_reminders_for_date(today)
        summary.leaves_completed = complete_ended_leaves(today)
        summary.leave_event_reminders = generate_leave_event_reminders(today)
        summary.contact_gap_reminders = generate_contact_gap_reminders(today, tz)
        summary.system_rows_pruned = delete_system_reminders_older_than(
            today - timedelta(days=retention_days)
        )
        write_completion_marker(today)

        lock.last_run_date = today
        lock.last_finished_at = timezone.now()
        lock.save(update_fields=['last_run_date', 'last_started_at', 'last_finished_at'])

    logger.info(
        "Reminder run for %s committed: %d created, %d leave(s) completed",
        today, summary.reminders_created, summary.leaves_completed,
    )
    return summary

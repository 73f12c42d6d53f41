"""
Service layer for personnel app.

Read side used by the reminder engine and reports:
- list_active_leave_periods: leaves still driving reminders on a date
- get_driving_leave_periods: one leave per person (latest start)
- mark_leave_completed: active → completed transition
- qualifying_contacts: contacts that reset a person's contact gap
- list_contact_events: ordered contact history, optionally qualifying only
- list_persons_by_department

Write side:
- record_contact: log a contact and mark the person's reminders handled
"""

import logging

from django.core.exceptions import ValidationError
from django.db import transaction
from django.utils import timezone

from apps.accounts.models import User
from apps.reminders.clock import end_of_day_exclusive, start_of_day, to_local_date
from apps.reminders.models import Reminder
from .models import ContactEvent, LeavePeriod, Person

logger = logging.getLogger(__name__)


def list_active_leave_periods(as_of):
    """Active leave periods whose end date is on or after `as_of`."""
    return (
        LeavePeriod.objects
        .filter(status=LeavePeriod.Status.ACTIVE, end_date__gte=as_of)
        .select_related('person', 'person__department')
        .order_by('person_id', '-start_date', '-id')
    )


def get_driving_leave_periods(as_of, department_ids=None, include_completed=False):
    """
    Pick the leave period that drives monitoring for each person on `as_of`.

    A person may have several active rows; the most recently started one
    wins. With `include_completed`, leaves completed since `as_of` count too,
    which lets a past period be re-evaluated as it looked at the time.

    Returns:
        dict mapping person_id → LeavePeriod
    """
    statuses = [LeavePeriod.Status.ACTIVE]
    if include_completed:
        statuses.append(LeavePeriod.Status.COMPLETED)

    leaves = (
        LeavePeriod.objects
        .filter(status__in=statuses, end_date__gte=as_of)
        .select_related('person')
        .order_by('person_id', '-start_date', '-id')
    )
    if department_ids is not None:
        leaves = leaves.filter(person__department_id__in=department_ids)

    driving = {}
    for leave in leaves:
        driving.setdefault(leave.person_id, leave)
    return driving


def mark_leave_completed(ids, as_of):
    """
    Complete the given active leave periods that ended before `as_of`.

    Rows that are no longer active, or still running, are left untouched so
    the transition is safe to repeat.

    Returns:
        Number of rows updated
    """
    return LeavePeriod.objects.filter(
        id__in=list(ids),
        status=LeavePeriod.Status.ACTIVE,
        end_date__lt=as_of,
    ).update(status=LeavePeriod.Status.COMPLETED)


def qualifying_contacts(person):
    """
    Contacts that count toward the person's contact gap.

    Only contacts logged by a non-admin user of the person's own department
    qualify. A person without a department has none.
    """
    if person.department_id is None:
        return ContactEvent.objects.none()
    return ContactEvent.objects.filter(
        person=person,
        contact_by__isnull=False,
        contact_by__department_id=person.department_id,
    ).exclude(contact_by__role=User.Role.ADMIN)


def list_contact_events(person, since=None, until=None, qualifying_only=False, tz=None):
    """
    Contact history for a person ordered by contact date.

    Args:
        person: Person instance
        since: Only contacts on or after this calendar date
        until: Only contacts on or before this calendar date
        qualifying_only: Exclude admin-authored contacts and contacts made
            by users outside the person's department
        tz: Zone used to interpret `since` / `until`
    """
    if qualifying_only:
        contacts = qualifying_contacts(person)
    else:
        contacts = ContactEvent.objects.filter(person=person)

    if since is not None:
        contacts = contacts.filter(contact_date__gte=start_of_day(since, tz))
    if until is not None:
        contacts = contacts.filter(contact_date__lt=end_of_day_exclusive(until, tz))

    return list(contacts.order_by('contact_date', 'id'))


def list_persons_by_department(department_id):
    """Persons belonging to a department (None → persons without one)."""
    if department_id is None:
        return Person.objects.filter(department__isnull=True)
    return Person.objects.filter(department_id=department_id)


def record_contact(person, user, contact_date=None, leave_period=None,
                   contact_method='', notes=''):
    """
    Log a contact with a person.

    Also refreshes the person's last-contact cache and marks every
    unhandled reminder for the person as handled by `user`.

    Returns:
        Created ContactEvent instance

    Raises:
        ValidationError: If the leave period belongs to someone else or the
            contact lies in the future
    """
    now = timezone.now()
    contact_date = contact_date or now

    if contact_date > now:
        raise ValidationError("Contact date cannot be in the future.")

    if leave_period is not None and leave_period.person_id != person.pk:
        raise ValidationError("Leave period does not belong to this person.")

    with transaction.atomic():
        contact = ContactEvent.objects.create(
            person=person,
            leave_period=leave_period,
            contact_date=contact_date,
            contact_by=user,
            contact_method=contact_method,
            notes=notes.strip() if notes else '',
        )

        contact_day = to_local_date(contact_date)
        if person.last_contact_date is None or contact_day >= person.last_contact_date:
            person.last_contact_date = contact_day
            person.last_contact_by = user
            person.save(update_fields=['last_contact_date', 'last_contact_by', 'updated_at'])

        handled = Reminder.objects.filter(
            person=person,
            is_handled=False,
        ).update(is_handled=True, handled_by=user, handled_at=now)

    if handled:
        logger.info("Marked %d reminder(s) handled for person %s", handled, person.pk)

    return contact

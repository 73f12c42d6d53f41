from datetime import date, timedelta

import pytest
from django.core.exceptions import ValidationError
from django.utils import timezone

from apps.personnel.models import LeavePeriod
from apps.personnel.services import (
    get_driving_leave_periods,
    list_contact_events,
    list_persons_by_department,
    record_contact,
)
from apps.reminders.models import Reminder

from .conftest import at

pytestmark = pytest.mark.django_db


def test_leave_days_are_inclusive(make_person, make_leave):
    leave = make_leave(make_person(), date(2024, 3, 1), date(2024, 3, 10))
    assert leave.days == 10


def test_leave_end_before_start_is_invalid(make_person):
    leave = LeavePeriod(
        person=make_person(),
        leave_type=LeavePeriod.LeaveType.BUSINESS,
        start_date=date(2024, 3, 10),
        end_date=date(2024, 3, 1),
    )
    with pytest.raises(ValidationError):
        leave.clean()


def test_driving_leave_is_latest_started(make_person, make_leave):
    person = make_person()
    make_leave(person, date(2024, 3, 1), date(2024, 3, 30))
    latest = make_leave(person, date(2024, 3, 10), date(2024, 3, 20))

    driving = get_driving_leave_periods(date(2024, 3, 15))

    assert driving == {person.pk: latest}


def test_driving_leave_history_includes_completed(make_person, make_leave):
    person = make_person()
    leave = make_leave(person, date(2024, 1, 1), date(2024, 1, 31), status=LeavePeriod.Status.COMPLETED)

    assert get_driving_leave_periods(date(2024, 1, 15)) == {}
    assert get_driving_leave_periods(date(2024, 1, 15), include_completed=True) == {person.pk: leave}


def test_list_contact_events_window(make_person, make_contact, liaison, admin_user):
    person = make_person()
    make_contact(person, date(2024, 3, 1), liaison)
    inside = make_contact(person, date(2024, 3, 5), liaison)
    make_contact(person, date(2024, 3, 6), admin_user)
    make_contact(person, date(2024, 3, 9), liaison)

    contacts = list_contact_events(person, since=date(2024, 3, 2), until=date(2024, 3, 8), qualifying_only=True)

    assert contacts == [inside]


def test_record_contact_marks_reminders_handled(make_person, liaison):
    person = make_person()
    reminder = Reminder.objects.create(
        person=person,
        reminder_type=Reminder.ReminderType.OVERDUE,
        reminder_date=date(2024, 3, 15),
        priority=Reminder.Priority.HIGH,
    )
    contact_date = timezone.now() - timedelta(hours=1)

    contact = record_contact(person, liaison, contact_date=contact_date, notes='  called  ')

    reminder.refresh_from_db()
    person.refresh_from_db()
    assert reminder.is_handled is True
    assert reminder.handled_by == liaison
    assert person.last_contact_by == liaison
    assert person.last_contact_date is not None
    assert contact.notes == 'called'


def test_record_contact_keeps_newer_cached_date(make_person, liaison):
    person = make_person()
    record_contact(person, liaison, contact_date=at(date(2024, 3, 10)))
    record_contact(person, liaison, contact_date=at(date(2024, 3, 1)))

    person.refresh_from_db()
    assert person.last_contact_date == date(2024, 3, 10)


def test_record_contact_rejects_future_date(make_person, liaison):
    with pytest.raises(ValidationError):
        record_contact(make_person(), liaison, contact_date=timezone.now() + timedelta(days=1))


def test_record_contact_rejects_foreign_leave(make_person, make_leave, liaison):
    person = make_person(name='Alpha')
    other = make_person(name='Beta')
    leave = make_leave(other, date(2024, 3, 1), date(2024, 3, 10))

    with pytest.raises(ValidationError):
        record_contact(person, liaison, contact_date=at(date(2024, 3, 2)), leave_period=leave)


def test_list_persons_by_department(make_person, department):
    member = make_person(name='Member')
    orphan = make_person(name='Orphan', department=None)

    assert list(list_persons_by_department(department.pk)) == [member]
    assert list(list_persons_by_department(None)) == [orphan]

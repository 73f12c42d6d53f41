from datetime import date, timedelta
from unittest import mock

import pytest
from django.db import DatabaseError

from apps.personnel.models import LeavePeriod
from apps.reminders.models import Reminder, ReminderSettings
from apps.reminders.scheduler import ReminderScheduler
from apps.reminders.services import (
    classify_contact_gap,
    days_since_last_contact,
    get_reminder_settings,
    run_daily_batch,
    Thresholds,
)

pytestmark = pytest.mark.django_db

TODAY = date(2024, 3, 15)


def reminders_for(person, reminder_date=TODAY):
    return {
        (reminder.reminder_type, reminder.priority)
        for reminder in Reminder.objects.filter(person=person, reminder_date=reminder_date)
    }


@pytest.fixture
def scheduler():
    return ReminderScheduler(cron='0 1 * * *', time_zone='Asia/Shanghai')


def test_ended_leave_is_completed(make_person, make_leave):
    person = make_person()
    ended = make_leave(person, date(2024, 3, 1), TODAY - timedelta(days=1))
    running = make_leave(person, date(2024, 3, 10), TODAY)

    summary = run_daily_batch(TODAY)

    ended.refresh_from_db()
    running.refresh_from_db()
    assert ended.status == LeavePeriod.Status.COMPLETED
    assert running.status == LeavePeriod.Status.ACTIVE
    assert summary.leaves_completed == 1


def test_before_reminder_for_leave_starting_tomorrow(make_person, make_leave, make_contact, liaison):
    person = make_person()
    make_contact(person, TODAY - timedelta(days=1), liaison)
    make_leave(person, TODAY + timedelta(days=1), TODAY + timedelta(days=10))

    run_daily_batch(TODAY)

    assert reminders_for(person) == {('before', 'medium')}


def test_ending_reminder_for_leave_ending_tomorrow(make_person, make_leave, make_contact, liaison):
    person = make_person()
    make_leave(person, date(2024, 3, 1), TODAY + timedelta(days=1))
    make_contact(person, TODAY - timedelta(days=2), liaison)

    run_daily_batch(TODAY)

    assert reminders_for(person) == {('ending', 'medium')}


def test_single_during_reminder_for_never_contacted_person(make_person, make_leave):
    person = make_person()
    make_leave(person, date(2024, 3, 10), date(2024, 3, 20))

    summary = run_daily_batch(TODAY)

    assert reminders_for(person) == {('during', 'medium')}
    assert Reminder.objects.filter(person=person, reminder_type='during').count() == 1
    assert summary.reminders_created == 1


def test_during_reminder_when_not_contacted_since_leave_start(make_person, make_leave, make_contact, liaison):
    person = make_person()
    make_contact(person, date(2024, 3, 5), liaison)
    make_leave(person, date(2024, 3, 10), date(2024, 3, 20))

    run_daily_batch(TODAY)

    assert reminders_for(person) == {('during', 'medium')}


def test_during_reminder_ignores_leave_booked_later(make_person, make_leave, make_contact, liaison):
    person = make_person()
    make_contact(person, date(2024, 3, 1), liaison)
    current = make_leave(person, date(2024, 3, 10), date(2024, 3, 20))
    make_leave(person, date(2024, 4, 1), date(2024, 4, 10))

    run_daily_batch(TODAY)

    assert reminders_for(person) == {('during', 'medium')}
    reminder = Reminder.objects.get(person=person, reminder_date=TODAY)
    assert reminder.leave_period == current


def test_person_on_leave_gets_no_overdue_reminder(make_person, make_leave, make_contact, liaison):
    person = make_person()
    make_leave(person, date(2024, 3, 10), date(2024, 3, 20))
    make_contact(person, date(2024, 3, 11), liaison)

    run_daily_batch(TODAY)

    assert reminders_for(person) == set()


@pytest.mark.parametrize('days_ago, expected', [
    (12, {('overdue', 'high')}),
    (10, {('overdue', 'high')}),
    (8, {('overdue', 'medium')}),
    (7, {('overdue', 'medium')}),
    (3, set()),
])
def test_overdue_reminder_uses_default_thresholds(make_person, make_contact, liaison, days_ago, expected):
    person = make_person()
    make_contact(person, TODAY - timedelta(days=days_ago), liaison)

    run_daily_batch(TODAY)

    assert reminders_for(person) == expected


def test_never_contacted_person_is_urgent(make_person):
    person = make_person()

    run_daily_batch(TODAY)

    assert reminders_for(person) == {('overdue', 'high')}


def test_overdue_uses_creator_settings(make_person, make_contact, liaison):
    ReminderSettings.objects.create(user=liaison, urgent_threshold=5, suggest_threshold=3)
    person = make_person()
    make_contact(person, TODAY - timedelta(days=4), liaison)

    run_daily_batch(TODAY)

    assert reminders_for(person) == {('overdue', 'medium')}


def test_admin_contacts_do_not_reset_gap(make_person, make_contact, liaison, admin_user):
    person = make_person()
    make_contact(person, TODAY - timedelta(days=9), liaison)
    make_contact(person, TODAY - timedelta(days=1), admin_user)

    assert days_since_last_contact(person, TODAY) == 9


def test_contacts_from_other_departments_do_not_count(make_person, make_contact, other_liaison):
    person = make_person()
    make_contact(person, TODAY - timedelta(days=1), other_liaison)

    assert days_since_last_contact(person, TODAY) is None


def test_orphaned_person_is_skipped(make_person):
    person = make_person(department=None)

    run_daily_batch(TODAY)

    assert reminders_for(person) == set()


def test_orphaned_person_included_when_enabled(make_person, settings):
    settings.REMINDER_INCLUDE_ORPHANED_PERSONS = True
    person = make_person(department=None)

    run_daily_batch(TODAY)

    assert reminders_for(person) == {('overdue', 'high')}


def test_reminder_settings_fallback(liaison):
    assert get_reminder_settings(liaison) == Thresholds(urgent=10, suggest=7)
    assert get_reminder_settings(None) == Thresholds(urgent=10, suggest=7)


def test_classify_contact_gap():
    thresholds = Thresholds(urgent=10, suggest=7)
    assert classify_contact_gap(None, thresholds) == Reminder.Priority.HIGH
    assert classify_contact_gap(6, thresholds) is None


def test_forced_rerun_is_idempotent(make_person, make_leave, make_contact, liaison):
    first = make_person(name='First')
    second = make_person(name='Second')
    make_leave(first, date(2024, 3, 10), TODAY + timedelta(days=1))
    make_contact(second, TODAY - timedelta(days=8), liaison)

    def snapshot():
        return sorted(
            Reminder.objects.non_system()
            .for_date(TODAY)
            .values_list('person_id', 'reminder_type', 'priority')
        )

    run_daily_batch(TODAY, force=True)
    after_first = snapshot()
    run_daily_batch(TODAY, force=True)

    assert snapshot() == after_first
    assert Reminder.objects.system().for_date(TODAY).count() == 1


def test_scheduled_run_skips_completed_day(make_person):
    make_person()

    run_daily_batch(TODAY)
    summary = run_daily_batch(TODAY)

    assert summary.skipped is True
    assert summary.reminders_created == 0


def test_marker_written_and_old_markers_pruned(db):
    for days_ago in (1, 7, 8, 30):
        Reminder.objects.create(
            reminder_type=Reminder.ReminderType.SYSTEM,
            reminder_date=TODAY - timedelta(days=days_ago),
            priority=Reminder.Priority.LOW,
            is_handled=True,
        )

    summary = run_daily_batch(TODAY)

    dates = set(Reminder.objects.system().values_list('reminder_date', flat=True))
    assert dates == {TODAY, TODAY - timedelta(days=1), TODAY - timedelta(days=7)}
    assert summary.system_rows_pruned == 2

    marker = Reminder.objects.system().get(reminder_date=TODAY)
    assert marker.person is None
    assert marker.is_handled is True
    assert marker.priority == Reminder.Priority.LOW


def test_failed_run_rolls_back_everything(scheduler, make_person, make_leave):
    person = make_person()
    leave = make_leave(person, date(2024, 3, 1), TODAY - timedelta(days=1))

    with mock.patch(
        'apps.reminders.services.generate_contact_gap_reminders',
        side_effect=DatabaseError('connection lost'),
    ):
        result = scheduler.run_daily(today=TODAY)

    leave.refresh_from_db()
    assert result.errors == ['connection lost']
    assert not result.ok
    assert leave.status == LeavePeriod.Status.ACTIVE
    assert not Reminder.objects.system().for_date(TODAY).exists()

    retry = scheduler.run_daily(today=TODAY)
    leave.refresh_from_db()
    assert retry.ok
    assert leave.status == LeavePeriod.Status.COMPLETED


def test_manual_run_regenerates_completed_day(scheduler, make_person):
    person = make_person()
    scheduler.run_daily(today=TODAY)
    Reminder.objects.filter(person=person).delete()

    skipped = scheduler.run_daily(today=TODAY)
    assert skipped.skipped is True

    result = scheduler.trigger_manual_run(today=TODAY)

    assert result.skipped is False
    assert result.reminders_created == 1
    assert reminders_for(person) == {('overdue', 'high')}

from datetime import date, datetime, time
from zoneinfo import ZoneInfo

import pytest

from apps.accounts.models import User
from apps.departments.models import Department
from apps.personnel.models import ContactEvent, LeavePeriod, Person

TZ = ZoneInfo('Asia/Shanghai')


def at(day, hour=10):
    """Aware datetime on `day` in the reminder zone."""
    return datetime.combine(day, time(hour), tzinfo=TZ)


@pytest.fixture
def department(db):
    return Department.objects.create(name='Operations', code='ops')


@pytest.fixture
def other_department(db):
    return Department.objects.create(name='Finance', code='fin')


@pytest.fixture
def admin_user(db):
    return User.objects.create_user(
        email='admin@example.com',
        password='secret-pass',
        first_name='Ada',
        last_name='Admin',
        role=User.Role.ADMIN,
    )


@pytest.fixture
def liaison(department):
    return User.objects.create_user(
        email='liaison@example.com',
        password='secret-pass',
        first_name='Li',
        last_name='Na',
        department=department,
    )


@pytest.fixture
def other_liaison(other_department):
    return User.objects.create_user(
        email='finance.liaison@example.com',
        password='secret-pass',
        first_name='Zhao',
        last_name='Lei',
        department=other_department,
    )


@pytest.fixture
def make_person(department, liaison):
    def _make(name='Wang Wei', department=department, created_by=liaison, created_on=date(2023, 1, 1)):
        person = Person.objects.create(name=name, department=department, created_by=created_by)
        Person.objects.filter(pk=person.pk).update(created_at=at(created_on, hour=9))
        person.refresh_from_db()
        return person

    return _make


@pytest.fixture
def make_leave():
    def _make(person, start, end, status=LeavePeriod.Status.ACTIVE, leave_type=LeavePeriod.LeaveType.VACATION):
        return LeavePeriod.objects.create(
            person=person,
            leave_type=leave_type,
            start_date=start,
            end_date=end,
            status=status,
        )

    return _make


@pytest.fixture
def make_contact():
    def _make(person, day, by, hour=10):
        return ContactEvent.objects.create(person=person, contact_date=at(day, hour), contact_by=by)

    return _make

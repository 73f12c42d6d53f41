from datetime import date

import pytest
from django.urls import reverse

from apps.reminders.models import Reminder

pytestmark = pytest.mark.django_db


@pytest.fixture
def admin_client(client, admin_user):
    client.force_login(admin_user)
    return client


@pytest.fixture
def liaison_client(client, liaison):
    client.force_login(liaison)
    return client


@pytest.fixture
def scored_person(make_person, make_leave, make_contact, liaison):
    person = make_person()
    make_leave(person, date(2024, 1, 1), date(2024, 1, 31))
    make_contact(person, date(2024, 1, 5), liaison)
    make_contact(person, date(2024, 1, 20), liaison)
    return person


def test_trigger_run_requires_admin(liaison_client):
    response = liaison_client.post(reverse('reminders:trigger_run'))
    assert response.status_code == 302
    assert not Reminder.objects.system().exists()


def test_trigger_run_by_admin(admin_client, make_person):
    make_person()

    response = admin_client.post(reverse('reminders:trigger_run'))

    assert response.status_code == 200
    data = response.json()
    assert data['errors'] == []
    assert data['reminders_created'] == 1
    assert data['skipped'] is False


def test_trigger_run_rejects_get(admin_client):
    response = admin_client.get(reverse('reminders:trigger_run'))
    assert response.status_code == 405


def test_reminder_list_is_scoped_to_department(liaison_client, make_person, other_department, other_liaison):
    own = make_person(name='Own')
    foreign = make_person(name='Foreign', department=other_department, created_by=other_liaison)
    Reminder.objects.create(person=own, reminder_type='overdue', reminder_date=date(2024, 3, 15), priority='high')
    Reminder.objects.create(person=own, reminder_type='during', reminder_date=date(2024, 3, 15))
    Reminder.objects.create(person=foreign, reminder_type='overdue', reminder_date=date(2024, 3, 15))
    Reminder.objects.create(reminder_type='system', reminder_date=date(2024, 3, 15), priority='low')

    response = liaison_client.get(reverse('reminders:reminder_list'))
    assert response.status_code == 200
    assert {row['person_name'] for row in response.json()['results']} == {'Own'}
    assert response.json()['count'] == 2

    response = liaison_client.get(reverse('reminders:reminder_list'), {'priority': 'high'})
    assert response.json()['count'] == 1


def test_reminder_list_puts_urgent_first(liaison_client, make_person):
    person = make_person()
    Reminder.objects.create(person=person, reminder_type='ending', reminder_date=date(2024, 3, 15), priority='low')
    Reminder.objects.create(person=person, reminder_type='during', reminder_date=date(2024, 3, 15), priority='medium')
    Reminder.objects.create(person=person, reminder_type='overdue', reminder_date=date(2024, 3, 15), priority='high')
    Reminder.objects.create(person=person, reminder_type='overdue', reminder_date=date(2024, 3, 14), priority='high')

    results = liaison_client.get(reverse('reminders:reminder_list')).json()['results']

    assert [(row['reminder_date'], row['priority']) for row in results] == [
        ('2024-03-15', 'high'),
        ('2024-03-15', 'medium'),
        ('2024-03-15', 'low'),
        ('2024-03-14', 'high'),
    ]


def test_reminder_list_rejects_bad_filter(liaison_client):
    response = liaison_client.get(reverse('reminders:reminder_list'), {'priority': 'urgent'})
    assert response.status_code == 400


def test_health_score_endpoint(admin_client, department, scored_person):
    response = admin_client.get(
        reverse('reports:health_score'),
        {'department': department.pk, 'as_of': '2024-01-25'},
    )

    assert response.status_code == 200
    assert response.json()['score'] == 91


def test_health_score_defaults_to_own_department(liaison_client, department, scored_person):
    response = liaison_client.get(reverse('reports:health_score'), {'as_of': '2024-01-25'})

    assert response.json()['scope'] == department.pk
    assert response.json()['score'] == 91


def test_health_score_outside_scope_is_forbidden(liaison_client, other_department):
    response = liaison_client.get(reverse('reports:health_score'), {'department': other_department.pk})
    assert response.status_code == 403


def test_health_score_bad_date(admin_client):
    response = admin_client.get(reverse('reports:health_score'), {'as_of': '25/01/2024'})
    assert response.status_code == 400
    assert 'as_of' in response.json()['errors']


def test_ranking_rejects_inverted_period(admin_client):
    response = admin_client.get(reverse('reports:ranking'), {'start': '2024-02-01', 'end': '2024-01-01'})
    assert response.status_code == 400


def test_ranking_endpoint(admin_client, department, scored_person):
    response = admin_client.get(reverse('reports:ranking'), {'start': '2024-01-01', 'end': '2024-01-25'})

    ranking = response.json()['ranking']
    assert [(entry['department_id'], entry['score']) for entry in ranking] == [(department.pk, 91)]


def test_trends_endpoint(admin_client, department, scored_person):
    response = admin_client.get(
        reverse('reports:trends'),
        {'start': '2024-01-15', 'end': '2024-01-25', 'department': department.pk},
    )

    assert response.status_code == 200
    metrics = response.json()['metrics']
    assert set(metrics) == {
        'total_reminders', 'unhandled_reminders', 'urgent_count',
        'avg_contact_interval', 'health_score',
    }
    assert metrics['health_score']['current'] == 91
    assert response.json()['errors'] == []


def test_reports_require_login(client):
    response = client.get(reverse('reports:health_score'))
    assert response.status_code == 302

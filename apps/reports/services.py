"""
Service layer for reports app.

Read-only, on-demand reports built from the personnel data and reminders:
- get_health_score: deduction-based score for one department or all of them
- get_status_distribution: persons split into normal, suggest and urgent
- get_department_ranking: departments sorted by score for a period
- get_trends: period-over-period comparison of the report metrics

All scoring math lives in `scoring`; this module only gathers the data.
"""

import logging
from dataclasses import dataclass, field
from datetime import date
from typing import List, Optional

from django.db.models import Count, Q

from apps.departments.models import Department
from apps.personnel.models import Person
from apps.personnel.services import get_driving_leave_periods, list_contact_events
from apps.reminders.clock import end_of_day_exclusive, get_reminder_zone, local_today, to_local_date
from apps.reminders.models import Reminder
from apps.reminders.services import classify_contact_gap, days_since_last_contact, get_reminder_settings
from . import scoring

logger = logging.getLogger(__name__)

ALL_DEPARTMENTS = 'all'

TREND_METRICS = (
    'total_reminders',
    'unhandled_reminders',
    'urgent_count',
    'avg_contact_interval',
    'health_score',
)


@dataclass
class PersonHealth:
    person_id: int
    person_name: str
    leave_period_id: int
    intervals: List[int]
    penalty: int

    def as_dict(self):
        return {
            'person_id': self.person_id,
            'person_name': self.person_name,
            'leave_period_id': self.leave_period_id,
            'intervals': list(self.intervals),
            'penalty': self.penalty,
        }


@dataclass
class DepartmentHealth:
    department_id: Optional[int]
    department_name: str
    score: int
    persons: List[PersonHealth] = field(default_factory=list)

    @property
    def intervals(self):
        return [days for person in self.persons for days in person.intervals]

    @property
    def total_penalty(self):
        return sum(person.penalty for person in self.persons)

    @property
    def avg_interval(self):
        return scoring.average_interval(self.intervals)

    def as_dict(self):
        return {
            'department_id': self.department_id,
            'department_name': self.department_name,
            'score': self.score,
            'avg_interval': self.avg_interval,
            'total_penalty': self.total_penalty,
            'active_leave_persons': len(self.persons),
            'persons': [person.as_dict() for person in self.persons],
        }


def evaluate_person(person, leave, as_of, tz=None):
    """Intervals and penalty for one person under their driving leave."""
    contacts = list_contact_events(person, since=leave.start_date, until=as_of, tz=tz)
    contact_dates = [to_local_date(contact.contact_date, tz) for contact in contacts]

    raw = scoring.build_intervals(
        leave.start_date,
        leave.end_date,
        contact_dates,
        as_of,
        person_created=to_local_date(person.created_at, tz),
    )
    intervals = scoring.valid_intervals(raw, person_id=person.pk)

    return PersonHealth(
        person_id=person.pk,
        person_name=person.name,
        leave_period_id=leave.pk,
        intervals=intervals,
        penalty=scoring.total_penalty(intervals),
    )


def compute_department_health(department, as_of, today=None, tz=None):
    """
    Score one department as it stood on `as_of`.

    Leaves completed after `as_of` still count when looking at the past.
    """
    tz = tz or get_reminder_zone()
    today = today or local_today(tz)

    driving = get_driving_leave_periods(
        as_of,
        department_ids=[department.pk],
        include_completed=as_of < today,
    )
    persons = [
        evaluate_person(leave.person, leave, as_of, tz)
        for leave in sorted(driving.values(), key=lambda leave: leave.person_id)
    ]
    penalty = sum(person.penalty for person in persons)

    return DepartmentHealth(
        department_id=department.pk,
        department_name=department.name,
        score=scoring.department_score(penalty),
        persons=persons,
    )


def scored_departments():
    """Active departments with at least one person."""
    return (
        Department.objects
        .filter(is_active=True, persons__isnull=False)
        .distinct()
        .order_by('path')
    )


def _evaluate_departments(departments, as_of, today, tz):
    """Score each department in isolation; one failure never sinks the rest."""
    results, errors = [], []
    for department in departments:
        try:
            results.append(compute_department_health(department, as_of, today, tz))
        except Exception as exc:
            logger.exception("Health score failed for department %s", department.pk)
            errors.append({'department_id': department.pk, 'error': str(exc)})
    return results, errors


def _resolve_department(scope):
    if scope in (None, ALL_DEPARTMENTS):
        return None
    if isinstance(scope, Department):
        return scope
    return Department.objects.get(pk=scope)


STATUS_BY_PRIORITY = {
    None: 'normal',
    Reminder.Priority.MEDIUM: 'suggest',
    Reminder.Priority.HIGH: 'urgent',
}


def get_status_distribution(department_ids, as_of, tz=None):
    """
    Split the persons of `department_ids` by how overdue their contact is.

    Each person is judged against the thresholds of the liaison who created
    them, exactly as the overdue reminders are. Percentages are of all
    persons counted, rounded half up; with nobody to count they are 0.
    """
    tz = tz or get_reminder_zone()
    persons = (
        Person.objects
        .filter(department_id__in=department_ids)
        .select_related('created_by')
        .order_by('id')
    )

    thresholds_by_user = {}
    counts = dict.fromkeys(STATUS_BY_PRIORITY.values(), 0)
    for person in persons:
        if person.created_by_id not in thresholds_by_user:
            thresholds_by_user[person.created_by_id] = get_reminder_settings(person.created_by)
        days = days_since_last_contact(person, as_of, tz)
        priority = classify_contact_gap(days, thresholds_by_user[person.created_by_id])
        counts[STATUS_BY_PRIORITY[priority]] += 1

    total = sum(counts.values())
    return {
        status: {
            'count': count,
            'percentage': scoring.round_half_up(count * 100 / total) if total else 0,
        }
        for status, count in counts.items()
    }


def get_health_score(scope=ALL_DEPARTMENTS, as_of: Optional[date] = None):
    """
    Health score for a department id (or instance) or for all departments.

    Returns:
        dict with `score`, `avg_interval`, `as_of`, per-department details
        and the status distribution of the persons in scope.
        The all-departments score is the unweighted mean of department scores.

    Raises:
        Department.DoesNotExist: Unknown department id
    """
    tz = get_reminder_zone()
    today = local_today(tz)
    as_of = as_of or today

    department = _resolve_department(scope)
    if department is not None:
        health = compute_department_health(department, as_of, today, tz)
        return {
            'scope': department.pk,
            'as_of': as_of.isoformat(),
            'score': health.score,
            'avg_interval': health.avg_interval,
            'departments': [health.as_dict()],
            'status_distribution': get_status_distribution([department.pk], as_of, tz),
            'errors': [],
        }

    departments = list(scored_departments())
    results, errors = _evaluate_departments(departments, as_of, today, tz)
    all_intervals = [days for health in results for days in health.intervals]

    return {
        'scope': ALL_DEPARTMENTS,
        'as_of': as_of.isoformat(),
        'score': scoring.combine_scores(health.score for health in results),
        'avg_interval': scoring.average_interval(all_intervals),
        'departments': [health.as_dict() for health in results],
        'status_distribution': get_status_distribution(
            [scored.pk for scored in departments], as_of, tz
        ),
        'errors': errors,
    }


def reminder_counts(start, end, department_ids=None, tz=None):
    """
    Reminder counts for reminders dated within [start, end].

    A reminder counts as unhandled when it was still open at the end of the
    period, so handling it later does not rewrite history.
    """
    reminders = Reminder.objects.non_system().filter(reminder_date__range=(start, end))
    if department_ids is not None:
        reminders = reminders.filter(person__department_id__in=department_ids)

    still_open = Q(is_handled=False) | Q(handled_at__gte=end_of_day_exclusive(end, tz))
    counts = reminders.aggregate(
        total=Count('id'),
        unhandled=Count('id', filter=still_open),
        urgent=Count('id', filter=still_open & Q(priority=Reminder.Priority.HIGH)),
    )
    return {
        'total_reminders': counts['total'],
        'unhandled_reminders': counts['unhandled'],
        'urgent_count': counts['urgent'],
    }


def get_department_ranking(start: date, end: date):
    """
    Departments ordered by health score for the period [start, end].

    Scores are taken as of `end` (or today, if the period is still running).
    Departments that fail are reported in `errors` and left out of the list.
    """
    tz = get_reminder_zone()
    today = local_today(tz)
    as_of = min(end, today)

    results, errors = _evaluate_departments(scored_departments(), as_of, today, tz)

    ranking = []
    for health in results:
        try:
            counts = reminder_counts(start, end, [health.department_id], tz)
        except Exception as exc:
            logger.exception("Reminder counts failed for department %s", health.department_id)
            errors.append({'department_id': health.department_id, 'error': str(exc)})
            continue
        ranking.append({
            'department_id': health.department_id,
            'department_name': health.department_name,
            'score': health.score,
            'avg_interval': health.avg_interval,
            'active_leave_persons': len(health.persons),
            **counts,
        })

    ranking.sort(key=lambda entry: (-entry['score'], entry['department_name']))
    for position, entry in enumerate(ranking, start=1):
        entry['rank'] = position

    return {
        'start': start.isoformat(),
        'end': end.isoformat(),
        'as_of': as_of.isoformat(),
        'ranking': ranking,
        'errors': errors,
    }


def compute_period_metrics(start, end, scope=ALL_DEPARTMENTS, today=None, tz=None):
    """
    The five trend metrics for one period.

    Returns:
        Tuple of (metrics dict, per-department errors). Departments that
        fail are left out of `health_score` and `avg_contact_interval`.
    """
    tz = tz or get_reminder_zone()
    today = today or local_today(tz)
    as_of = min(end, today)

    department = _resolve_department(scope)
    if department is not None:
        counts = reminder_counts(start, end, [department.pk], tz)
        health = compute_department_health(department, as_of, today, tz)
        score, avg = health.score, health.avg_interval
        errors = []
    else:
        counts = reminder_counts(start, end, tz=tz)
        results, errors = _evaluate_departments(scored_departments(), as_of, today, tz)
        score = scoring.combine_scores(health.score for health in results)
        avg = scoring.average_interval(
            days for health in results for days in health.intervals
        )

    metrics = {
        **counts,
        'avg_contact_interval': avg,
        'health_score': score,
    }
    return metrics, errors


def get_trends(start: date, end: date, scope=ALL_DEPARTMENTS):
    """
    Compare [start, end] against the equally long period just before it.

    Returns:
        Tuple of (dict mapping metric name → TrendResult, errors). Each
        error is tagged with the period it came from.
    """
    tz = get_reminder_zone()
    today = local_today(tz)
    previous_start, previous_end = scoring.previous_period(start, end)

    current, current_errors = compute_period_metrics(start, end, scope, today, tz)
    previous, previous_errors = compute_period_metrics(previous_start, previous_end, scope, today, tz)

    errors = [{**error, 'period': 'current'} for error in current_errors]
    errors += [{**error, 'period': 'previous'} for error in previous_errors]

    trends = {
        metric: scoring.compare(current[metric], previous[metric])
        for metric in TREND_METRICS
    }
    return trends, errors

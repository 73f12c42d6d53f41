from datetime import date

import pytest

from apps.reports import scoring


@pytest.mark.parametrize('days, expected', [
    (0, 0),
    (7, 0),
    (8, 1),
    (10, 3),
    (11, 6),
    (12, 9),
    (20, 9),
    (90, 9),
])
def test_interval_penalty_table(days, expected):
    assert scoring.interval_penalty(days) == expected


def test_interval_penalty_is_monotonic():
    penalties = [scoring.interval_penalty(days) for days in range(0, 60)]
    assert penalties == sorted(penalties)


def test_interval_penalty_caps_past_twelve_days():
    assert scoring.interval_penalty(20) == scoring.interval_penalty(12) == 9


def test_build_intervals_worked_example():
    intervals = scoring.build_intervals(
        date(2024, 1, 1),
        date(2024, 1, 31),
        [date(2024, 1, 20), date(2024, 1, 5)],
        as_of=date(2024, 1, 25),
    )

    assert intervals == [4, 15, 5]
    assert scoring.total_penalty(intervals) == 9
    assert scoring.department_score(9) == 91
    assert scoring.average_interval(intervals) == 8.0


def test_build_intervals_without_contacts_runs_to_as_of():
    intervals = scoring.build_intervals(date(2024, 1, 1), date(2024, 1, 31), [], date(2024, 1, 10))
    assert intervals == [9]


def test_build_intervals_leave_not_started():
    intervals = scoring.build_intervals(date(2024, 2, 1), date(2024, 2, 10), [], date(2024, 1, 25))
    assert intervals == []


def test_build_intervals_omits_trailing_gap_after_leave_ended():
    intervals = scoring.build_intervals(
        date(2024, 1, 1), date(2024, 1, 10), [date(2024, 1, 3)], date(2024, 1, 20),
    )
    assert intervals == [2]


def test_build_intervals_ignores_contacts_outside_window():
    intervals = scoring.build_intervals(
        date(2024, 1, 10),
        date(2024, 1, 31),
        [date(2024, 1, 2), date(2024, 1, 12), date(2024, 2, 3)],
        date(2024, 1, 20),
    )
    assert intervals == [2, 8]


def test_first_interval_starts_when_person_was_created():
    intervals = scoring.build_intervals(
        date(2024, 1, 1), date(2024, 1, 31), [], date(2024, 1, 20),
        person_created=date(2024, 1, 15),
    )
    assert intervals == [5]


def test_negative_intervals_are_skipped():
    intervals = scoring.build_intervals(
        date(2024, 1, 1), date(2024, 1, 31), [date(2024, 1, 5)], date(2024, 1, 20),
        person_created=date(2024, 1, 10),
    )
    assert intervals == [-5, 15]
    assert scoring.valid_intervals(intervals) == [15]


def test_department_score_floor():
    assert scoring.department_score(250) == 0
    assert scoring.department_score(0) == 100


def test_combine_scores():
    assert scoring.combine_scores([91, 80]) == 86
    assert scoring.combine_scores([]) == 100


def test_average_interval_empty():
    assert scoring.average_interval([]) == 0.0


def test_previous_period_has_same_length():
    start, end = scoring.previous_period(date(2024, 3, 1), date(2024, 3, 31))
    assert (start, end) == (date(2024, 1, 30), date(2024, 2, 29))


def test_compare_direction():
    trend = scoring.compare(5, 2)
    assert (trend.change, trend.direction) == (3, 'up')

    assert scoring.compare(2, 5).direction == 'down'
    assert scoring.compare(4, 4).direction == 'stable'


def test_compare_float_metric():
    trend = scoring.compare(3.0, 3.4)
    assert trend.change == 0.4
    assert trend.direction == 'down'
    assert trend.as_dict() == {'current': 3.0, 'previous': 3.4, 'change': 0.4, 'direction': 'down'}

"""
Daily reminder scheduler.

ReminderScheduler is an explicit object built from settings and handed to
whatever needs it: the django-q task, the management commands and the
manual-trigger view. Registering installs a django-q2 CRON schedule; the
qcluster process then calls `apps.reminders.tasks.run_daily_reminders`.
"""

import logging
from dataclasses import dataclass, field
from datetime import date, datetime
from typing import List, Optional
from zoneinfo import ZoneInfo

from croniter import croniter
from django.conf import settings
from django.db import DatabaseError
from django.utils import timezone
from django_q.models import Schedule

from .clock import local_today
from .services import run_daily_batch

logger = logging.getLogger(__name__)


@dataclass
class RunResult:
    """Outcome of one reminder run as reported to callers."""

    run_date: date
    reminders_created: int = 0
    errors: List[str] = field(default_factory=list)
    skipped: bool = False
    leaves_completed: int = 0

    @property
    def ok(self):
        return not self.errors

    def as_dict(self):
        return {
            'run_date': self.run_date.isoformat(),
            'reminders_created': self.reminders_created,
            'errors': list(self.errors),
            'skipped': self.skipped,
            'leaves_completed': self.leaves_completed,
        }


class ReminderScheduler:
    """
    Owns the cron expression, time zone and retention for the daily run.

    Attributes:
        cron: Five-field cron expression evaluated by django-q2
        timezone: ZoneInfo used to decide what "today" is
        retention_days: How many days of run-ledger rows to keep
    """

    SCHEDULE_NAME = 'Daily Reminder Run'
    TASK_FUNC = 'apps.reminders.tasks.run_daily_reminders'

    def __init__(self, cron: str, time_zone: str, retention_days: int = 7):
        if not croniter.is_valid(cron):
            raise ValueError(f"Invalid cron expression: {cron!r}")
        self.cron = cron
        self.timezone = ZoneInfo(time_zone)
        self.retention_days = retention_days

    @classmethod
    def from_settings(cls):
        return cls(
            cron=settings.REMINDER_CRON,
            time_zone=settings.REMINDER_TIME_ZONE,
            retention_days=settings.REMINDER_LOG_RETENTION_DAYS,
        )

    def today(self) -> date:
        return local_today(self.timezone)

    def next_run_after(self, moment: Optional[datetime] = None) -> datetime:
        """Next firing time of the cron expression after `moment`."""
        moment = timezone.localtime(moment or timezone.now(), self.timezone)
        return croniter(self.cron, moment).get_next(datetime)

    def register(self):
        """
        Create or update the django-q2 schedule for the daily run.

        Returns:
            Tuple of (Schedule, created)
        """
        schedule, created = Schedule.objects.update_or_create(
            name=self.SCHEDULE_NAME,
            defaults={
                'func': self.TASK_FUNC,
                'schedule_type': Schedule.CRON,
                'cron': self.cron,
                'repeats': -1,
                'next_run': self.next_run_after(),
            }
        )
        logger.info("%s schedule '%s' (%s)",
                    'Created' if created else 'Updated', self.SCHEDULE_NAME, self.cron)
        return schedule, created

    def stop(self):
        """Remove the schedule. Returns the number of schedules deleted."""
        deleted, _ = Schedule.objects.filter(name=self.SCHEDULE_NAME).delete()
        if deleted:
            logger.info("Removed schedule '%s'", self.SCHEDULE_NAME)
        return deleted

    def is_registered(self):
        return Schedule.objects.filter(name=self.SCHEDULE_NAME).exists()

    def run_daily(self, today: Optional[date] = None, force: bool = False) -> RunResult:
        """
        Execute the batch for `today` (defaults to the local date).

        Datastore failures are logged and returned in `errors`; the batch
        transaction has already rolled back, so no completion marker exists
        and the next run retries the whole day.
        """
        today = today or self.today()
        logger.info("Starting reminder run for %s%s", today, ' (forced)' if force else '')

        try:
            summary = run_daily_batch(
                today,
                tz=self.timezone,
                force=force,
                retention_days=self.retention_days,
            )
        except DatabaseError as exc:
            logger.exception("Reminder run for %s failed and was rolled back", today)
            return RunResult(run_date=today, errors=[str(exc)])

        return RunResult(
            run_date=today,
            reminders_created=summary.reminders_created,
            skipped=summary.skipped,
            leaves_completed=summary.leaves_completed,
        )

    def trigger_manual_run(self, today: Optional[date] = None) -> RunResult:
        """Regenerate today's reminders regardless of the run ledger."""
        return self.run_daily(today=today, force=True)

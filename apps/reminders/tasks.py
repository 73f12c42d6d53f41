"""
Scheduled tasks for reminders app.

Executed by the django-q2 cluster (python manage.py qcluster) on the cron
configured by REMINDER_CRON. Registered by `python manage.py setup_schedules`.
"""

from .scheduler import ReminderScheduler


def run_daily_reminders(scheduler=None):
    """
    Daily reminder run.

    Skips the day if it already completed. The returned dict is stored by
    django-q as the task result.
    """
    scheduler = scheduler or ReminderScheduler.from_settings()
    return scheduler.run_daily().as_dict()

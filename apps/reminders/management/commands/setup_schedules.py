"""
Management command to set up the Django-Q2 schedule for the daily reminder run.

The schedule fires on REMINDER_CRON (default 01:00 every day) and calls
apps.reminders.tasks.run_daily_reminders.

Usage:
    python manage.py setup_schedules
    python manage.py setup_schedules --remove

The command is idempotent - safe to run multiple times.
An existing schedule is updated if the cron expression changed.
"""
from django.core.management.base import BaseCommand

from apps.reminders.scheduler import ReminderScheduler


class Command(BaseCommand):
    help = 'Set up the Django-Q2 schedule for the daily reminder run'

    def add_arguments(self, parser):
        parser.add_argument(
            '--remove',
            action='store_true',
            help='Delete the schedule instead of creating it',
        )

    def handle(self, *args, **options):
        scheduler = ReminderScheduler.from_settings()

        if options['remove']:
            if scheduler.stop():
                self.stdout.write(
                    self.style.SUCCESS(f'✓ Removed schedule: {scheduler.SCHEDULE_NAME}')
                )
            else:
                self.stdout.write(
                    self.style.WARNING(f'No schedule named {scheduler.SCHEDULE_NAME} to remove')
                )
            return

        self.stdout.write('\nSetting up Django-Q2 schedules...\n')

        schedule, created = scheduler.register()
        if created:
            self.stdout.write(
                self.style.SUCCESS(f'✓ Created schedule: {schedule.name} ({schedule.cron})')
            )
        else:
            self.stdout.write(
                self.style.WARNING(f'↻ Updated schedule: {schedule.name} ({schedule.cron})')
            )

        self.stdout.write('')
        self.stdout.write(f'Next run: {schedule.next_run:%Y-%m-%d %H:%M %Z}')
        self.stdout.write('')
        self.stdout.write(
            self.style.NOTICE(
                'Note: Ensure Django-Q cluster is running: python manage.py qcluster'
            )
        )
        self.stdout.write('')

"""
Management command to run the daily reminder batch immediately.

Usage:
    python manage.py run_reminders
    python manage.py run_reminders --date 2024-03-01 --force

Without --force the run is skipped when the day already completed.
"""
from datetime import date

from django.core.management.base import BaseCommand, CommandError

from apps.reminders.scheduler import ReminderScheduler


class Command(BaseCommand):
    help = 'Run the daily reminder batch now'

    def add_arguments(self, parser):
        parser.add_argument(
            '--date',
            dest='run_date',
            help='Run for this date (YYYY-MM-DD) instead of today',
        )
        parser.add_argument(
            '--force',
            action='store_true',
            help='Regenerate even if the day already completed',
        )

    def handle(self, *args, **options):
        run_date = None
        if options['run_date']:
            try:
                run_date = date.fromisoformat(options['run_date'])
            except ValueError:
                raise CommandError(f"Invalid date: {options['run_date']}")

        scheduler = ReminderScheduler.from_settings()
        result = scheduler.run_daily(today=run_date, force=options['force'])

        if result.errors:
            raise CommandError(
                f'Reminder run for {result.run_date} failed: ' + '; '.join(result.errors)
            )

        if result.skipped:
            self.stdout.write(
                self.style.WARNING(
                    f'Reminder run for {result.run_date} already completed. Use --force to rerun.'
                )
            )
            return

        self.stdout.write(
            self.style.SUCCESS(
                f'✓ Reminder run for {result.run_date}: '
                f'{result.reminders_created} reminder(s) created, '
                f'{result.leaves_completed} leave period(s) completed'
            )
        )

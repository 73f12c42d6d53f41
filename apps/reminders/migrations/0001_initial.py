import datetime

import django.core.validators
import django.db.models.deletion
from django.conf import settings
from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = [
        ('personnel', '0001_initial'),
        migrations.swappable_dependency(settings.AUTH_USER_MODEL),
    ]

    operations = [
        migrations.CreateModel(
            name='JobLock',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('name', models.CharField(max_length=100, unique=True)),
                ('last_run_date', models.DateField(blank=True, null=True)),
                ('last_started_at', models.DateTimeField(blank=True, null=True)),
                ('last_finished_at', models.DateTimeField(blank=True, null=True)),
            ],
            options={
                'verbose_name': 'job lock',
                'verbose_name_plural': 'job locks',
            },
        ),
        migrations.CreateModel(
            name='ReminderSettings',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('urgent_threshold', models.PositiveSmallIntegerField(default=10, help_text='Days without contact before a high-priority reminder', validators=[django.core.validators.MinValueValidator(3), django.core.validators.MaxValueValidator(30)])),
                ('suggest_threshold', models.PositiveSmallIntegerField(default=7, help_text='Days without contact before a medium-priority reminder', validators=[django.core.validators.MinValueValidator(1), django.core.validators.MaxValueValidator(14)])),
                ('push_enabled', models.BooleanField(default=True)),
                ('urgent_reminder', models.BooleanField(default=True)),
                ('daily_report', models.BooleanField(default=False)),
                ('weekly_report', models.BooleanField(default=True)),
                ('vibration_enabled', models.BooleanField(default=True)),
                ('reminder_time', models.TimeField(default=datetime.time(9, 0))),
                ('created_at', models.DateTimeField(auto_now_add=True)),
                ('updated_at', models.DateTimeField(auto_now=True)),
                ('user', models.OneToOneField(on_delete=django.db.models.deletion.CASCADE, related_name='reminder_settings', to=settings.AUTH_USER_MODEL)),
            ],
            options={
                'verbose_name': 'reminder settings',
                'verbose_name_plural': 'reminder settings',
            },
        ),
        migrations.CreateModel(
            name='Reminder',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('reminder_type', models.CharField(choices=[('before', 'Leave Starts Tomorrow'), ('during', 'On Leave Without Contact'), ('ending', 'Leave Ends Tomorrow'), ('overdue', 'Contact Overdue'), ('system', 'System Run Log')], db_index=True, max_length=20)),
                ('reminder_date', models.DateField(db_index=True)),
                ('priority', models.CharField(choices=[('high', 'High'), ('medium', 'Medium'), ('low', 'Low')], default='medium', max_length=10)),
                ('is_handled', models.BooleanField(default=False)),
                ('handled_at', models.DateTimeField(blank=True, null=True)),
                ('created_at', models.DateTimeField(auto_now_add=True)),
                ('handled_by', models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL, related_name='handled_reminders', to=settings.AUTH_USER_MODEL)),
                ('leave_period', models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL, related_name='reminders', to='personnel.leaveperiod')),
                ('person', models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.CASCADE, related_name='reminders', to='personnel.person')),
            ],
            options={
                'verbose_name': 'reminder',
                'verbose_name_plural': 'reminders',
                'ordering': ['-reminder_date', '-created_at'],
                'indexes': [
                    models.Index(fields=['reminder_date', 'reminder_type'], name='reminder_date_type_idx'),
                    models.Index(fields=['person', 'is_handled'], name='reminder_person_handled_idx'),
                ],
                'constraints': [
                    models.UniqueConstraint(condition=models.Q(('person__isnull', False)), fields=('person', 'reminder_date', 'reminder_type'), name='unique_person_reminder_per_day'),
                ],
            },
        ),
    ]

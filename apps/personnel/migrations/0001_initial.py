import django.db.models.deletion
from django.conf import settings
from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = [
        ('departments', '0001_initial'),
        migrations.swappable_dependency(settings.AUTH_USER_MODEL),
    ]

    operations = [
        migrations.CreateModel(
            name='Person',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('name', models.CharField(max_length=50)),
                ('phone', models.CharField(blank=True, max_length=20)),
                ('emergency_contact', models.CharField(blank=True, max_length=50)),
                ('emergency_phone', models.CharField(blank=True, max_length=20)),
                ('person_type', models.CharField(choices=[('employee', 'Employee'), ('intern', 'Intern'), ('manager', 'Manager')], default='employee', max_length=20)),
                ('notes', models.TextField(blank=True)),
                ('last_contact_date', models.DateField(blank=True, null=True)),
                ('created_at', models.DateTimeField(auto_now_add=True)),
                ('updated_at', models.DateTimeField(auto_now=True)),
                ('created_by', models.ForeignKey(blank=True, help_text='Liaison whose reminder thresholds apply to this person', null=True, on_delete=django.db.models.deletion.SET_NULL, related_name='created_persons', to=settings.AUTH_USER_MODEL)),
                ('department', models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL, related_name='persons', to='departments.department')),
                ('last_contact_by', models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL, related_name='last_contacted_persons', to=settings.AUTH_USER_MODEL)),
            ],
            options={
                'verbose_name': 'person',
                'verbose_name_plural': 'persons',
                'ordering': ['name'],
                'indexes': [
                    models.Index(fields=['department'], name='person_department_idx'),
                    models.Index(fields=['created_by'], name='person_created_by_idx'),
                ],
            },
        ),
        migrations.CreateModel(
            name='LeavePeriod',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('leave_type', models.CharField(choices=[('vacation', 'Vacation'), ('business', 'Business Trip'), ('study', 'Study'), ('hospitalization', 'Hospitalization'), ('care', 'Family Care')], max_length=20)),
                ('location', models.CharField(blank=True, max_length=200)),
                ('start_date', models.DateField()),
                ('end_date', models.DateField()),
                ('days', models.PositiveIntegerField(default=0)),
                ('status', models.CharField(choices=[('active', 'Active'), ('completed', 'Completed'), ('cancelled', 'Cancelled')], db_index=True, default='active', max_length=20)),
                ('created_at', models.DateTimeField(auto_now_add=True)),
                ('created_by', models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL, related_name='created_leave_periods', to=settings.AUTH_USER_MODEL)),
                ('person', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='leave_periods', to='personnel.person')),
            ],
            options={
                'verbose_name': 'leave period',
                'verbose_name_plural': 'leave periods',
                'ordering': ['-start_date'],
                'indexes': [
                    models.Index(fields=['status', 'end_date'], name='leave_status_end_idx'),
                    models.Index(fields=['person', 'status'], name='leave_person_status_idx'),
                ],
            },
        ),
        migrations.CreateModel(
            name='ContactEvent',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('contact_date', models.DateTimeField(db_index=True)),
                ('contact_method', models.CharField(blank=True, choices=[('phone', 'Phone'), ('message', 'Message'), ('visit', 'Visit')], max_length=20)),
                ('notes', models.TextField(blank=True)),
                ('created_at', models.DateTimeField(auto_now_add=True)),
                ('contact_by', models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL, related_name='contact_events', to=settings.AUTH_USER_MODEL)),
                ('leave_period', models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL, related_name='contact_events', to='personnel.leaveperiod')),
                ('person', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='contact_events', to='personnel.person')),
            ],
            options={
                'verbose_name': 'contact event',
                'verbose_name_plural': 'contact events',
                'ordering': ['contact_date'],
                'indexes': [
                    models.Index(fields=['person', 'contact_date'], name='contact_person_date_idx'),
                ],
            },
        ),
    ]

import django.db.models.deletion
from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = []

    operations = [
        migrations.CreateModel(
            name='Department',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('name', models.CharField(help_text='Full department name', max_length=100)),
                ('code', models.CharField(help_text='Short identifier (e.g., OPS, HR, FIN)', max_length=50, unique=True)),
                ('description', models.TextField(blank=True)),
                ('level', models.PositiveSmallIntegerField(default=1, editable=False)),
                ('path', models.CharField(db_index=True, editable=False, max_length=500)),
                ('is_active', models.BooleanField(default=True)),
                ('sort_order', models.IntegerField(default=0)),
                ('created_at', models.DateTimeField(auto_now_add=True)),
                ('updated_at', models.DateTimeField(auto_now=True)),
                ('parent', models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.PROTECT, related_name='children', to='departments.department')),
            ],
            options={
                'verbose_name': 'department',
                'verbose_name_plural': 'departments',
                'ordering': ['level', 'sort_order', 'name'],
                'indexes': [
                    models.Index(fields=['code'], name='departments_code_idx'),
                    models.Index(fields=['parent'], name='departments_parent_idx'),
                ],
            },
        ),
    ]

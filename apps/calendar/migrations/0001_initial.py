# Generated manually for the meal billing calendar app

from django.conf import settings
from django.core.validators import MaxValueValidator, MinValueValidator
from django.db import migrations, models
import django.db.models.deletion


class Migration(migrations.Migration):

    initial = True

    dependencies = [
        migrations.swappable_dependency(settings.AUTH_USER_MODEL),
    ]

    operations = [
        migrations.CreateModel(
            name='Holiday',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('date', models.DateField(db_index=True)),
                ('name', models.CharField(max_length=200)),
                ('name_bn', models.CharField(blank=True, max_length=200)),
                ('type', models.CharField(choices=[('government', 'Government'), ('optional', 'Optional'), ('religious', 'Religious')], default='government', max_length=20)),
                ('is_active', models.BooleanField(default=True)),
                ('created_at', models.DateTimeField(auto_now_add=True)),
                ('added_by', models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL, related_name='added_holidays', to=settings.AUTH_USER_MODEL)),
            ],
            options={
                'db_table': 'holidays',
                'ordering': ['date', 'id'],
                'indexes': [
                    models.Index(fields=['date', 'is_active'], name='holidays_date_active_idx'),
                    models.Index(fields=['type'], name='holidays_type_idx'),
                ],
            },
        ),
        migrations.CreateModel(
            name='GlobalSettings',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('friday_off', models.BooleanField(default=True)),
                ('saturday_off', models.BooleanField(default=False)),
                ('odd_saturday_off', models.BooleanField(default=True)),
                ('even_saturday_off', models.BooleanField(default=False)),
                ('government_holiday_off', models.BooleanField(default=True)),
                ('optional_holiday_off', models.BooleanField(default=False)),
                ('religious_holiday_off', models.BooleanField(default=True)),
                ('lunch_cutoff_hour', models.PositiveSmallIntegerField(default=10, validators=[MaxValueValidator(23)])),
                ('dinner_cutoff_hour', models.PositiveSmallIntegerField(default=16, validators=[MaxValueValidator(23)])),
                ('lunch_default_on', models.BooleanField(default=True)),
                ('dinner_default_on', models.BooleanField(default=True)),
                ('updated_at', models.DateTimeField(auto_now=True)),
                ('updated_by', models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL, related_name='+', to=settings.AUTH_USER_MODEL)),
            ],
            options={
                'db_table': 'global_settings',
                'verbose_name': 'Global settings',
                'verbose_name_plural': 'Global settings',
            },
        ),
        migrations.CreateModel(
            name='MonthSettings',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('year', models.PositiveIntegerField()),
                ('month', models.PositiveSmallIntegerField(validators=[MinValueValidator(1), MaxValueValidator(12)])),
                ('start_date', models.DateField()),
                ('end_date', models.DateField()),
                ('is_finalized', models.BooleanField(default=False)),
                ('finalized_at', models.DateTimeField(blank=True, null=True)),
                ('notes', models.TextField(blank=True)),
                ('created_at', models.DateTimeField(auto_now_add=True)),
                ('updated_at', models.DateTimeField(auto_now=True)),
                ('created_by', models.ForeignKey(null=True, on_delete=django.db.models.deletion.SET_NULL, related_name='created_month_settings', to=settings.AUTH_USER_MODEL)),
                ('modified_by', models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL, related_name='+', to=settings.AUTH_USER_MODEL)),
            ],
            options={
                'db_table': 'month_settings',
                'ordering': ['-year', '-month'],
                'unique_together': {('year', 'month')},
                'indexes': [
                    models.Index(fields=['is_finalized'], name='month_settings_final_idx'),
                    models.Index(fields=['start_date', 'end_date'], name='month_settings_window_idx'),
                ],
            },
        ),
    ]

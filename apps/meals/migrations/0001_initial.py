# Generated manually for the meal billing meals app

from django.conf import settings
from django.db import migrations, models
import django.db.models.deletion


class Migration(migrations.Migration):

    initial = True

    dependencies = [
        migrations.swappable_dependency(settings.AUTH_USER_MODEL),
    ]

    operations = [
        migrations.CreateModel(
            name='Meal',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('date', models.DateField()),
                ('meal_type', models.CharField(choices=[('lunch', 'Lunch'), ('dinner', 'Dinner')], default='lunch', max_length=10)),
                ('is_on', models.BooleanField(default=True)),
                ('count', models.PositiveSmallIntegerField(default=1)),
                ('is_manually_set', models.BooleanField(default=False)),
                ('notes', models.CharField(blank=True, max_length=500)),
                ('created_at', models.DateTimeField(auto_now_add=True)),
                ('updated_at', models.DateTimeField(auto_now=True)),
                ('user', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='meals', to=settings.AUTH_USER_MODEL)),
                ('modified_by', models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL, related_name='+', to=settings.AUTH_USER_MODEL)),
            ],
            options={
                'db_table': 'meals',
                'ordering': ['date', 'meal_type'],
                'indexes': [
                    models.Index(fields=['date', 'meal_type'], name='meals_date_type_idx'),
                ],
                'constraints': [
                    models.UniqueConstraint(fields=('user', 'date', 'meal_type'), name='unique_meal_per_user_date_type'),
                ],
            },
        ),
        migrations.CreateModel(
            name='RuleOverride',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('target_type', models.CharField(choices=[('user', 'Specific user'), ('all_users', 'All users'), ('global', 'Global')], max_length=20)),
                ('date_type', models.CharField(choices=[('single', 'Single date'), ('range', 'Date range'), ('recurring', 'Recurring')], max_length=20)),
                ('start_date', models.DateField()),
                ('end_date', models.DateField(blank=True, null=True)),
                ('recurring_pattern', models.CharField(blank=True, choices=[('daily', 'Daily'), ('weekly', 'Weekly'), ('monthly', 'Monthly')], max_length=20)),
                ('recurring_days', models.JSONField(blank=True, default=list)),
                ('meal_type', models.CharField(choices=[('lunch', 'Lunch'), ('dinner', 'Dinner'), ('both', 'Both')], max_length=10)),
                ('action', models.CharField(choices=[('force_on', 'Force ON'), ('force_off', 'Force OFF')], max_length=20)),
                ('priority', models.PositiveSmallIntegerField(choices=[(1, 'System default'), (2, 'User manual'), (3, 'Manager override'), (4, 'Admin override')], editable=False)),
                ('created_by_role', models.CharField(choices=[('user', 'User'), ('manager', 'Manager'), ('admin', 'Admin'), ('superadmin', 'Super Admin')], max_length=20)),
                ('reason', models.CharField(blank=True, max_length=500)),
                ('reason_bn', models.CharField(blank=True, max_length=500)),
                ('is_active', models.BooleanField(default=True)),
                ('expires_at', models.DateTimeField(blank=True, null=True)),
                ('created_at', models.DateTimeField(auto_now_add=True)),
                ('updated_at', models.DateTimeField(auto_now=True)),
                ('target_user', models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.CASCADE, related_name='meal_overrides', to=settings.AUTH_USER_MODEL)),
                ('created_by', models.ForeignKey(null=True, on_delete=django.db.models.deletion.SET_NULL, related_name='created_overrides', to=settings.AUTH_USER_MODEL)),
            ],
            options={
                'db_table': 'rule_overrides',
                'ordering': ['-priority', '-created_at', '-id'],
                'indexes': [
                    models.Index(fields=['start_date', 'end_date'], name='overrides_window_idx'),
                    models.Index(fields=['target_type', 'target_user'], name='overrides_target_idx'),
                    models.Index(fields=['meal_type', 'is_active'], name='overrides_meal_active_idx'),
                    models.Index(fields=['-priority', '-created_at'], name='overrides_order_idx'),
                ],
            },
        ),
    ]

"""
Management command to load the official Bangladesh holiday list.

Usage:
    python manage.py seed_holidays
    python manage.py seed_holidays --year 2026 --clear

Holidays already present with the same date and name are left untouched,
so the command can be re-run safely.
"""

from datetime import date

from django.core.management.base import BaseCommand, CommandError
from django.db import transaction

from apps.calendar.models import Holiday, HolidayType

G = HolidayType.GOVERNMENT
R = HolidayType.RELIGIOUS

HOLIDAYS = {
    2026: [
        # General holidays
        ('2026-02-21', 'Shaheed Day & International Mother Language Day', 'শহীদ দিবস ও আন্তর্জাতিক মাতৃভাষা দিবস', G),
        ('2026-03-20', 'Jumatul Bida', 'জুমাতুল বিদা', R),
        ('2026-03-21', 'Eid ul-Fitr', 'ঈদুল ফিতর', R),
        ('2026-03-26', 'Independence Day', 'স্বাধীনতা ও জাতীয় দিবস', G),
        ('2026-05-01', 'May Day', 'মে দিবস', G),
        ('2026-05-01', 'Buddha Purnima', 'বুদ্ধ পূর্ণিমা', R),
        ('2026-05-28', 'Eid ul-Adha', 'ঈদুল আযহা', R),
        ('2026-08-05', 'Mass Uprising Day', 'গণ-অভ্যুত্থান দিবস', G),
        ('2026-08-26', 'Eid-e-Miladunnabi', 'ঈদে মিলাদুন্নবী (সা.)', R),
        ('2026-09-04', 'Janmashtami', 'জন্মাষ্টমী', R),
        ('2026-10-21', 'Durga Puja (Bijoya Dashami)', 'দুর্গাপূজা (বিজয়া দশমী)', R),
        ('2026-12-16', 'Victory Day', 'বিজয় দিবস', G),
        ('2026-12-25', 'Christmas Day', 'বড়দিন', R),
        # Executive order holidays
        ('2026-02-04', 'Shab-e-Barat', 'শবে বরাত', R),
        ('2026-03-17', 'Shab-e-Qadr', 'শবে কদর', R),
        ('2026-03-19', 'Eid ul-Fitr Holiday', 'ঈদুল ফিতর ছুটি', R),
        ('2026-03-22', 'Eid ul-Fitr Holiday', 'ঈদুল ফিতর ছুটি', R),
        ('2026-03-23', 'Eid ul-Fitr Holiday', 'ঈদুল ফিতর ছুটি', R),
        ('2026-04-14', 'Bengali New Year (Pahela Baishakh)', 'পহেলা বৈশাখ', G),
        ('2026-05-26', 'Eid ul-Adha Holiday', 'ঈদুল আযহা ছুটি', R),
        ('2026-05-27', 'Eid ul-Adha Holiday', 'ঈদুল আযহা ছুটি', R),
        ('2026-05-29', 'Eid ul-Adha Holiday', 'ঈদুল আযহা ছুটি', R),
        ('2026-05-30', 'Eid ul-Adha Holiday', 'ঈদুল আযহা ছুটি', R),
        ('2026-05-31', 'Eid ul-Adha Holiday', 'ঈদুল আযহা ছুটি', R),
        ('2026-06-26', 'Ashura', 'আশুরা', R),
        ('2026-10-20', 'Durga Puja (Mahanabami)', 'দুর্গাপূজা (মহানবমী)', R),
    ],
}


class Command(BaseCommand):
    help = 'Load the official Bangladesh public holiday list for a year'

    def add_arguments(self, parser):
        parser.add_argument(
            '--year',
            type=int,
            default=2026,
            help='Year to seed (available: %s)' % ', '.join(str(y) for y in sorted(HOLIDAYS)),
        )
        parser.add_argument(
            '--clear',
            action='store_true',
            help='Delete existing holidays of that year first',
        )

    @transaction.atomic
    def handle(self, *args, **options):
        year = options['year']
        if year not in HOLIDAYS:
            raise CommandError(f'No holiday list available for {year}')

        if options['clear']:
            deleted, _ = Holiday.objects.filter(date__year=year).delete()
            self.stdout.write(f'Deleted {deleted} existing holiday(s) for {year}.')

        created = 0
        for day, name, name_bn, holiday_type in HOLIDAYS[year]:
            _, was_created = Holiday.objects.get_or_create(
                date=date.fromisoformat(day),
                name=name,
                defaults={'name_bn': name_bn, 'type': holiday_type},
            )
            created += int(was_created)

        skipped = len(HOLIDAYS[year]) - created
        self.stdout.write(self.style.SUCCESS(f'Added {created} holiday(s) for {year}.'))
        if skipped:
            self.stdout.write(f'Skipped {skipped} already present.')

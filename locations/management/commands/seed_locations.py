"""
Management command to seed sample locations and their page groups.
Usage: python manage.py seed_locations [--page-group location]
"""
from django.conf import settings
from django.core.management.base import BaseCommand
from django.db import transaction

from content.models import PageGroup
from locations.models import Location

SAMPLE_LOCATIONS = [
    ('Galaxy Grill Downtown', 'CA', 'San Francisco', '123 Market St'),
    ('Galaxy Grill Mission', 'CA', 'San Francisco', '482 Valencia St'),
    ('Galaxy Grill Oakland', 'CA', 'Oakland', '780 Broadway'),
    ('Galaxy Grill San Jose', 'CA', 'San Jose', '220 Santana Row'),
    ('Galaxy Grill Sacramento', 'CA', 'Sacramento', '15 Capitol Mall'),
    ('Galaxy Grill Seattle', 'WA', 'Seattle', '611 Pine St'),
    ('Galaxy Grill Bellevue', 'WA', 'Bellevue', '300 Lincoln Sq'),
    ('Galaxy Grill Portland', 'OR', 'Portland', '1001 NW Couch St'),
    ('Galaxy Grill Denver', 'CO', 'Denver', '1550 Wewatta St'),
    ('Galaxy Grill Austin', 'TX', 'Austin', '500 W 2nd St'),
]


class Command(BaseCommand):
    help = 'Seed sample locations and create their page groups'

    def add_arguments(self, parser):
        parser.add_argument(
            '--page-group',
            default=settings.LOCATION_PAGE_GROUP,
            help='Page group the sample locations belong to',
        )

    @transaction.atomic
    def handle(self, *args, **options):
        group_slug = options['page_group']

        if Location.objects.filter(page_group_slug=group_slug).exists():
            self.stdout.write(f'Group "{group_slug}" already has locations, skipping.')
            return

        for slug in (group_slug, settings.CITY_PAGE_GROUP):
            _, created = PageGroup.objects.get_or_create(slug=slug)
            if created:
                self.stdout.write(f'Created page group: {slug}')

        for name, region, city, line1 in SAMPLE_LOCATIONS:
            Location.objects.create(
                page_group_slug=group_slug,
                name=name,
                address_region=region,
                address_city=city,
                address_line1=line1,
            )

        self.stdout.write(self.style.SUCCESS(f'Seeded {len(SAMPLE_LOCATIONS)} locations.'))

"""
Management command to create the demo recycler accounts.

Usage:
    python manage.py seed_demo_users
    python manage.py seed_demo_users --password Secret123!

Existing accounts are left untouched, so the command is safe to re-run.
"""

from django.core.management.base import BaseCommand
from django.db import transaction

from apps.accounts.models import User


DEMO_USERS = [
    {
        'email': 'dummy@trash2cash.com',
        'display_name': 'Dummy User',
        'phone': '+1234567890',
    },
    {
        'email': 'demo@trash2cash.com',
        'display_name': 'Demo User',
        'phone': '+0987654321',
    },
]


class Command(BaseCommand):
    help = 'Create demo recycler accounts for local testing'

    def add_arguments(self, parser):
        parser.add_argument(
            '--password',
            default='password123',
            help='Password assigned to newly created demo accounts',
        )

    @transaction.atomic
    def handle(self, *args, **options):
        created = 0

        for data in DEMO_USERS:
            if User.objects.filter(email=data['email']).exists():
                self.stdout.write(f"  - {data['email']} already exists, skipping")
                continue

            User.objects.create_user(password=options['password'], **data)
            created += 1
            self.stdout.write(f"  + {data['email']}")

        if created:
            self.stdout.write(self.style.SUCCESS(f'Created {created} demo user(s).'))
        else:
            self.stdout.write(self.style.WARNING('No demo users created.'))

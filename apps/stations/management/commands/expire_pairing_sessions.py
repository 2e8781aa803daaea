"""
Management command to expire pairing sessions past their deadline.

Sessions expire lazily when touched, so this only tidies up sessions
nobody looked at again. Safe to run from cron.

Usage:
    python manage.py expire_pairing_sessions
    python manage.py expire_pairing_sessions --dry-run
"""

from django.core.management.base import BaseCommand
from django.utils import timezone

from apps.stations.models import PairingSession, LIVE_STATUSES
from apps.stations.services import expire_stale_sessions


class Command(BaseCommand):
    help = 'Mark live pairing sessions past their deadline as expired'

    def add_arguments(self, parser):
        parser.add_argument(
            '--dry-run',
            action='store_true',
            help='Show how many sessions would expire without changing them',
        )

    def handle(self, *args, **options):
        if options['dry_run']:
            count = PairingSession.objects.filter(
                status__in=LIVE_STATUSES,
                expires_at__lt=timezone.now(),
            ).count()
            self.stdout.write(
                self.style.WARNING(f'--dry-run mode: {count} session(s) would expire.')
            )
            return

        count = expire_stale_sessions()

        if count == 0:
            self.stdout.write(self.style.SUCCESS('No stale sessions.'))
            return

        self.stdout.write(self.style.SUCCESS(f'Expired {count} stale session(s).'))

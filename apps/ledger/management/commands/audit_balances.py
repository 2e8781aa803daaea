"""
Management command to check cached balances against the ledger.

Every PointsBalance must equal the sum of its owner's ledger entry
deltas. This reports any owner where the two disagree.

Usage:
    python manage.py audit_balances
"""

from django.core.management.base import BaseCommand, CommandError

from apps.ledger.services import find_balance_mismatches


class Command(BaseCommand):
    help = 'Verify every cached points balance equals its ledger sum'

    def add_arguments(self, parser):
        parser.add_argument(
            '--fail-on-mismatch',
            action='store_true',
            help='Exit with an error when any balance disagrees with the ledger',
        )

    def handle(self, *args, **options):
        mismatches = find_balance_mismatches()

        if not mismatches:
            self.stdout.write(
                self.style.SUCCESS('All balances match the ledger.')
            )
            return

        self.stdout.write(f'\nFound {len(mismatches)} mismatched balance(s):\n')
        for row in mismatches:
            self.stdout.write(
                f"  - owner {row['owner_id']} | cached {row['cached']} | ledger {row['ledger']}"
            )

        if options['fail_on_mismatch']:
            raise CommandError(f'{len(mismatches)} balance(s) disagree with the ledger')

        self.stdout.write(self.style.WARNING('\nNo changes made; investigate before correcting.'))

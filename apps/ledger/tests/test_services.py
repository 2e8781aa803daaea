"""
Tests for the points ledger services.

Concurrency tests use real transactions and threads against the
file-backed SQLite test database.
"""

import threading
from concurrent.futures import ThreadPoolExecutor
from decimal import Decimal

import pytest
from django.db import connection
from django.test import TransactionTestCase

from apps.accounts.models import User
from apps.ledger.models import (
    LedgerEntry,
    PointsBalance,
    Redemption,
    EntryKind,
    RedemptionStatus,
    MAX_BALANCE_POINTS,
)
from apps.ledger.services import (
    RateTable,
    earn,
    spend,
    balance_of,
    ledger_sum,
    cash_value,
    get_owner_entries,
    get_owner_entry,
    get_redemption_history,
    get_redemption_options,
    get_deposit_stats,
    find_balance_mismatches,
    InvalidQuantityError,
    UnknownMaterialError,
    InsufficientBalanceError,
    InvalidRedemptionMethodError,
    LedgerEntryNotFoundError,
    ImmutableEntryError,
)


# =============================================================================
# Rate Table
# =============================================================================

class TestRateTable:

    def test_rate_lookup_is_case_insensitive(self, rates):
        assert rates.rate_per_kg('Plastic') == Decimal('10')
        assert ' metal ' in rates

    def test_unknown_material(self, rates):
        with pytest.raises(UnknownMaterialError):
            rates.rate_per_kg('styrofoam')

    def test_points_truncate_toward_zero(self, rates):
        assert rates.points_for('plastic', 1.5) == 15
        assert rates.points_for('plastic', 0.33) == 3
        assert rates.points_for('glass', 0.99) == 7
        assert rates.points_for('paper', 0.1) == 0

    def test_from_settings(self, settings):
        settings.MATERIAL_RATES = {'cardboard': 3}
        table = RateTable.from_settings()
        assert table.materials == ['cardboard']
        assert table.as_dict() == {'cardboard': 3}


# =============================================================================
# Earn
# =============================================================================

@pytest.mark.django_db
class TestEarn:

    def test_earn_plastic(self, recycler, rates):
        """1.5 kg of plastic at 10 pts/kg earns 15 points."""
        entry = earn(owner=recycler, material='plastic', weight_kg=1.5, rates=rates)

        assert entry.delta == 15
        assert entry.balance_after == 15
        assert entry.kind == EntryKind.DEPOSIT
        assert entry.material == 'plastic'
        assert entry.weight_kg == 1.5
        assert balance_of(owner=recycler) == 15

    def test_earn_truncates(self, recycler, rates):
        """0.33 kg of plastic earns 3 points, not 3.3."""
        entry = earn(owner=recycler, material='plastic', weight_kg=0.33, rates=rates)
        assert entry.delta == 3

    def test_earn_accumulates(self, recycler, rates):
        earn(owner=recycler, material='metal', weight_kg=2, rates=rates)
        entry = earn(owner=recycler, material='glass', weight_kg=1, rates=rates)

        assert entry.delta == 8
        assert entry.balance_after == 38
        assert balance_of(owner=recycler) == 38

    def test_earn_uses_settings_rates_by_default(self, recycler):
        entry = earn(owner=recycler, material='metal', weight_kg=1)
        assert entry.delta == 15

    def test_earn_records_session_and_station(self, recycler, rates):
        entry = earn(
            owner=recycler,
            material='paper',
            weight_kg=4,
            session_token='tok-123',
            station_id='station-7',
            rates=rates,
        )
        assert entry.session_token == 'tok-123'
        assert entry.station_id == 'station-7'

    def test_deposit_worth_no_points_rejected(self, recycler, rates):
        with pytest.raises(InvalidQuantityError):
            earn(owner=recycler, material='paper', weight_kg=0.1, rates=rates)

        assert LedgerEntry.objects.count() == 0
        assert balance_of(owner=recycler) == 0

    def test_weight_at_limit_accepted(self, recycler, rates, settings):
        settings.MAX_DEPOSIT_WEIGHT_KG = 50
        entry = earn(owner=recycler, material='plastic', weight_kg=50, rates=rates)
        assert entry.delta == 500

    @pytest.mark.parametrize('weight', [50.001, 1e20])
    def test_weight_above_limit_rejected(self, recycler, rates, settings, weight):
        settings.MAX_DEPOSIT_WEIGHT_KG = 50
        with pytest.raises(InvalidQuantityError):
            earn(owner=recycler, material='plastic', weight_kg=weight, rates=rates)

        assert LedgerEntry.objects.count() == 0
        assert balance_of(owner=recycler) == 0

    def test_deposit_cannot_overflow_balance(self, recycler, rates):
        PointsBalance.objects.create(owner=recycler, points=MAX_BALANCE_POINTS - 5)

        with pytest.raises(InvalidQuantityError):
            earn(owner=recycler, material='plastic', weight_kg=1, rates=rates)

        assert balance_of(owner=recycler) == MAX_BALANCE_POINTS - 5
        assert LedgerEntry.objects.count() == 0

    def test_unknown_material_rejected(self, recycler, rates):
        with pytest.raises(UnknownMaterialError):
            earn(owner=recycler, material='styrofoam', weight_kg=1, rates=rates)
        assert LedgerEntry.objects.count() == 0

    @pytest.mark.parametrize('weight', [0, -1, float('nan'), float('inf'), 'heavy', None])
    def test_invalid_weight_rejected(self, recycler, rates, weight):
        with pytest.raises(InvalidQuantityError):
            earn(owner=recycler, material='plastic', weight_kg=weight, rates=rates)
        assert balance_of(owner=recycler) == 0
        assert LedgerEntry.objects.count() == 0


# =============================================================================
# Spend
# =============================================================================

@pytest.mark.django_db
class TestSpend:

    @pytest.fixture
    def funded(self, recycler, rates):
        earn(owner=recycler, material='metal', weight_kg=20, rates=rates)  # 300 pts
        return recycler

    def test_spend_decreases_balance_exactly(self, funded):
        redemption = spend(owner=funded, points=120, method='voucher', account_info='store-1')

        assert balance_of(owner=funded) == 180
        assert redemption.points_used == 120
        assert redemption.cash_amount == Decimal('1200.00')
        assert redemption.status == RedemptionStatus.PENDING
        assert redemption.method == 'voucher'

    def test_spend_writes_negative_entry(self, funded):
        redemption = spend(owner=funded, points=100, method='cash')
        entry = redemption.ledger_entry

        assert entry.kind == EntryKind.REDEMPTION
        assert entry.delta == -100
        assert entry.balance_after == 200
        assert entry.cash_amount == Decimal('1000.00')
        assert redemption.created_at == entry.created_at

    def test_spend_whole_balance(self, funded):
        spend(owner=funded, points=300, method='bank')
        assert balance_of(owner=funded) == 0

    def test_spend_beyond_balance_rejected(self, funded):
        with pytest.raises(InsufficientBalanceError):
            spend(owner=funded, points=301, method='bank')

        assert balance_of(owner=funded) == 300
        assert Redemption.objects.count() == 0

    def test_spend_without_any_balance(self, recycler):
        with pytest.raises(InsufficientBalanceError):
            spend(owner=recycler, points=1, method='cash')
        assert balance_of(owner=recycler) == 0

    @pytest.mark.parametrize('points', [0, -5, 1.5, True])
    def test_invalid_points_rejected(self, funded, points):
        with pytest.raises(InvalidQuantityError):
            spend(owner=funded, points=points, method='cash')
        assert balance_of(owner=funded) == 300

    def test_unknown_method_rejected(self, funded):
        with pytest.raises(InvalidRedemptionMethodError):
            spend(owner=funded, points=10, method='crypto')
        assert balance_of(owner=funded) == 300

    def test_min_points_is_not_enforced(self, funded):
        """Catalog minimums are advisory."""
        spend(owner=funded, points=10, method='bank')
        assert balance_of(owner=funded) == 290

    def test_cash_value(self):
        assert cash_value(100) == Decimal('1000.00')
        assert cash_value(1) == Decimal('10.00')


# =============================================================================
# Ledger Invariants
# =============================================================================

@pytest.mark.django_db
class TestLedgerInvariants:

    def test_balance_equals_ledger_sum(self, recycler, rates):
        earn(owner=recycler, material='plastic', weight_kg=3.7, rates=rates)
        assert balance_of(owner=recycler) == ledger_sum(owner=recycler)

        spend(owner=recycler, points=20, method='voucher')
        assert balance_of(owner=recycler) == ledger_sum(owner=recycler)

        with pytest.raises(InsufficientBalanceError):
            spend(owner=recycler, points=1000, method='voucher')
        assert balance_of(owner=recycler) == ledger_sum(owner=recycler) == 17

    def test_entries_are_immutable(self, recycler, rates):
        entry = earn(owner=recycler, material='plastic', weight_kg=1, rates=rates)

        entry.delta = 1000
        with pytest.raises(ImmutableEntryError):
            entry.save()
        with pytest.raises(ImmutableEntryError):
            entry.delete()

        entry.refresh_from_db()
        assert entry.delta == 10

    def test_find_balance_mismatches(self, recycler, other_recycler, rates):
        earn(owner=recycler, material='plastic', weight_kg=1, rates=rates)
        earn(owner=other_recycler, material='plastic', weight_kg=2, rates=rates)
        assert find_balance_mismatches() == []

        PointsBalance.objects.filter(owner=other_recycler).update(points=999)
        mismatches = find_balance_mismatches()

        assert mismatches == [{
            'owner_id': other_recycler.pk,
            'cached': 999,
            'ledger': 20,
        }]


# =============================================================================
# History and Statistics
# =============================================================================

@pytest.mark.django_db
class TestHistory:

    def test_owner_entries_newest_first(self, recycler, other_recycler, rates):
        first = earn(owner=recycler, material='plastic', weight_kg=1, rates=rates)
        second = earn(owner=recycler, material='glass', weight_kg=1, rates=rates)
        earn(owner=other_recycler, material='metal', weight_kg=1, rates=rates)

        entries = list(get_owner_entries(owner=recycler))
        assert entries == [second, first]

    def test_owner_entries_filter_by_kind(self, recycler, rates):
        earn(owner=recycler, material='plastic', weight_kg=5, rates=rates)
        spend(owner=recycler, points=10, method='cash')

        redemptions = get_owner_entries(owner=recycler, kind=EntryKind.REDEMPTION)
        assert [e.delta for e in redemptions] == [-10]

    def test_get_owner_entry_hides_other_users(self, recycler, other_recycler, rates):
        entry = earn(owner=other_recycler, material='plastic', weight_kg=1, rates=rates)

        with pytest.raises(LedgerEntryNotFoundError):
            get_owner_entry(owner=recycler, entry_id=entry.id)
        assert get_owner_entry(owner=other_recycler, entry_id=entry.id) == entry

    def test_redemption_history(self, recycler, rates):
        earn(owner=recycler, material='metal', weight_kg=10, rates=rates)
        spend(owner=recycler, points=50, method='cash')
        spend(owner=recycler, points=25, method='voucher')

        history = list(get_redemption_history(owner=recycler))
        assert [r.points_used for r in history] == [25, 50]

    def test_redemption_options(self, recycler, rates):
        earn(owner=recycler, material='metal', weight_kg=40, rates=rates)  # 600 pts

        options = get_redemption_options(owner=recycler)
        by_method = {o['method']: o for o in options['options']}

        assert options['total_points'] == 600
        assert set(by_method) == {'bank', 'cash', 'voucher'}
        assert by_method['bank']['eligible'] is False
        assert by_method['cash']['eligible'] is True
        assert by_method['voucher']['min_points'] == 250
        assert by_method['voucher']['cash_per_100_points'] == Decimal('1000.00')

    def test_deposit_stats(self, recycler, rates):
        earn(owner=recycler, material='plastic', weight_kg=1.5, rates=rates)
        earn(owner=recycler, material='plastic', weight_kg=0.5, rates=rates)
        earn(owner=recycler, material='metal', weight_kg=2, rates=rates)
        spend(owner=recycler, points=5, method='cash')

        stats = get_deposit_stats(owner=recycler)

        assert stats['total_deposits'] == 3
        assert stats['total_weight_kg'] == 4.0
        assert stats['total_points_earned'] == 50
        assert stats['by_material'] == [
            {'material': 'metal', 'count': 1, 'weight_kg': 2.0, 'points': 30},
            {'material': 'plastic', 'count': 2, 'weight_kg': 2.0, 'points': 20},
        ]

    def test_deposit_stats_empty(self, recycler):
        stats = get_deposit_stats(owner=recycler)
        assert stats == {
            'total_deposits': 0,
            'total_weight_kg': 0.0,
            'total_points_earned': 0,
            'by_material': [],
        }


# =============================================================================
# Concurrency
# =============================================================================

class TestConcurrency(TransactionTestCase):
    """Test concurrency protection with real database transactions."""

    def setUp(self):
        self.user = User.objects.create_user(
            email='concurrent@example.com',
            password='TestPass123!',
        )
        self.rates = RateTable({'paper': 5})

    def test_concurrent_earns_lose_no_updates(self):
        """100 concurrent one-point earns raise the balance by exactly 100."""

        def earn_one_point(_):
            try:
                # 0.2 kg of paper at 5 pts/kg
                return earn(owner=self.user, material='paper', weight_kg=0.2, rates=self.rates)
            finally:
                connection.close()

        with ThreadPoolExecutor(max_workers=10) as pool:
            entries = list(pool.map(earn_one_point, range(100)))

        assert all(entry.delta == 1 for entry in entries)
        assert balance_of(owner=self.user) == 100
        assert LedgerEntry.objects.filter(owner=self.user).count() == 100
        assert ledger_sum(owner=self.user) == 100
        # Each entry saw a distinct running balance
        assert sorted(entry.balance_after for entry in entries) == list(range(1, 101))

    def test_concurrent_spends_never_overdraw(self):
        """Five threads each spending 30 of 100 points: exactly three succeed."""
        earn(owner=self.user, material='paper', weight_kg=20, rates=self.rates)  # 100 pts

        results = []
        errors = []

        def spend_in_thread():
            try:
                results.append(spend(owner=self.user, points=30, method='cash'))
            except InsufficientBalanceError:
                errors.append(True)
            finally:
                connection.close()

        threads = [
            threading.Thread(target=spend_in_thread)
            for _ in range(5)
        ]

        for thread in threads:
            thread.start()

        for thread in threads:
            thread.join()

        assert len(results) == 3
        assert len(errors) == 2
        assert balance_of(owner=self.user) == 10
        assert ledger_sum(owner=self.user) == 10

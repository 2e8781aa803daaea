from decimal import Decimal

from django.conf import settings
from django.db import models
from django.utils import timezone

from .exceptions import ImmutableEntryError

# Largest value a PositiveIntegerField holds on every supported backend
MAX_BALANCE_POINTS = 2147483647


class EntryKind(models.TextChoices):
    DEPOSIT = 'deposit', 'Deposit'
    REDEMPTION = 'redemption', 'Redemption'


class RedemptionStatus(models.TextChoices):
    PENDING = 'pending', 'Pending'
    COMPLETED = 'completed', 'Completed'
    FAILED = 'failed', 'Failed'


class LedgerEntry(models.Model):
    """
    Immutable record of one points movement.

    Positive ``delta`` is an earn (deposit), negative is a spend
    (redemption). For every owner the sum of deltas equals the cached
    PointsBalance.
    """

    owner = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.PROTECT,
        related_name='ledger_entries'
    )
    kind = models.CharField(max_length=20, choices=EntryKind.choices)
    delta = models.IntegerField()
    balance_after = models.PositiveIntegerField()

    # Deposit details
    material = models.CharField(max_length=50, blank=True)
    weight_kg = models.FloatField(null=True, blank=True)

    # Redemption details
    cash_amount = models.DecimalField(
        max_digits=12,
        decimal_places=2,
        null=True,
        blank=True
    )

    # Correlation
    station_id = models.CharField(max_length=100, blank=True)
    session_token = models.CharField(max_length=64, blank=True, db_index=True)

    created_at = models.DateTimeField(default=timezone.now, editable=False)

    class Meta:
        db_table = 'ledger_entries'
        indexes = [
            models.Index(fields=['owner', 'created_at'], name='ledger_owner_created_idx'),
            models.Index(fields=['kind'], name='ledger_kind_idx'),
        ]
        ordering = ['-created_at', '-id']
        verbose_name_plural = 'ledger entries'

    def __str__(self):
        sign = '+' if self.delta >= 0 else ''
        return f"{self.owner} {sign}{self.delta} ({self.kind})"

    def save(self, *args, **kwargs):
        if not self._state.adding:
            raise ImmutableEntryError("Ledger entries cannot be modified")
        super().save(*args, **kwargs)

    def delete(self, *args, **kwargs):
        raise ImmutableEntryError("Ledger entries cannot be deleted")

    @property
    def is_earn(self):
        return self.delta > 0


class PointsBalance(models.Model):
    """Cached running total of an owner's ledger entries."""

    owner = models.OneToOneField(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        primary_key=True,
        related_name='balance'
    )
    points = models.PositiveIntegerField(default=0)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = 'points_balances'
        constraints = [
            models.CheckConstraint(
                condition=models.Q(points__gte=0),
                name='points_balance_non_negative',
            ),
        ]

    def __str__(self):
        return f"{self.owner}: {self.points} pts"


class Redemption(models.Model):
    """Cash-out request backed by exactly one negative ledger entry."""

    owner = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.PROTECT,
        related_name='redemptions'
    )
    ledger_entry = models.OneToOneField(
        LedgerEntry,
        on_delete=models.PROTECT,
        related_name='redemption'
    )
    points_used = models.PositiveIntegerField()
    cash_amount = models.DecimalField(
        max_digits=12,
        decimal_places=2,
        default=Decimal('0.00')
    )
    method = models.CharField(max_length=50)
    account_info = models.CharField(max_length=255, blank=True)
    status = models.CharField(
        max_length=20,
        choices=RedemptionStatus.choices,
        default=RedemptionStatus.PENDING
    )
    created_at = models.DateTimeField(default=timezone.now, editable=False)

    class Meta:
        db_table = 'redemptions'
        indexes = [
            models.Index(fields=['owner', 'created_at'], name='redemption_owner_created_idx'),
            models.Index(fields=['status'], name='redemption_status_idx'),
        ]
        ordering = ['-created_at', '-id']

    def __str__(self):
        return f"{self.owner} redeemed {self.points_used} pts via {self.method}"

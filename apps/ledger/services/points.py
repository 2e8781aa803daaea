"""
Points ledger service.

Every write locks the owner's PointsBalance row, appends one immutable
LedgerEntry and moves the balance in the same transaction, so the
balance always equals the sum of the owner's entry deltas.
"""

import logging
import math
from decimal import Decimal, ROUND_HALF_UP
from typing import Optional

from django.conf import settings
from django.db import transaction
from django.db.models import F, Sum

from apps.accounts.models import User
from apps.ledger.exceptions import (
    InvalidQuantityError,
    InsufficientBalanceError,
    InvalidRedemptionMethodError,
)
from apps.ledger.models import (
    LedgerEntry,
    PointsBalance,
    Redemption,
    EntryKind,
    MAX_BALANCE_POINTS,
)

from .rates import RateTable

logger = logging.getLogger(__name__)

CENTS = Decimal('0.01')


def _validate_weight(weight_kg) -> float:
    if isinstance(weight_kg, bool):
        raise InvalidQuantityError("Weight must be a number")
    try:
        weight = float(weight_kg)
    except (TypeError, ValueError):
        raise InvalidQuantityError("Weight must be a number")

    if not math.isfinite(weight) or weight <= 0:
        raise InvalidQuantityError("Weight must be greater than zero")
    if weight > settings.MAX_DEPOSIT_WEIGHT_KG:
        raise InvalidQuantityError(
            f"Weight must not exceed {settings.MAX_DEPOSIT_WEIGHT_KG:g} kg per deposit"
        )

    return weight


def _lock_balance(owner: User) -> PointsBalance:
    """Create the owner's balance row if needed and lock it."""
    PointsBalance.objects.get_or_create(owner=owner)
    return (
        PointsBalance.objects
        .select_for_update()
        .get(owner=owner)
    )


def _move_balance(balance: PointsBalance, delta: int) -> int:
    PointsBalance.objects.filter(pk=balance.pk).update(points=F('points') + delta)
    balance.refresh_from_db(fields=['points'])
    return balance.points


@transaction.atomic
def earn(
    *,
    owner: User,
    material: str,
    weight_kg,
    session_token: str = '',
    station_id: str = '',
    rates: Optional[RateTable] = None
) -> LedgerEntry:
    """
    Credit points for a deposit of recyclable material.

    Args:
        owner: User receiving the points
        material: Material name, must be in the rate table
        weight_kg: Deposited weight in kilograms, strictly positive
        session_token: Pairing session the deposit was made through
        station_id: Station that weighed the deposit
        rates: Rate table to price the deposit (defaults to settings)

    Returns:
        The created LedgerEntry; ``delta`` holds the points awarded and
        ``balance_after`` the new balance

    Raises:
        UnknownMaterialError: If material is not in the rate table
        InvalidQuantityError: If weight is not a positive finite number, is
            above ``settings.MAX_DEPOSIT_WEIGHT_KG``, earns no points, or would
            push the balance past ``MAX_BALANCE_POINTS``
    """
    rates = rates or RateTable.from_settings()
    rates.rate_per_kg(material)
    weight = _validate_weight(weight_kg)
    points = rates.points_for(material, weight)
    if points < 1:
        raise InvalidQuantityError("Deposit is too light to earn any points")

    balance = _lock_balance(owner)
    if balance.points + points > MAX_BALANCE_POINTS:
        raise InvalidQuantityError("Deposit would exceed the maximum points balance")
    new_balance = _move_balance(balance, points)

    entry = LedgerEntry.objects.create(
        owner=owner,
        kind=EntryKind.DEPOSIT,
        delta=points,
        balance_after=new_balance,
        material=RateTable.normalize(material),
        weight_kg=weight,
        station_id=station_id or '',
        session_token=session_token or '',
    )

    transaction.on_commit(lambda: logger.info(
        "Ledger entry %s: %s earned %d pts for %.3f kg %s (balance %d)",
        entry.pk, owner.pk, points, weight, entry.material, new_balance,
    ))

    return entry


def _validate_method(method: str) -> str:
    key = (method or '').strip().lower()
    if key not in settings.REDEMPTION_METHODS:
        raise InvalidRedemptionMethodError(
            f"Unknown redemption method: {method!r}. "
            f"Choose one of: {', '.join(settings.REDEMPTION_METHODS)}"
        )
    return key


def cash_value(points: int) -> Decimal:
    """Cash amount for a number of points."""
    return (Decimal(points) * settings.POINTS_CASH_RATE).quantize(CENTS, rounding=ROUND_HALF_UP)


@transaction.atomic
def spend(
    *,
    owner: User,
    points: int,
    method: str,
    account_info: str = ''
) -> Redemption:
    """
    Debit points for a cash redemption.

    Writes the negative ledger entry, the pending Redemption and the
    balance update together.

    Args:
        owner: User redeeming points
        points: Number of points to redeem, strictly positive
        method: Redemption method from ``settings.REDEMPTION_METHODS``
        account_info: Payout destination (account number, pickup note)

    Returns:
        The created Redemption, linked to its LedgerEntry

    Raises:
        InvalidQuantityError: If points is not a positive integer
        InvalidRedemptionMethodError: If method is not in the catalog
        InsufficientBalanceError: If points exceeds the current balance
    """
    if isinstance(points, bool) or not isinstance(points, int) or points <= 0:
        raise InvalidQuantityError("Points must be a positive integer")

    method_key = _validate_method(method)

    balance = _lock_balance(owner)
    if points > balance.points:
        logger.warning(
            "Rejected redemption for %s: requested %d pts, balance %d",
            owner.pk, points, balance.points,
        )
        raise InsufficientBalanceError(
            f"Insufficient points: balance is {balance.points}, requested {points}"
        )

    new_balance = _move_balance(balance, -points)
    cash = cash_value(points)

    entry = LedgerEntry.objects.create(
        owner=owner,
        kind=EntryKind.REDEMPTION,
        delta=-points,
        balance_after=new_balance,
        cash_amount=cash,
    )
    redemption = Redemption.objects.create(
        owner=owner,
        ledger_entry=entry,
        points_used=points,
        cash_amount=cash,
        method=method_key,
        account_info=account_info or '',
        created_at=entry.created_at,
    )

    transaction.on_commit(lambda: logger.info(
        "Redemption %s: %s spent %d pts via %s for %s (balance %d)",
        redemption.pk, owner.pk, points, method_key, cash, new_balance,
    ))

    return redemption


def balance_of(*, owner: User) -> int:
    """Committed points balance (0 for owners who never transacted)."""
    points = (
        PointsBalance.objects
        .filter(owner=owner)
        .values_list('points', flat=True)
        .first()
    )
    return points or 0


def ledger_sum(*, owner: User) -> int:
    """Sum of all entry deltas for an owner, recomputed from the ledger."""
    total = LedgerEntry.objects.filter(owner=owner).aggregate(total=Sum('delta'))['total']
    return total or 0

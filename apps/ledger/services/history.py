"""Read-side queries over an owner's ledger and redemptions."""

from typing import Any, Dict, Optional

from django.conf import settings
from django.db.models import QuerySet

from apps.accounts.models import User
from apps.ledger.exceptions import LedgerEntryNotFoundError
from apps.ledger.models import LedgerEntry, Redemption

from .points import balance_of, cash_value


def get_owner_entries(*, owner: User, kind: Optional[str] = None) -> QuerySet:
    """
    Get an owner's ledger entries, newest first.

    Args:
        owner: User whose entries to return
        kind: Optional EntryKind value to filter by

    Returns:
        QuerySet of LedgerEntry instances
    """
    queryset = LedgerEntry.objects.filter(owner=owner)
    if kind:
        queryset = queryset.filter(kind=kind)
    return queryset.order_by('-created_at', '-id')


def get_owner_entry(*, owner: User, entry_id: int) -> LedgerEntry:
    """
    Get one of the owner's ledger entries.

    Raises:
        LedgerEntryNotFoundError: If the entry doesn't exist or belongs
            to another user
    """
    try:
        return LedgerEntry.objects.get(id=entry_id, owner=owner)
    except LedgerEntry.DoesNotExist:
        raise LedgerEntryNotFoundError(f"Ledger entry {entry_id} not found")


def get_redemption_history(*, owner: User) -> QuerySet:
    return (
        Redemption.objects
        .filter(owner=owner)
        .select_related('ledger_entry')
        .order_by('-created_at', '-id')
    )


def get_redemption_options(*, owner: User) -> Dict[str, Any]:
    """
    Redemption catalog with the owner's current balance.

    ``conversion_rate`` is the block of points priced by
    ``cash_per_100_points``.
    ``min_points`` is advisory; ``eligible`` tells the client whether
    the balance reaches it.
    """
    balance = balance_of(owner=owner)
    options = []
    for method, details in settings.REDEMPTION_METHODS.items():
        options.append({
            'method': method,
            'name': details['name'],
            'description': details.get('description', ''),
            'min_points': details['min_points'],
            'conversion_rate': 100,
            'cash_per_100_points': cash_value(100),
            'eligible': balance >= details['min_points'],
        })

    return {
        'total_points': balance,
        'options': options,
    }

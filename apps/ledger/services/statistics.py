"""Deposit statistics and balance audit."""

from typing import Any, Dict, List

from django.db.models import Count, Sum

from apps.accounts.models import User
from apps.ledger.models import EntryKind, LedgerEntry, PointsBalance


def get_deposit_stats(*, owner: User) -> Dict[str, Any]:
    """
    Summarize an owner's deposits.

    Returns:
        Dict with total deposits, weight and points, plus a per-material
        breakdown ordered by points earned
    """
    deposits = LedgerEntry.objects.filter(owner=owner, kind=EntryKind.DEPOSIT)

    totals = deposits.aggregate(
        count=Count('id'),
        weight=Sum('weight_kg'),
        points=Sum('delta'),
    )

    breakdown = (
        deposits
        .values('material')
        .annotate(
            count=Count('id'),
            weight=Sum('weight_kg'),
            points=Sum('delta'),
        )
        .order_by('-points', 'material')
    )

    return {
        'total_deposits': totals['count'] or 0,
        'total_weight_kg': round(totals['weight'] or 0.0, 3),
        'total_points_earned': totals['points'] or 0,
        'by_material': [
            {
                'material': row['material'],
                'count': row['count'],
                'weight_kg': round(row['weight'] or 0.0, 3),
                'points': row['points'] or 0,
            }
            for row in breakdown
        ],
    }


def find_balance_mismatches() -> List[Dict[str, Any]]:
    """
    Compare every cached balance with the sum of its ledger entries.

    Returns:
        One dict per owner whose cached points differ from the ledger
        sum (owner_id, cached, ledger); empty when the books agree
    """
    ledger = {
        row['owner']: row['total']
        for row in LedgerEntry.objects.values('owner').annotate(total=Sum('delta'))
    }
    cached = dict(PointsBalance.objects.values_list('owner_id', 'points'))

    mismatches = []
    for owner_id in set(ledger) | set(cached):
        ledger_total = ledger.get(owner_id) or 0
        cached_total = cached.get(owner_id) or 0
        if ledger_total != cached_total:
            mismatches.append({
                'owner_id': owner_id,
                'cached': cached_total,
                'ledger': ledger_total,
            })

    return mismatches

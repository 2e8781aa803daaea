"""Station configuration and activity."""

from typing import Any, Dict, Optional

from django.conf import settings
from django.db.models import Count, Sum
from django.utils import timezone

from apps.ledger.models import EntryKind, LedgerEntry
from apps.ledger.services import RateTable
from apps.stations.models import PairingSession, LIVE_STATUSES

from .clock import system_clock


def get_station_config(*, rates: Optional[RateTable] = None) -> Dict[str, Any]:
    rates = rates or RateTable.from_settings()
    return {
        'material_rates': rates.as_dict(),
        'supported_materials': rates.materials,
        'operating_hours': dict(settings.STATION_OPERATING_HOURS),
        'session_ttl_seconds': settings.PAIRING_SESSION_TTL_SECONDS,
    }


def get_station_activity(*, station_id: str, clock=None) -> Dict[str, Any]:
    """
    Today's deposit totals and open sessions for one station.

    "Today" is the current date in ``settings.TIME_ZONE``.
    """
    clock = clock or system_clock
    now = clock.now()
    start_of_day = timezone.localtime(now).replace(hour=0, minute=0, second=0, microsecond=0)

    totals = (
        LedgerEntry.objects
        .filter(kind=EntryKind.DEPOSIT, station_id=station_id, created_at__gte=start_of_day)
        .aggregate(deposits=Count('id'), weight=Sum('weight_kg'), points=Sum('delta'))
    )

    open_sessions = PairingSession.objects.filter(
        station_id=station_id,
        status__in=LIVE_STATUSES,
        expires_at__gte=now,
    ).count()

    return {
        'station_id': station_id,
        'today_deposits': totals['deposits'] or 0,
        'today_weight_kg': round(totals['weight'] or 0.0, 3),
        'today_points': totals['points'] or 0,
        'open_sessions': open_sessions,
    }

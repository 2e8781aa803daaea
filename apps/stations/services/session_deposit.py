"""
Deposits made through a pairing session.

The bound user's app reports each weighed item; the session authorizes
the caller and the ledger credits the points. The session write and
the ledger write share one transaction, locking the session row before
the owner's balance row.
"""

import logging
import math
from typing import Optional

from django.conf import settings
from django.db import transaction

from apps.accounts.models import User
from apps.ledger.models import LedgerEntry
from apps.ledger.services import earn, RateTable
from apps.stations.exceptions import (
    InvalidInputError,
    SessionExpiredError,
    SessionClosedError,
    SessionForbiddenError,
)
from apps.stations.models import SessionStatus

from .clock import system_clock
from .pairing import get_locked_session, expire_if_due

logger = logging.getLogger(__name__)


def _validate_deposit_input(token, material, weight_kg) -> None:
    if not (token or '').strip():
        raise InvalidInputError("Session token is required")
    if not (material or '').strip():
        raise InvalidInputError("Material is required")

    try:
        weight = float(weight_kg)
    except (TypeError, ValueError):
        raise InvalidInputError("Weight must be a number")
    if isinstance(weight_kg, bool) or not math.isfinite(weight) or weight <= 0:
        raise InvalidInputError("Weight must be greater than zero")
    if weight > settings.MAX_DEPOSIT_WEIGHT_KG:
        raise InvalidInputError(
            f"Weight must not exceed {settings.MAX_DEPOSIT_WEIGHT_KG:g} kg per deposit"
        )


def record_session_deposit(
    *,
    token: str,
    user: User,
    material: str,
    weight_kg,
    clock=None,
    rates: Optional[RateTable] = None
) -> LedgerEntry:
    """
    Credit a deposit to the user bound to a pairing session.

    The first deposit moves the session from ``connected`` to ``active``.

    Args:
        token: Pairing session token
        user: Authenticated caller; must be the session's bound user
        material: Material name from the rate table
        weight_kg: Weighed amount in kilograms
        clock: Time source (defaults to the system clock)
        rates: Rate table (defaults to settings)

    Returns:
        The LedgerEntry tagged with the session token

    Raises:
        InvalidInputError: If token or material is blank, or weight is not
            positive or above ``settings.MAX_DEPOSIT_WEIGHT_KG``
        InvalidQuantityError: If the deposit earns no points or would push
            the balance past its maximum
        SessionNotFoundError: If no session has this token
        SessionExpiredError: If the session's deadline has passed
        SessionClosedError: If the session was ended
        SessionForbiddenError: If the caller is not the bound user
        UnknownMaterialError: If material is not in the rate table
    """
    _validate_deposit_input(token, material, weight_kg)

    clock = clock or system_clock
    now = clock.now()

    with transaction.atomic():
        session = get_locked_session(token)
        expired = expire_if_due(session, now)

        if not expired:
            if session.status == SessionStatus.EXPIRED:
                raise SessionExpiredError("Session has expired")
            if session.status == SessionStatus.ENDED:
                raise SessionClosedError("Session has already ended")
            if session.user_id is None or session.user_id != user.pk:
                logger.warning(
                    "Rejected deposit on session %s: caller %s is not the bound user",
                    session.pk, user.pk,
                )
                raise SessionForbiddenError("Session is not connected to this user")

            entry = earn(
                owner=user,
                material=material,
                weight_kg=weight_kg,
                session_token=session.token,
                station_id=session.station_id,
                rates=rates,
            )

            if session.status == SessionStatus.CONNECTED:
                session.status = SessionStatus.ACTIVE
                session.save(update_fields=['status', 'updated_at'])

    # Raised after the block so the expiry write commits
    if expired:
        raise SessionExpiredError("Session has expired")

    return entry

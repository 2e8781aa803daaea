"""
Pairing session service.

A station creates a pending session and shows its token as a QR code.
The user's app scans it and binds the session with its credential;
the session then accepts deposits from that user until it is ended or
its deadline passes.

    pending -> connected -> active -> ended
    pending | connected | active -> expired   (once now > expires_at)

Every mutation locks the session row by token. Expiry is applied lazily
by whichever operation first observes the passed deadline, and that
write is committed even when the operation then fails.
"""

import logging
from datetime import timedelta
from typing import Optional

from django.conf import settings
from django.db import transaction, IntegrityError

from apps.accounts.services import resolve_credential
from apps.stations.exceptions import (
    SessionNotFoundError,
    SessionExpiredError,
    SessionClosedError,
    SessionAlreadyBoundError,
)
from apps.stations.models import (
    PairingSession,
    SessionStatus,
    LIVE_STATUSES,
    generate_session_token,
)

from .clock import system_clock

logger = logging.getLogger(__name__)


def session_ttl() -> timedelta:
    return timedelta(seconds=settings.PAIRING_SESSION_TTL_SECONDS)


def get_locked_session(token: str) -> PairingSession:
    """
    Fetch a session by token and lock its row for the current transaction.

    Raises:
        SessionNotFoundError: If no session has this token
    """
    try:
        return (
            PairingSession.objects
            .select_for_update()
            .get(token=token)
        )
    except PairingSession.DoesNotExist:
        raise SessionNotFoundError("Session not found")


def expire_if_due(session: PairingSession, now) -> bool:
    """
    Move a live session past its deadline to ``expired``.

    Must be called with the session row locked. Returns True when this
    call performed the transition.
    """
    if session.is_terminal or not session.is_past_deadline(now):
        return False

    session.status = SessionStatus.EXPIRED
    session.user = None
    session.save(update_fields=['status', 'user', 'updated_at'])

    transaction.on_commit(lambda: logger.info(
        "Pairing session %s expired at station %s", session.pk, session.station_id,
    ))
    return True


def create_session(
    *,
    station_id: Optional[str] = None,
    clock=None,
    ttl: Optional[timedelta] = None,
    max_retries: int = 5
) -> PairingSession:
    """
    Create a pending pairing session for a station.

    Token collisions are retried with a fresh token.

    Args:
        station_id: Station requesting the session (defaults to
            ``settings.DEFAULT_STATION_ID``)
        clock: Time source (defaults to the system clock)
        ttl: Lifetime of the session (defaults to
            ``settings.PAIRING_SESSION_TTL_SECONDS``)
        max_retries: Maximum attempts to generate a unique token

    Returns:
        The created PairingSession in ``pending`` state

    Raises:
        RuntimeError: If a unique token cannot be generated after retries
    """
    clock = clock or system_clock
    now = clock.now()
    station_id = (station_id or '').strip() or settings.DEFAULT_STATION_ID
    expires_at = now + (ttl or session_ttl())

    for attempt in range(max_retries):
        try:
            with transaction.atomic():
                session = PairingSession.objects.create(
                    token=generate_session_token(),
                    station_id=station_id,
                    status=SessionStatus.PENDING,
                    created_at=now,
                    expires_at=expires_at,
                )
        except IntegrityError:
            # Collision detected, retry
            if attempt == max_retries - 1:
                raise RuntimeError(
                    f"Failed to generate unique session token after {max_retries} attempts"
                )
            continue

        logger.info("Pairing session %s created for station %s", session.pk, station_id)
        return session

    # Should never reach here
    raise RuntimeError("Unexpected error in session token generation")


def check_session(*, token: str, clock=None) -> PairingSession:
    """
    Report a session's current state, applying expiry if its deadline passed.

    An expired session is returned with status ``expired``; that is a
    state to report, not an error.

    Raises:
        SessionNotFoundError: If no session has this token
    """
    clock = clock or system_clock
    now = clock.now()

    with transaction.atomic():
        session = get_locked_session(token)
        expire_if_due(session, now)

    return session


def bind_session(*, token: str, credential: str, clock=None) -> PairingSession:
    """
    Bind a pending session to the user identified by ``credential``.

    The first bind wins; a session never changes its user.

    Args:
        token: Session token scanned from the station's QR code
        credential: The user's bearer credential
        clock: Time source (defaults to the system clock)

    Returns:
        The session in ``connected`` state with its user set

    Raises:
        InvalidCredentialsError: If the credential does not resolve
        InactiveAccountError: If the user is deactivated
        SessionNotFoundError: If no session has this token
        SessionExpiredError: If the session's deadline has passed
        SessionAlreadyBoundError: If the session is already connected or active
        SessionClosedError: If the session was ended
    """
    user = resolve_credential(credential)

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
            if session.is_bound:
                raise SessionAlreadyBoundError("Session is already connected to a user")

            session.status = SessionStatus.CONNECTED
            session.user = user
            session.credential = credential
            session.save(update_fields=['status', 'user', 'credential', 'updated_at'])

            transaction.on_commit(lambda: logger.info(
                "Pairing session %s bound to user %s", session.pk, user.pk,
            ))

    # Raised after the block so the expiry write commits
    if expired:
        raise SessionExpiredError("Session has expired")

    return session


def end_session(*, token: str, clock=None) -> PairingSession:
    """
    End a live session and detach its user.

    Raises:
        SessionNotFoundError: If no session has this token, or it is
            already ended or expired (nothing to end)
    """
    clock = clock or system_clock
    now = clock.now()

    with transaction.atomic():
        session = get_locked_session(token)
        expired = expire_if_due(session, now)
        nothing_to_end = expired or session.is_terminal

        if not nothing_to_end:
            session.status = SessionStatus.ENDED
            session.user = None
            session.ended_at = now
            session.save(update_fields=['status', 'user', 'ended_at', 'updated_at'])

            transaction.on_commit(lambda: logger.info(
                "Pairing session %s ended at station %s", session.pk, session.station_id,
            ))

    if nothing_to_end:
        raise SessionNotFoundError("No active session to end")

    return session


def expire_stale_sessions(*, clock=None) -> int:
    """
    Mark every live session past its deadline as expired.

    Housekeeping only: each operation already applies expiry lazily.

    Returns:
        Number of sessions expired
    """
    clock = clock or system_clock
    now = clock.now()

    count = (
        PairingSession.objects
        .filter(status__in=LIVE_STATUSES, expires_at__lt=now)
        .update(status=SessionStatus.EXPIRED, user=None, updated_at=now)
    )

    if count:
        logger.info("Expired %d stale pairing session(s)", count)
    return count

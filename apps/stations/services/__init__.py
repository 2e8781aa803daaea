"""Services for station pairing sessions and sessioned deposits."""

from apps.stations.exceptions import (
    PairingServiceError,
    InvalidInputError,
    SessionNotFoundError,
    SessionExpiredError,
    SessionClosedError,
    SessionAlreadyBoundError,
    SessionForbiddenError,
)
from .clock import SystemClock, system_clock
from .pairing import (
    create_session,
    check_session,
    bind_session,
    end_session,
    expire_stale_sessions,
)
from .session_deposit import record_session_deposit
from .stations import get_station_config, get_station_activity
from .qr import render_qr_data_uri

__all__ = [
    # Exceptions
    'PairingServiceError',
    'InvalidInputError',
    'SessionNotFoundError',
    'SessionExpiredError',
    'SessionClosedError',
    'SessionAlreadyBoundError',
    'SessionForbiddenError',
    # Clock
    'SystemClock',
    'system_clock',
    # Pairing
    'create_session',
    'check_session',
    'bind_session',
    'end_session',
    'expire_stale_sessions',
    # Deposits
    'record_session_deposit',
    # Stations
    'get_station_config',
    'get_station_activity',
    # QR
    'render_qr_data_uri',
]

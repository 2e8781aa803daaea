"""
Domain exceptions for station pairing sessions.

These represent business rule violations and are caught in views and
converted to HTTP responses; ``code`` is the machine-readable kind.
"""


class PairingServiceError(Exception):
    """Base exception for pairing session errors."""
    code = 'pairing_error'


class InvalidInputError(PairingServiceError):
    """Raised when a request is missing a token, material or weight."""
    code = 'invalid_input'


class SessionNotFoundError(PairingServiceError):
    """Raised when no session matches the token, or there is nothing to end."""
    code = 'not_found'


class SessionExpiredError(PairingServiceError):
    """Raised when the session's deadline has passed."""
    code = 'expired'


class SessionClosedError(PairingServiceError):
    """Raised when the session was already ended."""
    code = 'session_closed'


class SessionAlreadyBoundError(PairingServiceError):
    """Raised when a second device tries to bind a connected session."""
    code = 'already_bound'


class SessionForbiddenError(PairingServiceError):
    """Raised when the caller is not the user bound to the session."""
    code = 'forbidden'

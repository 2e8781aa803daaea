"""
Credential resolution for devices that hand a token to another party.

A station never sees the user's password: the mobile app submits its
SimpleJWT access token when binding a pairing session, and the session
resolves it back to a user here.
"""

from django.contrib.auth import get_user_model
from django.core.exceptions import ValidationError
from rest_framework_simplejwt.exceptions import TokenError
from rest_framework_simplejwt.settings import api_settings
from rest_framework_simplejwt.tokens import AccessToken

from .exceptions import InvalidCredentialsError, InactiveAccountError

User = get_user_model()

BEARER_PREFIX = 'bearer '


def resolve_credential(credential: str) -> User:
    """
    Resolve an opaque bearer credential to the user it identifies.

    Accepts the raw access token or an ``Authorization`` header value
    with the ``Bearer`` prefix.

    Args:
        credential: Access token issued by the auth endpoints

    Returns:
        The active User the token was issued to

    Raises:
        InvalidCredentialsError: If the token is missing, malformed,
            expired, or names no existing user
        InactiveAccountError: If the user is deactivated
    """
    raw = (credential or '').strip()
    if raw.lower().startswith(BEARER_PREFIX):
        raw = raw[len(BEARER_PREFIX):].strip()

    if not raw:
        raise InvalidCredentialsError("Credential is required")

    try:
        token = AccessToken(raw)
    except TokenError:
        raise InvalidCredentialsError("Invalid or expired credential")

    user_id = token.get(api_settings.USER_ID_CLAIM)
    if user_id is None:
        raise InvalidCredentialsError("Credential does not identify a user")

    try:
        user = User.objects.get(**{api_settings.USER_ID_FIELD: user_id})
    except (User.DoesNotExist, ValidationError, ValueError):
        raise InvalidCredentialsError("Credential does not identify a user")

    if not user.is_active:
        raise InactiveAccountError("Account is deactivated")

    return user

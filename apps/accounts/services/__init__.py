"""Services for accounts business logic."""

from .exceptions import (
    AccountsServiceError,
    InvalidCredentialsError,
    InactiveAccountError,
)
from .user_authentication import authenticate_user
from .identity import resolve_credential

__all__ = [
    # Exceptions
    'AccountsServiceError',
    'InvalidCredentialsError',
    'InactiveAccountError',
    # Services
    'authenticate_user',
    'resolve_credential',
]

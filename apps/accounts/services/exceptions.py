"""Domain-specific exceptions for accounts services."""


class AccountsServiceError(Exception):
    """Base exception for accounts services."""
    code = 'accounts_error'


class InvalidCredentialsError(AccountsServiceError):
    """Raised when a password or bearer credential does not identify a user."""
    code = 'invalid_credentials'


class InactiveAccountError(AccountsServiceError):
    """Raised when account is deactivated."""
    code = 'inactive_account'

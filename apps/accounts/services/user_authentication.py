"""Password login for recyclers and station operators."""

from django.contrib.auth import get_user_model
from django.contrib.auth.models import update_last_login
from django.db import transaction

from .exceptions import InvalidCredentialsError, InactiveAccountError

User = get_user_model()


@transaction.atomic
def authenticate_user(*, email: str, password: str) -> User:
    """
    Check an email/password pair and stamp ``last_login``.

    The email match ignores case. The account row stays locked while
    ``last_login`` is written.

    Raises:
        InvalidCredentialsError: Unknown email or wrong password
        InactiveAccountError: If the account is deactivated
    """
    user = (
        User.objects
        .select_for_update()
        .filter(email__iexact=(email or '').strip())
        .first()
    )
    if user is None or not user.check_password(password):
        raise InvalidCredentialsError("Invalid email or password")

    if not user.is_active:
        raise InactiveAccountError("Account is deactivated")

    update_last_login(None, user)
    return user

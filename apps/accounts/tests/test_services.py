"""Tests for accounts services: password login and credential resolution."""

from datetime import timedelta

import pytest
from rest_framework_simplejwt.tokens import AccessToken, RefreshToken

from apps.accounts.models import User
from apps.accounts.services import (
    authenticate_user,
    resolve_credential,
    InvalidCredentialsError,
    InactiveAccountError,
)


@pytest.mark.django_db
class TestAuthenticateUser:

    def test_authenticate_success(self, user):
        result = authenticate_user(email='testuser@example.com', password='TestPass123!')
        assert result == user
        assert result.last_login is not None

    def test_authenticate_is_case_insensitive_on_email(self, user):
        result = authenticate_user(email='TestUser@Example.com', password='TestPass123!')
        assert result == user

    def test_authenticate_wrong_password(self, user):
        with pytest.raises(InvalidCredentialsError):
            authenticate_user(email=user.email, password='nope')

    def test_authenticate_inactive(self, user_inactive):
        with pytest.raises(InactiveAccountError):
            authenticate_user(email=user_inactive.email, password='TestPass123!')


@pytest.mark.django_db
class TestResolveCredential:

    def test_resolves_raw_access_token(self, user, access_token):
        assert resolve_credential(access_token) == user

    def test_resolves_bearer_header_value(self, user, access_token):
        assert resolve_credential(f'Bearer {access_token}') == user

    def test_empty_credential_rejected(self):
        with pytest.raises(InvalidCredentialsError):
            resolve_credential('')

    def test_garbage_credential_rejected(self):
        with pytest.raises(InvalidCredentialsError):
            resolve_credential('not-a-jwt')

    def test_refresh_token_is_not_an_access_credential(self, user):
        refresh = str(RefreshToken.for_user(user))
        with pytest.raises(InvalidCredentialsError):
            resolve_credential(refresh)

    def test_expired_token_rejected(self, user):
        token = AccessToken.for_user(user)
        token.set_exp(lifetime=-timedelta(minutes=1))
        with pytest.raises(InvalidCredentialsError):
            resolve_credential(str(token))

    def test_deleted_user_rejected(self, user, access_token):
        User.objects.filter(pk=user.pk).delete()
        with pytest.raises(InvalidCredentialsError):
            resolve_credential(access_token)

    def test_inactive_user_rejected(self, user_inactive):
        token = str(RefreshToken.for_user(user_inactive).access_token)
        with pytest.raises(InactiveAccountError):
            resolve_credential(token)

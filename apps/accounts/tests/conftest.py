import pytest
from rest_framework.test import APIClient
from rest_framework_simplejwt.tokens import RefreshToken
from apps.accounts.models import User


@pytest.fixture
def api_client():
    """Return an unauthenticated API client."""
    return APIClient()


@pytest.fixture
def user(db):
    """Create and return a test user."""
    return User.objects.create_user(
        email='testuser@example.com',
        password='TestPass123!',
        display_name='Test User',
    )


@pytest.fixture
def user_inactive(db):
    """Create and return an inactive user."""
    return User.objects.create_user(
        email='inactive@example.com',
        password='TestPass123!',
        display_name='Inactive User',
        is_active=False,
    )


@pytest.fixture
def access_token(user):
    """Return a JWT access token string for the test user."""
    return str(RefreshToken.for_user(user).access_token)


@pytest.fixture
def authenticated_client(api_client, access_token):
    """Return an authenticated API client using JWT."""
    api_client.credentials(HTTP_AUTHORIZATION=f'Bearer {access_token}')
    return api_client

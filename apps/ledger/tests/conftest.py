import pytest
from rest_framework.test import APIClient
from rest_framework_simplejwt.tokens import RefreshToken

from apps.accounts.models import User
from apps.ledger.services import RateTable


@pytest.fixture
def api_client():
    """Return an unauthenticated API client."""
    return APIClient()


@pytest.fixture
def recycler(db):
    """Create and return a user who deposits material."""
    return User.objects.create_user(
        email='recycler@example.com',
        password='TestPass123!',
        display_name='Recycler',
    )


@pytest.fixture
def other_recycler(db):
    """Create and return a second, unrelated user."""
    return User.objects.create_user(
        email='other@example.com',
        password='TestPass123!',
        display_name='Other Recycler',
    )


@pytest.fixture
def rates():
    """Rate table matching the production defaults."""
    return RateTable({'plastic': 10, 'glass': 8, 'metal': 15, 'paper': 5})


@pytest.fixture
def recycler_client(api_client, recycler):
    """Return an API client authenticated as the recycler."""
    refresh = RefreshToken.for_user(recycler)
    api_client.credentials(HTTP_AUTHORIZATION=f'Bearer {refresh.access_token}')
    return api_client


@pytest.fixture
def other_client(other_recycler):
    """Return an API client authenticated as the other recycler."""
    client = APIClient()
    refresh = RefreshToken.for_user(other_recycler)
    client.credentials(HTTP_AUTHORIZATION=f'Bearer {refresh.access_token}')
    return client

from datetime import datetime, timedelta, timezone as dt_timezone

import pytest
from rest_framework.test import APIClient
from rest_framework_simplejwt.tokens import RefreshToken

from apps.accounts.models import User
from apps.ledger.services import RateTable


class FrozenClock:
    """Clock that only moves when told to."""

    def __init__(self, now):
        self._now = now

    def now(self):
        return self._now

    def advance(self, **kwargs):
        self._now += timedelta(**kwargs)


def access_token_for(user):
    return str(RefreshToken.for_user(user).access_token)


@pytest.fixture
def clock():
    """Frozen clock starting at a fixed instant."""
    return FrozenClock(datetime(2024, 5, 1, 12, 0, tzinfo=dt_timezone.utc))


@pytest.fixture
def rates():
    return RateTable({'plastic': 10, 'glass': 8, 'metal': 15, 'paper': 5})


@pytest.fixture
def api_client():
    """Return an unauthenticated API client (the station side)."""
    return APIClient()


@pytest.fixture
def recycler(db):
    return User.objects.create_user(
        email='recycler@example.com',
        password='TestPass123!',
        display_name='Recycler',
    )


@pytest.fixture
def intruder(db):
    return User.objects.create_user(
        email='intruder@example.com',
        password='TestPass123!',
        display_name='Intruder',
    )


@pytest.fixture
def recycler_token(recycler):
    return access_token_for(recycler)


@pytest.fixture
def intruder_token(intruder):
    return access_token_for(intruder)


@pytest.fixture
def recycler_client(recycler_token):
    """Return an API client authenticated as the recycler (the app side)."""
    client = APIClient()
    client.credentials(HTTP_AUTHORIZATION=f'Bearer {recycler_token}')
    return client


@pytest.fixture
def intruder_client(intruder_token):
    client = APIClient()
    client.credentials(HTTP_AUTHORIZATION=f'Bearer {intruder_token}')
    return client

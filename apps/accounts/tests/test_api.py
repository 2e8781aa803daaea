import pytest
from django.urls import reverse
from rest_framework import status

from apps.ledger.services import earn


# =============================================================================
# Login Tests
# =============================================================================

@pytest.mark.django_db
class TestLogin:
    """Tests for POST /api/auth/login/"""

    def test_login_success(self, api_client, user):
        """Login returns JWT tokens and the user."""
        url = reverse('users:login')
        response = api_client.post(url, {
            'email': 'testuser@example.com',
            'password': 'TestPass123!',
        })

        assert response.status_code == status.HTTP_200_OK
        assert 'access' in response.data['tokens']
        assert 'refresh' in response.data['tokens']
        assert response.data['user']['email'] == user.email

    def test_login_updates_last_login(self, api_client, user):
        """Successful login records last_login."""
        assert user.last_login is None
        url = reverse('users:login')
        api_client.post(url, {'email': user.email, 'password': 'TestPass123!'})

        user.refresh_from_db()
        assert user.last_login is not None

    def test_login_wrong_password(self, api_client, user):
        """Wrong password is rejected with 401."""
        url = reverse('users:login')
        response = api_client.post(url, {
            'email': user.email,
            'password': 'WrongPass123!',
        })

        assert response.status_code == status.HTTP_401_UNAUTHORIZED
        assert response.data['code'] == 'invalid_credentials'

    def test_login_unknown_email(self, api_client):
        """Unknown email is rejected with 401."""
        url = reverse('users:login')
        response = api_client.post(url, {
            'email': 'nobody@example.com',
            'password': 'TestPass123!',
        })

        assert response.status_code == status.HTTP_401_UNAUTHORIZED

    def test_login_inactive_account(self, api_client, user_inactive):
        """Deactivated account cannot log in."""
        url = reverse('users:login')
        response = api_client.post(url, {
            'email': user_inactive.email,
            'password': 'TestPass123!',
        })

        assert response.status_code == status.HTTP_403_FORBIDDEN
        assert response.data['code'] == 'inactive_account'

    def test_login_missing_fields(self, api_client):
        """Missing fields return 400."""
        url = reverse('users:login')
        response = api_client.post(url, {'email': 'testuser@example.com'})

        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert 'password' in response.data


# =============================================================================
# Profile Tests
# =============================================================================

@pytest.mark.django_db
class TestCurrentUser:
    """Tests for GET /api/auth/user/"""

    def test_get_current_user(self, authenticated_client, user):
        """Profile includes a zero balance for a new user."""
        url = reverse('users:current-user')
        response = authenticated_client.get(url)

        assert response.status_code == status.HTTP_200_OK
        assert response.data['email'] == user.email
        assert response.data['display_name'] == 'Test User'
        assert response.data['points_balance'] == 0

    def test_current_user_shows_balance(self, authenticated_client, user):
        """Balance reflects earned points."""
        earn(owner=user, material='plastic', weight_kg=2.0)

        url = reverse('users:current-user')
        response = authenticated_client.get(url)

        assert response.data['points_balance'] == 20

    def test_current_user_unauthenticated(self, api_client):
        """Anonymous request is rejected."""
        url = reverse('users:current-user')
        response = api_client.get(url)

        assert response.status_code == status.HTTP_401_UNAUTHORIZED


@pytest.mark.django_db
class TestUpdateProfile:
    """Tests for PATCH /api/auth/user/update/"""

    def test_update_display_name(self, authenticated_client, user):
        url = reverse('users:update-profile')
        response = authenticated_client.patch(url, {'display_name': 'Recycler'})

        assert response.status_code == status.HTTP_200_OK
        assert response.data['display_name'] == 'Recycler'
        user.refresh_from_db()
        assert user.display_name == 'Recycler'

    def test_email_is_not_editable(self, authenticated_client, user):
        url = reverse('users:update-profile')
        authenticated_client.patch(url, {'email': 'other@example.com'})

        user.refresh_from_db()
        assert user.email == 'testuser@example.com'

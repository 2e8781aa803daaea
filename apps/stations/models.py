import secrets

from django.conf import settings
from django.db import models


class SessionStatus(models.TextChoices):
    PENDING = 'pending', 'Pending'
    CONNECTED = 'connected', 'Connected'
    ACTIVE = 'active', 'Active'
    ENDED = 'ended', 'Ended'
    EXPIRED = 'expired', 'Expired'


# A user is attached exactly while the session is in one of these states
BOUND_STATUSES = (SessionStatus.CONNECTED, SessionStatus.ACTIVE)
LIVE_STATUSES = (SessionStatus.PENDING,) + BOUND_STATUSES
TERMINAL_STATUSES = (SessionStatus.ENDED, SessionStatus.EXPIRED)


def generate_session_token():
    return secrets.token_urlsafe(32)


def default_station_id():
    return settings.DEFAULT_STATION_ID


class PairingSession(models.Model):
    """
    Short-lived link between a physical station and one app user.

    The token is a bearer capability shown to the station as a QR code.
    A session binds at most one user in its lifetime; ``expires_at`` is
    fixed at creation and expiry is applied lazily on access.
    """

    token = models.CharField(
        max_length=64,
        unique=True,
        default=generate_session_token,
        editable=False
    )
    station_id = models.CharField(max_length=100, default=default_station_id)

    user = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.PROTECT,
        null=True,
        blank=True,
        related_name='pairing_sessions'
    )
    # Opaque credential the user bound with; kept for audit after the user is cleared
    credential = models.TextField(blank=True)

    status = models.CharField(
        max_length=20,
        choices=SessionStatus.choices,
        default=SessionStatus.PENDING
    )

    created_at = models.DateTimeField()
    expires_at = models.DateTimeField()
    ended_at = models.DateTimeField(null=True, blank=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = 'pairing_sessions'
        indexes = [
            models.Index(fields=['status'], name='pairing_status_idx'),
            models.Index(fields=['expires_at'], name='pairing_expires_idx'),
            models.Index(fields=['station_id', 'status'], name='pairing_station_status_idx'),
        ]
        constraints = [
            models.CheckConstraint(
                condition=(
                    models.Q(status__in=BOUND_STATUSES, user__isnull=False)
                    | (~models.Q(status__in=BOUND_STATUSES) & models.Q(user__isnull=True))
                ),
                name='pairing_session_user_matches_status',
            ),
        ]
        ordering = ['-created_at']

    def __str__(self):
        return f"{self.station_id}:{self.token[:8]}... ({self.status})"

    @property
    def is_bound(self):
        return self.status in BOUND_STATUSES

    @property
    def is_terminal(self):
        return self.status in TERMINAL_STATUSES

    def is_past_deadline(self, now):
        return now > self.expires_at

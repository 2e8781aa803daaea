from django.conf import settings
from rest_framework import serializers

from apps.ledger.services import balance_of

from .models import PairingSession
from .services import render_qr_data_uri


# =============================================================================
# Input Serializers
# =============================================================================

class SessionRequestInputSerializer(serializers.Serializer):
    """Station asking for a new pairing session."""

    station_id = serializers.CharField(max_length=100, required=False, allow_blank=True)


class SessionTokenInputSerializer(serializers.Serializer):
    """Any request that only names a session."""

    session_token = serializers.CharField(max_length=64)


class SessionConnectInputSerializer(SessionTokenInputSerializer):
    """App binding a session with the user's bearer credential."""

    auth_token = serializers.CharField(
        help_text="Access token (with or without the 'Bearer ' prefix)"
    )


class SessionDepositInputSerializer(serializers.Serializer):
    """
    One weighed item reported during a session.

    Blank values pass here and are rejected by the deposit service,
    so every malformed request gets the same ``invalid_input`` code.
    """

    session_token = serializers.CharField(max_length=64, allow_blank=True)
    material = serializers.CharField(max_length=50, allow_blank=True)
    weight_kg = serializers.FloatField(max_value=settings.MAX_DEPOSIT_WEIGHT_KG)


class StationActivityFilterSerializer(serializers.Serializer):
    station_id = serializers.CharField(max_length=100, required=False, allow_blank=True)


# =============================================================================
# Output Serializers
# =============================================================================

class PairingSessionCreatedSerializer(serializers.ModelSerializer):
    """New session with the QR code the station displays."""

    session_token = serializers.CharField(source='token', read_only=True)
    qr_code = serializers.SerializerMethodField()

    class Meta:
        model = PairingSession
        fields = [
            'session_token',
            'station_id',
            'status',
            'qr_code',
            'created_at',
            'expires_at',
        ]
        read_only_fields = fields

    def get_qr_code(self, obj) -> str:
        return render_qr_data_uri(obj.token)


class PairingSessionStatusSerializer(serializers.ModelSerializer):
    """
    Session state as polled by the station.

    User details and the bound credential are only present while the
    session is connected or active.
    """

    session_token = serializers.CharField(source='token', read_only=True)
    user_id = serializers.SerializerMethodField()
    user_name = serializers.SerializerMethodField()
    user_balance = serializers.SerializerMethodField()
    auth_token = serializers.SerializerMethodField()

    class Meta:
        model = PairingSession
        fields = [
            'session_token',
            'station_id',
            'status',
            'created_at',
            'expires_at',
            'ended_at',
            'user_id',
            'user_name',
            'user_balance',
            'auth_token',
        ]
        read_only_fields = fields

    def get_user_id(self, obj):
        return str(obj.user_id) if obj.is_bound else None

    def get_user_name(self, obj):
        return obj.user.get_display_name() if obj.is_bound else None

    def get_user_balance(self, obj):
        return balance_of(owner=obj.user) if obj.is_bound else None

    def get_auth_token(self, obj):
        return obj.credential if obj.is_bound else None


class StationConfigSerializer(serializers.Serializer):
    material_rates = serializers.DictField(child=serializers.IntegerField())
    supported_materials = serializers.ListField(child=serializers.CharField())
    operating_hours = serializers.DictField(child=serializers.CharField())
    session_ttl_seconds = serializers.IntegerField()


class StationActivitySerializer(serializers.Serializer):
    station_id = serializers.CharField()
    today_deposits = serializers.IntegerField()
    today_weight_kg = serializers.FloatField()
    today_points = serializers.IntegerField()
    open_sessions = serializers.IntegerField()

from django.conf import settings
from rest_framework import serializers

from .models import LedgerEntry, Redemption, EntryKind


# =============================================================================
# Input Serializers
# =============================================================================

class LedgerEntryFilterSerializer(serializers.Serializer):
    """
    Validate query parameters for ledger history.

    Query Parameters:
        kind (str): Only deposits or only redemptions
    """

    kind = serializers.ChoiceField(choices=EntryKind.choices, required=False)


class EarnInputSerializer(serializers.Serializer):
    """Manual deposit entry, e.g. from a station without pairing."""

    material = serializers.CharField(max_length=50)
    weight_kg = serializers.FloatField(max_value=settings.MAX_DEPOSIT_WEIGHT_KG)
    station_id = serializers.CharField(max_length=100, required=False, allow_blank=True)


class RedeemInputSerializer(serializers.Serializer):
    """Validate redemption request data."""

    points = serializers.IntegerField()
    method = serializers.CharField(max_length=50)
    account_info = serializers.CharField(
        max_length=255,
        required=False,
        allow_blank=True,
        default=''
    )


# =============================================================================
# Output Serializers
# =============================================================================

class LedgerEntrySerializer(serializers.ModelSerializer):
    """Full ledger entry for history and detail views."""

    class Meta:
        model = LedgerEntry
        fields = [
            'id',
            'kind',
            'delta',
            'balance_after',
            'material',
            'weight_kg',
            'cash_amount',
            'station_id',
            'session_token',
            'created_at',
        ]
        read_only_fields = fields


class DepositResultSerializer(serializers.ModelSerializer):
    """Outcome of an earn: points awarded and the balance it produced."""

    ledger_entry_id = serializers.IntegerField(source='id', read_only=True)
    points_awarded = serializers.IntegerField(source='delta', read_only=True)
    new_balance = serializers.IntegerField(source='balance_after', read_only=True)

    class Meta:
        model = LedgerEntry
        fields = [
            'ledger_entry_id',
            'points_awarded',
            'new_balance',
            'material',
            'weight_kg',
            'station_id',
            'created_at',
        ]
        read_only_fields = fields


class RedemptionSerializer(serializers.ModelSerializer):
    """Redemption with its ledger entry and the balance left after it."""

    ledger_entry_id = serializers.IntegerField(read_only=True)
    new_balance = serializers.IntegerField(source='ledger_entry.balance_after', read_only=True)

    class Meta:
        model = Redemption
        fields = [
            'id',
            'ledger_entry_id',
            'points_used',
            'cash_amount',
            'method',
            'account_info',
            'status',
            'new_balance',
            'created_at',
        ]
        read_only_fields = fields


class BalanceSerializer(serializers.Serializer):
    points = serializers.IntegerField()


class MaterialStatsSerializer(serializers.Serializer):
    material = serializers.CharField()
    count = serializers.IntegerField()
    weight_kg = serializers.FloatField()
    points = serializers.IntegerField()


class DepositStatsSerializer(serializers.Serializer):
    total_deposits = serializers.IntegerField()
    total_weight_kg = serializers.FloatField()
    total_points_earned = serializers.IntegerField()
    by_material = MaterialStatsSerializer(many=True)


class RedemptionOptionSerializer(serializers.Serializer):
    method = serializers.CharField()
    name = serializers.CharField()
    description = serializers.CharField()
    min_points = serializers.IntegerField()
    conversion_rate = serializers.IntegerField()
    cash_per_100_points = serializers.DecimalField(max_digits=12, decimal_places=2)
    eligible = serializers.BooleanField()


class RedemptionOptionsSerializer(serializers.Serializer):
    total_points = serializers.IntegerField()
    options = RedemptionOptionSerializer(many=True)

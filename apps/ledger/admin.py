# ==========================================
# apps/ledger/admin.py
# ==========================================

from django.contrib import admin
from django.utils.html import format_html
from .models import LedgerEntry, PointsBalance, Redemption, RedemptionStatus


class ReadOnlyAdminMixin:
    """Ledger rows are append-only; the admin may look but not touch."""

    def has_add_permission(self, request):
        return False

    def has_change_permission(self, request, obj=None):
        return False

    def has_delete_permission(self, request, obj=None):
        return False


@admin.register(LedgerEntry)
class LedgerEntryAdmin(ReadOnlyAdminMixin, admin.ModelAdmin):
    list_display = [
        'id',
        'owner',
        'kind',
        'delta_badge',
        'balance_after',
        'material',
        'weight_kg',
        'station_id',
        'created_at',
    ]
    list_filter = ['kind', 'material', 'station_id', 'created_at']
    search_fields = ['owner__email', 'session_token', 'station_id']
    date_hierarchy = 'created_at'
    list_select_related = ['owner']

    def delta_badge(self, obj):
        """Display the point movement in green or red."""
        color = '#6B8E5E' if obj.delta >= 0 else '#B85C5C'
        sign = '+' if obj.delta >= 0 else ''
        return format_html(
            '<span style="color: {}; font-weight: bold;">{}{}</span>',
            color, sign, obj.delta
        )
    delta_badge.short_description = 'Points'
    delta_badge.admin_order_field = 'delta'


@admin.register(PointsBalance)
class PointsBalanceAdmin(ReadOnlyAdminMixin, admin.ModelAdmin):
    list_display = ['owner', 'points', 'updated_at']
    search_fields = ['owner__email']
    ordering = ['-points']
    list_select_related = ['owner']


@admin.register(Redemption)
class RedemptionAdmin(admin.ModelAdmin):
    list_display = [
        'id',
        'owner',
        'points_used',
        'cash_amount',
        'method',
        'status_badge',
        'created_at',
    ]
    list_filter = ['status', 'method', 'created_at']
    search_fields = ['owner__email', 'account_info']
    readonly_fields = [
        'owner',
        'ledger_entry',
        'points_used',
        'cash_amount',
        'method',
        'account_info',
        'created_at',
    ]
    list_select_related = ['owner']
    actions = ['mark_completed', 'mark_failed']

    def has_add_permission(self, request):
        return False

    def has_delete_permission(self, request, obj=None):
        return False

    def status_badge(self, obj):
        """Display redemption status as colored badge."""
        colors = {
            RedemptionStatus.PENDING: ('#E5C49A', '#2C1810'),
            RedemptionStatus.COMPLETED: ('#6B8E5E', 'white'),
            RedemptionStatus.FAILED: ('#B85C5C', 'white'),
        }
        bg, fg = colors.get(obj.status, ('#ccc', '#666'))
        return format_html(
            '<span style="background: {}; color: {}; padding: 3px 8px; '
            'border-radius: 10px; font-size: 11px;">{}</span>',
            bg, fg, obj.get_status_display()
        )
    status_badge.short_description = 'Status'
    status_badge.admin_order_field = 'status'

    @admin.action(description='Mark selected redemptions as paid out')
    def mark_completed(self, request, queryset):
        count = queryset.filter(status=RedemptionStatus.PENDING).update(
            status=RedemptionStatus.COMPLETED
        )
        self.message_user(request, f'Marked {count} redemption(s) as completed.')

    @admin.action(description='Mark selected redemptions as failed')
    def mark_failed(self, request, queryset):
        count = queryset.filter(status=RedemptionStatus.PENDING).update(
            status=RedemptionStatus.FAILED
        )
        self.message_user(request, f'Marked {count} redemption(s) as failed.')

# ==========================================
# apps/stations/admin.py
# ==========================================

from django.contrib import admin
from django.utils.html import format_html
from .models import PairingSession, SessionStatus
from .services import expire_stale_sessions


@admin.register(PairingSession)
class PairingSessionAdmin(admin.ModelAdmin):
    """Sessions are driven by the API; the admin only inspects and sweeps."""

    list_display = [
        'short_token',
        'station_id',
        'status_badge',
        'user',
        'created_at',
        'expires_at',
        'ended_at',
    ]
    list_filter = ['status', 'station_id', 'created_at']
    search_fields = ['token', 'station_id', 'user__email']
    date_hierarchy = 'created_at'
    list_select_related = ['user']
    readonly_fields = [
        'token',
        'station_id',
        'user',
        'credential',
        'status',
        'created_at',
        'expires_at',
        'ended_at',
        'updated_at',
    ]
    actions = ['expire_stale']

    def has_add_permission(self, request):
        return False

    def has_delete_permission(self, request, obj=None):
        return False

    def short_token(self, obj):
        return f"{obj.token[:10]}..."
    short_token.short_description = 'Token'

    def status_badge(self, obj):
        """Display session status as colored badge."""
        colors = {
            SessionStatus.PENDING: ('#E5C49A', '#2C1810'),
            SessionStatus.CONNECTED: ('#A47449', 'white'),
            SessionStatus.ACTIVE: ('#6B8E5E', 'white'),
            SessionStatus.ENDED: ('#ccc', '#666'),
            SessionStatus.EXPIRED: ('#B85C5C', 'white'),
        }
        bg, fg = colors.get(obj.status, ('#ccc', '#666'))
        return format_html(
            '<span style="background: {}; color: {}; padding: 3px 8px; '
            'border-radius: 10px; font-size: 11px;">{}</span>',
            bg, fg, obj.get_status_display()
        )
    status_badge.short_description = 'Status'
    status_badge.admin_order_field = 'status'

    @admin.action(description='Expire all sessions past their deadline')
    def expire_stale(self, request, queryset):
        count = expire_stale_sessions()
        self.message_user(request, f'Expired {count} session(s).')

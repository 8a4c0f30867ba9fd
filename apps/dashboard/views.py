"""
Dashboard API Views

Provides the statistics endpoints behind the admin dashboards:
- GET  /api/dashboard/admin-stats
- GET  /api/dashboard/super-admin-stats
- POST /api/dashboard/admins/{id}/toggle-status
"""
from rest_framework.views import APIView

from apps.core.mixins import AuthenticatedAPIView, handle_api_errors
from apps.core.permissions import IsAdmin, IsSuperAdmin
from .services import get_admin_stats, get_super_admin_stats, toggle_admin_status
from .snapshots import SUPER_ADMIN_STATS, admin_stats_name, load_stats_snapshot


class AdminStatsView(AuthenticatedAPIView, APIView):
    """
    GET /api/dashboard/admin-stats

    Statistics for the caller's accessible divisions.

    Query params:
        refresh: 1 to bypass the cached snapshot

    Response (200):
        {
            "total_programs": 12,
            "active_programs": 9,
            "total_registrations": 340,
            "total_members": 120,
            "panchayath_stats": [{"id", "name", "programs", "registrations"}],
            "cluster_stats": [{"id", "name", "members", "panchayath_name"}],
            "recent_registrations": [{"id", "program_name", "registrant_name", "created_at"}]
        }

    Response (502):
        {"error": "StatsUnavailable", "message": "..."}
    """
    permission_classes = [IsAdmin]

    @handle_api_errors
    def get(self, request):
        ctx = self.get_context(request)
        refresh = self.parse_bool(request.query_params.get('refresh'))

        snapshot = load_stats_snapshot(
            admin_stats_name(ctx.scope_key),
            lambda token: get_admin_stats(ctx, cancel_token=token),
            refresh=refresh,
        )
        return self.success_response(snapshot)


class SuperAdminStatsView(AuthenticatedAPIView, APIView):
    """
    GET /api/dashboard/super-admin-stats

    Organisation-wide statistics: admins with profiles, divisions with
    program/member counts, totals and recent activity (max 10 entries).

    Query params:
        refresh: 1 to bypass the cached snapshot
    """
    permission_classes = [IsSuperAdmin]

    @handle_api_errors
    def get(self, request):
        ctx = self.get_context(request)
        refresh = self.parse_bool(request.query_params.get('refresh'))

        snapshot = load_stats_snapshot(
            SUPER_ADMIN_STATS,
            lambda token: get_super_admin_stats(ctx, cancel_token=token),
            refresh=refresh,
        )
        return self.success_response(snapshot)


class ToggleAdminStatusView(AuthenticatedAPIView, APIView):
    """
    POST /api/dashboard/admins/{admin_id}/toggle-status

    Flip an admin's active flag.

    Response (200):
        {"id": "uuid", "is_active": false}
    """
    permission_classes = [IsSuperAdmin]

    @handle_api_errors
    def post(self, request, admin_id):
        self.get_context(request)
        admin_uuid = self.parse_uuid(admin_id, 'admin_id')

        return self.success_response(toggle_admin_status(admin_uuid))

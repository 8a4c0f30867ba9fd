"""
Authentication API Views

Sessions are managed by Supabase Auth; this backend only verifies them and
issues the signed admin tokens used by the proxy endpoints.
- POST /api/auth/admin-token - Issue a signed X-Admin-Token value
- GET  /api/auth/session - Current admin session info
"""
import logging

from rest_framework import status
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response
from rest_framework.views import APIView

from apps.core.admin_tokens import AdminTokenError, issue_admin_token
from apps.core.authentication import get_user_context
from apps.core.permissions import IsAdmin

logger = logging.getLogger(__name__)


class AdminTokenView(APIView):
    """
    POST /api/auth/admin-token

    Issue a signed admin token for the authenticated dashboard admin.

    Response (200):
        {
            "token": "<jwt>",
            "expires_at": "2025-01-01T08:00:00+00:00"
        }
    """
    permission_classes = [IsAdmin]

    def post(self, request):
        user = get_user_context(request)
        if not user:
            return Response(
                {'error': 'Unauthorized', 'message': 'Authentication required'},
                status=status.HTTP_401_UNAUTHORIZED
            )

        try:
            result = issue_admin_token(
                user_id=user.id,
                admin_id=user.admin_id,
                division_id=user.division_id,
            )
        except AdminTokenError as e:
            logger.error(f'Admin token issue failed: {e}')
            return Response(
                {'error': 'AdminTokenError', 'message': str(e)},
                status=status.HTTP_500_INTERNAL_SERVER_ERROR
            )

        logger.info(f'Issued admin token for user {user.id}')
        return Response(result)


class SessionView(APIView):
    """
    GET /api/auth/session

    Get current session info.

    Response (200):
        {
            "authenticated": true,
            "user": {...}
        }
    """
    permission_classes = [IsAuthenticated]

    def get(self, request):
        user = get_user_context(request)
        if not user:
            return Response({'authenticated': False})

        return Response({
            'authenticated': True,
            'user': {
                'id': str(user.id),
                'email': user.email,
                'role': user.role,
                'admin_id': str(user.admin_id) if user.admin_id else None,
                'division_id': str(user.division_id) if user.division_id else None,
                'additional_division_ids': [str(d) for d in user.additional_division_ids],
                'access_all_divisions': user.access_all_divisions,
                'is_super_admin': user.is_super_admin,
            }
        })

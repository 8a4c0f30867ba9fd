"""
Admin-token Proxy Views

Endpoints that replace the admin-locations and admin-registrations edge
functions. Every request must carry a valid signed X-Admin-Token header;
errors are returned as {"error": "..."}.

- GET|POST|PATCH /api/functions/admin-locations?resource=...&action=...
- GET /api/functions/admin-registrations?program_id=...&panchayath_id=...
"""
import logging

from rest_framework import exceptions as drf_exceptions
from rest_framework import status
from rest_framework.response import Response
from rest_framework.views import APIView

from apps.core.authentication import AdminTokenAuthentication
from apps.core.exceptions import APIException as APIError
from apps.core.mixins import AuthenticatedAPIView
from apps.core.permissions import IsAdmin
from apps.programs.services import get_scoped_program
from apps.registrations.selectors import get_program_registrations
from .services import LOCATION_HANDLERS

logger = logging.getLogger(__name__)


class AdminTokenAPIView(AuthenticatedAPIView, APIView):
    """
    Base view for the proxy endpoints.

    Authentication is the X-Admin-Token header only; a missing, forged or
    expired token is rejected with 401 before any table is read.
    """
    authentication_classes = [AdminTokenAuthentication]
    permission_classes = [IsAdmin]

    def handle_exception(self, exc):
        if isinstance(exc, (drf_exceptions.NotAuthenticated, drf_exceptions.AuthenticationFailed)):
            logger.warning(f'Rejected admin token request: {exc.detail}')
            return Response({'error': str(exc.detail)}, status=status.HTTP_401_UNAUTHORIZED)
        if isinstance(exc, drf_exceptions.PermissionDenied):
            return Response({'error': str(exc.detail)}, status=status.HTTP_403_FORBIDDEN)
        if isinstance(exc, APIError):
            return Response({'error': exc.message}, status=exc.status_code)
        return super().handle_exception(exc)


class AdminLocationsView(AdminTokenAPIView):
    """
    /api/functions/admin-locations

    Query params:
        resource: panchayaths (default) | clusters
        action: list (default) | create | update

    GET lists the resource ordered by name. POST with action=create inserts
    the JSON body. PATCH with action=update updates the row whose id is in
    the body.

    Response (200):
        {"data": [...] | {...}}

    Response (400):
        {"error": "Invalid resource or action"}
    """

    def dispatch_location(self, request, method: str):
        resource = request.query_params.get('resource') or 'panchayaths'
        action = request.query_params.get('action') or 'list'

        if method == 'GET' or action == 'list':
            action = 'list'
        elif (method, action) not in (('POST', 'create'), ('PATCH', 'update')):
            action = None

        handler = LOCATION_HANDLERS.get((resource, action))
        if handler is None:
            return Response({'error': 'Invalid resource or action'}, status=status.HTTP_400_BAD_REQUEST)

        logger.info(f'Admin locations request: {action} {resource}')

        try:
            data = handler() if action == 'list' else handler(request.data)
        except APIError:
            raise
        except Exception as e:
            logger.error(f'Admin locations error: {e}')
            return Response({'error': str(e)}, status=status.HTTP_500_INTERNAL_SERVER_ERROR)

        return Response({'data': data})

    def get(self, request):
        return self.dispatch_location(request, 'GET')

    def post(self, request):
        return self.dispatch_location(request, 'POST')

    def patch(self, request):
        return self.dispatch_location(request, 'PATCH')


class AdminRegistrationsView(AdminTokenAPIView):
    """
    GET /api/functions/admin-registrations

    Query params:
        program_id: Required program UUID
        panchayath_id: Optional filter on the registrant's panchayath

    Response (200):
        {"registrations": [{"id", "program_id", "answers", "created_at"}]}
    """

    def get(self, request):
        ctx = self.get_context(request)
        program = get_scoped_program(ctx, self.parse_uuid(request.query_params.get('program_id'), 'program_id'))
        panchayath_id = request.query_params.get('panchayath_id') or None

        try:
            registrations = get_program_registrations(program.id, panchayath_id=panchayath_id)
        except Exception as e:
            logger.error(f'Admin registrations error: {e}')
            return Response({'error': str(e)}, status=status.HTTP_500_INTERNAL_SERVER_ERROR)

        return Response({'registrations': registrations})

"""
Programs API Views

Public endpoints:
- GET /api/divisions - Active divisions
- GET /api/programs?division={name} - Programs with published content

Admin endpoints (division scoped):
- GET    /api/admin/programs - List programs
- GET    /api/admin/programs/{id} - Program detail
- PATCH  /api/admin/programs/{id} - Update program
- DELETE /api/admin/programs/{id} - Delete program
- POST   /api/admin/programs/{id}/toggle-active
- POST   /api/admin/programs/{id}/modules/{type} - Enable module
- DELETE /api/admin/programs/{id}/modules/{type} - Disable module
- POST   /api/admin/modules/{id}/toggle-publish
- GET    /api/admin/programs/{id}/registrations
- GET|POST /api/admin/programs/{id}/announcements (and advertisements)
- PATCH|DELETE /api/admin/announcements/{id} (and advertisements)
- POST   /api/admin/announcements/{id}/toggle-publish (and advertisements)
"""
import logging

from rest_framework import status
from rest_framework.permissions import AllowAny
from rest_framework.response import Response
from rest_framework.views import APIView

from apps.core.mixins import AuthenticatedAPIView, handle_api_errors
from apps.core.permissions import IsAdmin
from apps.registrations.selectors import get_program_questions, get_program_registrations
from .selectors import (
    get_program_detail,
    list_admin_programs,
    list_advertisements,
    list_announcements,
    list_public_divisions,
    list_public_programs,
)
from .services import (
    create_content,
    delete_content,
    delete_program,
    get_scoped_program,
    set_module_enabled,
    toggle_content_publish,
    toggle_module_publish,
    toggle_program_active,
    update_content,
    update_program,
)

logger = logging.getLogger(__name__)


# =============================================================================
# Public
# =============================================================================

class PublicDivisionsView(APIView):
    """
    GET /api/divisions

    Response (200):
        [{"id": "uuid", "name": "Division", "color": "#hex"}]
    """
    authentication_classes = []
    permission_classes = [AllowAny]

    def get(self, request):
        try:
            return Response(list_public_divisions())
        except Exception as e:
            logger.error(f'Division list failed: {e}')
            return Response(
                {'error': 'Failed to fetch divisions', 'detail': str(e)},
                status=status.HTTP_500_INTERNAL_SERVER_ERROR
            )


class PublicProgramsView(APIView):
    """
    GET /api/programs?division={name}

    Active programs that have at least one published module, newest first.

    Query params:
        division: Optional division name (case-insensitive); "all" for every division
    """
    authentication_classes = []
    permission_classes = [AllowAny]

    def get(self, request):
        try:
            return Response(list_public_programs(request.query_params.get('division')))
        except Exception as e:
            logger.error(f'Public program list failed: {e}')
            return Response(
                {'error': 'Failed to fetch programs', 'detail': str(e)},
                status=status.HTTP_500_INTERNAL_SERVER_ERROR
            )


# =============================================================================
# Admin: programs
# =============================================================================

class AdminProgramsListView(AuthenticatedAPIView, APIView):
    """GET /api/admin/programs"""
    permission_classes = [IsAdmin]

    @handle_api_errors
    def get(self, request):
        ctx = self.get_context(request)
        return Response(list_admin_programs(ctx))


class AdminProgramDetailView(AuthenticatedAPIView, APIView):
    """
    GET|PATCH|DELETE /api/admin/programs/{program_id}

    PATCH body:
        {
            "name": "Program name",        // required when present, trimmed
            "description": "...",           // blank -> null
            "start_date": "2025-01-01",     // blank -> null
            "end_date": "2025-01-31",       // blank -> null
            "is_active": true
        }
    """
    permission_classes = [IsAdmin]

    @handle_api_errors
    def get(self, request, program_id):
        ctx = self.get_context(request)
        program = get_scoped_program(ctx, self.parse_uuid(program_id, 'program_id'))
        return Response(get_program_detail(program))

    @handle_api_errors
    def patch(self, request, program_id):
        ctx = self.get_context(request)
        program = update_program(ctx, self.parse_uuid(program_id, 'program_id'), request.data)
        return Response(get_program_detail(program))

    @handle_api_errors
    def delete(self, request, program_id):
        ctx = self.get_context(request)
        delete_program(ctx, self.parse_uuid(program_id, 'program_id'))
        return self.success_response()


class AdminProgramToggleActiveView(AuthenticatedAPIView, APIView):
    """POST /api/admin/programs/{program_id}/toggle-active"""
    permission_classes = [IsAdmin]

    @handle_api_errors
    def post(self, request, program_id):
        ctx = self.get_context(request)
        program = toggle_program_active(ctx, self.parse_uuid(program_id, 'program_id'))
        return Response({'id': program.id, 'is_active': program.is_active})


class AdminProgramRegistrationsView(AuthenticatedAPIView, APIView):
    """
    GET /api/admin/programs/{program_id}/registrations

    Response (200):
        {
            "questions": [{"id", "question_text", "question_type", "options", "is_required", "sort_order"}],
            "registrations": [{"id", "program_id", "answers", "created_at"}]
        }
    """
    permission_classes = [IsAdmin]

    @handle_api_errors
    def get(self, request, program_id):
        ctx = self.get_context(request)
        program = get_scoped_program(ctx, self.parse_uuid(program_id, 'program_id'))
        return Response({
            'questions': get_program_questions(program.id),
            'registrations': get_program_registrations(program.id),
        })


# =============================================================================
# Admin: modules
# =============================================================================

class AdminProgramModuleView(AuthenticatedAPIView, APIView):
    """
    POST   /api/admin/programs/{program_id}/modules/{module_type} - enable
    DELETE /api/admin/programs/{program_id}/modules/{module_type} - disable
    """
    permission_classes = [IsAdmin]

    @handle_api_errors
    def post(self, request, program_id, module_type):
        ctx = self.get_context(request)
        module = set_module_enabled(ctx, self.parse_uuid(program_id, 'program_id'), module_type, True)
        return Response(module, status=status.HTTP_201_CREATED)

    @handle_api_errors
    def delete(self, request, program_id, module_type):
        ctx = self.get_context(request)
        set_module_enabled(ctx, self.parse_uuid(program_id, 'program_id'), module_type, False)
        return self.success_response()


class AdminModuleTogglePublishView(AuthenticatedAPIView, APIView):
    """POST /api/admin/modules/{module_id}/toggle-publish"""
    permission_classes = [IsAdmin]

    @handle_api_errors
    def post(self, request, module_id):
        ctx = self.get_context(request)
        return Response(toggle_module_publish(ctx, self.parse_uuid(module_id, 'module_id')))


# =============================================================================
# Admin: announcements and advertisements
# =============================================================================

class ProgramContentListView(AuthenticatedAPIView, APIView):
    """
    GET|POST /api/admin/programs/{program_id}/{announcements|advertisements}

    POST body:
        {
            "title": "...",          // required for announcements
            "description": "...",
            "poster_url": "https://...",
            "video_url": "https://...",
            "is_published": false
        }
    """
    permission_classes = [IsAdmin]
    kind = 'announcement'

    def list_items(self, program_id):
        if self.kind == 'announcement':
            return list_announcements(program_id)
        return list_advertisements(program_id)

    @handle_api_errors
    def get(self, request, program_id):
        ctx = self.get_context(request)
        program = get_scoped_program(ctx, self.parse_uuid(program_id, 'program_id'))
        return Response(self.list_items(program.id))

    @handle_api_errors
    def post(self, request, program_id):
        ctx = self.get_context(request)
        item = create_content(ctx, self.kind, self.parse_uuid(program_id, 'program_id'), request.data)
        return Response(item, status=status.HTTP_201_CREATED)


class ProgramContentDetailView(AuthenticatedAPIView, APIView):
    """PATCH|DELETE /api/admin/{announcements|advertisements}/{item_id}"""
    permission_classes = [IsAdmin]
    kind = 'announcement'

    @handle_api_errors
    def patch(self, request, item_id):
        ctx = self.get_context(request)
        return Response(update_content(ctx, self.kind, self.parse_uuid(item_id, 'id'), request.data))

    @handle_api_errors
    def delete(self, request, item_id):
        ctx = self.get_context(request)
        delete_content(ctx, self.kind, self.parse_uuid(item_id, 'id'))
        return self.success_response()


class ProgramContentTogglePublishView(AuthenticatedAPIView, APIView):
    """POST /api/admin/{announcements|advertisements}/{item_id}/toggle-publish"""
    permission_classes = [IsAdmin]
    kind = 'announcement'

    @handle_api_errors
    def post(self, request, item_id):
        ctx = self.get_context(request)
        return Response(toggle_content_publish(ctx, self.kind, self.parse_uuid(item_id, 'id')))

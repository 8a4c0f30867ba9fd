"""
Pennyekart Agents API Views

Provides agent endpoints:
- GET   /api/pennyekart/agents - List agents
- POST  /api/pennyekart/agents - Create an agent
- PATCH /api/pennyekart/agents/{id} - Update an agent
- GET   /api/pennyekart/agents/hierarchy - Agent forest grouped by panchayath
- GET   /api/pennyekart/agents/export?format=xlsx|pdf|html - Download agent list
"""
import logging

from rest_framework import status
from rest_framework.response import Response
from rest_framework.views import APIView

from apps.core.constants import AGENT_ROLES, EXPORT_FORMATS
from apps.core.exceptions import ValidationError
from apps.core.mixins import AuthenticatedAPIView, handle_api_errors
from apps.core.permissions import IsAdmin
from apps.exports.services import agent_export_filename, build_agent_rows
from apps.exports.views import export_response
from .hierarchy import build_hierarchy
from .selectors import get_panchayath_names, list_agents
from .services import create_agent, update_agent

logger = logging.getLogger(__name__)


class AgentFilterMixin:
    """Shared query-string filters for agent list endpoints."""

    def get_filters(self, request) -> dict:
        role = request.query_params.get('role') or None
        if role and role not in AGENT_ROLES:
            raise ValidationError(f"Invalid role. Must be one of: {', '.join(AGENT_ROLES)}")

        is_active = request.query_params.get('is_active')
        return {
            'panchayath_id': self.parse_uuid_optional(request.query_params.get('panchayath_id')),
            'role': role,
            'is_active': None if is_active in (None, '') else self.parse_bool(is_active),
        }


class AgentsListView(AgentFilterMixin, AuthenticatedAPIView, APIView):
    """
    GET /api/pennyekart/agents

    Query params:
        panchayath_id: Optional panchayath filter
        role: Optional role filter
        is_active: Optional true/false

    Response (200):
        [
            {
                "id": "uuid",
                "name": "Agent Name",
                "mobile": "9876543210",
                "role": "pro",
                "parent_agent_id": "uuid",
                "panchayath_id": "uuid",
                "panchayath_name": "Panchayath",
                "ward": "5",
                "customer_count": 7,
                "is_active": true,
                "created_at": "2024-01-01T00:00:00Z"
            }
        ]
    """
    permission_classes = [IsAdmin]

    @handle_api_errors
    def get(self, request):
        self.get_context(request)
        filters = self.get_filters(request)

        try:
            return Response(list_agents(**filters))
        except Exception as e:
            logger.error(f'Agent list failed: {e}')
            return Response(
                {'error': 'Failed to fetch agents', 'detail': str(e)},
                status=status.HTTP_500_INTERNAL_SERVER_ERROR
            )

    @handle_api_errors
    def post(self, request):
        """
        POST /api/pennyekart/agents

        Request body:
            {
                "name": "Agent Name",
                "mobile": "9876543210",
                "role": "team_leader|coordinator|group_leader|pro",
                "parent_agent_id": "uuid",   // optional
                "panchayath_id": "uuid",     // optional
                "ward": "5",                 // optional, defaults to "N/A"
                "customer_count": 0          // pro only
            }
        """
        self.get_context(request)
        agent = create_agent(request.data)
        return Response(agent, status=status.HTTP_201_CREATED)


class AgentDetailView(AuthenticatedAPIView, APIView):
    """
    PATCH /api/pennyekart/agents/{agent_id}

    Partial update. Rejects parent assignments that would create a cycle.
    """
    permission_classes = [IsAdmin]

    @handle_api_errors
    def patch(self, request, agent_id):
        self.get_context(request)
        agent_uuid = self.parse_uuid(agent_id, 'agent_id')
        return Response(update_agent(agent_uuid, request.data))


class AgentHierarchyView(AgentFilterMixin, AuthenticatedAPIView, APIView):
    """
    GET /api/pennyekart/agents/hierarchy

    Response (200):
        [
            {
                "panchayath_name": "Panchayath",
                "agent_count": 4,
                "roots": [
                    {
                        "id": "uuid", "name": "...", "mobile": "...",
                        "role": "team_leader", "role_label": "Team Leader",
                        "ward": "5", "customer_count": 0,
                        "total_customers": 7, "depth": 0,
                        "children": [...]
                    }
                ]
            }
        ]
    """
    permission_classes = [IsAdmin]

    @handle_api_errors
    def get(self, request):
        self.get_context(request)
        agents = list_agents(**self.get_filters(request))
        groups = build_hierarchy(agents)
        return Response([group.to_dict() for group in groups])


class AgentExportView(AgentFilterMixin, AuthenticatedAPIView, APIView):
    """
    GET /api/pennyekart/agents/export?format=xlsx|pdf|html

    Returns a file download named Pennyekart_Agents_<YYYY-MM-DD>.<ext>.
    The html format is a print-ready document.
    """
    permission_classes = [IsAdmin]

    @handle_api_errors
    def get(self, request):
        self.get_context(request)
        fmt = request.query_params.get('format', 'xlsx')
        if fmt not in EXPORT_FORMATS:
            raise ValidationError(f"Invalid format. Must be one of: {', '.join(EXPORT_FORMATS)}")

        agents = list_agents(**self.get_filters(request))
        table = build_agent_rows(agents, get_panchayath_names())

        return export_response(table, fmt, agent_export_filename(fmt))

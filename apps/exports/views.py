"""
Export API Views

- GET /api/admin/programs/{id}/registrations/export?format=xlsx|pdf|html
"""
import logging

from django.http import HttpResponse
from rest_framework.views import APIView

from apps.core.constants import EXPORT_FORMATS
from apps.core.exceptions import ValidationError
from apps.core.mixins import AuthenticatedAPIView, handle_api_errors
from apps.core.permissions import IsAdmin
from apps.programs.services import get_scoped_program
from apps.registrations.selectors import get_program_questions, get_program_registrations
from .services import CONTENT_TYPES, ExportTable, build_registration_table, registration_export_filename, render_table

logger = logging.getLogger(__name__)


def export_response(table: ExportTable, fmt: str, filename: str) -> HttpResponse:
    """Render a table as a download; html opens inline for printing."""
    response = HttpResponse(render_table(table, fmt), content_type=CONTENT_TYPES[fmt])
    disposition = 'inline' if fmt == 'html' else 'attachment'
    response['Content-Disposition'] = f'{disposition}; filename="{filename}"'
    return response


class RegistrationExportView(AuthenticatedAPIView, APIView):
    """
    GET /api/admin/programs/{program_id}/registrations/export

    Query params:
        format: xlsx (default), pdf or html

    Returns a download named <program>_registrations_<YYYY-MM-DD>.<ext>
    with one column per form question in sort order.
    """
    permission_classes = [IsAdmin]

    @handle_api_errors
    def get(self, request, program_id):
        ctx = self.get_context(request)
        program_uuid = self.parse_uuid(program_id, 'program_id')

        fmt = request.query_params.get('format', 'xlsx')
        if fmt not in EXPORT_FORMATS:
            raise ValidationError(f"Invalid format. Must be one of: {', '.join(EXPORT_FORMATS)}")

        program = get_scoped_program(ctx, program_uuid)
        table = build_registration_table(
            get_program_registrations(program.id),
            get_program_questions(program.id),
            title=f'{program.name} - Registrations',
        )
        logger.info(f'Exporting {len(table.rows)} registrations for program {program.id} as {fmt}')

        return export_response(table, fmt, registration_export_filename(program.name, fmt))

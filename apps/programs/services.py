"""
Program Services

Business logic for program administration. Every operation takes the
caller's AdminContext and checks the program's division against it before
reading or writing. Validation runs before any mutation.
"""
import logging
from datetime import date
from uuid import UUID

from django.db import transaction

from apps.core.constants import MODULE_TYPES
from apps.core.context import AdminContext
from apps.core.exceptions import NotFoundError, ValidationError
from apps.core.models import (
    Program,
    ProgramAdvertisement,
    ProgramAnnouncement,
    ProgramModule,
)
from apps.core.permissions import check_division_access
from apps.core.utils import clean_optional
from apps.dashboard.snapshots import invalidate_stats

from .selectors import get_program

logger = logging.getLogger(__name__)

CONTENT_MODELS = {
    'announcement': ProgramAnnouncement,
    'advertisement': ProgramAdvertisement,
}


def get_scoped_program(ctx: AdminContext, program_id: UUID) -> Program:
    """
    Load a program the caller may manage.

    Raises:
        NotFoundError: program does not exist
        PermissionDeniedError: program belongs to another division
    """
    program = get_program(program_id)
    if not program:
        raise NotFoundError('Program not found')
    check_division_access(ctx, program.division_id)
    return program


def _parse_date(value, field_name: str) -> date | None:
    text = clean_optional(value)
    if not text:
        return None
    try:
        return date.fromisoformat(text)
    except ValueError as err:
        raise ValidationError(f'{field_name} must be a date (YYYY-MM-DD)') from err


# =============================================================================
# Programs
# =============================================================================

def update_program(ctx: AdminContext, program_id: UUID, data: dict) -> Program:
    """
    Update program details.

    name is required and trimmed; blank description and dates become null.
    """
    program = get_scoped_program(ctx, program_id)

    name = clean_optional(data.get('name', program.name))
    if not name:
        raise ValidationError('Program name is required')

    start_date = _parse_date(data.get('start_date'), 'start_date') if 'start_date' in data else program.start_date
    end_date = _parse_date(data.get('end_date'), 'end_date') if 'end_date' in data else program.end_date
    if start_date and end_date and end_date < start_date:
        raise ValidationError('end_date cannot be before start_date')

    program.name = name
    if 'description' in data:
        program.description = clean_optional(data.get('description'))
    program.start_date = start_date
    program.end_date = end_date
    if 'is_active' in data:
        program.is_active = bool(data['is_active'])

    program.save(update_fields=['name', 'description', 'start_date', 'end_date', 'is_active'])
    invalidate_stats()
    logger.info(f'Program {program_id} updated by {ctx.user_id}')
    return program


def toggle_program_active(ctx: AdminContext, program_id: UUID) -> Program:
    program = get_scoped_program(ctx, program_id)
    program.is_active = not program.is_active
    program.save(update_fields=['is_active'])
    invalidate_stats()
    return program


@transaction.atomic
def delete_program(ctx: AdminContext, program_id: UUID) -> None:
    program = get_scoped_program(ctx, program_id)
    program.delete()
    invalidate_stats()
    logger.info(f'Program {program_id} deleted by {ctx.user_id}')


# =============================================================================
# Modules
# =============================================================================

def set_module_enabled(ctx: AdminContext, program_id: UUID, module_type: str, enabled: bool) -> dict | None:
    """
    Enable or disable a module type on a program.

    Enabling creates an unpublished module row (idempotent); disabling
    deletes it. Returns the module row, or None when disabled.
    """
    if module_type not in MODULE_TYPES:
        raise ValidationError(
            f"Invalid module type. Must be one of: {', '.join(MODULE_TYPES)}",
            details={'module_type': module_type},
        )
    program = get_scoped_program(ctx, program_id)

    if not enabled:
        ProgramModule.objects.filter(program=program, module_type=module_type).delete()  # type: ignore[attr-defined]
        return None

    module, created = ProgramModule.objects.get_or_create(  # type: ignore[attr-defined]
        program=program,
        module_type=module_type,
        defaults={'is_published': False},
    )
    if created:
        logger.info(f'Enabled {module_type} module on program {program_id}')
    return _module_dict(module)


def toggle_module_publish(ctx: AdminContext, module_id: UUID) -> dict:
    module = ProgramModule.objects.select_related('program').filter(id=module_id).first()  # type: ignore[attr-defined]
    if not module:
        raise NotFoundError('Module not found')
    check_division_access(ctx, module.program.division_id)

    module.is_published = not module.is_published
    module.save(update_fields=['is_published'])
    return _module_dict(module)


def _module_dict(module: ProgramModule) -> dict:
    return {
        'id': module.id,
        'program_id': module.program_id,
        'module_type': module.module_type,
        'is_published': module.is_published,
    }


# =============================================================================
# Announcements and advertisements
# =============================================================================

def _clean_content(data: dict, title_required: bool) -> dict:
    title = clean_optional(data.get('title'))
    if title_required and not title:
        raise ValidationError('Title is required')
    return {
        'title': title,
        'description': clean_optional(data.get('description')),
        'poster_url': clean_optional(data.get('poster_url')),
        'video_url': clean_optional(data.get('video_url')),
        'is_published': bool(data.get('is_published', False)),
    }


def _content_dict(item) -> dict:
    return {
        'id': item.id,
        'program_id': item.program_id,
        'title': item.title,
        'description': item.description,
        'poster_url': item.poster_url,
        'video_url': item.video_url,
        'is_published': item.is_published,
        'created_at': item.created_at,
    }


def _get_scoped_content(ctx: AdminContext, kind: str, item_id: UUID):
    model = CONTENT_MODELS[kind]
    item = model.objects.select_related('program').filter(id=item_id).first()
    if not item:
        raise NotFoundError(f'{kind.capitalize()} not found')
    check_division_access(ctx, item.program.division_id)
    return item


def create_content(ctx: AdminContext, kind: str, program_id: UUID, data: dict) -> dict:
    """
    Create an announcement or advertisement.

    Announcements require a title; advertisements do not.
    """
    values = _clean_content(data, title_required=kind == 'announcement')
    program = get_scoped_program(ctx, program_id)
    item = CONTENT_MODELS[kind].objects.create(program=program, **values)
    return _content_dict(item)


def update_content(ctx: AdminContext, kind: str, item_id: UUID, data: dict) -> dict:
    values = _clean_content(data, title_required=kind == 'announcement')
    item = _get_scoped_content(ctx, kind, item_id)
    for key, value in values.items():
        setattr(item, key, value)
    item.save(update_fields=list(values))
    return _content_dict(item)


def delete_content(ctx: AdminContext, kind: str, item_id: UUID) -> None:
    item = _get_scoped_content(ctx, kind, item_id)
    item.delete()


def toggle_content_publish(ctx: AdminContext, kind: str, item_id: UUID) -> dict:
    item = _get_scoped_content(ctx, kind, item_id)
    item.is_published = not item.is_published
    item.save(update_fields=['is_published'])
    return _content_dict(item)

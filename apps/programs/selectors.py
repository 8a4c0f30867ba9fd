"""
Program Selectors

Query functions for programs, their modules and module content.
"""
from uuid import UUID

from django.db.models import Count

from apps.core.context import AdminContext
from apps.core.models import (
    Division,
    Program,
    ProgramAdvertisement,
    ProgramAnnouncement,
    ProgramModule,
)

CONTENT_FIELDS = ('id', 'program_id', 'title', 'description', 'poster_url', 'video_url', 'is_published', 'created_at')


def _module_rows(program_ids: list) -> dict[str, list[dict]]:
    by_program: dict[str, list[dict]] = {}
    rows = (
        ProgramModule.objects  # type: ignore[attr-defined]
        .filter(program_id__in=program_ids)
        .order_by('created_at')
        .values('id', 'program_id', 'module_type', 'is_published')
    )
    for row in rows:
        by_program.setdefault(str(row['program_id']), []).append(row)
    return by_program


def _program_dict(program: Program, modules: list[dict]) -> dict:
    return {
        'id': program.id,
        'name': program.name,
        'description': program.description,
        'start_date': program.start_date,
        'end_date': program.end_date,
        'all_panchayaths': program.all_panchayaths,
        'is_active': program.is_active,
        'created_at': program.created_at,
        'division_id': program.division_id,
        'division': (
            {'name': program.division.name, 'color': program.division.color}
            if program.division else None
        ),
        'panchayath_id': program.panchayath_id,
        'panchayath': {'name': program.panchayath.name} if program.panchayath else None,
        'modules': [
            {'id': m['id'], 'module_type': m['module_type'], 'is_published': m['is_published']}
            for m in modules
        ],
    }


def list_public_divisions() -> list[dict]:
    """Active divisions ordered by name."""
    return list(
        Division.objects  # type: ignore[attr-defined]
        .filter(is_active=True)
        .order_by('name')
        .values('id', 'name', 'color')
    )


def list_public_programs(division_name: str | None = None) -> list[dict]:
    """
    Active programs with at least one published module, newest first.

    Args:
        division_name: Optional case-insensitive division name filter
            ("all" or empty means no filter)
    """
    qs = (
        Program.objects  # type: ignore[attr-defined]
        .filter(is_active=True)
        .select_related('division', 'panchayath')
        .order_by('-created_at')
    )
    if division_name and division_name.lower() != 'all':
        qs = qs.filter(division__name__iexact=division_name)

    programs = list(qs)
    modules = _module_rows([p.id for p in programs])

    result = []
    for program in programs:
        program_modules = modules.get(str(program.id), [])
        if any(m['is_published'] for m in program_modules):
            result.append(_program_dict(program, program_modules))
    return result


def list_admin_programs(ctx: AdminContext) -> list[dict]:
    """Programs within the admin's division scope, newest first."""
    if not ctx.has_scope:
        return []

    qs = (
        Program.objects  # type: ignore[attr-defined]
        .select_related('division', 'panchayath')
        .annotate(registration_count=Count('registrations'))
        .order_by('-created_at')
    )
    division_ids = ctx.division_filter
    if division_ids is not None:
        qs = qs.filter(division_id__in=division_ids)

    programs = list(qs)
    modules = _module_rows([p.id for p in programs])

    result = []
    for program in programs:
        data = _program_dict(program, modules.get(str(program.id), []))
        data['registration_count'] = program.registration_count
        result.append(data)
    return result


def get_program(program_id: UUID) -> Program | None:
    return (
        Program.objects  # type: ignore[attr-defined]
        .select_related('division', 'panchayath')
        .filter(id=program_id)
        .first()
    )


def get_program_detail(program: Program) -> dict:
    """
    Full admin view of a program: modules, announcements, advertisements
    and the registration count.
    """
    data = _program_dict(program, _module_rows([program.id]).get(str(program.id), []))
    data['announcements'] = list_announcements(program.id)
    data['advertisements'] = list_advertisements(program.id)
    data['registration_count'] = program.registrations.count()
    return data


def list_announcements(program_id: UUID) -> list[dict]:
    return list(
        ProgramAnnouncement.objects  # type: ignore[attr-defined]
        .filter(program_id=program_id)
        .order_by('-created_at')
        .values(*CONTENT_FIELDS)
    )


def list_advertisements(program_id: UUID) -> list[dict]:
    return list(
        ProgramAdvertisement.objects  # type: ignore[attr-defined]
        .filter(program_id=program_id)
        .order_by('-created_at')
        .values(*CONTENT_FIELDS)
    )

"""
Dashboard Selectors

Independent table reads used by the statistics aggregators. Each function
reads one table snapshot so they can run concurrently.
"""
from django.db.models import Count, F

from apps.core.context import AdminContext
from apps.core.models import (
    Admin,
    Cluster,
    Division,
    Member,
    Panchayath,
    Profile,
    Program,
    ProgramRegistration,
)


def _scope(qs, ctx: AdminContext):
    division_ids = ctx.division_filter
    if division_ids is not None:
        qs = qs.filter(division_id__in=division_ids)
    return qs


# =============================================================================
# Admin statistics
# =============================================================================

def fetch_scoped_programs(ctx: AdminContext) -> list[dict]:
    """Programs (id, is_active, panchayath_id, all_panchayaths, division_id) in scope."""
    return list(
        _scope(Program.objects.all(), ctx)  # type: ignore[attr-defined]
        .values('id', 'is_active', 'panchayath_id', 'all_panchayaths', 'division_id')
    )


def fetch_scoped_members(ctx: AdminContext) -> list[dict]:
    """Members (id, cluster_id) in scope."""
    return list(
        _scope(Member.objects.all(), ctx)  # type: ignore[attr-defined]
        .values('id', 'cluster_id')
    )


def fetch_active_panchayaths() -> list[dict]:
    return list(
        Panchayath.objects  # type: ignore[attr-defined]
        .filter(is_active=True)
        .order_by('name')
        .values('id', 'name')
    )


def fetch_active_clusters() -> list[dict]:
    """Active clusters with their panchayath name."""
    return list(
        Cluster.objects  # type: ignore[attr-defined]
        .filter(is_active=True)
        .order_by('name')
        .values('id', 'name', panchayath_name=F('panchayath__name'))
    )


def fetch_registrations_for_programs(program_ids: list) -> list[dict]:
    """All registrations for the given programs, newest first."""
    if not program_ids:
        return []
    return list(
        ProgramRegistration.objects  # type: ignore[attr-defined]
        .filter(program_id__in=program_ids)
        .order_by('-created_at')
        .values('id', 'program_id', 'created_at', 'answers')
    )


def fetch_program_names(program_ids: list) -> dict[str, str]:
    """Batched program id -> name lookup."""
    if not program_ids:
        return {}
    rows = Program.objects.filter(id__in=program_ids).values('id', 'name')  # type: ignore[attr-defined]
    return {str(row['id']): row['name'] for row in rows}


# =============================================================================
# Super admin statistics
# =============================================================================

def fetch_admins() -> list[dict]:
    """Admins newest first, with division name."""
    return list(
        Admin.objects  # type: ignore[attr-defined]
        .order_by('-created_at')
        .values('id', 'user_id', 'is_active', 'phone', 'created_at', division_name=F('division__name'))
    )


def fetch_admin_profiles() -> dict[str, dict]:
    """Profiles of every admin user in one query, keyed by user id."""
    rows = (
        Profile.objects  # type: ignore[attr-defined]
        .filter(id__in=Admin.objects.values('user_id'))  # type: ignore[attr-defined]
        .values('id', 'full_name', 'email')
    )
    return {str(row['id']): {'full_name': row['full_name'], 'email': row['email']} for row in rows}


def fetch_divisions() -> list[dict]:
    return list(
        Division.objects  # type: ignore[attr-defined]
        .order_by('name')
        .values('id', 'name', 'description', 'is_active')
    )


def fetch_program_counts_by_division() -> dict[str, int]:
    rows = (
        Program.objects  # type: ignore[attr-defined]
        .filter(division_id__isnull=False)
        .values('division_id')
        .annotate(total=Count('id'))
        .order_by()
    )
    return {str(row['division_id']): row['total'] for row in rows}


def fetch_member_counts_by_division() -> dict[str, int]:
    rows = (
        Member.objects  # type: ignore[attr-defined]
        .filter(division_id__isnull=False)
        .values('division_id')
        .annotate(total=Count('id'))
        .order_by()
    )
    return {str(row['division_id']): row['total'] for row in rows}


def fetch_programs_newest_first() -> list[dict]:
    return list(
        Program.objects  # type: ignore[attr-defined]
        .order_by('-created_at')
        .values('id', 'name', 'is_active', 'created_at')
    )


def count_registrations() -> int:
    return ProgramRegistration.objects.count()  # type: ignore[attr-defined]


def count_members() -> int:
    return Member.objects.count()  # type: ignore[attr-defined]


def fetch_recent_registrations_with_program(limit: int) -> list[dict]:
    return list(
        ProgramRegistration.objects  # type: ignore[attr-defined]
        .order_by('-created_at')
        .values('id', 'created_at', program_name=F('program__name'))[:limit]
    )

"""
Dashboard Services

Statistics aggregation for the admin and super admin dashboards:
- get_admin_stats: division-scoped program/registration/member breakdowns
- get_super_admin_stats: organisation-wide admins, divisions and activity
- toggle_admin_status

Both aggregators fan their independent reads out concurrently and then
combine the snapshots in memory, so the number of queries does not grow with
the number of panchayaths, clusters or divisions. They are all-or-nothing:
any failed read raises StatsUnavailableError and nothing partial is returned.
"""
import logging
from dataclasses import asdict, dataclass, field
from datetime import datetime
from uuid import UUID

from apps.core.concurrency import CancellationToken, OperationCancelled, fetch_concurrently
from apps.core.constants import STATS
from apps.core.context import AdminContext
from apps.core.exceptions import NotFoundError, StatsUnavailableError
from apps.core.models import Admin
from apps.registrations.answers import registrant_name

from . import selectors
from .snapshots import invalidate_stats

logger = logging.getLogger(__name__)

UNKNOWN_PROGRAM = 'Unknown Program'
UNKNOWN_CLUSTER_PANCHAYATH = 'Unknown'


@dataclass
class AdminStats:
    total_programs: int = 0
    active_programs: int = 0
    total_registrations: int = 0
    total_members: int = 0
    panchayath_stats: list[dict] = field(default_factory=list)
    cluster_stats: list[dict] = field(default_factory=list)
    recent_registrations: list[dict] = field(default_factory=list)

    def to_dict(self) -> dict:
        return asdict(self)


@dataclass
class SuperAdminStats:
    total_admins: int = 0
    active_admins: int = 0
    total_divisions: int = 0
    active_divisions: int = 0
    total_programs: int = 0
    active_programs: int = 0
    total_registrations: int = 0
    total_members: int = 0
    admins: list[dict] = field(default_factory=list)
    divisions: list[dict] = field(default_factory=list)
    recent_activity: list[dict] = field(default_factory=list)

    def to_dict(self) -> dict:
        return asdict(self)


def _run_phase(tasks: dict, cancel_token: CancellationToken | None, label: str) -> dict:
    """Run one fetch phase; any failure becomes StatsUnavailableError."""
    try:
        return fetch_concurrently(tasks, cancel_token=cancel_token)
    except OperationCancelled:
        raise
    except Exception as e:
        logger.error(f'{label} failed: {e}')
        raise StatsUnavailableError(f'Failed to load statistics: {e}') from e


# =============================================================================
# Pure helpers
# =============================================================================

def group_programs_by_panchayath(programs: list[dict], panchayaths: list[dict]) -> dict[str, list[str]]:
    """
    Map panchayath id -> program ids that apply to it.

    A program applies to its own panchayath, or to every known panchayath
    when flagged all_panchayaths. Each program appears at most once per
    panchayath.
    """
    by_panchayath: dict[str, list[str]] = {}

    def add(panchayath_id, program_id):
        program_ids = by_panchayath.setdefault(str(panchayath_id), [])
        if program_id not in program_ids:
            program_ids.append(program_id)

    for program in programs:
        program_id = str(program['id'])
        if program.get('all_panchayaths'):
            for panchayath in panchayaths:
                add(panchayath['id'], program_id)
        elif program.get('panchayath_id'):
            add(program['panchayath_id'], program_id)

    return by_panchayath


def count_registrations_by_program(registrations: list[dict]) -> dict[str, int]:
    counts: dict[str, int] = {}
    for registration in registrations:
        key = str(registration['program_id'])
        counts[key] = counts.get(key, 0) + 1
    return counts


def build_panchayath_stats(
    panchayaths: list[dict],
    programs_by_panchayath: dict[str, list[str]],
    registrations_by_program: dict[str, int],
) -> list[dict]:
    """
    One row per panchayath that has programs or registrations, sorted by
    registration count descending (ties keep panchayath order).
    """
    stats = []
    for panchayath in panchayaths:
        program_ids = programs_by_panchayath.get(str(panchayath['id']), [])
        registrations = sum(registrations_by_program.get(pid, 0) for pid in program_ids)
        if program_ids or registrations:
            stats.append({
                'id': panchayath['id'],
                'name': panchayath['name'],
                'programs': len(program_ids),
                'registrations': registrations,
            })
    return sorted(stats, key=lambda row: row['registrations'], reverse=True)


def build_cluster_stats(clusters: list[dict], members: list[dict]) -> list[dict]:
    """
    Members per cluster from the already fetched member list. Clusters
    without members are left out.
    """
    members_by_cluster: dict[str, int] = {}
    for member in members:
        if member.get('cluster_id'):
            key = str(member['cluster_id'])
            members_by_cluster[key] = members_by_cluster.get(key, 0) + 1

    stats = []
    for cluster in clusters:
        member_count = members_by_cluster.get(str(cluster['id']), 0)
        if member_count > 0:
            stats.append({
                'id': cluster['id'],
                'name': cluster['name'],
                'members': member_count,
                'panchayath_name': cluster.get('panchayath_name') or UNKNOWN_CLUSTER_PANCHAYATH,
            })
    return sorted(stats, key=lambda row: row['members'], reverse=True)


def build_recent_registrations(
    registrations: list[dict],
    program_names: dict[str, str],
    limit: int | None = None,
) -> list[dict]:
    """
    Display rows for the most recent registrations.

    Args:
        registrations: Registrations already sorted newest first
        program_names: program id -> name
        limit: Defaults to STATS['recent_registrations_limit']
    """
    if limit is None:
        limit = STATS['recent_registrations_limit']
    return [
        {
            'id': registration['id'],
            'program_name': program_names.get(str(registration['program_id'])) or UNKNOWN_PROGRAM,
            'registrant_name': registrant_name(registration.get('answers')),
            'created_at': registration['created_at'],
        }
        for registration in registrations[:limit]
    ]


def merge_recent_activity(
    recent_registrations: list[dict],
    recent_programs: list[dict],
    limit: int | None = None,
) -> list[dict]:
    """Registration and program-creation events, newest first, capped."""
    if limit is None:
        limit = STATS['recent_activity_limit']

    activity = []
    for registration in recent_registrations:
        activity.append({
            'id': registration['id'],
            'type': 'registration',
            'description': f'New registration for "{registration.get("program_name") or UNKNOWN_PROGRAM}"',
            'timestamp': registration['created_at'],
        })
    for program in recent_programs:
        activity.append({
            'id': program['id'],
            'type': 'program',
            'description': f'Program "{program["name"]}" was created',
            'timestamp': program['created_at'],
        })

    activity.sort(key=lambda item: _timestamp_key(item['timestamp']), reverse=True)
    return activity[:limit]


def _timestamp_key(value) -> float:
    if isinstance(value, datetime):
        return value.timestamp()
    if isinstance(value, str):
        return datetime.fromisoformat(value.replace('Z', '+00:00')).timestamp()
    return 0.0


# =============================================================================
# Admin statistics
# =============================================================================

def get_admin_stats(ctx: AdminContext, cancel_token: CancellationToken | None = None) -> AdminStats:
    """
    Division-scoped dashboard statistics.

    Phase 1 reads programs, members, panchayaths and clusters concurrently.
    Phase 2 reads registrations for the scoped programs. Recent rows need
    one more batched program-name lookup.

    Raises:
        StatsUnavailableError: any read failed
        OperationCancelled: cancel_token was cancelled between phases
    """
    if not ctx.has_scope:
        logger.info(f'Admin {ctx.user_id} has no division; returning empty stats')
        return AdminStats()

    phase1 = _run_phase({
        'programs': lambda: selectors.fetch_scoped_programs(ctx),
        'members': lambda: selectors.fetch_scoped_members(ctx),
        'panchayaths': selectors.fetch_active_panchayaths,
        'clusters': selectors.fetch_active_clusters,
    }, cancel_token, 'Admin stats phase 1')

    programs = phase1['programs']
    members = phase1['members']
    panchayaths = phase1['panchayaths']

    program_ids = [program['id'] for program in programs]
    phase2 = _run_phase({
        'registrations': lambda: selectors.fetch_registrations_for_programs(program_ids),
    }, cancel_token, 'Admin stats registrations')
    registrations = phase2['registrations']

    recent = registrations[:STATS['recent_registrations_limit']]
    recent_program_ids = list(dict.fromkeys(registration['program_id'] for registration in recent))
    phase3 = _run_phase({
        'program_names': lambda: selectors.fetch_program_names(recent_program_ids),
    }, cancel_token, 'Admin stats program names')

    programs_by_panchayath = group_programs_by_panchayath(programs, panchayaths)
    registrations_by_program = count_registrations_by_program(registrations)

    return AdminStats(
        total_programs=len(programs),
        active_programs=sum(1 for program in programs if program['is_active']),
        total_registrations=len(registrations),
        total_members=len(members),
        panchayath_stats=build_panchayath_stats(panchayaths, programs_by_panchayath, registrations_by_program),
        cluster_stats=build_cluster_stats(phase1['clusters'], members),
        recent_registrations=build_recent_registrations(recent, phase3['program_names']),
    )


# =============================================================================
# Super admin statistics
# =============================================================================

def get_super_admin_stats(ctx: AdminContext, cancel_token: CancellationToken | None = None) -> SuperAdminStats:
    """
    Organisation-wide statistics for super admins.

    Every read is independent and runs in a single concurrent phase; per
    division counts come from grouped queries.
    """
    if not ctx.is_super_admin:
        logger.warning(f'Super admin stats requested by non super admin {ctx.user_id}')

    data = _run_phase({
        'admins': selectors.fetch_admins,
        'profiles': selectors.fetch_admin_profiles,
        'divisions': selectors.fetch_divisions,
        'program_counts': selectors.fetch_program_counts_by_division,
        'member_counts': selectors.fetch_member_counts_by_division,
        'programs': selectors.fetch_programs_newest_first,
        'registration_count': selectors.count_registrations,
        'member_count': selectors.count_members,
        'recent_registrations': lambda: selectors.fetch_recent_registrations_with_program(
            STATS['super_admin_recent_registrations']
        ),
    }, cancel_token, 'Super admin stats')

    profiles = data['profiles']
    admins = [
        {
            'id': admin['id'],
            'user_id': admin['user_id'],
            'is_active': admin['is_active'],
            'phone': admin['phone'],
            'created_at': admin['created_at'],
            'division': {'name': admin['division_name']} if admin['division_name'] else None,
            'profile': profiles.get(str(admin['user_id'])),
        }
        for admin in data['admins']
    ]

    divisions = [
        {
            'id': division['id'],
            'name': division['name'],
            'description': division['description'],
            'is_active': division['is_active'],
            'program_count': data['program_counts'].get(str(division['id']), 0),
            'member_count': data['member_counts'].get(str(division['id']), 0),
        }
        for division in data['divisions']
    ]

    programs = data['programs']
    recent_programs = programs[:STATS['super_admin_recent_programs']]

    return SuperAdminStats(
        total_admins=len(admins),
        active_admins=sum(1 for admin in admins if admin['is_active']),
        total_divisions=len(divisions),
        active_divisions=sum(1 for division in divisions if division['is_active']),
        total_programs=len(programs),
        active_programs=sum(1 for program in programs if program['is_active']),
        total_registrations=data['registration_count'],
        total_members=data['member_count'],
        admins=admins,
        divisions=divisions,
        recent_activity=merge_recent_activity(data['recent_registrations'], recent_programs),
    )


def toggle_admin_status(admin_id: UUID) -> dict:
    """
    Flip an admin's is_active flag.

    Raises:
        NotFoundError: admin does not exist
    """
    admin = Admin.objects.filter(id=admin_id).first()  # type: ignore[attr-defined]
    if not admin:
        raise NotFoundError('Admin not found')

    admin.is_active = not admin.is_active
    admin.save(update_fields=['is_active'])
    invalidate_stats()
    logger.info(f'Admin {admin_id} is_active set to {admin.is_active}')
    return {'id': admin.id, 'is_active': admin.is_active}

"""
Pennyekart Agent Selectors

Query functions for agent data following the selector pattern.
"""
from uuid import UUID

from django.db.models import F

from apps.core.models import Panchayath, PennyekartAgent

AGENT_FIELDS = (
    'id',
    'name',
    'mobile',
    'role',
    'parent_agent_id',
    'panchayath_id',
    'ward',
    'customer_count',
    'is_active',
    'created_at',
)


def list_agents(
    panchayath_id: UUID | None = None,
    role: str | None = None,
    is_active: bool | None = None,
) -> list[dict]:
    """
    Get agents with their panchayath name, oldest first.

    Args:
        panchayath_id: Optional panchayath filter
        role: Optional role filter
        is_active: Optional active flag filter

    Returns:
        List of agent dictionaries with `panchayath_name`
    """
    qs = PennyekartAgent.objects.order_by('created_at', 'name')  # type: ignore[attr-defined]

    if panchayath_id:
        qs = qs.filter(panchayath_id=panchayath_id)
    if role:
        qs = qs.filter(role=role)
    if is_active is not None:
        qs = qs.filter(is_active=is_active)

    return list(qs.values(*AGENT_FIELDS, panchayath_name=F('panchayath__name')))


def get_agent(agent_id: UUID) -> dict | None:
    """Get a single agent by ID with its panchayath name."""
    return (
        PennyekartAgent.objects  # type: ignore[attr-defined]
        .filter(id=agent_id)
        .values(*AGENT_FIELDS, panchayath_name=F('panchayath__name'))
        .first()
    )


def get_agent_parent_links() -> list[dict]:
    """All (id, parent_agent_id) pairs, used for cycle checks."""
    return list(
        PennyekartAgent.objects.values('id', 'parent_agent_id')  # type: ignore[attr-defined]
    )


def get_panchayath_names() -> list[dict]:
    """All panchayaths as {id, name}, by name."""
    return list(
        Panchayath.objects.order_by('name').values('id', 'name')  # type: ignore[attr-defined]
    )

"""
Pennyekart Agent Services

Business logic for agent create/update. All validation happens before the
database is touched.
"""
import logging
from uuid import UUID

from django.db import transaction

from apps.core.constants import AGENT_ROLES, LEAF_AGENT_ROLE
from apps.core.exceptions import NotFoundError, ValidationError
from apps.core.models import Panchayath, PennyekartAgent
from apps.core.utils import clean_optional

from .hierarchy import validate_parent_assignment
from .selectors import get_agent, get_agent_parent_links

logger = logging.getLogger(__name__)

EDITABLE_FIELDS = ('name', 'mobile', 'role', 'parent_agent_id', 'panchayath_id', 'ward', 'customer_count', 'is_active')


def _parse_optional_uuid(value, field_name: str) -> UUID | None:
    if value in (None, ''):
        return None
    try:
        return UUID(str(value))
    except ValueError as err:
        raise ValidationError(f'Invalid {field_name} format') from err


def _parse_customer_count(value) -> int:
    if value in (None, ''):
        return 0
    try:
        count = int(value)
    except (TypeError, ValueError) as err:
        raise ValidationError('customer_count must be a whole number') from err
    if count < 0:
        raise ValidationError('customer_count cannot be negative')
    return count


def _clean_agent_data(data: dict, current: dict | None = None) -> dict:
    """
    Merge the request data over the current row and validate the result.

    Returns the full set of editable values.
    """
    merged = dict(current or {})
    for key in EDITABLE_FIELDS:
        if key in data:
            merged[key] = data[key]

    name = clean_optional(merged.get('name'))
    mobile = clean_optional(merged.get('mobile'))
    if not name:
        raise ValidationError('name is required')
    if not mobile:
        raise ValidationError('mobile is required')

    role = merged.get('role')
    if role not in AGENT_ROLES:
        raise ValidationError(
            f"Invalid role. Must be one of: {', '.join(AGENT_ROLES)}",
            details={'role': role},
        )

    panchayath_id = _parse_optional_uuid(merged.get('panchayath_id'), 'panchayath_id')
    if panchayath_id and not Panchayath.objects.filter(id=panchayath_id).exists():  # type: ignore[attr-defined]
        raise ValidationError('Panchayath not found')

    customer_count = _parse_customer_count(merged.get('customer_count'))
    if role != LEAF_AGENT_ROLE:
        customer_count = 0

    return {
        'name': name,
        'mobile': mobile,
        'role': role,
        'parent_agent_id': _parse_optional_uuid(merged.get('parent_agent_id'), 'parent_agent_id'),
        'panchayath_id': panchayath_id,
        'ward': clean_optional(merged.get('ward')) or 'N/A',
        'customer_count': customer_count,
        'is_active': bool(merged.get('is_active', True)),
    }


@transaction.atomic
def create_agent(data: dict) -> dict:
    """
    Create a Pennyekart agent.

    Args:
        data: name, mobile, role required; parent_agent_id, panchayath_id,
            ward, customer_count, is_active optional

    Returns:
        The created agent dictionary
    """
    values = _clean_agent_data(data)
    validate_parent_assignment(None, values['parent_agent_id'], get_agent_parent_links())

    agent = PennyekartAgent.objects.create(**values)  # type: ignore[attr-defined]
    logger.info(f'Created agent {agent.id} ({values["role"]})')
    return get_agent(agent.id)


@transaction.atomic
def update_agent(agent_id: UUID, data: dict) -> dict:
    """
    Partially update a Pennyekart agent.

    Raises:
        NotFoundError: agent does not exist
        ValidationError: invalid values or a parent cycle
    """
    current = get_agent(agent_id)
    if not current:
        raise NotFoundError('Agent not found')

    values = _clean_agent_data(data, current)
    validate_parent_assignment(agent_id, values['parent_agent_id'], get_agent_parent_links())

    PennyekartAgent.objects.filter(id=agent_id).update(**values)  # type: ignore[attr-defined]
    logger.info(f'Updated agent {agent_id}')
    return get_agent(agent_id)

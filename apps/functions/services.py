"""
Location Services for the admin-locations proxy

List, create and update panchayaths and clusters.
"""
import logging
from uuid import UUID

from apps.core.exceptions import NotFoundError, ValidationError
from apps.core.models import Cluster, Panchayath
from apps.core.utils import clean_optional
from apps.dashboard.snapshots import invalidate_stats

logger = logging.getLogger(__name__)

PANCHAYATH_FIELDS = ('id', 'name', 'is_active', 'created_at')
CLUSTER_FIELDS = ('id', 'name', 'panchayath_id', 'is_active', 'created_at')


def _parse_uuid(value, field_name: str) -> UUID:
    try:
        return UUID(str(value))
    except (TypeError, ValueError) as err:
        raise ValidationError(f'Invalid {field_name}') from err


def _panchayath_dict(panchayath: Panchayath) -> dict:
    return {field: getattr(panchayath, field) for field in PANCHAYATH_FIELDS}


def _cluster_dict(cluster: Cluster) -> dict:
    data = {field: getattr(cluster, field) for field in CLUSTER_FIELDS}
    data['panchayath'] = {'name': cluster.panchayath.name} if cluster.panchayath else None
    return data


def _clean_location(data: dict, partial: bool) -> dict:
    values = {}
    if 'name' in data or not partial:
        name = clean_optional(data.get('name'))
        if not name:
            raise ValidationError('name is required')
        values['name'] = name
    if 'is_active' in data:
        values['is_active'] = bool(data['is_active'])
    return values


# =============================================================================
# Panchayaths
# =============================================================================

def list_panchayaths() -> list[dict]:
    return list(Panchayath.objects.order_by('name').values(*PANCHAYATH_FIELDS))  # type: ignore[attr-defined]


def create_panchayath(data: dict) -> dict:
    values = _clean_location(data, partial=False)
    panchayath = Panchayath.objects.create(**values)  # type: ignore[attr-defined]
    invalidate_stats()
    logger.info(f'Created panchayath {panchayath.id}')
    return _panchayath_dict(panchayath)


def update_panchayath(data: dict) -> dict:
    panchayath_id = _parse_uuid(data.get('id'), 'id')
    values = _clean_location(data, partial=True)

    panchayath = Panchayath.objects.filter(id=panchayath_id).first()  # type: ignore[attr-defined]
    if not panchayath:
        raise NotFoundError('Panchayath not found')

    for key, value in values.items():
        setattr(panchayath, key, value)
    if values:
        panchayath.save(update_fields=list(values))
        invalidate_stats()
    return _panchayath_dict(panchayath)


# =============================================================================
# Clusters
# =============================================================================

def list_clusters() -> list[dict]:
    clusters = Cluster.objects.select_related('panchayath').order_by('name')  # type: ignore[attr-defined]
    return [_cluster_dict(cluster) for cluster in clusters]


def _clean_cluster(data: dict, partial: bool) -> dict:
    values = _clean_location(data, partial)
    if 'panchayath_id' in data or not partial:
        raw = data.get('panchayath_id')
        if raw in (None, ''):
            values['panchayath_id'] = None
        else:
            panchayath_id = _parse_uuid(raw, 'panchayath_id')
            if not Panchayath.objects.filter(id=panchayath_id).exists():  # type: ignore[attr-defined]
                raise ValidationError('Panchayath not found')
            values['panchayath_id'] = panchayath_id
    return values


def create_cluster(data: dict) -> dict:
    values = _clean_cluster(data, partial=False)
    cluster = Cluster.objects.create(**values)  # type: ignore[attr-defined]
    invalidate_stats()
    logger.info(f'Created cluster {cluster.id}')
    return _cluster_dict(Cluster.objects.select_related('panchayath').get(id=cluster.id))  # type: ignore[attr-defined]


def update_cluster(data: dict) -> dict:
    cluster_id = _parse_uuid(data.get('id'), 'id')
    values = _clean_cluster(data, partial=True)

    cluster = Cluster.objects.filter(id=cluster_id).first()  # type: ignore[attr-defined]
    if not cluster:
        raise NotFoundError('Cluster not found')

    for key, value in values.items():
        setattr(cluster, key, value)
    if values:
        cluster.save(update_fields=list(values))
        invalidate_stats()
    return _cluster_dict(Cluster.objects.select_related('panchayath').get(id=cluster.id))  # type: ignore[attr-defined]


LOCATION_HANDLERS = {
    ('panchayaths', 'list'): list_panchayaths,
    ('panchayaths', 'create'): create_panchayath,
    ('panchayaths', 'update'): update_panchayath,
    ('clusters', 'list'): list_clusters,
    ('clusters', 'create'): create_cluster,
    ('clusters', 'update'): update_cluster,
}

"""
Cached statistics snapshots.

Snapshots are stored under versioned keys. Any write that changes what the
dashboards count calls invalidate_stats(), which bumps the shared version so
every cached snapshot is retired at once and computations still in flight
stop at their next phase boundary.
"""
import functools
import logging

from django.conf import settings
from django.core.cache import cache

from apps.core.concurrency import CancellationToken, GenerationTracker, OperationCancelled

logger = logging.getLogger(__name__)

STATS_VERSION_KEY = 'dashboard:stats_version'
SUPER_ADMIN_STATS = 'dashboard:super_admin_stats'

# A superseded computation restarts; the last attempt runs to completion
MAX_ATTEMPTS = 3

stats_generations = GenerationTracker()


def admin_stats_name(scope_key: str) -> str:
    return f'dashboard:admin_stats:{scope_key}'


def stats_version() -> int:
    version = cache.get(STATS_VERSION_KEY)
    if version is None:
        cache.add(STATS_VERSION_KEY, 1, None)
        version = cache.get(STATS_VERSION_KEY, 1)
    return version


def invalidate_stats() -> None:
    """Retire every cached snapshot and supersede running computations."""
    try:
        cache.incr(STATS_VERSION_KEY)
    except ValueError:
        cache.set(STATS_VERSION_KEY, stats_version() + 1, None)
    logger.debug('Statistics snapshots invalidated')


def _snapshot_key(name: str, version: int) -> str:
    return f'{name}:v{version}'


def _is_stale(name: str, generation: int, version: int) -> bool:
    return not stats_generations.is_current(name, generation) or stats_version() != version


def load_stats_snapshot(name: str, compute, refresh: bool = False) -> dict:
    """
    Return the cached snapshot for name, computing it when missing or when
    refresh is requested.

    compute receives a CancellationToken that trips once a newer computation
    for the same name starts or the data is invalidated. A tripped
    computation is restarted and may pick up the snapshot the newer one
    published instead.
    """
    attempt = 0
    while True:
        version = stats_version()
        key = _snapshot_key(name, version)

        if not refresh or attempt:
            cached = cache.get(key)
            if cached is not None:
                return cached

        generation = stats_generations.begin(name)
        is_stale = functools.partial(_is_stale, name, generation, version)
        token = None if attempt >= MAX_ATTEMPTS - 1 else CancellationToken(is_stale=is_stale)

        try:
            snapshot = compute(token).to_dict()
        except OperationCancelled:
            if token is None:
                raise
            logger.info(f'Stats computation for {name} superseded, restarting')
            attempt += 1
            continue

        if not is_stale():
            cache.set(key, snapshot, getattr(settings, 'STATS_CACHE_TIMEOUT', 60))
        else:
            logger.debug(f'Discarding superseded stats snapshot for {name}')
        return snapshot

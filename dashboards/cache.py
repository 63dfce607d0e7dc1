"""
Dashboard cache keys.

KPI payloads are cached per farm and season. Every key carries the farm's
version number, so bumping the version invalidates all of a farm's
dashboard entries at once.
"""

import logging

from django.conf import settings
from django.core.cache import cache

logger = logging.getLogger(__name__)

VERSION_TTL = 60 * 60 * 24 * 30


def _version_key(farm_id):
    return f"dashboard:version:{farm_id}"


def get_farm_version(farm_id) -> int:
    version = cache.get(_version_key(farm_id))
    if version is None:
        version = 1
        cache.set(_version_key(farm_id), version, timeout=VERSION_TTL)
    return version


def kpi_cache_key(farm_id, season_id) -> str:
    return f"dashboard:kpis:{farm_id}:{season_id}:v{get_farm_version(farm_id)}"


def get_cached_kpis(farm_id, season_id):
    return cache.get(kpi_cache_key(farm_id, season_id))


def set_cached_kpis(farm_id, season_id, data):
    cache.set(kpi_cache_key(farm_id, season_id), data, timeout=settings.CACHE_TTL)


def invalidate_farm_dashboard(farm_id):
    """Drop every cached dashboard payload of a farm."""
    if not farm_id:
        return
    key = _version_key(farm_id)
    try:
        cache.incr(key)
    except ValueError:
        # key expired or never set
        cache.set(key, 2, timeout=VERSION_TTL)
    logger.debug(f"Dashboard cache invalidated for farm {farm_id}")

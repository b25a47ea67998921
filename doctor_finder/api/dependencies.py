"""
Shared FastAPI dependencies.

Everything a route needs from outside the request (store, clock, caches)
is provided here so tests can swap it through ``app.dependency_overrides``.
"""

from __future__ import annotations

from datetime import datetime
from functools import lru_cache
from typing import Callable

from doctor_finder.config import get_settings
from doctor_finder.db import DatabaseClient, get_db
from doctor_finder.services.distance import DistanceCache

Clock = Callable[[], datetime]


def get_database() -> DatabaseClient:
    return get_db()


def get_clock() -> Clock:
    """Clinic-local wall clock. Naive datetimes, server local time."""
    return datetime.now


@lru_cache(maxsize=1)
def get_distance_cache() -> DistanceCache:
    """Process-wide distance cache sized from settings."""
    settings = get_settings()
    return DistanceCache(
        max_entries=settings.distance_cache_max_entries,
        ttl_seconds=settings.distance_cache_ttl_seconds,
        symmetric_keys=settings.distance_cache_symmetric_keys,
    )

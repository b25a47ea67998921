"""
Distance Service.

Great-circle distance between a patient and a clinic, memoized per
coordinate pair. The cache is an owned object handed to whoever needs
it (the API gets one through a dependency) rather than module state.
"""

from __future__ import annotations

import math
import threading
import time
from collections import OrderedDict
from typing import Callable, Optional

from doctor_finder.errors import CoordinateError
from doctor_finder.logging_config import get_logger
from doctor_finder.schemas.doctor import Coordinate

logger = get_logger(__name__)

EARTH_RADIUS_MILES = 3958.8

Calculator = Callable[[float, float, float, float], float]


def round_half_up(value: float, places: int = 1) -> float:
    """Round half away from zero for non-negative values (``2.25 -> 2.3``)."""
    factor = 10 ** places
    return math.floor(value * factor + 0.5) / factor


def haversine_miles(lat1: float, lng1: float, lat2: float, lng2: float) -> float:
    """Haversine distance in miles, rounded half-up to one decimal."""
    d_lat = math.radians(lat2 - lat1)
    d_lng = math.radians(lng2 - lng1)
    a = (
        math.sin(d_lat / 2) ** 2
        + math.cos(math.radians(lat1)) * math.cos(math.radians(lat2)) * math.sin(d_lng / 2) ** 2
    )
    # float error can push a just past 1 for antipodal points
    a = min(1.0, max(0.0, a))
    c = 2 * math.atan2(math.sqrt(a), math.sqrt(1 - a))
    return round_half_up(EARTH_RADIUS_MILES * c)


def _check_finite(point: Coordinate, name: str) -> None:
    # model_construct() and duck-typed callers bypass pydantic validation
    for axis in ("lat", "lng"):
        value = getattr(point, axis, None)
        if isinstance(value, bool) or not isinstance(value, (int, float)) or not math.isfinite(value):
            raise CoordinateError(f"{name}.{axis}", f"expected a finite number, got {value!r}")


def cache_key(patient: Coordinate, clinic: Coordinate, symmetric: bool = False) -> str:
    """
    Build the memo key for a coordinate pair.

    The default key is order-sensitive, patient first. With ``symmetric``
    the two points are sorted first so (A, B) and (B, A) share one entry.
    """
    # + 0.0 folds -0.0 into 0.0 so both render the same key
    first = (patient.lat + 0.0, patient.lng + 0.0)
    second = (clinic.lat + 0.0, clinic.lng + 0.0)
    if symmetric and second < first:
        first, second = second, first
    return f"{first[0]},{first[1]}-{second[0]},{second[1]}"


class DistanceCache:
    """
    Thread-safe memo of patient-to-clinic distances.

    Bounded by ``max_entries`` (least recently used entries are evicted
    first) and optionally by ``ttl_seconds``. Values are computed outside
    the lock; two racing misses for one key both compute and the last
    store wins, which is harmless because the computation is pure.
    """

    def __init__(
        self,
        max_entries: int = 10_000,
        ttl_seconds: Optional[float] = None,
        symmetric_keys: bool = False,
        calculator: Calculator = haversine_miles,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        if max_entries < 1:
            raise ValueError("max_entries must be at least 1")
        self.max_entries = max_entries
        self.ttl_seconds = ttl_seconds
        self.symmetric_keys = symmetric_keys
        self._calculator = calculator
        self._clock = clock
        self._entries: OrderedDict[str, tuple[float, float]] = OrderedDict()
        self._lock = threading.Lock()
        self.hits = 0
        self.misses = 0

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)

    def __contains__(self, key: object) -> bool:
        with self._lock:
            return key in self._entries

    def _is_expired(self, stored_at: float) -> bool:
        return self.ttl_seconds is not None and self._clock() - stored_at > self.ttl_seconds

    def distance(
        self,
        patient: Optional[Coordinate],
        clinic: Optional[Coordinate],
    ) -> Optional[float]:
        """
        Distance in miles between two points, or None if either is missing.

        Raises:
            CoordinateError: a coordinate component is NaN or infinite.
        """
        if patient is None or clinic is None:
            return None

        _check_finite(patient, "patient")
        _check_finite(clinic, "clinic")
        key = cache_key(patient, clinic, symmetric=self.symmetric_keys)

        with self._lock:
            entry = self._entries.get(key)
            if entry is not None and not self._is_expired(entry[1]):
                self._entries.move_to_end(key)
                self.hits += 1
                return entry[0]
            self.misses += 1

        miles = self._calculator(patient.lat, patient.lng, clinic.lat, clinic.lng)

        with self._lock:
            self._entries[key] = (miles, self._clock())
            self._entries.move_to_end(key)
            evicted = 0
            while len(self._entries) > self.max_entries:
                self._entries.popitem(last=False)
                evicted += 1

        if evicted:
            logger.debug("distance_cache_evicted", evicted=evicted, size=self.max_entries)
        return miles

    def clear(self) -> None:
        """Drop every cached entry and reset the hit/miss counters."""
        with self._lock:
            self._entries.clear()
            self.hits = 0
            self.misses = 0

    def cleanup_expired(self) -> int:
        """Remove expired entries. Returns how many were removed."""
        if self.ttl_seconds is None:
            return 0
        with self._lock:
            expired = [key for key, (_, stored_at) in self._entries.items() if self._is_expired(stored_at)]
            for key in expired:
                del self._entries[key]
        return len(expired)


def distance_miles(
    patient: Optional[Coordinate],
    clinic: Optional[Coordinate],
    cache: Optional[DistanceCache] = None,
) -> Optional[float]:
    """
    Patient-to-clinic distance, memoized through ``cache`` when given.

    Without a cache the distance is computed directly with the same
    missing-input and validation rules.
    """
    if cache is not None:
        return cache.distance(patient, clinic)
    if patient is None or clinic is None:
        return None
    _check_finite(patient, "patient")
    _check_finite(clinic, "clinic")
    return haversine_miles(patient.lat, patient.lng, clinic.lat, clinic.lng)


def format_distance(miles: Optional[float]) -> str:
    """Display label such as ``"12.3 mi"``; empty when unknown."""
    if miles is None:
        return ""
    return f"{miles:.1f} mi"

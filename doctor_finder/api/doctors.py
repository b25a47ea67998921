"""
API Router — Doctor Directory Endpoints.

Search, availability and distance lookups for the patient-facing
directory. Routes fetch plain data from the store and hand it to the
services; domain errors are mapped to HTTP status codes here.
"""

from __future__ import annotations

from typing import Any, Optional

from fastapi import APIRouter, Depends, HTTPException, Query

from doctor_finder.api.dependencies import Clock, get_clock, get_database, get_distance_cache
from doctor_finder.config import get_settings
from doctor_finder.db import DatabaseClient
from doctor_finder.errors import DataSourceError, MalformedInputError
from doctor_finder.logging_config import bind_doctor, get_logger
from doctor_finder.schemas.availability import AvailabilitySummary
from doctor_finder.schemas.doctor import Coordinate, DoctorRecord, SearchFilters, SearchResult
from doctor_finder.services.availability import format_next_available, next_available
from doctor_finder.services.distance import DistanceCache, format_distance
from doctor_finder.services.search import run_search

logger = get_logger(__name__)
router = APIRouter(prefix="/doctors", tags=["Doctors"])


def _malformed(e: MalformedInputError) -> HTTPException:
    return HTTPException(status_code=422, detail={"field": e.field, "error": e.message})


def _unavailable(e: DataSourceError) -> HTTPException:
    return HTTPException(status_code=502, detail=f"Document store error during {e.operation}")


async def _load_doctor(db: DatabaseClient, doctor_id: str) -> DoctorRecord:
    bind_doctor(doctor_id)
    try:
        doctor = await db.get_doctor(doctor_id)
    except DataSourceError as e:
        raise _unavailable(e)
    if doctor is None:
        raise HTTPException(status_code=404, detail="Doctor not found")
    return doctor


@router.get("/search", response_model=SearchResult)
async def search(
    query: str = "",
    insurance: Optional[str] = None,
    city: Optional[str] = None,
    specialty: Optional[str] = None,
    db: DatabaseClient = Depends(get_database),
) -> SearchResult:
    """Search doctors by free text and exact-match filters."""
    filters = SearchFilters(insurance=insurance or None, city=city or None, specialty=specialty or None)

    try:
        records = await db.list_doctors(insurance=filters.insurance, city=filters.city)
        return run_search(records, query, filters, limit=get_settings().search_result_limit)
    except DataSourceError as e:
        raise _unavailable(e)
    except MalformedInputError as e:
        logger.warning("search_malformed_input", field=e.field, error=e.message)
        raise _malformed(e)


@router.get("/{doctor_id}", response_model=DoctorRecord)
async def get_doctor(
    doctor_id: str,
    db: DatabaseClient = Depends(get_database),
) -> DoctorRecord:
    """Get a single doctor record."""
    return await _load_doctor(db, doctor_id)


@router.get("/{doctor_id}/availability", response_model=AvailabilitySummary)
async def get_availability(
    doctor_id: str,
    db: DatabaseClient = Depends(get_database),
    clock: Clock = Depends(get_clock),
) -> AvailabilitySummary:
    """Upcoming open slots and the next bookable one."""
    await _load_doctor(db, doctor_id)

    try:
        raw = await db.get_availability(doctor_id)
        calendar, slot = next_available(raw, clock(), cutoff_hour=get_settings().workday_cutoff_hour)
    except DataSourceError as e:
        raise _unavailable(e)
    except MalformedInputError as e:
        logger.error("availability_malformed", field=e.field, error=e.message)
        raise _malformed(e)

    return AvailabilitySummary(
        doctor_id=doctor_id,
        calendar=calendar,
        next_available=slot,
        next_available_text=format_next_available(slot),
    )


@router.get("/{doctor_id}/distance")
async def get_distance(
    doctor_id: str,
    lat: float = Query(ge=-90.0, le=90.0, allow_inf_nan=False),
    lng: float = Query(ge=-180.0, le=180.0, allow_inf_nan=False),
    db: DatabaseClient = Depends(get_database),
    cache: DistanceCache = Depends(get_distance_cache),
) -> dict[str, Any]:
    """Miles from the patient's position to the doctor's clinic."""
    doctor = await _load_doctor(db, doctor_id)

    try:
        miles = cache.distance(Coordinate(lat=lat, lng=lng), doctor.coordinates)
    except MalformedInputError as e:
        raise _malformed(e)

    return {
        "doctor_id": doctor_id,
        "distance_miles": miles,
        "distance_text": format_distance(miles),
    }

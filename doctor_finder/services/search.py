"""
Search Service.

Matches doctor records against structured filters (insurance, city,
specialty) and a free-text query, and derives the filter menu options
from the records actually present.
"""

from __future__ import annotations

from typing import Iterable, Iterator, Optional, Sequence

from doctor_finder.errors import RecordShapeError
from doctor_finder.logging_config import get_logger
from doctor_finder.schemas.doctor import DoctorRecord, FilterOptions, SearchFilters, SearchResult

logger = get_logger(__name__)

# Scalar fields checked by the free-text query, in display order.
TEXT_FIELDS = (
    "first_name",
    "last_name",
    "city",
    "clinic_name",
    "degree",
    "specialty",
    "state",
    "street_address",
    "zip_code",
)

# Array fields checked entry by entry.
LIST_FIELDS = ("accepted_insurances", "spoken_languages")


def _checked(records: Sequence[DoctorRecord]) -> Sequence[DoctorRecord]:
    for index, record in enumerate(records):
        if record is None:
            raise RecordShapeError(f"records[{index}]", "expected a doctor record, got None")
    return records


def _searchable_values(record: DoctorRecord) -> Iterator[str]:
    for name in TEXT_FIELDS:
        value = getattr(record, name)
        if value:
            yield value
    for name in LIST_FIELDS:
        for value in getattr(record, name):
            if value:
                yield value


def is_blank_query(query: Optional[str]) -> bool:
    """Empty or whitespace-only queries match everything."""
    return not (query or "").strip()


def matches_query(record: DoctorRecord, query: str) -> bool:
    """True if any searchable field contains ``query``, ignoring case."""
    needle = query.casefold()
    return any(needle in value.casefold() for value in _searchable_values(record))


def matches_filters(record: DoctorRecord, filters: SearchFilters) -> bool:
    """True if the record passes every set filter."""
    if filters.insurance and filters.insurance not in record.accepted_insurances:
        return False
    if filters.city and record.city != filters.city:
        return False
    if filters.specialty and record.specialty != filters.specialty:
        return False
    return True


def apply_filters(
    records: Sequence[DoctorRecord],
    filters: Optional[SearchFilters] = None,
) -> list[DoctorRecord]:
    """Keep the records that pass all structured filters."""
    records = _checked(records)
    if filters is None or filters.is_empty:
        return list(records)
    return [record for record in records if matches_filters(record, filters)]


def search_doctors(
    records: Sequence[DoctorRecord],
    query: Optional[str] = "",
    filters: Optional[SearchFilters] = None,
) -> list[DoctorRecord]:
    """
    Apply structured filters, then the free-text query.

    A blank query with no filters returns the records unchanged, in
    their original order. A non-blank query is matched as given,
    surrounding spaces included.
    """
    filtered = apply_filters(records, filters)
    if is_blank_query(query):
        return filtered
    return [record for record in filtered if matches_query(record, query)]


def _distinct(values: Iterable[Optional[str]]) -> list[str]:
    return sorted({value for value in values if value})


def distinct_filter_values(records: Sequence[DoctorRecord]) -> FilterOptions:
    """Collect the insurances, cities and specialties present in ``records``."""
    records = _checked(records)
    return FilterOptions(
        insurances=_distinct(ins for record in records for ins in record.accepted_insurances),
        cities=_distinct(record.city for record in records),
        specialties=_distinct(record.specialty for record in records),
    )


def run_search(
    records: Sequence[DoctorRecord],
    query: Optional[str] = "",
    filters: Optional[SearchFilters] = None,
    limit: Optional[int] = None,
) -> SearchResult:
    """
    Full search used by the API.

    Filter options come from the structurally filtered base set, so they
    depend on the records and filters but not on the query text.
    """
    base = apply_filters(records, filters)
    options = distinct_filter_values(base)

    matched = search_doctors(base, query)

    logger.info(
        "doctor_search_completed",
        candidates=len(records),
        after_filters=len(base),
        matched=len(matched),
        has_query=not is_blank_query(query),
    )
    return SearchResult(
        doctors=matched[:limit] if limit is not None else matched,
        total=len(matched),
        filter_options=options,
    )

"""
Supabase Database Client.

Provides a singleton instance of the Supabase client and typed helper methods
for reading doctor records and availability calendars. The core never writes
through this client; it only supplies plain data to the services.
"""

from __future__ import annotations

from typing import Any, Optional

from supabase import Client, create_client

from doctor_finder.config import get_settings
from doctor_finder.errors import CalendarParseError, DataSourceError
from doctor_finder.logging_config import get_logger
from doctor_finder.schemas.availability import AvailabilityCalendar
from doctor_finder.schemas.doctor import DoctorRecord

logger = get_logger(__name__)

USERS_TABLE = "users"
AVAILABILITY_TABLE = "availability"
DOCTOR_ROLE = "doctor"


class DatabaseClient:
    """Wrapper around the official Supabase Python client."""

    _instance: Optional[DatabaseClient] = None
    _client: Client

    def __new__(cls) -> DatabaseClient:
        """Singleton pattern to ensure only one client instance."""
        if cls._instance is None:
            instance = super().__new__(cls)
            settings = get_settings()

            if not settings.supabase_url or not settings.supabase_service_key:
                logger.warning(
                    "Supabase credentials missing. Database operations will fail.",
                    url=bool(settings.supabase_url),
                    key=bool(settings.supabase_service_key),
                )

            try:
                instance._client = create_client(
                    settings.supabase_url,
                    settings.supabase_service_key,
                )
                logger.info("Supabase client initialized", url=settings.supabase_url)
            except Exception as e:
                logger.error("Failed to initialize Supabase client", error=str(e))
                raise DataSourceError("connect", str(e)) from e

            cls._instance = instance

        return cls._instance

    @property
    def client(self) -> Client:
        """Access the raw Supabase client."""
        return self._client

    async def list_doctors(
        self,
        insurance: str | None = None,
        city: str | None = None,
    ) -> list[DoctorRecord]:
        """
        Fetch every doctor, narrowing by insurance and city in the store.

        Specialty and free-text matching happen in the search service.
        """
        try:
            query = self.client.table(USERS_TABLE).select("*").eq("role", DOCTOR_ROLE)
            if insurance:
                query = query.contains("acceptedInsurances", [insurance])
            if city:
                query = query.eq("city", city)
            response = query.execute()
        except Exception as e:
            logger.error("list_doctors_error", insurance=insurance, city=city, error=str(e))
            raise DataSourceError("list_doctors", str(e)) from e

        return [DoctorRecord.model_validate(row) for row in response.data or []]

    async def get_doctor(self, doctor_id: str) -> DoctorRecord | None:
        """Fetch one doctor by id; None when no such doctor exists."""
        try:
            response = (
                self.client.table(USERS_TABLE)
                .select("*")
                .eq("id", doctor_id)
                .eq("role", DOCTOR_ROLE)
                .limit(1)
                .execute()
            )
        except Exception as e:
            logger.error("get_doctor_error", id=doctor_id, error=str(e))
            raise DataSourceError("get_doctor", str(e)) from e

        if not response.data:
            return None
        return DoctorRecord.model_validate(response.data[0])

    async def get_availability(self, doctor_id: str) -> AvailabilityCalendar:
        """
        Fetch a doctor's raw availability calendar.

        A doctor without an availability row has no open slots, which is
        returned as an empty calendar.
        """
        try:
            response = (
                self.client.table(AVAILABILITY_TABLE)
                .select("calendar")
                .eq("doctor_id", doctor_id)
                .limit(1)
                .execute()
            )
        except Exception as e:
            logger.error("get_availability_error", id=doctor_id, error=str(e))
            raise DataSourceError("get_availability", str(e)) from e

        if not response.data:
            return {}
        return calendar_from_document(response.data[0].get("calendar"))


def calendar_from_document(raw: Any) -> AvailabilityCalendar:
    """
    Check the stored jsonb shape: an object of date -> list of time strings.

    A null column is an empty calendar. Date and time formats are checked
    later by the availability service.
    """
    if raw is None:
        return {}
    if not isinstance(raw, dict):
        raise DataSourceError("get_availability", f"calendar must be an object, got {type(raw).__name__}")

    calendar: AvailabilityCalendar = {}
    for date_key, times in raw.items():
        if times is None:
            times = []
        if not isinstance(times, list) or not all(isinstance(t, str) for t in times):
            raise CalendarParseError(f"calendar[{date_key!r}]", f"expected a list of HH:MM strings, got {times!r}")
        calendar[date_key] = list(times)
    return calendar


# Global accessor
def get_db() -> DatabaseClient:
    return DatabaseClient()

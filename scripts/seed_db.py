"""
Database Seeding Script.

Populates the `users` table with sample doctors and the `availability`
table with their open slots for local testing.
"""

import asyncio
import os
import sys
from datetime import date, timedelta

# Add project root to path so we can import doctor_finder
sys.path.append(os.path.abspath(os.path.join(os.path.dirname(__file__), "..")))

from doctor_finder.db import AVAILABILITY_TABLE, DOCTOR_ROLE, USERS_TABLE, get_db
from doctor_finder.logging_config import setup_logging, get_logger
from doctor_finder.schemas.doctor import DoctorRecord

setup_logging()
logger = get_logger(__name__)

SAMPLE_DOCTORS = [
    {
        "id": "doc-nguyen",
        "firstName": "Linh",
        "lastName": "Nguyen",
        "clinicName": "Denton Family Care",
        "degree": "MD",
        "specialty": "Family Medicine",
        "streetAddress": "101 Hickory St",
        "city": "Denton",
        "state": "TX",
        "zipCode": "76201",
        "acceptedInsurances": ["Aetna", "Cigna"],
        "spokenLanguages": ["English", "Vietnamese"],
        "coordinates": {"lat": 33.2148, "lng": -97.1331},
    },
    {
        "id": "doc-okafor",
        "firstName": "Chidi",
        "lastName": "Okafor",
        "clinicName": "Uptown Heart Institute",
        "degree": "MD",
        "specialty": "Cardiology",
        "streetAddress": "2500 McKinney Ave",
        "city": "Dallas",
        "state": "TX",
        "zipCode": "75201",
        "acceptedInsurances": ["BlueCross", "UnitedHealthcare"],
        "spokenLanguages": ["English", "Igbo"],
        "coordinates": {"lat": 32.7767, "lng": -96.7970},
    },
    {
        "id": "doc-park",
        "firstName": "Soo-jin",
        "lastName": "Park",
        "clinicName": "Lewisville Dermatology",
        "degree": "DO",
        "specialty": "Dermatology",
        "city": "Lewisville",
        "state": "TX",
        "zipCode": "75057",
        "acceptedInsurances": ["Humana", "Molina Healthcare"],
        "spokenLanguages": ["English", "Korean"],
    },
]

DAILY_TIMES = ["09:00", "10:30", "13:00", "15:30"]


def _sample_calendar(days: int = 5) -> dict[str, list[str]]:
    start = date.today()
    return {(start + timedelta(days=offset)).isoformat(): list(DAILY_TIMES) for offset in range(days)}


async def seed():
    db = get_db()

    logger.info("Seeding database...")

    for doctor in SAMPLE_DOCTORS:
        # Validate before writing so bad sample data fails here, not at search time
        record = DoctorRecord.model_validate(doctor)

        existing = db.client.table(USERS_TABLE).select("id").eq("id", record.id).execute()

        if existing.data:
            logger.info(f"Skipping {record.display_name} (already exists)")
            continue

        result = db.client.table(USERS_TABLE).insert({**doctor, "role": DOCTOR_ROLE}).execute()
        if not result.data:
            logger.error(f"Failed to create {record.display_name}")
            continue

        db.client.table(AVAILABILITY_TABLE).insert(
            {"doctor_id": record.id, "calendar": _sample_calendar()}
        ).execute()
        logger.info(f"Created {record.display_name}", id=record.id)

    logger.info("Seeding complete.")

if __name__ == "__main__":
    asyncio.run(seed())

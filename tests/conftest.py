"""Shared test fixtures."""
from datetime import datetime

import pytest

from doctor_finder.schemas.doctor import DoctorRecord


DOCTOR_DOCUMENTS = [
    {
        "id": "doc-1",
        "role": "doctor",
        "firstName": "Maria",
        "lastName": "Lopez",
        "clinicName": "Uptown Heart Institute",
        "degree": "MD",
        "specialty": "Cardiology",
        "streetAddress": "2500 McKinney Ave",
        "city": "Dallas",
        "state": "TX",
        "zipCode": "75201",
        "acceptedInsurances": ["Cigna", "Aetna"],
        "spokenLanguages": ["English", "Spanish"],
        "coordinates": {"lat": 32.7767, "lng": -96.7970},
    },
    {
        "id": "doc-2",
        "role": "doctor",
        "firstName": "James",
        "lastName": "Chen",
        "clinicName": "Denton Family Care",
        "degree": "DO",
        "specialty": "Family Medicine",
        "city": "Denton",
        "state": "TX",
        "zipCode": "76201",
        "acceptedInsurances": ["BlueCross", "Humana"],
        "spokenLanguages": ["English", "Mandarin"],
    },
    {
        "id": "doc-3",
        "role": "doctor",
        "firstName": "Aisha",
        "lastName": "Rahman",
        "clinicName": "Dallas Skin Center",
        "degree": "MD",
        "specialty": "Dermatology",
        "city": "Dallas",
        "state": "TX",
        "acceptedInsurances": ["UnitedHealthcare", "Aetna"],
        "spokenLanguages": ["English", "Bengali"],
    },
    {
        "id": "doc-4",
        "role": "doctor",
        "firstName": "Tom",
        # Sparse record: most fields missing
    },
]


@pytest.fixture
def doctors() -> list[DoctorRecord]:
    """Doctor records as the store would supply them."""
    return [DoctorRecord.model_validate(doc) for doc in DOCTOR_DOCUMENTS]


@pytest.fixture
def now() -> datetime:
    """A fixed clinic-local instant: Monday 2025-03-10 11:30."""
    return datetime(2025, 3, 10, 11, 30)

"""
Core data models for doctor records and directory search.
"""

from typing import Optional

from pydantic import BaseModel, ConfigDict, Field


class Coordinate(BaseModel):
    """A point in decimal degrees."""
    model_config = ConfigDict(frozen=True)

    lat: float = Field(ge=-90.0, le=90.0, allow_inf_nan=False)
    lng: float = Field(ge=-180.0, le=180.0, allow_inf_nan=False)


class DoctorRecord(BaseModel):
    """
    Searchable snapshot of a doctor document.

    Field names follow Python conventions; the camelCase names used by the
    document store are accepted as aliases and used when serializing with
    ``by_alias=True``. Any scalar may be absent.
    """
    model_config = ConfigDict(frozen=True, populate_by_name=True, extra="ignore")

    id: Optional[str] = None
    first_name: Optional[str] = Field(default=None, alias="firstName")
    last_name: Optional[str] = Field(default=None, alias="lastName")
    clinic_name: Optional[str] = Field(default=None, alias="clinicName")
    degree: Optional[str] = None
    specialty: Optional[str] = None
    street_address: Optional[str] = Field(default=None, alias="streetAddress")
    city: Optional[str] = None
    state: Optional[str] = None
    zip_code: Optional[str] = Field(default=None, alias="zipCode")
    accepted_insurances: tuple[str, ...] = Field(default=(), alias="acceptedInsurances")
    spoken_languages: tuple[str, ...] = Field(default=(), alias="spokenLanguages")
    coordinates: Optional[Coordinate] = None

    @property
    def display_name(self) -> str:
        return " ".join(part for part in (self.first_name, self.last_name) if part)


class SearchFilters(BaseModel):
    """Structured exact-match selections. ``None`` means unset."""
    model_config = ConfigDict(frozen=True)

    insurance: Optional[str] = None
    city: Optional[str] = None
    specialty: Optional[str] = None

    @property
    def is_empty(self) -> bool:
        return not (self.insurance or self.city or self.specialty)


class FilterOptions(BaseModel):
    """Distinct values available for the filter menus."""
    insurances: list[str] = Field(default_factory=list)
    cities: list[str] = Field(default_factory=list)
    specialties: list[str] = Field(default_factory=list)


class SearchResult(BaseModel):
    """Matched doctors plus the filter menu options for the current base set."""
    doctors: list[DoctorRecord]
    total: int
    filter_options: FilterOptions

"""Show-related Pydantic schemas."""

import datetime
from uuid import UUID

from pydantic import BaseModel, Field, field_validator
from pydantic_core import PydanticCustomError

VENUE_MAX_LENGTH = 150
CITY_MAX_LENGTH = 150
COUNTRY_MAX_LENGTH = 100


def _require_text(value: str | None, label: str, max_length: int) -> str:
    if value is None or not value.strip():
        raise PydanticCustomError("required", f"required|The {label} is required.")
    if len(value) > max_length:
        raise PydanticCustomError(
            "maxlength",
            f"maxlength|The {label} shouldn't have more than {max_length} characters.",
        )
    return value


class Show(BaseModel):
    """Show summary returned inside tour representations."""

    id: UUID = Field(..., description="Unique show ID")
    date: datetime.date = Field(..., description="Show date (ISO 8601)")
    venue: str = Field(..., description="Venue name")
    city: str = Field(..., description="City")
    country: str = Field(..., description="Country")


class ShowForCreation(BaseModel):
    """Show supplied inline when creating a tour."""

    date: datetime.date | None = Field(None, validate_default=True, description="Show date (ISO 8601)")
    venue: str | None = Field(None, validate_default=True, description="Venue name")
    city: str | None = Field(None, validate_default=True, description="City")
    country: str | None = Field(None, validate_default=True, description="Country")

    @field_validator("date")
    @classmethod
    def validate_date(cls, v: datetime.date | None) -> datetime.date:
        if v is None:
            raise PydanticCustomError("required", "required|The show date is required.")
        return v

    @field_validator("venue")
    @classmethod
    def validate_venue(cls, v: str | None) -> str:
        return _require_text(v, "venue", VENUE_MAX_LENGTH)

    @field_validator("city")
    @classmethod
    def validate_city(cls, v: str | None) -> str:
        return _require_text(v, "city", CITY_MAX_LENGTH)

    @field_validator("country")
    @classmethod
    def validate_country(cls, v: str | None) -> str:
        return _require_text(v, "country", COUNTRY_MAX_LENGTH)

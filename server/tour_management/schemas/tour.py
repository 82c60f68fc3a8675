"""Tour-related Pydantic schemas.

Read representations share the Tour base and add estimated profits and/or
shows. Write shapes share TourForManipulationBase, whose validators report
failures as ``validator|message`` so clients can tell which rule failed.
"""

import datetime
from decimal import Decimal
from uuid import UUID

from pydantic import BaseModel, Field, computed_field, field_validator, model_validator
from pydantic_core import PydanticCustomError

from .show import Show, ShowForCreation

NAME_MAX_LENGTH = 200
# Bounds of the Numeric(14, 2) estimated_profits column
PROFITS_MAX = Decimal("999999999999.99")
PROFITS_PLACES = Decimal("0.01")
DESCRIPTION_MAX_LENGTH = 2000


# Read representations

class Tour(BaseModel):
    """Base tour representation."""

    id: UUID = Field(..., description="Unique tour ID")
    name: str = Field(..., description="Tour name")
    description: str | None = Field(None, description="Tour description")
    start_date: datetime.date = Field(..., description="First day of the tour (ISO 8601)")
    end_date: datetime.date = Field(..., description="Last day of the tour (ISO 8601)")
    manager_id: UUID = Field(..., description="Manager running the tour")

    @computed_field
    @property
    def duration_days(self) -> int:
        """Number of calendar days the tour spans, both ends included."""
        return (self.end_date - self.start_date).days + 1


class TourWithEstimatedProfits(Tour):
    """Tour representation including estimated profits."""

    estimated_profits: float = Field(..., description="Estimated profits of the tour")


class TourWithShows(Tour):
    """Tour representation including its shows."""

    shows: list[Show] = Field(default_factory=list, description="Shows ordered by date")


class TourWithEstimatedProfitsAndShows(TourWithEstimatedProfits):
    """Tour representation including estimated profits and shows."""

    shows: list[Show] = Field(default_factory=list, description="Shows ordered by date")


# Write shapes

class TourForManipulationBase(BaseModel):
    """Fields and rules shared by tour creation and update."""

    name: str | None = Field(None, validate_default=True, description="Tour name")
    description: str | None = Field(None, description="Tour description")
    start_date: datetime.date | None = Field(None, validate_default=True, description="First day (ISO 8601)")
    end_date: datetime.date | None = Field(None, validate_default=True, description="Last day (ISO 8601)")

    @field_validator("name")
    @classmethod
    def validate_name(cls, v: str | None) -> str:
        if v is None or not v.strip():
            raise PydanticCustomError("required", "required|The name is required.")
        if len(v) > NAME_MAX_LENGTH:
            raise PydanticCustomError(
                "maxlength",
                f"maxlength|The name shouldn't have more than {NAME_MAX_LENGTH} characters.",
            )
        return v

    @field_validator("description")
    @classmethod
    def validate_description_length(cls, v: str | None) -> str | None:
        if v is not None and len(v) > DESCRIPTION_MAX_LENGTH:
            raise PydanticCustomError(
                "maxlength",
                f"maxlength|The description shouldn't have more than {DESCRIPTION_MAX_LENGTH} characters.",
            )
        return v

    @field_validator("start_date")
    @classmethod
    def validate_start_date(cls, v: datetime.date | None) -> datetime.date:
        if v is None:
            raise PydanticCustomError("required", "required|The start date is required.")
        return v

    @field_validator("end_date")
    @classmethod
    def validate_end_date(cls, v: datetime.date | None) -> datetime.date:
        if v is None:
            raise PydanticCustomError("required", "required|The end date is required.")
        return v

    @model_validator(mode="after")
    def validate_start_date_before_end_date(self):
        if self.start_date > self.end_date:
            raise PydanticCustomError(
                "startdatebeforeenddate",
                "startdatebeforeenddate|The start date should be before the end date.",
            )
        return self


class TourForCreation(TourForManipulationBase):
    """Minimal creation payload; the fallback manager is assigned."""

    estimated_profits: Decimal = Field(Decimal("0"), description="Estimated profits of the tour")

    @field_validator("estimated_profits")
    @classmethod
    def validate_estimated_profits(cls, v: Decimal) -> Decimal:
        if v < 0:
            raise PydanticCustomError("range", "range|The estimated profits can't be negative.")
        if v > PROFITS_MAX:
            raise PydanticCustomError(
                "range", f"range|The estimated profits can't be more than {PROFITS_MAX}."
            )
        if v != v.quantize(PROFITS_PLACES):
            raise PydanticCustomError(
                "range", "range|The estimated profits can't have more than two decimal places."
            )
        return v


class TourWithManagerForCreation(TourForCreation):
    """Creation payload naming the manager."""

    manager_id: UUID | None = Field(None, description="Manager running the tour")


class TourWithShowsForCreation(TourForCreation):
    """Creation payload with shows created alongside the tour."""

    shows: list[ShowForCreation] = Field(default_factory=list, description="Shows of the tour")


class TourWithManagerAndShowsForCreation(TourWithManagerForCreation):
    """Creation payload naming the manager and carrying shows."""

    shows: list[ShowForCreation] = Field(default_factory=list, description="Shows of the tour")


class TourForUpdate(TourForManipulationBase):
    """Mutable subset of a tour, the target of patch documents."""

    description: str | None = Field(None, validate_default=True, description="Tour description")

    @field_validator("description")
    @classmethod
    def validate_description_required(cls, v: str | None) -> str:
        if v is None or not v.strip():
            raise PydanticCustomError(
                "required", "required|When updating a tour, the description is required."
            )
        return v

"""Pydantic input models for user-owned resources.

Models validate create/update payloads only. Stored records stay plain dicts so
unknown fields survive and tombstone backups remain verbatim.
"""

from collections.abc import Mapping
from typing import Annotated, Any

from pydantic import AfterValidator, BaseModel, ConfigDict, Field, model_validator
from pydantic.alias_generators import to_camel


def _not_blank(value: str) -> str:
    if not value.strip():
        raise ValueError("must not be blank")
    return value


NonBlankStr = Annotated[str, AfterValidator(_not_blank)]


class ResourceInput(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, extra="allow")

    date: NonBlankStr

    def derived_fields(self, provided: Mapping[str, Any] | None = None) -> dict[str, Any]:
        """Fields computed from the payload and stored alongside it.

        `provided` is the raw caller input when it differs from what was
        validated (an update merged over the stored record).
        """
        return {}


class Stop(BaseModel):
    model_config = ConfigDict(extra="allow")

    address: NonBlankStr


class TripInput(ResourceInput):
    start_address: NonBlankStr
    end_address: str | None = None
    title: str | None = None
    stops: list[Stop] = []
    total_miles: float | None = Field(default=None, ge=0)


class MileageInput(ResourceInput):
    miles: float | None = Field(default=None, ge=0)
    start_odometer: float | None = Field(default=None, ge=0)
    end_odometer: float | None = Field(default=None, ge=0)
    vehicle: str | None = None
    trip_id: str | None = Field(default=None, max_length=200)
    notes: str | None = Field(default=None, max_length=1000)
    mileage_rate: float | None = Field(default=None, ge=0)

    @model_validator(mode="after")
    def miles_or_odometers(self) -> "MileageInput":
        has_odometers = self.start_odometer is not None and self.end_odometer is not None
        if has_odometers and self.end_odometer < self.start_odometer:  # type: ignore[operator]
            raise ValueError("endOdometer must not be below startOdometer")
        if self.miles is None and not has_odometers:
            raise ValueError("miles or both odometer readings are required")
        return self

    def derived_fields(self, provided: Mapping[str, Any] | None = None) -> dict[str, Any]:
        miles_given = self.miles is not None if provided is None else provided.get("miles") is not None
        if not miles_given and self.start_odometer is not None and self.end_odometer is not None:
            return {"miles": self.end_odometer - self.start_odometer}
        return {}


class ExpenseInput(ResourceInput):
    category: NonBlankStr
    amount: float = Field(..., ge=0)
    description: str | None = None

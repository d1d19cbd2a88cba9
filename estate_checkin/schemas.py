"""Pydantic schemas shared across the event, participant and check-in packages."""
from datetime import datetime, timezone
from enum import Enum
from typing import Annotated

from pydantic import AfterValidator, BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


def ensure_utc(value: datetime) -> datetime:
    """Naive datetimes are taken as UTC; aware ones are converted to UTC."""
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


UTCDateTime = Annotated[datetime, AfterValidator(ensure_utc)]


class CamelModel(BaseModel):
    """Base model speaking camelCase on the wire, snake_case in Python."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        from_attributes=True,
    )


class CheckInStatus(str, Enum):
    """Current check-in state of a participant within one event."""
    unset = "unset"
    success = "success"
    failed = "failed"


class AttendanceStatus(str, Enum):
    """Outcome of one check-in attempt."""
    success = "success"
    failed = "failed"


class Coordinates(CamelModel):
    """Geographic point (decimal degrees)."""
    lat: float = Field(..., ge=-90, le=90, description="Latitude")
    lng: float = Field(..., ge=-180, le=180, description="Longitude")


class LocationData(CamelModel):
    """A device position fix."""
    latitude: float = Field(..., ge=-90, le=90, description="Latitude")
    longitude: float = Field(..., ge=-180, le=180, description="Longitude")
    accuracy: float = Field(0.0, ge=0, description="Accuracy in meters")
    timestamp: UTCDateTime = Field(default_factory=utcnow, description="Capture instant")

"""Pydantic schemas for the check-in flow."""
from enum import Enum
from typing import Optional

from pydantic import Field, field_validator, model_validator

from estate_checkin.checkin.location import LocationErrorKind
from estate_checkin.events.schemas import EventParticipant
from estate_checkin.participants.schemas import normalize_email
from estate_checkin.schemas import AttendanceStatus, CamelModel, LocationData


class CheckInState(str, Enum):
    """Steps of one check-in attempt."""
    idle = "idle"
    locating_requested = "locating_requested"
    location_acquired = "location_acquired"
    location_failed = "location_failed"
    completed = "completed"


class ParticipantIdentity(CamelModel):
    """Who is checking in: a known participant id, or an email for walk-up guests."""

    participant_id: Optional[str] = Field(None, description="Participant ID")
    email: Optional[str] = Field(None, description="Email address")
    name: Optional[str] = Field(None, description="Name (optional, walk-up guests)")

    @field_validator("email")
    @classmethod
    def validate_email(cls, v):
        if v is None or not v.strip():
            return None
        return normalize_email(v)

    @model_validator(mode="after")
    def require_identity(self):
        if not self.participant_id and not self.email:
            raise ValueError("Either participantId or email is required")
        return self


class CheckInRequest(ParticipantIdentity):
    """Body of ``POST /events/{id}/check-in``."""

    location_data: Optional[LocationData] = Field(
        None, description="Position captured by the device, null when unavailable"
    )
    location_error: Optional[LocationErrorKind] = Field(
        None, description="Why the device could not provide a position"
    )
    location_error_message: Optional[str] = None

    def identity(self) -> ParticipantIdentity:
        return ParticipantIdentity(
            participant_id=self.participant_id, email=self.email, name=self.name
        )


class CheckInResult(CamelModel):
    """Outcome of a completed check-in attempt."""

    participant: EventParticipant
    status: AttendanceStatus
    state: CheckInState = CheckInState.completed
    warning: Optional[str] = None
    distance_km: Optional[float] = None
    within_window: bool = True


class ResolveResponse(CamelModel):
    event_id: str

"""Pydantic schemas for events."""
from typing import List, Optional
from enum import Enum

from pydantic import ConfigDict, Field, field_validator, model_validator

from estate_checkin.participants.schemas import Participant
from estate_checkin.schemas import (
    AttendanceStatus,
    CamelModel,
    CheckInStatus,
    Coordinates,
    LocationData,
    UTCDateTime,
    utcnow,
)


class EventType(str, Enum):
    """Event type enumeration."""
    property = "property"      # property viewing
    client = "client"          # client meeting
    contract = "contract"      # contract signing
    internal = "internal"      # internal meeting
    followup = "followup"      # follow-up


class EventStatus(str, Enum):
    """Event status enumeration."""
    scheduled = "scheduled"
    pending = "pending"
    completed = "completed"
    cancelled = "cancelled"


class Reminders(CamelModel):
    """Reminder channels requested for an event."""
    email: bool = False
    sms: bool = False
    push: bool = False


class CheckInWindow(CamelModel):
    """Interval during which the check-in code is considered valid."""
    window_start: UTCDateTime
    window_end: UTCDateTime


class AttendanceRecord(CamelModel):
    """One check-in attempt; immutable once appended to a ledger."""

    id: str
    participant_id: str
    timestamp: UTCDateTime
    status: AttendanceStatus
    location: Optional[LocationData] = None
    error_message: Optional[str] = None

    model_config = ConfigDict(frozen=True)

    @model_validator(mode="after")
    def check_outcome(self):
        if self.status == AttendanceStatus.success and self.location is None:
            raise ValueError("A successful check-in must carry a location")
        if (
            self.status == AttendanceStatus.failed
            and self.location is None
            and not self.error_message
        ):
            raise ValueError("A failed check-in without location needs an error message")
        return self


class EventParticipant(Participant):
    """Participant as seen by one event, with the latest check-in projection."""

    check_in_status: CheckInStatus = CheckInStatus.unset
    check_in_time: Optional[UTCDateTime] = None
    check_in_location: Optional[LocationData] = None
    check_in_error: Optional[str] = None

    @field_validator("check_in_status", mode="before")
    @classmethod
    def legacy_boolean_status(cls, v):
        """Older payloads carry a plain boolean flag."""
        if v is True:
            return CheckInStatus.success
        if v is False or v is None:
            return CheckInStatus.unset
        return v

    def apply(self, record: Optional[AttendanceRecord]) -> "EventParticipant":
        """Return a copy whose projection mirrors ``record`` (or is unset)."""
        if record is None:
            return self.model_copy(
                update={
                    "check_in_status": CheckInStatus.unset,
                    "check_in_time": None,
                    "check_in_location": None,
                    "check_in_error": None,
                }
            )
        return self.model_copy(
            update={
                "check_in_status": CheckInStatus(record.status.value),
                "check_in_time": record.timestamp,
                "check_in_location": record.location,
                "check_in_error": record.error_message,
            }
        )


class EventBase(CamelModel):
    """Base schema for event data."""

    title: str = Field(..., min_length=1, max_length=200, description="Title")
    type: EventType = Field(..., description="Event type")
    start: UTCDateTime = Field(..., description="Scheduled start")
    end: UTCDateTime = Field(..., description="Scheduled end")
    all_day: bool = False
    status: EventStatus = EventStatus.scheduled
    location: str = Field(default="", description="Location text")
    description: Optional[str] = None
    coordinates: Optional[Coordinates] = None
    property_id: Optional[str] = None
    reminders: Reminders = Field(default_factory=Reminders)
    created_by: Optional[str] = None


class EventCreate(EventBase):
    """Schema for creating an event."""

    participants: List[Participant] = Field(default_factory=list)

    @model_validator(mode="after")
    def check_times(self):
        if self.end <= self.start:
            raise ValueError("Event end must be after its start")
        return self


class EventUpdate(CamelModel):
    """Partial update for an event; all fields optional."""

    title: Optional[str] = Field(None, min_length=1, max_length=200)
    type: Optional[EventType] = None
    start: Optional[UTCDateTime] = None
    end: Optional[UTCDateTime] = None
    all_day: Optional[bool] = None
    status: Optional[EventStatus] = None
    location: Optional[str] = None
    description: Optional[str] = None
    coordinates: Optional[Coordinates] = None
    property_id: Optional[str] = None
    reminders: Optional[Reminders] = None
    participants: Optional[List[Participant]] = None

    @field_validator(
        "title", "type", "start", "end", "all_day", "status", "location", "reminders", "participants"
    )
    @classmethod
    def reject_null(cls, v, info):
        """Omit a field to keep it; these cannot be cleared."""
        if v is None:
            raise ValueError(f"{info.field_name} cannot be null")
        return v

    @model_validator(mode="after")
    def check_times(self):
        if self.start and self.end and self.end <= self.start:
            raise ValueError("Event end must be after its start")
        return self


class Event(EventBase):
    """Schema for event response."""

    id: str
    participants: List[EventParticipant] = Field(default_factory=list)
    qr_code: str = ""
    check_in_time_window: CheckInWindow
    attendance_log: List[AttendanceRecord] = Field(default_factory=list)
    created_at: UTCDateTime = Field(default_factory=utcnow)
    updated_at: Optional[UTCDateTime] = None

    def find_participant(self, participant_id: str) -> Optional[EventParticipant]:
        for participant in self.participants:
            if participant.id == participant_id:
                return participant
        return None

    def find_participant_by_email(self, email: str) -> Optional[EventParticipant]:
        wanted = email.strip().lower()
        for participant in self.participants:
            if participant.email.lower() == wanted:
                return participant
        return None


class EventListResponse(CamelModel):
    """Schema for event list response."""
    events: List[Event]
    total: int


class QrCodeResponse(CamelModel):
    """Check-in URL of an event and whether the code is currently usable."""
    url: str
    active: bool
    check_in_time_window: CheckInWindow


class DeleteResponse(CamelModel):
    message: str

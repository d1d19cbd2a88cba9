"""Pydantic schemas for participants."""

from enum import Enum
from typing import List, Optional

from pydantic import Field, field_validator

from estate_checkin.schemas import CamelModel


def normalize_email(v: str) -> str:
    v = v.strip()
    if "@" not in v or v.startswith("@") or v.endswith("@"):
        raise ValueError("Invalid email address")
    return v


class ParticipantRole(str, Enum):
    """Participant role enumeration."""
    agent = "agent"
    client = "client"
    admin = "admin"
    other = "other"


class ParticipantBase(CamelModel):
    """Base schema for participant data."""

    name: str = Field(..., min_length=1, max_length=200, description="Full name")
    email: str = Field(..., min_length=3, max_length=254, description="Email address")
    role: ParticipantRole = Field(default=ParticipantRole.other, description="Role")

    @field_validator("name")
    @classmethod
    def validate_name(cls, v):
        """Validate name format."""
        if not v or not v.strip():
            raise ValueError("Name cannot be empty")
        return v.strip()

    @field_validator("email")
    @classmethod
    def validate_email(cls, v):
        """Validate email format."""
        return normalize_email(v)


class ParticipantCreate(ParticipantBase):
    """Schema for creating a participant; the id is generated when omitted."""

    id: Optional[str] = Field(None, description="Participant ID")


class Participant(ParticipantBase):
    """Schema for participant response."""

    id: str


class ParticipantListResponse(CamelModel):
    """Schema for participant list response."""

    participants: List[Participant]
    total: int

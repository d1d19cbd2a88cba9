"""SQLAlchemy models for events, their participants and attendance ledgers."""

from sqlalchemy import (
    Boolean,
    Column,
    DateTime,
    Float,
    ForeignKey,
    Integer,
    String,
    Text,
    UniqueConstraint,
)

from estate_checkin.db import Base


class EventRow(Base):
    """Scheduled event with its derived check-in window and URL."""

    __tablename__ = "events"

    id = Column(String(64), primary_key=True)
    title = Column(String(200), nullable=False)
    type = Column(String(20), nullable=False)
    start = Column(DateTime(timezone=True), nullable=False, index=True)
    end = Column(DateTime(timezone=True), nullable=False)
    all_day = Column(Boolean, default=False, nullable=False)
    status = Column(String(20), nullable=False)
    location = Column(String(255), nullable=False, default="")
    description = Column(Text, nullable=True)
    latitude = Column(Float, nullable=True)
    longitude = Column(Float, nullable=True)
    property_id = Column(
        String(64), ForeignKey("properties.id", ondelete="SET NULL"), nullable=True
    )
    reminder_email = Column(Boolean, default=False, nullable=False)
    reminder_sms = Column(Boolean, default=False, nullable=False)
    reminder_push = Column(Boolean, default=False, nullable=False)
    qr_code = Column(String(512), nullable=False, default="")
    window_start = Column(DateTime(timezone=True), nullable=False)
    window_end = Column(DateTime(timezone=True), nullable=False)
    created_by = Column(String(64), nullable=True)
    created_at = Column(DateTime(timezone=True), nullable=False)
    updated_at = Column(DateTime(timezone=True), nullable=True)


class EventParticipantRow(Base):
    """Participant of one event with the projection of its latest check-in."""

    __tablename__ = "event_participants"
    __table_args__ = (UniqueConstraint("event_id", "participant_id"),)

    id = Column(Integer, primary_key=True, autoincrement=True)
    event_id = Column(
        String(64), ForeignKey("events.id", ondelete="CASCADE"), nullable=False, index=True
    )
    # not a foreign key: walk-up guests only exist within their event
    participant_id = Column(String(64), nullable=False)
    position = Column(Integer, nullable=False, default=0)
    name = Column(String(200), nullable=False)
    email = Column(String(254), nullable=False)
    role = Column(String(20), nullable=False)
    check_in_status = Column(String(20), nullable=False, default="unset")
    check_in_time = Column(DateTime(timezone=True), nullable=True)
    check_in_latitude = Column(Float, nullable=True)
    check_in_longitude = Column(Float, nullable=True)
    check_in_accuracy = Column(Float, nullable=True)
    check_in_captured_at = Column(DateTime(timezone=True), nullable=True)
    check_in_error = Column(Text, nullable=True)


class AttendanceRecordRow(Base):
    """Ledger entry; rows are only ever inserted."""

    __tablename__ = "attendance_records"

    seq = Column(Integer, primary_key=True, autoincrement=True)
    id = Column(String(64), unique=True, nullable=False)
    event_id = Column(
        String(64), ForeignKey("events.id", ondelete="CASCADE"), nullable=False, index=True
    )
    participant_id = Column(String(64), nullable=False, index=True)
    timestamp = Column(DateTime(timezone=True), nullable=False)
    status = Column(String(20), nullable=False)
    latitude = Column(Float, nullable=True)
    longitude = Column(Float, nullable=True)
    accuracy = Column(Float, nullable=True)
    captured_at = Column(DateTime(timezone=True), nullable=True)
    error_message = Column(Text, nullable=True)

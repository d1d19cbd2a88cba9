"""Unit tests for events functionality."""
from datetime import datetime, timedelta, timezone
from unittest.mock import Mock

import pytest
from pydantic import ValidationError

from estate_checkin.errors import EventNotFound, InvalidEventTimes, PropertyNotFound
from estate_checkin.events.schemas import (
    AttendanceRecord,
    EventCreate,
    EventParticipant,
    EventStatus,
    EventType,
    EventUpdate,
)
from estate_checkin.events.window import compute_window, is_within_window
from estate_checkin.participants.schemas import Participant
from estate_checkin.schemas import AttendanceStatus, CheckInStatus, Coordinates, LocationData
from .service import EventService


def utc(*args):
    return datetime(*args, tzinfo=timezone.utc)


class TestEventSchemas:
    """Test cases for event schemas."""

    def test_event_type_enum(self):
        assert EventType.property == "property"
        assert EventType.client == "client"
        assert EventType.contract == "contract"
        assert EventType.internal == "internal"
        assert EventType.followup == "followup"

    def test_event_status_enum(self):
        assert EventStatus.scheduled == "scheduled"
        assert EventStatus.pending == "pending"
        assert EventStatus.completed == "completed"
        assert EventStatus.cancelled == "cancelled"

    def test_event_create_rejects_end_before_start(self):
        """End must be strictly after start."""
        with pytest.raises(ValidationError, match="end must be after its start"):
            EventCreate(
                title="Viewing",
                type=EventType.property,
                start=utc(2024, 6, 1, 11),
                end=utc(2024, 6, 1, 10),
            )

    def test_event_create_accepts_camel_case(self):
        data = EventCreate.model_validate(
            {
                "title": "Signing",
                "type": "contract",
                "start": "2024-06-01T10:00:00Z",
                "end": "2024-06-01T11:00:00Z",
                "allDay": True,
                "propertyId": "prop-1",
            }
        )
        assert data.all_day is True
        assert data.property_id == "prop-1"

    def test_naive_datetimes_are_utc(self):
        data = EventCreate(
            title="Team Meeting",
            type=EventType.internal,
            start=datetime(2024, 6, 1, 10),
            end=datetime(2024, 6, 1, 11),
        )
        assert data.start.tzinfo == timezone.utc

    def test_legacy_boolean_check_in_status(self):
        """A plain ``true`` from older payloads means success."""
        base = {"id": "user-1", "name": "John Smith", "email": "john.smith@example.com"}
        assert EventParticipant(**base, check_in_status=True).check_in_status == CheckInStatus.success
        assert EventParticipant(**base, check_in_status=False).check_in_status == CheckInStatus.unset
        assert EventParticipant(**base).check_in_status == CheckInStatus.unset

    def test_success_record_requires_location(self):
        with pytest.raises(ValidationError):
            AttendanceRecord(
                id="r1",
                participant_id="user-1",
                timestamp=utc(2024, 6, 1, 10),
                status=AttendanceStatus.success,
            )

    def test_failed_record_requires_error_without_location(self):
        with pytest.raises(ValidationError):
            AttendanceRecord(
                id="r1",
                participant_id="user-1",
                timestamp=utc(2024, 6, 1, 10),
                status=AttendanceStatus.failed,
            )

    def test_record_is_immutable(self):
        record = AttendanceRecord(
            id="r1",
            participant_id="user-1",
            timestamp=utc(2024, 6, 1, 10),
            status=AttendanceStatus.failed,
            error_message="Location information is unavailable.",
        )
        with pytest.raises(ValidationError):
            record.status = AttendanceStatus.success


class TestCheckInWindow:
    """Test cases for the check-in window policy."""

    def test_window_is_one_hour_around_event(self):
        window = compute_window(utc(2024, 6, 1, 10), utc(2024, 6, 1, 11))
        assert window.window_start == utc(2024, 6, 1, 9)
        assert window.window_end == utc(2024, 6, 1, 12)

    def test_outside_window_before_start(self):
        window = compute_window(utc(2024, 6, 1, 10), utc(2024, 6, 1, 11))
        assert not is_within_window(utc(2024, 6, 1, 8, 30), window)

    def test_window_bounds_are_inclusive(self):
        window = compute_window(utc(2024, 6, 1, 10), utc(2024, 6, 1, 11))
        assert is_within_window(utc(2024, 6, 1, 9), window)
        assert is_within_window(utc(2024, 6, 1, 12), window)
        assert not is_within_window(utc(2024, 6, 1, 12, 0, 1), window)

    def test_custom_padding(self):
        window = compute_window(
            utc(2024, 6, 1, 10), utc(2024, 6, 1, 11), padding=timedelta(minutes=15)
        )
        assert window.window_start == utc(2024, 6, 1, 9, 45)
        assert window.window_end == utc(2024, 6, 1, 11, 15)


class TestEventService:
    """Test cases for event service."""

    def test_event_service_initialization(self):
        mock_store = Mock()
        service = EventService(mock_store, Mock())
        assert service.store == mock_store
        assert service.repository == mock_store.events

    def test_create_event_derives_window_url_and_ledger(self, event):
        assert event.check_in_time_window.window_start == utc(2024, 6, 1, 9)
        assert event.check_in_time_window.window_end == utc(2024, 6, 1, 12)
        assert event.qr_code == f"https://estate.example.com/event/{event.id}/check-in"
        assert event.attendance_log == []
        assert [p.check_in_status for p in event.participants] == [CheckInStatus.unset] * 2

    def test_create_event_uses_property_coordinates(self, event_service):
        event = event_service.create_event(
            EventCreate(
                title="Viewing: 456 Ocean Avenue",
                type=EventType.property,
                start=utc(2024, 6, 2, 14),
                end=utc(2024, 6, 2, 15),
                property_id="prop-2",
            )
        )
        assert event.coordinates == Coordinates(lat=37.774929, lng=-122.419416)
        assert event.location == "456 Ocean Avenue, San Francisco, CA 94102"

    def test_create_event_unknown_property(self, event_service, event_data):
        with pytest.raises(PropertyNotFound):
            event_service.create_event(event_data.model_copy(update={"property_id": "nope"}))

    def test_update_end_only_moves_window_end(self, event_service, event):
        updated = event_service.update_event(event.id, EventUpdate(end=utc(2024, 6, 1, 12, 30)))
        assert updated.check_in_time_window.window_start == event.check_in_time_window.window_start
        assert updated.check_in_time_window.window_end == utc(2024, 6, 1, 13, 30)
        assert updated.qr_code == event.qr_code
        assert updated.updated_at is not None

    def test_update_without_times_keeps_window(self, event_service, event):
        updated = event_service.update_event(event.id, EventUpdate(title="Open House (rescheduled)"))
        assert updated.check_in_time_window == event.check_in_time_window
        assert updated.title == "Open House (rescheduled)"

    def test_update_rejects_end_before_existing_start(self, event_service, event):
        with pytest.raises(InvalidEventTimes):
            event_service.update_event(event.id, EventUpdate(end=utc(2024, 6, 1, 9)))

    def test_update_backfills_missing_qr_code(self, event_service, store, event):
        store.events.save_event(event.model_copy(update={"qr_code": ""}))
        updated = event_service.update_event(event.id, EventUpdate(status=EventStatus.pending))
        assert updated.qr_code == f"https://estate.example.com/event/{event.id}/check-in"

    def test_update_participants_keeps_projection(self, event_service, store, event):
        checked_in = event.participants[0].model_copy(
            update={
                "check_in_status": CheckInStatus.success,
                "check_in_time": utc(2024, 6, 1, 10, 5),
                "check_in_location": LocationData(latitude=34.0522, longitude=-118.2437),
            }
        )
        store.events.save_participant(event.id, checked_in)

        updated = event_service.update_event(
            event.id,
            EventUpdate(
                participants=[
                    Participant(id="user-1", name="John Smith", email="john.smith@example.com", role="agent"),
                    Participant(id="user-4", name="Sarah Davis", email="sarah.davis@example.com", role="client"),
                ]
            ),
        )
        assert [p.id for p in updated.participants] == ["user-1", "user-4"]
        assert updated.participants[0].check_in_status == CheckInStatus.success
        assert updated.participants[1].check_in_status == CheckInStatus.unset

    def test_readded_participant_gets_ledger_projection(self, event_service, store, event):
        """Dropping and re-adding a participant does not forget their check-ins."""
        store.events.append_record(
            event.id,
            AttendanceRecord(
                id="r1",
                participant_id="user-1",
                timestamp=utc(2024, 6, 1, 10, 5),
                status=AttendanceStatus.success,
                location=LocationData(latitude=34.0522, longitude=-118.2437),
            ),
        )
        john = Participant(id="user-1", name="John Smith", email="john.smith@example.com", role="agent")
        michael = Participant(id="user-3", name="Michael Brown", email="michael.brown@example.com", role="client")

        event_service.update_event(event.id, EventUpdate(participants=[michael]))
        updated = event_service.update_event(event.id, EventUpdate(participants=[michael, john]))

        readded = updated.find_participant("user-1")
        assert readded.check_in_status == CheckInStatus.success
        assert readded.check_in_time == utc(2024, 6, 1, 10, 5)
        assert updated.find_participant("user-3").check_in_status == CheckInStatus.unset

    def test_update_schema_rejects_null_start(self):
        with pytest.raises(ValidationError, match="start cannot be null"):
            EventUpdate.model_validate({"start": None})

    def test_update_schema_allows_clearing_optional_fields(self):
        update = EventUpdate.model_validate({"description": None, "coordinates": None})
        assert update.model_fields_set == {"description", "coordinates"}

    def test_update_unknown_event(self, event_service):
        with pytest.raises(EventNotFound):
            event_service.update_event("missing", EventUpdate(title="x"))

    def test_delete_event_discards_ledger(self, event_service, store, event):
        store.events.append_record(
            event.id,
            AttendanceRecord(
                id="r1",
                participant_id="user-1",
                timestamp=utc(2024, 6, 1, 10, 5),
                status=AttendanceStatus.failed,
                error_message="Location information is unavailable.",
            ),
        )
        event_service.delete_event(event.id)
        assert store.events.get_event(event.id) is None
        assert store.events.list_records(event.id) == []
        with pytest.raises(EventNotFound):
            event_service.delete_event(event.id)

    def test_list_events_by_range(self, event_service, event, event_data):
        later = event_service.create_event(
            event_data.model_copy(
                update={"start": utc(2024, 6, 8, 10), "end": utc(2024, 6, 8, 11)}
            )
        )
        in_range = event_service.list_events(start=utc(2024, 6, 1), end=utc(2024, 6, 2))
        assert [e.id for e in in_range] == [event.id]
        assert {e.id for e in event_service.list_events()} == {event.id, later.id}

    def test_nearby_events(self, event_service, event):
        near = event_service.nearby_events(Coordinates(lat=34.0530, lng=-118.2437))
        far = event_service.nearby_events(Coordinates(lat=37.774929, lng=-122.419416))
        assert [e.id for e in near] == [event.id]
        assert far == []

    def test_qr_code_active_only_inside_window(self, event_service, event, clock):
        assert event_service.get_qr_code(event.id).active is True
        clock.advance(hours=3)
        info = event_service.get_qr_code(event.id)
        assert info.active is False
        assert info.url == event.qr_code

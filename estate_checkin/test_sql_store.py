"""Tests for the SQLAlchemy store on in-memory SQLite."""
import asyncio
from datetime import datetime, timezone

import pytest

from estate_checkin.checkin.location import SubmittedLocation
from estate_checkin.checkin.protocol import CheckInProtocol
from estate_checkin.checkin.schemas import ParticipantIdentity
from estate_checkin.events.schemas import AttendanceRecord, EventParticipant, EventUpdate
from estate_checkin.events.service import EventService
from estate_checkin.schemas import AttendanceStatus, CheckInStatus, LocationData
from estate_checkin.seed import SAMPLE_PARTICIPANTS, SAMPLE_PROPERTIES, seed_store
from estate_checkin.sql_store import SqlStore


def utc(*args):
    return datetime(*args, tzinfo=timezone.utc)


@pytest.fixture
def sql_store():
    store = SqlStore.from_url("sqlite://")
    seed_store(store)
    yield store
    store.close()


@pytest.fixture
def sql_event(sql_store, app_settings, clock, event_data):
    return EventService(sql_store, app_settings, clock=clock).create_event(event_data)


def failed_record(record_id, participant_id, minute):
    return AttendanceRecord(
        id=record_id,
        participant_id=participant_id,
        timestamp=utc(2024, 6, 1, 10, minute),
        status=AttendanceStatus.failed,
        error_message="Location information is unavailable.",
    )


class TestSqlDirectory:
    def test_seed_loads_sample_data(self, sql_store):
        assert len(sql_store.participants.list_participants()) == len(SAMPLE_PARTICIPANTS)
        assert len(sql_store.properties.list_properties()) == len(SAMPLE_PROPERTIES)

    def test_seed_is_idempotent(self, sql_store):
        seed_store(sql_store)
        assert len(sql_store.participants.list_participants()) == len(SAMPLE_PARTICIPANTS)

    def test_property_round_trip(self, sql_store):
        prop = sql_store.properties.get_property("prop-2")
        assert prop.full_address == "456 Ocean Avenue, San Francisco, CA 94102"
        assert prop.coordinates.lat == pytest.approx(37.774929)


class TestSqlEventRepository:
    """Test cases for events persisted through SQLAlchemy."""

    def test_event_round_trip(self, sql_store, sql_event):
        loaded = sql_store.events.get_event(sql_event.id)
        assert loaded.title == "Open House"
        assert loaded.start == utc(2024, 6, 1, 10)
        assert loaded.start.tzinfo is not None
        assert loaded.check_in_time_window == sql_event.check_in_time_window
        assert loaded.qr_code == sql_event.qr_code
        assert [p.id for p in loaded.participants] == ["user-1", "user-3"]
        assert loaded.attendance_log == []

    def test_missing_event(self, sql_store):
        assert sql_store.events.get_event("missing") is None
        assert sql_store.events.delete_event("missing") is False

    def test_records_keep_append_order(self, sql_store, sql_event):
        sql_store.events.append_record(sql_event.id, failed_record("r2", "user-1", 9))
        sql_store.events.append_record(sql_event.id, failed_record("r1", "user-1", 3))
        assert [r.id for r in sql_store.events.list_records(sql_event.id)] == ["r2", "r1"]
        assert [r.id for r in sql_store.events.get_event(sql_event.id).attendance_log] == [
            "r2",
            "r1",
        ]

    def test_save_event_leaves_ledger_alone(self, sql_store, sql_event):
        sql_store.events.append_record(sql_event.id, failed_record("r1", "user-1", 3))
        event = sql_store.events.get_event(sql_event.id)
        sql_store.events.save_event(
            event.model_copy(update={"title": "Open House II", "attendance_log": []})
        )
        reloaded = sql_store.events.get_event(sql_event.id)
        assert reloaded.title == "Open House II"
        assert [r.id for r in reloaded.attendance_log] == ["r1"]

    def test_save_participant_upserts(self, sql_store, sql_event):
        location = LocationData(
            latitude=34.0523, longitude=-118.2437, accuracy=5, timestamp=utc(2024, 6, 1, 10, 4)
        )
        existing = sql_event.find_participant("user-3").model_copy(
            update={
                "check_in_status": CheckInStatus.success,
                "check_in_time": utc(2024, 6, 1, 10, 5),
                "check_in_location": location,
            }
        )
        guest = EventParticipant(id="temp-abc", name="visitor", email="visitor@example.org")
        sql_store.events.save_participant(sql_event.id, existing)
        sql_store.events.save_participant(sql_event.id, guest)

        loaded = sql_store.events.get_event(sql_event.id)
        assert [p.id for p in loaded.participants] == ["user-1", "user-3", "temp-abc"]
        michael = loaded.find_participant("user-3")
        assert michael.check_in_status == CheckInStatus.success
        assert michael.check_in_time == utc(2024, 6, 1, 10, 5)
        assert michael.check_in_location == location

    def test_update_through_service(self, sql_store, sql_event, app_settings, clock):
        service = EventService(sql_store, app_settings, clock=clock)
        updated = service.update_event(sql_event.id, EventUpdate(end=utc(2024, 6, 1, 12)))
        assert updated.check_in_time_window.window_end == utc(2024, 6, 1, 13)
        assert sql_store.events.get_event(sql_event.id).end == utc(2024, 6, 1, 12)

    def test_list_events_between(self, sql_store, sql_event):
        assert [e.id for e in sql_store.events.list_events_between(utc(2024, 6, 1), utc(2024, 6, 2))] == [
            sql_event.id
        ]
        assert sql_store.events.list_events_between(utc(2024, 7, 1), utc(2024, 7, 2)) == []

    def test_delete_removes_ledger(self, sql_store, sql_event):
        sql_store.events.append_record(sql_event.id, failed_record("r1", "user-1", 3))
        assert sql_store.events.delete_event(sql_event.id) is True
        assert sql_store.events.get_event(sql_event.id) is None
        assert sql_store.events.list_records(sql_event.id) == []


class TestSqlCheckIn:
    def test_check_in_flow(self, sql_store, sql_event, clock):
        protocol = CheckInProtocol(sql_store.events, clock=clock)
        fix = LocationData(
            latitude=34.0523, longitude=-118.2437, accuracy=8, timestamp=utc(2024, 6, 1, 10, 14)
        )

        asyncio.run(
            protocol.check_in(
                sql_event.id, ParticipantIdentity(participant_id="user-1"), SubmittedLocation(None)
            )
        )
        clock.advance(minutes=2)
        result = asyncio.run(
            protocol.check_in(
                sql_event.id, ParticipantIdentity(participant_id="user-1"), SubmittedLocation(fix)
            )
        )

        assert result.status == AttendanceStatus.success
        loaded = sql_store.events.get_event(sql_event.id)
        assert [r.status for r in loaded.attendance_log] == [
            AttendanceStatus.failed,
            AttendanceStatus.success,
        ]
        john = loaded.find_participant("user-1")
        assert john.check_in_status == CheckInStatus.success
        assert john.check_in_time == utc(2024, 6, 1, 10, 17)
        assert john.check_in_error is None

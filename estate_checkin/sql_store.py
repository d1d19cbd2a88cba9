"""SQLAlchemy-backed store."""
import logging
from datetime import datetime
from typing import List, Optional

from sqlalchemy import delete, select
from sqlalchemy.engine import Engine
from sqlalchemy.orm import Session, sessionmaker

from estate_checkin.db import create_tables, make_engine, make_session_factory
from estate_checkin.events.models import AttendanceRecordRow, EventParticipantRow, EventRow
from estate_checkin.events.schemas import (
    AttendanceRecord,
    CheckInWindow,
    Event,
    EventParticipant,
    Reminders,
)
from estate_checkin.participants.models import ParticipantRow
from estate_checkin.participants.schemas import Participant
from estate_checkin.properties.models import PropertyRow
from estate_checkin.properties.schemas import Property
from estate_checkin.schemas import Coordinates, LocationData
from estate_checkin.store import (
    EventRepository,
    ParticipantRepository,
    PropertyRepository,
    Store,
)

logger = logging.getLogger(__name__)


def _location(latitude, longitude, accuracy, captured_at) -> Optional[LocationData]:
    if latitude is None or longitude is None:
        return None
    location = {"latitude": latitude, "longitude": longitude, "accuracy": accuracy or 0.0}
    if captured_at is not None:
        location["timestamp"] = captured_at
    return LocationData(**location)


def _record_from_row(row: AttendanceRecordRow) -> AttendanceRecord:
    return AttendanceRecord(
        id=row.id,
        participant_id=row.participant_id,
        timestamp=row.timestamp,
        status=row.status,
        location=_location(row.latitude, row.longitude, row.accuracy, row.captured_at),
        error_message=row.error_message,
    )


def _participant_from_row(row: EventParticipantRow) -> EventParticipant:
    return EventParticipant(
        id=row.participant_id,
        name=row.name,
        email=row.email,
        role=row.role,
        check_in_status=row.check_in_status,
        check_in_time=row.check_in_time,
        check_in_location=_location(
            row.check_in_latitude,
            row.check_in_longitude,
            row.check_in_accuracy,
            row.check_in_captured_at,
        ),
        check_in_error=row.check_in_error,
    )


def _fill_participant_row(
    row: EventParticipantRow, event_id: str, participant: EventParticipant, position: int
) -> EventParticipantRow:
    location = participant.check_in_location
    row.event_id = event_id
    row.participant_id = participant.id
    row.position = position
    row.name = participant.name
    row.email = participant.email
    row.role = participant.role.value
    row.check_in_status = participant.check_in_status.value
    row.check_in_time = participant.check_in_time
    row.check_in_latitude = location.latitude if location else None
    row.check_in_longitude = location.longitude if location else None
    row.check_in_accuracy = location.accuracy if location else None
    row.check_in_captured_at = location.timestamp if location else None
    row.check_in_error = participant.check_in_error
    return row


def _fill_event_row(row: EventRow, event: Event) -> EventRow:
    row.id = event.id
    row.title = event.title
    row.type = event.type.value
    row.start = event.start
    row.end = event.end
    row.all_day = event.all_day
    row.status = event.status.value
    row.location = event.location
    row.description = event.description
    row.latitude = event.coordinates.lat if event.coordinates else None
    row.longitude = event.coordinates.lng if event.coordinates else None
    row.property_id = event.property_id
    row.reminder_email = event.reminders.email
    row.reminder_sms = event.reminders.sms
    row.reminder_push = event.reminders.push
    row.qr_code = event.qr_code
    row.window_start = event.check_in_time_window.window_start
    row.window_end = event.check_in_time_window.window_end
    row.created_by = event.created_by
    row.created_at = event.created_at
    row.updated_at = event.updated_at
    return row


class SqlEventRepository(EventRepository):
    def __init__(self, session_factory: sessionmaker):
        self._session_factory = session_factory

    def _load(self, db: Session, row: EventRow) -> Event:
        participants = db.scalars(
            select(EventParticipantRow)
            .where(EventParticipantRow.event_id == row.id)
            .order_by(EventParticipantRow.position, EventParticipantRow.id)
        ).all()
        records = db.scalars(
            select(AttendanceRecordRow)
            .where(AttendanceRecordRow.event_id == row.id)
            .order_by(AttendanceRecordRow.seq)
        ).all()
        coordinates = None
        if row.latitude is not None and row.longitude is not None:
            coordinates = Coordinates(lat=row.latitude, lng=row.longitude)

        return Event(
            id=row.id,
            title=row.title,
            type=row.type,
            start=row.start,
            end=row.end,
            all_day=row.all_day,
            status=row.status,
            location=row.location,
            description=row.description,
            coordinates=coordinates,
            property_id=row.property_id,
            reminders=Reminders(
                email=row.reminder_email, sms=row.reminder_sms, push=row.reminder_push
            ),
            created_by=row.created_by,
            participants=[_participant_from_row(p) for p in participants],
            qr_code=row.qr_code,
            check_in_time_window=CheckInWindow(
                window_start=row.window_start, window_end=row.window_end
            ),
            attendance_log=[_record_from_row(r) for r in records],
            created_at=row.created_at,
            updated_at=row.updated_at,
        )

    def list_events(self) -> List[Event]:
        with self._session_factory() as db:
            rows = db.scalars(select(EventRow).order_by(EventRow.start)).all()
            return [self._load(db, row) for row in rows]

    def list_events_between(self, start: datetime, end: datetime) -> List[Event]:
        # SQLite drops tz info on storage, so compare in Python
        return [e for e in self.list_events() if start <= e.start <= end]

    def get_event(self, event_id: str) -> Optional[Event]:
        with self._session_factory() as db:
            row = db.get(EventRow, event_id)
            return self._load(db, row) if row else None

    def _write_participants(self, db: Session, event: Event) -> None:
        db.execute(delete(EventParticipantRow).where(EventParticipantRow.event_id == event.id))
        for position, participant in enumerate(event.participants):
            db.add(_fill_participant_row(EventParticipantRow(), event.id, participant, position))

    def add_event(self, event: Event) -> Event:
        with self._session_factory.begin() as db:
            db.add(_fill_event_row(EventRow(), event))
            db.flush()
            self._write_participants(db, event)
        return self.get_event(event.id)

    def save_event(self, event: Event) -> Event:
        with self._session_factory.begin() as db:
            row = db.get(EventRow, event.id)
            if row is None:
                row = EventRow()
                db.add(row)
            _fill_event_row(row, event)
            db.flush()
            self._write_participants(db, event)
        return self.get_event(event.id)

    def delete_event(self, event_id: str) -> bool:
        with self._session_factory.begin() as db:
            row = db.get(EventRow, event_id)
            if row is None:
                return False
            db.execute(delete(AttendanceRecordRow).where(AttendanceRecordRow.event_id == event_id))
            db.execute(delete(EventParticipantRow).where(EventParticipantRow.event_id == event_id))
            db.delete(row)
        return True

    def append_record(self, event_id: str, record: AttendanceRecord) -> None:
        location = record.location
        with self._session_factory.begin() as db:
            db.add(
                AttendanceRecordRow(
                    id=record.id,
                    event_id=event_id,
                    participant_id=record.participant_id,
                    timestamp=record.timestamp,
                    status=record.status.value,
                    latitude=location.latitude if location else None,
                    longitude=location.longitude if location else None,
                    accuracy=location.accuracy if location else None,
                    captured_at=location.timestamp if location else None,
                    error_message=record.error_message,
                )
            )

    def list_records(self, event_id: str) -> List[AttendanceRecord]:
        with self._session_factory() as db:
            rows = db.scalars(
                select(AttendanceRecordRow)
                .where(AttendanceRecordRow.event_id == event_id)
                .order_by(AttendanceRecordRow.seq)
            ).all()
            return [_record_from_row(row) for row in rows]

    def save_participant(self, event_id: str, participant: EventParticipant) -> None:
        with self._session_factory.begin() as db:
            row = db.scalars(
                select(EventParticipantRow).where(
                    EventParticipantRow.event_id == event_id,
                    EventParticipantRow.participant_id == participant.id,
                )
            ).first()
            if row is None:
                existing = db.scalars(
                    select(EventParticipantRow.id).where(EventParticipantRow.event_id == event_id)
                ).all()
                row = EventParticipantRow()
                db.add(_fill_participant_row(row, event_id, participant, len(existing)))
            else:
                _fill_participant_row(row, event_id, participant, row.position)


class SqlParticipantRepository(ParticipantRepository):
    def __init__(self, session_factory: sessionmaker):
        self._session_factory = session_factory

    @staticmethod
    def _to_schema(row: ParticipantRow) -> Participant:
        return Participant(id=row.id, name=row.name, email=row.email, role=row.role)

    def list_participants(self) -> List[Participant]:
        with self._session_factory() as db:
            rows = db.scalars(select(ParticipantRow).order_by(ParticipantRow.name)).all()
            return [self._to_schema(row) for row in rows]

    def get_participant(self, participant_id: str) -> Optional[Participant]:
        with self._session_factory() as db:
            row = db.get(ParticipantRow, participant_id)
            return self._to_schema(row) if row else None

    def add_participant(self, participant: Participant) -> Participant:
        with self._session_factory.begin() as db:
            db.merge(
                ParticipantRow(
                    id=participant.id,
                    name=participant.name,
                    email=participant.email,
                    role=participant.role.value,
                )
            )
        return participant


class SqlPropertyRepository(PropertyRepository):
    def __init__(self, session_factory: sessionmaker):
        self._session_factory = session_factory

    @staticmethod
    def _to_schema(row: PropertyRow) -> Property:
        return Property(
            id=row.id,
            address=row.address,
            city=row.city,
            state=row.state,
            zip_code=row.zip_code,
            price=row.price,
            type=row.type,
            coordinates=Coordinates(lat=row.latitude, lng=row.longitude),
        )

    def list_properties(self) -> List[Property]:
        with self._session_factory() as db:
            rows = db.scalars(select(PropertyRow).order_by(PropertyRow.id)).all()
            return [self._to_schema(row) for row in rows]

    def get_property(self, property_id: str) -> Optional[Property]:
        with self._session_factory() as db:
            row = db.get(PropertyRow, property_id)
            return self._to_schema(row) if row else None

    def add_property(self, prop: Property) -> Property:
        with self._session_factory.begin() as db:
            db.merge(
                PropertyRow(
                    id=prop.id,
                    address=prop.address,
                    city=prop.city,
                    state=prop.state,
                    zip_code=prop.zip_code,
                    price=prop.price,
                    type=prop.type,
                    latitude=prop.coordinates.lat,
                    longitude=prop.coordinates.lng,
                )
            )
        return prop


class SqlStore(Store):
    def __init__(self, engine: Engine):
        self.engine = engine
        session_factory = make_session_factory(engine)
        super().__init__(
            events=SqlEventRepository(session_factory),
            participants=SqlParticipantRepository(session_factory),
            properties=SqlPropertyRepository(session_factory),
        )

    @classmethod
    def from_url(cls, database_url: str) -> "SqlStore":
        engine = make_engine(database_url)
        create_tables(engine)
        return cls(engine)

    def close(self) -> None:
        logger.info("Disposing database engine")
        self.engine.dispose()

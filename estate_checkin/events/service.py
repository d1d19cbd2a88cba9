"""Business logic for events."""
import logging
import uuid
from datetime import datetime, timedelta
from typing import Callable, List, Optional

from estate_checkin.checkin.ledger import latest_record
from estate_checkin.errors import EventNotFound, InvalidEventTimes, PropertyNotFound
from estate_checkin.events.qr import issue_check_in_url, qr_is_active
from estate_checkin.events.schemas import (
    Event,
    EventCreate,
    EventParticipant,
    EventUpdate,
    QrCodeResponse,
)
from estate_checkin.events.window import compute_window
from estate_checkin.geo import within_range
from estate_checkin.participants.schemas import Participant
from estate_checkin.schemas import Coordinates, utcnow
from estate_checkin.settings import Settings
from estate_checkin.store import Store

logger = logging.getLogger(__name__)


class EventService:
    """Service class for event operations."""

    def __init__(
        self,
        store: Store,
        settings: Settings,
        clock: Callable[[], datetime] = utcnow,
    ):
        self.store = store
        self.repository = store.events
        self.settings = settings
        self.clock = clock

    @property
    def window_padding(self) -> timedelta:
        return timedelta(minutes=self.settings.checkin_window_padding_minutes)

    def _property_coordinates(self, property_id: str) -> Coordinates:
        prop = self.store.properties.get_property(property_id)
        if prop is None:
            raise PropertyNotFound()
        return prop.coordinates

    def get_event(self, event_id: str) -> Event:
        event = self.repository.get_event(event_id)
        if event is None:
            raise EventNotFound()
        return event

    def list_events(
        self, start: Optional[datetime] = None, end: Optional[datetime] = None
    ) -> List[Event]:
        """All events, or those starting within [start, end] when both are given."""
        if start is not None and end is not None:
            return self.repository.list_events_between(start, end)
        events = self.repository.list_events()
        if start is not None:
            events = [e for e in events if e.start >= start]
        if end is not None:
            events = [e for e in events if e.start <= end]
        return events

    def nearby_events(self, point: Coordinates, max_km: Optional[float] = None) -> List[Event]:
        """Events with coordinates within ``max_km`` (default ``nearby_range_km``)."""
        max_km = self.settings.nearby_range_km if max_km is None else max_km
        return [
            event
            for event in self.repository.list_events()
            if event.coordinates is not None and within_range(point, event.coordinates, max_km)
        ]

    def create_event(self, data: EventCreate) -> Event:
        """Create an event with its check-in window, check-in URL and an empty ledger."""
        coordinates = data.coordinates
        location = data.location
        if data.property_id:
            prop = self.store.properties.get_property(data.property_id)
            if prop is None:
                raise PropertyNotFound()
            coordinates = coordinates or prop.coordinates
            location = location or prop.full_address

        event_id = uuid.uuid4().hex
        event = Event(
            **data.model_dump(exclude={"participants", "coordinates", "location", "reminders"}),
            id=event_id,
            coordinates=coordinates,
            location=location,
            reminders=data.reminders,
            participants=[EventParticipant(**p.model_dump()) for p in data.participants],
            qr_code=issue_check_in_url(event_id, self.settings.frontend_url),
            check_in_time_window=compute_window(data.start, data.end, self.window_padding),
            created_at=self.clock(),
        )
        created = self.repository.add_event(event)
        logger.info(f"Created event {created.id} ({created.title})")
        return created

    def update_event(self, event_id: str, updates: EventUpdate) -> Event:
        """
        Apply a partial update.

        The check-in window is recomputed only when start or end is part
        of the update; the check-in URL is kept, or backfilled if absent.
        Participant projections survive for participants kept in the list.
        """
        event = self.get_event(event_id)
        changes = {
            name: getattr(updates, name)
            for name in updates.model_fields_set
            if name != "participants"
        }

        start = changes.get("start") or event.start
        end = changes.get("end") or event.end
        if end <= start:
            raise InvalidEventTimes()

        if "start" in changes or "end" in changes:
            changes["check_in_time_window"] = compute_window(start, end, self.window_padding)

        if not event.qr_code:
            changes["qr_code"] = issue_check_in_url(event_id, self.settings.frontend_url)

        if changes.get("property_id") and "coordinates" not in changes:
            changes["coordinates"] = self._property_coordinates(changes["property_id"])

        if updates.participants is not None:
            changes["participants"] = self._merge_participants(event, updates.participants)

        changes["updated_at"] = self.clock()
        updated = self.repository.save_event(event.model_copy(update=changes))
        logger.info(f"Updated event {event_id}: {sorted(changes)}")
        return updated

    @staticmethod
    def _merge_participants(event: Event, participants: List[Participant]) -> List[EventParticipant]:
        merged = []
        for participant in participants:
            current = event.find_participant(participant.id)
            if current is not None:
                merged.append(current.model_copy(update=participant.model_dump()))
            else:
                # re-added participants keep the projection of their earlier entries
                merged.append(
                    EventParticipant(**participant.model_dump()).apply(
                        latest_record(event.attendance_log, participant.id)
                    )
                )
        return merged

    def delete_event(self, event_id: str) -> None:
        """Delete an event together with its attendance ledger."""
        if not self.repository.delete_event(event_id):
            raise EventNotFound()
        logger.info(f"Deleted event {event_id}")

    def get_qr_code(self, event_id: str) -> QrCodeResponse:
        event = self.get_event(event_id)
        return QrCodeResponse(
            url=event.qr_code,
            active=qr_is_active(event, self.clock()),
            check_in_time_window=event.check_in_time_window,
        )

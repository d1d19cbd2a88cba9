"""Repository interfaces and the store bundle built at application startup."""
import logging
from abc import ABC, abstractmethod
from datetime import datetime
from typing import List, Optional

from estate_checkin.events.schemas import AttendanceRecord, Event, EventParticipant
from estate_checkin.participants.schemas import Participant
from estate_checkin.properties.schemas import Property
from estate_checkin.settings import Settings

logger = logging.getLogger(__name__)


class EventRepository(ABC):
    """
    Storage for events, their participant projections and attendance ledgers.

    ``save_event`` never touches the ledger; records only enter through
    ``append_record`` and are never rewritten or removed, except when
    the whole event is deleted.
    """

    @abstractmethod
    def list_events(self) -> List[Event]:
        ...

    def list_events_between(self, start: datetime, end: datetime) -> List[Event]:
        """Events whose start falls within [start, end]."""
        return [e for e in self.list_events() if start <= e.start <= end]

    @abstractmethod
    def get_event(self, event_id: str) -> Optional[Event]:
        ...

    @abstractmethod
    def add_event(self, event: Event) -> Event:
        ...

    @abstractmethod
    def save_event(self, event: Event) -> Event:
        """Persist event fields and its participant list (ledger excluded)."""

    @abstractmethod
    def delete_event(self, event_id: str) -> bool:
        """Drop the event along with its ledger. False when absent."""

    @abstractmethod
    def append_record(self, event_id: str, record: AttendanceRecord) -> None:
        ...

    @abstractmethod
    def list_records(self, event_id: str) -> List[AttendanceRecord]:
        """Ledger in append order."""

    @abstractmethod
    def save_participant(self, event_id: str, participant: EventParticipant) -> None:
        """Insert or replace one participant (and its projection) of an event."""


class ParticipantRepository(ABC):
    """Directory of known participants."""

    @abstractmethod
    def list_participants(self) -> List[Participant]:
        ...

    @abstractmethod
    def get_participant(self, participant_id: str) -> Optional[Participant]:
        ...

    @abstractmethod
    def add_participant(self, participant: Participant) -> Participant:
        ...


class PropertyRepository(ABC):
    @abstractmethod
    def list_properties(self) -> List[Property]:
        ...

    @abstractmethod
    def get_property(self, property_id: str) -> Optional[Property]:
        ...

    @abstractmethod
    def add_property(self, prop: Property) -> Property:
        ...


class Store:
    """Bundle of repositories with an explicit lifecycle."""

    def __init__(
        self,
        events: EventRepository,
        participants: ParticipantRepository,
        properties: PropertyRepository,
    ):
        self.events = events
        self.participants = participants
        self.properties = properties

    def close(self) -> None:
        pass


def build_store(settings: Settings) -> Store:
    """Construct the store selected by ``settings.database_url``."""
    if settings.database_url:
        from estate_checkin.sql_store import SqlStore

        logger.info("Using SQL store")
        store = SqlStore.from_url(settings.database_url)
    else:
        from estate_checkin.memory_store import MemoryStore

        logger.info("Using in-memory store")
        store = MemoryStore()

    if settings.seed_sample_data:
        from estate_checkin.seed import seed_store

        seed_store(store)
    return store

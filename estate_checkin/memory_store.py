"""In-process store; contents live as long as the store instance."""
from typing import Dict, List, Optional

from estate_checkin.events.schemas import AttendanceRecord, Event, EventParticipant
from estate_checkin.participants.schemas import Participant
from estate_checkin.properties.schemas import Property
from estate_checkin.store import (
    EventRepository,
    ParticipantRepository,
    PropertyRepository,
    Store,
)


class InMemoryEventRepository(EventRepository):
    def __init__(self):
        self._events: Dict[str, Event] = {}
        self._ledgers: Dict[str, List[AttendanceRecord]] = {}

    def _assemble(self, event: Event) -> Event:
        return event.model_copy(
            update={"attendance_log": list(self._ledgers.get(event.id, []))}, deep=True
        )

    def list_events(self) -> List[Event]:
        return [self._assemble(e) for e in self._events.values()]

    def get_event(self, event_id: str) -> Optional[Event]:
        event = self._events.get(event_id)
        return self._assemble(event) if event else None

    def add_event(self, event: Event) -> Event:
        self._events[event.id] = event.model_copy(update={"attendance_log": []}, deep=True)
        self._ledgers[event.id] = []
        return self._assemble(self._events[event.id])

    def save_event(self, event: Event) -> Event:
        if event.id not in self._events:
            return self.add_event(event)
        self._events[event.id] = event.model_copy(update={"attendance_log": []}, deep=True)
        return self._assemble(self._events[event.id])

    def delete_event(self, event_id: str) -> bool:
        if event_id not in self._events:
            return False
        del self._events[event_id]
        self._ledgers.pop(event_id, None)
        return True

    def append_record(self, event_id: str, record: AttendanceRecord) -> None:
        self._ledgers.setdefault(event_id, []).append(record)

    def list_records(self, event_id: str) -> List[AttendanceRecord]:
        return list(self._ledgers.get(event_id, []))

    def save_participant(self, event_id: str, participant: EventParticipant) -> None:
        event = self._events[event_id]
        if event.find_participant(participant.id) is None:
            participants = event.participants + [participant]
        else:
            participants = [
                participant if p.id == participant.id else p for p in event.participants
            ]
        self._events[event_id] = event.model_copy(update={"participants": participants})


class InMemoryParticipantRepository(ParticipantRepository):
    def __init__(self):
        self._participants: Dict[str, Participant] = {}

    def list_participants(self) -> List[Participant]:
        return list(self._participants.values())

    def get_participant(self, participant_id: str) -> Optional[Participant]:
        return self._participants.get(participant_id)

    def add_participant(self, participant: Participant) -> Participant:
        self._participants[participant.id] = participant
        return participant


class InMemoryPropertyRepository(PropertyRepository):
    def __init__(self):
        self._properties: Dict[str, Property] = {}

    def list_properties(self) -> List[Property]:
        return list(self._properties.values())

    def get_property(self, property_id: str) -> Optional[Property]:
        return self._properties.get(property_id)

    def add_property(self, prop: Property) -> Property:
        self._properties[prop.id] = prop
        return prop


class MemoryStore(Store):
    def __init__(self):
        super().__init__(
            events=InMemoryEventRepository(),
            participants=InMemoryParticipantRepository(),
            properties=InMemoryPropertyRepository(),
        )

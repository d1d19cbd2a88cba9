"""Business logic for participants."""
import uuid
from typing import List

from estate_checkin.errors import ParticipantNotFound
from estate_checkin.participants.schemas import Participant, ParticipantCreate
from estate_checkin.store import ParticipantRepository


class ParticipantService:
    """Service class for participant directory operations."""

    def __init__(self, repository: ParticipantRepository):
        self.repository = repository

    def list_participants(self) -> List[Participant]:
        return self.repository.list_participants()

    def get_participant(self, participant_id: str) -> Participant:
        participant = self.repository.get_participant(participant_id)
        if participant is None:
            raise ParticipantNotFound()
        return participant

    def create_participant(self, data: ParticipantCreate) -> Participant:
        """Create a participant, generating an id when none is given."""
        participant = Participant(
            id=data.id or uuid.uuid4().hex,
            name=data.name,
            email=data.email,
            role=data.role,
        )
        return self.repository.add_participant(participant)

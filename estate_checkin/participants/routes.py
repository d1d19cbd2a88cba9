"""FastAPI routes for participants."""

from fastapi import APIRouter, Depends, HTTPException

from estate_checkin.deps import get_participant_service
from estate_checkin.errors import ParticipantNotFound
from estate_checkin.participants.service import ParticipantService
from estate_checkin.participants.schemas import (
    Participant,
    ParticipantCreate,
    ParticipantListResponse,
)

router = APIRouter(prefix="/participants", tags=["participants"])


@router.get("", response_model=ParticipantListResponse)
async def get_participants(service: ParticipantService = Depends(get_participant_service)):
    """List known participants."""
    participants = service.list_participants()
    return ParticipantListResponse(participants=participants, total=len(participants))


@router.post("", response_model=Participant, status_code=201)
async def create_participant(
    participant_data: ParticipantCreate,
    service: ParticipantService = Depends(get_participant_service),
):
    """Create a participant."""
    return service.create_participant(participant_data)


@router.get("/{participant_id}", response_model=Participant)
async def get_participant(
    participant_id: str,
    service: ParticipantService = Depends(get_participant_service),
):
    """Get a participant by ID."""
    try:
        return service.get_participant(participant_id)
    except ParticipantNotFound as e:
        raise HTTPException(status_code=404, detail=e.message)

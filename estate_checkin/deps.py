"""FastAPI dependencies resolving services from the application state."""
from fastapi import Request

from estate_checkin.checkin.protocol import CheckInProtocol
from estate_checkin.events.service import EventService
from estate_checkin.participants.service import ParticipantService
from estate_checkin.properties.service import PropertyService
from estate_checkin.settings import Settings
from estate_checkin.store import Store


def get_store(request: Request) -> Store:
    return request.app.state.store


def get_settings(request: Request) -> Settings:
    return request.app.state.settings


def get_event_service(request: Request) -> EventService:
    return EventService(get_store(request), get_settings(request), clock=request.app.state.clock)


def get_participant_service(request: Request) -> ParticipantService:
    return ParticipantService(get_store(request).participants)


def get_property_service(request: Request) -> PropertyService:
    return PropertyService(get_store(request).properties)


def get_check_in_protocol(request: Request) -> CheckInProtocol:
    settings = get_settings(request)
    return CheckInProtocol(
        get_store(request).events,
        warning_range_km=settings.checkin_warning_range_km,
        location_timeout=settings.location_timeout_seconds,
        clock=request.app.state.clock,
    )

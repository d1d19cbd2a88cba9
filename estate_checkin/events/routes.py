"""FastAPI routes for events."""

from typing import Optional
from datetime import datetime

from fastapi import APIRouter, Depends, HTTPException, Query

from estate_checkin.deps import get_event_service
from estate_checkin.errors import EventNotFound, InvalidEventTimes, PropertyNotFound
from estate_checkin.events.service import EventService
from estate_checkin.events.schemas import (
    DeleteResponse,
    Event,
    EventCreate,
    EventListResponse,
    EventUpdate,
    QrCodeResponse,
)
from estate_checkin.schemas import Coordinates, ensure_utc

router = APIRouter(prefix="/events", tags=["events"])


@router.get("", response_model=EventListResponse)
async def get_events(
    start: Optional[datetime] = Query(None, description="Earliest event start (ISO format)"),
    end: Optional[datetime] = Query(None, description="Latest event start (ISO format)"),
    service: EventService = Depends(get_event_service),
):
    """List events, optionally restricted to those starting within a date range."""
    events = service.list_events(
        start=ensure_utc(start) if start else None,
        end=ensure_utc(end) if end else None,
    )
    return EventListResponse(events=events, total=len(events))


# Put the fixed path BEFORE the parameterized one to avoid conflicts
@router.get("/nearby", response_model=EventListResponse)
async def get_nearby_events(
    lat: float = Query(..., ge=-90, le=90, description="Latitude"),
    lng: float = Query(..., ge=-180, le=180, description="Longitude"),
    max_km: Optional[float] = Query(None, gt=0, description="Search radius in km"),
    service: EventService = Depends(get_event_service),
):
    """Events located close to a point."""
    events = service.nearby_events(Coordinates(lat=lat, lng=lng), max_km=max_km)
    return EventListResponse(events=events, total=len(events))


@router.post("", response_model=Event, status_code=201)
async def create_event(
    event_data: EventCreate,
    service: EventService = Depends(get_event_service),
):
    """Create an event; its check-in window and check-in URL are derived here."""
    try:
        return service.create_event(event_data)
    except PropertyNotFound as e:
        raise HTTPException(status_code=404, detail=e.message)


@router.get("/{event_id}", response_model=Event)
async def get_event(
    event_id: str,
    service: EventService = Depends(get_event_service),
):
    """Get an event with its QR code target, check-in window and attendance log."""
    try:
        return service.get_event(event_id)
    except EventNotFound as e:
        raise HTTPException(status_code=404, detail=e.message)


@router.put("/{event_id}", response_model=Event)
async def update_event(
    event_id: str,
    event_data: EventUpdate,
    service: EventService = Depends(get_event_service),
):
    """Update an event."""
    try:
        return service.update_event(event_id, event_data)
    except (EventNotFound, PropertyNotFound) as e:
        raise HTTPException(status_code=404, detail=e.message)
    except InvalidEventTimes as e:
        raise HTTPException(status_code=422, detail=e.message)


@router.delete("/{event_id}", response_model=DeleteResponse)
async def delete_event(
    event_id: str,
    service: EventService = Depends(get_event_service),
):
    """Delete an event and its attendance log."""
    try:
        service.delete_event(event_id)
    except EventNotFound as e:
        raise HTTPException(status_code=404, detail=e.message)
    return DeleteResponse(message="Event deleted successfully")


@router.get("/{event_id}/qr", response_model=QrCodeResponse)
async def get_event_qr_code(
    event_id: str,
    service: EventService = Depends(get_event_service),
):
    """Check-in URL to encode in the event's QR code, and whether it is currently active."""
    try:
        return service.get_qr_code(event_id)
    except EventNotFound as e:
        raise HTTPException(status_code=404, detail=e.message)

"""FastAPI routes for event check-in and attendance."""
import logging
from typing import List
from urllib.parse import quote

from fastapi import APIRouter, Depends, HTTPException, Query, Request
from starlette.responses import Response

from estate_checkin.checkin.ledger import AttendanceLedger, csv_filename, render_attendance_csv
from estate_checkin.checkin.location import SubmittedLocation
from estate_checkin.checkin.protocol import CheckInProtocol
from estate_checkin.checkin.schemas import CheckInRequest, CheckInResult, ResolveResponse
from estate_checkin.deps import get_check_in_protocol, get_event_service, get_store
from estate_checkin.errors import EventNotFound, InvalidCheckInUrl, ParticipantNotFound
from estate_checkin.events.qr import parse_check_in_url
from estate_checkin.events.schemas import AttendanceRecord
from estate_checkin.events.service import EventService
from estate_checkin.metrics import (
    CHECKIN_FAILURES,
    CHECKIN_OUT_OF_RANGE,
    CHECKIN_REQUESTS,
    CHECKIN_SUCCESSES,
)
from estate_checkin.schemas import AttendanceStatus
from estate_checkin.store import Store

router = APIRouter(tags=["check-in"])
logger = logging.getLogger(__name__)


@router.post("/events/{event_id}/check-in", response_model=CheckInResult)
async def check_in_participant(
    event_id: str,
    request: CheckInRequest,
    protocol: CheckInProtocol = Depends(get_check_in_protocol),
):
    """
    Record a check-in attempt with the location captured by the device.

    Answers 200 whether the attempt succeeded or failed; inspect ``status``.
    """
    CHECKIN_REQUESTS.inc()
    provider = SubmittedLocation(
        request.location_data, request.location_error, request.location_error_message
    )

    try:
        result = await protocol.check_in(event_id, request.identity(), provider)
    except (EventNotFound, ParticipantNotFound) as e:
        raise HTTPException(status_code=404, detail=e.message)
    except Exception as e:
        logger.error(f"Check-in error for event {event_id}: {e}", exc_info=True)
        raise HTTPException(
            status_code=500, detail=f"Failed to check in participant: {str(e)}"
        )

    if result.status == AttendanceStatus.success:
        CHECKIN_SUCCESSES.inc()
    else:
        CHECKIN_FAILURES.inc()
    if result.warning:
        CHECKIN_OUT_OF_RANGE.inc()
    return result


@router.get("/events/{event_id}/attendance", response_model=List[AttendanceRecord])
async def get_attendance(event_id: str, store: Store = Depends(get_store)):
    """Attendance log of an event in chronological order."""
    if store.events.get_event(event_id) is None:
        raise HTTPException(status_code=404, detail=EventNotFound.message)
    return AttendanceLedger(store.events).records(event_id)


@router.get("/events/{event_id}/attendance/export")
async def export_attendance(
    event_id: str,
    http_request: Request,
    service: EventService = Depends(get_event_service),
):
    """Download the attendance log as CSV."""
    try:
        event = service.get_event(event_id)
    except EventNotFound as e:
        raise HTTPException(status_code=404, detail=e.message)

    filename = csv_filename(event, http_request.app.state.clock().date())
    return Response(
        content=render_attendance_csv(event),
        media_type="text/csv; charset=utf-8",
        headers={"Content-Disposition": f"attachment; filename*=UTF-8''{quote(filename)}"},
    )


@router.get("/check-in/resolve", response_model=ResolveResponse)
async def resolve_check_in_url(
    url: str = Query(..., description="Scanned QR code content"),
):
    """Extract the event id from a scanned check-in URL."""
    try:
        return ResolveResponse(event_id=parse_check_in_url(url))
    except InvalidCheckInUrl as e:
        raise HTTPException(status_code=400, detail=e.message)

"""Check-in protocol.

One attempt walks ``idle -> locating_requested -> location_acquired |
location_failed -> completed``. Location problems never abort the
attempt: they are recorded as a failed ledger entry. Only a missing
event, an unresolvable participant or a caller cancellation stop it,
and in those cases nothing is written.
"""
import logging
import uuid
from datetime import datetime
from typing import Callable, Optional, Tuple

from estate_checkin.checkin.ledger import AttendanceLedger
from estate_checkin.checkin.location import (
    DEFAULT_TIMEOUT_SECONDS,
    CancellationToken,
    LocationError,
    LocationProvider,
    acquire_location,
)
from estate_checkin.checkin.schemas import CheckInResult, CheckInState, ParticipantIdentity
from estate_checkin.errors import EventNotFound, ParticipantNotFound
from estate_checkin.events.schemas import AttendanceRecord, Event, EventParticipant
from estate_checkin.events.window import is_within_window
from estate_checkin.geo import CHECKIN_WARNING_RANGE_KM, distance_km
from estate_checkin.participants.schemas import ParticipantRole
from estate_checkin.schemas import AttendanceStatus, LocationData, utcnow
from estate_checkin.store import EventRepository

logger = logging.getLogger(__name__)

OUT_OF_RANGE_WARNING = (
    "You appear to be too far from the event location. Check-in may not be accurate."
)

TRANSITIONS = {
    CheckInState.idle: {CheckInState.locating_requested},
    CheckInState.locating_requested: {
        CheckInState.location_acquired,
        CheckInState.location_failed,
    },
    CheckInState.location_acquired: {CheckInState.completed},
    CheckInState.location_failed: {CheckInState.completed},
    CheckInState.completed: set(),
}


class CheckInAttempt:
    """Tracks the state of a single attempt."""

    def __init__(self, event_id: str, participant_id: str):
        self.event_id = event_id
        self.participant_id = participant_id
        self.state = CheckInState.idle
        self.history = [CheckInState.idle]

    def advance(self, state: CheckInState) -> None:
        if state not in TRANSITIONS[self.state]:
            raise RuntimeError(f"Illegal check-in transition {self.state.value} -> {state.value}")
        logger.debug(
            f"Check-in {self.event_id}/{self.participant_id}: {self.state.value} -> {state.value}"
        )
        self.state = state
        self.history.append(state)


class CheckInProtocol:
    """Runs check-in attempts against an event repository."""

    def __init__(
        self,
        repository: EventRepository,
        warning_range_km: float = CHECKIN_WARNING_RANGE_KM,
        location_timeout: float = DEFAULT_TIMEOUT_SECONDS,
        clock: Callable[[], datetime] = utcnow,
    ):
        self.repository = repository
        self.ledger = AttendanceLedger(repository)
        self.warning_range_km = warning_range_km
        self.location_timeout = location_timeout
        self.clock = clock

    def resolve_participant(
        self, event: Event, identity: ParticipantIdentity
    ) -> Tuple[EventParticipant, bool]:
        """
        Find the participant checking in.

        Looks up by id, then by email (case-insensitive), then registers
        a walk-up guest from the email. Returns the participant and
        whether it was synthesized.
        """
        if identity.participant_id:
            participant = event.find_participant(identity.participant_id)
            if participant is not None:
                return participant, False

        email = (identity.email or "").strip()
        if not email:
            raise ParticipantNotFound()

        participant = event.find_participant_by_email(email)
        if participant is not None:
            return participant, False

        guest = EventParticipant(
            id=f"temp-{uuid.uuid4().hex[:12]}",
            name=(identity.name or "").strip() or email.split("@")[0],
            email=email,
            role=ParticipantRole.other,
        )
        logger.info(f"Walk-up guest {guest.id} ({email}) checking in to event {event.id}")
        return guest, True

    async def check_in(
        self,
        event_id: str,
        identity: ParticipantIdentity,
        provider: Optional[LocationProvider],
        cancel_token: Optional[CancellationToken] = None,
    ) -> CheckInResult:
        """
        Run one check-in attempt and record its outcome.

        The returned ``status`` is ``success`` exactly when a position was
        obtained; distance from the event only produces a warning and the
        check-in window only sets ``within_window``.
        """
        event = self.repository.get_event(event_id)
        if event is None:
            raise EventNotFound()
        participant, _ = self.resolve_participant(event, identity)

        attempt = CheckInAttempt(event_id, participant.id)
        attempt.advance(CheckInState.locating_requested)

        location: Optional[LocationData] = None
        error_message: Optional[str] = None
        try:
            location = await acquire_location(
                provider, timeout=self.location_timeout, cancel_token=cancel_token
            )
            attempt.advance(CheckInState.location_acquired)
        except LocationError as e:
            error_message = e.message
            attempt.advance(CheckInState.location_failed)
            logger.warning(
                f"Check-in {event_id}/{participant.id}: location failed ({e.kind.value})"
            )

        now = self.clock()
        within_window = is_within_window(now, event.check_in_time_window)
        if not within_window:
            logger.info(f"Check-in {event_id}/{participant.id} outside the check-in window")

        warning = None
        distance = None
        if location is not None and event.coordinates is not None:
            distance = distance_km(location, event.coordinates)
            if distance > self.warning_range_km:
                warning = OUT_OF_RANGE_WARNING
                logger.warning(
                    f"Check-in {event_id}/{participant.id}: {distance:.3f} km from event"
                )

        status = AttendanceStatus.success if location is not None else AttendanceStatus.failed
        record = AttendanceRecord(
            id=uuid.uuid4().hex,
            participant_id=participant.id,
            timestamp=now,
            status=status,
            location=location,
            error_message=error_message,
        )
        self.ledger.append(event_id, record)

        participant = participant.apply(self.ledger.project_latest(event_id, participant.id))
        self.repository.save_participant(event_id, participant)

        attempt.advance(CheckInState.completed)
        logger.info(f"Check-in {event_id}/{participant.id} completed: {status.value}")
        return CheckInResult(
            participant=participant,
            status=status,
            state=attempt.state,
            warning=warning,
            distance_km=distance,
            within_window=within_window,
        )

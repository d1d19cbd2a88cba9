"""Attendance ledger: the append-only history of check-in attempts per event."""
import csv
import io
import logging
from datetime import date
from typing import List, Optional

from estate_checkin.errors import EventNotFound
from estate_checkin.events.schemas import AttendanceRecord, Event
from estate_checkin.schemas import AttendanceStatus
from estate_checkin.store import EventRepository

logger = logging.getLogger(__name__)

CSV_HEADER = ["Name", "Email", "Role", "Check-in Time", "Status", "Latitude", "Longitude"]
CSV_TIME_FORMAT = "%Y-%m-%d %H:%M:%S"
STATUS_LABELS = {AttendanceStatus.success: "Success", AttendanceStatus.failed: "Failed"}


def latest_record(
    records: List[AttendanceRecord], participant_id: str
) -> Optional[AttendanceRecord]:
    """Entry with the greatest timestamp for a participant; later appends win ties."""
    latest = None
    for record in records:
        if record.participant_id != participant_id:
            continue
        if latest is None or record.timestamp >= latest.timestamp:
            latest = record
    return latest


def render_attendance_csv(event: Event) -> str:
    """Render an event's ledger, joined with participant details, as CSV text."""
    buffer = io.StringIO()
    writer = csv.writer(buffer, quoting=csv.QUOTE_ALL, lineterminator="\n")
    writer.writerow(CSV_HEADER)

    for record in event.attendance_log:
        participant = event.find_participant(record.participant_id)
        location = record.location
        writer.writerow(
            [
                participant.name if participant else "",
                participant.email if participant else "",
                participant.role.value if participant else "",
                record.timestamp.strftime(CSV_TIME_FORMAT),
                STATUS_LABELS[record.status],
                f"{location.latitude:.6f}" if location else "",
                f"{location.longitude:.6f}" if location else "",
            ]
        )
    return buffer.getvalue()


def csv_filename(event: Event, today: date) -> str:
    return f"{event.title}-attendance-{today.strftime('%Y-%m-%d')}.csv"


class AttendanceLedger:
    """Ledger operations on top of an event repository."""

    def __init__(self, repository: EventRepository):
        self.repository = repository

    def append(self, event_id: str, record: AttendanceRecord) -> None:
        """Add an entry. Repeat check-ins by the same participant are separate entries."""
        if self.repository.get_event(event_id) is None:
            raise EventNotFound()
        self.repository.append_record(event_id, record)
        logger.debug(
            f"Ledger {event_id}: appended {record.status.value} for {record.participant_id}"
        )

    def records(self, event_id: str) -> List[AttendanceRecord]:
        return self.repository.list_records(event_id)

    def project_latest(self, event_id: str, participant_id: str) -> Optional[AttendanceRecord]:
        return latest_record(self.records(event_id), participant_id)

    def export_csv(self, event_id: str) -> str:
        event = self.repository.get_event(event_id)
        if event is None:
            raise EventNotFound()
        return render_attendance_csv(event)

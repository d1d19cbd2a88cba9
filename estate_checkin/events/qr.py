"""Check-in URL issuance and recognition for event QR codes.

The canonical code target is ``{origin}/event/{event_id}/check-in``.
``{origin}/event-check-in/{event_id}`` is still recognised when scanned,
as a deprecated alias; it is never issued.
"""
import re
from datetime import datetime
from urllib.parse import unquote, urlparse

from estate_checkin.errors import InvalidCheckInUrl
from estate_checkin.events.schemas import Event
from estate_checkin.events.window import is_within_window

CANONICAL_PATH = re.compile(r"^/event/(?P<event_id>[^/]+)/check-in/?$")
LEGACY_PATH = re.compile(r"^/event-check-in/(?P<event_id>[^/]+)/?$")


def issue_check_in_url(event_id: str, origin: str) -> str:
    return f"{origin.rstrip('/')}/event/{event_id}/check-in"


def parse_check_in_url(url: str) -> str:
    """Return the event id encoded in a scanned check-in URL."""
    try:
        parsed = urlparse(url.strip())
    except (AttributeError, ValueError):
        raise InvalidCheckInUrl("Invalid QR code format")
    if parsed.scheme not in ("http", "https") or not parsed.netloc:
        raise InvalidCheckInUrl("Invalid QR code format")

    for pattern in (CANONICAL_PATH, LEGACY_PATH):
        match = pattern.match(parsed.path)
        if match:
            return unquote(match.group("event_id"))
    raise InvalidCheckInUrl()


def qr_is_active(event: Event, now: datetime) -> bool:
    """Whether the code should be shown as usable. Display hint only."""
    return is_within_window(now, event.check_in_time_window)

"""Check-in time window around an event's schedule."""
from datetime import datetime, timedelta

from estate_checkin.events.schemas import CheckInWindow

DEFAULT_PADDING = timedelta(hours=1)


def compute_window(
    start: datetime, end: datetime, padding: timedelta = DEFAULT_PADDING
) -> CheckInWindow:
    """Valid scan window: ``padding`` before the start until ``padding`` after the end."""
    return CheckInWindow(window_start=start - padding, window_end=end + padding)


def is_within_window(now: datetime, window: CheckInWindow) -> bool:
    """Inclusive at both ends."""
    return window.window_start <= now <= window.window_end

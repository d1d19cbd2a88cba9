"""Domain exceptions raised by services and translated by the routes."""


class CheckInError(Exception):
    """Base class for domain errors."""

    message = "Check-in error"

    def __init__(self, message: str = None):
        super().__init__(message or self.message)
        self.message = message or self.message


class EventNotFound(CheckInError):
    message = "Event not found"


class ParticipantNotFound(CheckInError):
    message = "Participant not found"


class PropertyNotFound(CheckInError):
    message = "Property not found"


class InvalidEventTimes(CheckInError):
    message = "Event end must be after its start"


class InvalidCheckInUrl(CheckInError):
    message = "Invalid QR code: Not an event check-in QR code"


class CheckInCancelled(CheckInError):
    """The caller abandoned the check-in while the location was pending."""

    message = "Check-in cancelled"

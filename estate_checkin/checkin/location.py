"""Device location acquisition with a typed failure taxonomy.

A single call makes a single attempt: no retry and no caching, every
call asks the provider again. The attempt is bounded by a timeout and
can be abandoned through a ``CancellationToken``; once abandoned, a late
answer from the provider is discarded.
"""
import asyncio
import logging
from abc import ABC, abstractmethod
from enum import Enum
from typing import Callable, Optional

from estate_checkin.errors import CheckInCancelled
from estate_checkin.schemas import LocationData

logger = logging.getLogger(__name__)

DEFAULT_TIMEOUT_SECONDS = 15.0


class LocationErrorKind(str, Enum):
    """Why a position could not be obtained."""
    permission_denied = "permission_denied"
    position_unavailable = "position_unavailable"
    timeout = "timeout"
    unsupported = "unsupported"
    unknown = "unknown"


class LocationError(Exception):
    kind = LocationErrorKind.unknown
    default_message = "An unknown error occurred while getting location."

    def __init__(self, message: Optional[str] = None):
        self.message = message or self.default_message
        super().__init__(self.message)


class PermissionDenied(LocationError):
    kind = LocationErrorKind.permission_denied
    default_message = "Location access was denied. Please enable GPS and allow access."


class PositionUnavailable(LocationError):
    kind = LocationErrorKind.position_unavailable
    default_message = "Location information is unavailable."


class LocationTimeout(LocationError):
    kind = LocationErrorKind.timeout
    default_message = "The request to get location timed out."


class LocationUnsupported(LocationError):
    kind = LocationErrorKind.unsupported
    default_message = "Geolocation is not supported by this device."


class LocationUnknownError(LocationError):
    pass


_ERRORS_BY_KIND = {
    cls.kind: cls
    for cls in (
        PermissionDenied,
        PositionUnavailable,
        LocationTimeout,
        LocationUnsupported,
        LocationUnknownError,
    )
}


def location_error(kind: LocationErrorKind, message: Optional[str] = None) -> LocationError:
    return _ERRORS_BY_KIND[LocationErrorKind(kind)](message)


class CancellationToken:
    """Lets a caller abandon an in-flight acquisition."""

    def __init__(self):
        self._event = asyncio.Event()

    def cancel(self) -> None:
        self._event.set()

    @property
    def cancelled(self) -> bool:
        return self._event.is_set()

    async def wait(self) -> None:
        await self._event.wait()


class LocationProvider(ABC):
    """Source of device positions."""

    @abstractmethod
    async def get_position(self) -> LocationData:
        """Return a fresh fix or raise a ``LocationError``."""


class SubmittedLocation(LocationProvider):
    """
    Position captured on the device and posted with the check-in request.

    ``location`` is ``None`` when the device failed to produce a fix;
    ``error_kind`` then tells why. A missing fix without a reason is
    reported as a denied permission, which is what browsers do when the
    prompt is dismissed.
    """

    def __init__(
        self,
        location: Optional[LocationData],
        error_kind: Optional[LocationErrorKind] = None,
        error_message: Optional[str] = None,
    ):
        self.location = location
        self.error_kind = error_kind
        self.error_message = error_message

    async def get_position(self) -> LocationData:
        if self.location is not None:
            return self.location
        raise location_error(
            self.error_kind or LocationErrorKind.permission_denied, self.error_message
        )


# request(on_success, on_error) -> None; on_error takes a kind and optional message
PositionRequest = Callable[
    [Callable[[LocationData], None], Callable[..., None]], None
]


class CallbackLocationProvider(LocationProvider):
    """Adapts a callback-style positioning API to an awaitable."""

    def __init__(self, request: PositionRequest):
        self._request = request

    async def get_position(self) -> LocationData:
        loop = asyncio.get_running_loop()
        future = loop.create_future()

        def on_success(location: LocationData) -> None:
            if not future.done():
                loop.call_soon_threadsafe(_settle, future, location, None)

        def on_error(kind=LocationErrorKind.unknown, message: Optional[str] = None) -> None:
            if not future.done():
                loop.call_soon_threadsafe(_settle, future, None, location_error(kind, message))

        self._request(on_success, on_error)
        return await future


def _settle(future: asyncio.Future, result, error) -> None:
    # The attempt may have been abandoned meanwhile
    if future.done():
        return
    if error is not None:
        future.set_exception(error)
    else:
        future.set_result(result)


async def acquire_location(
    provider: Optional[LocationProvider],
    timeout: float = DEFAULT_TIMEOUT_SECONDS,
    cancel_token: Optional[CancellationToken] = None,
) -> LocationData:
    """
    Make one attempt at obtaining the device position.

    Raises a ``LocationError`` subclass on failure (``LocationTimeout``
    once ``timeout`` seconds elapse, ``LocationUnsupported`` when there
    is no provider) and ``CheckInCancelled`` if ``cancel_token`` fires
    first.
    """
    if provider is None:
        raise LocationUnsupported()
    if cancel_token is not None and cancel_token.cancelled:
        raise CheckInCancelled()

    position_task = asyncio.ensure_future(provider.get_position())
    waiters = {position_task}
    cancel_task = None
    if cancel_token is not None:
        cancel_task = asyncio.ensure_future(cancel_token.wait())
        waiters.add(cancel_task)

    try:
        done, _ = await asyncio.wait(
            waiters, timeout=timeout, return_when=asyncio.FIRST_COMPLETED
        )
    finally:
        # also reached when the awaiting task itself is cancelled
        if not position_task.done():
            position_task.cancel()
        if cancel_task is not None and not cancel_task.done():
            cancel_task.cancel()

    if position_task not in done:
        if cancel_task is not None and cancel_task in done:
            logger.info("Location acquisition abandoned by caller")
            raise CheckInCancelled()
        logger.warning(f"Location acquisition timed out after {timeout}s")
        raise LocationTimeout()

    error = position_task.exception()
    if error is None:
        return position_task.result()
    if isinstance(error, LocationError):
        raise error
    logger.error(f"Location provider failed: {error!r}")
    raise LocationUnknownError() from error

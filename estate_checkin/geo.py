"""Great-circle distance helpers."""
import math
from typing import Union

from estate_checkin.schemas import Coordinates, LocationData

EARTH_RADIUS_KM = 6371.0

# Independent knobs: the check-in warning and the nearby-events pre-filter
CHECKIN_WARNING_RANGE_KM = 1.0
NEARBY_RANGE_KM = 0.5

Point = Union[Coordinates, LocationData]


def _lat_lng(point: Point):
    if isinstance(point, LocationData):
        return point.latitude, point.longitude
    return point.lat, point.lng


def distance_km(a: Point, b: Point) -> float:
    """
    Haversine distance in kilometers on a mean Earth radius of 6371 km.

    Accepts either ``Coordinates`` (lat/lng) or ``LocationData``
    (latitude/longitude) for both arguments.
    """
    lat1, lon1 = _lat_lng(a)
    lat2, lon2 = _lat_lng(b)

    d_lat = math.radians(lat2 - lat1)
    d_lon = math.radians(lon2 - lon1)
    h = (
        math.sin(d_lat / 2) ** 2
        + math.cos(math.radians(lat1)) * math.cos(math.radians(lat2)) * math.sin(d_lon / 2) ** 2
    )
    return EARTH_RADIUS_KM * 2 * math.atan2(math.sqrt(h), math.sqrt(1 - h))


def within_range(user: Point, target: Point, max_km: float = CHECKIN_WARNING_RANGE_KM) -> bool:
    """True when ``user`` is at most ``max_km`` kilometers from ``target``."""
    return distance_km(user, target) <= max_km

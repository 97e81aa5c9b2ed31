import math
from dataclasses import dataclass
from typing import Any

from service_errors import ValidationError

REQUIRED_MESSAGE = "lat and lon are required"
NOT_NUMBER_MESSAGE = "lat and lon must be numbers"
OUT_OF_RANGE_MESSAGE = "lat must be within [-90, 90] and lon within [-180, 180]"


@dataclass(frozen=True)
class Coordinate:
    """A point as received from the client.

    ``lat``/``lon`` keep the request values untouched so they can be echoed
    back; ``latitude``/``longitude`` are the float views used for geometry.
    """
    lat: Any
    lon: Any
    latitude: float
    longitude: float


def _is_missing(value: Any, allow_zero: bool) -> bool:
    if value is None or value is False:
        return True
    if allow_zero and isinstance(value, (int, float)) and value == 0:
        return False
    return not value


def _to_float(value: Any) -> float:
    # bool is an int subclass; True would otherwise pass as 1.0
    if isinstance(value, bool) or not isinstance(value, (int, float, str)):
        raise ValidationError(NOT_NUMBER_MESSAGE)
    try:
        number = float(value)
    except ValueError:
        raise ValidationError(NOT_NUMBER_MESSAGE)
    if not math.isfinite(number):
        raise ValidationError(NOT_NUMBER_MESSAGE)
    return number


def validate_coordinates(body: Any, allow_zero: bool = False) -> Coordinate:
    """Return the ``Coordinate`` in a request body or raise ``ValidationError``.

    Presence is checked by truthiness, so a numeric 0 is rejected unless
    ``allow_zero`` is set.
    """
    if not isinstance(body, dict):
        body = {}

    lat = body.get('lat')
    lon = body.get('lon')
    if _is_missing(lat, allow_zero) or _is_missing(lon, allow_zero):
        raise ValidationError(REQUIRED_MESSAGE)

    latitude = _to_float(lat)
    longitude = _to_float(lon)
    if not (-90 <= latitude <= 90 and -180 <= longitude <= 180):
        raise ValidationError(OUT_OF_RANGE_MESSAGE)

    return Coordinate(lat=lat, lon=lon, latitude=latitude, longitude=longitude)

"""
NDVI computation, classification and response formatting for a single point.

NDVI = (NIR - Red) / (NIR + Red), classified with fixed half-open thresholds:
below 0.30 is low vegetation, below 0.50 moderate, anything else healthy.
"""

import logging
import math
from dataclasses import dataclass
from decimal import ROUND_HALF_UP, Decimal
from enum import Enum
from typing import Any, Dict, Optional

from coordinates import Coordinate

logger = logging.getLogger(__name__)

LOW_THRESHOLD = 0.3
HEALTHY_THRESHOLD = 0.5

UNAVAILABLE_MESSAGE = "Band values not available (clouds/no image)"
GOOGLE_MAPS_URL = "https://www.google.com/maps?q={lat},{lon}"
NDVI_PLACES = Decimal("0.001")


class VegetationStatus(Enum):
    LOW = "Low vegetation"
    MODERATE = "Moderate vegetation"
    HEALTHY = "Healthy vegetation"


@dataclass(frozen=True)
class BandSample:
    """Near-infrared and red reflectance at a point; either may be None."""
    nir: Optional[float]
    red: Optional[float]


def compute_ndvi(nir: Optional[float], red: Optional[float]) -> Optional[float]:
    """Return the NDVI, or None when it is undefined (missing or negative band, nir + red == 0)."""
    if nir is None or red is None:
        return None
    nir = float(nir)
    red = float(red)
    if not (math.isfinite(nir) and math.isfinite(red)):
        return None
    # reflectance is never negative; a negative band would push the index outside [-1, 1]
    if nir < 0 or red < 0:
        return None
    denominator = nir + red
    if denominator == 0:
        return None
    return (nir - red) / denominator


def classify_ndvi(ndvi: float) -> VegetationStatus:
    if ndvi < LOW_THRESHOLD:
        return VegetationStatus.LOW
    if ndvi < HEALTHY_THRESHOLD:
        return VegetationStatus.MODERATE
    return VegetationStatus.HEALTHY


def format_ndvi(ndvi: float) -> str:
    """Three decimals, exact halves rounded away from zero (0.0625 -> "0.063")."""
    return str(Decimal(ndvi).quantize(NDVI_PLACES, rounding=ROUND_HALF_UP))


def google_maps_link(lat: Any, lon: Any) -> str:
    return GOOGLE_MAPS_URL.format(lat=lat, lon=lon)


@dataclass(frozen=True)
class NdviResult:
    coordinate: Coordinate
    ndvi: Optional[float] = None
    status: Optional[VegetationStatus] = None

    @property
    def available(self) -> bool:
        return self.ndvi is not None

    def to_dict(self) -> Dict[str, Any]:
        lat, lon = self.coordinate.lat, self.coordinate.lon
        if not self.available:
            return {'lat': lat, 'lon': lon, 'message': UNAVAILABLE_MESSAGE}
        return {
            'lat': lat,
            'lon': lon,
            'NDVI': format_ndvi(self.ndvi),
            'VegetationStatus': self.status.value,
            'GoogleMapsLink': google_maps_link(lat, lon),
        }


class NdviEvaluator:
    """Samples bands through ``sampler`` and turns them into an ``NdviResult``.

    ``sampler`` needs a ``sample(latitude, longitude)`` method returning a
    ``BandSample``; it raises ``RemoteError`` or ``ServiceNotReady`` itself.
    """

    def __init__(self, sampler):
        self.sampler = sampler

    def evaluate(self, coordinate: Coordinate) -> NdviResult:
        sample = self.sampler.sample(coordinate.latitude, coordinate.longitude)
        ndvi = compute_ndvi(sample.nir, sample.red)
        if ndvi is None:
            logger.info("No usable band values at (%s, %s): %s",
                        coordinate.lat, coordinate.lon, sample)
            return NdviResult(coordinate)
        return NdviResult(coordinate, ndvi=ndvi, status=classify_ndvi(ndvi))

"""
Google Earth Engine collaborator: service-account login and band sampling.

The session is created once at startup by ``initialize_session`` and handed
to ``EarthEngineBandSampler``; a failed login yields a session that is not
ready instead of an exception, so the web app can still start and answer 503.
"""

import json
import logging
from dataclasses import dataclass
from typing import Any, Dict, Optional

import ee

from ndvi_calc import BandSample
from service_errors import InitializationError, RemoteError, ServiceNotReady

logger = logging.getLogger(__name__)

NIR_BAND = 'B8'
RED_BAND = 'B4'
CLOUD_PROPERTY = 'CLOUDY_PIXEL_PERCENTAGE'


@dataclass(frozen=True)
class EarthEngineSession:
    ready: bool
    project: Optional[str] = None
    error: Optional[str] = None


def parse_service_account(raw: Optional[str]) -> Dict[str, Any]:
    """Parse the one-line service-account JSON and fix escaped key newlines."""
    if not raw:
        raise InitializationError("SERVICE_ACCOUNT environment variable is not set")
    try:
        info = json.loads(raw)
    except json.JSONDecodeError as e:
        raise InitializationError(f"SERVICE_ACCOUNT is not valid JSON: {e}") from e
    if not isinstance(info, dict):
        raise InitializationError("SERVICE_ACCOUNT must be a JSON object")

    missing = [key for key in ('client_email', 'private_key') if not info.get(key)]
    if missing:
        raise InitializationError(f"SERVICE_ACCOUNT is missing {', '.join(missing)}")

    # Keys pasted into a single env line arrive with literal "\n" sequences
    info['private_key'] = info['private_key'].replace('\\n', '\n')
    return info


def initialize_session(settings) -> EarthEngineSession:
    """Authenticate with the service account and initialize Earth Engine."""
    try:
        info = parse_service_account(settings.service_account)
        project = settings.ee_project or info.get('project_id')
        credentials = ee.ServiceAccountCredentials(info['client_email'], key_data=json.dumps(info))
        ee.Initialize(credentials, project=project)
        ee.data.setDeadline(int(settings.request_timeout * 1000))
    except Exception as e:
        logger.error("Earth Engine initialization failed: %s", e)
        return EarthEngineSession(ready=False, error=str(e))

    logger.info("Earth Engine initialized (project=%s)", project)
    return EarthEngineSession(ready=True, project=project)


def _band_value(result: Dict[str, Any], band: str) -> Optional[float]:
    value = result.get(band)
    if value is None:
        return None
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise RemoteError(f"Unexpected value for band {band}: {value!r}")
    return float(value)


class EarthEngineBandSampler:
    """Samples NIR/red at a point from the least-cloudy image of a collection."""

    def __init__(self, session: EarthEngineSession, settings):
        self.session = session
        self.collection_id = settings.collection_id
        self.start_date = settings.start_date
        self.end_date = settings.end_date
        self.scale = settings.scale
        self.max_pixels = settings.max_pixels

    def build_request(self, latitude: float, longitude: float):
        point = ee.Geometry.Point([longitude, latitude])
        collection = (ee.ImageCollection(self.collection_id)
                      .filterBounds(point)
                      .filterDate(self.start_date, self.end_date)
                      .sort(CLOUD_PROPERTY))
        image = ee.Image(collection.first())
        values = image.select([NIR_BAND, RED_BAND]).reduceRegion(
            reducer=ee.Reducer.first(),
            geometry=point,
            scale=self.scale,
            maxPixels=self.max_pixels,
        )
        # An empty collection yields an empty dictionary rather than a failed select()
        return ee.Dictionary(ee.Algorithms.If(collection.size().gt(0), values, ee.Dictionary({})))

    def sample(self, latitude: float, longitude: float) -> BandSample:
        if not self.session.ready:
            raise ServiceNotReady(self.session.error or "Earth Engine is not initialized")

        try:
            result = self.build_request(latitude, longitude).getInfo()
        except Exception as e:
            logger.error("Earth Engine getInfo error at (%s, %s): %s", latitude, longitude, e)
            raise RemoteError(str(e)) from e

        if result is None:
            return BandSample(nir=None, red=None)
        if not isinstance(result, dict):
            raise RemoteError(f"Unexpected Earth Engine response: {result!r}")
        return BandSample(nir=_band_value(result, NIR_BAND), red=_band_value(result, RED_BAND))

"""
Settings for the NDVI service, read from the process environment.

A local ``.env`` file is loaded first with python-dotenv; variables already
present in the environment take precedence.
"""

import os
from dataclasses import dataclass
from typing import Mapping, Optional

from dotenv import load_dotenv

from service_errors import ConfigError

DEFAULT_PORT = 5000
DEFAULT_TIMEOUT = 30.0  # seconds

_TRUE = {'1', 'true', 'yes', 'on'}
_FALSE = {'0', 'false', 'no', 'off', ''}


def _as_bool(name: str, value: Optional[str], default: bool) -> bool:
    if value is None:
        return default
    lowered = value.strip().lower()
    if lowered in _TRUE:
        return True
    if lowered in _FALSE:
        return False
    raise ConfigError(f"{name} must be a boolean, got {value!r}")


def _as_number(name: str, value: Optional[str], default, cast):
    if value is None or value.strip() == '':
        return default
    try:
        number = cast(value)
    except ValueError as e:
        raise ConfigError(f"{name} must be a number, got {value!r}") from e
    if number <= 0:
        raise ConfigError(f"{name} must be positive, got {value!r}")
    return number


@dataclass(frozen=True)
class Settings:
    service_account: Optional[str] = None
    ee_project: Optional[str] = None
    host: str = '0.0.0.0'
    port: int = DEFAULT_PORT
    request_timeout: float = DEFAULT_TIMEOUT
    allow_zero_coordinates: bool = False
    collection_id: str = 'COPERNICUS/S2_HARMONIZED'
    start_date: str = '2024-01-01'
    end_date: str = '2024-12-31'
    scale: int = 10
    max_pixels: float = 1e9
    log_level: str = 'INFO'
    log_fmt: str = ''

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None, use_dotenv: bool = True) -> 'Settings':
        if environ is None:
            if use_dotenv:
                load_dotenv()
            environ = os.environ

        return cls(
            service_account=environ.get('SERVICE_ACCOUNT') or None,
            ee_project=environ.get('EE_PROJECT') or None,
            host=environ.get('HOST', '0.0.0.0'),
            port=_as_number('PORT', environ.get('PORT'), DEFAULT_PORT, int),
            request_timeout=_as_number('NDVI_REQUEST_TIMEOUT', environ.get('NDVI_REQUEST_TIMEOUT'),
                                       DEFAULT_TIMEOUT, float),
            allow_zero_coordinates=_as_bool('NDVI_ALLOW_ZERO_COORDINATES',
                                            environ.get('NDVI_ALLOW_ZERO_COORDINATES'), False),
            collection_id=environ.get('NDVI_COLLECTION', 'COPERNICUS/S2_HARMONIZED'),
            start_date=environ.get('NDVI_START_DATE', '2024-01-01'),
            end_date=environ.get('NDVI_END_DATE', '2024-12-31'),
            log_level=environ.get('NDVI_LOG_LEVEL', 'INFO').upper(),
            log_fmt=environ.get('NDVI_LOG_FMT', ''),
        )

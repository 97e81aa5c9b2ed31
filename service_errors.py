from typing import Any, Dict, Optional


class NdviServiceError(Exception):
    """Base error, rendered as ``{"error": ..., "details": ...}``."""

    status_code = 500
    error = "Server error"

    def __init__(self, details: Optional[str] = None):
        super().__init__(details or self.error)
        self.details = details

    def to_dict(self) -> Dict[str, Any]:
        body = {'error': self.error}
        if self.details is not None:
            body['details'] = self.details
        return body


class ValidationError(NdviServiceError):
    """Client sent a body without usable lat/lon."""

    status_code = 400

    def __init__(self, message: str):
        super().__init__(None)
        self.error = message

    def __str__(self):
        return self.error


class RemoteError(NdviServiceError):
    status_code = 500
    error = "Failed to compute NDVI"


class ServiceNotReady(NdviServiceError):
    status_code = 503
    error = "Service not ready"


class InitializationError(NdviServiceError):
    """Earth Engine credentials or initialization failed at startup."""

    error = "Initialization failed"


class ConfigError(Exception):
    pass

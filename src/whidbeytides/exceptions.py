"""
Exceptions for whidbeytides operations.
"""

from typing import Optional


class TideDataError(Exception):
    """Base exception for whidbeytides errors."""

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message

    def __str__(self) -> str:
        return self.message


class AcquisitionError(TideDataError):
    """Predictions request failed or the service returned an error payload."""

    def __init__(self, message: str, status_code: Optional[int] = None):
        super().__init__(message)
        self.status_code = status_code


class TideConnectionError(AcquisitionError):
    """Error connecting to the predictions service (timeout, network)."""

    pass


class ValidationError(TideDataError):
    """Response body is missing the expected predictions array."""

    pass


class WeatherError(TideDataError):
    """Weather forecast lookup failed."""

    pass

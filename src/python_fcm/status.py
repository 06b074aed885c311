"""Outcome classifications attached to every normalized FCM response."""

from __future__ import annotations

from enum import Enum
from typing import Optional


class FCMOutcome(str, Enum):
    """Human-readable outcome of one FCM request."""

    SUCCESS = "success"
    BAD_REQUEST = (
        "Only applies for JSON requests. Indicates that the request could not "
        "be parsed as JSON, or it contained invalid fields."
    )
    UNAUTHORIZED = "There was an error authenticating the sender account."
    UNAVAILABLE = "Server is temporarily unavailable."
    SERVER_ERROR = (
        "There was an internal error in the FCM server while trying to "
        "process the request."
    )
    UNKNOWN = "The FCM server answered with an unexpected status code."

    @classmethod
    def from_status_code(cls, status_code: Optional[int]) -> "FCMOutcome":
        """Classify an HTTP status code."""
        try:
            code = int(status_code)  # type: ignore[arg-type]
        except (TypeError, ValueError):
            return cls.UNKNOWN

        if 200 <= code < 300:
            return cls.SUCCESS
        if code == 400:
            return cls.BAD_REQUEST
        if code == 401:
            return cls.UNAUTHORIZED
        if code == 503:
            return cls.UNAVAILABLE
        if 500 <= code < 600:
            return cls.SERVER_ERROR
        return cls.UNKNOWN

"""Exception hierarchy raised by the FCM clients."""

from __future__ import annotations


class FCMError(RuntimeError):
    """Base class for every error raised by python-fcm."""


class FCMConfigurationError(FCMError, ValueError):
    """Missing credentials or invalid configuration values."""


class FCMValidationError(FCMError, ValueError):
    """Invalid topic, condition or project name.

    Raised by the request builders before anything reaches the network.
    Clients swallow it (and skip the call) unless strict validation is on.
    """


class FCMAuthenticationError(FCMError):
    """The service-account key could not be read or was rejected."""


class FCMTransportError(FCMError):
    """The HTTP request failed (timeout, connection error) after retries."""


__all__ = [
    "FCMError",
    "FCMConfigurationError",
    "FCMValidationError",
    "FCMAuthenticationError",
    "FCMTransportError",
]

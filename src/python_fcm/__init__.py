"""Firebase Cloud Messaging client for the legacy HTTP and HTTP v1 APIs."""

from __future__ import annotations

from .builders import FCMRequest
from .clients import (BaseClientCommon, FCMClient, FCMClientV1, build_client,
                      get_client_class)
from .conditions import validate_condition, validate_topic
from .credentials import (ApiKeyCredentials, ByteStream, FilePath,
                          ServiceAccountCredentials)
from .exceptions import (FCMAuthenticationError, FCMConfigurationError,
                         FCMError, FCMTransportError, FCMValidationError)
from .fcm import FCM
from .response import FCMResponse, build_fcm_response, normalize_response
from .status import FCMOutcome
from .transport import FCMTransport

__version__ = "0.1.0"

__all__ = [
    "FCM",
    "FCMClient",
    "FCMClientV1",
    "BaseClientCommon",
    "build_client",
    "get_client_class",
    "FCMRequest",
    "FCMResponse",
    "FCMOutcome",
    "FCMTransport",
    "build_fcm_response",
    "normalize_response",
    "validate_condition",
    "validate_topic",
    "ApiKeyCredentials",
    "ServiceAccountCredentials",
    "FilePath",
    "ByteStream",
    "FCMError",
    "FCMConfigurationError",
    "FCMValidationError",
    "FCMAuthenticationError",
    "FCMTransportError",
]

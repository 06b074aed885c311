"""Client for the legacy HTTP protocol (server key authorization)."""

from __future__ import annotations

from typing import Any, Dict, Mapping, Optional

from ..credentials import ApiKeyCredentials
from .base import BaseClientCommon
from .delivery import NotificationDeliveryMixin
from .groups import NotificationSettingMixin
from .topics import InstanceTopicManagementMixin


class FCMClient(
    BaseClientCommon,
    NotificationDeliveryMixin,
    NotificationSettingMixin,
    InstanceTopicManagementMixin,
):
    """
    Firebase Cloud Messaging client for the legacy HTTP API.

    Configuration:
        FCM_API_KEY: Firebase server key (or pass ``api_key``)
        FCM_TIMEOUT: request timeout in seconds (default 30)
        FCM_MAX_RETRIES: retries on transient failures (default 2)
        FCM_BACKOFF_FACTOR: exponential backoff base, in seconds
        FCM_STRICT_VALIDATION: raise on invalid topics/conditions instead of
            skipping the request

    Example:
        >>> client = FCMClient("AAAA...")
        >>> result = client.send(["token-1", "token-2"], {"data": {"id": 1}})
        >>> result.not_registered_ids
        []
    """

    name = "fcm"
    config_keys = [
        "FCM_API_KEY",
        "FCM_TIMEOUT",
        "FCM_MAX_RETRIES",
        "FCM_BACKOFF_FACTOR",
        "FCM_STRICT_VALIDATION",
    ]
    required_packages = ["requests"]
    documentation_url = "https://firebase.google.com/docs/cloud-messaging/http-server-ref"
    retry_on_body = True

    def __init__(
        self,
        api_key: Optional[str] = None,
        config: Optional[Mapping[str, Any]] = None,
        **kwargs: Any,
    ) -> None:
        super().__init__(config, **kwargs)
        self._credentials = ApiKeyCredentials(api_key or self._config.get("FCM_API_KEY"))

    @property
    def credentials(self) -> ApiKeyCredentials:
        return self._credentials

    def authorization_headers(self) -> Dict[str, str]:
        return self._credentials.authorization_headers()


__all__ = ["FCMClient"]

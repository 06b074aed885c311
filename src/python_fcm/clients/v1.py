"""Client for the HTTP v1 API (OAuth2 service account authorization)."""

from __future__ import annotations

from typing import Any, Dict, Mapping, Optional

from ..builders import build_v1_request
from ..credentials import (AuthRequestFactory, CredentialsFactory,
                           ServiceAccountCredentials)
from ..response import FCMResponse
from .base import BaseClientCommon


class FCMClientV1(BaseClientCommon):
    """
    Firebase Cloud Messaging client for the HTTP v1 API.

    Configuration:
        FCM_SERVICE_ACCOUNT_JSON: path to the service account key (or pass
            ``json_key_path``, which also accepts an open stream)
        FCM_PROJECT_NAME: Firebase project identifier (or pass ``project_name``)
        FCM_TIMEOUT, FCM_MAX_RETRIES, FCM_BACKOFF_FACTOR: transport settings;
            no retries unless FCM_MAX_RETRIES is set

    The access token is fetched on first use and reused until it expires.
    """

    name = "fcm_v1"
    config_keys = [
        "FCM_SERVICE_ACCOUNT_JSON",
        "FCM_PROJECT_NAME",
        "FCM_TIMEOUT",
        "FCM_MAX_RETRIES",
        "FCM_BACKOFF_FACTOR",
        "FCM_STRICT_VALIDATION",
    ]
    required_packages = ["requests", "google-auth"]
    documentation_url = "https://firebase.google.com/docs/cloud-messaging/migrate-v1"
    default_max_retries = 0

    def __init__(
        self,
        json_key_path: Any = None,
        project_name: Optional[str] = None,
        config: Optional[Mapping[str, Any]] = None,
        *,
        credentials_factory: Optional[CredentialsFactory] = None,
        auth_request_factory: Optional[AuthRequestFactory] = None,
        **kwargs: Any,
    ) -> None:
        super().__init__(config, **kwargs)
        key_source = json_key_path or self._config.get("FCM_SERVICE_ACCOUNT_JSON")
        self._credentials = ServiceAccountCredentials(
            key_source,
            credentials_factory=credentials_factory,
            auth_request_factory=auth_request_factory,
        )
        self.project_name: str = project_name or self._config.get("FCM_PROJECT_NAME") or ""

    @property
    def credentials(self) -> ServiceAccountCredentials:
        return self._credentials

    def authorization_headers(self) -> Dict[str, str]:
        return self._credentials.authorization_headers()

    def send_notification_v1(
        self, message: Mapping[str, Any], project_name: Optional[str] = None
    ) -> Optional[FCMResponse]:
        """Send ``message`` through ``projects/<project>/messages:send``.

        Returns None without any request when no project name is known.
        """
        request = self._build_or_skip(
            build_v1_request, message, project_name or self.project_name
        )
        if request is None:
            return None
        return self._perform_request(request)

    send_v1 = send_notification_v1


__all__ = ["FCMClientV1"]

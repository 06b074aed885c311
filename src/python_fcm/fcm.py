"""Backwards-compatible single entry point covering both API generations."""

from __future__ import annotations

import logging
import threading
import warnings
from typing import Any, Mapping, Optional

from .builders import (BASE_URI, BASE_URI_V1, GROUP_NOTIFICATION_BASE_URI,
                       INSTANCE_ID_API, RegistrationIds)
from .clients import FCMClient, FCMClientV1
from .clients.base import TRUE_VALUES
from .credentials import AuthRequestFactory, CredentialsFactory
from .exceptions import FCMValidationError
from .response import FCMResponse
from .transport import DEFAULT_TIMEOUT

logger = logging.getLogger(__name__)


class FCM:
    """Historical facade combining the legacy and HTTP v1 clients.

    Every method emits a :class:`DeprecationWarning` and delegates to
    :class:`~python_fcm.clients.FCMClient` or
    :class:`~python_fcm.clients.FCMClientV1`. The underlying clients are
    created on first use and then reused, so the v1 access token is fetched
    only once per facade.
    """

    BASE_URI = BASE_URI
    BASE_URI_V1 = BASE_URI_V1
    GROUP_NOTIFICATION_BASE_URI = GROUP_NOTIFICATION_BASE_URI
    INSTANCE_ID_API = INSTANCE_ID_API
    DEFAULT_TIMEOUT = DEFAULT_TIMEOUT

    def __init__(
        self,
        api_key: Optional[str] = None,
        json_key_path: Any = "",
        project_name: str = "",
        *,
        credentials_factory: Optional[CredentialsFactory] = None,
        auth_request_factory: Optional[AuthRequestFactory] = None,
        **client_kwargs: Any,
    ):
        self._api_key = api_key
        self._json_key_path = json_key_path
        self._project_name = project_name
        self._client_kwargs = client_kwargs
        self._v1_kwargs = {
            "credentials_factory": credentials_factory,
            "auth_request_factory": auth_request_factory,
        }
        self._client: Optional[FCMClient] = None
        self._client_v1: Optional[FCMClientV1] = None
        self._lock = threading.Lock()

    # ------------------------------------------------------------------
    # Delegation helpers
    # ------------------------------------------------------------------

    @staticmethod
    def _deprecate_warning(method: str, replacement: str) -> None:
        warnings.warn(
            f"FCM.{method} is deprecated, use {replacement}.{method} instead.",
            DeprecationWarning,
            stacklevel=4,
        )

    def _legacy(self, method: str) -> FCMClient:
        self._deprecate_warning(method, "FCMClient(api_key)")
        with self._lock:
            if self._client is None:
                self._client = FCMClient(self._api_key, **self._client_kwargs)
            return self._client

    def _v1(self, method: str) -> FCMClientV1:
        self._deprecate_warning(method, "FCMClientV1(json_key_path)")
        with self._lock:
            if self._client_v1 is None:
                self._client_v1 = FCMClientV1(
                    self._json_key_path,
                    self._project_name,
                    **self._v1_kwargs,
                    **self._client_kwargs,
                )
            return self._client_v1

    def _v1_project_missing(self, method: str) -> bool:
        """Return True, without building a v1 client, when no project is known."""
        config = self._client_kwargs.get("config") or {}
        if self._project_name or config.get("FCM_PROJECT_NAME"):
            return False
        self._deprecate_warning(method, "FCMClientV1(json_key_path)")
        error = FCMValidationError("A project name is required for HTTP v1 sends")
        if str(config.get("FCM_STRICT_VALIDATION", "")).strip().lower() in TRUE_VALUES:
            raise error
        logger.warning("FCM: Skipping request, %s", error)
        return True

    # ------------------------------------------------------------------
    # HTTP v1
    # ------------------------------------------------------------------

    def send_notification_v1(self, message: Mapping[str, Any]) -> Optional[FCMResponse]:
        """Send a v1 ``message`` to the project given at construction.

        Returns None without any request when no project name is known.
        """
        if self._v1_project_missing("send_notification_v1"):
            return None
        return self._v1("send_notification_v1").send_notification_v1(
            message, self._project_name
        )

    send_v1 = send_notification_v1

    # ------------------------------------------------------------------
    # Legacy delivery
    # ------------------------------------------------------------------

    def send_notification(
        self, registration_ids: RegistrationIds, options: Optional[Mapping[str, Any]] = None
    ) -> FCMResponse:
        return self._legacy("send_notification").send_notification(
            registration_ids, options
        )

    send = send_notification

    def send_with_notification_key(
        self, notification_key: str, options: Optional[Mapping[str, Any]] = None
    ) -> FCMResponse:
        return self._legacy("send_with_notification_key").send_with_notification_key(
            notification_key, options
        )

    def send_to_topic(
        self, topic: str, options: Optional[Mapping[str, Any]] = None
    ) -> Optional[FCMResponse]:
        return self._legacy("send_to_topic").send_to_topic(topic, options)

    def send_to_topic_condition(
        self, condition: str, options: Optional[Mapping[str, Any]] = None
    ) -> Optional[FCMResponse]:
        return self._legacy("send_to_topic_condition").send_to_topic_condition(
            condition, options
        )

    # ------------------------------------------------------------------
    # Device groups
    # ------------------------------------------------------------------

    def create_notification_key(
        self,
        key_name: str,
        project_id: str,
        registration_ids: Optional[RegistrationIds] = None,
    ) -> FCMResponse:
        return self._legacy("create_notification_key").create_notification_key(
            key_name, project_id, registration_ids
        )

    create = create_notification_key

    def add_registration_ids(
        self,
        key_name: str,
        project_id: str,
        notification_key: str,
        registration_ids: RegistrationIds,
    ) -> FCMResponse:
        return self._legacy("add_registration_ids").add_registration_ids(
            key_name, project_id, notification_key, registration_ids
        )

    add = add_registration_ids

    def remove_registration_ids(
        self,
        key_name: str,
        project_id: str,
        notification_key: str,
        registration_ids: RegistrationIds,
    ) -> FCMResponse:
        return self._legacy("remove_registration_ids").remove_registration_ids(
            key_name, project_id, notification_key, registration_ids
        )

    remove = remove_registration_ids

    def recover_notification_key(self, key_name: str, project_id: str) -> FCMResponse:
        return self._legacy("recover_notification_key").recover_notification_key(
            key_name, project_id
        )

    # ------------------------------------------------------------------
    # Instance ID / topics
    # ------------------------------------------------------------------

    def topic_subscription(self, topic: str, registration_id: str) -> FCMResponse:
        return self._legacy("topic_subscription").topic_subscription(
            topic, registration_id
        )

    def batch_topic_subscription(
        self, topic: str, registration_ids: RegistrationIds
    ) -> FCMResponse:
        return self._legacy("batch_topic_subscription").batch_topic_subscription(
            topic, registration_ids
        )

    def batch_topic_unsubscription(
        self, topic: str, registration_ids: RegistrationIds
    ) -> FCMResponse:
        return self._legacy("batch_topic_unsubscription").batch_topic_unsubscription(
            topic, registration_ids
        )

    def get_instance_id_info(
        self, iid_token: str, options: Optional[Mapping[str, Any]] = None
    ) -> FCMResponse:
        return self._legacy("get_instance_id_info").get_instance_id_info(
            iid_token, options
        )

    def subscribe_instance_id_to_topic(
        self, iid_token: str, topic_name: str
    ) -> FCMResponse:
        client = self._legacy("subscribe_instance_id_to_topic")
        return client.subscribe_instance_id_to_topic(iid_token, topic_name)

    def unsubscribe_instance_id_from_topic(
        self, iid_token: str, topic_name: str
    ) -> FCMResponse:
        client = self._legacy("unsubscribe_instance_id_from_topic")
        return client.unsubscribe_instance_id_from_topic(iid_token, topic_name)

    def batch_subscribe_instance_ids_to_topic(
        self, instance_ids: RegistrationIds, topic_name: str
    ) -> FCMResponse:
        client = self._legacy("batch_subscribe_instance_ids_to_topic")
        return client.batch_subscribe_instance_ids_to_topic(instance_ids, topic_name)

    def batch_unsubscribe_instance_ids_from_topic(
        self, instance_ids: RegistrationIds, topic_name: str
    ) -> FCMResponse:
        client = self._legacy("batch_unsubscribe_instance_ids_from_topic")
        return client.batch_unsubscribe_instance_ids_from_topic(
            instance_ids, topic_name
        )


__all__ = ["FCM"]

"""Legacy notification delivery operations."""

from __future__ import annotations

from typing import Any, Mapping, Optional

from ..builders import (RegistrationIds, as_registration_ids,
                        build_condition_request, build_notification_key_request,
                        build_send_request, build_topic_request)
from ..response import FCMResponse


class NotificationDeliveryMixin:
    """Send messages through ``https://fcm.googleapis.com/fcm/send``."""

    def send_notification(
        self,
        registration_ids: RegistrationIds,
        options: Optional[Mapping[str, Any]] = None,
    ) -> FCMResponse:
        """Send a message to one or more registration IDs.

        The response carries ``canonical_ids`` (stale ID -> replacement) and
        ``not_registered_ids`` computed from the per-recipient results.
        """
        ids = as_registration_ids(registration_ids)
        request = build_send_request(ids, options)
        return self._perform_request(request, ids)  # type: ignore[attr-defined]

    send = send_notification

    def send_with_notification_key(
        self, notification_key: str, options: Optional[Mapping[str, Any]] = None
    ) -> FCMResponse:
        """Send a message to a device group (or any ``to`` target)."""
        request = build_notification_key_request(notification_key, options)
        return self._perform_request(request)  # type: ignore[attr-defined]

    def send_to_topic(
        self, topic: str, options: Optional[Mapping[str, Any]] = None
    ) -> Optional[FCMResponse]:
        """Send a message to ``/topics/<topic>``.

        Returns None without any request when the topic name is invalid.
        """
        request = self._build_or_skip(build_topic_request, topic, options)  # type: ignore[attr-defined]
        if request is None:
            return None
        return self._perform_request(request)  # type: ignore[attr-defined]

    def send_to_topic_condition(
        self, condition: str, options: Optional[Mapping[str, Any]] = None
    ) -> Optional[FCMResponse]:
        """Send a message to the devices matching a topic condition.

        Returns None without any request when the condition is invalid.
        """
        request = self._build_or_skip(build_condition_request, condition, options)  # type: ignore[attr-defined]
        if request is None:
            return None
        return self._perform_request(request)  # type: ignore[attr-defined]


__all__ = ["NotificationDeliveryMixin"]

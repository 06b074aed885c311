"""Instance ID topic subscription management."""

from __future__ import annotations

from typing import Any, Mapping, Optional

from ..builders import (RegistrationIds, build_instance_info_request,
                        build_manage_topics_request,
                        build_topic_subscription_request)
from ..response import FCMResponse


class InstanceTopicManagementMixin:
    """Subscribe tokens to topics through ``https://iid.googleapis.com``."""

    def manage_topics_relationship(
        self, topic: str, registration_ids: RegistrationIds, action: str
    ) -> FCMResponse:
        """Batch ``"Add"`` or ``"Remove"`` tokens to or from ``topic``."""
        request = build_manage_topics_request(topic, registration_ids, action)
        return self._perform_request(request)  # type: ignore[attr-defined]

    def topic_subscription(self, topic: str, registration_id: str) -> FCMResponse:
        request = build_topic_subscription_request(topic, registration_id)
        return self._perform_request(request)  # type: ignore[attr-defined]

    def get_instance_id_info(
        self, iid_token: str, options: Optional[Mapping[str, Any]] = None
    ) -> FCMResponse:
        """Fetch app instance information; pass ``{"details": True}`` for topics."""
        request = build_instance_info_request(iid_token, options)
        return self._perform_request(request)  # type: ignore[attr-defined]

    def batch_topic_subscription(
        self, topic: str, registration_ids: RegistrationIds
    ) -> FCMResponse:
        return self.manage_topics_relationship(topic, registration_ids, "Add")

    def batch_topic_unsubscription(
        self, topic: str, registration_ids: RegistrationIds
    ) -> FCMResponse:
        return self.manage_topics_relationship(topic, registration_ids, "Remove")

    def batch_subscribe_instance_ids_to_topic(
        self, instance_ids: RegistrationIds, topic_name: str
    ) -> FCMResponse:
        return self.manage_topics_relationship(topic_name, instance_ids, "Add")

    def batch_unsubscribe_instance_ids_from_topic(
        self, instance_ids: RegistrationIds, topic_name: str
    ) -> FCMResponse:
        return self.manage_topics_relationship(topic_name, instance_ids, "Remove")

    def subscribe_instance_id_to_topic(
        self, iid_token: str, topic_name: str
    ) -> FCMResponse:
        return self.batch_subscribe_instance_ids_to_topic([iid_token], topic_name)

    def unsubscribe_instance_id_from_topic(
        self, iid_token: str, topic_name: str
    ) -> FCMResponse:
        return self.batch_unsubscribe_instance_ids_from_topic([iid_token], topic_name)


__all__ = ["InstanceTopicManagementMixin"]

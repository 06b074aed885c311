"""Device group (notification key) management."""

from __future__ import annotations

from typing import Optional

from ..builders import (RegistrationIds, build_group_request,
                        build_recover_key_request)
from ..response import FCMResponse


class NotificationSettingMixin:
    """Create device groups and manage their registration IDs."""

    def create_notification_key(
        self,
        key_name: str,
        project_id: str,
        registration_ids: Optional[RegistrationIds] = None,
    ) -> FCMResponse:
        request = build_group_request(
            "create", key_name, project_id, registration_ids or []
        )
        return self._perform_request(request)  # type: ignore[attr-defined]

    create = create_notification_key

    def add_registration_ids(
        self,
        key_name: str,
        project_id: str,
        notification_key: str,
        registration_ids: RegistrationIds,
    ) -> FCMResponse:
        request = build_group_request(
            "add", key_name, project_id, registration_ids, notification_key
        )
        return self._perform_request(request)  # type: ignore[attr-defined]

    add = add_registration_ids

    def remove_registration_ids(
        self,
        key_name: str,
        project_id: str,
        notification_key: str,
        registration_ids: RegistrationIds,
    ) -> FCMResponse:
        request = build_group_request(
            "remove", key_name, project_id, registration_ids, notification_key
        )
        return self._perform_request(request)  # type: ignore[attr-defined]

    remove = remove_registration_ids

    def recover_notification_key(self, key_name: str, project_id: str) -> FCMResponse:
        """Look up the notification key of an existing device group."""
        request = build_recover_key_request(key_name, project_id)
        return self._perform_request(request)  # type: ignore[attr-defined]


__all__ = ["NotificationSettingMixin"]

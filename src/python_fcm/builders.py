"""Pure request builders, one per operation category.

Builders never perform I/O and never attach authorization headers; they only
describe the HTTP call. Invalid topics, conditions or project names raise
:class:`~python_fcm.exceptions.FCMValidationError`.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, List, Mapping, Optional, Sequence, Union

from .conditions import validate_condition, validate_topic
from .exceptions import FCMValidationError

BASE_URI = "https://fcm.googleapis.com"
SEND_END_POINT = "/fcm/send"

BASE_URI_V1 = "https://fcm.googleapis.com/v1/projects/"

GROUP_NOTIFICATION_BASE_URI = "https://android.googleapis.com"
GROUP_END_POINT = "/gcm/notification"

INSTANCE_ID_API = "https://iid.googleapis.com"

GROUP_OPERATIONS = ("create", "add", "remove")
TOPIC_ACTIONS = ("Add", "Remove")

RegistrationIds = Union[str, Sequence[str]]


@dataclass(frozen=True)
class FCMRequest:
    """Description of one HTTP call against an FCM endpoint."""

    method: str
    url: str
    body: Optional[Dict[str, Any]] = None
    params: Optional[Dict[str, Any]] = None
    headers: Dict[str, str] = field(default_factory=dict)


def as_registration_ids(registration_ids: Optional[RegistrationIds]) -> List[str]:
    """Wrap a single registration ID into a list."""
    if registration_ids is None:
        return []
    if isinstance(registration_ids, str):
        return [registration_ids]
    return list(registration_ids)


def _query_value(value: Any) -> Any:
    if isinstance(value, bool):
        return "true" if value else "false"
    return value


def build_post_body(
    registration_ids: Optional[RegistrationIds], options: Optional[Mapping[str, Any]] = None
) -> Dict[str, Any]:
    """Return ``{"registration_ids": [...]}`` merged with ``options``."""
    return {"registration_ids": as_registration_ids(registration_ids), **(options or {})}


# ----------------------------------------------------------------------
# Legacy delivery
# ----------------------------------------------------------------------


def build_send_request(
    registration_ids: RegistrationIds, options: Optional[Mapping[str, Any]] = None
) -> FCMRequest:
    return FCMRequest(
        method="post",
        url=f"{BASE_URI}{SEND_END_POINT}",
        body=build_post_body(registration_ids, options),
    )


def build_notification_key_request(
    notification_key: str, options: Optional[Mapping[str, Any]] = None
) -> FCMRequest:
    return FCMRequest(
        method="post",
        url=f"{BASE_URI}{SEND_END_POINT}",
        body={"to": notification_key, **(options or {})},
    )


def build_topic_request(
    topic: str, options: Optional[Mapping[str, Any]] = None
) -> FCMRequest:
    """Address a message to ``/topics/<topic>``."""
    if not validate_topic(topic):
        raise FCMValidationError(f"Invalid topic name: {topic!r}")
    return build_notification_key_request(f"/topics/{topic}", options)


def build_condition_request(
    condition: str, options: Optional[Mapping[str, Any]] = None
) -> FCMRequest:
    """Address a message to a boolean expression over topics."""
    if not validate_condition(condition):
        raise FCMValidationError(f"Invalid topic condition: {condition!r}")
    return FCMRequest(
        method="post",
        url=f"{BASE_URI}{SEND_END_POINT}",
        body={"condition": condition, **(options or {})},
    )


# ----------------------------------------------------------------------
# Device groups
# ----------------------------------------------------------------------


def build_group_request(
    operation: str,
    key_name: str,
    project_id: str,
    registration_ids: Optional[RegistrationIds] = None,
    notification_key: Optional[str] = None,
) -> FCMRequest:
    """Create a device group, or add/remove registration IDs from one."""
    if operation not in GROUP_OPERATIONS:
        raise FCMValidationError(f"Unknown device group operation: {operation!r}")

    options: Dict[str, Any] = {
        "operation": operation,
        "notification_key_name": key_name,
    }
    if notification_key is not None:
        options["notification_key"] = notification_key

    return FCMRequest(
        method="post",
        url=f"{GROUP_NOTIFICATION_BASE_URI}{GROUP_END_POINT}",
        body=build_post_body(registration_ids, options),
        headers={"project_id": str(project_id)},
    )


def build_recover_key_request(key_name: str, project_id: str) -> FCMRequest:
    return FCMRequest(
        method="get",
        url=f"{GROUP_NOTIFICATION_BASE_URI}{GROUP_END_POINT}",
        params={"notification_key_name": key_name},
        headers={"project_id": str(project_id)},
    )


# ----------------------------------------------------------------------
# Instance ID / topic management
# ----------------------------------------------------------------------


def build_topic_subscription_request(topic: str, registration_id: str) -> FCMRequest:
    return FCMRequest(
        method="post",
        url=f"{INSTANCE_ID_API}/iid/v1/{registration_id}/rel/topics/{topic}",
    )


def build_manage_topics_request(
    topic: str, registration_ids: RegistrationIds, action: str
) -> FCMRequest:
    """Batch add (``"Add"``) or remove (``"Remove"``) tokens from a topic."""
    if action not in TOPIC_ACTIONS:
        raise FCMValidationError(f"Unknown topic relationship action: {action!r}")
    return FCMRequest(
        method="post",
        url=f"{INSTANCE_ID_API}/iid/v1:batch{action}",
        body={
            "to": f"/topics/{topic}",
            "registration_tokens": as_registration_ids(registration_ids),
        },
    )


def build_instance_info_request(
    iid_token: str, options: Optional[Mapping[str, Any]] = None
) -> FCMRequest:
    params = {key: _query_value(value) for key, value in (options or {}).items()}
    return FCMRequest(
        method="get",
        url=f"{INSTANCE_ID_API}/iid/info/{iid_token}",
        params=params or None,
    )


# ----------------------------------------------------------------------
# HTTP v1
# ----------------------------------------------------------------------


def build_v1_request(message: Mapping[str, Any], project_name: Optional[str]) -> FCMRequest:
    if not project_name:
        raise FCMValidationError("A project name is required for HTTP v1 sends")
    return FCMRequest(
        method="post",
        url=f"{BASE_URI_V1}{project_name}/messages:send",
        body={"message": message},
    )


__all__ = [
    "BASE_URI",
    "BASE_URI_V1",
    "GROUP_NOTIFICATION_BASE_URI",
    "INSTANCE_ID_API",
    "FCMRequest",
    "as_registration_ids",
    "build_condition_request",
    "build_group_request",
    "build_instance_info_request",
    "build_manage_topics_request",
    "build_notification_key_request",
    "build_post_body",
    "build_recover_key_request",
    "build_send_request",
    "build_topic_request",
    "build_topic_subscription_request",
    "build_v1_request",
]

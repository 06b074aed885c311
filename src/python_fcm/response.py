"""Normalization of raw FCM HTTP responses."""

from __future__ import annotations

import json
import logging
from dataclasses import asdict, dataclass, field
from typing import Any, Dict, List, Mapping, Optional, Sequence

from .status import FCMOutcome

logger = logging.getLogger(__name__)

NOT_REGISTERED = "NotRegistered"


@dataclass(frozen=True)
class FCMResponse:
    """Uniform result returned by every client operation."""

    body: str
    headers: Dict[str, str]
    status_code: int
    response: FCMOutcome
    canonical_ids: List[Dict[str, str]] = field(default_factory=list)
    not_registered_ids: List[str] = field(default_factory=list)

    @property
    def success(self) -> bool:
        return self.response is FCMOutcome.SUCCESS

    def json(self) -> Any:
        """Decode the raw body, returning None when it is empty."""
        if not self.body:
            return None
        return json.loads(self.body)

    def to_dict(self) -> Dict[str, Any]:
        data = asdict(self)
        data["response"] = self.response.value
        return data


def _as_text(body: Any) -> str:
    if body is None:
        return ""
    if isinstance(body, bytes):
        return body.decode("utf-8", errors="replace")
    return str(body)


def _count(payload: Mapping[str, Any], key: str) -> int:
    try:
        return int(payload.get(key) or 0)
    except (TypeError, ValueError):
        return 0


def _results(payload: Mapping[str, Any]) -> List[Any]:
    results = payload.get("results")
    return results if isinstance(results, list) else []


def build_canonical_ids(
    payload: Mapping[str, Any], registration_ids: Sequence[str]
) -> List[Dict[str, str]]:
    """Pair every stale registration ID with the canonical one FCM returned."""
    if _count(payload, "canonical_ids") <= 0:
        return []

    canonical_ids: List[Dict[str, str]] = []
    for index, result in enumerate(_results(payload)):
        if index >= len(registration_ids) or not isinstance(result, dict):
            continue
        new_id = result.get("registration_id")
        if new_id is not None:
            canonical_ids.append({"old": registration_ids[index], "new": new_id})
    return canonical_ids


def build_not_registered_ids(
    payload: Mapping[str, Any], registration_ids: Sequence[str]
) -> List[str]:
    """Return the registration IDs FCM reported as ``NotRegistered``."""
    if _count(payload, "failure") <= 0:
        return []

    return [
        registration_ids[index]
        for index, result in enumerate(_results(payload))
        if index < len(registration_ids)
        and isinstance(result, dict)
        and result.get("error") == NOT_REGISTERED
    ]


def normalize_response(
    status_code: int,
    body: Any,
    headers: Optional[Mapping[str, str]] = None,
    registration_ids: Optional[Sequence[str]] = None,
) -> FCMResponse:
    """Map a raw status, body and headers onto an :class:`FCMResponse`."""
    text = _as_text(body)
    outcome = FCMOutcome.from_status_code(status_code)
    canonical_ids: List[Dict[str, str]] = []
    not_registered_ids: List[str] = []

    payload = None
    if outcome is FCMOutcome.SUCCESS and registration_ids and text:
        try:
            payload = json.loads(text)
        except ValueError:
            logger.warning("FCM: Response body is not valid JSON, skipping ID remapping")

    if isinstance(payload, dict):
        ids = list(registration_ids or [])
        canonical_ids = build_canonical_ids(payload, ids)
        not_registered_ids = build_not_registered_ids(payload, ids)

    return FCMResponse(
        body=text,
        headers=dict(headers or {}),
        status_code=int(status_code),
        response=outcome,
        canonical_ids=canonical_ids,
        not_registered_ids=not_registered_ids,
    )


def build_fcm_response(
    response: Any, registration_ids: Optional[Sequence[str]] = None
) -> FCMResponse:
    """Normalize a ``requests.Response`` (or any object with the same shape)."""
    return normalize_response(
        response.status_code,
        getattr(response, "text", None),
        getattr(response, "headers", None),
        registration_ids,
    )


__all__ = [
    "FCMResponse",
    "build_canonical_ids",
    "build_fcm_response",
    "build_not_registered_ids",
    "normalize_response",
]

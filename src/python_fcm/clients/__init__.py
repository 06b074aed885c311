"""FCM clients and credential strategy selection."""

from __future__ import annotations

from typing import Any, Dict, Mapping, Type, Union

from ..exceptions import FCMConfigurationError
from .base import BaseClientCommon
from .legacy import FCMClient
from .v1 import FCMClientV1

CLIENT_CLASSES: Dict[str, Type[BaseClientCommon]] = {
    FCMClient.name: FCMClient,
    FCMClientV1.name: FCMClientV1,
}


def get_client_class(name: str) -> Type[BaseClientCommon]:
    """Return a client class by its short name (``fcm`` or ``fcm_v1``)."""
    try:
        return CLIENT_CLASSES[name.lower()]
    except KeyError as exc:
        raise FCMConfigurationError(
            f"Unknown FCM client '{name}'. Available: {sorted(CLIENT_CLASSES)}"
        ) from exc


def build_client(
    config: Mapping[str, Any], **kwargs: Any
) -> Union[FCMClient, FCMClientV1]:
    """Instantiate the client matching the credentials found in ``config``.

    A service account key selects the HTTP v1 client, a server key selects the
    legacy client. Extra keyword arguments go to the client constructor.
    """
    if config.get("FCM_SERVICE_ACCOUNT_JSON"):
        return FCMClientV1(config=config, **kwargs)
    if config.get("FCM_API_KEY"):
        return FCMClient(config=config, **kwargs)
    raise FCMConfigurationError(
        "No FCM credentials configured: set FCM_SERVICE_ACCOUNT_JSON or FCM_API_KEY"
    )


__all__ = [
    "BaseClientCommon",
    "CLIENT_CLASSES",
    "FCMClient",
    "FCMClientV1",
    "build_client",
    "get_client_class",
]

"""Shared plumbing for the legacy and HTTP v1 clients."""

from __future__ import annotations

import importlib
import logging
from datetime import datetime, timezone
from types import MappingProxyType
from typing import Any, Callable, Dict, Mapping, Optional, Sequence

import requests

from ..builders import FCMRequest
from ..exceptions import FCMConfigurationError, FCMValidationError
from ..response import FCMResponse, build_fcm_response
from ..transport import (DEFAULT_BACKOFF_FACTOR, DEFAULT_MAX_RETRIES,
                         DEFAULT_TIMEOUT, FCMTransport)

logger = logging.getLogger(__name__)

EventLogger = Callable[[Dict[str, Any]], None]

TRUE_VALUES = {"1", "true", "yes", "on"}


class BaseClientCommon:
    """Configuration, transport and response handling shared by clients."""

    name: str = "base"
    config_keys: list[str] = []
    required_packages: list[str] = []
    documentation_url: Optional[str] = None
    default_max_retries: int = DEFAULT_MAX_RETRIES
    retry_on_body: bool = False

    def __init__(
        self,
        config: Optional[Mapping[str, Any]] = None,
        *,
        session: Optional[requests.Session] = None,
        transport: Optional[FCMTransport] = None,
        event_logger: Optional[EventLogger] = None,
        clock: Callable[[], datetime] = lambda: datetime.now(timezone.utc),
    ):
        self._raw_config: Dict[str, Any] = dict(config or {})
        self._config: Dict[str, Any] = self._filter_config(self._raw_config)
        self._transport = transport or FCMTransport(
            timeout=self._get_float("FCM_TIMEOUT", DEFAULT_TIMEOUT),
            max_retries=self._get_int("FCM_MAX_RETRIES", self.default_max_retries),
            backoff_factor=self._get_float(
                "FCM_BACKOFF_FACTOR", DEFAULT_BACKOFF_FACTOR
            ),
            retry_on_body=self.retry_on_body,
            session=session,
        )
        self._event_logger = event_logger or (lambda payload: None)
        self._clock = clock

    # ------------------------------------------------------------------
    # Configuration helpers
    # ------------------------------------------------------------------

    def _filter_config(self, config: Dict[str, Any]) -> Dict[str, Any]:
        """Extract the subset of config keys declared by the client."""
        if not self.config_keys:
            return dict(config)
        return {key: config[key] for key in self.config_keys if key in config}

    @property
    def config(self) -> Mapping[str, Any]:
        """Read-only view of the filtered configuration."""
        return MappingProxyType(self._config)

    @property
    def transport(self) -> FCMTransport:
        return self._transport

    def _get_int(self, key: str, default: int) -> int:
        value = self._config.get(key)
        if value in (None, ""):
            return default
        try:
            return int(value)  # type: ignore[arg-type]
        except (TypeError, ValueError) as exc:
            raise FCMConfigurationError(f"{key} must be an integer") from exc

    def _get_float(self, key: str, default: float) -> float:
        value = self._config.get(key)
        if value in (None, ""):
            return default
        try:
            return float(value)  # type: ignore[arg-type]
        except (TypeError, ValueError) as exc:
            raise FCMConfigurationError(f"{key} must be a number") from exc

    def _get_bool(self, key: str, default: bool = False) -> bool:
        value = self._config.get(key)
        if value is None:
            return default
        if isinstance(value, bool):
            return value
        return str(value).strip().lower() in TRUE_VALUES

    @property
    def strict_validation(self) -> bool:
        return self._get_bool("FCM_STRICT_VALIDATION")

    def check_package(self, package_name: str) -> bool:
        """Check if a required package is importable.

        Distribution names are mapped to import names the usual way
        (``google-auth`` -> ``google.auth``).
        """
        candidates = [package_name, package_name.replace("-", "_")]
        candidates.append(package_name.replace("-", "."))
        for candidate in candidates:
            try:
                importlib.import_module(candidate)
                return True
            except ImportError:
                continue
        return False

    def check_required_packages(self) -> Dict[str, bool]:
        """Return the installation status of every required package."""
        return {
            package: self.check_package(package) for package in self.required_packages
        }

    def check_config_keys(
        self, config: Optional[Mapping[str, Any]] = None
    ) -> Dict[str, bool]:
        """Return which declared config keys are present."""
        if config is None:
            config = self._raw_config
        return {key: key in config for key in self.config_keys}

    # ------------------------------------------------------------------
    # Request helpers
    # ------------------------------------------------------------------

    def authorization_headers(self) -> Dict[str, str]:
        raise NotImplementedError

    def _build_or_skip(
        self, builder: Callable[..., FCMRequest], *args: Any
    ) -> Optional[FCMRequest]:
        """Build a request, or return None when its input is invalid."""
        try:
            return builder(*args)
        except FCMValidationError as exc:
            if self.strict_validation:
                raise
            logger.warning("FCM: Skipping request, %s", exc)
            return None

    def _create_event(self, request: FCMRequest, result: FCMResponse) -> None:
        """Notify the external event logger about a completed request."""
        self._event_logger(
            {
                "client": self.name,
                "event_type": "success" if result.success else "failed",
                "method": request.method.upper(),
                "url": request.url,
                "status_code": result.status_code,
                "response": result.response,
                "occurred_at": self._clock(),
            }
        )

    def _perform_request(
        self,
        request: FCMRequest,
        registration_ids: Optional[Sequence[str]] = None,
    ) -> FCMResponse:
        """Send ``request`` with authorization headers and normalize the answer."""
        headers = {"Content-Type": "application/json"}
        headers.update(self.authorization_headers())
        headers.update(request.headers)

        raw_response = self._transport.request(
            request.method,
            request.url,
            json_payload=request.body,
            params=request.params,
            headers=headers,
        )
        result = build_fcm_response(raw_response, registration_ids)
        logger.debug(
            "FCM: %s %s -> %s", request.method.upper(), request.url, result.status_code
        )
        if not result.success:
            logger.warning(
                "FCM: %s answered %s: %s",
                request.url,
                result.status_code,
                result.response.value,
            )
        self._create_event(request, result)
        return result


__all__ = ["BaseClientCommon", "EventLogger"]

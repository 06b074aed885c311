"""Authorization strategies for the legacy and HTTP v1 APIs."""

from __future__ import annotations

import io
import json
import logging
import os
import threading
from dataclasses import dataclass
from typing import IO, Any, Callable, Dict, Mapping, Optional, Sequence, Union

from .exceptions import FCMAuthenticationError, FCMConfigurationError

logger = logging.getLogger(__name__)

FCM_SCOPE = "https://www.googleapis.com/auth/firebase.messaging"

CredentialsFactory = Callable[[Mapping[str, Any], Sequence[str]], Any]
AuthRequestFactory = Callable[[], Any]


@dataclass(frozen=True)
class FilePath:
    """Service-account key stored on disk."""

    path: Union[str, "os.PathLike[str]"]


@dataclass(frozen=True)
class ByteStream:
    """Service-account key provided as an already-open stream."""

    handle: IO[Any]


KeySource = Union[FilePath, ByteStream]


def as_key_source(value: Any) -> KeySource:
    """Resolve a path or an open stream into a :data:`KeySource`."""
    if isinstance(value, (FilePath, ByteStream)):
        return value
    if isinstance(value, io.IOBase):
        return ByteStream(value)
    if isinstance(value, (str, os.PathLike)):
        if not os.fspath(value):
            raise FCMConfigurationError("Service account key path is empty")
        return FilePath(value)
    raise FCMConfigurationError(
        f"Unsupported service account key source: {type(value).__name__}"
    )


def _read_key_source(source: KeySource) -> Dict[str, Any]:
    """Load the service-account JSON document from its source."""
    try:
        if isinstance(source, FilePath):
            with open(source.path, "rb") as stream:
                info = json.load(stream)
        else:
            info = json.load(source.handle)
    except (OSError, ValueError) as exc:
        raise FCMAuthenticationError(
            f"Cannot read service account key: {exc}"
        ) from exc

    if not isinstance(info, dict):
        raise FCMAuthenticationError("Service account key must be a JSON object")
    return info


def _default_credentials_factory(
    info: Mapping[str, Any], scopes: Sequence[str]
) -> Any:
    from google.oauth2 import service_account

    return service_account.Credentials.from_service_account_info(
        info, scopes=list(scopes)
    )


def _default_auth_request() -> Any:
    import google.auth.transport.requests

    return google.auth.transport.requests.Request()


class ApiKeyCredentials:
    """Static server key used by the legacy endpoints."""

    mode = "api_key"

    def __init__(self, api_key: Optional[str]):
        if not api_key:
            raise FCMConfigurationError("An FCM API key is required")
        self._api_key = api_key

    def authorization_headers(self) -> Dict[str, str]:
        return {"Authorization": f"key={self._api_key}"}

    def __repr__(self) -> str:
        return f"{type(self).__name__}(api_key='***')"


class ServiceAccountCredentials:
    """OAuth2 bearer token derived from a service-account key.

    The key is only read on first use. The resulting google-auth credentials
    and their token are cached on the instance and refreshed whenever
    google-auth reports them invalid (missing or expired token).
    """

    mode = "service_account"

    def __init__(
        self,
        key_source: Any,
        *,
        scopes: Sequence[str] = (FCM_SCOPE,),
        credentials_factory: Optional[CredentialsFactory] = None,
        auth_request_factory: Optional[AuthRequestFactory] = None,
    ):
        if key_source is None:
            raise FCMConfigurationError("A service account key is required")
        self._key_source = as_key_source(key_source)
        self._scopes = tuple(scopes)
        self._credentials_factory = credentials_factory or _default_credentials_factory
        self._auth_request_factory = auth_request_factory or _default_auth_request
        self._credentials: Optional[Any] = None
        self._lock = threading.Lock()

    @property
    def key_source(self) -> KeySource:
        return self._key_source

    def _load_credentials(self) -> Any:
        info = _read_key_source(self._key_source)
        try:
            return self._credentials_factory(info, self._scopes)
        except ValueError as exc:
            raise FCMAuthenticationError(
                f"Invalid service account key: {exc}"
            ) from exc

    def access_token(self) -> str:
        """Return a valid access token, fetching one if needed."""
        from google.auth import exceptions as google_exceptions

        with self._lock:
            if self._credentials is None:
                self._credentials = self._load_credentials()

            if not self._credentials.valid:
                logger.debug("FCM: Fetching a new access token")
                try:
                    self._credentials.refresh(self._auth_request_factory())
                except google_exceptions.GoogleAuthError as exc:
                    logger.error("FCM: Access token exchange failed: %s", exc)
                    raise FCMAuthenticationError(
                        f"Access token exchange failed: {exc}"
                    ) from exc

            token = self._credentials.token
            if not token:
                raise FCMAuthenticationError("Token issuer returned no access token")
            return str(token)

    def authorization_headers(self) -> Dict[str, str]:
        return {
            "Authorization": f"Bearer {self.access_token()}",
            "Content-Type": "application/json",
        }


Credentials = Union[ApiKeyCredentials, ServiceAccountCredentials]

__all__ = [
    "FCM_SCOPE",
    "ApiKeyCredentials",
    "ByteStream",
    "Credentials",
    "FilePath",
    "KeySource",
    "ServiceAccountCredentials",
    "as_key_source",
]

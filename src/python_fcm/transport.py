"""HTTP transport built on a retrying ``requests`` session."""

from __future__ import annotations

import json
import logging
import random
import threading
import time
from typing import Any, Callable, Dict, Optional

import requests
from requests.adapters import HTTPAdapter
from urllib3.util import Retry

from .exceptions import FCMTransportError

logger = logging.getLogger(__name__)

DEFAULT_TIMEOUT = 30
DEFAULT_MAX_RETRIES = 2
DEFAULT_BACKOFF_FACTOR = 0.5
DEFAULT_BACKOFF_JITTER = 0.25
DEFAULT_BACKOFF_MAX = 10.0

RETRY_STATUS_CODES = frozenset(range(500, 600))
RETRY_METHODS = frozenset(["GET", "POST"])

# Per-recipient errors of a 200 legacy response that are worth re-sending.
RETRYABLE_ERRORS = frozenset(
    [
        "Unavailable",
        "InternalServerError",
        "DeviceMessageRateExceeded",
        "TopicsMessageRateExceeded",
    ]
)


def has_retryable_errors(response: Any) -> bool:
    """Return True if a 200 response cites a retryable per-recipient error."""
    if getattr(response, "status_code", None) != 200:
        return False
    text = getattr(response, "text", "") or ""
    if not text:
        return False
    try:
        payload = json.loads(text)
    except ValueError:
        return False
    if not isinstance(payload, dict) or not isinstance(payload.get("results"), list):
        return False
    return any(
        isinstance(result, dict) and result.get("error") in RETRYABLE_ERRORS
        for result in payload["results"]
    )


class CappedRetry(Retry):
    """urllib3 retry whose honoured ``Retry-After`` never exceeds ``backoff_max``."""

    def get_retry_after(self, response: Any) -> Optional[float]:
        retry_after = super().get_retry_after(response)
        if retry_after is None:
            return None
        return min(retry_after, self.backoff_max)


class FCMTransport:
    """Send one HTTP request with a bounded timeout and retry policy.

    Timeouts, connection failures and 5xx answers are retried by the urllib3
    ``Retry`` mounted on the session. A server ``Retry-After`` is honoured up
    to ``backoff_max`` seconds. When ``retry_on_body`` is set, 200
    answers whose results carry a retryable error are re-sent here, with the
    same exponential backoff plus jitter.
    """

    def __init__(
        self,
        *,
        timeout: float = DEFAULT_TIMEOUT,
        max_retries: int = DEFAULT_MAX_RETRIES,
        backoff_factor: float = DEFAULT_BACKOFF_FACTOR,
        backoff_jitter: float = DEFAULT_BACKOFF_JITTER,
        backoff_max: float = DEFAULT_BACKOFF_MAX,
        retry_on_body: bool = False,
        session: Optional[requests.Session] = None,
        sleep: Callable[[float], None] = time.sleep,
    ):
        self.timeout = timeout
        self.max_retries = max(0, int(max_retries))
        self.backoff_factor = backoff_factor
        self.backoff_jitter = backoff_jitter
        self.backoff_max = backoff_max
        self.retry_on_body = retry_on_body
        self._session = session
        self._session_lock = threading.Lock()
        self._sleep = sleep

    def build_retry(self) -> CappedRetry:
        return CappedRetry(
            total=self.max_retries,
            connect=self.max_retries,
            read=self.max_retries,
            status=self.max_retries,
            backoff_factor=self.backoff_factor,
            backoff_jitter=self.backoff_jitter,
            backoff_max=self.backoff_max,
            status_forcelist=RETRY_STATUS_CODES,
            allowed_methods=RETRY_METHODS,
            raise_on_status=False,
        )

    @property
    def session(self) -> requests.Session:
        with self._session_lock:
            if self._session is None:
                adapter = HTTPAdapter(max_retries=self.build_retry())
                session = requests.Session()
                session.mount("https://", adapter)
                session.mount("http://", adapter)
                self._session = session
            return self._session

    def backoff_time(self, attempt: int) -> float:
        """Delay before the ``attempt``-th retry (1-based)."""
        delay = min(self.backoff_max, self.backoff_factor * (2 ** (attempt - 1)))
        if self.backoff_jitter > 0:
            delay += random.uniform(0, self.backoff_jitter)
        return delay

    def should_retry(self, response: Any) -> bool:
        return self.retry_on_body and has_retryable_errors(response)

    def request(
        self,
        method: str,
        url: str,
        *,
        json_payload: Optional[Dict[str, Any]] = None,
        params: Optional[Dict[str, Any]] = None,
        headers: Optional[Dict[str, str]] = None,
    ) -> Any:
        """Perform the request and return the final ``requests.Response``."""
        request_kwargs: Dict[str, Any] = {"timeout": self.timeout}
        if json_payload is not None:
            request_kwargs["json"] = json_payload
        if params:
            request_kwargs["params"] = params
        if headers:
            request_kwargs["headers"] = headers

        attempt = 0
        while True:
            logger.debug("FCM: %s %s (attempt %s)", method.upper(), url, attempt + 1)
            try:
                response = self.session.request(method.upper(), url, **request_kwargs)
            except requests.RequestException as exc:
                logger.error("FCM: %s %s failed: %s", method.upper(), url, exc)
                raise FCMTransportError(
                    f"{method.upper()} {url} failed: {exc}"
                ) from exc

            if attempt >= self.max_retries or not self.should_retry(response):
                return response

            attempt += 1
            delay = self.backoff_time(attempt)
            logger.warning(
                "FCM: Retryable errors in response from %s, retry %s/%s in %.2fs",
                url,
                attempt,
                self.max_retries,
                delay,
            )
            self._sleep(delay)


__all__ = [
    "CappedRetry",
    "DEFAULT_MAX_RETRIES",
    "DEFAULT_TIMEOUT",
    "FCMTransport",
    "RETRYABLE_ERRORS",
    "has_retryable_errors",
]

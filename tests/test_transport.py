"""Transport and retry policy tests."""

from __future__ import annotations

from typing import List

import pytest
import requests
from requests.adapters import HTTPAdapter
from urllib3.exceptions import ConnectTimeoutError
from urllib3.response import HTTPResponse

from conftest import FakeResponse, FakeSession, make_transport
from python_fcm.exceptions import FCMTransportError
from python_fcm.transport import (DEFAULT_TIMEOUT, RETRYABLE_ERRORS,
                                  CappedRetry, FCMTransport,
                                  has_retryable_errors)


def _retryable_body(error: str = "Unavailable") -> dict:
    return {"success": 0, "failure": 1, "results": [{"error": error}]}


def test_request_passes_timeout_json_and_headers() -> None:
    session = FakeSession(FakeResponse(200, "{}"))
    transport = make_transport(session, timeout=12)

    response = transport.request(
        "post",
        "https://fcm.googleapis.com/fcm/send",
        json_payload={"to": "x"},
        headers={"Authorization": "key=abc"},
    )

    assert response.status_code == 200
    assert session.last_call == {
        "method": "POST",
        "url": "https://fcm.googleapis.com/fcm/send",
        "timeout": 12,
        "json": {"to": "x"},
        "headers": {"Authorization": "key=abc"},
    }


def test_default_timeout_is_thirty_seconds() -> None:
    assert FCMTransport().timeout == DEFAULT_TIMEOUT == 30


@pytest.mark.parametrize("error", sorted(RETRYABLE_ERRORS))
def test_retryable_errors_are_detected(error: str) -> None:
    assert has_retryable_errors(FakeResponse(200, _retryable_body(error))) is True


def test_non_retryable_bodies() -> None:
    assert has_retryable_errors(FakeResponse(200, _retryable_body("NotRegistered"))) is False
    assert has_retryable_errors(FakeResponse(200, "")) is False
    assert has_retryable_errors(FakeResponse(200, "not json")) is False
    assert has_retryable_errors(FakeResponse(500, _retryable_body())) is False


def test_retryable_body_is_resent_until_success() -> None:
    delays: List[float] = []
    session = FakeSession(
        FakeResponse(200, _retryable_body()),
        FakeResponse(200, _retryable_body("DeviceMessageRateExceeded")),
        FakeResponse(200, {"success": 1, "failure": 0, "results": [{"message_id": "1"}]}),
    )
    transport = make_transport(
        session, retry_on_body=True, max_retries=3, sleep=delays.append
    )

    response = transport.request("post", "https://fcm.googleapis.com/fcm/send")

    assert len(session.calls) == 3
    assert "message_id" in response.text
    assert len(delays) == 2
    assert delays[0] < delays[1]


def test_retries_are_bounded() -> None:
    session = FakeSession(FakeResponse(200, _retryable_body()))
    transport = make_transport(session, retry_on_body=True, max_retries=2)

    response = transport.request("post", "https://fcm.googleapis.com/fcm/send")

    assert len(session.calls) == 3
    assert has_retryable_errors(response)


def test_body_retry_disabled_by_default() -> None:
    session = FakeSession(FakeResponse(200, _retryable_body()))
    transport = make_transport(session, max_retries=2)

    transport.request("post", "https://fcm.googleapis.com/v1/projects/p/messages:send")

    assert len(session.calls) == 1


def test_transport_errors_are_wrapped() -> None:
    session = FakeSession(error=requests.ConnectTimeout("too slow"))
    transport = make_transport(session)

    with pytest.raises(FCMTransportError) as excinfo:
        transport.request("get", "https://iid.googleapis.com/iid/info/token")

    assert isinstance(excinfo.value.__cause__, requests.ConnectTimeout)


def test_backoff_grows_and_is_capped() -> None:
    transport = FCMTransport(backoff_factor=1, backoff_jitter=0, backoff_max=3)

    assert [transport.backoff_time(n) for n in (1, 2, 3, 4)] == [1, 2, 3, 3]


def test_jitter_stays_within_bounds() -> None:
    transport = FCMTransport(backoff_factor=1, backoff_jitter=0.5, backoff_max=10)

    for _ in range(20):
        assert 1 <= transport.backoff_time(1) <= 1.5


def test_default_session_mounts_retrying_adapter() -> None:
    transport = FCMTransport(max_retries=4, backoff_factor=0.1)

    session = transport.session
    adapter = session.get_adapter("https://fcm.googleapis.com/fcm/send")
    retry = adapter.max_retries

    assert isinstance(adapter, HTTPAdapter)
    assert retry.total == 4
    assert retry.connect == 4
    assert retry.read == 4
    assert retry.status == 4
    assert 503 in retry.status_forcelist
    assert 599 in retry.status_forcelist
    assert 404 not in retry.status_forcelist
    assert "POST" in retry.allowed_methods
    assert retry.raise_on_status is False
    assert transport.session is session


def test_retry_policy_covers_server_errors_on_post() -> None:
    retry = FCMTransport(max_retries=2).build_retry()

    assert retry.is_retry("POST", 503) is True
    assert retry.is_retry("GET", 500) is True
    assert retry.is_retry("POST", 404) is False
    assert retry.is_retry("DELETE", 503) is False


def test_retry_policy_counts_connection_failures() -> None:
    retry = FCMTransport(max_retries=2).build_retry()

    retry = retry.increment(
        method="POST", url="/fcm/send", error=ConnectTimeoutError("timed out")
    )

    assert retry.connect == 1
    assert retry.total == 1
    assert isinstance(retry, CappedRetry)


def test_retry_after_is_capped_by_backoff_max() -> None:
    retry = FCMTransport(backoff_max=3).build_retry()

    slow = HTTPResponse(status=503, headers={"Retry-After": "120"})
    quick = HTTPResponse(status=503, headers={"Retry-After": "1"})

    assert retry.get_retry_after(slow) == 3
    assert retry.get_retry_after(quick) == 1
    assert retry.get_retry_after(HTTPResponse(status=503)) is None

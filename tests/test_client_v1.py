"""HTTP v1 client tests."""

from __future__ import annotations

import io
import json

import pytest

from conftest import (SERVICE_ACCOUNT_INFO, CredentialsRecorder, FakeResponse,
                      FakeSession)
from python_fcm import FCMClientV1
from python_fcm.exceptions import FCMConfigurationError, FCMValidationError
from python_fcm.status import FCMOutcome

MESSAGE = {
    "token": "4sdsx",
    "notification": {"title": "Breaking News", "body": "New news story available."},
    "data": {"story_id": "story_12345"},
}


def test_send_notification_v1(
    client_v1: FCMClientV1,
    session: FakeSession,
    credentials_factory: CredentialsRecorder,
) -> None:
    session.responses = [FakeResponse(200, {"name": "projects/test-project/messages/1"})]

    result = client_v1.send_notification_v1(MESSAGE)

    call = session.last_call
    assert call["method"] == "POST"
    assert call["url"] == (
        "https://fcm.googleapis.com/v1/projects/test-project/messages:send"
    )
    assert call["json"] == {"message": MESSAGE}
    assert call["headers"] == {
        "Content-Type": "application/json",
        "Authorization": "Bearer access-token-1",
    }
    assert call["timeout"] == 30
    assert result is not None
    assert result.response is FCMOutcome.SUCCESS
    assert result.canonical_ids == []
    assert result.not_registered_ids == []


def test_token_is_reused_across_sends(
    client_v1: FCMClientV1,
    session: FakeSession,
    credentials_factory: CredentialsRecorder,
) -> None:
    client_v1.send_v1(MESSAGE)
    client_v1.send_v1(MESSAGE)

    assert len(session.calls) == 2
    assert credentials_factory.built[0].refresh_calls == 1


def test_project_name_per_call(client_v1: FCMClientV1, session: FakeSession) -> None:
    client_v1.send_notification_v1(MESSAGE, "other-project")

    assert session.last_call["url"] == (
        "https://fcm.googleapis.com/v1/projects/other-project/messages:send"
    )


def test_empty_project_name_skips_request(
    key_file: str, session: FakeSession, credentials_factory: CredentialsRecorder
) -> None:
    client = FCMClientV1(key_file, "", session=session, credentials_factory=credentials_factory)

    assert client.send_notification_v1(MESSAGE) is None
    assert client.send_notification_v1(MESSAGE, "") is None
    assert session.calls == []
    assert credentials_factory.built == []


def test_empty_project_name_raises_in_strict_mode(
    key_file: str, session: FakeSession, credentials_factory: CredentialsRecorder
) -> None:
    client = FCMClientV1(
        key_file,
        config={"FCM_STRICT_VALIDATION": True},
        session=session,
        credentials_factory=credentials_factory,
    )

    with pytest.raises(FCMValidationError):
        client.send_notification_v1(MESSAGE)


def test_configuration_from_dict(
    key_file: str, session: FakeSession, credentials_factory: CredentialsRecorder
) -> None:
    client = FCMClientV1(
        config={
            "FCM_SERVICE_ACCOUNT_JSON": key_file,
            "FCM_PROJECT_NAME": "configured-project",
            "FCM_API_KEY": "ignored",
        },
        session=session,
        credentials_factory=credentials_factory,
        auth_request_factory=lambda: object(),
    )

    client.send_v1(MESSAGE)

    assert client.project_name == "configured-project"
    assert "FCM_API_KEY" not in client.config
    assert "configured-project" in session.last_call["url"]


def test_stream_key_source(session: FakeSession, credentials_factory: CredentialsRecorder) -> None:
    stream = io.BytesIO(json.dumps(SERVICE_ACCOUNT_INFO).encode("utf-8"))
    client = FCMClientV1(
        stream,
        "test-project",
        session=session,
        credentials_factory=credentials_factory,
        auth_request_factory=lambda: object(),
    )

    client.send_v1(MESSAGE)

    assert credentials_factory.built[0].info["client_email"] == SERVICE_ACCOUNT_INFO["client_email"]


def test_requires_service_account_key(session: FakeSession) -> None:
    with pytest.raises(FCMConfigurationError):
        FCMClientV1(project_name="test-project", session=session)


def test_v1_does_not_retry_by_default(client_v1: FCMClientV1, session: FakeSession) -> None:
    session.responses = [
        FakeResponse(200, {"failure": 1, "results": [{"error": "Unavailable"}]})
    ]

    client_v1.send_v1(MESSAGE)

    assert client_v1.transport.max_retries == 0
    assert client_v1.transport.retry_on_body is False
    assert len(session.calls) == 1

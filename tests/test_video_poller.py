from unittest import mock

import pytest
import requests
from google.genai import errors as genai_errors

from conftest import FakeClient, RecordingWriter, make_operation
from lumina.errors import PollTimeoutError, ServiceError, SessionExpiredError
from lumina.utils import parse_data_uri
from lumina.video_poller import (
    download_video,
    fetch_completed_video,
    is_session_expired,
    materialize_video,
    poll_operation,
    resolve_video_uri,
)


def test_not_done_twice_then_done_queries_three_times(no_sleep):
    sleep, slept = no_sleep
    done = make_operation(True, uri="https://files.example/final")
    client = FakeClient(poll_results=[make_operation(False), make_operation(False), done])

    result = poll_operation(client, make_operation(False), poll_interval=10, max_wait=600, sleep=sleep)

    assert client.operations.calls == 3
    assert result is done
    assert resolve_video_uri(result) == "https://files.example/final"
    assert slept == [10, 10, 10]


def test_already_done_operation_is_not_queried(no_sleep):
    sleep, slept = no_sleep
    client = FakeClient()
    op = make_operation(True, uri="u")
    assert poll_operation(client, op, poll_interval=10, max_wait=60, sleep=sleep) is op
    assert client.operations.calls == 0
    assert slept == []


def test_poll_gives_up_after_max_wait(no_sleep):
    sleep, _ = no_sleep
    client = FakeClient(poll_results=[make_operation(False)] * 10)

    with pytest.raises(PollTimeoutError):
        poll_operation(client, make_operation(False), poll_interval=10, max_wait=30, sleep=sleep)

    assert client.operations.calls == 3


def test_entity_not_found_is_session_expiry(no_sleep):
    sleep, _ = no_sleep
    client = FakeClient(poll_results=[make_operation(False), Exception("Requested entity was not found.")])

    with pytest.raises(SessionExpiredError) as excinfo:
        poll_operation(client, make_operation(False), poll_interval=1, max_wait=60, sleep=sleep)

    assert "select your API key again" in str(excinfo.value)
    assert client.operations.calls == 2


def _api_error(cls, code, status):
    return cls(code, {"error": {"code": code, "message": "request failed", "status": status}})


@pytest.mark.parametrize("code, status", [(401, "UNAUTHENTICATED"), (403, "PERMISSION_DENIED")])
def test_rejected_key_is_session_expiry(code, status):
    assert is_session_expired(_api_error(genai_errors.ClientError, code, status))


@pytest.mark.parametrize(
    "exc",
    [
        _api_error(genai_errors.ServerError, 500, "INTERNAL"),
        _api_error(genai_errors.ClientError, 429, "RESOURCE_EXHAUSTED"),
        ConnectionError("network down"),
    ],
)
def test_other_errors_are_not_session_expiry(exc):
    assert not is_session_expired(exc)


def test_server_error_during_poll_propagates(no_sleep):
    sleep, _ = no_sleep
    client = FakeClient(poll_results=[_api_error(genai_errors.ServerError, 500, "INTERNAL")])

    with pytest.raises(genai_errors.ServerError):
        poll_operation(client, make_operation(False), poll_interval=1, max_wait=60, sleep=sleep)


def test_other_failures_propagate_unchanged(no_sleep):
    sleep, _ = no_sleep
    boom = ConnectionError("network down")
    client = FakeClient(poll_results=[boom, make_operation(True)])

    with pytest.raises(ConnectionError):
        poll_operation(client, make_operation(False), poll_interval=1, max_wait=60, sleep=sleep)

    assert client.operations.calls == 1


def test_progress_goes_to_status_writer(no_sleep):
    sleep, _ = no_sleep
    writer = RecordingWriter()
    client = FakeClient(poll_results=[make_operation(False), make_operation(True)])

    poll_operation(client, make_operation(False), poll_interval=10, max_wait=60, status_writer=writer, sleep=sleep)

    assert writer.messages[0] == "⏳ Still processing... (10s)"
    assert writer.messages[-1] == "✅ Video generation complete"


def test_interval_and_limit_come_from_environment(monkeypatch, no_sleep):
    sleep, slept = no_sleep
    monkeypatch.setenv("LUMINA_POLL_INTERVAL", "2.5")
    monkeypatch.setenv("LUMINA_MAX_POLL_SECONDS", "not-a-number")
    client = FakeClient(poll_results=[make_operation(True)])

    poll_operation(client, make_operation(False), sleep=sleep)

    assert slept == [2.5]


def test_failed_operation_raises_service_error():
    op = make_operation(True, error={"code": 3, "message": "safety filter"})
    with pytest.raises(ServiceError, match="safety filter"):
        resolve_video_uri(op)


def test_download_sends_key_as_query_param():
    resp = mock.Mock(content=b"video")
    with mock.patch("lumina.video_poller.requests.get", return_value=resp) as get:
        assert download_video("https://files.example/v?alt=media", "secret") == b"video"
    get.assert_called_once_with("https://files.example/v?alt=media", params={"key": "secret"}, timeout=120)
    resp.raise_for_status.assert_called_once()


def test_download_http_error_propagates():
    resp = mock.Mock(content=b"")
    resp.raise_for_status.side_effect = requests.HTTPError("500")
    with mock.patch("lumina.video_poller.requests.get", return_value=resp):
        with pytest.raises(requests.HTTPError):
            download_video("https://files.example/v", "secret")


def test_materialize_keeps_video_in_memory(tmp_path, monkeypatch):
    monkeypatch.setattr("tempfile.tempdir", str(tmp_path))

    uri = materialize_video(b"abc")

    assert parse_data_uri(uri) == (b"abc", "video/mp4")
    assert list(tmp_path.iterdir()) == []


def test_fetch_completed_video_returns_data_uri():
    op = make_operation(True, uri="https://files.example/v")
    with mock.patch("lumina.video_poller.download_video", return_value=b"clip") as download:
        uri = fetch_completed_video(op, "secret")
    download.assert_called_once_with("https://files.example/v", "secret")
    assert parse_data_uri(uri) == (b"clip", "video/mp4")


def test_fetch_completed_video_without_reference():
    assert fetch_completed_video(make_operation(True), "secret") is None

from __future__ import annotations

from pathlib import Path

import pytest
import requests

from stormdata.common.http import HttpClient, HttpRequestError, RetryConfig, RetryableHttpError


class FakeResponse:
    def __init__(self, status_code: int, chunks=(), raises: Exception | None = None):
        self.status_code = status_code
        self._chunks = list(chunks)
        self._raises = raises
        self.closed = False

    def iter_content(self, chunk_size: int = 1):
        for chunk in self._chunks:
            yield chunk
        if self._raises is not None:
            raise self._raises

    def close(self):
        self.closed = True


def test_download_writes_file(monkeypatch, tmp_path: Path):
    client = HttpClient(retry=RetryConfig(max_attempts=1))
    response = FakeResponse(200, [b"abc", b"", b"def"])
    monkeypatch.setattr(client.session, "request", lambda **_kwargs: response)

    written = client.download("https://example.com/file.bz2", tmp_path / "raw" / "file.bz2")

    assert written == 6
    assert (tmp_path / "raw" / "file.bz2").read_bytes() == b"abcdef"
    assert not (tmp_path / "raw" / "file.bz2.part").exists()
    assert response.closed


def test_download_requests_streaming_with_timeouts(monkeypatch, tmp_path: Path):
    client = HttpClient(retry=RetryConfig(max_attempts=1))
    seen = {}

    def fake_request(**kwargs):
        seen.update(kwargs)
        return FakeResponse(200, [b"x"])

    monkeypatch.setattr(client.session, "request", fake_request)
    client.download("https://example.com/file.bz2", tmp_path / "file.bz2")

    assert seen["stream"] is True
    assert seen["timeout"] == (client.timeout.connect, client.timeout.read)


def test_retryable_status_raises_retryable_error(monkeypatch, tmp_path: Path):
    client = HttpClient(retry=RetryConfig(max_attempts=1))
    monkeypatch.setattr(client.session, "request", lambda **_kwargs: FakeResponse(503))

    with pytest.raises(RetryableHttpError):
        client.download("https://example.com/file.bz2", tmp_path / "file.bz2")
    assert not (tmp_path / "file.bz2").exists()


def test_retries_until_success_when_configured(monkeypatch, tmp_path: Path):
    client = HttpClient(retry=RetryConfig(max_attempts=3, multiplier=0.0, max_wait=0.0))
    responses = [FakeResponse(502), FakeResponse(200, [b"ok"])]
    monkeypatch.setattr(client.session, "request", lambda **_kwargs: responses.pop(0))
    monkeypatch.setattr("time.sleep", lambda _seconds: None)

    assert client.download("https://example.com/file.bz2", tmp_path / "file.bz2") == 2


def test_client_error_status_is_not_retried(monkeypatch, tmp_path: Path):
    client = HttpClient(retry=RetryConfig(max_attempts=3))
    calls = []

    def fake_request(**_kwargs):
        calls.append(1)
        return FakeResponse(404)

    monkeypatch.setattr(client.session, "request", fake_request)

    with pytest.raises(HttpRequestError):
        client.download("https://example.com/file.bz2", tmp_path / "file.bz2")
    assert len(calls) == 1


def test_interrupted_download_removes_partial_file(monkeypatch, tmp_path: Path):
    client = HttpClient(retry=RetryConfig(max_attempts=1))
    response = FakeResponse(200, [b"abc"], raises=requests.ConnectionError("reset"))
    monkeypatch.setattr(client.session, "request", lambda **_kwargs: response)

    with pytest.raises(RetryableHttpError):
        client.download("https://example.com/file.bz2", tmp_path / "file.bz2")
    assert not (tmp_path / "file.bz2.part").exists()
    assert not (tmp_path / "file.bz2").exists()


def test_empty_download_is_an_error(monkeypatch, tmp_path: Path):
    client = HttpClient(retry=RetryConfig(max_attempts=1))
    monkeypatch.setattr(client.session, "request", lambda **_kwargs: FakeResponse(200, []))

    with pytest.raises(HttpRequestError):
        client.download("https://example.com/file.bz2", tmp_path / "file.bz2")


def test_connection_failure_becomes_http_error(monkeypatch, tmp_path: Path):
    client = HttpClient(retry=RetryConfig(max_attempts=1))

    def fail(**_kwargs):
        raise requests.ConnectionError("no route")

    monkeypatch.setattr(client.session, "request", fail)

    with pytest.raises(HttpRequestError):
        client.download("https://example.com/file.bz2", tmp_path / "file.bz2")

"""HTTP client for file downloads with timeouts and optional retries."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from types import TracebackType

import requests
from tenacity import retry, retry_if_exception_type, stop_after_attempt, wait_exponential_jitter

from stormdata.common.constants import USER_AGENT
from stormdata.common.errors import StageError
from stormdata.common.fs import ensure_dir

RETRYABLE_STATUS_CODES = {408, 425, 429, 500, 502, 503, 504}
CHUNK_SIZE = 1024 * 1024


@dataclass(frozen=True)
class TimeoutConfig:
    connect: float = 20.0
    read: float = 300.0


@dataclass(frozen=True)
class RetryConfig:
    max_attempts: int = 1
    multiplier: float = 1.0
    max_wait: float = 30.0


class HttpRequestError(StageError):
    error_code = "HTTP_ERROR"


class RetryableHttpError(HttpRequestError):
    pass


class HttpClient:
    def __init__(
        self,
        *,
        timeout: TimeoutConfig | None = None,
        retry: RetryConfig | None = None,
    ) -> None:
        self.timeout = timeout or TimeoutConfig()
        self.retry = retry or RetryConfig()
        self.session = requests.Session()

    def close(self) -> None:
        self.session.close()

    def __enter__(self) -> "HttpClient":
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        self.close()

    def _raise_for_status_or_retry(self, response: requests.Response) -> None:
        status = response.status_code
        if status in RETRYABLE_STATUS_CODES:
            raise RetryableHttpError(f"Retryable HTTP status: {status}")
        if status >= 400:
            raise HttpRequestError(f"HTTP status: {status}")

    def _download(self, url: str, destination: Path) -> int:
        response = self.session.request(
            method="GET",
            url=url,
            headers={"User-Agent": USER_AGENT},
            timeout=(self.timeout.connect, self.timeout.read),
            stream=True,
        )
        try:
            self._raise_for_status_or_retry(response)
            ensure_dir(destination.parent)
            partial = destination.with_name(destination.name + ".part")
            written = 0
            try:
                with partial.open("wb") as f:
                    for chunk in response.iter_content(chunk_size=CHUNK_SIZE):
                        if chunk:
                            f.write(chunk)
                            written += len(chunk)
            except requests.RequestException as exc:
                partial.unlink(missing_ok=True)
                raise RetryableHttpError(f"Download interrupted: {url}") from exc
            if written == 0:
                partial.unlink(missing_ok=True)
                raise HttpRequestError(f"Empty download from {url}")
            partial.replace(destination)
            return written
        finally:
            response.close()

    def download(self, url: str, destination: Path) -> int:
        """Stream ``url`` to ``destination`` and return the number of bytes written."""

        @retry(
            stop=stop_after_attempt(self.retry.max_attempts),
            wait=wait_exponential_jitter(
                initial=self.retry.multiplier,
                max=self.retry.max_wait,
                jitter=1.0,
            ),
            retry=retry_if_exception_type(RetryableHttpError),
            reraise=True,
        )
        def _wrapped() -> int:
            return self._download(url, destination)

        try:
            return _wrapped()
        except requests.RequestException as exc:
            raise HttpRequestError(f"Request failed for {url}: {exc}") from exc

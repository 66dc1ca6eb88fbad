"""Source file acquisition, cached on disk by presence."""

from __future__ import annotations

import logging
from pathlib import Path

from stormdata.common.http import HttpClient, RetryConfig, TimeoutConfig
from stormdata.common.logging import log_event


def source_path(analysis_config: dict, data_dir: Path) -> Path:
    return data_dir / "raw" / analysis_config["source"]["filename"]


def build_http_client(analysis_config: dict) -> HttpClient:
    http_cfg = analysis_config["http"]
    return HttpClient(
        timeout=TimeoutConfig(
            connect=float(http_cfg["connect_timeout"]),
            read=float(http_cfg["read_timeout"]),
        ),
        retry=RetryConfig(max_attempts=int(http_cfg["max_attempts"])),
    )


def run_fetch(
    analysis_config: dict,
    data_dir: Path,
    *,
    client: HttpClient | None = None,
    logger: logging.Logger | None = None,
    run_id: str | None = None,
) -> Path:
    path = source_path(analysis_config, data_dir)
    if path.exists():
        if logger is not None:
            log_event(logger, "source cached", run_id=run_id, stage="fetch", event="SOURCE_CACHED", status="ok", path=str(path))
        return path

    url = analysis_config["source"]["url"]
    if client is not None:
        written = client.download(url, path)
    else:
        with build_http_client(analysis_config) as http:
            written = http.download(url, path)

    if logger is not None:
        log_event(
            logger,
            f"downloaded {written} bytes",
            run_id=run_id,
            stage="fetch",
            event="SOURCE_DOWNLOADED",
            status="ok",
            path=str(path),
        )
    return path

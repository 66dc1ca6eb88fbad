"""JSON-lines logging for pipeline runs."""

from __future__ import annotations

import json
import logging
import time
from contextlib import contextmanager
from pathlib import Path
from typing import Any, Iterator

from stormdata.common.constants import JSON_LOG_FIELDS
from stormdata.common.fs import ensure_dir
from stormdata.common.time_utils import utc_timestamp_iso


class JsonLineFormatter(logging.Formatter):
    def format(self, record: logging.LogRecord) -> str:
        payload = {field: getattr(record, field, None) for field in JSON_LOG_FIELDS}
        payload["timestamp"] = utc_timestamp_iso()
        payload["level"] = record.levelname
        payload["message"] = record.getMessage()
        return json.dumps(payload, ensure_ascii=False)


def build_logger(run_id: str, data_dir: Path, level: str = "INFO") -> logging.Logger:
    logger = logging.getLogger(f"stormdata.{run_id}")
    logger.setLevel(level.upper())
    logger.handlers.clear()
    logger.propagate = False

    stream = logging.StreamHandler()
    stream.setFormatter(JsonLineFormatter())
    logger.addHandler(stream)

    log_path = data_dir / "run_meta" / f"{run_id}.log.jsonl"
    ensure_dir(log_path.parent)
    file_handler = logging.FileHandler(log_path, encoding="utf-8")
    file_handler.setFormatter(JsonLineFormatter())
    logger.addHandler(file_handler)

    return logger


def close_logger(logger: logging.Logger) -> None:
    for handler in list(logger.handlers):
        handler.close()
        logger.removeHandler(handler)


def log_event(logger: logging.Logger, message: str, *, level: int = logging.INFO, **event_fields: Any) -> None:
    logger.log(level, message, extra=event_fields)


@contextmanager
def timed_stage(logger: logging.Logger, run_id: str, stage: str) -> Iterator[dict[str, Any]]:
    """Log STAGE_START/STAGE_END around a block.

    The yielded dict collects extra fields (rows_in, rows_out, ...) for the end event.
    """
    fields: dict[str, Any] = {}
    log_event(logger, "stage start", run_id=run_id, stage=stage, event="STAGE_START", status="ok")
    started = time.monotonic()
    yield fields
    duration_ms = int((time.monotonic() - started) * 1000)
    log_event(
        logger,
        "stage end",
        run_id=run_id,
        stage=stage,
        event="STAGE_END",
        status="ok",
        duration_ms=duration_ms,
        **fields,
    )

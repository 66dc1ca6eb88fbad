"""Date helpers for source parsing and run metadata."""

from __future__ import annotations

from datetime import date, datetime, timezone

BEGIN_DATE_FORMAT = "%m/%d/%Y"


def parse_begin_date(value: str) -> date:
    # Source dates look like "4/18/1950 0:00:00"; only the date part is kept.
    token = value.strip().split(" ", 1)[0]
    return datetime.strptime(token, BEGIN_DATE_FORMAT).date()


def utc_timestamp_iso() -> str:
    return datetime.now(tz=timezone.utc).isoformat(timespec="milliseconds")


def generate_run_id() -> str:
    now = datetime.now(tz=timezone.utc)
    return now.strftime("run-%Y%m%dT%H%M%S%fZ")

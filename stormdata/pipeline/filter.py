"""Observation-window and summary-row filtering."""

from __future__ import annotations

from typing import Iterable

from stormdata.common.constants import SUMMARY_MARKER
from stormdata.common.models import RawRecord


def is_summary_row(record: RawRecord) -> bool:
    return record.raw_category.startswith(SUMMARY_MARKER)


def in_window(record: RawRecord, year_min: int, year_max: int) -> bool:
    return year_min <= record.observed_at.year <= year_max


def filter_records(records: Iterable[RawRecord], year_min: int, year_max: int) -> list[RawRecord]:
    return [
        record
        for record in records
        if in_window(record, year_min, year_max) and not is_summary_row(record)
    ]

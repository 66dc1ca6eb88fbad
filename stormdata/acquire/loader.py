"""Parse the compressed storm events CSV into RawRecords."""

from __future__ import annotations

import bz2
import csv
from pathlib import Path
from typing import IO, Iterator

from stormdata.common.constants import SOURCE_COLUMNS
from stormdata.common.errors import SourceFormatError
from stormdata.common.models import RawRecord
from stormdata.common.time_utils import parse_begin_date


def _open_text(path: Path, encoding: str) -> IO[str]:
    if path.suffix == ".bz2":
        return bz2.open(path, "rt", encoding=encoding, newline="")
    return path.open("r", encoding=encoding, newline="")


def _to_float(value: str | None, column: str, line: int) -> float:
    text = (value or "").strip()
    if not text:
        return 0.0
    try:
        return float(text)
    except ValueError as exc:
        raise SourceFormatError(f"Invalid {column} value {text!r}", column=column, line=line) from exc


def _to_count(value: str | None, column: str, line: int) -> int:
    count = int(_to_float(value, column, line))
    if count < 0:
        raise SourceFormatError(f"Negative {column} value", column=column, line=line)
    return count


def _parse_row(row: dict, line: int) -> RawRecord:
    try:
        observed_at = parse_begin_date(row["BGN_DATE"] or "")
    except ValueError as exc:
        raise SourceFormatError(f"Invalid BGN_DATE {row['BGN_DATE']!r}", column="BGN_DATE", line=line) from exc

    return RawRecord(
        observed_at=observed_at,
        region=(row["STATE"] or "").strip(),
        raw_category=(row["EVTYPE"] or "").strip(),
        fatalities=_to_count(row["FATALITIES"], "FATALITIES", line),
        injuries=_to_count(row["INJURIES"], "INJURIES", line),
        property_damage_magnitude=_to_float(row["PROPDMG"], "PROPDMG", line),
        property_damage_unit=(row["PROPDMGEXP"] or "").strip(),
        crop_damage_magnitude=_to_float(row["CROPDMG"], "CROPDMG", line),
        crop_damage_unit=(row["CROPDMGEXP"] or "").strip(),
    )


def iter_raw_records(path: Path, encoding: str = "latin-1") -> Iterator[RawRecord]:
    if not path.exists():
        raise SourceFormatError(f"Missing source file: {path}")

    try:
        with _open_text(path, encoding) as f:
            reader = csv.DictReader(f)
            header = [name.strip() for name in (reader.fieldnames or [])]
            missing = [column for column in SOURCE_COLUMNS if column not in header]
            if missing:
                raise SourceFormatError(f"Source file is missing columns: {', '.join(missing)}", column=missing[0])
            reader.fieldnames = header
            for row in reader:
                yield _parse_row(row, reader.line_num)
    except (OSError, EOFError, csv.Error) as exc:
        raise SourceFormatError(f"Unreadable source file {path}: {exc}") from exc


def load_raw_records(path: Path, encoding: str = "latin-1") -> list[RawRecord]:
    return list(iter_raw_records(path, encoding))

from __future__ import annotations

import bz2
import csv
import io
from pathlib import Path

import pytest

FIXTURE_HEADER = [
    "STATE__",
    "BGN_DATE",
    "BGN_TIME",
    "STATE",
    "EVTYPE",
    "FATALITIES",
    "INJURIES",
    "PROPDMG",
    "PROPDMGEXP",
    "CROPDMG",
    "CROPDMGEXP",
    "REFNUM",
]

FIXTURE_ROWS = [
    ("5/12/1995 0:00:00", "AL", "TORNADO", "5", "10", "1", "M", "0", ""),
    ("8/1/1999 0:00:00", "TX", "Summary August 1999", "0", "0", "0", "", "0", ""),
    ("1/6/1996 0:00:00", "AL", "TSTM WIND", "1", "2", "2.5", "K", "0", ""),
    ("3/2/1997 0:00:00", "GA", "FLASH FLOODING", "2", "0", "3", "M", "1", "K"),
    ("6/9/1998 0:00:00", "ND", "FLOOD", "1", "3", "1.5", "B", "0", ""),
    ("1/1/2000 0:00:00", "MN", "RECORD COLD", "0", "0", "0", "", "0", ""),
    ("7/20/2001 0:00:00", "IL", "EXCESSIVE HEAT", "10", "50", "0", "", "0", ""),
    ("8/29/2005 0:00:00", "LA", "HURRICANE/TYPHOON", "3", "1", "2", "B", "0.5", "B"),
    ("5/4/2005 0:00:00", "KS", "TORNADO", "4", "100", "500", "M", "0", ""),
    ("2/2/2010 0:00:00", "CA", "WEIRD STUFF", "7", "7", "7", "", "0", ""),
    ("6/30/2011 0:00:00", "OH", "THUNDERSTORM WINDS", "0", "1", "10", "K", "0", ""),
]


def write_storm_source(path: Path, rows=FIXTURE_ROWS, header=FIXTURE_HEADER) -> Path:
    buffer = io.StringIO()
    writer = csv.writer(buffer, lineterminator="\n")
    writer.writerow(header)
    for idx, (bgn_date, state, evtype, fat, inj, prop, propexp, crop, cropexp) in enumerate(rows, start=1):
        row = {
            "STATE__": "1",
            "BGN_DATE": bgn_date,
            "BGN_TIME": "0130",
            "STATE": state,
            "EVTYPE": evtype,
            "FATALITIES": fat,
            "INJURIES": inj,
            "PROPDMG": prop,
            "PROPDMGEXP": propexp,
            "CROPDMG": crop,
            "CROPDMGEXP": cropexp,
            "REFNUM": str(idx),
        }
        writer.writerow([row.get(column, "") for column in header])
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_bytes(bz2.compress(buffer.getvalue().encode("latin-1")))
    return path


@pytest.fixture
def storm_data_dir(tmp_path: Path) -> Path:
    data_dir = tmp_path / "data"
    write_storm_source(data_dir / "raw" / "StormData.csv.bz2")
    return data_dir

"""Load, filter, normalise and assess storm event records in memory."""

from __future__ import annotations

from pathlib import Path

from stormdata.acquire.fetch import source_path
from stormdata.acquire.loader import load_raw_records
from stormdata.common.config_loader import ConfigBundle
from stormdata.common.fs import write_json
from stormdata.pipeline.categories import CategoryMatcher, build_category_audit, normalise_records, unmatched_rate
from stormdata.pipeline.damage import assess_records
from stormdata.pipeline.filter import filter_records


def run_normalise(bundle: ConfigBundle, data_dir: Path, run_id: str) -> dict:
    analysis_config = bundle.analysis
    path = source_path(analysis_config, data_dir)
    raw_records = load_raw_records(path, encoding=analysis_config["source"]["encoding"])

    year_min, year_max = bundle.year_window
    filtered = filter_records(raw_records, year_min, year_max)

    matcher = CategoryMatcher(tolerance=bundle.tolerance)
    normalised = normalise_records(filtered, matcher)
    assessed = assess_records(normalised)

    audit = build_category_audit(normalised, matcher)
    audit["run_id"] = run_id
    write_json(data_dir / "out" / "reports" / "category_audit.json", audit)

    return {
        "run_id": run_id,
        "window": {"year_min": year_min, "year_max": year_max},
        "raw_row_count": len(raw_records),
        "filtered_row_count": len(filtered),
        "distinct_raw_categories": audit["distinct_raw_categories"],
        "unmatched_records": audit["unmatched_records"],
        "unmatched_rate": unmatched_rate(normalised),
        "records": assessed,
    }

from pathlib import Path

from stormdata.common.config_loader import load_all_configs
from stormdata.pipeline.normalise import run_normalise


def test_run_normalise_uses_bundle_window(storm_data_dir: Path, tmp_path: Path):
    overlay = tmp_path / "overlay"
    overlay.mkdir()
    (overlay / "analysis.yml").write_text("window:\n  year_min: 2000\n", encoding="utf-8")
    bundle = load_all_configs(Path("config"), overlay_config_dir=overlay)

    result = run_normalise(bundle, storm_data_dir, "run-window")

    assert result["window"] == {"year_min": 2000, "year_max": 2011}
    assert result["raw_row_count"] == 11
    assert result["filtered_row_count"] == 6
    assert result["unmatched_records"] == 1
    assert {record.canonical_category for record in result["records"]} == {
        "COLD/WIND CHILL",
        "EXCESSIVE HEAT",
        "HURRICANE/TYPHOON",
        "TORNADO",
        "THUNDERSTORM WIND",
        None,
    }

from datetime import date

import pytest

from stormdata.common.models import DamageFigures, NormalizedRecord, RawRecord
from stormdata.pipeline.damage import assess_records, compute_damage, resolve_damage, resolve_multiplier


def test_unit_multiplier_examples():
    assert resolve_damage(2.5, "K") == 2500
    assert resolve_damage(3, "M") == 3_000_000
    assert resolve_damage(7, "") == 7


@pytest.mark.parametrize(
    ("code", "multiplier"),
    [("K", 1e3), ("M", 1e6), ("B", 1e9), ("m", 1e6), (" k ", 1e3), ("", 1.0), (None, 1.0), ("H", 1.0), ("+", 1.0), ("5", 1.0)],
)
def test_resolve_multiplier(code, multiplier):
    assert resolve_multiplier(code) == multiplier


def test_compute_damage_and_total():
    raw = RawRecord(
        observed_at=date(2005, 8, 29),
        region="LA",
        raw_category="HURRICANE/TYPHOON",
        fatalities=0,
        injuries=0,
        property_damage_magnitude=2.0,
        property_damage_unit="B",
        crop_damage_magnitude=0.5,
        crop_damage_unit="M",
    )

    figures = compute_damage(raw)

    assert figures == DamageFigures(property_damage=2e9, crop_damage=5e5)
    assert figures.total_damage == 2_000_500_000

    assessed = assess_records([NormalizedRecord(raw=raw, cleaned_category="HURRICANE/TYPHOON", canonical_category="HURRICANE/TYPHOON")])
    assert assessed[0].damage == figures
    assert assessed[0].record.raw is raw

from datetime import date

from stormdata.common.models import AssessedRecord, CategoryTotals, DamageFigures, NormalizedRecord, RawRecord
from stormdata.pipeline.aggregate import aggregate_by_category, rank_by_damage, rank_by_harm


def _assessed(category: str | None, fatalities: int = 0, injuries: int = 0, prop: float = 0.0, crop: float = 0.0) -> AssessedRecord:
    raw = RawRecord(
        observed_at=date(2000, 1, 1),
        region="MO",
        raw_category=category or "UNKNOWN",
        fatalities=fatalities,
        injuries=injuries,
        property_damage_magnitude=prop,
        property_damage_unit="",
        crop_damage_magnitude=crop,
        crop_damage_unit="",
    )
    record = NormalizedRecord(raw=raw, cleaned_category=category or "UNKNOWN", canonical_category=category)
    return AssessedRecord(record=record, damage=DamageFigures(property_damage=prop, crop_damage=crop))


def test_aggregate_sums_per_category_and_excludes_unmatched():
    records = [
        _assessed("FLOOD", fatalities=1, prop=10.0),
        _assessed("FLOOD", fatalities=0, injuries=4, crop=5.0),
        _assessed("FLOOD", fatalities=2),
        _assessed("HAIL", fatalities=1),
        _assessed(None, fatalities=100),
    ]

    totals = {row.category: row for row in aggregate_by_category(records)}

    assert set(totals) == {"FLOOD", "HAIL"}
    assert totals["FLOOD"].fatalities == 3
    assert totals["FLOOD"].injuries == 4
    assert totals["FLOOD"].events == 3
    assert totals["FLOOD"].total_damage == 15.0


def test_flood_ranks_above_lower_fatality_sums():
    records = [
        _assessed("FLOOD", fatalities=1),
        _assessed("FLOOD", fatalities=0),
        _assessed("FLOOD", fatalities=2),
        _assessed("HAIL", fatalities=2, injuries=500),
        _assessed("HEAT", fatalities=0),
    ]

    ranked = rank_by_harm(aggregate_by_category(records))

    assert [row.category for row in ranked] == ["FLOOD", "HAIL", "HEAT"]


def test_harm_ties_break_on_injuries_then_name():
    totals = [
        CategoryTotals("B", 1, 5, 1, 0.0, 0.0),
        CategoryTotals("A", 1, 5, 1, 0.0, 0.0),
        CategoryTotals("C", 1, 5, 9, 0.0, 0.0),
    ]
    assert [row.category for row in rank_by_harm(totals, top_n=2)] == ["C", "A"]


def test_damage_ranking_applies_floor_and_top_n():
    totals = [
        CategoryTotals("FLOOD", 1, 0, 0, 2e9, 1e8),
        CategoryTotals("TORNADO", 1, 0, 0, 5e9, 0.0),
        CategoryTotals("HAIL", 1, 0, 0, 1e9, 0.0),
        CategoryTotals("DROUGHT", 1, 0, 0, 0.0, 3e9),
    ]

    ranked = rank_by_damage(totals, floor=1e9)
    assert [row.category for row in ranked] == ["TORNADO", "DROUGHT", "FLOOD"]
    assert [row.category for row in rank_by_damage(totals, floor=1e9, top_n=1)] == ["TORNADO"]

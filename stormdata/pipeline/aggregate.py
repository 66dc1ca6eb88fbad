"""Per-category aggregation and rankings."""

from __future__ import annotations

from collections import defaultdict
from typing import Iterable, Sequence

from stormdata.common.models import AssessedRecord, CategoryTotals


def matched_only(records: Iterable[AssessedRecord]) -> list[AssessedRecord]:
    return [record for record in records if record.canonical_category is not None]


def aggregate_by_category(records: Iterable[AssessedRecord]) -> list[CategoryTotals]:
    sums: dict[str, list] = defaultdict(lambda: [0, 0, 0, 0.0, 0.0])
    for record in matched_only(records):
        bucket = sums[record.canonical_category]
        bucket[0] += 1
        bucket[1] += record.fatalities
        bucket[2] += record.injuries
        bucket[3] += record.damage.property_damage
        bucket[4] += record.damage.crop_damage

    return [
        CategoryTotals(
            category=category,
            events=events,
            fatalities=fatalities,
            injuries=injuries,
            property_damage=property_damage,
            crop_damage=crop_damage,
        )
        for category, (events, fatalities, injuries, property_damage, crop_damage) in sorted(sums.items())
    ]


def rank_by_harm(totals: Sequence[CategoryTotals], top_n: int | None = None) -> list[CategoryTotals]:
    ranked = sorted(totals, key=lambda row: (-row.fatalities, -row.injuries, row.category))
    return ranked if top_n is None else ranked[:top_n]


def rank_by_damage(
    totals: Sequence[CategoryTotals],
    floor: float = 0.0,
    top_n: int | None = None,
) -> list[CategoryTotals]:
    above_floor = [row for row in totals if row.total_damage > floor]
    ranked = sorted(above_floor, key=lambda row: (-row.total_damage, row.category))
    return ranked if top_n is None else ranked[:top_n]

"""Damage magnitude resolution."""

from __future__ import annotations

from typing import Iterable

from stormdata.common.constants import DAMAGE_UNIT_MULTIPLIERS
from stormdata.common.models import AssessedRecord, DamageFigures, NormalizedRecord, RawRecord


def resolve_multiplier(code: str | None) -> float:
    # Unknown or missing codes take the magnitude at face value.
    if not code:
        return 1.0
    return DAMAGE_UNIT_MULTIPLIERS.get(code.strip().upper(), 1.0)


def resolve_damage(magnitude: float, code: str | None) -> float:
    return magnitude * resolve_multiplier(code)


def compute_damage(record: RawRecord) -> DamageFigures:
    return DamageFigures(
        property_damage=resolve_damage(record.property_damage_magnitude, record.property_damage_unit),
        crop_damage=resolve_damage(record.crop_damage_magnitude, record.crop_damage_unit),
    )


def assess_records(records: Iterable[NormalizedRecord]) -> list[AssessedRecord]:
    return [AssessedRecord(record=record, damage=compute_damage(record.raw)) for record in records]

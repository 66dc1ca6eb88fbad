"""Record types passed between pipeline stages.

Each stage derives a new frozen record from the previous one:
RawRecord -> NormalizedRecord -> AssessedRecord.
"""

from __future__ import annotations

from dataclasses import asdict, dataclass
from datetime import date
from typing import Any


@dataclass(frozen=True)
class RawRecord:
    observed_at: date
    region: str
    raw_category: str
    fatalities: int
    injuries: int
    property_damage_magnitude: float
    property_damage_unit: str
    crop_damage_magnitude: float
    crop_damage_unit: str


@dataclass(frozen=True)
class CategoryMatch:
    cleaned: str
    canonical: str | None
    distance: int | None
    method: str


@dataclass(frozen=True)
class NormalizedRecord:
    raw: RawRecord
    cleaned_category: str
    canonical_category: str | None


@dataclass(frozen=True)
class DamageFigures:
    property_damage: float
    crop_damage: float

    @property
    def total_damage(self) -> float:
        return self.property_damage + self.crop_damage


@dataclass(frozen=True)
class AssessedRecord:
    record: NormalizedRecord
    damage: DamageFigures

    @property
    def canonical_category(self) -> str | None:
        return self.record.canonical_category

    @property
    def fatalities(self) -> int:
        return self.record.raw.fatalities

    @property
    def injuries(self) -> int:
        return self.record.raw.injuries


@dataclass(frozen=True)
class CategoryTotals:
    category: str
    events: int
    fatalities: int
    injuries: int
    property_damage: float
    crop_damage: float

    @property
    def total_damage(self) -> float:
        return self.property_damage + self.crop_damage

    def to_dict(self) -> dict[str, Any]:
        payload = asdict(self)
        payload["total_damage"] = self.total_damage
        return payload

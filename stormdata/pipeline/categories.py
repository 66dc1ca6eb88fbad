"""Event-type normalisation: ordered rewrite rules then edit-distance matching."""

from __future__ import annotations

from collections import Counter, defaultdict
from typing import Iterable, Sequence

from rapidfuzz.distance import Levenshtein

from stormdata.common.models import CategoryMatch, NormalizedRecord, RawRecord
from stormdata.common.taxonomy import OFFICIAL_EVENT_TYPES
from stormdata.common.text_rules import Anchoring, RewriteRule, apply_rules, shared_rules

_QUALIFIERS = (
    "RECORD",
    "SEVERE",
    "LIGHT",
    "MODERATE",
    "UNSEASONABLY",
    "UNSEASONABLE",
    "UNSEASONAL",
    "UNUSUALLY",
    "UNUSUAL",
    "ABNORMALLY",
    "ABNORMAL",
    "PROLONGED",
    "VERY",
    "MINOR",
    "MAJOR",
    "ISOLATED",
    "LOCALLY",
    "LOCAL",
    "OCCASIONAL",
    "FREQUENT",
    "PERSISTENT",
)
_EDGE_PUNCTUATION = r"[\s/\\.,;:&-]+"

_TRIM_RULES = (
    RewriteRule(r"\s+", " "),
    RewriteRule(_EDGE_PUNCTUATION, "", Anchoring.START),
    RewriteRule(_EDGE_PUNCTUATION, "", Anchoring.END),
)

REWRITE_RULES: tuple[RewriteRule, ...] = (
    # source data quirks
    RewriteRule(r"\([^)]*\)", " ", raw_only=True),
    RewriteRule(r"\b[FG]?\d+(?:\.\d+)?\b", " ", raw_only=True),
    RewriteRule(r"(?:\s*/\s*HAIL)+", "", Anchoring.END, raw_only=True),
    RewriteRule(
        r"\b(?:THUNDERSTROM|THUNERSTORM|THUNDEERSTORM|TUNDERSTORM|THUDERSTORM|THUNDESTORM|THUNDERTORM)\b",
        "THUNDERSTORM",
        raw_only=True,
    ),
    RewriteRule(r"\s+", " "),
    # abbreviations
    RewriteRule(r"\bTSTMW?\b", "THUNDERSTORM"),
    RewriteRule(r"\bFLD\b", "FLOOD"),
    RewriteRule(r"\bSML\b", "SMALL"),
    RewriteRule(r"\bCSTL\b", "COASTAL"),
    RewriteRule(r"\bHVY\b", "HEAVY"),
    RewriteRule(r"\bWND\b", "WIND"),
    RewriteRule(r"\bWINDCHILL\b", "WIND CHILL"),
    RewriteRule(r"\bPRECIP\b", "PRECIPITATION"),
    # plurals
    RewriteRule(r"\b(WIND|CURRENT|WATERSPOUT|THUNDERSTORM|FUNNEL CLOUD|AVALANCHE|FLOOD)S\b", r"\1"),
    RewriteRule(r"\bTORNADOES\b", "TORNADO"),
    # intensity and frequency qualifiers, whole words only
    RewriteRule(r"\b(?:" + "|".join(_QUALIFIERS) + r")\b", ""),
    *_TRIM_RULES,
    # event-family consolidation
    RewriteRule(r".*\bFLOOD.*", "FLOOD", Anchoring.WHOLE),
    RewriteRule(
        r".*\bSTORM (?:SURGE|TIDE)\b.*|.*\bASTRONOMICAL HIGH TIDE\b.*|.*\bCOASTAL SURGE\b.*",
        "STORM SURGE/TIDE",
        Anchoring.WHOLE,
    ),
    RewriteRule(r".*\bSURF\b.*", "HIGH SURF", Anchoring.WHOLE),
    RewriteRule(r".*\bFIRES?\b.*", "WILDFIRE", Anchoring.WHOLE),
    RewriteRule(r".*\b(?:HURRICANE|TYPHOON)\b.*", "HURRICANE/TYPHOON", Anchoring.WHOLE),
    RewriteRule(r".*\b(?:FROST|FREEZE)\b.*", "FROST/FREEZE", Anchoring.WHOLE),
    RewriteRule(
        r".*\b(?:LANDSLIDES?|MUDSLIDES?|MUD SLIDES?|ROCK SLIDE|LANDSLUMP)\b.*",
        "DEBRIS FLOW",
        Anchoring.WHOLE,
    ),
    RewriteRule(r"TROPICAL STORM\b.*", "TROPICAL STORM", Anchoring.WHOLE),
    # boundary touch-ups
    RewriteRule(r"DUST STORM\b.*", "DUST STORM", Anchoring.START),
    RewriteRule(r"BLIZZARD\b.*", "BLIZZARD", Anchoring.START),
    RewriteRule(r"WATERSPOUT\b.*", "WATERSPOUT", Anchoring.START),
    RewriteRule(r"\bTHUNDERSTORM", "THUNDERSTORM WIND", Anchoring.END),
    RewriteRule(r"COLD|COLD WEATHER|COLD TEMPERATURES?|COLD WAVE|WIND CHILL", "COLD/WIND CHILL", Anchoring.WHOLE),
    RewriteRule(r"EXTREME (?:COLD|WIND CHILL)", "EXTREME COLD/WIND CHILL", Anchoring.WHOLE),
    RewriteRule(r"WARM|WARMTH|WARM WEATHER|HOT|HOT WEATHER|HEAT WAVE|HEATWAVE", "HEAT", Anchoring.WHOLE),
    RewriteRule(r"FOG", "DENSE FOG", Anchoring.WHOLE),
    RewriteRule(r"WIND", "HIGH WIND", Anchoring.WHOLE),
    RewriteRule(
        r"SNOW|WINTRY MIX|WINTER MIX|WINTER WEATHER[ /]MIX|MIXED PRECIPITATION",
        "WINTER WEATHER",
        Anchoring.WHOLE,
    ),
    *_TRIM_RULES,
)

TAXONOMY_RULES = shared_rules(REWRITE_RULES)


def normalise_category(value: str | None, rules: Sequence[RewriteRule] = REWRITE_RULES) -> str:
    """Rewrite a free-text event type into its cleaned form.

    Passes are repeated until the output is stable, so the result is a fixed
    point of the rule table.
    """
    current = (value or "").upper()
    while True:
        rewritten = apply_rules(current, rules)
        if rewritten == current:
            return current
        current = rewritten


def normalise_taxonomy(names: Iterable[str] = OFFICIAL_EVENT_TYPES) -> tuple[str, ...]:
    seen: dict[str, None] = {}
    for name in names:
        seen.setdefault(normalise_category(name, TAXONOMY_RULES), None)
    return tuple(seen)


class CategoryMatcher:
    """Match cleaned strings against the normalised taxonomy.

    Exact hits short-circuit. Otherwise the closest entry by Levenshtein
    distance wins if it lies within ``tolerance``; equal distances resolve to
    the earliest entry in taxonomy order.
    """

    def __init__(self, taxonomy: Sequence[str] | None = None, tolerance: int = 1) -> None:
        if tolerance < 0:
            raise ValueError("tolerance must be non-negative")
        self.taxonomy = tuple(taxonomy) if taxonomy is not None else normalise_taxonomy()
        self.tolerance = tolerance
        self._exact = frozenset(self.taxonomy)
        self._cache: dict[str, CategoryMatch] = {}

    def match(self, cleaned: str) -> CategoryMatch:
        cached = self._cache.get(cleaned)
        if cached is None:
            cached = self._match_uncached(cleaned)
            self._cache[cleaned] = cached
        return cached

    def _match_uncached(self, cleaned: str) -> CategoryMatch:
        if cleaned in self._exact:
            return CategoryMatch(cleaned=cleaned, canonical=cleaned, distance=0, method="exact")

        best: str | None = None
        best_distance = self.tolerance + 1
        for entry in self.taxonomy:
            distance = Levenshtein.distance(cleaned, entry, score_cutoff=self.tolerance)
            if distance < best_distance:
                best, best_distance = entry, distance

        if best is None:
            return CategoryMatch(cleaned=cleaned, canonical=None, distance=None, method="unmatched")
        return CategoryMatch(cleaned=cleaned, canonical=best, distance=best_distance, method="fuzzy")

    def match_raw(self, raw_category: str) -> CategoryMatch:
        return self.match(normalise_category(raw_category))


def normalise_records(records: Iterable[RawRecord], matcher: CategoryMatcher) -> list[NormalizedRecord]:
    cleaned_by_raw: dict[str, str] = {}
    out: list[NormalizedRecord] = []
    for record in records:
        cleaned = cleaned_by_raw.get(record.raw_category)
        if cleaned is None:
            cleaned = normalise_category(record.raw_category)
            cleaned_by_raw[record.raw_category] = cleaned
        result = matcher.match(cleaned)
        out.append(
            NormalizedRecord(
                raw=record,
                cleaned_category=cleaned,
                canonical_category=result.canonical,
            )
        )
    return out


def unmatched_rate(records: Sequence[NormalizedRecord]) -> float:
    if not records:
        return 0.0
    unmatched = sum(1 for record in records if record.canonical_category is None)
    return unmatched / len(records)


def build_category_audit(
    records: Sequence[NormalizedRecord],
    matcher: CategoryMatcher,
    *,
    sample_size: int = 25,
) -> dict:
    counts: Counter[str] = Counter(record.raw.raw_category for record in records)
    cleaned_by_raw = {record.raw.raw_category: record.cleaned_category for record in records}
    method_counts: dict[str, int] = defaultdict(int)

    mappings = []
    for raw_category in sorted(counts):
        result = matcher.match(cleaned_by_raw[raw_category])
        method_counts[result.method] += counts[raw_category]
        mappings.append(
            {
                "raw_category": raw_category,
                "cleaned_category": result.cleaned,
                "canonical_category": result.canonical,
                "method": result.method,
                "distance": result.distance,
                "records": counts[raw_category],
            }
        )

    unmatched = sorted(
        (row for row in mappings if row["canonical_category"] is None),
        key=lambda row: (-row["records"], row["raw_category"]),
    )
    unmatched_records = sum(row["records"] for row in unmatched)

    return {
        "tolerance": matcher.tolerance,
        "taxonomy": list(matcher.taxonomy),
        "distinct_raw_categories": len(counts),
        "distinct_unmatched_categories": len(unmatched),
        "records": len(records),
        "unmatched_records": unmatched_records,
        "unmatched_rate": unmatched_rate(records),
        "records_by_method": dict(sorted(method_counts.items())),
        "top_unmatched": unmatched[:sample_size],
        "mappings": mappings,
    }

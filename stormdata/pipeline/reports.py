"""Rankings, charts, narrative report and run summary."""

from __future__ import annotations

from pathlib import Path
from typing import Sequence

from stormdata.common.fs import write_csv, write_json, write_text
from stormdata.common.models import CategoryTotals
from stormdata.pipeline.aggregate import aggregate_by_category, rank_by_damage, rank_by_harm
from stormdata.pipeline.charts import plot_damage_ranking, plot_harm_ranking

RANKING_HEADERS = [
    "rank",
    "category",
    "events",
    "fatalities",
    "injuries",
    "property_damage",
    "crop_damage",
    "total_damage",
]
HARM_CHART = "figures/harm_ranking.png"
DAMAGE_CHART = "figures/damage_ranking.png"


def _serialize_ranking(rows: Sequence[CategoryTotals]) -> list[dict]:
    out = []
    for rank, row in enumerate(rows, start=1):
        out.append(
            {
                "rank": rank,
                "category": row.category,
                "events": row.events,
                "fatalities": row.fatalities,
                "injuries": row.injuries,
                "property_damage": f"{row.property_damage:.2f}",
                "crop_damage": f"{row.crop_damage:.2f}",
                "total_damage": f"{row.total_damage:.2f}",
            }
        )
    return out


def _billions(value: float) -> str:
    return f"{value / 1e9:,.2f}"


def render_markdown(
    normalised: dict,
    harm: Sequence[CategoryTotals],
    damage: Sequence[CategoryTotals],
    *,
    damage_floor: float,
) -> str:
    window = normalised["window"]
    rate_pct = normalised["unmatched_rate"] * 100
    lines = [
        "# Health and economic impact of severe weather events in the United States",
        "",
        "## Synopsis",
        "",
        (
            f"This report analyses the NOAA Storm Events database for {window['year_min']}-{window['year_max']}. "
            "Free-text event types are rewritten and matched against the official event categories; "
            "fatalities, injuries and damage are then summed per category."
        ),
    ]
    if harm:
        lines.append(
            f"{harm[0].category} is the most harmful event type to population health "
            f"({harm[0].fatalities:,} fatalities, {harm[0].injuries:,} injuries)."
        )
    if damage:
        lines.append(
            f"{damage[0].category} has the greatest economic consequences "
            f"(USD {_billions(damage[0].total_damage)} billion in property and crop damage)."
        )
    lines += [
        "",
        "## Data processing",
        "",
        f"- Records loaded: {normalised['raw_row_count']:,}",
        f"- Records in the observation window (summary rows removed): {normalised['filtered_row_count']:,}",
        f"- Distinct raw event types: {normalised['distinct_raw_categories']:,}",
        (
            f"- Records without a matching official category: {normalised['unmatched_records']:,} "
            f"({rate_pct:.2f}%), excluded from the rankings"
        ),
        "- Damage magnitudes use the K/M/B codes; other codes are taken at face value. Figures are nominal USD.",
        "",
        "## Results",
        "",
        "### Events most harmful to population health",
        "",
        "| Rank | Event type | Fatalities | Injuries |",
        "|---:|---|---:|---:|",
    ]
    for rank, row in enumerate(harm, start=1):
        lines.append(f"| {rank} | {row.category} | {row.fatalities:,} | {row.injuries:,} |")
    lines += [
        "",
        f"![Fatalities and injuries by event type]({HARM_CHART})",
        "",
        f"### Events with the greatest economic consequences (total damage above USD {_billions(damage_floor)} billion)",
        "",
        "| Rank | Event type | Property (USD bn) | Crop (USD bn) | Total (USD bn) |",
        "|---:|---|---:|---:|---:|",
    ]
    for rank, row in enumerate(damage, start=1):
        lines.append(
            f"| {rank} | {row.category} | {_billions(row.property_damage)} | "
            f"{_billions(row.crop_damage)} | {_billions(row.total_damage)} |"
        )
    lines += [
        "",
        f"![Property and crop damage by event type]({DAMAGE_CHART})",
        "",
    ]
    return "\n".join(lines)


def run_report(normalised: dict, analysis_config: dict, data_dir: Path) -> dict:
    report_cfg = analysis_config["report"]
    top_n = int(report_cfg["top_n"])
    damage_floor = float(report_cfg["damage_floor"])
    warn_rate = float(analysis_config["matching"]["unmatched_warn_rate"])

    totals = aggregate_by_category(normalised["records"])
    harm = rank_by_harm(totals, top_n)
    damage = rank_by_damage(totals, damage_floor, top_n)

    out_dir = data_dir / "out"
    write_csv(out_dir / "harm_ranking.csv", RANKING_HEADERS, _serialize_ranking(harm))
    write_csv(out_dir / "damage_ranking.csv", RANKING_HEADERS, _serialize_ranking(damage))
    plot_harm_ranking(harm, out_dir / HARM_CHART)
    plot_damage_ranking(damage, out_dir / DAMAGE_CHART)
    write_text(out_dir / "report.md", render_markdown(normalised, harm, damage, damage_floor=damage_floor))

    warnings: list[str] = []
    if normalised["unmatched_rate"] > warn_rate:
        warnings.append("UNMATCHED_RATE_ABOVE_THRESHOLD")
    if not damage:
        warnings.append("NO_CATEGORY_ABOVE_DAMAGE_FLOOR")

    payload = {
        "run_id": normalised["run_id"],
        "status": "partial" if warnings else "success",
        "window": normalised["window"],
        "counts": {
            "raw_rows": normalised["raw_row_count"],
            "filtered_rows": normalised["filtered_row_count"],
            "unmatched_rows": normalised["unmatched_records"],
            "categories": len(totals),
        },
        "unmatched_rate": round(normalised["unmatched_rate"], 6),
        "warnings": warnings,
        "harm_ranking": [row.to_dict() for row in harm],
        "damage_ranking": [row.to_dict() for row in damage],
    }
    write_json(out_dir / "reports" / "run_summary.json", payload)
    return payload

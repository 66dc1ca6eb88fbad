"""Static ranking charts."""

from __future__ import annotations

from pathlib import Path
from typing import Sequence

import matplotlib

matplotlib.use("Agg")

import matplotlib.pyplot as plt  # noqa: E402
import numpy as np  # noqa: E402

from stormdata.common.fs import ensure_dir  # noqa: E402
from stormdata.common.models import CategoryTotals  # noqa: E402

BILLION = 1e9


def _save(fig: plt.Figure, out_path: Path) -> Path:
    ensure_dir(out_path.parent)
    # Fixed metadata keeps the PNG bytes stable between runs.
    fig.savefig(out_path, dpi=120, bbox_inches="tight", metadata={"Software": None})
    plt.close(fig)
    return out_path


def plot_harm_ranking(rows: Sequence[CategoryTotals], out_path: Path, *, title: str | None = None) -> Path:
    """Grouped horizontal bars of fatalities and injuries, most harmful on top."""
    labels = [row.category for row in rows][::-1]
    fatalities = [row.fatalities for row in rows][::-1]
    injuries = [row.injuries for row in rows][::-1]

    y = np.arange(len(labels))
    height = 0.4
    fig, ax = plt.subplots(figsize=(10, max(3.0, 0.5 * len(labels) + 1.5)))
    ax.barh(y + height / 2, fatalities, height, label="Fatalities", color="#b2182b")
    ax.barh(y - height / 2, injuries, height, label="Injuries", color="#ef8a62")
    ax.set_yticks(y)
    ax.set_yticklabels(labels)
    ax.set_xscale("symlog")
    ax.set_xlabel("People affected (symmetric log scale)")
    ax.set_title(title or "Most harmful event types to population health")
    ax.legend(loc="lower right")
    ax.spines["right"].set_visible(False)
    ax.spines["top"].set_visible(False)
    return _save(fig, out_path)


def plot_damage_ranking(rows: Sequence[CategoryTotals], out_path: Path, *, title: str | None = None) -> Path:
    """Stacked horizontal bars of property and crop damage in billions of USD."""
    labels = [row.category for row in rows][::-1]
    property_damage = np.array([row.property_damage for row in rows][::-1]) / BILLION
    crop_damage = np.array([row.crop_damage for row in rows][::-1]) / BILLION

    y = np.arange(len(labels))
    fig, ax = plt.subplots(figsize=(10, max(3.0, 0.5 * len(labels) + 1.5)))
    ax.barh(y, property_damage, label="Property", color="#2166ac")
    ax.barh(y, crop_damage, left=property_damage, label="Crop", color="#67a9cf")
    ax.set_yticks(y)
    ax.set_yticklabels(labels)
    ax.set_xlabel("Damage (billions USD, nominal)")
    ax.set_title(title or "Event types with the greatest economic consequences")
    ax.legend(loc="lower right")
    ax.spines["right"].set_visible(False)
    ax.spines["top"].set_visible(False)
    return _save(fig, out_path)

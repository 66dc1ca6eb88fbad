"""Configuration loading and validation."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Any

from stormdata.common.errors import ConfigError
from stormdata.common.fs import read_yaml
from stormdata.common.schema import validate_analysis_config

ANALYSIS_CONFIG_NAME = "analysis.yml"


@dataclass(frozen=True)
class ConfigBundle:
    analysis: dict

    @property
    def year_window(self) -> tuple[int, int]:
        window = self.analysis["window"]
        return int(window["year_min"]), int(window["year_max"])

    @property
    def tolerance(self) -> int:
        return int(self.analysis["matching"]["tolerance"])


def _deep_merge(base: Any, overlay: Any) -> Any:
    if isinstance(base, dict) and isinstance(overlay, dict):
        merged = dict(base)
        for key, value in overlay.items():
            if key in merged:
                merged[key] = _deep_merge(merged[key], value)
            else:
                merged[key] = value
        return merged
    return overlay


def _load_yaml_with_overlay(path: Path, overlay_path: Path | None) -> dict:
    if not path.exists():
        raise ConfigError(f"Missing config file: {path}")
    base = read_yaml(path)
    if overlay_path is None or not overlay_path.exists():
        return base
    overlay = read_yaml(overlay_path)
    return _deep_merge(base, overlay)


def load_all_configs(
    config_dir: Path,
    *,
    allow_unknown: bool = False,
    overlay_config_dir: Path | None = None,
) -> ConfigBundle:
    overlay_path = None
    if overlay_config_dir is not None:
        overlay_path = overlay_config_dir / ANALYSIS_CONFIG_NAME
    cfg = _load_yaml_with_overlay(config_dir / ANALYSIS_CONFIG_NAME, overlay_path)
    return ConfigBundle(analysis=validate_analysis_config(cfg, allow_unknown=allow_unknown))

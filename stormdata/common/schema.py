"""Minimal strict schema for the analysis YAML config."""

from __future__ import annotations

from stormdata.common.errors import ConfigError

SECTION_KEYS = {
    "source": {"url", "filename", "encoding"},
    "window": {"year_min", "year_max"},
    "matching": {"tolerance", "unmatched_warn_rate"},
    "report": {"top_n", "damage_floor"},
    "http": {"connect_timeout", "read_timeout", "max_attempts"},
}


def _assert_required_keys(obj: dict, required: set[str], ctx: str) -> None:
    missing = required - set(obj)
    if missing:
        missing_str = ", ".join(sorted(missing))
        raise ConfigError(f"Missing keys in {ctx}: {missing_str}")


def _assert_no_unknown_keys(obj: dict, known: set[str], ctx: str, allow_unknown: bool) -> None:
    if allow_unknown:
        return
    unknown = set(obj) - known
    if unknown:
        unknown_str = ", ".join(sorted(unknown))
        raise ConfigError(f"Unknown keys in {ctx}: {unknown_str}")


def _assert_non_negative_int(value, ctx: str) -> None:
    if isinstance(value, bool) or not isinstance(value, int) or value < 0:
        raise ConfigError(f"{ctx} must be a non-negative integer")


def _assert_positive_number(value, ctx: str) -> None:
    if isinstance(value, bool) or not isinstance(value, (int, float)) or value <= 0:
        raise ConfigError(f"{ctx} must be a positive number")


def validate_analysis_config(cfg: dict, *, allow_unknown: bool = False) -> dict:
    if not isinstance(cfg, dict):
        raise ConfigError("analysis config must be a mapping")

    _assert_required_keys(cfg, set(SECTION_KEYS), "analysis config")
    _assert_no_unknown_keys(cfg, set(SECTION_KEYS), "analysis config", allow_unknown)
    for section, keys in SECTION_KEYS.items():
        if not isinstance(cfg[section], dict):
            raise ConfigError(f"{section} must be a mapping")
        _assert_required_keys(cfg[section], keys, section)
        _assert_no_unknown_keys(cfg[section], keys, section, allow_unknown)

    window = cfg["window"]
    _assert_non_negative_int(window["year_min"], "window.year_min")
    _assert_non_negative_int(window["year_max"], "window.year_max")
    if window["year_min"] > window["year_max"]:
        raise ConfigError("window.year_min must not exceed window.year_max")

    _assert_non_negative_int(cfg["matching"]["tolerance"], "matching.tolerance")
    warn_rate = cfg["matching"]["unmatched_warn_rate"]
    if not isinstance(warn_rate, (int, float)) or not 0 <= warn_rate <= 1:
        raise ConfigError("matching.unmatched_warn_rate must be between 0 and 1")

    _assert_non_negative_int(cfg["report"]["top_n"], "report.top_n")
    if not isinstance(cfg["report"]["damage_floor"], (int, float)):
        raise ConfigError("report.damage_floor must be numeric")

    http = cfg["http"]
    _assert_positive_number(http["connect_timeout"], "http.connect_timeout")
    _assert_positive_number(http["read_timeout"], "http.read_timeout")
    _assert_non_negative_int(http["max_attempts"], "http.max_attempts")
    if http["max_attempts"] < 1:
        raise ConfigError("http.max_attempts must be at least 1")

    return cfg

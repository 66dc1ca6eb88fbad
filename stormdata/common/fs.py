"""Filesystem helpers for config input and report artifacts.

Artifacts are written to a sibling ``.part`` file and renamed into place, so
an interrupted run never leaves a truncated CSV or report behind.
"""

from __future__ import annotations

import csv
import json
from contextlib import contextmanager
from pathlib import Path
from typing import IO, Iterable, Iterator, Mapping

import yaml

from stormdata.common.errors import ConfigError


def ensure_dir(path: Path) -> None:
    path.mkdir(parents=True, exist_ok=True)


def read_yaml(path: Path):
    with path.open("r", encoding="utf-8") as f:
        try:
            return yaml.safe_load(f)
        except yaml.YAMLError as exc:
            raise ConfigError(f"Unparseable YAML in {path}: {exc}") from exc


@contextmanager
def _replace_on_success(path: Path, newline: str | None = None) -> Iterator[IO[str]]:
    ensure_dir(path.parent)
    partial = path.with_name(path.name + ".part")
    try:
        with partial.open("w", encoding="utf-8", newline=newline) as f:
            yield f
        partial.replace(path)
    finally:
        partial.unlink(missing_ok=True)


def write_json(path: Path, payload) -> None:
    with _replace_on_success(path) as f:
        json.dump(payload, f, ensure_ascii=False, indent=2, sort_keys=True)
        f.write("\n")


def write_csv(path: Path, headers: list[str], rows: Iterable[Mapping[str, object]]) -> None:
    with _replace_on_success(path, newline="") as f:
        writer = csv.DictWriter(f, fieldnames=headers, extrasaction="ignore")
        writer.writeheader()
        writer.writerows(rows)


def write_text(path: Path, text: str) -> None:
    with _replace_on_success(path) as f:
        f.write(text)

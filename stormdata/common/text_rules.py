"""Declarative regex rewrite rules and the generic rule applier."""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from enum import Enum
from typing import Iterable


class Anchoring(str, Enum):
    SUBSTRING = "substring"
    START = "start"
    END = "end"
    WHOLE = "whole"


_ANCHOR_TEMPLATES = {
    Anchoring.SUBSTRING: "{pattern}",
    Anchoring.START: r"\A(?:{pattern})",
    Anchoring.END: r"(?:{pattern})\Z",
    Anchoring.WHOLE: r"\A(?:{pattern})\Z",
}


@dataclass(frozen=True)
class RewriteRule:
    """One ordered rewrite step.

    ``pattern`` is a regex fragment; ``anchoring`` decides where it may match.
    ``raw_only`` rules fix quirks of the source data and are skipped when
    normalising reference vocabularies.
    """

    pattern: str
    replacement: str
    anchoring: Anchoring = Anchoring.SUBSTRING
    raw_only: bool = False
    compiled: re.Pattern = field(init=False, repr=False, compare=False)

    def __post_init__(self) -> None:
        source = _ANCHOR_TEMPLATES[self.anchoring].format(pattern=self.pattern)
        object.__setattr__(self, "compiled", re.compile(source))

    def apply(self, value: str) -> str:
        if self.anchoring is Anchoring.SUBSTRING:
            return self.compiled.sub(self.replacement, value)
        # Anchored rules fire at most once.
        return self.compiled.sub(self.replacement, value, count=1)


def apply_rules(value: str, rules: Iterable[RewriteRule]) -> str:
    out = value.upper()
    for rule in rules:
        out = rule.apply(out)
    return out


def shared_rules(rules: Iterable[RewriteRule]) -> tuple[RewriteRule, ...]:
    return tuple(rule for rule in rules if not rule.raw_only)

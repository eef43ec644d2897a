"""Redaction data models — pattern stored as string, compiled on first use."""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from functools import cached_property
from typing import List


@dataclass(frozen=True)
class RedactionPattern:
    """A named pattern whose matches are masked.

    ``pattern`` stays a raw string so the definition remains serialisable;
    ``compiled`` is built lazily and raises ``re.error`` for bad syntax.
    ``flags`` carries any other ``re`` flags, e.g. from a precompiled pattern.
    """

    name: str
    pattern: str
    ignore_case: bool = False
    description: str = ""
    flags: int = 0

    @cached_property
    def compiled(self) -> re.Pattern[str]:
        return re.compile(self.pattern, self.flags | (re.IGNORECASE if self.ignore_case else 0))


@dataclass
class RedactionResult:
    """Redacted text plus what was found in it."""

    redacted_text: str
    match_count: int = 0
    matched_pattern_names: List[str] = field(default_factory=list)

    @property
    def found(self) -> bool:
        return self.match_count > 0

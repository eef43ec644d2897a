"""Configuration schema — dataclasses for every config section."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, List, Literal

OutputFormat = Literal["terminal", "json"]
OUTPUT_FORMATS = ("terminal", "json")


@dataclass
class DiffConfig:
    staged: bool = False
    context_lines: int = 0


@dataclass
class ScopeConfig:
    map: Dict[str, str] = field(default_factory=dict)  # path substring -> scope name


@dataclass
class HistoryConfig:
    limit: int = 5


@dataclass
class RedactionConfig:
    enabled: bool = True
    disable: List[str] = field(default_factory=list)  # built-in pattern names
    patterns_dir: str = ".diffsense-patterns"


@dataclass
class OutputConfig:
    format: OutputFormat = "terminal"


@dataclass
class DiffSenseConfig:
    version: str = "1.0"
    diff: DiffConfig = field(default_factory=DiffConfig)
    scope: ScopeConfig = field(default_factory=ScopeConfig)
    history: HistoryConfig = field(default_factory=HistoryConfig)
    redaction: RedactionConfig = field(default_factory=RedactionConfig)
    output: OutputConfig = field(default_factory=OutputConfig)

"""Classification result models."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, List, Optional, Tuple

from diffsense.git.models import FileStatus


class Magnitude(str, Enum):
    TINY = "tiny"
    SMALL = "small"
    MEDIUM = "medium"
    LARGE = "large"
    MASSIVE = "massive"


class CommitType(str, Enum):
    """Conventional commit types.

    Declaration order is the scoring priority: on equal scores the earlier
    member wins.
    """

    FEAT = "feat"
    FIX = "fix"
    DOCS = "docs"
    STYLE = "style"
    REFACTOR = "refactor"
    PERF = "perf"
    TEST = "test"
    CHORE = "chore"


@dataclass(frozen=True)
class FileAnalysis:
    """Per-file classification derived from a FileChange."""

    path: str
    status: FileStatus
    additions: int
    deletions: int
    magnitude: Magnitude
    keywords: Tuple[str, ...] = ()
    summary: str = ""
    old_path: Optional[str] = None

    def has_keyword(self, keyword: str) -> bool:
        return keyword in self.keywords


@dataclass(frozen=True)
class TypeDetection:
    type: CommitType
    confidence: float
    reasons: List[str] = field(default_factory=list)


@dataclass(frozen=True)
class ScopeDetection:
    scopes: List[str] = field(default_factory=list)
    confidence: float = 0.0
    reasons: List[str] = field(default_factory=list)


@dataclass(frozen=True)
class ContextAnalysis:
    """Everything the classifier knows about one change set."""

    files: List[FileAnalysis]
    type: TypeDetection
    scope: ScopeDetection
    breaking: bool
    summary: str
    total_additions: int
    total_deletions: int

    @property
    def file_count(self) -> int:
        return len(self.files)


@dataclass(frozen=True)
class ContextOptions:
    """What ContextBuilder should analyze and how scopes are mapped."""

    staged: bool = False
    range: Optional[str] = None
    scope_map: Dict[str, str] = field(default_factory=dict)

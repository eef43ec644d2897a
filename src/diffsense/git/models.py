"""Data models for git change metadata."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Optional


class FileStatus(str, Enum):
    ADDED = "added"
    MODIFIED = "modified"
    DELETED = "deleted"
    RENAMED = "renamed"


@dataclass(frozen=True, slots=True)
class FileChange:
    """One file's change record within a single diff snapshot."""

    path: str
    status: FileStatus = FileStatus.MODIFIED
    additions: int = 0
    deletions: int = 0
    old_path: Optional[str] = None  # set on renames only

    def __post_init__(self) -> None:
        if self.additions < 0 or self.deletions < 0:
            raise ValueError(
                f"negative line counts for {self.path}: +{self.additions} -{self.deletions}"
            )
        if (self.status == FileStatus.RENAMED) != (self.old_path is not None):
            raise ValueError(f"old_path must be set exactly when {self.path} is renamed")


@dataclass(frozen=True)
class DiffOptions:
    """Which changes to look at.

    ``staged`` selects the index, ``range`` a revision range such as
    ``main..HEAD``; with neither, the working tree is compared to the index.
    ``staged`` wins when both are given.
    """

    staged: bool = False
    range: Optional[str] = None
    context_lines: int = 0


@dataclass(frozen=True)
class CommitOptions:
    no_verify: bool = False
    amend: bool = False
    allow_empty: bool = False


@dataclass(frozen=True)
class RemoteInfo:
    """Hosting platform coordinates parsed from a remote URL."""

    platform: str  # 'github' | 'gitlab'
    owner: str
    repo: str

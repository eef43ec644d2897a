"""Deterministic heuristics that classify a change set.

The classifier never looks at file contents: every signal comes from paths,
statuses and line counts, so results are reproducible and cheap enough to
run on every invocation. Instances hold only the caller's scope map and can
be shared freely.
"""

from __future__ import annotations

import logging
from collections import Counter
from typing import Dict, List, Mapping, Optional, Sequence

from diffsense.analysis.keywords import calculate_magnitude, extract_keywords
from diffsense.analysis.models import (
    CommitType,
    ContextAnalysis,
    FileAnalysis,
    Magnitude,
    ScopeDetection,
    TypeDetection,
)
from diffsense.errors import NoChangesError
from diffsense.git.models import FileChange, FileStatus

logger = logging.getLogger(__name__)

MAX_REASONS = 5
MAX_SCOPES = 3
LOW_CONFIDENCE = 0.4
NO_SIGNAL_CONFIDENCE = 0.5

SCOPE_ROOTS = frozenset({"src", "packages", "apps"})
COMMON_SCOPES = frozenset({"api", "ui", "core", "utils", "auth", "config", "db", "models"})

_SUMMARY_VERBS = {CommitType.FEAT: "Add", CommitType.FIX: "Fix"}


def _clamp(value: float) -> float:
    return min(1.0, max(0.0, value))


def summarize_file_change(change: FileChange) -> str:
    """One-line human description of a single file change."""
    path = change.path
    if change.status == FileStatus.ADDED:
        return f"Added {path}"
    if change.status == FileStatus.DELETED:
        return f"Deleted {path}"
    if change.status == FileStatus.RENAMED:
        return f"Renamed {change.old_path} to {path}"
    if change.additions > change.deletions * 2:
        return f"Expanded {path} (+{change.additions} lines)"
    if change.deletions > change.additions * 2:
        return f"Reduced {path} (-{change.deletions} lines)"
    return f"Modified {path} (+{change.additions}, -{change.deletions})"


class ChangeClassifier:
    """Turn FileChange records into a ContextAnalysis.

    *scope_map* maps path substrings to scope names, e.g.
    ``{"client/": "frontend"}``.
    """

    def __init__(self, scope_map: Optional[Mapping[str, str]] = None) -> None:
        self.scope_map: Dict[str, str] = dict(scope_map or {})

    # ---- entry point ----

    def analyze(self, changes: Sequence[FileChange]) -> ContextAnalysis:
        """Classify *changes*. Raises NoChangesError when there are none."""
        if not changes:
            raise NoChangesError("No changes found to analyze")

        files = [self.analyze_file(c) for c in changes]
        type_detection = self.detect_type(files)
        scope_detection = self.detect_scope(files)
        breaking = self.detect_breaking_changes(files)
        summary = self.generate_summary(files, type_detection, scope_detection)

        logger.debug(
            "Classified %d file(s): type=%s scopes=%s breaking=%s",
            len(files),
            type_detection.type.value,
            scope_detection.scopes,
            breaking,
        )

        return ContextAnalysis(
            files=files,
            type=type_detection,
            scope=scope_detection,
            breaking=breaking,
            summary=summary,
            total_additions=sum(f.additions for f in files),
            total_deletions=sum(f.deletions for f in files),
        )

    def analyze_file(self, change: FileChange) -> FileAnalysis:
        return FileAnalysis(
            path=change.path,
            status=change.status,
            additions=change.additions,
            deletions=change.deletions,
            magnitude=calculate_magnitude(change.additions, change.deletions),
            keywords=extract_keywords(change.path),
            summary=summarize_file_change(change),
            old_path=change.old_path,
        )

    # ---- type ----

    def detect_type(self, files: Sequence[FileAnalysis]) -> TypeDetection:
        """Score every CommitType and pick the winner.

        Scores are kept in CommitType declaration order, and only a strictly
        higher score replaces the current leader, so ties go to the earlier
        type. With no signal at all the result is CHORE at 0.5 confidence.
        """
        scores: Dict[CommitType, int] = {t: 0 for t in CommitType}
        reasons: List[str] = []

        for f in files:
            if f.has_keyword("test"):
                scores[CommitType.TEST] += 3
                reasons.append(f"Test file: {f.path}")
            if f.has_keyword("docs"):
                scores[CommitType.DOCS] += 3
                reasons.append(f"Documentation: {f.path}")
            if f.has_keyword("style"):
                scores[CommitType.STYLE] += 2
                reasons.append(f"Style file: {f.path}")
            if f.has_keyword("config") or f.has_keyword("dependencies"):
                scores[CommitType.CHORE] += 2
                reasons.append(f"Configuration/dependencies: {f.path}")
            if f.has_keyword("ci") or f.has_keyword("build"):
                scores[CommitType.CHORE] += 2
                reasons.append(f"CI/build: {f.path}")
            if f.status == FileStatus.ADDED and not f.has_keyword("test"):
                scores[CommitType.FEAT] += 2
                reasons.append(f"New file: {f.path}")
            if f.magnitude in (Magnitude.LARGE, Magnitude.MASSIVE):
                scores[CommitType.REFACTOR] += 1

        detected = CommitType.CHORE
        max_score = 0
        for commit_type, score in scores.items():
            if score > max_score:
                detected, max_score = commit_type, score

        total = sum(scores.values())
        confidence = _clamp(max_score / total) if total > 0 else NO_SIGNAL_CONFIDENCE

        if confidence < LOW_CONFIDENCE:
            has_new_files = any(f.status == FileStatus.ADDED for f in files)
            detected = CommitType.FEAT if has_new_files else CommitType.FIX
            reasons.append(
                f"Low confidence ({confidence:.0%}), defaulting to {detected.value}"
            )

        return TypeDetection(
            type=detected,
            confidence=confidence,
            reasons=list(reversed(reasons))[:MAX_REASONS],
        )

    # ---- scope ----

    def infer_scopes(self, path: str) -> List[str]:
        """Candidate scopes for one path, de-duplicated, in discovery order."""
        scopes: List[str] = [
            scope for pattern, scope in self.scope_map.items() if pattern in path
        ]

        parts = path.split("/")
        if len(parts) >= 2 and parts[0] in SCOPE_ROOTS:
            scopes.append(parts[1])

        scopes.extend(p.lower() for p in parts if p.lower() in COMMON_SCOPES)
        return list(dict.fromkeys(scopes))

    def detect_scope(self, files: Sequence[FileAnalysis]) -> ScopeDetection:
        """Rank scopes by how many files they cover.

        Counter preserves first-insertion order and ``sorted`` is stable, so
        equal counts stay in order of first appearance.
        """
        counts: Counter[str] = Counter()
        reasons: List[str] = []

        for f in files:
            for scope in self.infer_scopes(f.path):
                if scope not in counts:
                    reasons.append(f"Scope '{scope}' from {f.path}")
                counts[scope] += 1

        ranked = sorted(counts, key=lambda s: counts[s], reverse=True)
        confidence = _clamp(max(counts.values()) / len(files)) if counts else 0.0

        return ScopeDetection(
            scopes=ranked[:MAX_SCOPES],
            confidence=confidence,
            reasons=reasons[:MAX_REASONS],
        )

    # ---- breaking changes ----

    @staticmethod
    def detect_breaking_changes(files: Sequence[FileAnalysis]) -> bool:
        for f in files:
            if f.has_keyword("api") and f.deletions > f.additions:
                return True
            if f.has_keyword("core") and f.deletions > 50 and f.deletions > f.additions * 2:
                return True
        return False

    # ---- summary ----

    @staticmethod
    def generate_summary(
        files: Sequence[FileAnalysis],
        type_detection: TypeDetection,
        scope_detection: ScopeDetection,
    ) -> str:
        if len(files) == 1:
            return files[0].summary
        verb = _SUMMARY_VERBS.get(type_detection.type, "Update")
        where = ", ".join(scope_detection.scopes) if scope_detection.scopes else "multiple areas"
        return f"{verb} changes across {len(files)} files in {where}"

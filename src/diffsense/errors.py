"""Typed errors shared by the git gateway, the classifier and the CLI."""

from __future__ import annotations

import traceback
from typing import Optional


class DiffSenseError(Exception):
    """Base class for every error diffsense raises on purpose."""

    @property
    def suggestion(self) -> Optional[str]:
        return suggestion_for(self)


class CommandError(DiffSenseError):
    """Raised when a git invocation fails.

    Carries the command line, exit code and captured output so the caller can
    print an actionable message.
    """

    def __init__(
        self,
        message: str,
        command: str = "",
        exit_code: int = 1,
        stderr: str = "",
        stdout: str = "",
    ) -> None:
        super().__init__(message)
        self.command = command
        self.exit_code = exit_code
        self.stderr = stderr
        self.stdout = stdout


class RepositoryError(CommandError):
    """Raised when the working directory is not inside a git repository."""


class CommitError(CommandError):
    """Raised when ``git commit`` reports that there is nothing to commit."""


class NoChangesError(DiffSenseError):
    """Raised when a diff or change list is empty but content was required."""

    def __init__(self, message: str, command: Optional[str] = None) -> None:
        super().__init__(message)
        self.command = command


# (needle, hint) pairs, checked in order against message + stderr.
_SUGGESTIONS = (
    (
        "not a git repository",
        "Run this command from inside a git repository, or initialize one with `git init`",
    ),
    ("no staged changes", "Stage your changes first with `git add <files>`"),
    ("nothing to commit", "Stage your changes first with `git add <files>`"),
    ("no changes found", "Ensure you have committed or staged changes in the specified range"),
    (
        "detached head",
        "You are in detached HEAD state. Create a branch with `git checkout -b <branch-name>`",
    ),
    ("merge conflict", "Resolve merge conflicts first, then stage the resolved files"),
    ("permission denied", "Check file permissions or try running with appropriate access rights"),
    ("not installed", "Install git and make sure it is on your PATH"),
)


def suggestion_for(exc: BaseException) -> Optional[str]:
    """Return a hint for common git failures, or None."""
    combined = str(exc)
    stderr = getattr(exc, "stderr", "")
    if stderr:
        combined = f"{combined} {stderr}"
    combined = combined.lower()
    for needle, hint in _SUGGESTIONS:
        if needle in combined:
            return hint
    return None


def format_error(exc: BaseException, *, debug: bool = False) -> str:
    """Render *exc* for the terminal.

    Typed errors show their context and a suggestion. The traceback is only
    appended when *debug* is set.
    """
    parts = [f"{type(exc).__name__}: {exc}"]

    command = getattr(exc, "command", None)
    if command:
        parts.append(f"  Command: {command}")
    if isinstance(exc, CommandError) and exc.exit_code != 0:
        parts.append(f"  Exit code: {exc.exit_code}")

    hint = suggestion_for(exc) if isinstance(exc, DiffSenseError) else None
    if hint:
        parts.append(f"  Suggestion: {hint}")

    if debug:
        tb = "".join(traceback.format_exception(type(exc), exc, exc.__traceback__))
        parts.append("")
        parts.append(tb.rstrip())

    return "\n".join(parts)

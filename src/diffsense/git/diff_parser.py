"""Merge ``git diff --name-status`` and ``git diff --numstat`` into FileChange records.

Handles renames (``R100``), copies, binary placeholders (``-``), paths
containing tabs, C-quoted paths, numstat rename notation (``a => b`` and
``dir/{a => b}/f``), blank lines and malformed lines. Malformed lines are
logged and skipped; they never abort the whole parse.
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass
from typing import Dict, List, Optional, Tuple

from diffsense.git.models import FileChange, FileStatus

logger = logging.getLogger(__name__)

_BINARY_PLACEHOLDER = "-"
_BRACE_RENAME_RE = re.compile(r"^(.*)\{(.*) => (.*)\}(.*)$")
_OCTAL_ESCAPE_RE = re.compile(r"[0-3][0-7]{2}")
_C_ESCAPES = {
    "a": 0x07, "b": 0x08, "t": 0x09, "n": 0x0A, "v": 0x0B, "f": 0x0C, "r": 0x0D,
    '"': 0x22, "\\": 0x5C,
}


@dataclass(frozen=True)
class _StatusEntry:
    status: FileStatus
    old_path: Optional[str] = None


def resolve_numstat_path(raw_path: str) -> str:
    """Return the final path of a numstat entry.

    ``src/{old => new}/a.py`` → ``src/new/a.py``; ``old.py => new.py`` →
    ``new.py``; anything else is returned unchanged.
    """
    m = _BRACE_RENAME_RE.match(raw_path)
    if m:
        prefix, _old, new, suffix = m.groups()
        return (prefix + new + suffix).replace("//", "/")
    if " => " in raw_path:
        return raw_path.split(" => ", 1)[1]
    return raw_path


def unquote_path(raw_path: str) -> str:
    """Undo git's C-style quoting of unusual paths.

    ``"caf\\303\\251.py"`` → ``café.py``; ``"a\\tb.txt"`` → ``a<TAB>b.txt``.
    Unquoted paths are returned unchanged.
    """
    if len(raw_path) < 2 or raw_path[0] != '"' or raw_path[-1] != '"':
        return raw_path
    body = raw_path[1:-1]
    out = bytearray()
    i = 0
    while i < len(body):
        ch = body[i]
        if ch == "\\" and i + 1 < len(body):
            octal = body[i + 1:i + 4]
            if _OCTAL_ESCAPE_RE.fullmatch(octal):
                out.append(int(octal, 8))
                i += 4
                continue
            if body[i + 1] in _C_ESCAPES:
                out.append(_C_ESCAPES[body[i + 1]])
                i += 2
                continue
        out.extend(ch.encode("utf-8"))
        i += 1
    return out.decode("utf-8", errors="replace")


def _parse_count(value: str) -> Optional[int]:
    if value == _BINARY_PLACEHOLDER:
        return 0
    try:
        count = int(value)
    except ValueError:
        return None
    return count if count >= 0 else None


class DiffParser:
    """Turn the two raw git reports into a list of FileChange records.

    Usage::

        parser = DiffParser(name_status_text, numstat_text)
        for change in parser.parse():
            ...
    """

    def __init__(self, name_status_text: str, numstat_text: str = "") -> None:
        self._name_status_lines = name_status_text.splitlines()
        self._numstat_lines = numstat_text.splitlines()

    def parse(self) -> List[FileChange]:
        """Join both reports on the final path, in name-status order."""
        statuses = self.parse_name_status()
        counts = self.parse_numstat()

        changes: List[FileChange] = []
        for path, entry in statuses.items():
            additions, deletions = counts.get(path, (0, 0))
            changes.append(
                FileChange(
                    path=path,
                    status=entry.status,
                    additions=additions,
                    deletions=deletions,
                    old_path=entry.old_path,
                )
            )
        return changes

    def parse_name_status(self) -> Dict[str, _StatusEntry]:
        """Parse ``<code>\\t<path>`` / ``R<score>\\t<old>\\t<new>`` lines."""
        result: Dict[str, _StatusEntry] = {}

        for line in self._name_status_lines:
            line = line.rstrip("\r")
            if not line.strip():
                continue

            parts = line.split("\t")
            if len(parts) < 2 or not parts[0]:
                logger.warning("Malformed git name-status line (insufficient parts): %r", line)
                continue

            code = parts[0].strip()

            if code.startswith(("R", "C")):
                if len(parts) < 3:
                    logger.warning("Malformed git name-status line (missing rename paths): %r", line)
                    continue
                old_path, path = unquote_path(parts[1]), unquote_path(parts[2])
                if code.startswith("R"):
                    entry = _StatusEntry(FileStatus.RENAMED, old_path)
                else:
                    # A copy leaves the source untouched; the target is new.
                    entry = _StatusEntry(FileStatus.ADDED)
            elif code == "A":
                path, entry = unquote_path("\t".join(parts[1:])), _StatusEntry(FileStatus.ADDED)
            elif code == "D":
                path, entry = unquote_path("\t".join(parts[1:])), _StatusEntry(FileStatus.DELETED)
            else:
                path, entry = unquote_path("\t".join(parts[1:])), _StatusEntry(FileStatus.MODIFIED)

            result[path] = entry

        return result

    def parse_numstat(self) -> Dict[str, Tuple[int, int]]:
        """Parse ``<additions>\\t<deletions>\\t<path>`` lines."""
        result: Dict[str, Tuple[int, int]] = {}

        for line in self._numstat_lines:
            line = line.rstrip("\r")
            if not line.strip():
                continue

            parts = line.split("\t")
            if len(parts) < 3:
                logger.warning("Malformed git numstat line (insufficient parts): %r", line)
                continue

            additions = _parse_count(parts[0])
            deletions = _parse_count(parts[1])
            if additions is None or deletions is None:
                logger.warning("Malformed git numstat line (bad counts): %r", line)
                continue

            # Filenames may themselves contain tabs.
            path = unquote_path(resolve_numstat_path("\t".join(parts[2:])))
            result[path] = (additions, deletions)

        return result

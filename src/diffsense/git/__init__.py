"""Git interface layer — gateway, report parsing, models."""

from diffsense.git.adapter import GitGateway, parse_remote_info
from diffsense.git.diff_parser import DiffParser, resolve_numstat_path
from diffsense.git.models import CommitOptions, DiffOptions, FileChange, FileStatus, RemoteInfo

__all__ = [
    "CommitOptions",
    "DiffOptions",
    "DiffParser",
    "FileChange",
    "FileStatus",
    "GitGateway",
    "RemoteInfo",
    "parse_remote_info",
    "resolve_numstat_path",
]

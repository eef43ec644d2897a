"""Git subprocess wrapper — diffs, change lists, history, branch, commit, remotes."""

from __future__ import annotations

import logging
import re
import subprocess
import tempfile
import threading
from pathlib import Path
from typing import List, Optional

from diffsense.errors import CommandError, CommitError, NoChangesError, RepositoryError
from diffsense.git.diff_parser import DiffParser
from diffsense.git.models import CommitOptions, DiffOptions, FileChange, RemoteInfo

logger = logging.getLogger(__name__)

MAX_OUTPUT_BYTES = 10 * 1024 * 1024  # caps memory for pathologically large diffs
DEFAULT_TIMEOUT = 30

_GIT_MISSING_EXIT = 127
_READ_CHUNK_BYTES = 64 * 1024
_UNQUOTED_PATHS = ["-c", "core.quotePath=false"]
_VERSION_RE = re.compile(r"git version (\d+\.\d+\.\d+)")
_REMOTE_PATTERNS = (
    # user@github.com:owner/repo.git
    re.compile(r"^[\w.-]+@(github|gitlab)\.com:([^/]+)/(.+?)(?:\.git)?/?$"),
    # https://gitlab.com/owner/repo.git
    re.compile(r"^https://(github|gitlab)\.com/([^/]+)/(.+?)(?:\.git)?/?$"),
)


def _run_git(
    args: List[str],
    cwd: Path,
    *,
    input: Optional[str] = None,
    timeout: int = DEFAULT_TIMEOUT,
    max_output_bytes: int = MAX_OUTPUT_BYTES,
) -> str:
    """Run a git command and return stdout. Raises CommandError on failure.

    Stdout is read in chunks; git is killed as soon as it has written more
    than *max_output_bytes*, so an oversized diff is never held in memory.
    """
    command = "git " + " ".join(args)
    logger.debug("Executing git command: %s", command)
    with tempfile.TemporaryFile() as stderr_file:
        try:
            proc = subprocess.Popen(
                ["git", *args],
                cwd=cwd,
                stdin=subprocess.PIPE if input is not None else subprocess.DEVNULL,
                stdout=subprocess.PIPE,
                stderr=stderr_file,
            )
        except FileNotFoundError as exc:
            raise CommandError(
                "git is not installed or not on PATH", command, exit_code=_GIT_MISSING_EXIT
            ) from exc

        timed_out = threading.Event()

        def _expire() -> None:
            timed_out.set()
            proc.kill()

        timer = threading.Timer(timeout, _expire)
        timer.start()
        stdout = bytearray()
        overflow = False
        try:
            if input is not None:
                try:
                    proc.stdin.write(input.encode("utf-8"))
                    proc.stdin.close()
                except BrokenPipeError:
                    # git exited without reading stdin; its exit status says why.
                    pass
            while True:
                chunk = proc.stdout.read(_READ_CHUNK_BYTES)
                if not chunk:
                    break
                stdout += chunk
                if len(stdout) > max_output_bytes:
                    overflow = True
                    proc.kill()
                    break
            returncode = proc.wait()
        finally:
            timer.cancel()
            proc.stdout.close()

        if timed_out.is_set():
            raise CommandError(f"git command timed out after {timeout}s: {command}", command)
        if overflow:
            raise CommandError(
                f"git output exceeded {max_output_bytes} bytes: {command}",
                command,
                exit_code=returncode,
            )

        stderr_file.seek(0)
        stderr = stderr_file.read().decode("utf-8", errors="replace")

    output = stdout.decode("utf-8", errors="replace")
    if returncode != 0:
        raise CommandError(
            f"Git command failed: {command}",
            command,
            exit_code=returncode,
            stderr=stderr.strip(),
            stdout=output,
        )
    return output


def parse_remote_info(remote_url: str) -> Optional[RemoteInfo]:
    """Parse a GitHub/GitLab SSH or HTTPS remote URL.

    Returns None for anything else.
    """
    url = remote_url.strip()
    for pattern in _REMOTE_PATTERNS:
        m = pattern.match(url)
        if m:
            return RemoteInfo(platform=m.group(1), owner=m.group(2), repo=m.group(3))
    return None


class GitGateway:
    """The only place diffsense talks to git.

    One instance is bound to one working directory. The directory is
    validated on construction unless ``validate=False``.
    """

    def __init__(
        self,
        cwd: Optional[Path] = None,
        *,
        validate: bool = True,
        timeout: int = DEFAULT_TIMEOUT,
        max_output_bytes: int = MAX_OUTPUT_BYTES,
    ) -> None:
        self.cwd = Path(cwd) if cwd is not None else Path.cwd()
        self.timeout = timeout
        self.max_output_bytes = max_output_bytes
        if validate:
            self.validate_repository()

    parse_remote_info = staticmethod(parse_remote_info)

    def _run(self, args: List[str], *, input: Optional[str] = None) -> str:
        return _run_git(
            args,
            self.cwd,
            input=input,
            timeout=self.timeout,
            max_output_bytes=self.max_output_bytes,
        )

    # ---- repository ----

    @staticmethod
    def is_git_available() -> bool:
        """Return True if a ``git`` executable can be run."""
        try:
            subprocess.run(["git", "--version"], capture_output=True, check=True)
        except (OSError, subprocess.CalledProcessError):
            return False
        return True

    def validate_repository(self) -> None:
        """Raise RepositoryError unless ``cwd`` is inside a git repository."""
        try:
            self._run(["rev-parse", "--git-dir"])
        except CommandError as exc:
            if exc.exit_code == _GIT_MISSING_EXIT:
                raise
            raise RepositoryError(
                "Not a git repository. Run this command from inside a git repository.",
                exc.command,
                exit_code=exc.exit_code,
                stderr=exc.stderr or "fatal: not a git repository",
            ) from exc

    def git_version(self) -> str:
        m = _VERSION_RE.search(self._run(["--version"]))
        return m.group(1) if m else "unknown"

    def repository_root(self) -> Path:
        return Path(self._run(["rev-parse", "--show-toplevel"]).strip())

    # ---- diffs and change lists ----

    @staticmethod
    def _selection_args(options: DiffOptions) -> List[str]:
        if options.staged:
            return ["--staged"]
        if options.range:
            return [options.range]
        return []

    def diff(self, options: DiffOptions = DiffOptions()) -> str:
        """Return the raw unified diff for *options*.

        An empty result is only an error when staged changes or a range were
        explicitly requested.
        """
        args = ["diff", "--no-color", f"-U{options.context_lines}"]
        args += self._selection_args(options)
        output = self._run(args)

        if not output.strip():
            if options.staged:
                raise NoChangesError(
                    "No staged changes found. Use `git add` to stage files first.",
                    "git diff --staged",
                )
            if options.range:
                raise NoChangesError(
                    f"No changes found in range: {options.range}",
                    f"git diff {options.range}",
                )
        return output

    def changed_files(self, options: DiffOptions = DiffOptions()) -> List[FileChange]:
        """Return one FileChange per changed file; ``[]`` when nothing changed."""
        selection = self._selection_args(options)
        status_output = self._run([*_UNQUOTED_PATHS, "diff", "--name-status", "-M", *selection])
        if not status_output.strip():
            return []
        numstat_output = self._run([*_UNQUOTED_PATHS, "diff", "--numstat", "-M", *selection])
        return DiffParser(status_output, numstat_output).parse()

    def has_uncommitted_changes(self) -> bool:
        try:
            return bool(self._run(["status", "--porcelain"]).strip())
        except CommandError:
            return False

    def has_staged_changes(self) -> bool:
        try:
            return bool(self._run(["diff", "--staged", "--name-only"]).strip())
        except CommandError:
            return False

    # ---- history and branch ----

    def file_history(self, path: str, limit: int = 5) -> List[str]:
        """Return up to *limit* commit subjects touching *path*, newest first."""
        try:
            output = self._run(
                ["log", "-n", str(limit), "--pretty=format:%s", "--follow", "--", path]
            )
        except CommandError as exc:
            # No commits yet, or the path never existed.
            logger.debug("No history for %s: %s", path, exc.stderr or exc)
            return []
        return [line for line in output.splitlines() if line.strip()]

    def current_branch(self) -> str:
        """Return the branch name, or ``detached at <sha>`` on a detached HEAD."""
        try:
            branch = self._run(["rev-parse", "--abbrev-ref", "HEAD"]).strip()
            if branch and branch != "HEAD":
                return branch
        except CommandError:
            # Unborn branch: HEAD still names it symbolically.
            try:
                return self._run(["symbolic-ref", "--short", "HEAD"]).strip()
            except CommandError:
                pass

        try:
            sha = self._run(["rev-parse", "HEAD"]).strip()
        except CommandError as exc:
            raise CommandError(
                "Unable to determine current branch",
                "git rev-parse --abbrev-ref HEAD",
                exit_code=exc.exit_code,
                stderr=exc.stderr,
            ) from exc
        return f"detached at {sha[:7]}"

    # ---- committing ----

    def create_commit(self, message: str, options: CommitOptions = CommitOptions()) -> None:
        """Commit the index with *message* (read from stdin, so multi-line is fine)."""
        args = ["commit", "-F", "-"]
        if options.no_verify:
            args.append("--no-verify")
        if options.amend:
            args.append("--amend")
        if options.allow_empty:
            args.append("--allow-empty")

        try:
            self._run(args, input=message)
        except CommandError as exc:
            # git prints "nothing to commit" on stdout, older versions on stderr.
            if "nothing to commit" in f"{exc.stdout}\n{exc.stderr}":
                raise CommitError(
                    "Nothing to commit. Stage your changes with `git add` first.",
                    exc.command,
                    exit_code=exc.exit_code,
                    stderr=exc.stderr or "nothing to commit, working tree clean",
                    stdout=exc.stdout,
                ) from exc
            raise

    # ---- remotes ----

    def remote_url(self, remote_name: str = "origin") -> Optional[str]:
        """Return the URL configured for *remote_name*, or None."""
        try:
            url = self._run(["remote", "get-url", remote_name]).strip()
        except CommandError:
            return None
        return url or None

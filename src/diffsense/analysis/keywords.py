"""Path-based keyword tags and change magnitude buckets."""

from __future__ import annotations

import re
from typing import List, Tuple

from diffsense.analysis.models import Magnitude

KEYWORD_VOCABULARY: Tuple[str, ...] = (
    "test",
    "docs",
    "style",
    "config",
    "source",
    "library",
    "api",
    "ui",
    "utils",
    "core",
    "dependencies",
    "ci",
    "build",
)

_TEST_NAME_RE = re.compile(r"(?:\.(?:test|spec)\.[jt]sx?$|^test_.*\.py$|_test\.(?:py|go)$)")
_TEST_DIRS = frozenset({"test", "tests", "__tests__"})
_DOC_SUFFIXES = (".md", ".rst", ".adoc")
_DOC_DIRS = ("docs/", "documentation/")
_STYLE_SUFFIXES = (".css", ".scss", ".sass", ".less")
_REQUIREMENTS_RE = re.compile(r"^requirements.*\.txt$")
_DEPENDENCY_FILES = frozenset({
    "package.json",
    "package-lock.json",
    "yarn.lock",
    "pnpm-lock.yaml",
    "poetry.lock",
    "pipfile",
    "pipfile.lock",
    "uv.lock",
    "go.sum",
    "cargo.lock",
})
_CI_DIRS = (".github/", ".gitlab/", ".circleci/")
_BUILD_TOOLS = ("webpack", "vite", "rollup", "esbuild")

# (tag, substrings) checked in order against the lowercased path.
_DIRECTORY_TAGS: Tuple[Tuple[str, Tuple[str, ...]], ...] = (
    ("source", ("src/",)),
    ("library", ("lib/",)),
    ("api", ("api/",)),
    ("ui", ("ui/", "components/")),
    ("utils", ("utils/", "helpers/")),
    ("core", ("core/",)),
)


def extract_keywords(path: str) -> Tuple[str, ...]:
    """Return the ordered, de-duplicated keyword tags for *path*.

    Tags are not exclusive: ``webpack.config.js`` is both ``config`` and
    ``build``.
    """
    lowered = path.lower()
    segments = lowered.split("/")
    name = segments[-1]
    tags: List[str] = []

    def add(tag: str) -> None:
        if tag not in tags:
            tags.append(tag)

    if _TEST_NAME_RE.search(name):
        add("test")
    if name.endswith(_DOC_SUFFIXES) or any(d in lowered for d in _DOC_DIRS):
        add("docs")
    if name.endswith(_STYLE_SUFFIXES):
        add("style")
    if "config" in lowered:
        add("config")

    for tag, needles in _DIRECTORY_TAGS:
        if any(n in lowered for n in needles):
            add(tag)
    if _TEST_DIRS.intersection(segments[:-1]):
        add("test")

    if name in _DEPENDENCY_FILES or _REQUIREMENTS_RE.match(name):
        add("dependencies")
    if any(d in lowered for d in _CI_DIRS) or name == ".gitlab-ci.yml":
        add("ci")
    if any(tool in lowered for tool in _BUILD_TOOLS) or name == "makefile":
        add("build")

    return tuple(tags)


def calculate_magnitude(additions: int, deletions: int) -> Magnitude:
    """Bucket a change by its total changed lines."""
    total = additions + deletions
    if total <= 10:
        return Magnitude.TINY
    if total <= 50:
        return Magnitude.SMALL
    if total <= 200:
        return Magnitude.MEDIUM
    if total <= 500:
        return Magnitude.LARGE
    return Magnitude.MASSIVE

"""Filesystem helpers shared by the detectors.

All walks prune IGNORED_DIRS and visit directory entries in sorted order so
that two runs over the same tree see files in the same sequence.
"""

import fnmatch
import logging
import os
import re
from collections.abc import Iterator
from pathlib import Path
from typing import Optional

logger = logging.getLogger(__name__)

# Version control metadata, dependency caches, build output and IDE state.
IGNORED_DIRS: frozenset[str] = frozenset({
    ".git",
    "node_modules",
    "vendor",
    ".gradle",
    "target",
    "build",
    ".venv",
    ".tox",
    ".mypy_cache",
    ".pytest_cache",
    ".idea",
    ".vscode",
    "dist",
    "out",
    "coverage",
    ".terraform",
})

# Upper bound on files read by a single content scan
MAX_SCAN_FILES = 2000

_VERSION_TOKEN_RE = re.compile(r"\d+(?:\.\d+)*")
_VERSION_SEARCH_RE = re.compile(r"\d+(?:\.\d+)*")


def walk_files(base: Path, max_depth: Optional[int] = None) -> Iterator[Path]:
    """Yield files under base, pruning ignored directories.

    Depth counts path components below base: ``base/a`` is depth 1,
    ``base/a/b`` depth 2. ``max_depth=None`` walks the whole tree.
    """
    base = Path(base)
    if not base.is_dir():
        return

    for dirpath, dirnames, filenames in os.walk(base):
        current = Path(dirpath)
        depth = len(current.relative_to(base).parts)
        dirnames[:] = sorted(d for d in dirnames if d not in IGNORED_DIRS)
        if max_depth is not None and depth + 1 >= max_depth:
            # Files in the children of this directory would exceed the limit.
            dirnames[:] = []
        if max_depth is not None and depth + 1 > max_depth:
            continue
        for name in sorted(filenames):
            yield current / name


def find_first(base: Path, pattern: str, max_depth: Optional[int] = None) -> Optional[Path]:
    """Return the first file under base whose name matches a glob pattern."""
    for path in walk_files(base, max_depth):
        if fnmatch.fnmatchcase(path.name, pattern):
            return path
    return None


def find_all(
    base: Path,
    patterns: tuple[str, ...],
    max_depth: Optional[int] = None,
) -> list[Path]:
    """Return every file under base whose name matches any of the patterns."""
    return [
        path
        for path in walk_files(base, max_depth)
        if any(fnmatch.fnmatchcase(path.name, p) for p in patterns)
    ]


def read_text(path: Path) -> Optional[str]:
    """Read a file as UTF-8, returning None when it is missing or unreadable."""
    try:
        return Path(path).read_text(encoding="utf-8", errors="replace")
    except FileNotFoundError:
        return None
    except OSError as exc:
        logger.warning("Could not read %s: %s", path, exc)
        return None


def grep_files(
    base: Path,
    suffixes: tuple[str, ...],
    needle: str,
    max_depth: Optional[int] = None,
    max_files: int = MAX_SCAN_FILES,
    ignore_case: bool = True,
) -> Optional[Path]:
    """Return the first source file under base whose content contains needle."""
    wanted = needle.lower() if ignore_case else needle
    scanned = 0
    for path in walk_files(base, max_depth):
        if not path.name.endswith(suffixes):
            continue
        scanned += 1
        if scanned > max_files:
            logger.debug("Stopped scanning %s after %d files", base, max_files)
            return None
        content = read_text(path)
        if content is None:
            continue
        if ignore_case:
            content = content.lower()
        if wanted in content:
            return path
    return None


def ancestors(start: Path, stop: Path, max_hops: int) -> Iterator[Path]:
    """Yield up to max_hops parent directories of start.

    The walk never leaves ``stop`` (the repository root) and never goes past
    the filesystem root.
    """
    start = Path(start)
    stop = Path(stop)
    current = start
    for _ in range(max_hops):
        if current == stop or current.parent == current:
            return
        current = current.parent
        try:
            current.relative_to(stop)
        except ValueError:
            return
        yield current


def is_version_token(value: Optional[str]) -> bool:
    """True when value is a dot-separated run of digits (``17``, ``1.21.3``)."""
    return bool(value) and _VERSION_TOKEN_RE.fullmatch(value) is not None


def first_version_token(text: Optional[str]) -> Optional[str]:
    """Extract the first numeric version from a constraint such as ``>=18.2``."""
    if not text:
        return None
    match = _VERSION_SEARCH_RE.search(text)
    return match.group(0) if match else None

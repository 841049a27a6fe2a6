"""Framework inference from Python descriptors, sources and entry points."""

from pathlib import Path
from typing import Optional

from selfdeploy.detector.fs import MAX_SCAN_FILES, find_first, grep_files, read_text
from selfdeploy.detector.python.defaults import DESCRIPTOR_FRAMEWORKS, SOURCE_FRAMEWORKS

SOURCE_SCAN_DEPTH = 5


def framework_from_descriptor(path: Path) -> Optional[str]:
    """Return the first known framework named anywhere in a descriptor file."""
    text = read_text(path)
    if text is None:
        return None
    lowered = text.lower()
    for needle, framework in DESCRIPTOR_FRAMEWORKS:
        if needle in lowered:
            return framework
    return None


def framework_from_sources(module_dir: Path, max_files: int = MAX_SCAN_FILES) -> Optional[tuple[str, Path]]:
    """Return (framework, file) for the first framework mentioned in ``*.py`` code."""
    for needle, framework in SOURCE_FRAMEWORKS:
        hit = grep_files(
            module_dir,
            (".py",),
            needle,
            max_depth=SOURCE_SCAN_DEPTH,
            max_files=max_files,
        )
        if hit is not None:
            return framework, hit
    return None


def find_entry_points(module_dir: Path) -> tuple[bool, bool]:
    """Return (has asgi.py, has wsgi.py) within the source scan depth."""
    has_asgi = find_first(module_dir, "asgi.py", max_depth=SOURCE_SCAN_DEPTH) is not None
    has_wsgi = find_first(module_dir, "wsgi.py", max_depth=SOURCE_SCAN_DEPTH) is not None
    return has_asgi, has_wsgi


def framework_from_entry_points(has_asgi: bool, has_wsgi: bool) -> Optional[str]:
    if has_asgi and has_wsgi:
        return "asgi-wsgi-generic"
    if has_asgi:
        return "asgi-generic"
    if has_wsgi:
        return "wsgi-generic"
    return None

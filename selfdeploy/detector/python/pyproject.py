"""pyproject.toml parser for Python build tool and version detection.

Uses stdlib tomllib (Python 3.11+). Handles both modern PEP 621
[project] tables and Poetry's [tool.poetry] layout.
"""

import logging
import tomllib
from pathlib import Path
from typing import Optional

from selfdeploy.detector.fs import first_version_token, is_version_token, read_text

logger = logging.getLogger(__name__)


def load_pyproject(module_dir: Path) -> dict:
    """Parse pyproject.toml, returning an empty dict when missing or malformed."""
    text = read_text(module_dir / "pyproject.toml")
    if text is None:
        return {}
    try:
        return tomllib.loads(text)
    except tomllib.TOMLDecodeError as exc:
        logger.warning("Failed to parse %s: %s", module_dir / "pyproject.toml", exc)
        return {}


def _table(data: dict, *keys: str) -> dict:
    """Walk nested TOML tables, treating any non-table value as empty."""
    for key in keys:
        value = data.get(key)
        if not isinstance(value, dict):
            return {}
        data = value
    return data


def detect_build_tool(module_dir: Path, data: dict) -> Optional[tuple[str, str]]:
    """Return (build tool, evidence) from pyproject.toml and lock files.

    Pipfile is handled by the caller; it overrides whatever is found here.
    """
    tool = _table(data, "tool")
    if "poetry" in tool:
        return "poetry", "pyproject.toml [tool.poetry]"
    if "uv" in tool:
        return "uv", "pyproject.toml [tool.uv]"
    if (module_dir / "uv.lock").is_file():
        return "uv", "lock file: uv.lock"

    # The table might be unparseable; fall back to a plain text probe.
    if not data:
        text = read_text(module_dir / "pyproject.toml") or ""
        if "tool.poetry" in text.lower():
            return "poetry", "pyproject.toml mentions tool.poetry"
    return None


def detect_version(module_dir: Path, data: dict) -> Optional[tuple[str, str]]:
    """Resolve the Python version as (``python-<version>``, source).

    Fallback chain: .python-version pin, then the interpreter requirement
    declared in pyproject.toml.
    """
    pin = read_text(module_dir / ".python-version")
    if pin is not None and pin.strip():
        raw = pin.strip().splitlines()[0].strip()
        if is_version_token(raw):
            return f"python-{raw}", ".python-version"
        logger.debug("Ignoring non-numeric .python-version: %r", raw)

    requires = _table(data, "project").get("requires-python")
    if isinstance(requires, str):
        token = first_version_token(requires)
        if token:
            return f"python-{token}", "pyproject.toml requires-python"

    poetry_python = _table(data, "tool", "poetry", "dependencies").get("python")
    if isinstance(poetry_python, str):
        token = first_version_token(poetry_python)
        if token:
            return f"python-{token}", "pyproject.toml [tool.poetry.dependencies] python"

    return None

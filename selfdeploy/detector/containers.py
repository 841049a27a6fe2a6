"""Container artifact probes: Dockerfiles and compose files."""

import fnmatch
from pathlib import Path
from typing import Optional

from selfdeploy.detector.fs import find_all

CONTAINER_FILE_PATTERNS: tuple[str, ...] = (
    "Dockerfile",
    "Dockerfile.*",
    "*.Dockerfile",
    "Containerfile",
)

COMPOSE_FILE_PATTERNS: tuple[str, ...] = (
    "docker-compose.yml",
    "docker-compose.yaml",
    "docker-compose.*.yml",
    "docker-compose.*.yaml",
    "compose.yml",
    "compose.yaml",
)

ENV_FILE_PATTERNS: tuple[str, ...] = (".env", ".env.*", "*.env")


def matches(path: Path, patterns: tuple[str, ...]) -> bool:
    return any(fnmatch.fnmatchcase(path.name, p) for p in patterns)


def find_container_files(base: Path, max_depth: Optional[int] = None) -> list[Path]:
    """Return container build files under base (whole tree by default)."""
    return find_all(base, CONTAINER_FILE_PATTERNS, max_depth)


def find_compose_files(base: Path, max_depth: Optional[int] = None) -> list[Path]:
    """Return docker compose files under base (whole tree by default)."""
    return find_all(base, COMPOSE_FILE_PATTERNS, max_depth)

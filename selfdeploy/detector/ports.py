"""Exposed port discovery from container, compose and environment files.

Ports are kept as the literal digit strings found in the files, so
``08080`` and ``8080`` are different ports.
"""

import logging
import re
from pathlib import Path
from typing import Optional

import yaml

from selfdeploy.detector.containers import (
    COMPOSE_FILE_PATTERNS,
    CONTAINER_FILE_PATTERNS,
    ENV_FILE_PATTERNS,
    matches,
)
from selfdeploy.detector.fs import find_all, read_text

logger = logging.getLogger(__name__)

# Depth below the module directory searched for port declarations
PORT_SCAN_DEPTH = 2

_PORT_RE = re.compile(r"^\d{2,5}$")
_EXPOSE_RE = re.compile(r"^\s*EXPOSE\s+(.+)$", re.IGNORECASE | re.MULTILINE)
_ENV_PORT_RE = re.compile(r"""^\s*ENV\s+PORT(?:\s*=\s*|\s+)["']?(\d{2,5})["']?\s*$""", re.IGNORECASE | re.MULTILINE)
_ENV_FILE_PORT_RE = re.compile(r"""^\s*(?:export\s+)?(?:[A-Z0-9_]*_)?PORT\s*=\s*["']?(\d{2,5})["']?\s*$""", re.MULTILINE)


def _valid(token: str) -> bool:
    return bool(_PORT_RE.match(token))


def ports_from_container_file(text: str) -> list[str]:
    """Extract ports from EXPOSE instructions and ``ENV PORT`` declarations."""
    ports: list[str] = []
    for line in _EXPOSE_RE.findall(text):
        for token in line.split():
            port = token.split("/", 1)[0]
            if _valid(port):
                ports.append(port)
    ports.extend(_ENV_PORT_RE.findall(text))
    return ports


def _container_port(entry: object) -> Optional[str]:
    """Return the container side of a compose port mapping."""
    if isinstance(entry, dict):
        target = entry.get("target")
        return target if isinstance(target, str) else None
    if isinstance(entry, str):
        spec = entry.strip().split("/", 1)[0]
        return spec.rsplit(":", 1)[-1]
    return None


def ports_from_compose_file(text: str) -> list[str]:
    """Extract container ports from ``services.*.ports`` and ``expose``."""
    try:
        # BaseLoader keeps scalars as strings; YAML 1.1 reads 22:22 as base 60.
        data = yaml.load(text, Loader=yaml.BaseLoader)
    except yaml.YAMLError as exc:
        logger.warning("Failed to parse compose file: %s", exc)
        return []
    if not isinstance(data, dict):
        return []
    services = data.get("services")
    if not isinstance(services, dict):
        return []

    ports: list[str] = []
    for service in services.values():
        if not isinstance(service, dict):
            continue
        for key in ("ports", "expose"):
            entries = service.get(key)
            if not isinstance(entries, list):
                continue
            for entry in entries:
                port = _container_port(entry)
                if port and _valid(port):
                    ports.append(port)
    return ports


def ports_from_env_file(text: str) -> list[str]:
    """Extract ``PORT=`` and ``<NAME>_PORT=`` assignments."""
    return _ENV_FILE_PORT_RE.findall(text)


def discover_ports(module_dir: Path) -> list[str]:
    """Return the distinct ports declared within the module, in file order."""
    ports: list[str] = []
    patterns = CONTAINER_FILE_PATTERNS + COMPOSE_FILE_PATTERNS + ENV_FILE_PATTERNS
    for path in find_all(module_dir, patterns, max_depth=PORT_SCAN_DEPTH):
        text = read_text(path)
        if text is None:
            continue
        if matches(path, COMPOSE_FILE_PATTERNS):
            found = ports_from_compose_file(text)
        elif matches(path, CONTAINER_FILE_PATTERNS):
            found = ports_from_container_file(text)
        else:
            found = ports_from_env_file(text)
        for port in found:
            if port not in ports:
                ports.append(port)
    return ports

"""go.mod parser for Go framework and runtime version detection.

Reads the ``module`` and ``go`` directives and every required module path,
from single-line ``require`` statements and from ``require ( ... )`` blocks.
Trailing ``//`` comments are stripped.
"""

import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional

from selfdeploy.detector.fs import is_version_token, read_text

logger = logging.getLogger(__name__)

# Require path fragment -> framework tag. First match wins.
FRAMEWORK_INDICATORS: list[tuple[str, str]] = [
    ("gin-gonic/gin", "gin"),
    ("labstack/echo", "echo"),
    ("gofiber/fiber", "fiber"),
    ("go-chi/chi", "chi"),
    ("gorilla/mux", "gorilla"),
]

DEFAULT_BUILD_CMD = "go build ./..."
DEFAULT_TEST_CMD = "go test ./..."


@dataclass
class GoMod:
    module: str = ""
    go_version: str = ""
    requires: list[str] = field(default_factory=list)


def parse_gomod(module_dir: Path) -> Optional[GoMod]:
    """Parse ``module_dir/go.mod``; None when the file cannot be read."""
    text = read_text(module_dir / "go.mod")
    if text is None:
        return None

    gomod = GoMod()
    block: Optional[str] = None

    for raw in text.splitlines():
        line = raw.split("//", 1)[0].strip()
        if not line:
            continue
        if block is not None:
            if line == ")":
                block = None
            elif block == "require":
                gomod.requires.append(line.split()[0])
            continue

        keyword, _, rest = line.partition(" ")
        rest = rest.strip()
        if rest == "(":
            block = keyword
        elif keyword == "module":
            gomod.module = rest
        elif keyword == "go":
            gomod.go_version = rest
        elif keyword == "require" and rest:
            gomod.requires.append(rest.split()[0])

    return gomod


def detect_framework(gomod: GoMod) -> Optional[tuple[str, str]]:
    """Return (framework, require path) for the first known web framework."""
    for fragment, framework in FRAMEWORK_INDICATORS:
        for required in gomod.requires:
            if fragment in required:
                return framework, required
    return None


def detect_version(gomod: GoMod) -> Optional[str]:
    """Return ``go-<version>`` from the go directive, if it is numeric."""
    if not is_version_token(gomod.go_version):
        if gomod.go_version:
            logger.debug("Ignoring non-numeric go directive: %r", gomod.go_version)
        return None
    return f"go-{gomod.go_version}"

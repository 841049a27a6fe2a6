"""Module partitioner: splits a repository into independently buildable units.

Every directory holding a manifest file becomes a module. A repository
without any manifest is treated as a single module rooted at ``.``.
"""

import logging
from pathlib import Path

from selfdeploy.detector.fs import walk_files
from selfdeploy.detector.types import Module

logger = logging.getLogger(__name__)

MANIFEST_FILES: frozenset[str] = frozenset({
    # Go
    "go.mod",
    # Ruby
    "Gemfile",
    # Node
    "package.json",
    # Python
    "pyproject.toml",
    "requirements.txt",
    "Pipfile",
    "setup.py",
    # JVM
    "pom.xml",
    "build.gradle",
    "build.gradle.kts",
    "build.xml",
})


def _relative(root: Path, directory: Path) -> str:
    rel = directory.relative_to(root).as_posix()
    return rel or "."


def discover_modules(root: Path) -> list[Module]:
    """Return the distinct module directories under root, in walk order.

    Raises FileNotFoundError when root does not exist and
    NotADirectoryError when it is not a directory.
    """
    root = Path(root)
    if not root.exists():
        raise FileNotFoundError(f"Path does not exist: {root}")
    if not root.is_dir():
        raise NotADirectoryError(f"Path is not a directory: {root}")

    modules: list[Module] = []
    seen: set[Path] = set()

    for path in walk_files(root):
        if path.name not in MANIFEST_FILES:
            continue
        directory = path.parent
        if directory in seen:
            continue
        seen.add(directory)
        modules.append(Module(path=directory, rel=_relative(root, directory)))
        logger.debug("Module discovered: %s (%s)", modules[-1].rel, path.name)

    if not modules:
        modules.append(Module(path=root, rel="."))
        logger.debug("No manifest found; treating %s as a single module", root)

    return modules

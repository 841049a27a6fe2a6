"""Repository analysis pipeline.

Partition the repository into modules, classify each module in discovery
order, fold every module into the repository aggregate and probe for
container artifacts. Nothing is reported until every module is processed.
"""

import logging
from dataclasses import dataclass, field
from pathlib import Path

from selfdeploy.aggregate import RepositoryAggregate
from selfdeploy.detector import detect_module, discover_modules
from selfdeploy.detector.containers import find_compose_files, find_container_files

logger = logging.getLogger(__name__)


@dataclass
class AnalysisResult:
    root: Path
    aggregate: RepositoryAggregate
    container_files: list[Path] = field(default_factory=list)
    compose_files: list[Path] = field(default_factory=list)

    @property
    def has_container_file(self) -> bool:
        return bool(self.container_files)


def analyze_repository(root: Path) -> AnalysisResult:
    """Analyze a local repository tree.

    Raises FileNotFoundError / NotADirectoryError when root is not a
    directory. Per-module and per-detector problems never propagate.
    """
    root = Path(root).resolve()
    modules = discover_modules(root)
    logger.info("Discovered %d module(s) under %s", len(modules), root)

    aggregate = RepositoryAggregate()
    for module in modules:
        aggregate.add_module(detect_module(module, root))

    return AnalysisResult(
        root=root,
        aggregate=aggregate,
        container_files=find_container_files(root),
        compose_files=find_compose_files(root),
    )

"""Module arbitrator: runs every detector against a module and picks a winner.

Detection flow for one module:
1. Run each ecosystem detector in DETECTORS order.
2. Keep the verdict with the strictly highest score; on a tie the detector
   that ran first keeps the module.
3. Pool the runtime-version and build/test command candidates of every
   detector that fired, not just the winner's.
4. Derive the package manager, exposed ports and container files.

Detector order (behaviourally significant, do not reorder):
  Go → Ruby → Node/TypeScript → Python → Java/Kotlin
"""

import logging
from collections.abc import Callable
from pathlib import Path
from typing import Optional

from selfdeploy.detector.containers import find_container_files
from selfdeploy.detector.go import detect_go
from selfdeploy.detector.jvm import detect_jvm
from selfdeploy.detector.node import detect_node
from selfdeploy.detector.ports import PORT_SCAN_DEPTH, discover_ports
from selfdeploy.detector.python import detect_python
from selfdeploy.detector.ruby import detect_ruby
from selfdeploy.detector.types import UNKNOWN, DetectionResult, Module, ModuleReport, Verdict

logger = logging.getLogger(__name__)

Detector = Callable[[Path, Path], Optional[DetectionResult]]

DETECTORS: tuple[tuple[str, Detector], ...] = (
    ("go", detect_go),
    ("ruby", detect_ruby),
    ("node", detect_node),
    ("python", detect_python),
    ("jvm", detect_jvm),
)

# Closed mapping from build tool to package manager. Anything else is unknown.
PACKAGE_MANAGERS: dict[str, str] = {
    "npm": "npm",
    "yarn": "yarn",
    "pnpm": "pnpm",
    "pip": "pip",
    "poetry": "poetry",
    "pipenv": "pipenv",
    "uv": "uv",
    "bundler": "bundler",
    "maven": "maven",
    "gradle": "gradle",
    "go": "go",
}


def package_manager_for(build_tool: str) -> str:
    return PACKAGE_MANAGERS.get(build_tool, UNKNOWN)


def detect_module(
    module: Module,
    repo_root: Path,
    detectors: tuple[tuple[str, Detector], ...] = DETECTORS,
) -> ModuleReport:
    """Classify one module and return its finalized report."""
    report = ModuleReport(module=module, verdict=Verdict())

    for name, detector in detectors:
        result = detector(module.path, repo_root)
        if result is None:
            continue
        logger.debug(
            "Detector %s proposed %s/%s (score=%d) for %s",
            name,
            result.verdict.language,
            result.verdict.framework,
            result.verdict.score,
            module.rel,
        )
        if result.verdict.score > report.verdict.score:
            report.verdict = result.verdict
        report.runtime_versions.extend(result.runtime_versions)
        report.build_commands.extend(result.build_commands)
        report.test_commands.extend(result.test_commands)
        for note in result.notes:
            if note not in report.notes:
                report.notes.append(note)

    report.package_manager = package_manager_for(report.verdict.build_tool)
    report.ports = discover_ports(module.path)
    report.container_files = find_container_files(module.path, max_depth=PORT_SCAN_DEPTH)

    _log_result(report)
    return report


def _log_result(report: ModuleReport) -> None:
    logger.info(
        "Module %s: language=%s framework=%s build_tool=%s score=%d",
        report.module.rel,
        report.verdict.language,
        report.verdict.framework,
        report.verdict.build_tool,
        report.verdict.score,
    )

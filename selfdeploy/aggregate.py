"""Repository aggregator: folds module reports into repository-wide tallies.

Every module adds its winning score (floored at zero) once to each primary
category: language, framework, build tool, test tool and artifact type.
Runtime versions and build/test commands draw from every candidate the
module collected, package managers and ports from the module's winner.
"""

import logging
import re
from dataclasses import dataclass, field

from selfdeploy.detector.types import PLACEHOLDERS, ModuleReport

logger = logging.getLogger(__name__)

PRIMARY_CATEGORIES: tuple[str, ...] = (
    "languages",
    "frameworks",
    "build_tools",
    "test_tools",
    "artifact_types",
)

SECONDARY_CATEGORIES: tuple[str, ...] = (
    "runtime_versions",
    "build_commands",
    "test_commands",
    "package_managers",
    "ports",
)

CATEGORIES: tuple[str, ...] = PRIMARY_CATEGORIES + SECONDARY_CATEGORIES

# Ecosystem prefixes carried by runtime version values ("java-17")
RUNTIME_PREFIXES: tuple[str, ...] = ("go-", "java-", "node-", "python-", "ruby-")

_NUMERIC_VERSION_RE = re.compile(r"\d+(?:\.\d+)*")


def is_numeric_runtime_version(value: str) -> bool:
    """True when the value, minus a known ecosystem prefix, is ``N(.N)*``."""
    for prefix in RUNTIME_PREFIXES:
        if value.startswith(prefix):
            value = value[len(prefix):]
            break
    return _NUMERIC_VERSION_RE.fullmatch(value) is not None


class Tally:
    """Value → cumulative score for one category.

    Placeholder values are ignored. ``ranked()`` sorts by descending score;
    the sort is stable so equal scores keep their first-seen order.
    """

    def __init__(self) -> None:
        self._scores: dict[str, int] = {}

    def add(self, value: str, score: int) -> None:
        if value in PLACEHOLDERS:
            return
        self._scores[value] = self._scores.get(value, 0) + score

    def ranked(self) -> list[tuple[str, int]]:
        return sorted(self._scores.items(), key=lambda item: -item[1])

    def values(self) -> list[str]:
        return [value for value, _ in self.ranked()]

    def total(self) -> int:
        return sum(self._scores.values())

    def get(self, value: str) -> int:
        return self._scores.get(value, 0)

    def __contains__(self, value: str) -> bool:
        return value in self._scores

    def __len__(self) -> int:
        return len(self._scores)


@dataclass
class RepositoryAggregate:
    """Repository-wide tallies, note log and per-module records."""

    tallies: dict[str, Tally] = field(default_factory=lambda: {c: Tally() for c in CATEGORIES})
    notes: list[str] = field(default_factory=list)
    modules: list[ModuleReport] = field(default_factory=list)

    def add_module(self, report: ModuleReport) -> None:
        """Fold one finalized module into the repository tallies."""
        weight = report.weight
        verdict = report.verdict

        self.tallies["languages"].add(verdict.language, weight)
        self.tallies["frameworks"].add(verdict.framework, weight)
        self.tallies["build_tools"].add(verdict.build_tool, weight)
        self.tallies["test_tools"].add(verdict.test_tool, weight)
        self.tallies["artifact_types"].add(verdict.artifact_type, weight)

        for value, score in report.runtime_versions.items():
            if is_numeric_runtime_version(value):
                self.tallies["runtime_versions"].add(value, score)
            else:
                logger.debug("Dropping non-numeric runtime version %r", value)
        for value, score in report.build_commands.items():
            self.tallies["build_commands"].add(value, score)
        for value, score in report.test_commands.items():
            self.tallies["test_commands"].add(value, score)

        self.tallies["package_managers"].add(report.package_manager, weight)
        for port in report.ports:
            self.tallies["ports"].add(port, weight)

        for note in report.notes:
            self.add_note(note)

        self.modules.append(report)

    def add_note(self, note: str) -> None:
        if note not in self.notes:
            self.notes.append(note)

    def __getitem__(self, category: str) -> Tally:
        return self.tallies[category]

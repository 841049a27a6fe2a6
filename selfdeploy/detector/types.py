"""Shared types for the detector module.

Every ecosystem detector returns a DetectionResult for the module it was
given: the verdict it proposes, the scored candidates for runtime version
and build/test commands, and the notes describing the evidence it saw.
Nothing is kept in module-level state between calls.
"""

from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional

UNKNOWN = "unknown"
NONE = "none"

# Values that never contribute to a repository tally.
PLACEHOLDERS = frozenset({"", UNKNOWN, NONE})


@dataclass(frozen=True)
class Module:
    """A directory identified as one independently buildable unit."""

    path: Path
    rel: str


@dataclass
class Candidate:
    """A scored proposal for a secondary attribute (version or command).

    Source tracks where the value came from (e.g. "go.mod go directive")
    for debugging and evidence reporting.
    """

    value: str
    source: str
    score: int


@dataclass
class Verdict:
    """One detector's complete classification proposal for a module."""

    language: str = UNKNOWN
    framework: str = UNKNOWN
    build_tool: str = UNKNOWN
    test_tool: str = UNKNOWN
    artifact_type: str = UNKNOWN
    score: int = -1


@dataclass
class DetectionResult:
    """Per-call output of a single ecosystem detector."""

    verdict: Verdict
    runtime_versions: list[Candidate] = field(default_factory=list)
    build_commands: list[Candidate] = field(default_factory=list)
    test_commands: list[Candidate] = field(default_factory=list)
    notes: list[str] = field(default_factory=list)

    def note(self, text: str) -> None:
        if text not in self.notes:
            self.notes.append(text)

    def propose_version(self, value: Optional[str], source: str) -> None:
        if value:
            self.runtime_versions.append(Candidate(value, source, self.verdict.score))

    def propose_build(self, command: Optional[str], source: str) -> None:
        if command:
            self.build_commands.append(Candidate(command, source, self.verdict.score))

    def propose_test(self, command: Optional[str], source: str) -> None:
        if command:
            self.test_commands.append(Candidate(command, source, self.verdict.score))


class CandidatePool:
    """Accumulates candidates for one module, summing scores per value.

    The best value is the one with the highest cumulative score; on ties
    the value that was proposed first wins.
    """

    def __init__(self) -> None:
        self._scores: dict[str, int] = {}

    def add(self, candidate: Candidate) -> None:
        self._scores[candidate.value] = self._scores.get(candidate.value, 0) + candidate.score

    def extend(self, candidates: list[Candidate]) -> None:
        for candidate in candidates:
            self.add(candidate)

    def best(self) -> Optional[str]:
        best_value: Optional[str] = None
        best_score = 0
        for value, score in self._scores.items():
            if best_value is None or score > best_score:
                best_value, best_score = value, score
        return best_value

    def items(self) -> list[tuple[str, int]]:
        return list(self._scores.items())

    def __len__(self) -> int:
        return len(self._scores)


@dataclass
class ModuleReport:
    """Finalized record for one module after arbitration."""

    module: Module
    verdict: Verdict
    runtime_versions: CandidatePool = field(default_factory=CandidatePool)
    build_commands: CandidatePool = field(default_factory=CandidatePool)
    test_commands: CandidatePool = field(default_factory=CandidatePool)
    package_manager: str = UNKNOWN
    ports: list[str] = field(default_factory=list)
    container_files: list[Path] = field(default_factory=list)
    notes: list[str] = field(default_factory=list)

    @property
    def weight(self) -> int:
        """Winning score floored at zero, used for every tally contribution."""
        return max(self.verdict.score, 0)

    @property
    def runtime_version(self) -> Optional[str]:
        return self.runtime_versions.best()

    @property
    def build_command(self) -> Optional[str]:
        return self.build_commands.best()

    @property
    def test_command(self) -> Optional[str]:
        return self.test_commands.best()

    def to_dict(self) -> dict:
        return {
            "path": self.module.rel,
            "language": self.verdict.language,
            "framework": self.verdict.framework,
            "build_tool": self.verdict.build_tool,
            "test_tool": self.verdict.test_tool,
            "artifact_type": self.verdict.artifact_type,
            "score": self.verdict.score,
            "runtime_version": self.runtime_version or UNKNOWN,
            "build_command": self.build_command,
            "test_command": self.test_command,
            "package_manager": self.package_manager,
            "ports": list(self.ports),
            "container_files": [str(p) for p in self.container_files],
            "notes": list(self.notes),
        }

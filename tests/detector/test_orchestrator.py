"""Tests for per-module arbitration and candidate pooling."""

import json
from pathlib import Path

from selfdeploy.detector.orchestrator import DETECTORS, detect_module, package_manager_for
from selfdeploy.detector.types import (
    Candidate,
    CandidatePool,
    DetectionResult,
    Module,
    ModuleReport,
    Verdict,
)


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------

def _write(path: Path, content: str = "") -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(content, encoding="utf-8")


def _fake(language: str, score: int, version: str = "", build: str = ""):
    def detector(module_dir: Path, repo_root: Path) -> DetectionResult:
        result = DetectionResult(
            verdict=Verdict(language=language, build_tool="npm", score=score),
            notes=[f"{language} fired"],
        )
        result.propose_version(version, f"{language} version")
        result.propose_build(build, f"{language} build")
        return result

    return detector


def _silent(module_dir: Path, repo_root: Path) -> None:
    return None


# ---------------------------------------------------------------------------
# Candidate pool
# ---------------------------------------------------------------------------

class TestCandidatePool:
    def test_scores_are_summed_per_value(self):
        pool = CandidatePool()
        pool.extend([Candidate("a", "x", 5), Candidate("b", "y", 8), Candidate("a", "z", 5)])
        assert pool.items() == [("a", 10), ("b", 8)]
        assert pool.best() == "a"

    def test_tie_keeps_first_value(self):
        pool = CandidatePool()
        pool.add(Candidate("first", "x", 70))
        pool.add(Candidate("second", "y", 70))
        assert pool.best() == "first"

    def test_empty_pool(self):
        assert CandidatePool().best() is None
        assert len(CandidatePool()) == 0

    def test_falsy_proposals_ignored(self):
        result = DetectionResult(verdict=Verdict(score=50))
        result.propose_version(None, "none")
        result.propose_build("", "empty")
        assert result.runtime_versions == []
        assert result.build_commands == []


# ---------------------------------------------------------------------------
# Arbitration
# ---------------------------------------------------------------------------

class TestArbitration:
    def test_first_detector_keeps_tie(self, tmp_path):
        detectors = (("a", _fake("alpha", 70)), ("b", _fake("beta", 70)))
        report = detect_module(Module(tmp_path, "."), tmp_path, detectors)
        assert report.verdict.language == "alpha"

    def test_strictly_higher_score_wins(self, tmp_path):
        detectors = (("a", _fake("alpha", 70)), ("b", _fake("beta", 71)))
        report = detect_module(Module(tmp_path, "."), tmp_path, detectors)
        assert report.verdict.language == "beta"
        assert report.verdict.score == 71

    def test_candidates_pooled_from_every_detector(self, tmp_path):
        detectors = (
            ("a", _fake("alpha", 80, version="node-20", build="make")),
            ("b", _fake("beta", 60, version="python-3.12", build="make")),
            ("c", _silent),
        )
        report = detect_module(Module(tmp_path, "."), tmp_path, detectors)
        assert report.runtime_versions.items() == [("node-20", 80), ("python-3.12", 60)]
        assert report.build_commands.items() == [("make", 140)]
        assert report.notes == ["alpha fired", "beta fired"]

    def test_nothing_fires(self, tmp_path):
        report = detect_module(Module(tmp_path, "."), tmp_path, (("c", _silent),))
        assert report.verdict == Verdict()
        assert report.weight == 0
        assert report.package_manager == "unknown"
        assert report.to_dict()["runtime_version"] == "unknown"

    def test_detector_order(self):
        assert [name for name, _ in DETECTORS] == ["go", "ruby", "node", "python", "jvm"]


class TestPackageManager:
    def test_known_tools(self):
        assert package_manager_for("yarn") == "yarn"
        assert package_manager_for("uv") == "uv"
        assert package_manager_for("gradle") == "gradle"

    def test_unknown_tools(self):
        assert package_manager_for("ant") == "unknown"
        assert package_manager_for("unknown") == "unknown"


# ---------------------------------------------------------------------------
# Real detectors
# ---------------------------------------------------------------------------

class TestDetectModule:
    def test_go_keeps_tie_against_node(self, tmp_path):
        _write(tmp_path / "go.mod", "module x\n\ngo 1.22\n")
        _write(tmp_path / "package.json", json.dumps({"scripts": {"build": "tsc"}}))
        report = detect_module(Module(tmp_path, "."), tmp_path)
        assert report.verdict.language == "go"
        assert report.verdict.score == 70
        assert report.build_commands.items() == [("go build ./...", 70), ("npm run build", 70)]
        assert report.build_command == "go build ./..."
        assert report.package_manager == "go"

    def test_ports_and_container_files(self, tmp_path):
        _write(tmp_path / "requirements.txt", "flask\n")
        _write(tmp_path / "Dockerfile", "FROM python:3.12\nEXPOSE 8080\n")
        report = detect_module(Module(tmp_path, "."), tmp_path)
        assert report.ports == ["8080"]
        assert report.container_files == [tmp_path / "Dockerfile"]
        assert report.package_manager == "pip"

    def test_to_dict(self, tmp_path):
        _write(tmp_path / "go.mod", "module x\n\ngo 1.22\n")
        record = detect_module(Module(tmp_path, "."), tmp_path).to_dict()
        assert record["path"] == "."
        assert record["language"] == "go"
        assert record["runtime_version"] == "go-1.22"
        assert record["build_command"] == "go build ./..."
        assert record["test_command"] == "go test ./..."
        assert record["score"] == 70


def test_module_report_weight_floors_at_zero(tmp_path):
    report = ModuleReport(module=Module(tmp_path, "."), verdict=Verdict(score=-1))
    assert report.weight == 0

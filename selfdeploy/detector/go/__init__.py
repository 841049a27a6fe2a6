"""Go ecosystem detector.

Entry point: detect_go(module_dir, repo_root) -> DetectionResult | None
"""

from pathlib import Path
from typing import Optional

from selfdeploy.detector.fs import find_first
from selfdeploy.detector.go.gomod import (
    DEFAULT_BUILD_CMD,
    DEFAULT_TEST_CMD,
    GoMod,
    detect_framework,
    detect_version,
    parse_gomod,
)
from selfdeploy.detector.types import NONE, DetectionResult, Verdict

BASE_SCORE = 70


def detect_go(module_dir: Path, repo_root: Path) -> Optional[DetectionResult]:
    """Run Go detection on one module directory."""
    if not (module_dir / "go.mod").is_file():
        return None

    notes = ["Go: go.mod present"]
    score = BASE_SCORE

    if find_first(module_dir, "main.go", max_depth=4):
        score += 10
        notes.append("Go: main.go present")

    if find_first(module_dir, "*_test.go", max_depth=6):
        score += 5
        notes.append("Go: *_test.go present")

    gomod = parse_gomod(module_dir) or GoMod()
    framework = NONE
    fw = detect_framework(gomod)
    if fw:
        framework = fw[0]
        score += 5
        notes.append(f"Go: framework={framework}")

    result = DetectionResult(
        verdict=Verdict(
            language="go",
            framework=framework,
            build_tool="go",
            test_tool="go test",
            artifact_type="binary",
            score=score,
        ),
        notes=notes,
    )
    result.propose_version(detect_version(gomod), "go.mod go directive")
    result.propose_build(DEFAULT_BUILD_CMD, "go default")
    result.propose_test(DEFAULT_TEST_CMD, "go default")
    return result

"""Ruby ecosystem detector.

Entry point: detect_ruby(module_dir, repo_root) -> DetectionResult | None
"""

import os
from pathlib import Path
from typing import Optional

from selfdeploy.detector.ruby import gemfile
from selfdeploy.detector.ruby.defaults import (
    BUILD_CMD,
    DEFAULT_TEST_CMD,
    DEFAULT_TEST_TOOL,
    RAILS_MARKERS,
)
from selfdeploy.detector.types import DetectionResult, Verdict

BASE_SCORE = 65


def detect_ruby(module_dir: Path, repo_root: Path) -> Optional[DetectionResult]:
    """Run Ruby detection on one module directory."""
    if not ((module_dir / "Gemfile").is_file() or (module_dir / "Gemfile.lock").is_file()):
        return None

    notes = ["Ruby: Gemfile present"]
    score = BASE_SCORE
    framework = "ruby-generic"
    gems = gemfile.parse_gems(module_dir)

    if _has_rails_markers(module_dir):
        framework = "rails"
        score += 25
        notes.append(
            "Ruby: Rails markers (bin/rails/config.ru/app/controllers/app/models/config/application.rb)"
        )
    else:
        declared = gemfile.detect_framework(gems)
        if declared:
            framework = declared
            score += 10
            notes.append(f"Ruby: Gemfile declares {declared}")

    if (module_dir / "spec").is_dir():
        score += 5
        notes.append("Ruby: spec/ directory")

    test_tool, test_cmd = gemfile.detect_test_suite(gems) or (DEFAULT_TEST_TOOL, DEFAULT_TEST_CMD)

    result = DetectionResult(
        verdict=Verdict(
            language="ruby",
            framework=framework,
            build_tool="bundler",
            test_tool=test_tool,
            artifact_type="app",
            score=score,
        ),
        notes=notes,
    )

    version = gemfile.detect_version(module_dir)
    if version:
        result.propose_version(version[0], version[1])
    result.propose_build(BUILD_CMD, "bundler default")
    result.propose_test(test_cmd, f"Gemfile test suite ({test_tool})")
    return result


def _has_rails_markers(module_dir: Path) -> bool:
    for marker in RAILS_MARKERS:
        path = module_dir / marker
        if marker == "bin/rails":
            # The launcher only counts when it is executable.
            if path.is_file() and os.access(path, os.X_OK):
                return True
        elif path.exists():
            return True
    return False

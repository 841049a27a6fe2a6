"""Python ecosystem detector.

Entry point: detect_python(module_dir, repo_root) -> DetectionResult | None

Framework inference runs in three stages: descriptor contents, then source
files, then ASGI/WSGI entry points. A manage.py at the module root forces
Django regardless of the other evidence.
"""

from pathlib import Path
from typing import Optional

from selfdeploy.detector.python import pyproject, sources
from selfdeploy.detector.python.defaults import (
    BUILD_CMDS,
    DEFAULT_TEST_CMD,
    DESCRIPTOR_FILES,
    DJANGO_TEST_CMD,
    PIP_PROJECT_BUILD_CMD,
    PIP_REQUIREMENTS_BUILD_CMD,
)
from selfdeploy.detector.types import NONE, DetectionResult, Verdict

BASE_SCORE = 60


def detect_python(module_dir: Path, repo_root: Path) -> Optional[DetectionResult]:
    """Run Python detection on one module directory."""
    present = [name for name in DESCRIPTOR_FILES if (module_dir / name).is_file()]
    if not present:
        return None

    notes: list[str] = []
    build_tool = "pip"
    framework = NONE
    data = pyproject.load_pyproject(module_dir) if "pyproject.toml" in present else {}

    for name in present:
        if name == "Pipfile":
            build_tool = "pipenv"
            notes.append("Python: Pipfile present (pipenv)")
        else:
            notes.append(f"Python: {name} present")

        if name == "pyproject.toml":
            detected = pyproject.detect_build_tool(module_dir, data)
            if detected:
                build_tool = detected[0]
                notes.append(f"Python: build_tool={build_tool}")

        # First descriptor naming a framework sticks.
        if framework == NONE:
            framework = sources.framework_from_descriptor(module_dir / name) or NONE

    if framework == NONE:
        hit = sources.framework_from_sources(module_dir)
        if hit:
            framework = hit[0]
            notes.append(f"Python: code mentions {framework}")

    has_asgi, has_wsgi = sources.find_entry_points(module_dir)
    if has_asgi:
        notes.append("Python: asgi.py present")
    if has_wsgi:
        notes.append("Python: wsgi.py present")
    if framework == NONE:
        framework = sources.framework_from_entry_points(has_asgi, has_wsgi) or NONE

    has_manage = (module_dir / "manage.py").is_file()
    if has_manage:
        framework = "django"
        notes.append("Python: manage.py present -> Django")

    score = BASE_SCORE
    if framework != NONE:
        score += 15
        notes.append(f"Python: framework={framework}")
    if build_tool != "pip":
        score += 5

    result = DetectionResult(
        verdict=Verdict(
            language="python",
            framework=framework,
            build_tool=build_tool,
            test_tool="pytest",
            artifact_type="wheel",
            score=score,
        ),
        notes=notes,
    )

    version = pyproject.detect_version(module_dir, data)
    if version:
        result.propose_version(version[0], version[1])
    result.propose_build(_build_command(module_dir, build_tool), f"{build_tool} default")
    if framework == "django" and has_manage:
        result.propose_test(DJANGO_TEST_CMD, "manage.py")
    else:
        result.propose_test(DEFAULT_TEST_CMD, "python default")
    return result


def _build_command(module_dir: Path, build_tool: str) -> str:
    if build_tool in BUILD_CMDS:
        return BUILD_CMDS[build_tool]
    if (module_dir / "requirements.txt").is_file():
        return PIP_REQUIREMENTS_BUILD_CMD
    return PIP_PROJECT_BUILD_CMD

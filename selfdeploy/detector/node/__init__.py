"""Node.js / TypeScript ecosystem detector.

Entry point: detect_node(module_dir, repo_root) -> DetectionResult | None

The package.json may sit in a subdirectory of the module; a descriptor at
the module root scores higher than one found deeper.
"""

from pathlib import Path
from typing import Optional

from selfdeploy.detector.fs import find_first
from selfdeploy.detector.node.package_json import (
    DEFAULT_FRAMEWORK,
    collect_dependencies,
    detect_framework,
    detect_package_manager,
    detect_test_tool,
    detect_version,
    get_scripts,
    load_package_json,
)
from selfdeploy.detector.types import DetectionResult, Verdict

BASE_SCORE = 60

# Script names that become build / test command candidates
BUILD_SCRIPTS: tuple[str, ...] = ("build",)
TEST_SCRIPTS: tuple[str, ...] = ("test",)


def detect_node(module_dir: Path, repo_root: Path) -> Optional[DetectionResult]:
    """Run Node.js / TypeScript detection on one module directory."""
    pkg = module_dir / "package.json"
    if not pkg.is_file():
        pkg = find_first(module_dir, "package.json", max_depth=4)
    if pkg is None:
        return None

    pkg_dir = pkg.parent
    notes: list[str] = []

    language = "javascript"
    if find_first(module_dir, "tsconfig.json", max_depth=4):
        language = "typescript"
        notes.append("Node: tsconfig.json present")

    build_tool = detect_package_manager(pkg_dir)
    data = load_package_json(pkg)
    deps = collect_dependencies(data)
    scripts = get_scripts(data)

    framework, script_note = detect_framework(deps, scripts)
    if script_note:
        notes.append(script_note)

    score = BASE_SCORE
    notes.append(f"Node: package.json at {pkg.relative_to(module_dir).as_posix()} (pm={build_tool})")

    if pkg_dir == module_dir:
        score += 10
    else:
        score -= 5
        notes.append("Node: package.json not at module root")

    if language == "typescript":
        score += 5

    if framework != DEFAULT_FRAMEWORK:
        score += 10
        notes.append(f"Node: framework={framework}")

    result = DetectionResult(
        verdict=Verdict(
            language=language,
            framework=framework,
            build_tool=build_tool,
            test_tool=detect_test_tool(deps),
            artifact_type="node-app",
            score=score,
        ),
        notes=notes,
    )

    version = detect_version(pkg_dir, repo_root, data)
    if version:
        result.propose_version(version[0], version[1])
    for name in BUILD_SCRIPTS:
        if name in scripts:
            result.propose_build(f"{build_tool} run {name}", f"package.json scripts.{name}")
    for name in TEST_SCRIPTS:
        if name in scripts:
            result.propose_test(f"{build_tool} run {name}", f"package.json scripts.{name}")
    return result

"""JVM ecosystem detector (Maven / Gradle / Ant).

Entry point: detect_jvm(module_dir, repo_root) -> DetectionResult | None

Each build-descriptor family independently marks the module as a JVM
project; Gradle overrides Maven and Ant is only used when nothing else is
present. Supports Spring Boot and generic Java/Kotlin projects.
"""

from pathlib import Path
from typing import Optional

from selfdeploy.detector.fs import ancestors, grep_files, read_text
from selfdeploy.detector.jvm import gradle, maven
from selfdeploy.detector.jvm.defaults import (
    BUILD_CMDS,
    SPRING_BOOT_ANNOTATION,
    TEST_CMDS,
    WRAPPERS,
)
from selfdeploy.detector.jvm.versions import resolve_java_version
from selfdeploy.detector.types import UNKNOWN, DetectionResult, Verdict

BASE_SCORE = 60

# Ancestor directories searched for a parent (multi-module) build
PARENT_BUILD_MAX_HOPS = 3


def detect_jvm(module_dir: Path, repo_root: Path) -> Optional[DetectionResult]:
    """Run Java/Kotlin detection on one module directory."""
    has_marker = False
    build_tool = UNKNOWN
    framework = "java-generic"
    language = "java"
    artifact_type = "jar"
    notes: list[str] = []

    pom_text = read_text(module_dir / "pom.xml")
    if pom_text is not None:
        has_marker = True
        build_tool = "maven"
        notes.append("Java: pom.xml present")
        if maven.is_spring_boot(pom_text):
            framework = "spring-boot"
        if maven.packaging(pom_text) == "war":
            artifact_type = "war"

    gradle_text, gradle_name = gradle.read_gradle_file(module_dir)
    if gradle_name:
        has_marker = True
        build_tool = "gradle"
        notes.append("Java: build.gradle present")
        if gradle.is_spring_boot(gradle_text):
            framework = "spring-boot"
        if gradle.mentions_kotlin(gradle_text):
            language = "kotlin"
            notes.append("Kotlin: kotlin in Gradle file")
        if gradle.applies_war_plugin(gradle_text):
            artifact_type = "war"

    if (module_dir / "build.xml").is_file():
        has_marker = True
        if build_tool == UNKNOWN:
            build_tool = "ant"
        notes.append("Java: build.xml present")

    if not has_marker:
        return None

    if (module_dir / "src" / "main" / "kotlin").is_dir():
        language = "kotlin"
        notes.append("Kotlin: src/main/kotlin present")
    if (module_dir / "src" / "main" / "java").is_dir():
        notes.append("Java: src/main/java present")
    if (module_dir / "src" / "test" / "java").is_dir() or (module_dir / "src" / "test" / "kotlin").is_dir():
        notes.append("Java/Kotlin: src/test present")

    if framework != "spring-boot":
        hit = grep_files(
            module_dir / "src",
            (".java", ".kt"),
            SPRING_BOOT_ANNOTATION,
            max_depth=6,
            ignore_case=False,
        )
        if hit is not None:
            framework = "spring-boot"
            notes.append("Java/Kotlin: @SpringBootApplication in code")

    score = BASE_SCORE
    if framework == "spring-boot":
        score += 20
        notes.append("Java/Kotlin: framework=spring-boot")
    if build_tool in ("maven", "gradle"):
        score += 5
    if language == "kotlin":
        score += 3

    parent = _parent_build(module_dir, repo_root)
    if parent is not None:
        score += 2
        notes.append(f"Java: inherits parent build at {parent.relative_to(repo_root).as_posix()}")

    result = DetectionResult(
        verdict=Verdict(
            language=language,
            framework=framework,
            build_tool=build_tool,
            test_tool="junit",
            artifact_type=artifact_type,
            score=score,
        ),
        notes=notes,
    )

    version = resolve_java_version(module_dir, repo_root)
    if version:
        result.propose_version(version[0], version[1])
        result.note(f"Java: runtime {version[0]} ({version[1]})")
    result.propose_build(_command(module_dir, build_tool, BUILD_CMDS), f"{build_tool} default")
    result.propose_test(_command(module_dir, build_tool, TEST_CMDS), f"{build_tool} default")
    return result


def _command(module_dir: Path, build_tool: str, commands: dict[str, str]) -> Optional[str]:
    """Return the default command for the tool, using the wrapper script if present."""
    command = commands.get(build_tool)
    if command is None or build_tool not in WRAPPERS:
        return command
    wrapper, tool = WRAPPERS[build_tool]
    if (module_dir / wrapper).is_file():
        return command.replace(tool, f"./{wrapper}", 1)
    return command


def _parent_build(module_dir: Path, repo_root: Path) -> Optional[Path]:
    """Return the nearest ancestor holding an aggregator POM or Gradle settings."""
    for directory in ancestors(module_dir, repo_root, PARENT_BUILD_MAX_HOPS):
        if any((directory / name).is_file() for name in gradle.SETTINGS_FILES):
            return directory
        pom_text = read_text(directory / "pom.xml")
        if pom_text is not None and maven.declares_modules(pom_text):
            return directory
    return None

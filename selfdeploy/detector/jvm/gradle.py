"""build.gradle / build.gradle.kts probes for JVM framework detection.

Uses a plain text scan rather than a Groovy/Kotlin parser.
Handles both Groovy DSL (build.gradle) and Kotlin DSL (build.gradle.kts).
"""

import re
from pathlib import Path
from typing import Optional

from selfdeploy.detector.fs import read_text
from selfdeploy.detector.jvm.defaults import SPRING_BOOT_MARKER

GRADLE_FILES: tuple[str, ...] = ("build.gradle", "build.gradle.kts")
SETTINGS_FILES: tuple[str, ...] = ("settings.gradle", "settings.gradle.kts")

_WAR_PLUGIN_RE = re.compile(r"""(?:id\s*\(?\s*['"]war['"]|apply\s+plugin\s*:\s*['"]war['"]|^\s*war\s*$)""", re.MULTILINE)


def gradle_file(module_dir: Path) -> Optional[Path]:
    """Return the build script for the module; the Kotlin DSL wins when both exist."""
    kts = module_dir / "build.gradle.kts"
    if kts.is_file():
        return kts
    groovy = module_dir / "build.gradle"
    if groovy.is_file():
        return groovy
    return None


def read_gradle_file(module_dir: Path) -> tuple[str, str]:
    """Return (content, filename) for the module build script."""
    path = gradle_file(module_dir)
    if path is None:
        return "", ""
    return read_text(path) or "", path.name


def is_spring_boot(text: str) -> bool:
    return SPRING_BOOT_MARKER in text.lower()


def mentions_kotlin(text: str) -> bool:
    return "kotlin" in text.lower()


def applies_war_plugin(text: str) -> bool:
    return bool(_WAR_PLUGIN_RE.search(text))

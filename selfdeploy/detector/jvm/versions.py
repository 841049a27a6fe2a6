"""Java runtime version resolution.

The version is resolved through a fixed fallback chain; the first step that
yields a numeric token (digits and dots only) wins:

1. in-file version property (pom ``java.version`` / ``maven.compiler.release``
   / ``release``, Gradle ``javaVersion``-style assignments)
2. ``JavaVersion.VERSION_<n>`` enum reference
3. toolchain declaration (``JavaLanguageVersion.of(n)``, ``jvmToolchain(n)``)
4. compatibility property (``maven.compiler.source``/``target``,
   ``sourceCompatibility``/``targetCompatibility``/``jvmTarget``)
5. gradle.properties in the module, then in ancestor directories
6. best-effort scan of every build descriptor in the repository

Values written as a placeholder (``${java.version}`` or a bare Gradle
variable name) are resolved one level against the same file.
"""

import logging
import re
from collections.abc import Callable
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from selfdeploy.detector.fs import MAX_SCAN_FILES, ancestors, is_version_token, read_text, walk_files
from selfdeploy.detector.jvm.gradle import GRADLE_FILES, read_gradle_file

logger = logging.getLogger(__name__)

# Ancestor directories searched for gradle.properties
PROPERTIES_MAX_HOPS = 4

POM_VERSION_PROPERTIES: tuple[str, ...] = ("java.version", "maven.compiler.release", "release")
POM_COMPAT_PROPERTIES: tuple[str, ...] = (
    "maven.compiler.source",
    "maven.compiler.target",
    "source",
    "target",
)
GRADLE_VERSION_NAMES: tuple[str, ...] = ("javaVersion", "java_version", "jdkVersion")
PROPERTIES_KEYS: tuple[str, ...] = ("java.version", "javaVersion", "java_version", "jdkVersion")

REPO_SCAN_FILES: tuple[str, ...] = ("pom.xml", *GRADLE_FILES, "gradle.properties")

_PLACEHOLDER_RE = re.compile(r"^\$\{\s*([\w.\-]+)\s*\}$")
_IDENTIFIER_RE = re.compile(r"^[A-Za-z_][\w.]*$")
JAVA_VERSION_ENUM_RE = re.compile(r"JavaVersion\.VERSION_(\d+(?:_\d+)*)")
_TOOLCHAIN_RES = (
    re.compile(r"""JavaLanguageVersion\.of\(\s*['"]?([\w.${}]+)['"]?\s*\)"""),
    re.compile(r"""jvmToolchain\(\s*['"]?([\w.${}]+)['"]?\s*\)"""),
)
_COMPAT_RE = re.compile(
    r"""\b(?:sourceCompatibility|targetCompatibility|jvmTarget)\s*=\s*['"]?([\w.${}]+)['"]?"""
)


@dataclass
class BuildFiles:
    """Build descriptor contents of one directory."""

    pom: Optional[str] = None
    gradle: Optional[str] = None
    gradle_name: str = "build.gradle"


Step = Callable[[BuildFiles], Optional[tuple[str, str]]]


# ---------------------------------------------------------------------------
# Placeholder resolution
# ---------------------------------------------------------------------------

def _xml_values(text: str, tag: str) -> list[str]:
    pattern = re.compile(rf"<{re.escape(tag)}>\s*([^<]*?)\s*</{re.escape(tag)}>")
    return pattern.findall(text)


def _resolve_pom(text: str, value: str) -> str:
    match = _PLACEHOLDER_RE.match(value)
    if not match:
        return value
    values = _xml_values(text, match.group(1))
    return values[0] if values else value


def _gradle_assignment(text: str, name: str) -> Optional[str]:
    pattern = re.compile(rf"""\b{re.escape(name)}\s*=\s*['"]?([\w.${{}}]+)['"]?""")
    match = pattern.search(text)
    return match.group(1).strip() if match else None


def _resolve_gradle(text: str, value: str) -> str:
    if is_version_token(value):
        return value
    match = _PLACEHOLDER_RE.match(value)
    if match:
        name = match.group(1)
    elif _IDENTIFIER_RE.match(value):
        name = value
    else:
        return value
    resolved = _gradle_assignment(text, name)
    return resolved if resolved is not None else value


def _first_valid(values: list[str]) -> Optional[str]:
    for value in values:
        candidate = value.strip()
        if is_version_token(candidate):
            return candidate
        logger.debug("Ignoring non-numeric Java version token: %r", candidate)
    return None


# ---------------------------------------------------------------------------
# Chain steps (operate on the build files of a single directory)
# ---------------------------------------------------------------------------

def _in_file_property(files: BuildFiles) -> Optional[tuple[str, str]]:
    if files.pom:
        for tag in POM_VERSION_PROPERTIES:
            raw = [_resolve_pom(files.pom, v) for v in _xml_values(files.pom, tag)]
            found = _first_valid(raw)
            if found:
                return found, f"pom.xml <{tag}>"
    if files.gradle:
        for name in GRADLE_VERSION_NAMES:
            value = _gradle_assignment(files.gradle, name)
            found = _first_valid([_resolve_gradle(files.gradle, value)]) if value else None
            if found:
                return found, f"{files.gradle_name} {name}"
    return None


def _version_enum(files: BuildFiles) -> Optional[tuple[str, str]]:
    if not files.gradle:
        return None
    match = JAVA_VERSION_ENUM_RE.search(files.gradle)
    if match:
        return match.group(1).replace("_", "."), f"{files.gradle_name} JavaVersion enum"
    return None


def _toolchain(files: BuildFiles) -> Optional[tuple[str, str]]:
    if not files.gradle:
        return None
    for pattern in _TOOLCHAIN_RES:
        raw = [_resolve_gradle(files.gradle, v) for v in pattern.findall(files.gradle)]
        found = _first_valid(raw)
        if found:
            return found, f"{files.gradle_name} toolchain"
    return None


def _compatibility_property(files: BuildFiles) -> Optional[tuple[str, str]]:
    if files.pom:
        for tag in POM_COMPAT_PROPERTIES:
            raw = [_resolve_pom(files.pom, v) for v in _xml_values(files.pom, tag)]
            found = _first_valid(raw)
            if found:
                return found, f"pom.xml <{tag}>"
    if files.gradle:
        raw = [_resolve_gradle(files.gradle, v) for v in _COMPAT_RE.findall(files.gradle)]
        found = _first_valid(raw)
        if found:
            return found, f"{files.gradle_name} compatibility"
    return None


IN_FILE_STEPS: list[Step] = [
    _in_file_property,
    _version_enum,
    _toolchain,
    _compatibility_property,
]


def _run_in_file_steps(files: BuildFiles) -> Optional[tuple[str, str]]:
    for step in IN_FILE_STEPS:
        found = step(files)
        if found:
            return found
    return None


# ---------------------------------------------------------------------------
# Properties files and repository-wide fallback
# ---------------------------------------------------------------------------

def parse_properties(text: str) -> dict[str, str]:
    """Parse a Java .properties file (``key=value`` or ``key: value``)."""
    props: dict[str, str] = {}
    for line in text.splitlines():
        stripped = line.strip()
        if not stripped or stripped.startswith(("#", "!")):
            continue
        match = re.match(r"^([^=:\s]+)\s*[=:]\s*(.*)$", stripped)
        if match:
            props.setdefault(match.group(1), match.group(2).strip())
    return props


def _from_properties(path: Path) -> Optional[str]:
    text = read_text(path)
    if text is None:
        return None
    props = parse_properties(text)
    return _first_valid([props[key] for key in PROPERTIES_KEYS if key in props])


def _from_properties_upward(module_dir: Path, repo_root: Path) -> Optional[tuple[str, str]]:
    for directory in [module_dir, *ancestors(module_dir, repo_root, PROPERTIES_MAX_HOPS)]:
        found = _from_properties(directory / "gradle.properties")
        if found:
            rel = (directory / "gradle.properties").relative_to(repo_root).as_posix()
            return found, rel
    return None


def _from_repository(repo_root: Path) -> Optional[tuple[str, str]]:
    scanned = 0
    for path in walk_files(repo_root):
        if path.name not in REPO_SCAN_FILES:
            continue
        scanned += 1
        if scanned > MAX_SCAN_FILES:
            break
        rel = path.relative_to(repo_root).as_posix()
        if path.name == "gradle.properties":
            found = _from_properties(path)
            if found:
                return found, f"repository scan: {rel}"
            continue
        text = read_text(path)
        if not text:
            continue
        if path.name == "pom.xml":
            files = BuildFiles(pom=text)
        else:
            files = BuildFiles(gradle=text, gradle_name=path.name)
        found = _run_in_file_steps(files)
        if found:
            return found[0], f"repository scan: {rel}"
    return None


def load_build_files(module_dir: Path) -> BuildFiles:
    gradle_text, gradle_name = read_gradle_file(module_dir)
    return BuildFiles(
        pom=read_text(module_dir / "pom.xml"),
        gradle=gradle_text or None,
        gradle_name=gradle_name or "build.gradle",
    )


def resolve_java_version(module_dir: Path, repo_root: Path) -> Optional[tuple[str, str]]:
    """Resolve the module's Java version as (``java-<version>``, source)."""
    found = _run_in_file_steps(load_build_files(module_dir))
    if found is None:
        found = _from_properties_upward(module_dir, repo_root)
    if found is None:
        found = _from_repository(repo_root)
    if found is None:
        return None
    return f"java-{found[0]}", found[1]

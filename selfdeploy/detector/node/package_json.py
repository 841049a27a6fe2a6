"""package.json parser for framework, package manager and version detection.

Extracts build/test scripts, infers the framework from dependencies and
scripts, and resolves the Node runtime version from version-manager pins
or the engines field.
"""

import json
import logging
from collections.abc import Callable
from pathlib import Path
from typing import Optional

from selfdeploy.detector.fs import ancestors, first_version_token, is_version_token, read_text

logger = logging.getLogger(__name__)

# Hops above the package.json directory searched for a version pin file
VERSION_PIN_MAX_HOPS = 3

VERSION_PIN_FILES: tuple[str, ...] = (".nvmrc", ".node-version")

# Lock files checked in order; each later hit overrides the earlier one.
LOCK_FILES: list[tuple[str, str]] = [
    ("yarn.lock", "yarn"),
    ("pnpm-lock.yaml", "pnpm"),
]

DependencyPredicate = Callable[[set[str]], bool]


def _has_dep(*names: str) -> DependencyPredicate:
    return lambda deps: any(name in deps for name in names)


def _has_dep_prefix(*prefixes: str) -> DependencyPredicate:
    return lambda deps: any(dep.startswith(prefixes) for dep in deps)


def _either(*predicates: DependencyPredicate) -> DependencyPredicate:
    return lambda deps: any(predicate(deps) for predicate in predicates)


# Server frameworks first, then UI libraries. First match wins.
FRAMEWORK_INDICATORS: list[tuple[DependencyPredicate, str]] = [
    (_has_dep("@nestjs/core", "@nestjs/common"), "nestjs"),
    (_has_dep("next"), "nextjs"),
    (_has_dep("nuxt"), "nuxt"),
    (_has_dep("express"), "express"),
    (_has_dep("fastify"), "fastify"),
    (_has_dep("koa"), "koa"),
    (_has_dep("react", "react-dom"), "react"),
    (_either(_has_dep("vue"), _has_dep_prefix("@vue/")), "vue"),
    (_has_dep("@angular/core"), "angular"),
    (_has_dep("svelte"), "svelte"),
]

# (script name, command prefix, framework). Overrides the dependency guess.
SCRIPT_INDICATORS: list[tuple[str, str, str]] = [
    ("next", "next", "nextjs"),
    ("dev", "next", "nextjs"),
    ("start", "react-scripts", "react"),
]

# Test runners recognised from dependencies; jest is the default.
TEST_TOOL_INDICATORS: list[tuple[str, str]] = [
    ("vitest", "vitest"),
    ("mocha", "mocha"),
    ("jest", "jest"),
]

DEFAULT_FRAMEWORK = "node-generic"
DEFAULT_TEST_TOOL = "jest"


def load_package_json(path: Path) -> dict:
    """Parse package.json, returning an empty dict when it is malformed."""
    text = read_text(path)
    if text is None:
        return {}
    try:
        data = json.loads(text)
    except json.JSONDecodeError as exc:
        logger.warning("Failed to parse %s: %s", path, exc)
        return {}
    if not isinstance(data, dict):
        return {}
    return data


def collect_dependencies(data: dict) -> set[str]:
    """Collect dependency names from every dependency block."""
    deps: set[str] = set()
    for key in ("dependencies", "devDependencies", "peerDependencies"):
        block = data.get(key)
        if isinstance(block, dict):
            deps.update(name.lower() for name in block)
    return deps


def get_scripts(data: dict) -> dict[str, str]:
    scripts = data.get("scripts")
    if not isinstance(scripts, dict):
        return {}
    return {name: cmd for name, cmd in scripts.items() if isinstance(cmd, str)}


def detect_framework(deps: set[str], scripts: dict[str, str]) -> tuple[str, Optional[str]]:
    """Return (framework, script note).

    Dependencies give the first guess; a script that invokes a framework
    CLI overrides it. The note describes the overriding script, if any.
    """
    framework = DEFAULT_FRAMEWORK
    for predicate, tag in FRAMEWORK_INDICATORS:
        if predicate(deps):
            framework = tag
            break

    for script_name, prefix, tag in SCRIPT_INDICATORS:
        command = scripts.get(script_name, "").strip().lower()
        if command.startswith(prefix):
            return tag, f"Node: scripts[{script_name}] uses {prefix}"

    return framework, None


def detect_package_manager(pkg_dir: Path) -> str:
    """Detect the package manager from lock files next to package.json."""
    manager = "npm"
    for filename, pm in LOCK_FILES:
        if (pkg_dir / filename).is_file():
            manager = pm
    return manager


def detect_test_tool(deps: set[str]) -> str:
    for dep_name, tool in TEST_TOOL_INDICATORS:
        if dep_name in deps:
            return tool
    return DEFAULT_TEST_TOOL


def detect_version(pkg_dir: Path, repo_root: Path, data: dict) -> Optional[tuple[str, str]]:
    """Resolve the Node version as (``node-<version>``, source).

    A version-manager pin next to package.json (or in a bounded number of
    ancestors inside the repository) wins over the engines field.
    """
    for directory in [pkg_dir, *ancestors(pkg_dir, repo_root, VERSION_PIN_MAX_HOPS)]:
        for name in VERSION_PIN_FILES:
            text = read_text(directory / name)
            if text is None:
                continue
            raw = text.strip().split()[0] if text.strip() else ""
            raw = raw[1:] if raw.lower().startswith("v") else raw
            if is_version_token(raw):
                return f"node-{raw}", name
            logger.debug("Ignoring non-numeric %s pin: %r", name, raw)

    engines = data.get("engines")
    if isinstance(engines, dict) and isinstance(engines.get("node"), str):
        token = first_version_token(engines["node"])
        if token:
            return f"node-{token}", "package.json engines.node"

    return None

"""Gemfile parser for Ruby framework, test suite and version detection.

Parses Gemfile line by line, accepting both `gem 'name'` and `gem "name"`
quoting styles. Comment lines are ignored.
"""

import logging
import re
from pathlib import Path
from typing import Optional

from selfdeploy.detector.fs import first_version_token, is_version_token, read_text

logger = logging.getLogger(__name__)

# Gem name -> framework tag, matched exactly against declared gems.
# First match wins.
FRAMEWORK_INDICATORS: list[tuple[str, str]] = [
    ("rails", "rails"),
    ("grape", "grape"),
    ("sinatra", "sinatra"),
    ("hanami", "hanami"),
    ("roda", "roda"),
    ("padrino", "padrino"),
]

# (gem, test tool, test command). rspec-rails takes priority over plain rspec.
TEST_INDICATORS: list[tuple[str, str, str]] = [
    ("rspec-rails", "rspec", "bundle exec rspec"),
    ("rspec", "rspec", "bundle exec rspec"),
    ("minitest", "minitest", "bundle exec rails test"),
    ("cucumber", "cucumber", "bundle exec cucumber"),
]

# First argument of a `gem` declaration; version constraints and options follow it
_GEM_RE = re.compile(r"""^\s*gem\s+['"]([^'"]+)['"]""")
# Matches a ruby version directive: ruby '3.2.2' or ruby "3.2.2"
_RUBY_DIRECTIVE_RE = re.compile(r"""^\s*ruby\s+['"]([^'"]+)['"]""")
# Gemfile.lock: "RUBY VERSION\n   ruby 3.2.2p53"
_LOCK_RUBY_RE = re.compile(r"^RUBY VERSION\s*\n\s+ruby\s+(\S+)", re.MULTILINE)


def parse_gems(module_dir: Path) -> list[str]:
    """Return declared gem names, lowercased, in Gemfile order."""
    text = read_text(module_dir / "Gemfile")
    if text is None:
        return []

    gems: list[str] = []
    for line in text.splitlines():
        stripped = line.strip()
        if not stripped or stripped.startswith("#"):
            continue
        match = _GEM_RE.match(stripped)
        if match:
            gems.append(match.group(1).lower())
    return gems


def detect_framework(gems: list[str]) -> Optional[str]:
    """Return the first framework tag whose gem is declared."""
    gem_set = set(gems)
    for gem_name, framework in FRAMEWORK_INDICATORS:
        if gem_name in gem_set:
            return framework
    return None


def detect_test_suite(gems: list[str]) -> Optional[tuple[str, str]]:
    """Return (test tool, test command) for the first declared test gem."""
    gem_set = set(gems)
    for gem_name, tool, command in TEST_INDICATORS:
        if gem_name in gem_set:
            return tool, command
    return None


def detect_version(module_dir: Path) -> Optional[tuple[str, str]]:
    """Resolve the Ruby version as (``ruby-<version>``, source).

    Fallback chain: .ruby-version, Gemfile ``ruby`` directive, Gemfile.lock
    RUBY VERSION section. The first step yielding a numeric token wins.
    """
    pin = read_text(module_dir / ".ruby-version")
    if pin is not None:
        raw = pin.strip().splitlines()[0].strip() if pin.strip() else ""
        if raw.startswith("ruby-"):
            raw = raw[len("ruby-"):]
        if is_version_token(raw):
            return f"ruby-{raw}", ".ruby-version"
        logger.debug("Ignoring non-numeric .ruby-version: %r", raw)

    gemfile = read_text(module_dir / "Gemfile")
    if gemfile is not None:
        for line in gemfile.splitlines():
            match = _RUBY_DIRECTIVE_RE.match(line)
            if match:
                token = first_version_token(match.group(1))
                if token:
                    return f"ruby-{token}", "Gemfile ruby directive"
                break

    lock = read_text(module_dir / "Gemfile.lock")
    if lock is not None:
        match = _LOCK_RUBY_RE.search(lock)
        if match:
            token = first_version_token(match.group(1))
            if token:
                return f"ruby-{token}", "Gemfile.lock RUBY VERSION"

    return None

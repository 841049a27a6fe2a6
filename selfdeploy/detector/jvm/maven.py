"""pom.xml parser for JVM framework and packaging detection.

Uses xml.etree.ElementTree (stdlib) to parse Maven POM files. Handles POMs
with and without the Maven namespace; unparseable POMs fall back to a plain
text probe so a broken file never aborts detection.
"""

import logging
import re
import xml.etree.ElementTree as ET
from typing import Optional

from selfdeploy.detector.jvm.defaults import SPRING_BOOT_MARKER

logger = logging.getLogger(__name__)

# Maven XML namespace used by pom.xml files
_POM_NS = "http://maven.apache.org/POM/4.0.0"

_PACKAGING_RE = re.compile(r"<packaging>\s*([^<]+?)\s*</packaging>")
_MODULES_RE = re.compile(r"<modules>\s*<module>")


def _ns(tag: str) -> str:
    return f"{{{_POM_NS}}}{tag}"


def parse_pom(text: str) -> Optional[ET.Element]:
    try:
        return ET.fromstring(text)
    except ET.ParseError as exc:
        logger.warning("Failed to parse pom.xml: %s", exc)
        return None


def _find_text(root: ET.Element, tag: str) -> Optional[str]:
    value = root.findtext(_ns(tag))
    if value is None:
        value = root.findtext(tag)
    return value.strip() if value else None


def is_spring_boot(text: str) -> bool:
    return SPRING_BOOT_MARKER in text.lower()


def packaging(text: str) -> str:
    """Return the declared <packaging> of the project (``jar`` by default)."""
    root = parse_pom(text)
    if root is not None:
        return (_find_text(root, "packaging") or "jar").lower()
    match = _PACKAGING_RE.search(text)
    return match.group(1).lower() if match else "jar"


def declares_modules(text: str) -> bool:
    """True for an aggregator POM listing child <modules>."""
    root = parse_pom(text)
    if root is None:
        return bool(_MODULES_RE.search(text))
    modules = root.find(_ns("modules"))
    if modules is None:
        modules = root.find("modules")
    return modules is not None and len(modules) > 0

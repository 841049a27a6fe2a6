"""Report emitter: renders an AnalysisResult as the output JSON document."""

import json

from selfdeploy.aggregate import CATEGORIES
from selfdeploy.analyzer import AnalysisResult


def build_report(result: AnalysisResult, include_modules: bool = False) -> dict:
    """Return the output document as a plain dict.

    Category arrays hold values only, sorted by descending aggregate score.
    Per-module records are included on request.
    """
    document: dict = {
        "root_path": str(result.root),
        "has_dockerfile": result.has_container_file,
        "dockerfiles": [str(path) for path in result.container_files],
        "compose_files": [str(path) for path in result.compose_files],
    }
    for category in CATEGORIES:
        document[category] = result.aggregate[category].values()
    document["notes"] = list(result.aggregate.notes)
    if include_modules:
        document["modules"] = [report.to_dict() for report in result.aggregate.modules]
    return document


def render_json(document: dict) -> str:
    return json.dumps(document, indent=2, ensure_ascii=False)

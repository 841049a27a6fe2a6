"""Detector module for classifying the modules of a repository.

Public API:
    discover_modules(root) -> list[Module]
    detect_module(module, repo_root) -> ModuleReport
"""

from selfdeploy.detector.modules import discover_modules
from selfdeploy.detector.orchestrator import DETECTORS, detect_module
from selfdeploy.detector.types import (
    Candidate,
    CandidatePool,
    DetectionResult,
    Module,
    ModuleReport,
    Verdict,
)

__all__ = [
    "DETECTORS",
    "Candidate",
    "CandidatePool",
    "DetectionResult",
    "Module",
    "ModuleReport",
    "Verdict",
    "detect_module",
    "discover_modules",
]

"""Orchestration package: two-phase resolution of a custom resource."""

from stagehand.orchestration.collection import ComponentCollection
from stagehand.orchestration.results import ResolutionResult
from stagehand.orchestration.target_state import TargetState

__all__ = [
    "ComponentCollection",
    "ResolutionResult",
    "TargetState",
]

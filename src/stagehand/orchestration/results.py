"""Result types for a resolution pass."""

from collections import Counter
from dataclasses import dataclass, field
from typing import Any, Dict, List

from stagehand.components.base import Readiness


@dataclass
class ResolutionResult:
    """Desired state computed by one resolution pass."""

    custom_resource: str
    resources: List[Dict[str, Any]] = field(default_factory=list)
    readiness: Dict[str, Readiness] = field(default_factory=dict)
    skipped: List[str] = field(default_factory=list)
    generated_secrets: List[str] = field(default_factory=list)

    @property
    def total_resources(self) -> int:
        """Total number of resources in the desired state."""
        return len(self.resources)

    @property
    def all_ready(self) -> bool:
        """Whether every eligible component reports ready."""
        return all(
            state == Readiness.READY
            for state in self.readiness.values()
            if state != Readiness.UNKNOWN
        )

    def resources_by_kind(self) -> Dict[str, int]:
        """Count resources per Kubernetes kind, in first-seen order."""
        return dict(Counter(resource["kind"] for resource in self.resources))

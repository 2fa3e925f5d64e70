"""Component protocol and the helpers shared by all component variants."""

from __future__ import annotations

from enum import StrEnum
from typing import TYPE_CHECKING, Any, Dict, List, Protocol, runtime_checkable

from stagehand.core.milestones import is_eligible
from stagehand.naming import concat_optional
from stagehand.specs.merger import first_non_empty
from stagehand.specs.models import ComponentSpec, ImageSpec

if TYPE_CHECKING:
    from stagehand.orchestration.target_state import TargetState


class Readiness(StrEnum):
    """Tri-state readiness of a component."""

    UNKNOWN = "unknown"
    READY = "ready"
    NOT_READY = "not-ready"


@runtime_checkable
class Component(Protocol):
    """Protocol for units that turn an effective spec into cluster resources."""

    @property
    def spec(self) -> ComponentSpec:
        """Effective spec of this component."""
        ...

    @property
    def base_resource_name(self) -> str:
        """Name all resources of this component derive from (without prefix)."""
        ...

    def update_spec(self, overlay: ComponentSpec) -> "Component":
        """Return a component with the overlay merged into its spec."""
        ...

    def request_required_resources(self) -> None:
        """Declare needed credentials; must not create anything."""
        ...

    def is_build_resources(self) -> bool:
        """Whether the rollout stage permits this component to exist."""
        ...

    def build_resources(self) -> List[Dict[str, Any]]:
        """Produce the resource manifests for this component."""
        ...

    def is_ready(self) -> Readiness:
        """Readiness, or UNKNOWN if the component is not yet eligible."""
        ...


def component_name(spec: ComponentSpec, kind: str | None = None) -> str:
    """Build a component's base name from its spec name and kind.

    The optional kind overrides the spec's kind when non-empty.
    """
    return concat_optional(spec.spec_name, kind or spec.kind)


def gate_open(state: TargetState, spec: ComponentSpec) -> bool:
    """Check the spec's required milestone against the recorded one."""
    return is_eligible(state.current_milestone, spec.milestone)


def workload_readiness(state: TargetState, spec: ComponentSpec, kind: str, name: str) -> Readiness:
    """Readiness of the workload backing a component."""
    if not gate_open(state, spec):
        return Readiness.UNKNOWN
    return Readiness.READY if state.is_workload_ready(kind, name) else Readiness.NOT_READY


def resolve_image(
    spec_image: ImageSpec,
    default_image: ImageSpec | None,
    fallback: ImageSpec,
) -> ImageSpec:
    """Resolve each image field: instance first, then defaults, then fallback.

    Args:
        spec_image: Image from the component's effective spec
        default_image: Image defaults from the custom resource, or None for
            third-party images that must not pick up the product defaults
        fallback: Hard-coded values supplied by the component variant
    """
    default_image = default_image or ImageSpec()
    return ImageSpec(
        registry=first_non_empty(spec_image.registry, default_image.registry, fallback.registry),
        repository=first_non_empty(
            spec_image.repository, default_image.repository, fallback.repository
        ),
        tag=first_non_empty(spec_image.tag, default_image.tag, fallback.tag),
        pull_policy=first_non_empty(
            spec_image.pull_policy, default_image.pull_policy, fallback.pull_policy
        ),
    )


def image_reference(image: ImageSpec) -> str:
    """Fully qualified image name, e.g. docker.io/mariadb:10.7."""
    return f"{image.registry}/{image.repository}:{image.tag}"

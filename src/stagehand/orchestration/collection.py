"""Component instances of one target state, keyed by identity."""

from __future__ import annotations

from typing import TYPE_CHECKING, Dict, Iterator, List, Optional

import structlog

from stagehand.components.base import Component
from stagehand.components.registry import ComponentRegistry
from stagehand.core.errors import ConfigurationError
from stagehand.specs.merger import SpecMerger
from stagehand.specs.models import ComponentIdentity, ComponentSpec

if TYPE_CHECKING:
    from stagehand.orchestration.target_state import TargetState

logger = structlog.get_logger()


class ComponentCollection:
    """Creates components from specs and merge-updates existing ones."""

    def __init__(self, state: TargetState, registry: ComponentRegistry) -> None:
        self._state = state
        self._registry = registry
        self._components: Dict[ComponentIdentity, Component] = {}
        self._names: Dict[str, ComponentIdentity] = {}

    def add(self, spec: ComponentSpec) -> Component:
        """Add a component spec.

        A spec with a new identity creates a component from its effective
        spec (cluster defaults, type defaults, the spec). A spec whose
        identity already exists is merged into that component.

        Raises:
            ConfigurationError: If the type is unknown, or if the derived
                resource name collides with another component's
        """
        existing = self._components.get(spec.identity)
        if existing is not None:
            return self.update(spec.identity, spec)

        cr_spec = self._state.cr.spec
        effective = SpecMerger.effective(
            spec,
            cluster_defaults=cr_spec.defaults.as_overlay(spec.identity),
            type_defaults=cr_spec.type_defaults(spec.type),
        )
        component = self._registry.create(self._state, effective)

        name = self._state.resource_name_for(component)
        owner = self._names.get(name)
        if owner is not None:
            raise ConfigurationError(
                f"Components {'/'.join(owner)} and {'/'.join(spec.identity)} "
                f"both derive resource name {name}",
                details={"resource_name": name},
            )

        self._names[name] = spec.identity
        self._components[spec.identity] = component
        logger.debug("component_added", component=name, type=spec.type)
        return component

    def update(self, identity: ComponentIdentity, overlay: ComponentSpec) -> Component:
        """Merge an overlay into the component registered under `identity`.

        Raises:
            ConfigurationError: If no component has that identity
            IdentityMismatchError: If the overlay's identity differs
        """
        existing = self._components.get(identity)
        if existing is None:
            raise ConfigurationError(
                f"No component {'/'.join(identity)} to update",
                details={"identity": "/".join(identity)},
            )
        updated = existing.update_spec(overlay)
        self._components[identity] = updated
        return updated

    def get(self, identity: ComponentIdentity) -> Optional[Component]:
        return self._components.get(identity)

    def list(self) -> List[Component]:
        return list(self._components.values())

    def __iter__(self) -> Iterator[Component]:
        return iter(list(self._components.values()))

    def __len__(self) -> int:
        return len(self._components)

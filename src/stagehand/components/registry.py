"""Component type registry."""

from __future__ import annotations

from typing import TYPE_CHECKING, Callable, Dict, List, Optional

from stagehand.components.base import Component
from stagehand.core.errors import ConfigurationError
from stagehand.specs.models import ComponentSpec

if TYPE_CHECKING:
    from stagehand.orchestration.target_state import TargetState

ComponentFactory = Callable[["TargetState", ComponentSpec], Component]


class ComponentRegistry:
    """In-memory registry mapping component types to factories."""

    def __init__(self) -> None:
        self._factories: Dict[str, ComponentFactory] = {}

    def register(self, type_: str, factory: ComponentFactory) -> None:
        """Register a factory for a component type."""
        self._factories[type_] = factory

    def get(self, type_: str) -> Optional[ComponentFactory]:
        """Get the factory for a component type."""
        return self._factories.get(type_)

    def list(self) -> List[str]:
        """List all registered component types."""
        return list(self._factories.keys())

    def create(self, state: TargetState, spec: ComponentSpec) -> Component:
        """Instantiate a component for an effective spec.

        Raises:
            ConfigurationError: If the component type is not registered
        """
        factory = self.get(spec.type)
        if factory is None:
            raise ConfigurationError(
                f"Unknown component type: {spec.type}",
                details={"known_types": ", ".join(sorted(self._factories))},
            )
        return factory(state, spec)


def register_default_components(registry: ComponentRegistry) -> ComponentRegistry:
    """Register the built-in component variants."""
    from stagehand.components.app_server import AppServerComponent
    from stagehand.components.cache import CacheComponent
    from stagehand.components.mysql import MySQLComponent

    registry.register("mysql", MySQLComponent)
    registry.register("app-server", AppServerComponent)
    registry.register("cache", CacheComponent)
    return registry


def default_registry() -> ComponentRegistry:
    return register_default_components(ComponentRegistry())

"""
Target state of one custom resource.

A TargetState is built at the start of a reconciliation pass from the
latest custom resource snapshot and discarded at its end. It owns the
component collection and the credential table of that pass, and provides
the naming, labeling and readiness services components build on.
"""

from __future__ import annotations

from typing import Any, Dict, List, Optional

from stagehand.components.base import Component
from stagehand.components.builders import object_metadata
from stagehand.components.registry import ComponentRegistry, default_registry
from stagehand.config.settings import Settings, get_settings
from stagehand.core.milestones import Milestone
from stagehand.credentials.table import ClientSecretTable
from stagehand.logging import bind_pass
from stagehand.naming import concat_optional
from stagehand.orchestration.collection import ComponentCollection
from stagehand.orchestration.results import ResolutionResult
from stagehand.specs.custom_resource import ComponentDefaults, CustomResource
from stagehand.specs.models import ComponentSpec
from stagehand.stores import SecretStore, WorkloadStatusStore


class TargetState:
    """Resolves a custom resource into its desired-state resource list."""

    def __init__(
        self,
        cr: CustomResource,
        secret_store: SecretStore,
        status_store: WorkloadStatusStore,
        registry: Optional[ComponentRegistry] = None,
        settings: Optional[Settings] = None,
    ) -> None:
        self.cr = cr
        self.settings = settings or get_settings()
        self._status_store = status_store
        self._log = bind_pass(cr.namespace, cr.name)
        self.secrets = ClientSecretTable(
            secret_store,
            name_prefix=cr.spec.defaults.name_prefix,
            labels=self.selector_labels(),
            password_length=self.settings.password_length,
            persist=self.settings.persist_generated_secrets,
        )
        self.components = ComponentCollection(self, registry or default_registry())
        for spec in self._component_specs():
            self.components.add(spec)

    def _component_specs(self) -> List[ComponentSpec]:
        specs = list(self.cr.spec.components)
        if self.cr.spec.with_.databases and not any(s.type == "mysql" for s in specs):
            specs.insert(0, ComponentSpec(type="mysql"))
        return specs

    @property
    def defaults(self) -> ComponentDefaults:
        return self.cr.spec.defaults

    @property
    def current_milestone(self) -> Optional[Milestone]:
        return self.cr.status.milestone

    @property
    def namespace(self) -> str:
        return self.cr.namespace

    def resource_name_for(self, component: Component, *extra: str) -> str:
        """Name for a resource of a component: prefix, base name, then extra parts."""
        return concat_optional(self.defaults.name_prefix, component.base_resource_name, *extra)

    def service_name_for(self, component: Component) -> str:
        return self.resource_name_for(component)

    def selector_labels(self, component: Optional[Component] = None, *extra: str) -> Dict[str, str]:
        """Labels binding the resources of this custom resource (and component) together."""
        labels = {
            "app.kubernetes.io/managed-by": self.settings.managed_by,
            "app.kubernetes.io/instance": self.cr.name,
        }
        if component is not None:
            prefix = self.settings.label_prefix
            labels[f"{prefix}/type"] = component.spec.type
            labels[f"{prefix}/name"] = self.resource_name_for(component, *extra)
        return labels

    def resource_metadata(self, component: Component, name: str) -> Dict[str, Any]:
        return object_metadata(name, self.selector_labels(component), namespace=self.namespace)

    def pod_annotations(self, component: Component) -> Dict[str, str]:
        """Cluster default annotations overridden key by key by the component's."""
        return {**self.defaults.annotations, **component.spec.annotations}

    def is_workload_ready(self, kind: str, name: str) -> bool:
        return self._status_store.is_workload_ready(kind, name)

    def resolve(self) -> ResolutionResult:
        """Run the pass: declare credentials, resolve them, then build resources.

        All credential requests are resolved before any component builds,
        since a component's resources may depend on another's credentials.

        Returns:
            The desired-state resource list with per-component readiness

        Raises:
            ConfigurationError: For invalid configuration (pass aborted)
            StoreError: If a store lookup fails (pass aborted)
        """
        result = ResolutionResult(custom_resource=self.cr.name)
        components = self.components.list()

        for component in components:
            component.request_required_resources()
        self.secrets.resolve()

        for component in components:
            name = self.resource_name_for(component)
            if not component.is_build_resources():
                result.skipped.append(name)
                self._log.info(
                    "component_skipped",
                    component=name,
                    required=component.spec.milestone,
                    current=self.current_milestone,
                )
                continue
            result.resources.extend(component.build_resources())

        result.resources.extend(self.secrets.manifests())
        result.generated_secrets = self.secrets.generated
        result.readiness = {
            self.resource_name_for(component): component.is_ready() for component in components
        }

        self._log.info(
            "target_state_resolved",
            resources=result.total_resources,
            skipped=len(result.skipped),
            generated_secrets=len(result.generated_secrets),
        )
        return result

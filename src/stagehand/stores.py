"""
Cluster state stores queried during a resolution pass.

Two concerns are covered:
- SecretStore: read stored secrets by name, create new ones (create-if-absent)
- WorkloadStatusStore: readiness of StatefulSets and Deployments by name

InMemoryClusterStore serves tests and offline rendering from dict
snapshots. KubernetesClusterStore talks to the API server through the
official kubernetes client.
"""

from __future__ import annotations

import base64
import os
from dataclasses import dataclass, field
from typing import Any, Protocol, runtime_checkable

import structlog

from stagehand.core.errors import SecretExistsError, StoreError

logger = structlog.get_logger()


@runtime_checkable
class SecretStore(Protocol):
    """Lookup and creation of stored secrets."""

    def read_secret(self, name: str) -> dict[str, str] | None:
        """Return the secret's string data, or None if it does not exist."""
        ...

    def create_secret(self, name: str, manifest: dict[str, Any]) -> None:
        """Create a secret; raise SecretExistsError if it already exists."""
        ...


@runtime_checkable
class WorkloadStatusStore(Protocol):
    """Readiness of workloads by kind and name."""

    def is_workload_ready(self, kind: str, name: str) -> bool:
        ...


@dataclass
class InMemoryClusterStore:
    """Secret and workload-status store backed by plain dicts."""

    secrets: dict[str, dict[str, str]] = field(default_factory=dict)
    ready_workloads: set[str] = field(default_factory=set)

    def read_secret(self, name: str) -> dict[str, str] | None:
        data = self.secrets.get(name)
        return dict(data) if data is not None else None

    def create_secret(self, name: str, manifest: dict[str, Any]) -> None:
        if name in self.secrets:
            raise SecretExistsError(f"Secret {name} already exists", details={"secret": name})
        self.secrets[name] = dict(manifest.get("stringData", {}))

    def is_workload_ready(self, kind: str, name: str) -> bool:
        return name in self.ready_workloads or f"{kind}/{name}" in self.ready_workloads


# Lazy import kubernetes to allow optional installation
_kubernetes_available: bool | None = None


def _check_kubernetes_available() -> bool:
    """Check if kubernetes package is installed."""
    global _kubernetes_available
    if _kubernetes_available is None:
        try:
            import kubernetes  # noqa: F401

            _kubernetes_available = True
        except ImportError:
            _kubernetes_available = False
    return _kubernetes_available


@dataclass
class KubernetesClusterStore:
    """
    Secret and workload-status store for one namespace of a live cluster.

    Configuration:
        namespace: Namespace holding the custom resource's objects
        kubeconfig: Path to kubeconfig file (optional)
        context: Kubeconfig context to use (optional)

    Environment variables:
        KUBECONFIG: Standard kubeconfig path
        STAGEHAND_K8S_CONTEXT: Kubeconfig context
    """

    namespace: str
    kubeconfig: str | None = field(default_factory=lambda: os.environ.get("KUBECONFIG"))
    context: str | None = field(default_factory=lambda: os.environ.get("STAGEHAND_K8S_CONTEXT"))

    # Internal state
    _api_client: Any = field(default=None, repr=False, compare=False)
    _initialized: bool = field(default=False, repr=False, compare=False)

    def _ensure_initialized(self) -> None:
        """Initialize Kubernetes client if not already done."""
        if self._initialized:
            return

        if not _check_kubernetes_available():
            raise StoreError(
                "kubernetes package not installed. "
                "Install with: pip install stagehand[kubernetes]"
            )

        from kubernetes import client, config

        # Try in-cluster config first, then kubeconfig
        try:
            config.load_incluster_config()
        except config.ConfigException:
            try:
                config.load_kube_config(
                    config_file=self.kubeconfig,
                    context=self.context,
                )
            except config.ConfigException as e:
                raise StoreError(f"Failed to load Kubernetes config: {e}") from e

        self._api_client = client.ApiClient()
        self._initialized = True

    def _get_core_api(self) -> Any:
        """Get CoreV1Api client."""
        self._ensure_initialized()
        from kubernetes import client

        return client.CoreV1Api(self._api_client)

    def _get_apps_api(self) -> Any:
        """Get AppsV1Api client."""
        self._ensure_initialized()
        from kubernetes import client

        return client.AppsV1Api(self._api_client)

    def read_secret(self, name: str) -> dict[str, str] | None:
        from kubernetes.client.exceptions import ApiException

        try:
            secret = self._get_core_api().read_namespaced_secret(name, self.namespace)
        except ApiException as e:
            if e.status == 404:
                return None
            raise StoreError(
                f"Failed to read secret {name}: {e.reason}",
                details={"secret": name, "status": e.status},
            ) from e

        try:
            return {
                key: base64.b64decode(value).decode("utf-8")
                for key, value in (secret.data or {}).items()
            }
        except ValueError as e:
            raise StoreError(
                f"Secret {name} holds data that is not UTF-8 text: {e}",
                details={"secret": name},
            ) from e

    def create_secret(self, name: str, manifest: dict[str, Any]) -> None:
        from kubernetes.client.exceptions import ApiException

        body = dict(manifest)
        body["metadata"] = {**manifest.get("metadata", {}), "namespace": self.namespace}
        try:
            self._get_core_api().create_namespaced_secret(self.namespace, body)
        except ApiException as e:
            if e.status == 409:
                raise SecretExistsError(
                    f"Secret {name} already exists", details={"secret": name}
                ) from e
            raise StoreError(
                f"Failed to create secret {name}: {e.reason}",
                details={"secret": name, "status": e.status},
            ) from e
        logger.info("secret_created", secret=name, namespace=self.namespace)

    def is_workload_ready(self, kind: str, name: str) -> bool:
        from kubernetes.client.exceptions import ApiException

        apps = self._get_apps_api()
        readers = {
            "StatefulSet": apps.read_namespaced_stateful_set_status,
            "Deployment": apps.read_namespaced_deployment_status,
        }
        reader = readers.get(kind)
        if reader is None:
            raise StoreError(f"Unsupported workload kind: {kind}", details={"workload": name})

        try:
            workload = reader(name, self.namespace)
        except ApiException as e:
            if e.status == 404:
                return False
            raise StoreError(
                f"Failed to read {kind} {name}: {e.reason}",
                details={"workload": name, "status": e.status},
            ) from e

        replicas = workload.spec.replicas if workload.spec and workload.spec.replicas is not None else 1
        ready = (workload.status.ready_replicas if workload.status else None) or 0
        return replicas > 0 and ready >= replicas

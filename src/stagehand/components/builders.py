"""
Manifest builders shared by component variants.

Plain functions returning Kubernetes objects as dicts, ready for the
applier. Variants compose these; none of them hold state.
"""

from __future__ import annotations

from typing import Any, Dict, List, Optional

from stagehand.specs.models import EnvVar, ResourceMgmt

Manifest = Dict[str, Any]


def object_metadata(
    name: str,
    labels: Dict[str, str],
    namespace: Optional[str] = None,
    annotations: Optional[Dict[str, str]] = None,
) -> Manifest:
    metadata: Manifest = {"name": name, "labels": dict(labels)}
    if namespace:
        metadata["namespace"] = namespace
    if annotations:
        metadata["annotations"] = dict(annotations)
    return metadata


def build_pvc(metadata: Manifest, size: str, storage_class: str = "") -> Manifest:
    """ReadWriteOnce claim; an empty storage class selects the cluster default."""
    spec: Manifest = {
        "accessModes": ["ReadWriteOnce"],
        "resources": {"requests": {"storage": size}},
    }
    if storage_class:
        spec["storageClassName"] = storage_class
    return {
        "apiVersion": "v1",
        "kind": "PersistentVolumeClaim",
        "metadata": metadata,
        "spec": spec,
    }


def exec_probe(
    command: List[str],
    failure_threshold: int = 3,
    initial_delay_seconds: int = 0,
    period_seconds: int = 10,
    success_threshold: int = 1,
    timeout_seconds: int = 1,
) -> Manifest:
    return {
        "exec": {"command": list(command)},
        "failureThreshold": failure_threshold,
        "initialDelaySeconds": initial_delay_seconds,
        "periodSeconds": period_seconds,
        "successThreshold": success_threshold,
        "timeoutSeconds": timeout_seconds,
    }


def http_probe(
    path: str,
    port: str | int,
    failure_threshold: int = 3,
    initial_delay_seconds: int = 0,
    period_seconds: int = 10,
    timeout_seconds: int = 1,
) -> Manifest:
    return {
        "httpGet": {"path": path, "port": port},
        "failureThreshold": failure_threshold,
        "initialDelaySeconds": initial_delay_seconds,
        "periodSeconds": period_seconds,
        "timeoutSeconds": timeout_seconds,
    }


def tcp_probe(port: str | int, failure_threshold: int = 3, period_seconds: int = 10) -> Manifest:
    return {
        "tcpSocket": {"port": port},
        "failureThreshold": failure_threshold,
        "periodSeconds": period_seconds,
    }


def env_from_secret(name: str, secret_name: str, key: str) -> EnvVar:
    return EnvVar(name=name, value_from={"secretKeyRef": {"name": secret_name, "key": key}})


def container_env(intrinsic: List[EnvVar], overrides: List[EnvVar]) -> List[Manifest]:
    """Intrinsic variables followed by the spec's overrides.

    Duplicate names are kept; the container runtime lets the last one win.
    """
    return [var.to_manifest() for var in [*intrinsic, *overrides]]


def container_port(name: str, port: int) -> Manifest:
    return {"name": name, "containerPort": port}


def service_port(name: str, port: int, target_port: str | int) -> Manifest:
    return {"name": name, "port": port, "targetPort": target_port}


def default_volumes() -> List[Manifest]:
    """Writable scratch space for containers with a read-only root filesystem."""
    return [
        {"name": "tmp", "emptyDir": {}},
        {"name": "var-tmp", "emptyDir": {}},
    ]


def default_volume_mounts() -> List[Manifest]:
    return [
        {"name": "tmp", "mountPath": "/tmp"},
        {"name": "var-tmp", "mountPath": "/var/tmp"},
    ]


def container_security_context(read_only_root: bool = True) -> Manifest:
    return {"readOnlyRootFilesystem": read_only_root}


def pod_security_context(user_id: int) -> Manifest:
    return {"runAsUser": user_id, "runAsGroup": user_id, "fsGroup": user_id}


def build_container(
    name: str,
    image: str,
    pull_policy: str,
    *,
    args: Optional[List[str]] = None,
    env: Optional[List[Manifest]] = None,
    ports: Optional[List[Manifest]] = None,
    volume_mounts: Optional[List[Manifest]] = None,
    resources: Optional[ResourceMgmt] = None,
    startup_probe: Optional[Manifest] = None,
    liveness_probe: Optional[Manifest] = None,
    readiness_probe: Optional[Manifest] = None,
    security_context: Optional[Manifest] = None,
) -> Manifest:
    container: Manifest = {
        "name": name,
        "image": image,
        "imagePullPolicy": pull_policy,
        "args": list(args or []),
        "env": list(env or []),
        "ports": list(ports or []),
        "volumeMounts": list(volume_mounts or []),
        "resources": resources.to_manifest() if resources else {},
        "securityContext": security_context or container_security_context(),
    }
    for key, probe in (
        ("startupProbe", startup_probe),
        ("livenessProbe", liveness_probe),
        ("readinessProbe", readiness_probe),
    ):
        if probe is not None:
            container[key] = probe
    return container


def wait_for_tcp_container(service: str, host: str, port: int, image: str) -> Manifest:
    """Init container that blocks until host:port accepts connections."""
    return {
        "name": f"wait-for-{service}",
        "image": image,
        "command": [
            "sh",
            "-c",
            f"until nc -z {host} {port}; do echo waiting for {service}; sleep 10; done;",
        ],
    }


def build_pod_template(
    labels: Dict[str, str],
    containers: List[Manifest],
    *,
    init_containers: Optional[List[Manifest]] = None,
    volumes: Optional[List[Manifest]] = None,
    user_id: int = 1000,
    termination_grace_period_seconds: int = 5,
    annotations: Optional[Dict[str, str]] = None,
) -> Manifest:
    metadata: Manifest = {"labels": dict(labels)}
    if annotations:
        metadata["annotations"] = dict(annotations)
    return {
        "metadata": metadata,
        "spec": {
            "containers": containers,
            "initContainers": list(init_containers or []),
            "securityContext": pod_security_context(user_id),
            "terminationGracePeriodSeconds": termination_grace_period_seconds,
            "volumes": list(volumes or []),
        },
    }


def build_stateful_set(
    metadata: Manifest,
    service_name: str,
    selector_labels: Dict[str, str],
    pod_template: Manifest,
) -> Manifest:
    return {
        "apiVersion": "apps/v1",
        "kind": "StatefulSet",
        "metadata": metadata,
        "spec": {
            "serviceName": service_name,
            "replicas": 1,
            "selector": {"matchLabels": dict(selector_labels)},
            "template": pod_template,
        },
    }


def build_deployment(
    metadata: Manifest,
    replicas: int,
    selector_labels: Dict[str, str],
    pod_template: Manifest,
) -> Manifest:
    return {
        "apiVersion": "apps/v1",
        "kind": "Deployment",
        "metadata": metadata,
        "spec": {
            "replicas": replicas,
            "selector": {"matchLabels": dict(selector_labels)},
            "template": pod_template,
        },
    }


def build_service(
    metadata: Manifest,
    selector_labels: Dict[str, str],
    ports: List[Manifest],
) -> Manifest:
    return {
        "apiVersion": "v1",
        "kind": "Service",
        "metadata": metadata,
        "spec": {
            "type": "ClusterIP",
            "selector": dict(selector_labels),
            "ports": ports,
        },
    }


def build_opaque_secret(metadata: Manifest, string_data: Dict[str, str]) -> Manifest:
    return {
        "apiVersion": "v1",
        "kind": "Secret",
        "metadata": metadata,
        "type": "Opaque",
        "stringData": dict(string_data),
    }

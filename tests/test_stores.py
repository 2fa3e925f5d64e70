"""Tests for the secret and workload-status stores."""

import base64
from unittest.mock import MagicMock, patch

import pytest
from kubernetes.client.exceptions import ApiException
from stagehand.core.errors import SecretExistsError, StoreError
from stagehand.stores import (
    InMemoryClusterStore,
    KubernetesClusterStore,
    SecretStore,
    WorkloadStatusStore,
)


class TestInMemoryClusterStore:
    def test_satisfies_protocols(self):
        store = InMemoryClusterStore()
        assert isinstance(store, SecretStore)
        assert isinstance(store, WorkloadStatusStore)

    def test_read_missing(self):
        assert InMemoryClusterStore().read_secret("nope") is None

    def test_read_returns_copy(self):
        store = InMemoryClusterStore(secrets={"s": {"password": "pw"}})
        data = store.read_secret("s")
        data["password"] = "changed"
        assert store.read_secret("s") == {"password": "pw"}

    def test_create(self):
        store = InMemoryClusterStore()
        store.create_secret("s", {"kind": "Secret", "stringData": {"password": "pw"}})
        assert store.secrets == {"s": {"password": "pw"}}

    def test_create_existing(self):
        store = InMemoryClusterStore(secrets={"s": {}})
        with pytest.raises(SecretExistsError):
            store.create_secret("s", {"stringData": {}})

    def test_workload_ready_by_name_or_kind(self):
        store = InMemoryClusterStore(ready_workloads={"mysql", "Deployment/cache"})
        assert store.is_workload_ready("StatefulSet", "mysql")
        assert store.is_workload_ready("Deployment", "cache")
        assert not store.is_workload_ready("StatefulSet", "cache")


class TestKubernetesClusterStoreInit:
    def test_default_config_from_env(self, monkeypatch):
        monkeypatch.setenv("KUBECONFIG", "/tmp/kubeconfig")
        monkeypatch.setenv("STAGEHAND_K8S_CONTEXT", "staging")
        store = KubernetesClusterStore(namespace="content")
        assert store.kubeconfig == "/tmp/kubeconfig"
        assert store.context == "staging"

    def test_missing_package(self):
        store = KubernetesClusterStore(namespace="content")
        with patch("stagehand.stores._check_kubernetes_available", return_value=False):
            with pytest.raises(StoreError, match="not installed"):
                store._ensure_initialized()

    def test_falls_back_to_kubeconfig(self):
        from kubernetes import config

        store = KubernetesClusterStore(namespace="content", kubeconfig="/k", context="c")
        with (
            patch.object(config, "load_incluster_config", side_effect=config.ConfigException()),
            patch.object(config, "load_kube_config") as load_kube_config,
        ):
            store._ensure_initialized()
        load_kube_config.assert_called_once_with(config_file="/k", context="c")
        assert store._initialized

    def test_no_config(self):
        from kubernetes import config

        store = KubernetesClusterStore(namespace="content")
        with (
            patch.object(config, "load_incluster_config", side_effect=config.ConfigException()),
            patch.object(config, "load_kube_config", side_effect=config.ConfigException("none")),
        ):
            with pytest.raises(StoreError, match="Failed to load Kubernetes config"):
                store._ensure_initialized()


class TestKubernetesSecrets:
    """Tests for secret lookup and creation through the core API."""

    @pytest.fixture
    def core_api(self):
        api = MagicMock()
        with patch.object(KubernetesClusterStore, "_get_core_api", return_value=api):
            yield api

    def test_read_decodes_data(self, core_api):
        core_api.read_namespaced_secret.return_value = MagicMock(
            data={"password": base64.b64encode(b"s3cret").decode()}
        )
        store = KubernetesClusterStore(namespace="content")

        assert store.read_secret("mysql-root") == {"password": "s3cret"}
        core_api.read_namespaced_secret.assert_called_once_with("mysql-root", "content")

    def test_read_empty_secret(self, core_api):
        core_api.read_namespaced_secret.return_value = MagicMock(data=None)
        assert KubernetesClusterStore(namespace="content").read_secret("s") == {}

    def test_read_binary_data(self, core_api):
        core_api.read_namespaced_secret.return_value = MagicMock(
            data={"keystore": base64.b64encode(b"\xff\xfe\x00").decode()}
        )
        with pytest.raises(StoreError) as exc_info:
            KubernetesClusterStore(namespace="content").read_secret("tls")
        assert exc_info.value.details == {"secret": "tls"}

    def test_read_not_found(self, core_api):
        core_api.read_namespaced_secret.side_effect = ApiException(status=404, reason="Not Found")
        assert KubernetesClusterStore(namespace="content").read_secret("s") is None

    def test_read_failure(self, core_api):
        core_api.read_namespaced_secret.side_effect = ApiException(status=500, reason="Boom")
        with pytest.raises(StoreError) as exc_info:
            KubernetesClusterStore(namespace="content").read_secret("s")
        assert exc_info.value.details == {"secret": "s", "status": 500}

    def test_create_sets_namespace(self, core_api):
        manifest = {"kind": "Secret", "metadata": {"name": "s"}, "stringData": {"a": "b"}}
        KubernetesClusterStore(namespace="content").create_secret("s", manifest)

        namespace, body = core_api.create_namespaced_secret.call_args.args
        assert namespace == "content"
        assert body["metadata"] == {"name": "s", "namespace": "content"}
        assert "namespace" not in manifest["metadata"]

    def test_create_conflict(self, core_api):
        core_api.create_namespaced_secret.side_effect = ApiException(status=409, reason="Conflict")
        with pytest.raises(SecretExistsError):
            KubernetesClusterStore(namespace="content").create_secret("s", {"metadata": {}})

    def test_create_failure(self, core_api):
        core_api.create_namespaced_secret.side_effect = ApiException(status=403, reason="Forbidden")
        with pytest.raises(StoreError) as exc_info:
            KubernetesClusterStore(namespace="content").create_secret("s", {"metadata": {}})
        assert not isinstance(exc_info.value, SecretExistsError)


class TestKubernetesWorkloads:
    """Tests for workload readiness through the apps API."""

    @pytest.fixture
    def apps_api(self):
        api = MagicMock()
        with patch.object(KubernetesClusterStore, "_get_apps_api", return_value=api):
            yield api

    @staticmethod
    def workload(replicas, ready):
        workload = MagicMock()
        workload.spec.replicas = replicas
        workload.status.ready_replicas = ready
        return workload

    def test_stateful_set_ready(self, apps_api):
        apps_api.read_namespaced_stateful_set_status.return_value = self.workload(1, 1)
        assert KubernetesClusterStore(namespace="content").is_workload_ready("StatefulSet", "mysql")
        apps_api.read_namespaced_stateful_set_status.assert_called_once_with("mysql", "content")

    def test_deployment_partially_ready(self, apps_api):
        apps_api.read_namespaced_deployment_status.return_value = self.workload(3, 2)
        assert not KubernetesClusterStore(namespace="content").is_workload_ready("Deployment", "app")

    def test_no_ready_replicas(self, apps_api):
        apps_api.read_namespaced_deployment_status.return_value = self.workload(1, None)
        assert not KubernetesClusterStore(namespace="content").is_workload_ready("Deployment", "app")

    def test_scaled_to_zero(self, apps_api):
        apps_api.read_namespaced_deployment_status.return_value = self.workload(0, 0)
        assert not KubernetesClusterStore(namespace="content").is_workload_ready("Deployment", "app")

    def test_not_found(self, apps_api):
        apps_api.read_namespaced_deployment_status.side_effect = ApiException(status=404)
        assert not KubernetesClusterStore(namespace="content").is_workload_ready("Deployment", "app")

    def test_api_failure(self, apps_api):
        apps_api.read_namespaced_deployment_status.side_effect = ApiException(status=500)
        with pytest.raises(StoreError):
            KubernetesClusterStore(namespace="content").is_workload_ready("Deployment", "app")

    def test_unsupported_kind(self, apps_api):
        with pytest.raises(StoreError, match="Unsupported workload kind"):
            KubernetesClusterStore(namespace="content").is_workload_ready("DaemonSet", "agent")

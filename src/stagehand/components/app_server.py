"""
Stateless application server tier.

A Deployment with a Service in front of it. The server logs in to the
relational store with its own db-login credential, provisioned by the
MySQL component.
"""

from __future__ import annotations

from dataclasses import dataclass, replace
from typing import TYPE_CHECKING, Any, Dict, List

from stagehand.components import builders
from stagehand.components.base import (
    Readiness,
    component_name,
    gate_open,
    image_reference,
    resolve_image,
    workload_readiness,
)
from stagehand.components.mysql import JDBC_CLIENT_SECRET_REF_KIND, MYSQL_PORT
from stagehand.core.errors import ConfigurationError
from stagehand.credentials.models import (
    DEFAULT_DRIVER_KEY,
    DEFAULT_HOSTNAME_KEY,
    DEFAULT_PASSWORD_KEY,
    DEFAULT_PORT_KEY,
    DEFAULT_SCHEMA_KEY,
    DEFAULT_URL_KEY,
    DEFAULT_USERNAME_KEY,
    ClientSecretRef,
)
from stagehand.naming import concat_optional
from stagehand.specs.merger import SpecMerger, first_non_empty
from stagehand.specs.models import ComponentSpec, ImageSpec

if TYPE_CHECKING:
    from stagehand.orchestration.target_state import TargetState

HTTP_PORT = 8080
HEALTH_PATH = "/actuator/health"
JDBC_DRIVER = "org.mariadb.jdbc.Driver"


@dataclass(frozen=True)
class AppServerComponent:
    """Application server with a JDBC login of its own."""

    state: TargetState
    spec: ComponentSpec

    @property
    def base_resource_name(self) -> str:
        return component_name(self.spec)

    @property
    def schema(self) -> str:
        """JDBC schema name: schemas['jdbc'] or the component name made SQL-safe."""
        return self.spec.schemas.get("jdbc") or component_name(self.spec).replace("-", "_")

    @property
    def database_host(self) -> str:
        return first_non_empty(
            self.spec.extra.get("database-host"),
            concat_optional(self.state.defaults.name_prefix, "mysql"),
        )

    @property
    def replicas(self) -> int:
        """Replica count from extra["replicas"], default 1.

        Raises:
            ConfigurationError: If the value is not a non-negative integer
        """
        value = self.spec.extra.get("replicas", "1")
        try:
            replicas = int(value)
        except ValueError:
            replicas = -1
        if replicas < 0:
            raise ConfigurationError(
                f"Invalid replica count for {self.base_resource_name}: {value}",
                details={"component": self.base_resource_name, "replicas": value},
            )
        return replicas

    def update_spec(self, overlay: ComponentSpec) -> AppServerComponent:
        return replace(self, spec=SpecMerger.merge(self.spec, overlay))

    def is_build_resources(self) -> bool:
        return gate_open(self.state, self.spec)

    def is_ready(self) -> Readiness:
        return workload_readiness(
            self.state, self.spec, "Deployment", self.state.resource_name_for(self)
        )

    def request_required_resources(self) -> None:
        self.state.secrets.request(JDBC_CLIENT_SECRET_REF_KIND, self.schema, self._jdbc_secret)

    def _jdbc_secret(self, ref: ClientSecretRef, password: str) -> Dict[str, str]:
        host = self.database_host
        return {
            DEFAULT_USERNAME_KEY: self.schema,
            DEFAULT_PASSWORD_KEY: password,
            DEFAULT_SCHEMA_KEY: self.schema,
            DEFAULT_HOSTNAME_KEY: host,
            DEFAULT_PORT_KEY: str(MYSQL_PORT),
            DEFAULT_URL_KEY: f"jdbc:mariadb://{host}:{MYSQL_PORT}/{self.schema}",
            DEFAULT_DRIVER_KEY: JDBC_DRIVER,
        }

    def build_resources(self) -> List[Dict[str, Any]]:
        name = self.state.resource_name_for(self)
        return [
            self._build_deployment(name),
            builders.build_service(
                self.state.resource_metadata(self, self.state.service_name_for(self)),
                self.state.selector_labels(self),
                [builders.service_port("http", HTTP_PORT, "http")],
            ),
        ]

    def _build_deployment(self, name: str) -> Dict[str, Any]:
        fallback = ImageSpec(
            registry=self.state.settings.default_registry,
            repository=self.spec.type,
            tag=self.state.settings.default_tag,
            pull_policy=self.state.settings.default_pull_policy,
        )
        image = resolve_image(self.spec.image, self.state.defaults.image, fallback)
        login = self.state.secrets.get(JDBC_CLIENT_SECRET_REF_KIND, self.schema).ref
        intrinsic_env = [
            builders.env_from_secret("DB_URL", login.secret_name, DEFAULT_URL_KEY),
            builders.env_from_secret("DB_USERNAME", login.secret_name, login.username_key),
            builders.env_from_secret("DB_PASSWORD", login.secret_name, login.password_key),
        ]
        container = builders.build_container(
            self.spec.spec_name,
            image_reference(image),
            image.pull_policy,
            args=self.spec.args,
            env=builders.container_env(intrinsic_env, self.spec.env),
            ports=[builders.container_port("http", HTTP_PORT)],
            volume_mounts=builders.default_volume_mounts(),
            resources=self.spec.resources,
            startup_probe=builders.http_probe(HEALTH_PATH, "http", failure_threshold=60),
            liveness_probe=builders.http_probe(HEALTH_PATH, "http", failure_threshold=3),
            readiness_probe=builders.http_probe(HEALTH_PATH, "http", failure_threshold=1),
        )
        template = builders.build_pod_template(
            self.state.selector_labels(self),
            [container],
            init_containers=[
                builders.wait_for_tcp_container(
                    "database", self.database_host, MYSQL_PORT, self.state.defaults.curl_image
                )
            ],
            volumes=builders.default_volumes(),
            annotations=self.state.pod_annotations(self),
        )
        return builders.build_deployment(
            self.state.resource_metadata(self, name),
            self.replicas,
            self.state.selector_labels(self),
            template,
        )

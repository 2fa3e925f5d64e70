"""
MySQL (MariaDB) relational store.

Produces a StatefulSet with a persistent volume claim, a Service, and a
secret with initialization scripts. The init scripts create one schema
and user per db-login credential requested by other components.
"""

from __future__ import annotations

from dataclasses import dataclass, replace
from typing import TYPE_CHECKING, Any, Dict, List

import structlog

from stagehand.components import builders
from stagehand.components.base import (
    Readiness,
    component_name,
    gate_open,
    image_reference,
    resolve_image,
    workload_readiness,
)
from stagehand.credentials.models import (
    DEFAULT_PASSWORD_KEY,
    DEFAULT_USERNAME_KEY,
    ClientSecret,
    ClientSecretRef,
)
from stagehand.specs.merger import SpecMerger, first_non_empty
from stagehand.specs.models import ComponentSpec, ImageSpec

if TYPE_CHECKING:
    from stagehand.orchestration.target_state import TargetState

logger = structlog.get_logger()

MYSQL_ROOT_USERNAME = "root"
MYSQL_PORT = 3306
JDBC_CLIENT_SECRET_REF_KIND = "db-login"
CREATE_USERS_SCRIPT = "create-default-users.sql"

MYSQL_IMAGE = ImageSpec(
    registry="docker.io",
    repository="mariadb",
    tag="10.7",
    pull_policy="IfNotPresent",
)

_ADMIN_PROBE_SCRIPT = (
    'password_aux="${MYSQL_ROOT_PASSWORD:-}"\n'
    'if [[ -f "${MYSQL_ROOT_PASSWORD_FILE:-}" ]]; then\n'
    '    password_aux=$(cat "$MYSQL_ROOT_PASSWORD_FILE")\n'
    "fi\n"
    'mysqladmin status -uroot -p"${password_aux}"'
)


def tenant_client_secrets(state: TargetState) -> Dict[str, ClientSecret]:
    """db-login credentials that need a user and schema, excluding root.

    Raises:
        MissingCredentialError: If no component requested a db-login
    """
    return {
        owner: client_secret
        for owner, client_secret in state.secrets.require(JDBC_CLIENT_SECRET_REF_KIND).items()
        if client_secret.username != MYSQL_ROOT_USERNAME
    }


def create_users_from_client_secrets(state: TargetState) -> Dict[str, str]:
    """Build the init script that provisions every tenant schema and user."""
    sql = []
    for client_secret in tenant_client_secrets(state).values():
        schema = client_secret.schema
        username = client_secret.username
        password = client_secret.password
        sql.append(
            f"CREATE SCHEMA IF NOT EXISTS {schema} CHARACTER SET utf8mb4 COLLATE utf8mb4_bin;\n"
        )
        sql.append(f"CREATE USER IF NOT EXISTS '{username}'@'%' IDENTIFIED BY '{password}';\n")
        sql.append(f"ALTER USER '{username}'@'%' IDENTIFIED BY '{password}';\n")
        sql.append(f"GRANT ALL PRIVILEGES ON {schema}.* TO '{username}'@'%';\n")
    return {CREATE_USERS_SCRIPT: "".join(sql)}


def _root_secret(ref: ClientSecretRef, password: str) -> Dict[str, str]:
    return {
        DEFAULT_USERNAME_KEY: MYSQL_ROOT_USERNAME,
        DEFAULT_PASSWORD_KEY: password,
    }


@dataclass(frozen=True)
class MySQLComponent:
    """Relational store used by every component that requests a db-login."""

    state: TargetState
    spec: ComponentSpec

    termination_grace_period_seconds = 30

    @property
    def base_resource_name(self) -> str:
        return component_name(self.spec)

    def update_spec(self, overlay: ComponentSpec) -> MySQLComponent:
        return replace(self, spec=SpecMerger.merge(self.spec, overlay))

    def is_build_resources(self) -> bool:
        return gate_open(self.state, self.spec)

    def is_ready(self) -> Readiness:
        return workload_readiness(
            self.state, self.spec, "StatefulSet", self.state.resource_name_for(self)
        )

    def request_required_resources(self) -> None:
        self.state.secrets.request(self.spec.type, MYSQL_ROOT_USERNAME, _root_secret)

    def build_resources(self) -> List[Dict[str, Any]]:
        name = self.state.resource_name_for(self)
        resources = [
            builders.build_pvc(
                self.state.resource_metadata(self, name),
                self._data_volume_size(),
                self.state.defaults.storage_class,
            ),
            self._build_stateful_set(name),
            builders.build_service(
                self.state.resource_metadata(self, self.state.service_name_for(self)),
                self.state.selector_labels(self),
                [builders.service_port("ior", MYSQL_PORT, "mysql")],
            ),
        ]
        resources.extend(self._build_init_secrets())
        logger.debug("component_built", component=name, resources=len(resources))
        return resources

    def _data_volume_size(self) -> str:
        sizes = self.spec.volume_size
        return first_non_empty(sizes.data, sizes.mysql_data, self.state.settings.default_volume_size)

    def _root_password_secret(self) -> str:
        return self.state.secrets.get(self.spec.type, MYSQL_ROOT_USERNAME).ref.secret_name

    def _build_stateful_set(self, name: str) -> Dict[str, Any]:
        image = resolve_image(self.spec.image, None, MYSQL_IMAGE)
        probe = self._probe()
        intrinsic_env = [
            builders.env_from_secret(
                "MYSQL_ROOT_PASSWORD", self._root_password_secret(), DEFAULT_PASSWORD_KEY
            )
        ]
        container = builders.build_container(
            self.spec.spec_name,
            image_reference(image),
            image.pull_policy,
            args=self.spec.args,
            env=builders.container_env(intrinsic_env, self.spec.env),
            ports=[builders.container_port("mysql", MYSQL_PORT)],
            volume_mounts=self._volume_mounts(name),
            resources=self.spec.resources,
            startup_probe=probe,
            liveness_probe=probe,
            readiness_probe=probe,
        )
        template = builders.build_pod_template(
            self.state.selector_labels(self),
            [container],
            volumes=self._volumes(name),
            user_id=999,
            termination_grace_period_seconds=self.termination_grace_period_seconds,
            annotations=self.state.pod_annotations(self),
        )
        return builders.build_stateful_set(
            self.state.resource_metadata(self, name),
            self.state.service_name_for(self),
            self.state.selector_labels(self),
            template,
        )

    def _probe(self) -> Dict[str, Any]:
        # First start initializes the data directory; allow up to 50 minutes
        return builders.exec_probe(
            ["/bin/bash", "-ec", _ADMIN_PROBE_SCRIPT],
            failure_threshold=300,
            initial_delay_seconds=10,
            period_seconds=10,
            success_threshold=1,
            timeout_seconds=10,
        )

    def _volumes(self, name: str) -> List[Dict[str, Any]]:
        return [
            *builders.default_volumes(),
            {"name": name, "persistentVolumeClaim": {"claimName": name}},
            {
                "name": self.state.resource_name_for(self, "init"),
                "secret": {
                    "secretName": self.state.resource_name_for(self, "extra"),
                    "defaultMode": 420,
                    "optional": True,
                },
            },
            {"name": "run-mysql", "emptyDir": {}},
        ]

    def _volume_mounts(self, name: str) -> List[Dict[str, Any]]:
        return [
            *builders.default_volume_mounts(),
            {"name": name, "mountPath": "/var/lib/mysql"},
            {
                "name": self.state.resource_name_for(self, "init"),
                "mountPath": "/docker-entrypoint-initdb.d",
            },
            {"name": "run-mysql", "mountPath": "/run/mysqld"},
        ]

    def _build_init_secrets(self) -> List[Dict[str, Any]]:
        data = {**self.spec.extra, **create_users_from_client_secrets(self.state)}
        if not data:
            return []
        name = self.state.resource_name_for(self, "extra")
        return [builders.build_opaque_secret(self.state.resource_metadata(self, name), data)]

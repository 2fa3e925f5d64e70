"""Components package: variants that turn effective specs into resources."""

from stagehand.components.app_server import AppServerComponent
from stagehand.components.base import Component, Readiness, component_name, resolve_image
from stagehand.components.cache import CacheComponent
from stagehand.components.mysql import (
    JDBC_CLIENT_SECRET_REF_KIND,
    MYSQL_ROOT_USERNAME,
    MySQLComponent,
    create_users_from_client_secrets,
    tenant_client_secrets,
)
from stagehand.components.registry import (
    ComponentRegistry,
    default_registry,
    register_default_components,
)

__all__ = [
    "AppServerComponent",
    "CacheComponent",
    "Component",
    "ComponentRegistry",
    "JDBC_CLIENT_SECRET_REF_KIND",
    "MYSQL_ROOT_USERNAME",
    "MySQLComponent",
    "Readiness",
    "component_name",
    "create_users_from_client_secrets",
    "default_registry",
    "register_default_components",
    "resolve_image",
    "tenant_client_secrets",
]

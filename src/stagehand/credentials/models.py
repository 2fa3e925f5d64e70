"""
Data models for credential requests and resolved credentials.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Callable

DEFAULT_USERNAME_KEY = "username"
DEFAULT_PASSWORD_KEY = "password"
DEFAULT_SCHEMA_KEY = "schema"
DEFAULT_HOSTNAME_KEY = "hostname"
DEFAULT_PORT_KEY = "port"
DEFAULT_URL_KEY = "url"
DEFAULT_DRIVER_KEY = "driver"


@dataclass(frozen=True)
class ClientSecretRef:
    """
    A named request for a credential.

    Attributes:
        kind: Logical credential category shared by unrelated components (e.g. db-login)
        owner: Logical owner within the kind (e.g. the schema or user name)
        secret_name: Name of the stored secret holding the credential
        username_key: Field key holding the user name
        password_key: Field key holding the password
        schema_key: Field key holding the schema name
    """

    kind: str
    owner: str
    secret_name: str
    username_key: str = DEFAULT_USERNAME_KEY
    password_key: str = DEFAULT_PASSWORD_KEY
    schema_key: str = DEFAULT_SCHEMA_KEY

    @property
    def key(self) -> tuple[str, str]:
        return (self.kind, self.owner)


# Lays out the secret's fields given the ref and a freshly generated password
SecretBuilder = Callable[[ClientSecretRef, str], dict[str, str]]


@dataclass
class ClientSecret:
    """A credential resolved to concrete string values."""

    ref: ClientSecretRef
    string_data: dict[str, str]
    generated: bool = False
    labels: dict[str, str] = field(default_factory=dict)

    @property
    def username(self) -> str | None:
        return self.string_data.get(self.ref.username_key)

    @property
    def password(self) -> str | None:
        return self.string_data.get(self.ref.password_key)

    @property
    def schema(self) -> str | None:
        return self.string_data.get(self.ref.schema_key)

    def manifest(self) -> dict[str, Any]:
        """Secret resource for the applier."""
        return {
            "apiVersion": "v1",
            "kind": "Secret",
            "metadata": {
                "name": self.ref.secret_name,
                "labels": dict(self.labels),
            },
            "type": "Opaque",
            "stringData": dict(self.string_data),
        }

"""
Per-pass credential table.

Credential provisioning is a two-phase protocol:

1. Every component declares the credentials it needs with request().
   Declaring creates nothing; a repeated declaration returns the same ref.
2. resolve() turns each unique request into a ClientSecret, loading the
   stored secret if it exists and generating one otherwise.

Generated values are never regenerated on later passes because the stored
secret is always read before anything is created.
"""

from __future__ import annotations

import secrets
from typing import Any

import structlog

from stagehand.core.errors import MissingCredentialError, SecretExistsError, StoreError
from stagehand.credentials.models import ClientSecret, ClientSecretRef, SecretBuilder
from stagehand.naming import concat_optional
from stagehand.stores import SecretStore

logger = structlog.get_logger()


def generate_password(length: int) -> str:
    """Generate a random URL-safe password of exactly `length` characters."""
    return secrets.token_urlsafe(length)[:length]


def secret_name_for(name_prefix: str, kind: str, owner: str) -> str:
    return concat_optional(name_prefix, kind, owner)


class ClientSecretTable:
    """Credential requests and resolved credentials for one pass."""

    def __init__(
        self,
        store: SecretStore,
        name_prefix: str = "",
        labels: dict[str, str] | None = None,
        password_length: int = 24,
        persist: bool = False,
    ) -> None:
        self._store = store
        self._name_prefix = name_prefix
        self._labels = labels or {}
        self._password_length = password_length
        self._persist = persist
        self._refs: dict[tuple[str, str], ClientSecretRef] = {}
        self._builders: dict[tuple[str, str], SecretBuilder] = {}
        self._resolved: dict[tuple[str, str], ClientSecret] = {}

    def request(self, kind: str, owner: str, builder: SecretBuilder, **keys: Any) -> ClientSecretRef:
        """Declare a needed credential.

        Args:
            kind: Credential kind (e.g. db-login)
            owner: Owner within the kind
            builder: Lays out the secret's fields from the ref and a generated password
            **keys: Overrides for the ref's field keys (username_key, ...)

        Returns:
            The ref, shared by every request for the same kind and owner
        """
        key = (kind, owner)
        ref = self._refs.get(key)
        if ref is None:
            ref = ClientSecretRef(
                kind=kind,
                owner=owner,
                secret_name=secret_name_for(self._name_prefix, kind, owner),
                **keys,
            )
            self._refs[key] = ref
            self._builders[key] = builder
            logger.debug("client_secret_requested", kind=kind, owner=owner)
        return ref

    @property
    def refs(self) -> list[ClientSecretRef]:
        return list(self._refs.values())

    def resolve(self) -> None:
        """Load or generate every declared credential not yet resolved."""
        for key, ref in self._refs.items():
            if key in self._resolved:
                continue
            self._resolved[key] = self._load_or_build(ref, self._builders[key])

    def _load_or_build(self, ref: ClientSecretRef, builder: SecretBuilder) -> ClientSecret:
        data = self._store.read_secret(ref.secret_name)
        if data is not None:
            logger.debug("client_secret_loaded", secret=ref.secret_name, kind=ref.kind)
            return ClientSecret(ref=ref, string_data=data, labels=self._labels)

        data = builder(ref, generate_password(self._password_length))
        client_secret = ClientSecret(ref=ref, string_data=data, generated=True, labels=self._labels)

        if self._persist:
            try:
                self._store.create_secret(ref.secret_name, client_secret.manifest())
            except SecretExistsError:
                # Another pass created it first; its values are authoritative
                data = self._store.read_secret(ref.secret_name)
                if data is None:
                    raise StoreError(
                        f"Secret {ref.secret_name} reported as existing but cannot be read",
                        details={"secret": ref.secret_name},
                    ) from None
                logger.info("client_secret_conflict_reloaded", secret=ref.secret_name)
                return ClientSecret(ref=ref, string_data=data, labels=self._labels)

        logger.info("client_secret_generated", secret=ref.secret_name, kind=ref.kind)
        return client_secret

    def get(self, kind: str, owner: str) -> ClientSecret:
        """Return one resolved credential.

        Raises:
            MissingCredentialError: If it was never declared or not yet resolved
        """
        client_secret = self._resolved.get((kind, owner))
        if client_secret is None:
            raise MissingCredentialError(
                f"No resolved credential for {kind}/{owner}",
                details={"kind": kind, "owner": owner},
            )
        return client_secret

    def client_secrets(self, kind: str) -> dict[str, ClientSecret]:
        """All resolved credentials of a kind, keyed by owner, in declaration order."""
        return {
            owner: client_secret
            for (secret_kind, owner), client_secret in self._resolved.items()
            if secret_kind == kind
        }

    def require(self, kind: str) -> dict[str, ClientSecret]:
        """Like client_secrets(), but at least one entry must exist.

        Raises:
            MissingCredentialError: If no credential of the kind was resolved
        """
        found = self.client_secrets(kind)
        if not found:
            raise MissingCredentialError(
                f"No credentials of kind {kind} have been requested",
                details={"kind": kind},
            )
        return found

    def manifests(self) -> list[dict[str, Any]]:
        """Secret resources for every resolved credential."""
        return [client_secret.manifest() for client_secret in self._resolved.values()]

    @property
    def generated(self) -> list[str]:
        return [cs.ref.secret_name for cs in self._resolved.values() if cs.generated]

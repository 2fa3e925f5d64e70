"""Credential requests, resolution and the per-pass secret table."""

from stagehand.credentials.models import (
    DEFAULT_DRIVER_KEY,
    DEFAULT_HOSTNAME_KEY,
    DEFAULT_PASSWORD_KEY,
    DEFAULT_PORT_KEY,
    DEFAULT_SCHEMA_KEY,
    DEFAULT_URL_KEY,
    DEFAULT_USERNAME_KEY,
    ClientSecret,
    ClientSecretRef,
    SecretBuilder,
)
from stagehand.credentials.table import ClientSecretTable, generate_password

__all__ = [
    "ClientSecret",
    "ClientSecretRef",
    "ClientSecretTable",
    "DEFAULT_DRIVER_KEY",
    "DEFAULT_HOSTNAME_KEY",
    "DEFAULT_PASSWORD_KEY",
    "DEFAULT_PORT_KEY",
    "DEFAULT_SCHEMA_KEY",
    "DEFAULT_URL_KEY",
    "DEFAULT_USERNAME_KEY",
    "SecretBuilder",
    "generate_password",
]

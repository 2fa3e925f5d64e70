"""
Custom resource file loading.

Reads a custom resource snapshot from YAML. Accepts either a full
Kubernetes object (apiVersion/kind/metadata/spec/status) or a bare
document with the same top-level keys.
"""

from __future__ import annotations

from pathlib import Path
from typing import Any

import structlog
import yaml
from pydantic import ValidationError

from stagehand.core.errors import ConfigurationError
from stagehand.specs.custom_resource import CustomResource

logger = structlog.get_logger()


def parse_custom_resource(data: dict[str, Any]) -> CustomResource:
    """Validate a decoded custom resource document.

    Raises:
        ConfigurationError: If the document does not describe a custom resource
    """
    if not isinstance(data, dict):
        raise ConfigurationError("Custom resource must be a mapping")
    try:
        return CustomResource.model_validate(data)
    except ValidationError as e:
        raise ConfigurationError(
            "Invalid custom resource",
            details={"errors": e.error_count(), "first_error": e.errors()[0]["msg"]},
        ) from e


def load_custom_resource(path: str | Path) -> CustomResource:
    """Load a custom resource snapshot from a YAML file.

    Args:
        path: Path to the YAML file

    Returns:
        Parsed CustomResource

    Raises:
        ConfigurationError: If the file is missing, not YAML, or invalid
    """
    path = Path(path)
    if not path.exists():
        raise ConfigurationError(f"Custom resource file not found: {path}")

    try:
        with open(path) as f:
            data = yaml.safe_load(f)
    except yaml.YAMLError as e:
        raise ConfigurationError(f"Failed to parse {path}: {e}") from e

    cr = parse_custom_resource(data)
    logger.debug("custom_resource_loaded", path=str(path), components=len(cr.spec.components))
    return cr


def load_secret_snapshot(path: str | Path) -> dict[str, dict[str, str]]:
    """Load a secret-name to string-data mapping from YAML.

    Used to prime an in-memory secret store for offline rendering.
    """
    path = Path(path)
    if not path.exists():
        raise ConfigurationError(f"Secret snapshot file not found: {path}")

    try:
        with open(path) as f:
            data = yaml.safe_load(f) or {}
    except yaml.YAMLError as e:
        raise ConfigurationError(f"Failed to parse {path}: {e}") from e

    if not isinstance(data, dict):
        raise ConfigurationError("Secret snapshot must map secret names to string data")
    return {str(name): {str(k): str(v) for k, v in (fields or {}).items()} for name, fields in data.items()}

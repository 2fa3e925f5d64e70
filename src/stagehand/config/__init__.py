"""
Stagehand configuration: engine settings and custom resource loading.
"""

from stagehand.config.loader import (
    load_custom_resource,
    load_secret_snapshot,
    parse_custom_resource,
)
from stagehand.config.settings import Settings, get_settings

__all__ = [
    "Settings",
    "get_settings",
    "load_custom_resource",
    "load_secret_snapshot",
    "parse_custom_resource",
]

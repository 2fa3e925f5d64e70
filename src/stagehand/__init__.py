"""Stagehand: resolves a content-cloud custom resource into its desired cluster resources."""

__version__ = "0.1.0"

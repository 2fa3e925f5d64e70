"""Layered component configuration merging.

The effective spec of a component instance is built by merging, in order:
the cluster-wide defaults, the per-type defaults, and the instance spec
itself. Every merge is a pure function returning a new ComponentSpec.
"""

from __future__ import annotations

from functools import reduce

from stagehand.core.errors import IdentityMismatchError
from stagehand.specs.models import ComponentIdentity, ComponentSpec


def first_non_empty(*values: str | None) -> str:
    """Return the first non-empty value, or "" when all are empty.

    Used for default resolution: pass values in precedence order
    (instance, defaults, hard-coded fallback).
    """
    for value in values:
        if value:
            return value
    return ""


class SpecMerger:
    """Merges component spec layers."""

    @staticmethod
    def merge(base: ComponentSpec, overlay: ComponentSpec) -> ComponentSpec:
        """Merge an overlay onto a base spec with the same identity.

        Args:
            base: Existing (effective so far) spec
            overlay: Layer to apply on top

        Returns:
            New merged spec

        Raises:
            IdentityMismatchError: If base and overlay differ in (type, kind, name)
        """
        if base.identity != overlay.identity:
            raise IdentityMismatchError(
                "Cannot merge component specs because type/kind/name do not match",
                details={"base": "/".join(base.identity), "overlay": "/".join(overlay.identity)},
            )

        if base.resources is None:
            resources = overlay.resources
        else:
            resources = base.resources.merged(overlay.resources)

        return base.model_copy(
            update={
                "annotations": dict(overlay.annotations),
                "args": list(overlay.args),
                # Additive: overlay entries are appended, never de-duplicated by name
                "env": [*base.env, *overlay.env],
                "extra": {**base.extra, **overlay.extra},
                "image": base.image.merged(overlay.image),
                "milestone": overlay.milestone if overlay.milestone is not None else base.milestone,
                "resources": resources,
                "schemas": {**base.schemas, **overlay.schemas},
                "volume_size": base.volume_size.merged(overlay.volume_size),
            }
        )

    @staticmethod
    def merge_chain(first: ComponentSpec, *overlays: ComponentSpec) -> ComponentSpec:
        """Apply overlays left to right."""
        return reduce(SpecMerger.merge, overlays, first)

    @staticmethod
    def rebase(spec: ComponentSpec, identity: ComponentIdentity) -> ComponentSpec:
        """Re-identify a default layer onto a component instance."""
        type_, kind, name = identity
        return spec.model_copy(update={"type": type_, "kind": kind, "name": name})

    @staticmethod
    def effective(
        instance: ComponentSpec,
        cluster_defaults: ComponentSpec | None = None,
        type_defaults: ComponentSpec | None = None,
    ) -> ComponentSpec:
        """Compute the effective spec for an instance from its default layers.

        Args:
            instance: The per-instance spec, which wins over every default
            cluster_defaults: Cluster-wide default layer (any identity)
            type_defaults: Default layer for the instance's type (any identity)

        Returns:
            Effective spec carrying the instance's identity
        """
        identity = instance.identity
        layers = [
            SpecMerger.rebase(layer, identity)
            for layer in (cluster_defaults, type_defaults)
            if layer is not None
        ]
        if not layers:
            return instance
        return SpecMerger.merge_chain(layers[0], *layers[1:], instance)

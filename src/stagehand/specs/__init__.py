"""Component spec models, layered merging and the custom resource snapshot."""

from stagehand.specs.custom_resource import (
    ComponentDefaults,
    CustomResource,
    CustomResourceMetadata,
    CustomResourceSpec,
    CustomResourceStatus,
    WithOptions,
)
from stagehand.specs.merger import SpecMerger, first_non_empty
from stagehand.specs.models import (
    ComponentIdentity,
    ComponentSpec,
    EnvVar,
    ImageSpec,
    ResourceMgmt,
    ResourceQuantities,
    VolumeSize,
)

__all__ = [
    "ComponentDefaults",
    "ComponentIdentity",
    "ComponentSpec",
    "CustomResource",
    "CustomResourceMetadata",
    "CustomResourceSpec",
    "CustomResourceStatus",
    "EnvVar",
    "ImageSpec",
    "ResourceMgmt",
    "ResourceQuantities",
    "SpecMerger",
    "VolumeSize",
    "WithOptions",
    "first_non_empty",
]

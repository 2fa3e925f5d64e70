"""Memcached cache tier: stateless, no storage, no credentials."""

from __future__ import annotations

from dataclasses import dataclass, replace
from typing import TYPE_CHECKING, Any, Dict, List

from stagehand.components import builders
from stagehand.components.base import (
    Readiness,
    component_name,
    gate_open,
    image_reference,
    resolve_image,
    workload_readiness,
)
from stagehand.specs.merger import SpecMerger
from stagehand.specs.models import ComponentSpec, ImageSpec

if TYPE_CHECKING:
    from stagehand.orchestration.target_state import TargetState

MEMCACHED_PORT = 11211

MEMCACHED_IMAGE = ImageSpec(
    registry="docker.io",
    repository="memcached",
    tag="1.6",
    pull_policy="IfNotPresent",
)


@dataclass(frozen=True)
class CacheComponent:
    state: TargetState
    spec: ComponentSpec

    @property
    def base_resource_name(self) -> str:
        return component_name(self.spec)

    def update_spec(self, overlay: ComponentSpec) -> CacheComponent:
        return replace(self, spec=SpecMerger.merge(self.spec, overlay))

    def is_build_resources(self) -> bool:
        return gate_open(self.state, self.spec)

    def is_ready(self) -> Readiness:
        return workload_readiness(
            self.state, self.spec, "Deployment", self.state.resource_name_for(self)
        )

    def request_required_resources(self) -> None:
        pass

    def build_resources(self) -> List[Dict[str, Any]]:
        name = self.state.resource_name_for(self)
        image = resolve_image(self.spec.image, None, MEMCACHED_IMAGE)
        probe = builders.tcp_probe("memcached")
        container = builders.build_container(
            self.spec.spec_name,
            image_reference(image),
            image.pull_policy,
            args=self.spec.args,
            env=builders.container_env([], self.spec.env),
            ports=[builders.container_port("memcached", MEMCACHED_PORT)],
            resources=self.spec.resources,
            liveness_probe=probe,
            readiness_probe=probe,
        )
        template = builders.build_pod_template(
            self.state.selector_labels(self),
            [container],
            user_id=11211,
            annotations=self.state.pod_annotations(self),
        )
        return [
            builders.build_deployment(
                self.state.resource_metadata(self, name),
                1,
                self.state.selector_labels(self),
                template,
            ),
            builders.build_service(
                self.state.resource_metadata(self, self.state.service_name_for(self)),
                self.state.selector_labels(self),
                [builders.service_port("memcached", MEMCACHED_PORT, "memcached")],
            ),
        ]

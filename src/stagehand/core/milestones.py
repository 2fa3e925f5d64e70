"""
Rollout stage definitions for Stagehand.

Milestones are ordered checkpoints of a deployment. A component declares the
milestone it requires; it is only allowed to produce resources once the
custom resource's recorded milestone has reached that stage.

Stages (in order):
- empty: deployment created, nothing is required to be up yet
- databases-ready: relational and document stores accept connections
- content-server-initialized: content servers have run their first start
- content-server-ready: content servers serve requests
- management-ready: management tier is up
- delivery-ready: delivery tier is up
- live: the whole application is serving
- never: a component pinned here never gets built
"""

from __future__ import annotations

from enum import StrEnum

from stagehand.core.errors import UnknownMilestoneError


class Milestone(StrEnum):
    """Rollout stages, declared in rollout order."""

    EMPTY = "empty"
    DATABASES_READY = "databases-ready"
    CONTENT_SERVER_INITIALIZED = "content-server-initialized"
    CONTENT_SERVER_READY = "content-server-ready"
    MANAGEMENT_READY = "management-ready"
    DELIVERY_READY = "delivery-ready"
    LIVE = "live"
    NEVER = "never"

    @property
    def rank(self) -> int:
        return MILESTONE_ORDER.index(self)


MILESTONE_ORDER: tuple[Milestone, ...] = tuple(Milestone)

# Legacy milestone name mappings
_MILESTONE_ALIASES: dict[str, Milestone] = {
    "deploymentstarted": Milestone.EMPTY,
    "created": Milestone.EMPTY,
    "databasesready": Milestone.DATABASES_READY,
    "contentserverinitialized": Milestone.CONTENT_SERVER_INITIALIZED,
    "contentserverready": Milestone.CONTENT_SERVER_READY,
    "managementready": Milestone.MANAGEMENT_READY,
    "deliveryservicesready": Milestone.DELIVERY_READY,
    "ready": Milestone.LIVE,
}


def parse_milestone(value: str | Milestone | None) -> Milestone | None:
    """Normalize a milestone name to a Milestone.

    Args:
        value: Milestone, stage name, legacy alias, or None

    Returns:
        The Milestone, or None when value is None or empty (unset)

    Raises:
        UnknownMilestoneError: If the name is not a known stage
    """
    if value is None or isinstance(value, Milestone):
        return value
    name = value.strip().lower()
    if not name:
        return None
    try:
        return Milestone(name)
    except ValueError:
        pass
    alias = _MILESTONE_ALIASES.get(name.replace("-", "").replace("_", ""))
    if alias is not None:
        return alias
    raise UnknownMilestoneError(
        f"Unknown milestone: {value}. Valid milestones: "
        + ", ".join(m.value for m in MILESTONE_ORDER),
        details={"milestone": value},
    )


def compare_milestones(a: Milestone | None, b: Milestone | None) -> int:
    """Compare two milestones; unset ranks below every named stage.

    Returns:
        Negative if a < b, zero if equal, positive if a > b
    """
    rank_a = -1 if a is None else a.rank
    rank_b = -1 if b is None else b.rank
    return rank_a - rank_b


def is_eligible(current: Milestone | None, required: Milestone | None) -> bool:
    """Check whether a component requiring `required` may exist at `current`.

    An unset requirement is eligible at every stage, including unset.
    """
    if required is None:
        return True
    return compare_milestones(current, required) >= 0

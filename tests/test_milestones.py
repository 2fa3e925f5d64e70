"""Tests for core/milestones.py."""

import pytest
from stagehand.core.errors import ConfigurationError, UnknownMilestoneError
from stagehand.core.milestones import (
    MILESTONE_ORDER,
    Milestone,
    compare_milestones,
    is_eligible,
    parse_milestone,
)
from stagehand.specs.models import ComponentSpec


class TestParseMilestone:
    def test_canonical_name(self):
        assert parse_milestone("live") is Milestone.LIVE

    def test_case_and_whitespace_insensitive(self):
        assert parse_milestone("  Databases-Ready ") is Milestone.DATABASES_READY

    def test_legacy_aliases(self):
        assert parse_milestone("DeploymentStarted") is Milestone.EMPTY
        assert parse_milestone("DeliveryServicesReady") is Milestone.DELIVERY_READY
        assert parse_milestone("Ready") is Milestone.LIVE
        assert parse_milestone("Never") is Milestone.NEVER

    def test_unset(self):
        assert parse_milestone(None) is None
        assert parse_milestone("") is None

    def test_passthrough(self):
        assert parse_milestone(Milestone.EMPTY) is Milestone.EMPTY

    def test_unknown_name_is_configuration_error(self):
        with pytest.raises(UnknownMilestoneError) as exc_info:
            parse_milestone("halfway")
        assert isinstance(exc_info.value, ConfigurationError)
        assert exc_info.value.details == {"milestone": "halfway"}

    def test_unknown_name_rejected_when_building_spec(self):
        with pytest.raises(UnknownMilestoneError):
            ComponentSpec(type="mysql", milestone="halfway")


class TestOrdering:
    def test_declared_order(self):
        assert MILESTONE_ORDER[0] is Milestone.EMPTY
        assert MILESTONE_ORDER[-1] is Milestone.NEVER
        assert [m.rank for m in MILESTONE_ORDER] == list(range(len(MILESTONE_ORDER)))

    def test_order_is_not_lexicographic(self):
        assert compare_milestones(Milestone.EMPTY, Milestone.DATABASES_READY) < 0

    def test_unset_below_every_stage(self):
        for milestone in MILESTONE_ORDER:
            assert compare_milestones(None, milestone) < 0
            assert compare_milestones(milestone, None) > 0
        assert compare_milestones(None, None) == 0

    def test_total_order_is_antisymmetric(self):
        for a in MILESTONE_ORDER:
            for b in MILESTONE_ORDER:
                assert (compare_milestones(a, b) > 0) == (compare_milestones(b, a) < 0)


class TestEligibility:
    def test_unset_requirement_always_eligible(self):
        assert is_eligible(None, None)
        for current in MILESTONE_ORDER:
            assert is_eligible(current, None)

    def test_requirement_not_reached(self):
        assert not is_eligible(Milestone.EMPTY, Milestone.LIVE)

    def test_requirement_reached(self):
        assert is_eligible(Milestone.LIVE, Milestone.LIVE)
        assert is_eligible(Milestone.NEVER, Milestone.LIVE)

    def test_unset_current_not_eligible_for_named_requirement(self):
        assert not is_eligible(None, Milestone.EMPTY)

    def test_monotonic(self):
        stages = [None, *MILESTONE_ORDER]
        for required in stages:
            for lower in stages:
                if not is_eligible(lower, required):
                    continue
                for higher in stages:
                    if compare_milestones(higher, lower) >= 0:
                        assert is_eligible(higher, required)

"""
Unit Tests for Finalization Policy

Readiness, commit and the auto-finalization selection.
"""

import pytest

import sys
import os

sys.path.insert(0, os.path.join(os.path.dirname(__file__), "../../.."))

from microservices.takeover_service.finalization_policy import FinalizationPolicy
from microservices.takeover_service.models import (
    FinalizationOutcome,
    FinalizationReason,
)
from microservices.takeover_service.protocols import (
    AlreadyFinalizedError,
    FinalizationNotReadyError,
)
from tests.fixtures import REFERENCE_END, REFERENCE_CAPACITY, make_campaign

pytestmark = pytest.mark.unit


class TestEvaluate:
    """evaluate depends only on totals and time"""

    def test_not_ready(self, reference_campaign, mid_campaign):
        decision = FinalizationPolicy.evaluate(reference_campaign, mid_campaign)

        assert decision.ready is False
        assert decision.reason == FinalizationReason.NOT_READY
        assert decision.expected_outcome == FinalizationOutcome.ACTIVE

    def test_goal_met_before_end(self, mid_campaign):
        campaign = make_campaign(total_contributed=REFERENCE_CAPACITY)
        decision = FinalizationPolicy.evaluate(campaign, mid_campaign)

        assert decision.ready is True
        assert decision.reason == FinalizationReason.GOAL_MET
        assert decision.expected_outcome == FinalizationOutcome.SUCCESSFUL
        assert decision.is_expired is False

    def test_goal_met_and_expired_is_successful(self, after_campaign):
        campaign = make_campaign(total_contributed=REFERENCE_CAPACITY)
        decision = FinalizationPolicy.evaluate(campaign, after_campaign)

        assert decision.expected_outcome == FinalizationOutcome.SUCCESSFUL
        assert decision.is_goal_met and decision.is_expired

    def test_expired_short_of_goal_fails(self, after_campaign):
        campaign = make_campaign(total_contributed=REFERENCE_CAPACITY - 1)
        decision = FinalizationPolicy.evaluate(campaign, after_campaign)

        assert decision.ready is True
        assert decision.reason == FinalizationReason.EXPIRED
        assert decision.expected_outcome == FinalizationOutcome.FAILED

    def test_end_time_itself_is_not_expired(self, reference_campaign):
        decision = FinalizationPolicy.evaluate(reference_campaign, REFERENCE_END)
        assert decision.is_expired is False
        assert decision.ready is False

    def test_deterministic(self, after_campaign):
        campaign = make_campaign(total_contributed=123)
        first = FinalizationPolicy.evaluate(campaign, after_campaign)
        second = FinalizationPolicy.evaluate(campaign, after_campaign)
        assert first == second


class TestCommit:
    """commit produces the terminal snapshot"""

    def test_commit_successful(self, mid_campaign):
        campaign = make_campaign(total_contributed=REFERENCE_CAPACITY)
        finalized = FinalizationPolicy.commit(campaign, mid_campaign)

        assert finalized.finalized is True
        assert finalized.successful is True
        assert campaign.finalized is False  # input snapshot untouched

    def test_commit_failed(self, after_campaign):
        campaign = make_campaign(total_contributed=1)
        finalized = FinalizationPolicy.commit(campaign, after_campaign)

        assert finalized.finalized is True
        assert finalized.successful is False

    def test_commit_not_ready(self, reference_campaign, mid_campaign):
        with pytest.raises(FinalizationNotReadyError) as exc_info:
            FinalizationPolicy.commit(reference_campaign, mid_campaign)
        assert exc_info.value.campaign_id == reference_campaign.campaign_id

    def test_second_commit_rejected_and_outcome_kept(self, mid_campaign, after_campaign):
        campaign = make_campaign(total_contributed=REFERENCE_CAPACITY)
        finalized = FinalizationPolicy.commit(campaign, mid_campaign)

        with pytest.raises(AlreadyFinalizedError) as exc_info:
            FinalizationPolicy.commit(finalized, after_campaign)
        assert exc_info.value.successful is True
        assert finalized.successful is True


class TestSelectReady:
    """select_ready for the auto-finalization sweep"""

    def test_selects_only_ready_unfinalized(self, after_campaign):
        expired = make_campaign(total_contributed=5)
        goal_met = make_campaign(total_contributed=REFERENCE_CAPACITY)
        done = make_campaign(total_contributed=REFERENCE_CAPACITY, finalized=True, successful=True)
        later = make_campaign(end_time=REFERENCE_END + 86400)

        ready = FinalizationPolicy.select_ready([expired, goal_met, done, later], after_campaign)

        assert [c.campaign_id for c, _ in ready] == [expired.campaign_id, goal_met.campaign_id]
        assert ready[0][1].reason == FinalizationReason.EXPIRED
        assert ready[1][1].reason == FinalizationReason.GOAL_MET

    def test_empty(self, mid_campaign):
        assert FinalizationPolicy.select_ready([], mid_campaign) == []

"""
Tests for the status presentation policy.
"""

import pytest

from interviewslots.domain.models import InterviewStatus
from interviewslots.domain.status import STATUS_POLICIES, InterviewAction, policy_for


class TestStatusPolicies:
    """Tests for STATUS_POLICIES."""

    def test_every_status_has_a_policy(self):
        """Test no status is left without presentation."""
        assert set(STATUS_POLICIES) == set(InterviewStatus)

    @pytest.mark.parametrize(
        "status, color, label",
        [
            (InterviewStatus.SCHEDULED, "blue", "Scheduled"),
            (InterviewStatus.COMPLETED, "green", "Completed"),
            (InterviewStatus.CANCELLED, "red", "Cancelled"),
            (InterviewStatus.NO_SHOW, "amber", "No Show"),
        ],
    )
    def test_colors_and_labels(self, status, color, label):
        """Test the badge colors."""
        policy = policy_for(status)

        assert policy.color == color
        assert policy.label == label

    def test_scheduled_actions(self):
        """Test a scheduled interview can get feedback or be cancelled."""
        policy = policy_for("scheduled")

        assert policy.allows(InterviewAction.ADD_FEEDBACK)
        assert policy.allows("cancel")
        assert not policy.allows(InterviewAction.VIEW_FEEDBACK)

    def test_completed_actions(self):
        """Test completed interviews show feedback."""
        policy = policy_for(InterviewStatus.COMPLETED)

        assert policy.allows(InterviewAction.VIEW_FEEDBACK)
        assert not policy.allows(InterviewAction.CANCEL)

    @pytest.mark.parametrize("status", [InterviewStatus.CANCELLED, InterviewStatus.NO_SHOW])
    def test_closed_statuses_show_details(self, status):
        """Test cancelled and no-show interviews offer details only."""
        policy = policy_for(status)

        assert policy.allowed_actions == (InterviewAction.RESCHEDULE, InterviewAction.VIEW_DETAILS)

    def test_reschedule_always_allowed(self):
        """Test every status can be rescheduled."""
        assert all(p.allows(InterviewAction.RESCHEDULE) for p in STATUS_POLICIES.values())

    def test_occupancy_matches_status(self):
        """Test the table agrees with the conflict rules."""
        for status, policy in STATUS_POLICIES.items():
            assert policy.occupies_slot == status.occupies_slot

    def test_unknown_status(self):
        """Test unknown statuses fail."""
        with pytest.raises(ValueError):
            policy_for("postponed")

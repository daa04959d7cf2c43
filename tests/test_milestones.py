"""Tests for milestone states."""

import pytest

from countdown.core.milestones import (
    CELEBRATION_DAYS,
    DEFAULT_MILESTONES,
    evaluate_milestones,
    is_milestone_crossing,
    milestone_state,
)
from countdown.core.models import Milestone, MilestoneState, MilestoneStatus


@pytest.mark.parametrize(
    "days,state",
    [
        (0, MilestoneState.ACHIEVED),
        (100, MilestoneState.ACHIEVED),
        (101, MilestoneState.ACTIVE),
        (110, MilestoneState.ACTIVE),
        (130, MilestoneState.ACTIVE),
        (131, MilestoneState.LOCKED),
        (1000, MilestoneState.LOCKED),
    ],
)
def test_threshold_100(days, state):
    assert milestone_state(100, days) == state


def test_evaluate_preserves_order():
    statuses = evaluate_milestones(DEFAULT_MILESTONES, 40)

    assert [s.milestone for s in statuses] == list(DEFAULT_MILESTONES)
    assert [s.state for s in statuses] == [
        MilestoneState.ACHIEVED,  # 730
        MilestoneState.ACHIEVED,  # 365
        MilestoneState.ACHIEVED,  # 180
        MilestoneState.ACHIEVED,  # 100
        MilestoneState.ACHIEVED,  # 50
        MilestoneState.ACTIVE,    # 30
        MilestoneState.LOCKED,    # 7
        MilestoneState.LOCKED,    # 1
    ]


def test_evaluate_empty():
    assert evaluate_milestones([], 12) == []


def test_evaluate_is_stateless():
    custom = [Milestone(10, "Ten"), Milestone(5, "Five")]
    first = evaluate_milestones(custom, 8)
    evaluate_milestones(custom, 100)
    assert evaluate_milestones(custom, 8) == first


def test_default_milestones_descending():
    thresholds = [m.threshold_days for m in DEFAULT_MILESTONES]
    assert thresholds == [730, 365, 180, 100, 50, 30, 7, 1]


class TestDisplayIcon:
    milestone = Milestone(7, "Final Week", icon="⭐")

    def test_achieved(self):
        assert MilestoneStatus(self.milestone, MilestoneState.ACHIEVED).display_icon == "✅"

    def test_active_uses_own_icon(self):
        assert MilestoneStatus(self.milestone, MilestoneState.ACTIVE).display_icon == "⭐"

    def test_locked(self):
        assert MilestoneStatus(self.milestone, MilestoneState.LOCKED).display_icon == "🔒"


class TestMilestoneCrossing:
    def test_first_evaluation_never_crosses(self):
        assert is_milestone_crossing(None, 100) is False

    def test_crossing_onto_trigger(self):
        assert is_milestone_crossing(101, 100) is True
        assert is_milestone_crossing(2, 1) is True

    def test_unchanged_days(self):
        assert is_milestone_crossing(100, 100) is False

    def test_non_trigger_value(self):
        assert is_milestone_crossing(366, 365) is False

    def test_trigger_set(self):
        assert CELEBRATION_DAYS == {100, 50, 30, 7, 1}

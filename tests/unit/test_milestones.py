"""Unit tests for milestone tracking"""

import pytest
from datetime import date
from decimal import Decimal
from debt_planner.domain.allocator import build_repayment_plan
from debt_planner.domain.exceptions import InvalidMilestoneError
from debt_planner.domain.milestones import progress_milestones, track_milestones
from debt_planner.domain.models import Debt, Milestone, MilestoneStatus, Strategy


@pytest.fixture
def plan(two_debts, start_date: date):
    return build_repayment_plan(two_debts, Strategy.AVALANCHE, 300, start_date=start_date)


def test_balance_target_achieved_at_first_crossing(plan):
    milestone = Milestone(id="half-B", debt_id="B", target_amount=Decimal("2500"))
    report = track_milestones([milestone], plan)

    updated = report.milestones[0]
    schedule = plan.plan_for("B").schedule
    first = next(item for item in schedule if item.remaining_balance <= 2500)

    assert updated.status == MilestoneStatus.ACHIEVED
    assert updated.achieved_month == first.month
    assert updated.achieved_date == first.date
    assert schedule[first.month - 2].remaining_balance > 2500
    assert report.warnings == ()


def test_date_target_means_paid_off_by_date(plan):
    payoff = plan.plan_for("A").payoff_date

    on_time = Milestone(id="a-free", debt_id="A", target_date=payoff)
    too_early = Milestone(id="a-free-jan", debt_id="A", target_date=date(2025, 1, 31))
    report = track_milestones([on_time, too_early], plan)

    assert report.milestones[0].status == MilestoneStatus.ACHIEVED
    assert report.milestones[0].achieved_date == payoff
    assert report.milestones[1].status == MilestoneStatus.PENDING
    assert report.milestones[1].achieved_date is None


def test_amount_and_date_combined(plan):
    schedule = plan.plan_for("B").schedule
    reached = Milestone(id="b-4k", debt_id="B", target_amount=4000, target_date=schedule[-1].date)
    missed = Milestone(id="b-0-early", debt_id="B", target_amount=0, target_date=schedule[3].date)
    report = track_milestones([reached, missed], plan)

    assert report.milestones[0].is_achieved
    assert not report.milestones[1].is_achieved


def test_previously_achieved_not_satisfied_warns_and_keeps_state(two_debts, plan, start_date: date):
    achieved = track_milestones(
        [Milestone(id="a-quick", debt_id="A", target_date=plan.plan_for("A").payoff_date)], plan
    ).milestones[0]
    assert achieved.is_achieved

    # Paying B first pushes A's payoff well past the old date
    slower = build_repayment_plan(
        two_debts, Strategy.CUSTOM, 300, custom_order=["B", "A"], start_date=start_date
    )
    report = track_milestones([achieved], slower)

    assert report.milestones[0] == achieved
    assert len(report.warnings) == 1
    warning = report.warnings[0]
    assert (warning.milestone_id, warning.debt_id) == ("a-quick", "A")
    assert warning.previous_achieved_date == achieved.achieved_date


def test_achieved_date_moves_with_newer_plan(two_debts, plan, start_date: date):
    achieved = track_milestones(
        [Milestone(id="b-half", debt_id="B", target_amount=2500)], plan
    ).milestones[0]

    richer = build_repayment_plan(two_debts, Strategy.AVALANCHE, 600, start_date=start_date)
    report = track_milestones([achieved], richer)

    assert report.milestones[0].is_achieved
    assert report.milestones[0].achieved_date < achieved.achieved_date
    assert report.warnings == ()


def test_missing_debt_keeps_pending(plan):
    report = track_milestones([Milestone(id="x", debt_id="nope", target_amount=0)], plan)
    assert report.milestones[0].status == MilestoneStatus.PENDING


def test_already_paid_debt_achieved_at_start(start_date: date):
    debts = [
        Debt(id="zero", balance=0, annual_rate="0.1", minimum_payment=0),
        Debt(id="open", balance=100, annual_rate=0, minimum_payment=50),
    ]
    plan = build_repayment_plan(debts, Strategy.SNOWBALL, 50, start_date=start_date)
    report = track_milestones([Milestone(id="z", debt_id="zero", target_amount=0)], plan)

    assert report.milestones[0].achieved_month == 0
    assert report.milestones[0].achieved_date == start_date


def test_milestone_needs_a_target(plan):
    with pytest.raises(InvalidMilestoneError):
        track_milestones([Milestone(id="empty", debt_id="A")], plan)
    with pytest.raises(InvalidMilestoneError):
        track_milestones([Milestone(id="neg", debt_id="A", target_amount=-5)], plan)


def test_progress_milestones(two_debts):
    milestones = progress_milestones(two_debts)

    a_targets = [m.target_amount for m in milestones if m.debt_id == "A"]
    assert a_targets == [Decimal("750.00"), Decimal("500.00"), Decimal("250.00"), Decimal("0.00")]
    assert milestones[0].id == "A-25pct"
    assert all(m.status == MilestoneStatus.PENDING for m in milestones)

    with pytest.raises(InvalidMilestoneError):
        progress_milestones(two_debts, thresholds=(0, 50))

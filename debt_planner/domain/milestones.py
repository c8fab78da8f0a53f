"""Milestone tracking against a plan's dated balance curve"""

from dataclasses import replace
from datetime import date
from decimal import Decimal
from typing import List, Optional, Sequence, Tuple

from debt_planner.domain.exceptions import InvalidMilestoneError
from debt_planner.domain.models import (
    Debt,
    InconsistentHistoryWarning,
    Milestone,
    MilestoneReport,
    MilestoneStatus,
    PlanResult,
    RepaymentPlan,
)
from debt_planner.utils.money import ZERO, quantize, to_money

# Percent-paid-off checkpoints offered by default for every debt
DEFAULT_PROGRESS_THRESHOLDS = (25, 50, 75, 100)


def _validate(milestone: Milestone) -> Decimal:
    """Return the effective balance target; a date-only milestone means paid off"""
    if milestone.target_amount is None and milestone.target_date is None:
        raise InvalidMilestoneError(f"Milestone {milestone.id} needs a target amount or date")
    if milestone.target_amount is None:
        return ZERO
    target = to_money(milestone.target_amount)
    if target < 0:
        raise InvalidMilestoneError(f"Milestone {milestone.id}: target amount must be >= 0")
    return target


def _first_hit(
    plan: RepaymentPlan, target: Decimal, deadline: Optional[date]
) -> Optional[Tuple[int, date]]:
    """(month, date) of the first point where balance <= target, within the deadline"""
    if plan.starting_balance <= target:
        hit = (0, plan.start_date)
    else:
        hit = next(
            ((item.month, item.date) for item in plan.schedule if item.remaining_balance <= target),
            None,
        )
    if hit is None:
        return None
    if deadline is not None and hit[1] > deadline:
        return None
    return hit


def evaluate_milestone(milestone: Milestone, plan: Optional[RepaymentPlan]) -> Optional[Tuple[int, date]]:
    """Where the plan satisfies the milestone, or None"""
    target = _validate(milestone)
    if plan is None:
        return None
    return _first_hit(plan, target, milestone.target_date)


def track_milestones(milestones: Sequence[Milestone], plan_result: PlanResult) -> MilestoneReport:
    """
    Advance milestones against a newer plan.

    State machine: pending -> achieved (terminal).
    - satisfied: achieved, with the achieved date/month from this plan (may move
      earlier or later than a previous run)
    - not satisfied, still pending: stays pending
    - not satisfied, previously achieved: stays achieved with its old date and an
      InconsistentHistoryWarning is reported; resolving it is up to the caller
    """
    updated: List[Milestone] = []
    warnings: List[InconsistentHistoryWarning] = []

    for milestone in milestones:
        hit = evaluate_milestone(milestone, plan_result.plan_for(milestone.debt_id))

        if hit is not None:
            month, achieved_on = hit
            updated.append(
                replace(
                    milestone,
                    status=MilestoneStatus.ACHIEVED,
                    achieved_date=achieved_on,
                    achieved_month=month,
                )
            )
            continue

        if milestone.is_achieved:
            warnings.append(
                InconsistentHistoryWarning(
                    milestone_id=milestone.id,
                    debt_id=milestone.debt_id,
                    previous_achieved_date=milestone.achieved_date,
                )
            )
        updated.append(milestone)

    return MilestoneReport(milestones=tuple(updated), warnings=tuple(warnings))


def progress_milestones(
    debts: Sequence[Debt],
    thresholds: Sequence[int] = DEFAULT_PROGRESS_THRESHOLDS,
) -> List[Milestone]:
    """Pending balance-target milestones at each percent of the current balance paid off"""
    if any(not 0 < pct <= 100 for pct in thresholds):
        raise InvalidMilestoneError("Progress thresholds must be within (0, 100]")

    milestones = []
    for debt in debts:
        if not debt.is_active:
            continue
        for pct in sorted(set(thresholds)):
            remaining = quantize(debt.balance * (100 - pct) / 100)
            milestones.append(
                Milestone(
                    id=f"{debt.id}-{pct}pct",
                    debt_id=debt.id,
                    target_amount=remaining,
                    label=f"{pct}% of {debt.name or debt.id} paid off",
                )
            )
    return milestones

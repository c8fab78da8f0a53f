"""POST /v1/milestones/track - advance milestones against a freshly computed plan"""

import logging

from fastapi import APIRouter, Depends, HTTPException, Request

from debt_planner.api.v1.plans import run_plan
from debt_planner.api.v1.schemas import (
    InconsistentHistorySchema,
    MilestoneSchema,
    MilestoneTrackRequest,
    MilestoneTrackResponse,
)
from debt_planner.api.dependencies import get_request_id, get_settings
from debt_planner.config import Settings
from debt_planner.domain.exceptions import DomainException
from debt_planner.domain.milestones import progress_milestones, track_milestones

router = APIRouter()


@router.post("/milestones/track", response_model=MilestoneTrackResponse)
def track(
    body: MilestoneTrackRequest,
    request: Request,
    config: Settings = Depends(get_settings),
):
    """
    Compute the plan, then evaluate each milestone against its debt's schedule.

    Previously achieved milestones the new plan no longer meets stay achieved
    and come back as warnings.
    """
    request_id = get_request_id(request)

    try:
        plan_result = run_plan(body.plan, config)
        milestones = [m.to_domain() for m in body.milestones]
        if body.include_progress:
            known = {m.id for m in milestones}
            milestones += [
                m for m in progress_milestones(body.plan.domain_debts()) if m.id not in known
            ]
        report = track_milestones(milestones, plan_result)
    except DomainException as e:
        logging.warning(f"Milestone tracking rejected: {e}", extra={"request_id": request_id})
        raise HTTPException(status_code=422, detail=e.to_dict())

    for warning in report.warnings:
        logging.warning(
            "Milestone no longer satisfied by current plan",
            extra={
                "request_id": request_id,
                "milestone_id": warning.milestone_id,
                "debt_id": warning.debt_id,
            },
        )

    return MilestoneTrackResponse(
        milestones=[MilestoneSchema.model_validate(m) for m in report.milestones],
        warnings=[InconsistentHistorySchema.model_validate(w) for w in report.warnings],
    )

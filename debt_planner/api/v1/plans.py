"""POST /v1/plans - repayment plan under a strategy, strategy comparison and extra-payment projections"""

import time
import logging

from fastapi import APIRouter, Depends, HTTPException, Request

from debt_planner.api.v1.schemas import (
    CompareRequest,
    CompareResponse,
    ExtraPaymentRequest,
    ExtraPaymentResponse,
    PlanRequest,
    PlanResponse,
    ProjectionSchema,
    StrategySummary,
)
from debt_planner.api.dependencies import get_request_id, get_settings
from debt_planner.config import Settings
from debt_planner.domain.allocator import build_repayment_plan, compare_strategies, extra_payment_scenarios
from debt_planner.domain.exceptions import DomainException
from debt_planner.domain.models import PlanResult
from debt_planner.infrastructure.observability.logging import log_plan
from debt_planner.infrastructure.observability.metrics import record_plan, record_scenario

router = APIRouter()


def run_plan(body: PlanRequest, config: Settings) -> PlanResult:
    """Build a plan from a validated request; shared with the milestone endpoint"""
    return build_repayment_plan(
        body.domain_debts(),
        body.strategy,
        body.monthly_budget,
        custom_order=body.custom_order,
        hybrid_weights=body.hybrid_weights or config.hybrid_weights,
        max_months=config.max_months,
        start_date=body.start_date,
    )


@router.post("/plans", response_model=PlanResponse)
def create_plan(
    body: PlanRequest,
    request: Request,
    config: Settings = Depends(get_settings),
):
    """
    Simulate the debt portfolio month by month under the chosen strategy.

    Flow:
    1. Order debts by strategy (or the caller's custom order)
    2. Check the budget covers every minimum payment
    3. Cascade surplus to the highest-priority debt until all are retired
    4. Compare against the proportional-split baseline
    """
    start_time = time.time()
    request_id = get_request_id(request)

    try:
        result = run_plan(body, config)
    except DomainException as e:
        record_plan(body.strategy.value, None, e.kind)
        logging.warning(f"Plan rejected: {e}", extra={"request_id": request_id, "kind": e.kind})
        raise HTTPException(status_code=422, detail=e.to_dict())

    duration_ms = (time.time() - start_time) * 1000
    record_plan(result.strategy.value, result.projection.total_months)
    log_plan(
        request_id,
        result.strategy.value,
        len(result.plans),
        result.projection.total_months,
        str(result.projection.total_interest),
        duration_ms,
    )

    return PlanResponse.model_validate(result)


@router.post("/plans/compare", response_model=CompareResponse)
def compare_plans(
    body: CompareRequest,
    request: Request,
    config: Settings = Depends(get_settings),
):
    """Run avalanche, snowball and hybrid on the same debts and recommend the cheapest"""
    request_id = get_request_id(request)

    try:
        comparison = compare_strategies(
            [d.to_domain() for d in body.debts],
            body.monthly_budget,
            hybrid_weights=body.hybrid_weights or config.hybrid_weights,
            max_months=config.max_months,
            start_date=body.start_date,
        )
    except DomainException as e:
        record_plan("compare", None, e.kind)
        logging.warning(f"Comparison rejected: {e}", extra={"request_id": request_id, "kind": e.kind})
        raise HTTPException(status_code=422, detail=e.to_dict())

    for result in comparison.results:
        record_plan(result.strategy.value, result.projection.total_months)

    return CompareResponse(
        recommended=comparison.recommended,
        strategies=[
            StrategySummary(
                strategy=result.strategy,
                priority_order=result.priority_order,
                projection=ProjectionSchema.model_validate(result.projection),
            )
            for result in comparison.results
        ],
    )


@router.post("/plans/extra-payments", response_model=ExtraPaymentResponse)
def project_extra_payments(
    body: ExtraPaymentRequest,
    request: Request,
    config: Settings = Depends(get_settings),
):
    """Payoff date and interest at each extra monthly amount, against the current budget"""
    request_id = get_request_id(request)

    try:
        report = extra_payment_scenarios(
            [d.to_domain() for d in body.debts],
            body.monthly_budget,
            body.extra_amounts,
            strategy=body.strategy,
            custom_order=body.custom_order,
            hybrid_weights=body.hybrid_weights or config.hybrid_weights,
            max_months=config.max_months,
            start_date=body.start_date,
        )
    except DomainException as e:
        record_scenario("extra_payments", e.kind)
        logging.warning(f"Extra-payment projection rejected: {e}", extra={"request_id": request_id})
        raise HTTPException(status_code=422, detail=e.to_dict())

    record_scenario("extra_payments")
    return ExtraPaymentResponse.model_validate(report)

"""POST /v1/debt-to-income - ratio, risk tier and improvement suggestions"""

import logging

from fastapi import APIRouter, Depends, HTTPException, Request

from debt_planner.api.v1.schemas import DebtToIncomeRequest, DebtToIncomeResponse
from debt_planner.api.dependencies import get_request_id, get_settings
from debt_planner.config import Settings
from debt_planner.domain.exceptions import DomainException
from debt_planner.domain.risk import assess_debt_to_income, assess_debts
from debt_planner.infrastructure.observability.metrics import record_scenario

router = APIRouter()


@router.post("/debt-to-income", response_model=DebtToIncomeResponse)
def debt_to_income(
    body: DebtToIncomeRequest,
    request: Request,
    config: Settings = Depends(get_settings),
):
    """
    Assess debt-to-income risk.

    Uses the minimum payments of the supplied debts, or total_monthly_payments
    when no debts are given.
    """
    try:
        if body.debts is not None:
            assessment = assess_debts(
                [d.to_domain() for d in body.debts],
                body.monthly_income,
                thresholds=config.risk_thresholds,
                target_ratio=config.dti_target_ratio,
            )
        else:
            assessment = assess_debt_to_income(
                body.total_monthly_payments,
                body.monthly_income,
                thresholds=config.risk_thresholds,
                target_ratio=config.dti_target_ratio,
            )
    except DomainException as e:
        record_scenario("debt_to_income", e.kind)
        logging.warning(f"Debt-to-income rejected: {e}", extra={"request_id": get_request_id(request)})
        raise HTTPException(status_code=422, detail=e.to_dict())

    record_scenario("debt_to_income")
    return DebtToIncomeResponse.model_validate(assessment)

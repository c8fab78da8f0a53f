"""POST /v1/consolidation, /v1/refinance and /v1/loans/compare - replacement loan what-ifs"""

import logging

from fastapi import APIRouter, Depends, HTTPException, Request

from debt_planner.api.v1.schemas import (
    ConsolidationRequest,
    ConsolidationResponse,
    LoanCompareRequest,
    LoanCompareResponse,
    LoanQuoteSchema,
    RefinanceRequest,
)
from debt_planner.api.dependencies import get_request_id, get_settings
from debt_planner.config import Settings
from debt_planner.domain.consolidation import analyze_consolidation, analyze_refinance, compare_loans
from debt_planner.domain.exceptions import DomainException
from debt_planner.infrastructure.observability.metrics import record_scenario

router = APIRouter()


@router.post("/consolidation", response_model=ConsolidationResponse)
def consolidate(
    body: ConsolidationRequest,
    request: Request,
    config: Settings = Depends(get_settings),
):
    """
    Compare the included debts on their own terms against one consolidated loan.

    A negative net_savings means consolidation costs more; it is returned as-is.
    """
    try:
        scenario = analyze_consolidation(
            [d.to_domain() for d in body.debts],
            body.new_rate,
            body.term_months,
            fees=body.fees,
            accelerated_payments=body.accelerated_payments,
            max_months=config.max_months,
            start_date=body.start_date,
        )
    except DomainException as e:
        record_scenario("consolidation", e.kind)
        logging.warning(f"Consolidation rejected: {e}", extra={"request_id": get_request_id(request)})
        raise HTTPException(status_code=422, detail=e.to_dict())

    record_scenario("consolidation")
    return ConsolidationResponse.model_validate(scenario)


@router.post("/refinance", response_model=ConsolidationResponse)
def refinance(
    body: RefinanceRequest,
    request: Request,
    config: Settings = Depends(get_settings),
):
    """Refinance one debt at a new rate and term, with closing costs and break-even months"""
    try:
        scenario = analyze_refinance(
            body.debt.to_domain(),
            body.new_rate,
            body.term_months,
            closing_costs=body.closing_costs,
            accelerated_payment=body.accelerated_payment,
            max_months=config.max_months,
            start_date=body.start_date,
        )
    except DomainException as e:
        record_scenario("refinance", e.kind)
        logging.warning(f"Refinance rejected: {e}", extra={"request_id": get_request_id(request)})
        raise HTTPException(status_code=422, detail=e.to_dict())

    record_scenario("refinance")
    return ConsolidationResponse.model_validate(scenario)


@router.post("/loans/compare", response_model=LoanCompareResponse)
def compare_loan_offers(
    body: LoanCompareRequest,
    request: Request,
    config: Settings = Depends(get_settings),
):
    """Quote each offer at its annuity payment; best is the lowest total cost"""
    try:
        comparison = compare_loans(
            [offer.to_domain() for offer in body.offers],
            max_months=config.max_months,
            start_date=body.start_date,
        )
    except DomainException as e:
        record_scenario("loan_comparison", e.kind)
        logging.warning(f"Loan comparison rejected: {e}", extra={"request_id": get_request_id(request)})
        raise HTTPException(status_code=422, detail=e.to_dict())

    record_scenario("loan_comparison")
    return LoanCompareResponse(
        best=comparison.best,
        quotes=[
            LoanQuoteSchema(
                name=quote.offer.name,
                amount=quote.offer.amount,
                annual_rate=quote.offer.annual_rate,
                term_months=quote.offer.term_months,
                fees=quote.offer.fees,
                monthly_payment=quote.monthly_payment,
                months=quote.months,
                total_interest=quote.total_interest,
                total_cost=quote.total_cost,
            )
            for quote in comparison.quotes
        ],
    )

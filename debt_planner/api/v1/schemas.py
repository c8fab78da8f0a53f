"""Pydantic schemas for API request/response validation"""

from datetime import date
from decimal import Decimal
from typing import Dict, List, Optional, Tuple

from pydantic import BaseModel, ConfigDict, Field, model_validator

from debt_planner.domain.models import Debt, LoanOffer, Milestone, MilestoneStatus, RiskTier, Strategy


class DebtSchema(BaseModel):
    """Debt record as supplied by the caller"""

    id: str = Field(..., min_length=1, description="Debt identifier")
    balance: Decimal = Field(..., ge=0, description="Current principal balance")
    annual_rate: Decimal = Field(..., ge=0, description="APR as a decimal fraction, 0.199 = 19.9%")
    minimum_payment: Decimal = Field(..., ge=0)
    term_months: Optional[int] = Field(None, gt=0)
    extra_payment: Decimal = Field(Decimal("0"), ge=0)
    name: Optional[str] = None

    def to_domain(self) -> Debt:
        return Debt(**self.model_dump())


class PlanRequest(BaseModel):
    """Request body for POST /v1/plans"""

    debts: List[DebtSchema] = Field(..., min_length=1)
    strategy: Strategy
    monthly_budget: Decimal = Field(..., ge=0)
    custom_order: Optional[List[str]] = None
    hybrid_weights: Optional[Tuple[Decimal, Decimal]] = None
    start_date: Optional[date] = None

    def domain_debts(self) -> List[Debt]:
        return [d.to_domain() for d in self.debts]


class ScheduleItemSchema(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    month: int
    date: date
    payment: Decimal
    principal: Decimal
    interest: Decimal
    remaining_balance: Decimal
    extra_payment: Decimal


class RepaymentPlanSchema(BaseModel):
    """One debt's trajectory"""

    model_config = ConfigDict(from_attributes=True)

    debt_id: str
    priority_rank: int
    starting_balance: Decimal
    months_to_payoff: int
    payoff_date: Optional[date]
    total_interest: Decimal
    total_paid: Decimal
    total_extra_payment: Decimal
    schedule: List[ScheduleItemSchema]


class ProjectionSchema(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    total_months: int
    total_interest: Decimal
    total_paid: Decimal
    debt_free_date: Optional[date]
    baseline_total_interest: Optional[Decimal]
    baseline_total_months: Optional[int]
    interest_saved: Optional[Decimal]
    months_saved: Optional[int]


class PlanResponse(BaseModel):
    """Response for POST /v1/plans"""

    model_config = ConfigDict(from_attributes=True)

    strategy: Strategy
    monthly_budget: Decimal
    start_date: date
    plans: List[RepaymentPlanSchema]
    projection: ProjectionSchema


class CompareRequest(BaseModel):
    """Request body for POST /v1/plans/compare"""

    debts: List[DebtSchema] = Field(..., min_length=1)
    monthly_budget: Decimal = Field(..., ge=0)
    hybrid_weights: Optional[Tuple[Decimal, Decimal]] = None
    start_date: Optional[date] = None


class StrategySummary(BaseModel):
    strategy: Strategy
    priority_order: List[str]
    projection: ProjectionSchema


class CompareResponse(BaseModel):
    recommended: Strategy
    strategies: List[StrategySummary]


class ExtraPaymentRequest(BaseModel):
    """Request body for POST /v1/plans/extra-payments"""

    debts: List[DebtSchema] = Field(..., min_length=1)
    monthly_budget: Decimal = Field(..., ge=0)
    extra_amounts: List[Decimal] = Field(..., min_length=1, description="Extra monthly amounts to project")
    strategy: Strategy = Strategy.AVALANCHE
    custom_order: Optional[List[str]] = None
    hybrid_weights: Optional[Tuple[Decimal, Decimal]] = None
    start_date: Optional[date] = None


class ExtraPaymentScenarioSchema(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    extra_amount: Decimal
    monthly_budget: Decimal
    total_months: int
    total_interest: Decimal
    debt_free_date: Optional[date]
    months_saved: int
    interest_saved: Decimal


class ExtraPaymentResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    strategy: Strategy
    baseline: ExtraPaymentScenarioSchema
    scenarios: List[ExtraPaymentScenarioSchema]


class ConsolidationRequest(BaseModel):
    """Request body for POST /v1/consolidation"""

    debts: List[DebtSchema] = Field(..., min_length=1)
    new_rate: Decimal
    term_months: int
    fees: Decimal = Decimal("0")
    accelerated_payments: Optional[Dict[str, Decimal]] = None
    start_date: Optional[date] = None


class RefinanceRequest(BaseModel):
    """Request body for POST /v1/refinance"""

    debt: DebtSchema
    new_rate: Decimal
    term_months: int
    closing_costs: Decimal = Decimal("0")
    accelerated_payment: Optional[Decimal] = None
    start_date: Optional[date] = None


class ConsolidationResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    debt_ids: List[str]
    combined_balance: Decimal
    original_monthly_payment: Decimal
    original_total_interest: Decimal
    original_months: int
    new_rate: Decimal
    new_term_months: int
    fees: Decimal
    new_monthly_payment: Decimal
    new_total_interest: Decimal
    new_months: int
    net_savings: Decimal
    monthly_payment_change: Decimal
    break_even_months: Optional[int]
    is_favorable: bool


class LoanOfferSchema(BaseModel):
    name: str = Field(..., min_length=1)
    amount: Decimal
    annual_rate: Decimal
    term_months: int
    fees: Decimal = Decimal("0")

    def to_domain(self) -> LoanOffer:
        return LoanOffer(**self.model_dump())


class LoanCompareRequest(BaseModel):
    """Request body for POST /v1/loans/compare"""

    offers: List[LoanOfferSchema] = Field(..., min_length=1)
    start_date: Optional[date] = None


class LoanQuoteSchema(BaseModel):
    name: str
    amount: Decimal
    annual_rate: Decimal
    term_months: int
    fees: Decimal
    monthly_payment: Decimal
    months: int
    total_interest: Decimal
    total_cost: Decimal


class LoanCompareResponse(BaseModel):
    best: str
    quotes: List[LoanQuoteSchema]


class DebtToIncomeRequest(BaseModel):
    """Request body for POST /v1/debt-to-income; debts or total_monthly_payments"""

    monthly_income: Decimal
    debts: Optional[List[DebtSchema]] = None
    total_monthly_payments: Optional[Decimal] = Field(None, ge=0)

    @model_validator(mode="after")
    def require_payments(self) -> "DebtToIncomeRequest":
        if self.debts is None and self.total_monthly_payments is None:
            raise ValueError("Provide debts or total_monthly_payments")
        return self


class SuggestionSchema(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    code: str
    title: str
    impact: int
    difficulty: str
    amount: Optional[Decimal] = None


class DebtToIncomeResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    total_monthly_payments: Decimal
    monthly_income: Decimal
    ratio: Decimal
    risk_tier: RiskTier
    target_ratio: Decimal
    gap_to_target: Decimal
    payment_reduction_needed: Decimal
    income_increase_needed: Decimal
    suggestions: List[SuggestionSchema]


class MilestoneSchema(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    debt_id: str
    target_amount: Optional[Decimal] = Field(None, ge=0)
    target_date: Optional[date] = None
    status: MilestoneStatus = MilestoneStatus.PENDING
    achieved_date: Optional[date] = None
    achieved_month: Optional[int] = None
    label: Optional[str] = None

    def to_domain(self) -> Milestone:
        return Milestone(**self.model_dump())


class MilestoneTrackRequest(BaseModel):
    """Request body for POST /v1/milestones/track"""

    plan: PlanRequest
    milestones: List[MilestoneSchema] = Field(default_factory=list)
    include_progress: bool = Field(False, description="Add percent-paid-off milestones per debt")


class InconsistentHistorySchema(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    milestone_id: str
    debt_id: str
    previous_achieved_date: Optional[date]


class MilestoneTrackResponse(BaseModel):
    milestones: List[MilestoneSchema]
    warnings: List[InconsistentHistorySchema]

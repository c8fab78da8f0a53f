"""Domain models - immutable value records produced fresh per simulation"""

from dataclasses import dataclass, field
from datetime import date
from decimal import Decimal
from enum import Enum
from typing import List, Optional, Tuple

from debt_planner.domain.exceptions import InvalidDebtError, InvalidRateError, InvalidTermError
from debt_planner.utils.money import ZERO, to_decimal, to_money


class Strategy(str, Enum):
    """Repayment priority strategies"""

    AVALANCHE = "avalanche"
    SNOWBALL = "snowball"
    HYBRID = "hybrid"
    CUSTOM = "custom"


class RiskTier(str, Enum):
    LOW = "low"
    MODERATE = "moderate"
    HIGH = "high"
    SEVERE = "severe"


class MilestoneStatus(str, Enum):
    PENDING = "pending"
    ACHIEVED = "achieved"


@dataclass(frozen=True)
class Debt:
    """
    A liability being tracked.

    Amounts are normalized to Decimal on construction: balance, minimum and
    extra payment are quantized to the minor unit, the annual rate is kept at
    full precision (0.199 means 19.9% APR).
    """

    id: str
    balance: Decimal
    annual_rate: Decimal
    minimum_payment: Decimal
    term_months: Optional[int] = None
    extra_payment: Decimal = ZERO
    name: Optional[str] = None

    def __post_init__(self) -> None:
        object.__setattr__(self, "id", str(self.id))
        object.__setattr__(self, "balance", to_money(self.balance))
        object.__setattr__(self, "annual_rate", to_decimal(self.annual_rate))
        object.__setattr__(self, "minimum_payment", to_money(self.minimum_payment))
        object.__setattr__(self, "extra_payment", to_money(self.extra_payment))

        if self.balance < 0:
            raise InvalidDebtError(f"Debt {self.id}: balance must be >= 0")
        if self.annual_rate < 0:
            raise InvalidRateError(f"Debt {self.id}: annual rate must be >= 0")
        if self.minimum_payment < 0:
            raise InvalidDebtError(f"Debt {self.id}: minimum payment must be >= 0")
        if self.extra_payment < 0:
            raise InvalidDebtError(f"Debt {self.id}: extra payment must be >= 0")
        if self.term_months is not None and self.term_months <= 0:
            raise InvalidDebtError(f"Debt {self.id}: loan term must be positive")

    @property
    def is_active(self) -> bool:
        return self.balance > 0


@dataclass(frozen=True)
class PaymentScheduleItem:
    """One simulated month for one debt"""

    month: int  # 1-based
    date: date
    payment: Decimal
    principal: Decimal
    interest: Decimal
    remaining_balance: Decimal
    extra_payment: Decimal = ZERO


@dataclass(frozen=True)
class RepaymentPlan:
    """One debt's full trajectory under a strategy"""

    debt_id: str
    priority_rank: int
    starting_balance: Decimal
    start_date: date
    schedule: Tuple[PaymentScheduleItem, ...]
    total_interest: Decimal
    total_paid: Decimal
    total_extra_payment: Decimal

    @property
    def months_to_payoff(self) -> int:
        return len(self.schedule)

    @property
    def payoff_date(self) -> Optional[date]:
        return self.schedule[-1].date if self.schedule else None


@dataclass(frozen=True)
class AggregateProjection:
    """Portfolio-level rollup of a plan, with savings against the proportional baseline"""

    total_months: int
    total_interest: Decimal
    total_paid: Decimal
    debt_free_date: Optional[date]
    baseline_total_interest: Optional[Decimal]
    baseline_total_months: Optional[int]
    interest_saved: Optional[Decimal]
    months_saved: Optional[int]


@dataclass(frozen=True)
class PlanResult:
    """Output of the strategy allocator: per-debt plans (priority order) and the rollup"""

    strategy: Strategy
    monthly_budget: Decimal
    start_date: date
    plans: Tuple[RepaymentPlan, ...]
    projection: AggregateProjection

    def plan_for(self, debt_id: str) -> Optional[RepaymentPlan]:
        for plan in self.plans:
            if plan.debt_id == debt_id:
                return plan
        return None

    @property
    def priority_order(self) -> List[str]:
        return [plan.debt_id for plan in self.plans]

    def balance_curve(self) -> List[Tuple[date, Decimal]]:
        """Total outstanding balance after each simulated month"""
        curve = []
        for month_index in range(self.projection.total_months):
            month_date = None
            total = ZERO
            for plan in self.plans:
                if month_index < len(plan.schedule):
                    item = plan.schedule[month_index]
                    month_date = item.date
                    total += item.remaining_balance
            curve.append((month_date, total))
        return curve


@dataclass(frozen=True)
class StrategyComparison:
    """Every built-in strategy run on the same debts and budget"""

    results: Tuple[PlanResult, ...]
    recommended: Strategy

    def result_for(self, strategy: Strategy) -> PlanResult:
        for result in self.results:
            if result.strategy == strategy:
                return result
        raise KeyError(strategy)


@dataclass(frozen=True)
class ConsolidationScenario:
    """A hypothetical replacement loan for a subset of debts"""

    debt_ids: Tuple[str, ...]
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

    @property
    def is_favorable(self) -> bool:
        return self.net_savings > 0


@dataclass(frozen=True)
class LoanOffer:
    """One loan offer to compare: principal, APR, term and up-front fees"""

    name: str
    amount: Decimal
    annual_rate: Decimal
    term_months: int
    fees: Decimal = ZERO

    def __post_init__(self) -> None:
        object.__setattr__(self, "name", str(self.name))
        object.__setattr__(self, "amount", to_money(self.amount))
        object.__setattr__(self, "annual_rate", to_decimal(self.annual_rate))
        object.__setattr__(self, "fees", to_money(self.fees))

        if self.amount <= 0:
            raise InvalidDebtError(f"Loan {self.name}: amount must be positive")
        if self.annual_rate < 0:
            raise InvalidRateError(f"Loan {self.name}: annual rate must be >= 0")
        if self.term_months <= 0:
            raise InvalidTermError(f"Loan {self.name}: term must be a positive number of months")
        if self.fees < 0:
            raise InvalidDebtError(f"Loan {self.name}: fees must be >= 0")


@dataclass(frozen=True)
class LoanQuote:
    """Cost of a loan offer when paid at its level annuity payment"""

    offer: LoanOffer
    monthly_payment: Decimal
    months: int
    total_interest: Decimal
    total_cost: Decimal  # principal + interest + fees


@dataclass(frozen=True)
class LoanComparison:
    quotes: Tuple[LoanQuote, ...]
    best: str

    def quote_for(self, name: str) -> LoanQuote:
        for quote in self.quotes:
            if quote.offer.name == name:
                return quote
        raise KeyError(name)


@dataclass(frozen=True)
class ExtraPaymentScenario:
    """Portfolio payoff with a fixed extra amount added to the monthly budget"""

    extra_amount: Decimal
    monthly_budget: Decimal
    total_months: int
    total_interest: Decimal
    debt_free_date: Optional[date]
    months_saved: int
    interest_saved: Decimal


@dataclass(frozen=True)
class ExtraPaymentReport:
    """Baseline (no extra) plus one scenario per extra amount, in the order given"""

    strategy: Strategy
    baseline: ExtraPaymentScenario
    scenarios: Tuple[ExtraPaymentScenario, ...]


@dataclass(frozen=True)
class ImprovementSuggestion:
    """Deterministic recommendation attached to a debt-to-income assessment"""

    code: str
    title: str
    impact: int  # 1 (low) .. 3 (high)
    difficulty: str  # "easy" | "medium" | "hard"
    amount: Optional[Decimal] = None


@dataclass(frozen=True)
class DebtToIncomeAssessment:
    """Ratio of monthly debt payments to monthly income, tiered"""

    total_monthly_payments: Decimal
    monthly_income: Decimal
    ratio: Decimal
    risk_tier: RiskTier
    target_ratio: Decimal
    gap_to_target: Decimal
    payment_reduction_needed: Decimal
    income_increase_needed: Decimal
    suggestions: Tuple[ImprovementSuggestion, ...] = field(default_factory=tuple)


@dataclass(frozen=True)
class Milestone:
    """Target balance and/or target date for one debt"""

    id: str
    debt_id: str
    target_amount: Optional[Decimal] = None
    target_date: Optional[date] = None
    status: MilestoneStatus = MilestoneStatus.PENDING
    achieved_date: Optional[date] = None
    achieved_month: Optional[int] = None
    label: Optional[str] = None

    @property
    def is_achieved(self) -> bool:
        return self.status == MilestoneStatus.ACHIEVED


@dataclass(frozen=True)
class InconsistentHistoryWarning:
    """A previously achieved milestone the newer plan no longer satisfies"""

    milestone_id: str
    debt_id: str
    previous_achieved_date: Optional[date]


@dataclass(frozen=True)
class MilestoneReport:
    milestones: Tuple[Milestone, ...]
    warnings: Tuple[InconsistentHistoryWarning, ...]

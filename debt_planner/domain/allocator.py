"""Strategy allocator - month-by-month portfolio simulation with cascading surplus"""

import logging
from dataclasses import dataclass, field
from datetime import date
from decimal import Decimal
from typing import Callable, List, Sequence, Tuple

from debt_planner.domain.amortization import DEFAULT_MAX_MONTHS
from debt_planner.domain.exceptions import (
    InsufficientBudgetError,
    InvalidDebtError,
    InvalidTermError,
    NonConvergentError,
)
from debt_planner.domain.models import (
    AggregateProjection,
    Debt,
    ExtraPaymentReport,
    ExtraPaymentScenario,
    PaymentScheduleItem,
    PlanResult,
    RepaymentPlan,
    Strategy,
    StrategyComparison,
)
from debt_planner.domain.strategies import DEFAULT_HYBRID_WEIGHTS, order_debts
from debt_planner.utils.date_utils import add_months, first_of_next_month
from debt_planner.utils.money import ZERO, Number, monthly_interest, quantize, to_money

# Strategies run by compare_strategies, in tie-break order
COMPARED_STRATEGIES = (Strategy.AVALANCHE, Strategy.SNOWBALL, Strategy.HYBRID)


@dataclass
class _DebtState:
    """Mutable per-debt simulation state, one slot per debt in priority order"""

    debt: Debt
    rank: int
    balance: Decimal
    items: List[PaymentScheduleItem] = field(default_factory=list)
    total_interest: Decimal = ZERO
    total_paid: Decimal = ZERO
    total_extra: Decimal = ZERO


SurplusSplit = Callable[[List[_DebtState], Decimal], List[Decimal]]


def _cascade_split(active: List[_DebtState], surplus: Decimal) -> List[Decimal]:
    """Entire surplus to the highest-priority active debt"""
    return [surplus] + [ZERO] * (len(active) - 1)


def _proportional_split(active: List[_DebtState], surplus: Decimal) -> List[Decimal]:
    """Surplus split by share of outstanding balance; rounding remainder to the largest balance"""
    total_balance = sum(s.balance for s in active)
    shares = [quantize(surplus * s.balance / total_balance) for s in active]
    largest = max(range(len(active)), key=lambda i: active[i].balance)
    shares[largest] += surplus - sum(shares)
    return shares


def _check_budget(debts: Sequence[Debt], budget: Decimal) -> None:
    total_minimum = sum((d.minimum_payment for d in debts if d.is_active), ZERO)
    if total_minimum > budget:
        raise InsufficientBudgetError(total_minimum, budget)


def _simulate_portfolio(
    ordered: Sequence[Debt],
    budget: Decimal,
    max_months: int,
    start_date: date,
    split_surplus: SurplusSplit,
) -> List[_DebtState]:
    """
    Discrete-time loop over a flat priority array of debt states.

    Each month:
    - every active debt gets its minimum payment (clamped to balance + interest)
    - budget - sum(active minimums) is distributed by split_surplus
    - a debt retired this month drops out of the active set, so its minimum
      joins the surplus from the following month
    """
    states = [_DebtState(debt=d, rank=i + 1, balance=d.balance) for i, d in enumerate(ordered)]

    month = 0
    while True:
        active = [s for s in states if s.balance > 0]
        if not active:
            return states

        month += 1
        if month > max_months:
            raise NonConvergentError(
                [s.debt.id for s in active],
                f"portfolio not retired within {max_months} months",
            )

        payment_date = add_months(start_date, month - 1)
        surplus = budget - sum(s.debt.minimum_payment for s in active)
        extras = split_surplus(active, surplus)

        # Nothing left to cascade: the last debt's balance can only grow
        if len(active) == 1:
            last = active[0]
            interest = monthly_interest(last.balance, last.debt.annual_rate)
            if last.debt.minimum_payment + extras[0] <= interest:
                raise NonConvergentError(
                    [last.debt.id],
                    f"budget {budget} does not cover monthly interest {interest}",
                )

        for state, extra in zip(active, extras):
            interest = monthly_interest(state.balance, state.debt.annual_rate)
            payment = min(state.debt.minimum_payment + extra, state.balance + interest)
            # Negative when a minimum below the month's interest capitalizes it
            principal = payment - interest
            state.balance -= principal
            extra_applied = min(extra, max(payment - state.debt.minimum_payment, ZERO))

            state.items.append(
                PaymentScheduleItem(
                    month=month,
                    date=payment_date,
                    payment=payment,
                    principal=principal,
                    interest=interest,
                    remaining_balance=state.balance,
                    extra_payment=extra_applied,
                )
            )
            state.total_interest += interest
            state.total_paid += payment
            state.total_extra += extra_applied


def _portfolio_totals(states: List[_DebtState]) -> Tuple[Decimal, int]:
    total_interest = sum((s.total_interest for s in states), ZERO)
    total_months = max((len(s.items) for s in states), default=0)
    return total_interest, total_months


def build_repayment_plan(
    debts: Sequence[Debt],
    strategy: Strategy | str,
    monthly_budget: Number,
    custom_order: Sequence[str] | None = None,
    hybrid_weights: Tuple[Number, Number] = DEFAULT_HYBRID_WEIGHTS,
    max_months: int = DEFAULT_MAX_MONTHS,
    start_date: date | None = None,
) -> PlanResult:
    """
    Allocate a monthly budget across debts under a strategy.

    Flow:
    1. Order debts by strategy (fixed for the whole run)
    2. Reject budgets below the sum of minimum payments (InsufficientBudgetError)
    3. Simulate the cascade month by month until every debt is retired
    4. Simulate the proportional-split baseline for the savings comparison
    5. Roll up per-debt plans into an AggregateProjection

    Returns:
        PlanResult with plans in priority order
    """
    strategy = Strategy(strategy)
    budget = to_money(monthly_budget)
    if max_months <= 0:
        raise InvalidTermError(f"max_months must be positive, got {max_months}")
    if start_date is None:
        start_date = first_of_next_month(date.today())

    ordered = order_debts(debts, strategy, custom_order=custom_order, hybrid_weights=hybrid_weights)
    _check_budget(ordered, budget)

    states = _simulate_portfolio(ordered, budget, max_months, start_date, _cascade_split)
    total_interest, total_months = _portfolio_totals(states)

    baseline_interest: Decimal | None = None
    baseline_months: int | None = None
    try:
        baseline = _simulate_portfolio(ordered, budget, max_months, start_date, _proportional_split)
        baseline_interest, baseline_months = _portfolio_totals(baseline)
    except NonConvergentError as e:
        logging.warning(
            f"Proportional baseline did not converge: {e}",
            extra={"strategy": strategy.value, "debt_ids": list(e.debt_ids)},
        )

    plans = tuple(
        RepaymentPlan(
            debt_id=s.debt.id,
            priority_rank=s.rank,
            starting_balance=s.debt.balance,
            start_date=start_date,
            schedule=tuple(s.items),
            total_interest=s.total_interest,
            total_paid=s.total_paid,
            total_extra_payment=s.total_extra,
        )
        for s in states
    )

    projection = AggregateProjection(
        total_months=total_months,
        total_interest=total_interest,
        total_paid=sum((p.total_paid for p in plans), ZERO),
        debt_free_date=add_months(start_date, total_months - 1) if total_months else None,
        baseline_total_interest=baseline_interest,
        baseline_total_months=baseline_months,
        interest_saved=None if baseline_interest is None else baseline_interest - total_interest,
        months_saved=None if baseline_months is None else baseline_months - total_months,
    )

    return PlanResult(
        strategy=strategy,
        monthly_budget=budget,
        start_date=start_date,
        plans=plans,
        projection=projection,
    )


def compare_strategies(
    debts: Sequence[Debt],
    monthly_budget: Number,
    hybrid_weights: Tuple[Number, Number] = DEFAULT_HYBRID_WEIGHTS,
    max_months: int = DEFAULT_MAX_MONTHS,
    start_date: date | None = None,
) -> StrategyComparison:
    """Run avalanche, snowball and hybrid on the same inputs and pick the cheapest"""
    if start_date is None:
        start_date = first_of_next_month(date.today())

    results = tuple(
        build_repayment_plan(
            debts,
            strategy,
            monthly_budget,
            hybrid_weights=hybrid_weights,
            max_months=max_months,
            start_date=start_date,
        )
        for strategy in COMPARED_STRATEGIES
    )

    # Least interest, then fewest months; min() keeps the first on a full tie
    best = min(results, key=lambda r: (r.projection.total_interest, r.projection.total_months))
    return StrategyComparison(results=results, recommended=best.strategy)


def extra_payment_scenarios(
    debts: Sequence[Debt],
    monthly_budget: Number,
    extra_amounts: Sequence[Number],
    strategy: Strategy | str = Strategy.AVALANCHE,
    custom_order: Sequence[str] | None = None,
    hybrid_weights: Tuple[Number, Number] = DEFAULT_HYBRID_WEIGHTS,
    max_months: int = DEFAULT_MAX_MONTHS,
    start_date: date | None = None,
) -> ExtraPaymentReport:
    """
    Project payoff with each extra amount added to the monthly budget.

    Every scenario is a full build_repayment_plan run under the same strategy,
    measured against the plan at the unchanged budget.
    """
    strategy = Strategy(strategy)
    budget = to_money(monthly_budget)
    extras = [to_money(amount) for amount in extra_amounts]
    if any(extra < 0 for extra in extras):
        raise InvalidDebtError(f"Extra payment amounts must be >= 0, got {[str(e) for e in extras]}")
    if start_date is None:
        start_date = first_of_next_month(date.today())

    def project(extra: Decimal) -> AggregateProjection:
        return build_repayment_plan(
            debts,
            strategy,
            budget + extra,
            custom_order=custom_order,
            hybrid_weights=hybrid_weights,
            max_months=max_months,
            start_date=start_date,
        ).projection

    base = project(ZERO)

    def scenario(extra: Decimal, projection: AggregateProjection) -> ExtraPaymentScenario:
        return ExtraPaymentScenario(
            extra_amount=extra,
            monthly_budget=budget + extra,
            total_months=projection.total_months,
            total_interest=projection.total_interest,
            debt_free_date=projection.debt_free_date,
            months_saved=base.total_months - projection.total_months,
            interest_saved=base.total_interest - projection.total_interest,
        )

    return ExtraPaymentReport(
        strategy=strategy,
        baseline=scenario(ZERO, base),
        scenarios=tuple(scenario(extra, project(extra)) for extra in extras),
    )

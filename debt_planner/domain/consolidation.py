"""Consolidation and refinancing what-if analysis"""

import math
from collections import Counter
from datetime import date
from decimal import Decimal
from typing import Dict, List, Mapping, Optional, Sequence

from debt_planner.domain.amortization import (
    DEFAULT_MAX_MONTHS,
    annuity_payment,
    simulate_amortization,
    simulate_debt,
)
from debt_planner.domain.exceptions import (
    InvalidDebtError,
    InvalidRateError,
    InvalidTermError,
    NonConvergentError,
)
from debt_planner.domain.models import ConsolidationScenario, Debt, LoanComparison, LoanOffer, LoanQuote
from debt_planner.utils.date_utils import first_of_next_month
from debt_planner.utils.money import ZERO, Number, to_decimal, to_money


def _break_even_months(fees: Decimal, monthly_payment_change: Decimal) -> Optional[int]:
    """Months of lower payments needed to recover the up-front fees"""
    if fees == 0:
        return 0
    if monthly_payment_change <= 0:
        return None
    return math.ceil(fees / monthly_payment_change)


def analyze_consolidation(
    debts: Sequence[Debt],
    new_rate: Number,
    term_months: int,
    fees: Number = 0,
    accelerated_payments: Mapping[str, Number] | None = None,
    max_months: int = DEFAULT_MAX_MONTHS,
    start_date: date | None = None,
) -> ConsolidationScenario:
    """
    Compare keeping a set of debts against one new loan covering their balance.

    Original side: each debt simulated on its own terms, at its minimum
    payment or the accelerated payment given for its id.
    New side: one synthetic loan for the combined balance at the new rate,
    paying the annuity payment that amortizes it over term_months.

    net_savings = original interest - new interest - fees. A negative value
    means consolidating costs more; that is a result, not an error.
    """
    rate = to_decimal(new_rate)
    fee_amount = to_money(fees)

    if term_months <= 0:
        raise InvalidTermError(f"Term must be a positive number of months, got {term_months}")
    if rate < 0:
        raise InvalidRateError(f"New rate must be >= 0, got {rate}")
    if fee_amount < 0:
        raise InvalidDebtError(f"Fees must be >= 0, got {fee_amount}")
    if not debts:
        raise InvalidDebtError("Consolidation needs at least one debt")

    if start_date is None:
        start_date = first_of_next_month(date.today())
    overrides: Dict[str, Number] = dict(accelerated_payments or {})
    unknown = sorted(set(overrides) - {d.id for d in debts})
    if unknown:
        raise InvalidDebtError(f"Accelerated payments given for debts not included: {unknown}")

    original_interest = ZERO
    original_payment = ZERO
    original_months = 0
    failed: List[str] = []
    reasons: List[str] = []

    for debt in debts:
        payment = to_money(overrides.get(debt.id, debt.minimum_payment))
        try:
            schedule = simulate_debt(
                debt, monthly_payment=payment, max_months=max_months, start_date=start_date
            )
        except NonConvergentError as e:
            failed.append(debt.id)
            reasons.append(e.reason)
            continue
        original_interest += sum((item.interest for item in schedule), ZERO)
        original_months = max(original_months, len(schedule))
        if debt.is_active:
            original_payment += payment

    if failed:
        raise NonConvergentError(failed, "; ".join(reasons))

    combined_balance = sum((d.balance for d in debts), ZERO)
    new_payment = annuity_payment(combined_balance, rate, term_months)
    new_schedule = simulate_amortization(
        combined_balance,
        rate,
        new_payment,
        max_months=max(max_months, term_months),
        start_date=start_date,
    )
    new_interest = sum((item.interest for item in new_schedule), ZERO)

    payment_change = original_payment - new_payment

    return ConsolidationScenario(
        debt_ids=tuple(d.id for d in debts),
        combined_balance=combined_balance,
        original_monthly_payment=original_payment,
        original_total_interest=original_interest,
        original_months=original_months,
        new_rate=rate,
        new_term_months=term_months,
        fees=fee_amount,
        new_monthly_payment=new_payment,
        new_total_interest=new_interest,
        new_months=len(new_schedule),
        net_savings=original_interest - new_interest - fee_amount,
        monthly_payment_change=payment_change,
        break_even_months=_break_even_months(fee_amount, payment_change),
    )


def analyze_refinance(
    debt: Debt,
    new_rate: Number,
    term_months: int,
    closing_costs: Number = 0,
    accelerated_payment: Number | None = None,
    max_months: int = DEFAULT_MAX_MONTHS,
    start_date: date | None = None,
) -> ConsolidationScenario:
    """Refinance a single debt: consolidation of a one-debt set with closing costs as fees"""
    overrides = {debt.id: accelerated_payment} if accelerated_payment is not None else None
    return analyze_consolidation(
        [debt],
        new_rate,
        term_months,
        fees=closing_costs,
        accelerated_payments=overrides,
        max_months=max_months,
        start_date=start_date,
    )


def compare_loans(
    offers: Sequence[LoanOffer],
    max_months: int = DEFAULT_MAX_MONTHS,
    start_date: date | None = None,
) -> LoanComparison:
    """
    Quote each loan offer at its level annuity payment and pick the cheapest.

    total_cost = amount + simulated interest + fees. Best is the lowest total
    cost, then the lower monthly payment, then the first offer given.
    """
    if not offers:
        raise InvalidDebtError("Loan comparison needs at least one offer")
    duplicated = sorted(name for name, n in Counter(o.name for o in offers).items() if n > 1)
    if duplicated:
        raise InvalidDebtError(f"Duplicate loan offer names: {duplicated}")

    if start_date is None:
        start_date = first_of_next_month(date.today())

    quotes = []
    for offer in offers:
        payment = annuity_payment(offer.amount, offer.annual_rate, offer.term_months)
        schedule = simulate_amortization(
            offer.amount,
            offer.annual_rate,
            payment,
            max_months=max(max_months, offer.term_months),
            start_date=start_date,
        )
        interest = sum((item.interest for item in schedule), ZERO)
        quotes.append(
            LoanQuote(
                offer=offer,
                monthly_payment=payment,
                months=len(schedule),
                total_interest=interest,
                total_cost=offer.amount + interest + offer.fees,
            )
        )

    best = min(quotes, key=lambda q: (q.total_cost, q.monthly_payment))
    return LoanComparison(quotes=tuple(quotes), best=best.offer.name)

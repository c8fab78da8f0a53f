"""Single-debt amortization simulator and annuity payment solver"""

from datetime import date
from decimal import Decimal
from typing import List

from debt_planner.domain.exceptions import (
    InvalidRateError,
    InvalidTermError,
    NonConvergentError,
)
from debt_planner.domain.models import Debt, PaymentScheduleItem
from debt_planner.utils.date_utils import add_months, first_of_next_month
from debt_planner.utils.money import (
    ZERO,
    Number,
    monthly_interest,
    round_up,
    to_decimal,
    to_money,
)

DEFAULT_MAX_MONTHS = 1200


def simulate_amortization(
    balance: Number,
    annual_rate: Number,
    monthly_payment: Number,
    max_months: int = DEFAULT_MAX_MONTHS,
    extra_payment: Number = 0,
    start_date: date | None = None,
) -> List[PaymentScheduleItem]:
    """
    Simulate paying down one balance at a fixed monthly payment.

    Requirements:
    - Interest is balance * rate / 12, rounded half-even to the cent, every month
    - principal = min(payment - interest, balance); the last payment is clamped
      so nothing is overpaid
    - Payment at or below the first month's interest never converges
    - max_months is a hard cap; hitting it with a balance left is non-convergent

    Args:
        balance: Outstanding principal
        annual_rate: Decimal APR (0.18 for 18%)
        monthly_payment: Scheduled payment before extra
        max_months: Safety cap on the number of simulated months
        extra_payment: Additional principal paid on top of monthly_payment
        start_date: Date of the first payment (default: first of next month)

    Returns:
        Ordered schedule items; empty when the balance is already zero

    Example:
        1000 @ 12% paying 500/month:
        month 1: interest 10.00, principal 490.00, balance 510.00
        month 2: interest 5.10, principal 494.90, balance 15.10
        month 3: interest 0.15, principal 15.10, payment 15.25, balance 0.00
    """
    balance = to_money(balance)
    rate = to_decimal(annual_rate)
    base_payment = to_money(monthly_payment)
    extra = to_money(extra_payment)

    if rate < 0:
        raise InvalidRateError(f"Annual rate must be >= 0, got {rate}")
    if max_months <= 0:
        raise InvalidTermError(f"max_months must be positive, got {max_months}")
    if balance <= 0:
        return []

    if start_date is None:
        start_date = first_of_next_month(date.today())

    scheduled = base_payment + extra
    first_interest = monthly_interest(balance, rate)
    if scheduled <= first_interest:
        raise NonConvergentError(
            (),
            f"payment {scheduled} does not cover first month's interest {first_interest}",
        )

    schedule: List[PaymentScheduleItem] = []
    for month in range(1, max_months + 1):
        interest = monthly_interest(balance, rate)
        principal = min(scheduled - interest, balance)
        payment = principal + interest
        balance = balance - principal

        schedule.append(
            PaymentScheduleItem(
                month=month,
                date=add_months(start_date, month - 1),
                payment=payment,
                principal=principal,
                interest=interest,
                remaining_balance=balance,
                extra_payment=min(extra, max(payment - base_payment, ZERO)),
            )
        )
        if balance == 0:
            return schedule

    raise NonConvergentError((), f"balance {balance} remains after {max_months} months")


def simulate_debt(
    debt: Debt,
    monthly_payment: Number | None = None,
    max_months: int = DEFAULT_MAX_MONTHS,
    start_date: date | None = None,
) -> List[PaymentScheduleItem]:
    """Simulate a Debt at its minimum + extra payment (or an explicit payment)"""
    if monthly_payment is None:
        payment, extra = debt.minimum_payment, debt.extra_payment
    else:
        payment, extra = to_money(monthly_payment), ZERO

    try:
        return simulate_amortization(
            debt.balance,
            debt.annual_rate,
            payment,
            max_months=max_months,
            extra_payment=extra,
            start_date=start_date,
        )
    except NonConvergentError as e:
        raise NonConvergentError([debt.id], e.reason) from e


def annuity_payment(balance: Number, annual_rate: Number, term_months: int) -> Decimal:
    """
    Level payment that fully amortizes balance over term_months.

    payment = B * r / (1 - (1 + r) ** -n), or B / n when r == 0.
    Rounded up to the cent, never below the exact annuity.
    """
    balance = to_money(balance)
    rate = to_decimal(annual_rate)

    if term_months <= 0:
        raise InvalidTermError(f"Term must be a positive number of months, got {term_months}")
    if rate < 0:
        raise InvalidRateError(f"Annual rate must be >= 0, got {rate}")
    if balance <= 0:
        return ZERO

    if rate == 0:
        return round_up(balance / term_months)

    monthly_rate = rate / 12
    return round_up(balance * monthly_rate / (1 - (1 + monthly_rate) ** -term_months))

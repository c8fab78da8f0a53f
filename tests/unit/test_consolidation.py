"""Unit tests for consolidation and refinancing analysis"""

import pytest
from datetime import date
from decimal import Decimal
from debt_planner.domain.amortization import annuity_payment, simulate_debt
from debt_planner.domain.consolidation import analyze_consolidation, analyze_refinance, compare_loans
from debt_planner.domain.exceptions import (
    InvalidDebtError,
    InvalidRateError,
    InvalidTermError,
    NonConvergentError,
)
from debt_planner.domain.models import Debt, LoanOffer


@pytest.fixture
def credit_cards() -> list[Debt]:
    return [
        Debt(id="visa", balance=5000, annual_rate="0.24", minimum_payment=150),
        Debt(id="amex", balance=3000, annual_rate="0.21", minimum_payment=90),
    ]


def test_consolidating_expensive_cards_saves_money(credit_cards, start_date: date):
    scenario = analyze_consolidation(credit_cards, "0.08", 36, fees=200, start_date=start_date)

    assert scenario.debt_ids == ("visa", "amex")
    assert scenario.combined_balance == Decimal("8000.00")
    assert scenario.original_monthly_payment == Decimal("240.00")
    assert scenario.new_monthly_payment == annuity_payment(8000, "0.08", 36)
    assert scenario.net_savings == (
        scenario.original_total_interest - scenario.new_total_interest - scenario.fees
    )
    assert scenario.net_savings > 0
    assert scenario.is_favorable


def test_original_side_matches_independent_simulations(credit_cards, start_date: date):
    scenario = analyze_consolidation(credit_cards, "0.08", 36, start_date=start_date)

    schedules = [simulate_debt(d, monthly_payment=d.minimum_payment, start_date=start_date) for d in credit_cards]
    assert scenario.original_total_interest == sum(i.interest for s in schedules for i in s)
    assert scenario.original_months == max(len(s) for s in schedules)


def test_unfavorable_consolidation_reports_negative_savings(start_date: date):
    cheap = [Debt(id="auto", balance=10000, annual_rate="0.04", minimum_payment=300)]
    scenario = analyze_consolidation(cheap, "0.15", 60, fees=500, start_date=start_date)

    assert scenario.new_total_interest + scenario.fees > scenario.original_total_interest
    assert scenario.net_savings < 0
    assert not scenario.is_favorable


def test_accelerated_payment_lowers_original_interest(credit_cards, start_date: date):
    at_minimum = analyze_consolidation(credit_cards, "0.08", 36, start_date=start_date)
    accelerated = analyze_consolidation(
        credit_cards, "0.08", 36, accelerated_payments={"visa": 400}, start_date=start_date
    )
    assert accelerated.original_total_interest < at_minimum.original_total_interest
    assert accelerated.original_monthly_payment == Decimal("490.00")


def test_break_even_months(credit_cards, start_date: date):
    # New payment on a long term is below the 240 combined minimum
    scenario = analyze_consolidation(credit_cards, "0.08", 60, fees=300, start_date=start_date)
    assert scenario.monthly_payment_change > 0
    assert scenario.break_even_months >= 1

    no_fees = analyze_consolidation(credit_cards, "0.08", 60, start_date=start_date)
    assert no_fees.break_even_months == 0

    # Short term raises the payment, so fees are never recovered through lower payments
    short = analyze_consolidation(credit_cards, "0.08", 12, fees=300, start_date=start_date)
    assert short.monthly_payment_change < 0
    assert short.break_even_months is None


def test_zero_rate_consolidation(credit_cards, start_date: date):
    scenario = analyze_consolidation(credit_cards, 0, 40, start_date=start_date)
    assert scenario.new_monthly_payment == Decimal("200.00")
    assert scenario.new_total_interest == 0
    assert scenario.new_months == 40


def test_invalid_terms_rejected(credit_cards):
    with pytest.raises(InvalidTermError):
        analyze_consolidation(credit_cards, "0.08", 0)
    with pytest.raises(InvalidTermError):
        analyze_consolidation(credit_cards, "0.08", -12)
    with pytest.raises(InvalidRateError):
        analyze_consolidation(credit_cards, "-0.01", 36)
    with pytest.raises(InvalidDebtError):
        analyze_consolidation(credit_cards, "0.08", 36, fees=-1)
    with pytest.raises(InvalidDebtError):
        analyze_consolidation([], "0.08", 36)


def test_non_convergent_originals_reported_together():
    debts = [
        Debt(id="ok", balance=1000, annual_rate="0.1", minimum_payment=100),
        Debt(id="bad-1", balance=1000, annual_rate="0.30", minimum_payment=20),
        Debt(id="bad-2", balance=2000, annual_rate="0.24", minimum_payment=30),
    ]
    with pytest.raises(NonConvergentError) as exc_info:
        analyze_consolidation(debts, "0.08", 36)
    assert exc_info.value.debt_ids == ("bad-1", "bad-2")


def test_refinance_single_debt(start_date: date):
    mortgage_like = Debt(id="loan", balance=20000, annual_rate="0.095", minimum_payment=420)
    scenario = analyze_refinance(mortgage_like, "0.055", 60, closing_costs=750, start_date=start_date)

    assert scenario.debt_ids == ("loan",)
    assert scenario.fees == Decimal("750.00")
    assert scenario.new_monthly_payment == annuity_payment(20000, "0.055", 60)
    assert scenario.net_savings == (
        scenario.original_total_interest - scenario.new_total_interest - Decimal("750.00")
    )


def test_accelerated_payment_for_unknown_debt_rejected(credit_cards):
    with pytest.raises(InvalidDebtError) as exc_info:
        analyze_consolidation(credit_cards, "0.08", 36, accelerated_payments={"visa": 400, "discover": 500})
    assert "discover" in str(exc_info.value)


@pytest.fixture
def loan_offers() -> list[LoanOffer]:
    return [
        LoanOffer(name="credit-union", amount=10000, annual_rate="0.06", term_months=36),
        LoanOffer(name="bank", amount=10000, annual_rate="0.05", term_months=36, fees=500),
        LoanOffer(name="online", amount=10000, annual_rate="0.07", term_months=60),
    ]


def test_compare_loans_picks_lowest_total_cost(loan_offers, start_date: date):
    comparison = compare_loans(loan_offers, start_date=start_date)

    assert [q.offer.name for q in comparison.quotes] == ["credit-union", "bank", "online"]
    assert comparison.best == "credit-union"

    for quote in comparison.quotes:
        offer = quote.offer
        assert quote.monthly_payment == annuity_payment(offer.amount, offer.annual_rate, offer.term_months)
        assert quote.total_cost == offer.amount + quote.total_interest + offer.fees
        assert offer.term_months - 1 <= quote.months <= offer.term_months + 1

    # Lower rate but the fee outweighs the interest saved
    bank = comparison.quote_for("bank")
    assert bank.total_interest < comparison.quote_for("credit-union").total_interest
    # Longer term: lower payment, more interest
    online = comparison.quote_for("online")
    assert online.monthly_payment < bank.monthly_payment
    assert online.total_cost > comparison.quote_for("credit-union").total_cost


def test_compare_loans_tie_keeps_first_offer(start_date: date):
    offers = [
        LoanOffer(name="first", amount=5000, annual_rate="0.08", term_months=24),
        LoanOffer(name="second", amount=5000, annual_rate="0.08", term_months=24),
    ]
    assert compare_loans(offers, start_date=start_date).best == "first"


def test_compare_loans_rejects_bad_input():
    with pytest.raises(InvalidDebtError):
        compare_loans([])
    with pytest.raises(InvalidDebtError):
        compare_loans(
            [
                LoanOffer(name="same", amount=1000, annual_rate="0.05", term_months=12),
                LoanOffer(name="same", amount=2000, annual_rate="0.05", term_months=12),
            ]
        )
    with pytest.raises(InvalidTermError):
        LoanOffer(name="zero-term", amount=1000, annual_rate="0.05", term_months=0)
    with pytest.raises(InvalidRateError):
        LoanOffer(name="negative", amount=1000, annual_rate="-0.01", term_months=12)

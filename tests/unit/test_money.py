"""Unit tests for rounding rule and calendar helpers"""

from datetime import date
from decimal import Decimal
from debt_planner.utils.money import monthly_interest, quantize, round_up, to_money
from debt_planner.utils.date_utils import add_months, first_of_next_month


def test_quantize_rounds_half_even():
    """Ties go to the even cent"""
    assert quantize(Decimal("0.125")) == Decimal("0.12")
    assert quantize(Decimal("0.135")) == Decimal("0.14")
    assert quantize(Decimal("2.5051")) == Decimal("2.51")


def test_to_money_goes_through_str_for_floats():
    assert to_money(0.1) == Decimal("0.10")
    assert to_money(19.999) == Decimal("20.00")
    assert to_money("1000") == Decimal("1000.00")


def test_round_up_for_solved_payments():
    assert round_up(Decimal("333.3333")) == Decimal("333.34")
    assert round_up(Decimal("100")) == Decimal("100.00")


def test_monthly_interest():
    assert monthly_interest(Decimal("1000.00"), Decimal("0.30")) == Decimal("25.00")
    # 5000 * 0.10 / 12 = 41.6666...
    assert monthly_interest(Decimal("5000.00"), Decimal("0.10")) == Decimal("41.67")
    assert monthly_interest(Decimal("1000.00"), Decimal("0")) == Decimal("0.00")


def test_add_months_clamps_day():
    assert add_months(date(2024, 1, 31), 1) == date(2024, 2, 29)
    assert add_months(date(2023, 1, 31), 1) == date(2023, 2, 28)
    assert add_months(date(2024, 11, 15), 2) == date(2025, 1, 15)
    assert add_months(date(2024, 3, 1), 0) == date(2024, 3, 1)


def test_first_of_next_month():
    assert first_of_next_month(date(2024, 12, 17)) == date(2025, 1, 1)
    assert first_of_next_month(date(2024, 2, 1)) == date(2024, 3, 1)

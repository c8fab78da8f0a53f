"""Debt-to-income ratio and risk tiering"""

from dataclasses import dataclass
from decimal import ROUND_HALF_EVEN, Decimal
from typing import List, Sequence, Tuple

from debt_planner.domain.exceptions import DivideByZeroIncomeError, InvalidDebtError, InvalidThresholdError
from debt_planner.domain.models import (
    Debt,
    DebtToIncomeAssessment,
    ImprovementSuggestion,
    RiskTier,
)
from debt_planner.utils.money import ZERO, Number, round_up, to_decimal, to_money

RATIO_PLACES = Decimal("0.0001")
DEFAULT_TARGET_RATIO = Decimal("0.36")
HIGH_INTEREST_RATE = Decimal("0.10")

DIFFICULTY_ORDER = {"easy": 0, "medium": 1, "hard": 2}


@dataclass(frozen=True)
class RiskThresholds:
    """
    Ordered risk bands.

    bands: (upper_bound, tier) pairs; a ratio strictly below upper_bound falls
    in that tier. Anything at or above the last bound is top_tier. Bounds must
    be strictly increasing so the tiers are totally ordered and exhaustive.
    """

    bands: Tuple[Tuple[Decimal, RiskTier], ...]
    top_tier: RiskTier

    def __post_init__(self) -> None:
        bounds = [to_decimal(bound) for bound, _ in self.bands]
        if any(b <= a for a, b in zip(bounds, bounds[1:])):
            raise InvalidThresholdError("Risk band bounds must be strictly increasing")
        tiers = [tier for _, tier in self.bands] + [self.top_tier]
        if len(set(tiers)) != len(tiers):
            raise InvalidThresholdError("Each risk tier may appear only once")
        object.__setattr__(
            self, "bands", tuple((b, RiskTier(t)) for b, (_, t) in zip(bounds, self.bands))
        )

    @classmethod
    def from_bounds(cls, low: Number, moderate: Number, high: Number) -> "RiskThresholds":
        return cls(
            bands=(
                (to_decimal(low), RiskTier.LOW),
                (to_decimal(moderate), RiskTier.MODERATE),
                (to_decimal(high), RiskTier.HIGH),
            ),
            top_tier=RiskTier.SEVERE,
        )

    def classify(self, ratio: Decimal) -> RiskTier:
        for bound, tier in self.bands:
            if ratio < bound:
                return tier
        return self.top_tier

    @property
    def tiers(self) -> List[RiskTier]:
        """Tiers from least to most severe"""
        return [t for _, t in self.bands] + [self.top_tier]


DEFAULT_THRESHOLDS = RiskThresholds.from_bounds("0.20", "0.36", "0.50")


def _suggestions(
    tier: RiskTier,
    thresholds: RiskThresholds,
    above_target: bool,
    payment_reduction: Decimal,
    income_increase: Decimal,
    debts: Sequence[Debt],
) -> List[ImprovementSuggestion]:
    """
    Suggestions are a pure function of which thresholds are exceeded.

    - at or under target: on_track only
    - above target: increase_income, reduce_payments
    - debts supplied: pay_off_smallest, refinance_high_interest (any rate > 10%)
    - one of the two most severe tiers: consolidate_debts
    - top tier: seek_counseling
    """
    if not above_target:
        return [ImprovementSuggestion("on_track", "Debt-to-income ratio is within target", 0, "easy")]

    income_is_hard = payment_reduction > 0 and income_increase > payment_reduction * 2
    suggestions = [
        ImprovementSuggestion(
            "increase_income",
            "Increase monthly income",
            3 if income_is_hard else 2,
            "hard" if income_is_hard else "medium",
            income_increase,
        ),
        ImprovementSuggestion(
            "reduce_payments",
            "Reduce monthly debt payments",
            3,
            "medium",
            payment_reduction,
        ),
    ]

    active = [d for d in debts if d.is_active]
    if active:
        smallest = min(active, key=lambda d: (d.balance, d.id))
        suggestions.append(
            ImprovementSuggestion(
                "pay_off_smallest",
                f"Pay off smallest debt {smallest.id}",
                2 if smallest.minimum_payment * 3 >= payment_reduction else 1,
                "easy",
                smallest.minimum_payment,
            )
        )
        high_interest = [d for d in active if d.annual_rate > HIGH_INTEREST_RATE]
        if high_interest:
            suggestions.append(
                ImprovementSuggestion(
                    "refinance_high_interest",
                    "Refinance high-interest debt",
                    2,
                    "medium",
                    sum((d.balance for d in high_interest), ZERO),
                )
            )

    # The two most severe tiers (high and severe by default)
    if thresholds.tiers.index(tier) >= len(thresholds.tiers) - 2:
        suggestions.append(
            ImprovementSuggestion("consolidate_debts", "Consolidate debts into one loan", 2, "medium")
        )
    if tier == thresholds.top_tier:
        suggestions.append(
            ImprovementSuggestion("seek_counseling", "Talk to a non-profit credit counselor", 3, "easy")
        )

    suggestions.sort(key=lambda s: (-s.impact, DIFFICULTY_ORDER[s.difficulty], s.code))
    return suggestions


def assess_debt_to_income(
    total_monthly_payments: Number,
    monthly_income: Number,
    thresholds: RiskThresholds = DEFAULT_THRESHOLDS,
    target_ratio: Number = DEFAULT_TARGET_RATIO,
    debts: Sequence[Debt] = (),
) -> DebtToIncomeAssessment:
    """
    Ratio of monthly debt payments to monthly income, tiered by thresholds.

    Raises:
        DivideByZeroIncomeError: income is zero or negative
    """
    payments = to_money(total_monthly_payments)
    income = to_money(monthly_income)
    target = to_decimal(target_ratio)

    if income <= 0:
        raise DivideByZeroIncomeError(income)
    if payments < 0:
        raise InvalidDebtError(f"Monthly payments must be >= 0, got {payments}")
    if target <= 0:
        raise InvalidThresholdError(f"Target ratio must be positive, got {target}")

    # Tier and target checks use the exact ratio; only the reported ratio is rounded
    exact = payments / income
    ratio = exact.quantize(RATIO_PLACES, rounding=ROUND_HALF_EVEN)
    tier = thresholds.classify(exact)

    # Amounts needed to reach the target round up
    above_target = exact > target
    payment_reduction = round_up(payments - target * income) if above_target else ZERO
    income_increase = round_up(payment_reduction / target) if above_target else ZERO

    return DebtToIncomeAssessment(
        total_monthly_payments=payments,
        monthly_income=income,
        ratio=ratio,
        risk_tier=tier,
        target_ratio=target,
        gap_to_target=ratio - target,
        payment_reduction_needed=payment_reduction,
        income_increase_needed=income_increase,
        suggestions=tuple(
            _suggestions(tier, thresholds, above_target, payment_reduction, income_increase, debts)
        ),
    )


def assess_debts(
    debts: Sequence[Debt],
    monthly_income: Number,
    thresholds: RiskThresholds = DEFAULT_THRESHOLDS,
    target_ratio: Number = DEFAULT_TARGET_RATIO,
) -> DebtToIncomeAssessment:
    """Debt-to-income from the minimum payments of debts that still carry a balance"""
    total = sum((d.minimum_payment for d in debts if d.is_active), ZERO)
    return assess_debt_to_income(total, monthly_income, thresholds, target_ratio, debts)

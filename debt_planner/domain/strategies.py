"""Priority ordering for repayment strategies

The simulation core is identical for every strategy; only the order in which
debts receive surplus payment differs.
"""

from collections import Counter
from decimal import Decimal
from typing import Dict, List, Sequence, Tuple

from debt_planner.domain.exceptions import InvalidDebtError, InvalidOrderError
from debt_planner.domain.models import Debt, Strategy
from debt_planner.utils.money import Number, to_decimal

DEFAULT_HYBRID_WEIGHTS: Tuple[Decimal, Decimal] = (Decimal("0.5"), Decimal("0.5"))


def _normalize(values: List[Decimal]) -> List[Decimal]:
    """Min-max scale to [0, 1]; a constant series scales to 1"""
    low, high = min(values), max(values)
    if high == low:
        return [Decimal(1)] * len(values)
    span = high - low
    return [(v - low) / span for v in values]


def hybrid_scores(
    debts: Sequence[Debt],
    weights: Tuple[Number, Number] = DEFAULT_HYBRID_WEIGHTS,
) -> Dict[str, Decimal]:
    """
    Weighted score per debt: w1 * normalized_rate + w2 * normalized_inverse_balance.

    High rates push a debt up (interest cost), small balances push it up
    (quick wins). A zero balance counts as the largest inverse balance.
    """
    rate_weight, balance_weight = (to_decimal(w) for w in weights)
    if rate_weight < 0 or balance_weight < 0 or rate_weight + balance_weight == 0:
        raise InvalidDebtError("Hybrid weights must be non-negative and not both zero")
    if not debts:
        return {}

    rates = _normalize([d.annual_rate for d in debts])

    positive = [d.balance for d in debts if d.balance > 0]
    largest_inverse = 1 / min(positive) if positive else Decimal(1)
    inverses = [1 / d.balance if d.balance > 0 else largest_inverse for d in debts]
    inverse_balances = _normalize(inverses)

    return {
        debt.id: rate_weight * rate + balance_weight * inverse
        for debt, rate, inverse in zip(debts, rates, inverse_balances)
    }


def validate_custom_order(debts: Sequence[Debt], custom_order: Sequence[str]) -> None:
    """Custom order must list every debt id exactly once and nothing else"""
    expected = [d.id for d in debts]
    supplied = [str(debt_id) for debt_id in custom_order]
    counts = Counter(supplied)

    missing = [debt_id for debt_id in expected if debt_id not in counts]
    unknown = sorted({debt_id for debt_id in supplied if debt_id not in set(expected)})
    duplicates = sorted(debt_id for debt_id, n in counts.items() if n > 1)

    if missing or unknown or duplicates:
        raise InvalidOrderError(missing=missing, unknown=unknown, duplicates=duplicates)


def order_debts(
    debts: Sequence[Debt],
    strategy: Strategy | str,
    custom_order: Sequence[str] | None = None,
    hybrid_weights: Tuple[Number, Number] = DEFAULT_HYBRID_WEIGHTS,
) -> List[Debt]:
    """
    Return debts in repayment priority order (highest priority first).

    Ordering rules:
    - avalanche: rate desc, then balance desc
    - snowball:  balance asc, then rate desc
    - hybrid:    weighted score desc, then rate desc, then balance asc
    - custom:    exactly the caller's order

    Remaining ties keep input order, so the result is deterministic.
    """
    strategy = Strategy(strategy)
    ids = [d.id for d in debts]
    if len(set(ids)) != len(ids):
        duplicated = sorted(debt_id for debt_id, n in Counter(ids).items() if n > 1)
        raise InvalidDebtError(f"Duplicate debt ids: {duplicated}")

    # sorted() is stable, so equal keys keep their input position
    if strategy == Strategy.AVALANCHE:
        return sorted(debts, key=lambda d: (-d.annual_rate, -d.balance))

    if strategy == Strategy.SNOWBALL:
        return sorted(debts, key=lambda d: (d.balance, -d.annual_rate))

    if strategy == Strategy.HYBRID:
        scores = hybrid_scores(debts, hybrid_weights)
        return sorted(debts, key=lambda d: (-scores[d.id], -d.annual_rate, d.balance))

    if custom_order is None:
        raise InvalidOrderError(missing=ids)
    validate_custom_order(debts, custom_order)
    by_id = {d.id: d for d in debts}
    return [by_id[str(debt_id)] for debt_id in custom_order]

"""Domain-specific exceptions"""

from decimal import Decimal
from typing import Any, Dict, Sequence


class DomainException(Exception):
    """Base exception for domain layer"""

    kind = "domain_error"

    def to_dict(self) -> Dict[str, Any]:
        """Structured payload for callers that translate errors into messages"""
        return {"error": self.kind, "detail": str(self)}


class NonConvergentError(DomainException):
    """Balance cannot reach zero within max_months at the given payment level"""

    kind = "non_convergent"

    def __init__(self, debt_ids: Sequence[str], reason: str):
        self.debt_ids = tuple(debt_ids)
        self.reason = reason
        label = ", ".join(self.debt_ids) if self.debt_ids else "<unnamed>"
        super().__init__(f"Debt(s) {label} never reach zero balance: {reason}")

    def to_dict(self) -> Dict[str, Any]:
        payload = super().to_dict()
        payload["debt_ids"] = list(self.debt_ids)
        return payload


class InsufficientBudgetError(DomainException):
    """Minimum payments add up to more than the monthly budget"""

    kind = "insufficient_budget"

    def __init__(self, total_minimum: Decimal, budget: Decimal):
        self.total_minimum = total_minimum
        self.budget = budget
        self.shortfall = total_minimum - budget
        super().__init__(
            f"Minimum payments {total_minimum} exceed budget {budget} by {self.shortfall}"
        )

    def to_dict(self) -> Dict[str, Any]:
        payload = super().to_dict()
        payload.update(
            shortfall=str(self.shortfall),
            total_minimum=str(self.total_minimum),
            budget=str(self.budget),
        )
        return payload


class InvalidOrderError(DomainException):
    """Custom priority order does not match the debt set exactly"""

    kind = "invalid_order"

    def __init__(
        self,
        missing: Sequence[str] = (),
        unknown: Sequence[str] = (),
        duplicates: Sequence[str] = (),
    ):
        self.missing = tuple(missing)
        self.unknown = tuple(unknown)
        self.duplicates = tuple(duplicates)
        problems = []
        if self.missing:
            problems.append(f"missing {list(self.missing)}")
        if self.unknown:
            problems.append(f"unknown {list(self.unknown)}")
        if self.duplicates:
            problems.append(f"duplicated {list(self.duplicates)}")
        super().__init__("Custom order invalid: " + "; ".join(problems))

    def to_dict(self) -> Dict[str, Any]:
        payload = super().to_dict()
        payload.update(
            missing=list(self.missing),
            unknown=list(self.unknown),
            duplicates=list(self.duplicates),
        )
        return payload


class InvalidTermError(DomainException):
    """Loan term or simulation horizon is not positive"""

    kind = "invalid_term"


class InvalidRateError(DomainException):
    """Interest rate is negative"""

    kind = "invalid_rate"


class DivideByZeroIncomeError(DomainException):
    """Debt-to-income requested with non-positive income"""

    kind = "divide_by_zero_income"

    def __init__(self, income: Decimal):
        self.income = income
        super().__init__(f"Monthly income must be positive, got {income}")


class InvalidDebtError(DomainException):
    """Debt record or debt set is malformed"""

    kind = "invalid_debt"


class InvalidMilestoneError(DomainException):
    """Milestone has no usable target"""

    kind = "invalid_milestone"


class InvalidThresholdError(DomainException):
    """Risk bands are not strictly increasing, or the target ratio is not positive"""

    kind = "invalid_threshold"

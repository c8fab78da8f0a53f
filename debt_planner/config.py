"""Configuration management using Pydantic Settings"""

from decimal import Decimal
from typing import Tuple

from pydantic import model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from debt_planner.domain.risk import RiskThresholds


class Settings(BaseSettings):
    """Application configuration loaded from environment variables (DEBT_PLANNER_*)"""

    model_config = SettingsConfigDict(
        env_prefix="DEBT_PLANNER_", env_file=".env", env_file_encoding="utf-8", extra="ignore"
    )

    # Service
    service_name: str = "debt-planner"
    log_level: str = "INFO"

    # Simulation
    max_months: int = 1200  # Hard cap on simulated months per run

    # Hybrid strategy: score = rate_weight * rate + balance_weight * inverse balance
    hybrid_rate_weight: Decimal = Decimal("0.5")
    hybrid_balance_weight: Decimal = Decimal("0.5")

    # Debt-to-income bands (upper bounds, exclusive) and target
    dti_low_max: Decimal = Decimal("0.20")
    dti_moderate_max: Decimal = Decimal("0.36")
    dti_high_max: Decimal = Decimal("0.50")
    dti_target_ratio: Decimal = Decimal("0.36")

    @model_validator(mode="after")
    def check_ranges(self) -> "Settings":
        if self.max_months <= 0:
            raise ValueError("max_months must be positive")
        if not self.dti_low_max < self.dti_moderate_max < self.dti_high_max:
            raise ValueError("DTI band bounds must be strictly increasing")
        return self

    @property
    def hybrid_weights(self) -> Tuple[Decimal, Decimal]:
        return self.hybrid_rate_weight, self.hybrid_balance_weight

    @property
    def risk_thresholds(self) -> RiskThresholds:
        return RiskThresholds.from_bounds(self.dti_low_max, self.dti_moderate_max, self.dti_high_max)


settings = Settings()

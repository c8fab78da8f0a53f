"""Pytest fixtures for testing"""

import pytest
from datetime import date
from fastapi.testclient import TestClient
from debt_planner.api.main import create_app
from debt_planner.domain.models import Debt


@pytest.fixture
def client() -> TestClient:
    """Create FastAPI test client"""
    return TestClient(create_app())


@pytest.fixture
def start_date() -> date:
    """Fixed first payment date so schedules are reproducible"""
    return date(2025, 1, 1)


@pytest.fixture
def two_debts() -> list[Debt]:
    """High-rate small debt A and low-rate large debt B"""
    return [
        Debt(id="A", balance=1000, annual_rate="0.25", minimum_payment=50),
        Debt(id="B", balance=5000, annual_rate="0.10", minimum_payment=100),
    ]


@pytest.fixture
def mixed_debts() -> list[Debt]:
    """
    Portfolio where avalanche, snowball and the proportional baseline all differ.

    avalanche: card (24%) -> store (12%) -> car (6%)
    snowball:  store (500) -> card (3000) -> car (8000)
    baseline:  most surplus lands on the 6% car loan (largest balance)
    """
    return [
        Debt(id="store", balance=500, annual_rate="0.12", minimum_payment=25, name="Store card"),
        Debt(id="card", balance=3000, annual_rate="0.24", minimum_payment=90, name="Credit card"),
        Debt(id="car", balance=8000, annual_rate="0.06", minimum_payment=160, name="Car loan"),
    ]


@pytest.fixture
def debt_payload() -> list[dict]:
    """JSON debt records for API tests"""
    return [
        {"id": "A", "balance": 1000, "annual_rate": 0.25, "minimum_payment": 50},
        {"id": "B", "balance": 5000, "annual_rate": 0.10, "minimum_payment": 100},
    ]

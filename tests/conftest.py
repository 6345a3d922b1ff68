from __future__ import annotations

from datetime import date

import pytest
from fastapi.testclient import TestClient

from expense_tracker.core.config import Settings
from expense_tracker.main import create_app
from expense_tracker.models.expense import Expense
from expense_tracker.models.wallet import Wallet


def make_settings(**overrides) -> Settings:
    values = {"debug": False, "seed_demo_data": True}
    values.update(overrides)
    settings = Settings(_env_file=None, **values)
    settings.init_post_load()
    return settings


@pytest.fixture
def client() -> TestClient:
    app = create_app(settings_override=make_settings())
    return TestClient(app)


@pytest.fixture
def lenient_client() -> TestClient:
    app = create_app(settings_override=make_settings(strict_currency=False))
    return TestClient(app)


@pytest.fixture
def empty_client() -> TestClient:
    app = create_app(settings_override=make_settings(seed_demo_data=False))
    return TestClient(app)


def expense(
    eid: str = "e1",
    amount: float = 10.0,
    category: str = "Food & Dining",
    wallet: str = "Cash",
    description: str = "",
    day: date = date(2024, 1, 15),
    currency: str = "USD",
) -> Expense:
    return Expense(
        id=eid,
        amount=amount,
        category=category,
        wallet=wallet,
        description=description,
        date=day,
        currency=currency,
    )


def wallet(
    wid: str = "w1", name: str = "Cash", balance: float = 500.0, currency: str = "USD"
) -> Wallet:
    return Wallet(id=wid, name=name, balance=balance, currency=currency)

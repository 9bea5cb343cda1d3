from __future__ import annotations

from datetime import datetime

import pytest
from flask.testing import FlaskClient

from fireplan.app import create_app
from fireplan.config import AppSettings
from fireplan.models import FireSettings

FIXED_NOW = datetime(2025, 6, 15, 12, 0, 0)


@pytest.fixture
def now() -> datetime:
    return FIXED_NOW


@pytest.fixture
def app():
    flask_app = create_app(AppSettings(base_currency="GBP", theme="dark", log_level="WARNING"))
    flask_app.config.update(TESTING=True)
    return flask_app


@pytest.fixture
def client(app) -> FlaskClient:
    with app.test_client() as test_client:
        yield test_client


@pytest.fixture
def settings() -> FireSettings:
    return FireSettings(
        targetValue=1_000_000,
        yearOfBirth=1990,
        contributions=[
            {"id": "c1", "positionId": "p1", "accountId": "a1", "monthlyAmount": 1500},
            {"id": "c2", "positionId": "p2", "accountId": "a2", "monthlyAmount": 500},
        ],
    )

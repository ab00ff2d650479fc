# tests/conftest.py

from datetime import date
from decimal import Decimal

import pytest
from fastapi.testclient import TestClient

from keyledger.api.deps import get_today
from keyledger.config import Settings, get_settings
from keyledger.db.engine import build_engine, get_engine
from keyledger.db.schema import customer, metadata, services
from keyledger.main import app
from keyledger.models.documents import DocumentPayload

TAX_RATE = Decimal("0.0875")
TODAY = date(2026, 10, 19)
CRON_SECRET = "s3cret"


@pytest.fixture
def engine(tmp_path):
    engine = build_engine(f"sqlite:///{tmp_path / 'keyledger.sqlite'}")
    metadata.create_all(engine)
    yield engine
    engine.dispose()


@pytest.fixture
def seeded(engine):
    """Two customers and a small catalog; Deadbolt is flagged as parts."""
    with engine.begin() as conn:
        conn.execute(
            customer.insert(),
            [
                {"customer_id": 1, "customer_name": "Acme Property", "customer_address": "1 Main St"},
                {"customer_id": 2, "customer_name": "Jane Doe", "customer_address": None},
            ],
        )
        conn.execute(
            services.insert(),
            [
                {"service_id": 5, "servicename": "Lock change", "description": "Rekey and replace",
                 "unitprice": Decimal("50.00"), "istaxed": True, "isparts": False},
                {"service_id": 6, "servicename": "Service call", "description": None,
                 "unitprice": Decimal("10.00"), "istaxed": False, "isparts": False},
                {"service_id": 7, "servicename": "Deadbolt", "description": "Grade 1",
                 "unitprice": Decimal("19.99"), "istaxed": True, "isparts": True},
            ],
        )
    return engine


@pytest.fixture
def make_payload():
    def _make(services=None, **fields):
        if services is None:
            services = [
                {"service_id": 5, "servicename": "Lock change", "quantity": 1,
                 "unitprice": "50.00", "istaxed": True},
            ]
        body = {"customer_id": 1, "PO": "PO-100", "description": "Front door",
                "comments": "gate code 1234", "vin": "1HGCM82633A004352",
                "services": services}
        body.update(fields)
        return DocumentPayload.model_validate(body)

    return _make


@pytest.fixture
def test_settings():
    return Settings(CRON_SECRET_TOKEN=CRON_SECRET, TAX_RATE=TAX_RATE)


@pytest.fixture
def client(seeded, test_settings):
    app.dependency_overrides[get_engine] = lambda: seeded
    app.dependency_overrides[get_settings] = lambda: test_settings
    app.dependency_overrides[get_today] = lambda: TODAY
    with TestClient(app) as client:
        yield client
    app.dependency_overrides.clear()

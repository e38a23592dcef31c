import os

os.environ["STATE_BACKEND"] = "memory"
os.environ["ENABLE_SCHEDULER"] = "false"

from datetime import date
from decimal import Decimal

import pytest
from fastapi.testclient import TestClient

from coopbook.services.engine import LedgerEngine
from coopbook.services.persistence import InMemoryStatePort


@pytest.fixture(autouse=True)
def audit_dir(tmp_path, monkeypatch):
    """Keep audit trail files out of the source tree."""
    logs = tmp_path / "logs"
    monkeypatch.setattr("coopbook.core.audit.LOGS_DIR", logs)
    return logs


@pytest.fixture
def port():
    return InMemoryStatePort()


@pytest.fixture
def engine(port):
    return LedgerEngine(port)


@pytest.fixture
def member(engine):
    result = engine.register_member("Asha Patel", "9000000001", join_date=date(2024, 1, 1))
    assert result.success
    return result.data


@pytest.fixture
def active_loan(engine, member):
    """12000 over the default 12-month tenure, disbursed on 2024-01-01."""
    request = engine.request_loan(member.id, Decimal("12000"), "Shop stock").data
    result = engine.approve_loan(request.id, start_date=date(2024, 1, 1))
    assert result.success
    return result.data


@pytest.fixture
def client():
    from coopbook.main import create_app

    app = create_app(InMemoryStatePort(), enable_scheduler=False)
    with TestClient(app) as test_client:
        yield test_client

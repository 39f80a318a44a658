"""Shared pytest fixtures for packflow tests."""

import tempfile
import os
from datetime import datetime
import pytest

from packflow.database.factories import create_sqlite_database
from packflow.domain.bank_details import BankDetailsService
from packflow.domain.metrics import MetricsService
from packflow.domain.payment import PaymentService

# A Monday, so week buckets start on the same day
NOW = datetime(2024, 1, 15, 12, 30)


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    """Keep the developer's PackFlow environment out of the tests."""
    for name in (
        "PACKFLOW_DB_PATH",
        "PACKFLOW_USER",
        "PACKFLOW_REALIZED_STATUSES",
        "PACKFLOW_MAX_BUCKETS",
        "SMSWORKS_JWT",
        "SMSWORKS_SENDER",
    ):
        monkeypatch.delenv(name, raising=False)


@pytest.fixture
def temp_db():
    """Create a temporary database for testing."""
    fd, db_path = tempfile.mkstemp(suffix=".db")
    os.close(fd)

    db = create_sqlite_database(database_path=db_path)
    # Store the path for tests that need it
    db.database_path = db_path
    db.connect()
    db.initialize_schema()

    yield db

    db.disconnect()
    if os.path.exists(db_path):
        os.unlink(db_path)


@pytest.fixture
def clock():
    """Fixed clock for services."""
    return lambda: NOW


@pytest.fixture
def payment_service(temp_db, clock):
    """Create a PaymentService with a temporary database and fixed clock."""
    return PaymentService(temp_db, clock=clock)


@pytest.fixture
def bank_details_service(temp_db, clock):
    """Create a BankDetailsService with a temporary database."""
    return BankDetailsService(temp_db, clock=clock)


@pytest.fixture
def metrics_service(temp_db, clock):
    """Create a MetricsService with a temporary database and fixed clock."""
    return MetricsService(temp_db, clock=clock)


@pytest.fixture
def sample_payment(payment_service):
    """Create a pending payment for user 'alice'."""
    payment_id = payment_service.create_payment(
        user_id="alice",
        client_name="Acme Ltd",
        total="450.00",
        project_name="Kitchen refit",
        client_email="billing@acme.test",
        client_phone="07123456789",
        hours_worked="10",
        rate="45",
        subtotal="450",
    )
    return payment_service.get_payment("alice", payment_id)


@pytest.fixture
def cli_runner():
    """Create a Click CLI test runner."""
    from click.testing import CliRunner

    return CliRunner()

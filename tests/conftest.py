"""Shared pytest fixtures for ledgerbook tests."""

import tempfile
import os
from datetime import date
import pytest

from ledgerbook.database.factories import create_sqlite_database
from ledgerbook.domain.account import AccountService
from ledgerbook.domain.adjustment import AdjustmentService
from ledgerbook.domain.entities import AccountKind, CreditCardTerms
from ledgerbook.domain.organization import OrganizationService
from ledgerbook.domain.schedule import ScheduleService
from ledgerbook.domain.transfer import TransferService
from ledgerbook.logging_config import reset_logging

TODAY = date(2026, 3, 10)


@pytest.fixture(autouse=True)
def _reset_logging():
    """Undo logging configured by CLI invocations."""
    yield
    reset_logging()


@pytest.fixture
def temp_db():
    """Create a temporary database for testing."""
    # Create a temporary file for the database
    fd, db_path = tempfile.mkstemp(suffix=".db")
    os.close(fd)

    # Create database
    db = create_sqlite_database(database_path=db_path)
    # Store the path for tests that need it
    db.database_path = db_path
    db.connect()
    db.initialize_schema()

    yield db

    # Cleanup
    db.disconnect()
    if os.path.exists(db_path):
        os.unlink(db_path)


@pytest.fixture
def today():
    """The fixed date services see as today."""
    return TODAY


@pytest.fixture
def clock(today):
    """Clock returning the fixed test date."""
    return lambda: today


@pytest.fixture
def organization_service(temp_db):
    """Create an OrganizationService with a temporary database."""
    return OrganizationService(temp_db)


@pytest.fixture
def account_service(temp_db, clock):
    """Create an AccountService with a temporary database."""
    return AccountService(temp_db, clock=clock)


@pytest.fixture
def transfer_service(temp_db, clock):
    """Create a TransferService with a temporary database."""
    return TransferService(temp_db, clock=clock)


@pytest.fixture
def schedule_service(temp_db, clock):
    """Create a ScheduleService with a temporary database."""
    return ScheduleService(temp_db, clock=clock)


@pytest.fixture
def adjustment_service(temp_db):
    """Create an AdjustmentService with a temporary database."""
    return AdjustmentService(temp_db)


@pytest.fixture
def organization(organization_service):
    """Create a sample organization and return its ID."""
    return organization_service.create_organization("Household")


@pytest.fixture
def cash_account(account_service, organization):
    """Cash account holding $1,000.00."""
    created = account_service.create_account(
        organization_id=organization,
        name="Checking",
        kind=AccountKind.CASH,
        posted_balance=100000,
    )
    return created.account


@pytest.fixture
def vendor_account(account_service, organization):
    """Vendor account with no activity."""
    created = account_service.create_account(
        organization_id=organization, name="Grocer", kind=AccountKind.VENDOR
    )
    return created.account


@pytest.fixture
def customer_account(account_service, organization):
    """Customer account with no activity."""
    created = account_service.create_account(
        organization_id=organization, name="Acme Corp", kind=AccountKind.CUSTOMER
    )
    return created.account


@pytest.fixture
def card_terms():
    """Credit card terms: statement on the 15th, due on the 5th, $4,000 limit."""
    return CreditCardTerms(due_day=5, statement_day=15, credit_limit=400000)


@pytest.fixture
def cli_runner():
    """Create a Click CLI test runner."""
    from click.testing import CliRunner

    return CliRunner()

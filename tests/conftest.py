"""
Pytest fixtures for the balance kernel test suite.

Provides:
- A fresh SQLite in-memory database per test (real commits, shared
  connection via StaticPool)
- Account / account type factories
- The reference RuleConfig
- Structured log capture

Environment Variables:
- DATABASE_URL: PostgreSQL connection URL used by tests marked ``postgres``.
  Those tests are skipped when it is not set.
"""

import json
import logging
from decimal import Decimal
from io import StringIO

import pytest
from sqlalchemy import null, select
from sqlalchemy.orm import sessionmaker

from balance_kernel.db.engine import build_engine, create_tables, drop_tables
from balance_kernel.domain.rule_config import RuleConfig
from balance_kernel.logging_config import (
    LogContext,
    StructuredFormatter,
    configure_logging,
    reset_logging,
)
from balance_kernel.models.account import Account, AccountType
from balance_kernel.selectors.account_selector import AccountSelector


# =============================================================================
# Logging fixtures
# =============================================================================


@pytest.fixture(autouse=True, scope="session")
def _configure_test_logging():
    """Configure structured logging for the test suite."""
    reset_logging()
    configure_logging(level=logging.DEBUG)
    yield
    reset_logging()


@pytest.fixture(autouse=True)
def _clear_log_context():
    """Clear LogContext between tests to prevent cross-test contamination."""
    LogContext.clear()
    yield
    LogContext.clear()


@pytest.fixture
def captured_logs():
    """
    Capture balance_kernel logs as parsed JSON dicts.

    Usage::

        def test_something(captured_logs, recorder):
            recorder.record(...)
            logs = captured_logs()
            assert any(r["message"] == "balance_adjusted" for r in logs)
    """
    stream = StringIO()
    handler = logging.StreamHandler(stream)
    handler.setFormatter(StructuredFormatter())
    root = logging.getLogger("balance_kernel")
    root.addHandler(handler)

    def _get_records() -> list[dict]:
        lines = stream.getvalue().strip().split("\n")
        return [json.loads(line) for line in lines if line]

    yield _get_records

    root.removeHandler(handler)


def pytest_configure(config):
    """Register custom markers."""
    config.addinivalue_line(
        "markers", "postgres: mark test as requiring PostgreSQL"
    )
    config.addinivalue_line(
        "markers", "slow_locks: mark test as potentially waiting for DB locks"
    )


# =============================================================================
# Database fixtures
# =============================================================================


@pytest.fixture
def engine():
    """Fresh in-memory database with all tables, disposed after the test."""
    eng = build_engine("sqlite:///:memory:")
    create_tables(eng)
    yield eng
    drop_tables(eng)
    eng.dispose()


@pytest.fixture
def session_factory(engine):
    return sessionmaker(bind=engine, expire_on_commit=False)


@pytest.fixture
def session(session_factory):
    """
    Session for direct service calls.

    Services only flush; the test owns commit/rollback.
    """
    sess = session_factory()
    yield sess
    sess.rollback()
    sess.close()


@pytest.fixture
def rule_config() -> RuleConfig:
    """The reference deployment's ids: check=3, savings=13, card=8, income=3."""
    return RuleConfig.reference_defaults()


# =============================================================================
# Data factories
# =============================================================================


@pytest.fixture
def make_account_type(session):
    """Create (or reuse) an AccountType with an explicit id."""

    def _make(type_id: int, name: str | None = None) -> AccountType:
        account_type = session.get(AccountType, type_id)
        if account_type is None:
            account_type = AccountType(id=type_id, name=name or f"Type {type_id}")
            session.add(account_type)
            session.flush()
        return account_type

    return _make


@pytest.fixture
def make_account(session, make_account_type):
    """
    Create an Account, creating its AccountType on demand.

    ``balance=None`` stores a NULL balance.
    """

    def _make(
        name: str,
        type_id: int,
        balance: Decimal | None = Decimal("0.00"),
        account_id: int | None = None,
        monthly_due_date_day: int | None = None,
    ) -> Account:
        make_account_type(type_id)
        account = Account(
            name=name,
            account_type_id=type_id,
            balance=balance if balance is not None else null(),
            monthly_due_date_day=monthly_due_date_day,
        )
        if account_id is not None:
            account.id = account_id
        session.add(account)
        session.flush()
        return account

    return _make


@pytest.fixture
def reference_accounts(make_account, make_account_type):
    """
    The reference deployment's accounts.

    Checking(15, type 3), Savings(16, type 13), Visa(20, type 8),
    Groceries type 5, Transfer type 7.
    """
    make_account_type(3, "Checking")
    make_account_type(5, "Groceries")
    make_account_type(7, "Transfer")
    make_account_type(8, "Credit Card")
    make_account_type(13, "Savings")
    return {
        "checking": make_account("Checking", 3, Decimal("1000.00"), account_id=15),
        "savings": make_account("Savings", 13, Decimal("5000.00"), account_id=16),
        "visa": make_account("Visa", 8, Decimal("-200.00"), account_id=20),
    }


@pytest.fixture
def balances(session):
    """Return {account_id: balance} read fresh from the database."""

    def _balances() -> dict[int, Decimal]:
        selector = AccountSelector(session)
        ids = session.execute(select(Account.id).order_by(Account.id)).scalars().all()
        return {account_id: selector.get(account_id).balance for account_id in ids}

    return _balances

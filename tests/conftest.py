"""Shared pytest fixtures for ledgerlens tests."""

import tempfile
import os
from datetime import date
from decimal import Decimal
from itertools import count

import pytest

from ledgerlens.database.factories import create_sqlite_database
from ledgerlens.database.memory import InMemoryLedgerStore
from ledgerlens.domain.account import AccountService
from ledgerlens.domain.entities import Account, Reference, Transaction, TransactionType
from ledgerlens.domain.report import ReportService
from ledgerlens.domain.transaction import TransactionService


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
def memory_store():
    """Create an empty in-memory ledger store."""
    return InMemoryLedgerStore()


@pytest.fixture
def account_service(temp_db):
    """Create an AccountService with a temporary database."""
    return AccountService(temp_db)


@pytest.fixture
def transaction_service(temp_db):
    """Create a TransactionService with a temporary database."""
    return TransactionService(temp_db)


@pytest.fixture
def report_service(temp_db):
    """Create a ReportService with a temporary database."""
    return ReportService(temp_db)


@pytest.fixture
def wallet():
    """VND cash account."""
    return Account(id=1, name="Wallet", currency_code="VND", account_type="cash")


@pytest.fixture
def bank():
    """VND bank account."""
    return Account(id=2, name="Bank", currency_code="VND", account_type="bank")


@pytest.fixture
def usd_card():
    """USD credit account."""
    return Account(id=3, name="Card", currency_code="USD", account_type="credit")


@pytest.fixture
def make_txn():
    """Build domain transactions with sequential IDs."""
    ids = count(1)

    def _make(
        txn_type,
        amount,
        day,
        source=None,
        destination=None,
        home_amount=None,
        category=None,
        partner=None,
        creator=None,
        **fields,
    ):
        return Transaction(
            id=fields.pop("id", None) or next(ids),
            date=day,
            transaction_type=txn_type,
            amount=Decimal(amount),
            home_currency_amount=Decimal(home_amount) if home_amount is not None else None,
            source_account=source,
            destination_account=destination,
            category=Reference(*category) if category else None,
            partner=Reference(*partner) if partner else None,
            creator=Reference(*creator) if creator else None,
            **fields,
        )

    return _make


@pytest.fixture
def two_account_ledger(make_txn):
    """The VND ledger used by the balance scenarios.

    January: 1,000,000 income into A and 400,000 expense from A.
    February: 200,000 transfer from A to B.
    """
    account_a = Account(id=1, name="A", currency_code="VND", account_type="cash")
    account_b = Account(id=2, name="B", currency_code="VND", account_type="bank")
    transactions = [
        make_txn(TransactionType.INCOME, "1000000", date(2024, 1, 5), destination=account_a),
        make_txn(TransactionType.EXPENSE, "400000", date(2024, 1, 20), source=account_a),
        make_txn(
            TransactionType.TRANSFER,
            "200000",
            date(2024, 2, 1),
            source=account_a,
            destination=account_b,
        ),
    ]
    return account_a, account_b, transactions


@pytest.fixture
def cli_runner():
    """Create a Click CLI runner for testing."""
    from click.testing import CliRunner

    return CliRunner()

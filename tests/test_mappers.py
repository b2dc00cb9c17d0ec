"""Tests for ORM to domain mappers."""

from datetime import date
from decimal import Decimal

from ledgerlens.database import mappers
from ledgerlens.database.models import (
    Account as ORMAccount,
    Category as ORMCategory,
    Transaction as ORMTransaction,
)
from ledgerlens.domain import entities


def test_account_to_domain():
    orm_account = ORMAccount(
        id=3, name="Bank", currency_code="USD", account_type="bank", opening_balance=Decimal("12.50")
    )
    account = mappers.account_to_domain(orm_account)

    assert account == entities.Account(
        id=3, name="Bank", currency_code="USD", account_type="bank", opening_balance=Decimal("12.50")
    )


def test_account_to_domain_defaults_missing_opening_balance():
    account = mappers.account_to_domain(ORMAccount(id=1, name="Wallet"))
    assert account.opening_balance == Decimal("0")


def test_reference_to_domain_handles_none():
    assert mappers.reference_to_domain(None) is None
    assert mappers.reference_to_domain(ORMCategory(id=2, name="Food")) == entities.Reference(2, "Food")


def test_transaction_type_to_domain():
    assert mappers.transaction_type_to_domain("income") is entities.TransactionType.INCOME
    assert mappers.transaction_type_to_domain("bogus") == "bogus"


def test_transaction_to_domain():
    source = ORMAccount(id=1, name="Wallet", currency_code="VND")
    orm_txn = ORMTransaction(
        id=9,
        date=date(2024, 1, 2),
        transaction_type="expense",
        amount=Decimal("100"),
        home_currency_amount=None,
        source_account=source,
        category=ORMCategory(id=4, name="Food"),
        code="E-1",
        description="Coffee",
        document_number="R-7",
        notes="with team",
    )

    txn = mappers.transaction_to_domain(orm_txn)

    assert txn.id == 9
    assert txn.transaction_type is entities.TransactionType.EXPENSE
    assert txn.source_account.name == "Wallet"
    assert txn.destination_account is None
    assert txn.category == entities.Reference(4, "Food")
    assert txn.partner is None
    assert txn.creator is None
    assert (txn.code, txn.description, txn.document_number, txn.notes) == (
        "E-1",
        "Coffee",
        "R-7",
        "with team",
    )

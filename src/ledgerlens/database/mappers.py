"""Mapper functions to convert between domain models and SQLAlchemy models.

This layer isolates the conversion logic, so the report engine never sees
ORM objects and the schema can change without touching aggregation code.
"""

from decimal import Decimal
from typing import Optional, Union

from ledgerlens.domain import entities as domain
from ledgerlens.database.models import (
    Account as ORMAccount,
    Category as ORMCategory,
    Partner as ORMPartner,
    User as ORMUser,
    Transaction as ORMTransaction,
)


def transaction_type_to_domain(value: str) -> Union[domain.TransactionType, str]:
    """Convert a stored type to TransactionType, keeping unknown values raw."""
    try:
        return domain.TransactionType(value)
    except ValueError:
        return value


def account_to_domain(orm_account: ORMAccount) -> domain.Account:
    """Convert SQLAlchemy Account model to domain Account entity."""
    return domain.Account(
        id=orm_account.id,
        name=orm_account.name,
        currency_code=orm_account.currency_code,
        account_type=orm_account.account_type,
        opening_balance=Decimal(orm_account.opening_balance or 0),
    )


def reference_to_domain(
    orm_reference: Union[ORMCategory, ORMPartner, ORMUser, None],
) -> Optional[domain.Reference]:
    """Convert a category, partner or user model to a domain Reference."""
    if orm_reference is None:
        return None
    return domain.Reference(id=orm_reference.id, name=orm_reference.name)


def transaction_to_domain(orm_transaction: ORMTransaction) -> domain.Transaction:
    """Convert SQLAlchemy Transaction model to domain Transaction entity."""
    source = orm_transaction.source_account
    destination = orm_transaction.destination_account
    return domain.Transaction(
        id=orm_transaction.id,
        date=orm_transaction.date,
        transaction_type=transaction_type_to_domain(orm_transaction.transaction_type),
        amount=orm_transaction.amount,
        home_currency_amount=orm_transaction.home_currency_amount,
        source_account=account_to_domain(source) if source is not None else None,
        destination_account=(
            account_to_domain(destination) if destination is not None else None
        ),
        category=reference_to_domain(orm_transaction.category),
        partner=reference_to_domain(orm_transaction.partner),
        creator=reference_to_domain(orm_transaction.creator),
        code=orm_transaction.code,
        description=orm_transaction.description,
        document_number=orm_transaction.document_number,
        notes=orm_transaction.notes,
    )

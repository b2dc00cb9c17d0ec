"""Storage layer for ledgerlens."""

from ledgerlens.database.base import LedgerStore
from ledgerlens.database.factories import create_sqlite_database
from ledgerlens.database.memory import InMemoryLedgerStore
from ledgerlens.database.sqlalchemy_db import SQLAlchemyLedgerStore

__all__ = [
    "LedgerStore",
    "InMemoryLedgerStore",
    "SQLAlchemyLedgerStore",
    "create_sqlite_database",
]

"""Ledger store factory functions."""

import os
from pathlib import Path
from typing import Optional

from ledgerlens.database.sqlalchemy_db import SQLAlchemyLedgerStore


def create_sqlite_database(database_path: Optional[str] = None) -> SQLAlchemyLedgerStore:
    """Create a SQLite-backed ledger store.

    Args:
        database_path: Path to SQLite database file. If None, checks LEDGERLENS_DB_PATH
            environment variable, then defaults to ~/.ledgerlens/ledgerlens.db

    Returns:
        SQLAlchemyLedgerStore instance configured for SQLite
    """
    if database_path is None:
        database_path = os.environ.get("LEDGERLENS_DB_PATH")

    if database_path is None:
        db_dir = Path.home() / ".ledgerlens"
        db_dir.mkdir(exist_ok=True)
        database_path = str(db_dir / "ledgerlens.db")

    return SQLAlchemyLedgerStore(f"sqlite:///{database_path}")

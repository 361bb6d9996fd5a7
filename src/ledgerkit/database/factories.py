"""Factories for the ledgerkit SQLite store."""

import os
from pathlib import Path
from typing import Optional

from ledgerkit.database.sqlalchemy_db import SQLAlchemyDatabase


def create_sqlite_database(database_path: Optional[str] = None) -> SQLAlchemyDatabase:
    """Open the ledger store held in a SQLite file.

    The path comes from the argument, then LEDGERKIT_DB_PATH, then
    ``~/.ledgerkit/ledgerkit.db``. The parent directory is created if missing.

    Returns:
        SQLAlchemyDatabase instance configured for SQLite
    """
    database_path = database_path or os.environ.get("LEDGERKIT_DB_PATH")
    path = Path(database_path) if database_path else Path.home() / ".ledgerkit" / "ledgerkit.db"
    path.parent.mkdir(parents=True, exist_ok=True)
    return SQLAlchemyDatabase(f"sqlite:///{path}")

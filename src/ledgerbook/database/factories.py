"""Database factory functions for creating database instances."""

import logging
import os
from pathlib import Path
from typing import Optional

from ledgerbook.database.sqlalchemy_db import SQLAlchemyDatabase

DB_PATH_ENV_VAR = "LEDGERBOOK_DB_PATH"

logger = logging.getLogger(__name__)


def default_database_path() -> Path:
    """Location used when neither an explicit path nor LEDGERBOOK_DB_PATH is given."""
    return Path.home() / ".ledgerbook" / "ledgerbook.db"


def create_sqlite_database(database_path: Optional[str] = None) -> SQLAlchemyDatabase:
    """Create a SQLite database instance.

    Args:
        database_path: Path to SQLite database file. If None, checks LEDGERBOOK_DB_PATH
            environment variable, then falls back to default_database_path()

    Returns:
        SQLAlchemyDatabase instance configured for SQLite
    """
    path = database_path or os.environ.get(DB_PATH_ENV_VAR)
    if path is None:
        path = default_database_path()
        path.parent.mkdir(parents=True, exist_ok=True)

    logger.debug("Using ledger database at %s", path)
    return SQLAlchemyDatabase(f"sqlite:///{path}")

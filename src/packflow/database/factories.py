"""Database factory functions for creating database instances."""

import logging
import os
from pathlib import Path
from typing import Optional

from packflow.database.sqlalchemy_db import SQLAlchemyDatabase

logger = logging.getLogger(__name__)

DEFAULT_DB_PATH = Path.home() / ".packflow" / "packflow.db"


def resolve_database_path(database_path: Optional[str] = None) -> Path:
    """Explicit path, else PACKFLOW_DB_PATH, else ~/.packflow/packflow.db."""
    chosen = database_path or os.environ.get("PACKFLOW_DB_PATH")
    return Path(chosen).expanduser() if chosen else DEFAULT_DB_PATH


def create_sqlite_database(database_path: Optional[str] = None) -> SQLAlchemyDatabase:
    """Create a SQLite database instance.

    The parent directory of the database file is created if missing.

    Args:
        database_path: Path to SQLite database file

    Returns:
        SQLAlchemyDatabase instance configured for SQLite
    """
    path = resolve_database_path(database_path)
    path.parent.mkdir(parents=True, exist_ok=True)
    logger.debug("Using database %s", path)
    return SQLAlchemyDatabase(f"sqlite:///{path}")

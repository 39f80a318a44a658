"""Database layer for packflow application."""

from packflow.database.base import Database
from packflow.database.factories import create_sqlite_database, resolve_database_path

__all__ = ["Database", "create_sqlite_database", "resolve_database_path"]

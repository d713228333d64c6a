"""SQLite adapter for sqlhelper."""

from sqlhelper.adapters.sqlite.config import SqliteConfig, SqliteConnectionParams
from sqlhelper.adapters.sqlite.driver import SqliteDriver, SqliteExceptionHandler, SqliteResultHandle

__all__ = ("SqliteConfig", "SqliteConnectionParams", "SqliteDriver", "SqliteExceptionHandler", "SqliteResultHandle")

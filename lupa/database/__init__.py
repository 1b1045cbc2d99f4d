"""Database module - connection management."""

from lupa.database.connection import (
    DatabaseUnavailable,
    get_async_client,
    get_async_database,
    close_async_client,
    check_connection,
)

__all__ = [
    "DatabaseUnavailable",
    "get_async_client",
    "get_async_database",
    "close_async_client",
    "check_connection",
]

"""
Database module initialization.
Exports database components for use throughout the application.
"""

from bookstore.database.connection import (
    init_client,
    close_client,
    get_client,
    get_database,
    get_collection,
    check_connection,
    get_db_info,
)
from bookstore.database.indexes import INDEX_DEFINITIONS, ensure_indexes

__all__ = [
    # Connection management
    "init_client",
    "close_client",
    "get_client",
    "get_database",
    "get_collection",
    # Indexes
    "INDEX_DEFINITIONS",
    "ensure_indexes",
    # Utilities
    "check_connection",
    "get_db_info",
]

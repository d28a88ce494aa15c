"""
MongoDB connection management.

This module provides:
- MongoClient lifecycle (init_client / close_client)
- Database and collection accessors for the configured target
- Health check utilities
"""

import logging
from typing import Optional

from pymongo import MongoClient
from pymongo.collection import Collection
from pymongo.database import Database
from pymongo.errors import PyMongoError

from bookstore.config import Settings, get_settings
from bookstore.exceptions import DatabaseNotInitializedError

logger = logging.getLogger(__name__)

# Global MongoDB client instance
_client: Optional[MongoClient] = None
_settings: Optional[Settings] = None


def init_client(settings: Optional[Settings] = None) -> MongoClient:
    """
    Create the MongoDB client for the configured URL.
    The target database is chosen once here, by name, for every later call.
    """
    global _client, _settings

    if _client is not None:
        return _client

    _settings = settings or get_settings()
    _client = MongoClient(
        _settings.mongodb.url,
        serverSelectionTimeoutMS=_settings.mongodb.server_selection_timeout_ms,
        appname=_settings.mongodb.app_name,
    )
    logger.info(
        f"MongoDB client created for {_sanitize_mongodb_url(_settings.mongodb.url)} "
        f"(database={_settings.mongodb.database})"
    )
    return _client


def close_client() -> None:
    """
    Close MongoDB connection.
    """
    global _client
    if _client is not None:
        _client.close()
        _client = None


def get_client() -> MongoClient:
    """
    Get the MongoDB client instance.
    """
    if _client is None:
        raise DatabaseNotInitializedError(
            "Database not initialized. Call init_client() first."
        )
    return _client


def get_database() -> Database:
    """
    Get the configured MongoDB database.
    """
    client = get_client()
    return client[_settings.mongodb.database]


def get_collection() -> Collection:
    """
    Get the books collection.
    """
    return get_database()[_settings.mongodb.collection]


def check_connection() -> bool:
    """
    Check if MongoDB connection is healthy.
    """
    if _client is None:
        return False

    try:
        _client.admin.command("ping")
        return True
    except PyMongoError as e:
        logger.warning(f"MongoDB ping failed: {e}")
        return False


def get_db_info(settings: Optional[Settings] = None) -> dict:
    """
    Get database connection information and status.
    """
    settings = settings or _settings or get_settings()

    return {
        "status": "connected" if _client is not None else "disconnected",
        "url": _sanitize_mongodb_url(settings.mongodb.url),
        "database": settings.mongodb.database,
        "collection": settings.mongodb.collection,
    }


def _sanitize_mongodb_url(url: str) -> str:
    """
    Hide password in MongoDB URL for safe logging.
    """
    if "@" not in url or "://" not in url:
        return url

    # Handle mongodb+srv:// or mongodb://
    protocol, rest = url.split("://", 1)
    credentials, host = rest.rsplit("@", 1)
    if ":" in credentials:
        username = credentials.split(":", 1)[0]
        return f"{protocol}://{username}:***@{host}"
    return url

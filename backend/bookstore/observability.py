"""Logfire cloud observability initialization and instrumentation."""

import logging

import logfire

from bookstore import __version__
from bookstore.config import Settings

logger = logging.getLogger(__name__)


def initialize_logfire(settings: Settings) -> None:
    """
    Initialize Logfire with MongoDB instrumentation.

    Must be called once at startup, before the first MongoClient is created,
    so pymongo command monitoring picks up every statement.

    Instruments:
    - PyMongo (one span per command: find, update, aggregate, createIndexes, explain)
    - Python logging (bridges to Logfire)
    """
    if not settings.logfire_token:
        logger.warning("Logfire token not set - observability disabled")
        return

    try:
        logfire.configure(
            token=settings.logfire_token,
            service_name="bookstore",
            service_version=__version__,
        )

        logfire.instrument_pymongo()

        root_logger = logging.getLogger()
        root_logger.addHandler(logfire.LogfireLoggingHandler())

        logger.info("Logfire cloud tracking initialized")

    except Exception as e:
        logger.warning(f"Failed to initialize Logfire: {e}")

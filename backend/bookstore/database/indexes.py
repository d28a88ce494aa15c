"""
MongoDB Index Definitions

Indexes on the books collection:
- title (ascending): lookups by title in update/delete/explain statements
- (author ascending, published_year descending): compound, author listings newest first
"""

import logging

from pymongo import IndexModel
from pymongo.collection import Collection

from bookstore.queries import AUTHOR_YEAR_INDEX, TITLE_INDEX

logger = logging.getLogger(__name__)

INDEX_DEFINITIONS: list[IndexModel] = [
    IndexModel(TITLE_INDEX, name="title_1"),
    IndexModel(AUTHOR_YEAR_INDEX, name="author_1_published_year_-1"),
]


def ensure_indexes(collection: Collection) -> list[str]:
    """Create every index in INDEX_DEFINITIONS. Existing identical indexes are left alone."""
    names = collection.create_indexes(INDEX_DEFINITIONS)
    logger.info(f"Ensured indexes on {collection.name}: {', '.join(names)}")
    return names

"""
Query builders for the books collection.

Every function returns plain filter, update, sort or pipeline structures
that pymongo passes straight to the server. Nothing here talks to MongoDB.

Filters:
- genre_filter, published_after_filter, author_filter, title_filter
- in_stock_published_after_filter: implicit AND across two fields

Shaping:
- SUMMARY_PROJECTION, sort_spec / price_sort, page_window

Aggregation pipelines:
- average_price_by_genre_pipeline, top_authors_pipeline, books_by_decade_pipeline

Indexes:
- TITLE_INDEX, AUTHOR_YEAR_INDEX
"""

from typing import Any

from pymongo import ASCENDING, DESCENDING

from bookstore.exceptions import InvalidPageError

Filter = dict[str, Any]
Pipeline = list[dict[str, Any]]
SortSpec = list[tuple[str, int]]


# ============================================================================
# Filters
# ============================================================================


def genre_filter(genre: str) -> Filter:
    return {"genre": genre}


def published_after_filter(year: int) -> Filter:
    return {"published_year": {"$gt": year}}


def author_filter(author: str) -> Filter:
    return {"author": author}


def title_filter(title: str) -> Filter:
    return {"title": title}


def in_stock_published_after_filter(year: int) -> Filter:
    return {"in_stock": True, **published_after_filter(year)}


def set_price_update(price: float) -> dict[str, Any]:
    return {"$set": {"price": price}}


# ============================================================================
# Projection, sorting, pagination
# ============================================================================


SUMMARY_PROJECTION: dict[str, int] = {"_id": 0, "title": 1, "author": 1, "price": 1}


def sort_spec(field: str, ascending: bool = True) -> SortSpec:
    return [(field, ASCENDING if ascending else DESCENDING)]


def price_sort(ascending: bool = True) -> SortSpec:
    return sort_spec("price", ascending)


def page_window(page: int, page_size: int) -> tuple[int, int]:
    """
    Translate a 1-based page number into (skip, limit).

    Page 1 skips nothing; page N skips the (N - 1) preceding pages.
    """
    if page < 1:
        raise InvalidPageError(f"Page must be >= 1, got {page}")
    if page_size < 1:
        raise InvalidPageError(f"Page size must be >= 1, got {page_size}")
    return (page - 1) * page_size, page_size


# ============================================================================
# Aggregation pipelines
# ============================================================================


def average_price_by_genre_pipeline() -> Pipeline:
    return [
        {"$group": {"_id": "$genre", "averagePrice": {"$avg": "$price"}}},
    ]


def top_authors_pipeline(limit: int = 1) -> Pipeline:
    return [
        {"$group": {"_id": "$author", "count": {"$sum": 1}}},
        {"$sort": {"count": -1}},
        {"$limit": limit},
    ]


def books_by_decade_pipeline() -> Pipeline:
    """Bucket books by floor(published_year / 10) and label each bucket like "1990s"."""
    return [
        {
            "$group": {
                "_id": {"$floor": {"$divide": ["$published_year", 10]}},
                "count": {"$sum": 1},
            }
        },
        {
            "$project": {
                "decade": {
                    "$concat": [{"$toString": {"$multiply": ["$_id", 10]}}, "s"]
                },
                "count": 1,
                "_id": 0,
            }
        },
    ]


def decade_label(year: int) -> str:
    """Python rendering of the decade bucket label, e.g. 1997 -> "1990s"."""
    return f"{(year // 10) * 10}s"


# ============================================================================
# Indexes
# ============================================================================


TITLE_INDEX: SortSpec = [("title", ASCENDING)]

AUTHOR_YEAR_INDEX: SortSpec = [("author", ASCENDING), ("published_year", DESCENDING)]

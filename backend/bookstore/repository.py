"""
BookRepository

MongoDB operations for the 'books' collection.

CRUD:
- find_by_genre, find_published_after, find_by_author
- update_price(title, price): update_one with $set
- delete_by_title(title): delete_one

Advanced:
- find_in_stock_published_after, list_summaries (projection)
- sort_by_price(ascending), get_page(page, page_size)

Aggregation:
- average_price_by_genre, top_author, count_by_decade

Indexes:
- create_title_index, create_author_year_index, explain_find_by_title
"""

import logging
from typing import Any, Callable, Iterable, TypeVar

from pydantic import BaseModel, ValidationError
from pymongo.collection import Collection
from pymongo.errors import PyMongoError

from bookstore import queries
from bookstore.exceptions import QueryExecutionError
from bookstore.models import (
    AuthorBookCount,
    Book,
    BookSummary,
    DecadeCount,
    ExplainSummary,
    GenreAveragePrice,
    WriteSummary,
)

logger = logging.getLogger(__name__)

T = TypeVar("T")
M = TypeVar("M", bound=BaseModel)


class BookRepository:
    """Runs the bookstore statements against a single pymongo collection."""

    def __init__(self, collection: Collection):
        self.collection = collection

    def _execute(self, operation: str, call: Callable[[], T]) -> T:
        try:
            return call()
        except PyMongoError as e:
            logger.error(f"{operation} failed on {self.collection.name}: {e}")
            raise QueryExecutionError(operation, str(e)) from e

    def _validate(self, operation: str, model: type[M], docs: list[dict]) -> list[M]:
        try:
            return [model.model_validate(doc) for doc in docs]
        except ValidationError as e:
            logger.error(f"{operation} returned a malformed {model.__name__} document: {e}")
            raise QueryExecutionError(operation, f"malformed {model.__name__} document: {e}") from e

    def _find_books(self, operation: str, filter: dict[str, Any], **kwargs: Any) -> list[Book]:
        logger.debug(f"{operation}: find({filter}, {kwargs})")
        docs = self._execute(
            operation, lambda: list(self.collection.find(filter, **kwargs))
        )
        logger.info(f"{operation}: {len(docs)} book(s)")
        return self._validate(operation, Book, docs)

    def _aggregate(self, operation: str, pipeline: list[dict[str, Any]]) -> list[dict]:
        logger.debug(f"{operation}: aggregate({pipeline})")
        docs = self._execute(
            operation, lambda: list(self.collection.aggregate(pipeline))
        )
        logger.info(f"{operation}: {len(docs)} row(s)")
        return docs

    # ------------------------------------------------------------------
    # Basic CRUD
    # ------------------------------------------------------------------

    def find_by_genre(self, genre: str = "Fiction") -> list[Book]:
        return self._find_books("find_by_genre", queries.genre_filter(genre))

    def find_published_after(self, year: int = 2010) -> list[Book]:
        return self._find_books(
            "find_published_after", queries.published_after_filter(year)
        )

    def find_by_author(self, author: str = "Harper Lee") -> list[Book]:
        return self._find_books("find_by_author", queries.author_filter(author))

    def update_price(
        self, title: str = "To Kill a Mockingbird", price: float = 15.99
    ) -> WriteSummary:
        """Set the price of the first book matching title. No match is not an error."""
        filter = queries.title_filter(title)
        update = queries.set_price_update(price)
        logger.debug(f"update_price: update_one({filter}, {update})")

        result = self._execute(
            "update_price", lambda: self.collection.update_one(filter, update)
        )
        summary = WriteSummary.from_update(result)
        logger.info(
            f"update_price: '{title}' matched={summary.matched} modified={summary.modified}"
        )
        return summary

    def delete_by_title(self, title: str = "To Kill a Mockingbird") -> WriteSummary:
        filter = queries.title_filter(title)
        logger.debug(f"delete_by_title: delete_one({filter})")

        result = self._execute(
            "delete_by_title", lambda: self.collection.delete_one(filter)
        )
        summary = WriteSummary.from_delete(result)
        logger.info(f"delete_by_title: '{title}' deleted={summary.deleted}")
        return summary

    # ------------------------------------------------------------------
    # Advanced queries
    # ------------------------------------------------------------------

    def find_in_stock_published_after(self, year: int = 2010) -> list[Book]:
        return self._find_books(
            "find_in_stock_published_after",
            queries.in_stock_published_after_filter(year),
        )

    def list_summaries(self) -> list[BookSummary]:
        logger.debug(f"list_summaries: find({{}}, {queries.SUMMARY_PROJECTION})")
        docs = self._execute(
            "list_summaries",
            lambda: list(self.collection.find({}, queries.SUMMARY_PROJECTION)),
        )
        logger.info(f"list_summaries: {len(docs)} book(s)")
        return self._validate("list_summaries", BookSummary, docs)

    def sort_by_price(self, ascending: bool = True) -> list[Book]:
        return self._find_books(
            "sort_by_price", {}, sort=queries.price_sort(ascending)
        )

    def get_page(self, page: int = 1, page_size: int = 5) -> list[Book]:
        """
        Fetch one page of books.

        Pages are ordered by _id so consecutive pages never overlap on an
        unchanged collection.
        """
        skip, limit = queries.page_window(page, page_size)
        return self._find_books(
            "get_page",
            {},
            sort=queries.sort_spec("_id"),
            skip=skip,
            limit=limit,
        )

    # ------------------------------------------------------------------
    # Aggregation pipelines
    # ------------------------------------------------------------------

    def average_price_by_genre(self) -> list[GenreAveragePrice]:
        docs = self._aggregate(
            "average_price_by_genre", queries.average_price_by_genre_pipeline()
        )
        return self._validate("average_price_by_genre", GenreAveragePrice, docs)

    def top_author(self) -> AuthorBookCount | None:
        """Author with the most books, or None when the collection is empty."""
        docs = self._aggregate("top_author", queries.top_authors_pipeline(limit=1))
        if not docs:
            return None
        return self._validate("top_author", AuthorBookCount, docs[:1])[0]

    def count_by_decade(self) -> list[DecadeCount]:
        docs = self._aggregate("count_by_decade", queries.books_by_decade_pipeline())
        return self._validate("count_by_decade", DecadeCount, docs)

    # ------------------------------------------------------------------
    # Indexing
    # ------------------------------------------------------------------

    def create_title_index(self) -> str:
        logger.debug(f"create_title_index: create_index({queries.TITLE_INDEX})")
        name = self._execute(
            "create_title_index",
            lambda: self.collection.create_index(queries.TITLE_INDEX),
        )
        logger.info(f"create_title_index: {name}")
        return name

    def create_author_year_index(self) -> str:
        logger.debug(f"create_author_year_index: create_index({queries.AUTHOR_YEAR_INDEX})")
        name = self._execute(
            "create_author_year_index",
            lambda: self.collection.create_index(queries.AUTHOR_YEAR_INDEX),
        )
        logger.info(f"create_author_year_index: {name}")
        return name

    def explain_find_by_title(self, title: str = "To Kill a Mockingbird") -> ExplainSummary:
        """Run the title lookup through the explain command with executionStats verbosity."""
        command = {
            "explain": {
                "find": self.collection.name,
                "filter": queries.title_filter(title),
            },
            "verbosity": "executionStats",
        }
        logger.debug(f"explain_find_by_title: {command}")

        data = self._execute(
            "explain_find_by_title",
            lambda: self.collection.database.command(command),
        )
        summary = ExplainSummary.from_explain(data)
        logger.info(
            f"explain_find_by_title: stage={summary.stage} index={summary.index_name} "
            f"docs_examined={summary.total_docs_examined}"
        )
        return summary

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------

    def insert_many(self, books: Iterable[Book]) -> int:
        documents = [book.to_document() for book in books]
        logger.debug(f"insert_many: {len(documents)} document(s)")
        if not documents:
            return 0
        result = self._execute(
            "insert_many", lambda: self.collection.insert_many(documents)
        )
        logger.info(f"insert_many: {len(result.inserted_ids)} book(s)")
        return len(result.inserted_ids)

    def count(self) -> int:
        logger.debug("count: count_documents({})")
        return self._execute("count", lambda: self.collection.count_documents({}))

    def index_names(self) -> list[str]:
        logger.debug("index_names: index_information()")
        info = self._execute("index_names", lambda: self.collection.index_information())
        return sorted(info)

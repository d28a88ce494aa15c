"""Fixture dataset for the books collection."""

import logging

from pymongo.collection import Collection

from bookstore.models import Book

logger = logging.getLogger(__name__)


def _book(title: str, author: str, genre: str, year: int, price: float, in_stock: bool) -> Book:
    return Book(
        title=title,
        author=author,
        genre=genre,
        published_year=year,
        price=price,
        in_stock=in_stock,
    )


BOOKS: list[Book] = [
    _book("To Kill a Mockingbird", "Harper Lee", "Fiction", 1960, 12.99, True),
    _book("Go Set a Watchman", "Harper Lee", "Fiction", 2015, 14.50, True),
    _book("1984", "George Orwell", "Dystopian", 1949, 10.99, True),
    _book("Animal Farm", "George Orwell", "Political Satire", 1945, 8.50, False),
    _book("Homage to Catalonia", "George Orwell", "Memoir", 1938, 11.25, True),
    _book("The Great Gatsby", "F. Scott Fitzgerald", "Fiction", 1925, 9.99, True),
    _book("Brave New World", "Aldous Huxley", "Dystopian", 1932, 11.50, False),
    _book("The Hobbit", "J.R.R. Tolkien", "Fantasy", 1937, 14.99, True),
    _book("The Catcher in the Rye", "J.D. Salinger", "Fiction", 1951, 8.99, True),
    _book("Harry Potter and the Philosopher's Stone", "J.K. Rowling", "Fantasy", 1997, 10.99, True),
    _book("The Martian", "Andy Weir", "Science Fiction", 2011, 15.99, True),
    _book("Project Hail Mary", "Andy Weir", "Science Fiction", 2021, 18.99, False),
    _book("The Night Circus", "Erin Morgenstern", "Fantasy", 2011, 13.49, True),
    _book("Where the Crawdads Sing", "Delia Owens", "Fiction", 2018, 16.99, False),
]


def seed_books(collection: Collection, drop: bool = True) -> int:
    """Load BOOKS into the collection, replacing existing documents unless drop is False."""
    if drop:
        deleted = collection.delete_many({}).deleted_count
        logger.info(f"Removed {deleted} existing document(s) from {collection.name}")

    result = collection.insert_many([book.to_document() for book in BOOKS])
    inserted = len(result.inserted_ids)
    logger.info(f"Seeded {inserted} book(s) into {collection.name}")
    return inserted

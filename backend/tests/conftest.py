import mongomock
import pytest

from bookstore.config import get_settings
from bookstore.database import close_client
from bookstore.repository import BookRepository
from bookstore.seed import seed_books


@pytest.fixture(autouse=True)
def isolated_settings(tmp_path, monkeypatch):
    """Keep stray .env and data/config.yaml files out of every test."""
    monkeypatch.chdir(tmp_path)
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()
    close_client()


@pytest.fixture
def collection():
    client = mongomock.MongoClient()
    books = client["plp_bookstore"]["books"]
    seed_books(books)
    yield books
    client.close()


@pytest.fixture
def repo(collection) -> BookRepository:
    return BookRepository(collection)

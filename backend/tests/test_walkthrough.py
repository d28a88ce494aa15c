"""Tests for running the statements in script order."""

import pytest

from bookstore.config import QueryConfig
from bookstore.exceptions import QueryExecutionError
from bookstore.models import AuthorBookCount, WriteSummary
from bookstore.repository import BookRepository
from bookstore.walkthrough import run_walkthrough


def test_crud_through_aggregation_in_order(repo: BookRepository) -> None:
    results = run_walkthrough(repo, sections=["crud", "advanced", "aggregation"])

    assert [r.number for r in results] == [1, 2, 3, 4, 5, 6, 7, 8, 9, 10, 10, 11, 12, 13]
    assert all(r.ok for r in results)

    update, delete = results[3].result, results[4].result
    assert update == WriteSummary(matched=1, modified=1)
    assert delete == WriteSummary(deleted=1)

    # Statement 6 onwards sees the collection without the deleted title
    assert len(results[6].result) == 13
    assert isinstance(results[12].result, AuthorBookCount)


def test_section_filter(repo: BookRepository) -> None:
    results = run_walkthrough(repo, ["aggregation"])
    assert [r.section for r in results] == ["aggregation"] * 3


def test_parameters_come_from_query_config(repo: BookRepository) -> None:
    params = QueryConfig(genre="Fantasy", author="Andy Weir", page_size=4)
    results = run_walkthrough(repo, ["crud", "advanced"], params=params)

    assert all(book.genre == "Fantasy" for book in results[0].result)
    assert {book.author for book in results[2].result} == {"Andy Weir"}
    assert len(results[9].result) == 4


def test_failing_statement_does_not_stop_the_rest(
    repo: BookRepository, monkeypatch: pytest.MonkeyPatch
) -> None:
    def broken_index():
        raise RuntimeError("boom")

    def broken_explain(title: str):
        raise QueryExecutionError("explain_find_by_title", "explain not supported")

    monkeypatch.setattr(repo, "create_title_index", broken_index)
    monkeypatch.setattr(repo, "explain_find_by_title", broken_explain)

    results = run_walkthrough(repo, sections=["indexes"])

    assert [r.number for r in results] == [14, 15, 16]
    assert not results[0].ok and "boom" in results[0].error
    assert results[1].ok and results[1].result == "author_1_published_year_-1"
    assert not results[2].ok and "explain not supported" in results[2].error


def test_sections_is_the_second_positional_argument(repo: BookRepository) -> None:
    results = run_walkthrough(repo, ["aggregation"])
    assert [r.number for r in results] == [11, 12, 13]

    with pytest.raises(TypeError):
        run_walkthrough(repo, ["crud"], QueryConfig())

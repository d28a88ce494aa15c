"""Statement walkthrough: CRUD -> Advanced -> Aggregation -> Indexes, in script order."""

import logging
from typing import Any, Callable, Literal

from pydantic import BaseModel

from bookstore.config import QueryConfig
from bookstore.repository import BookRepository

logger = logging.getLogger("bookstore.walkthrough")

Section = Literal["crud", "advanced", "aggregation", "indexes"]

SECTIONS: tuple[Section, ...] = ("crud", "advanced", "aggregation", "indexes")


class StepResult(BaseModel):
    """Outcome of one numbered statement."""

    number: int
    section: Section
    description: str
    result: Any = None
    error: str | None = None

    @property
    def ok(self) -> bool:
        return self.error is None


Step = tuple[int, Section, str, Callable[[], Any]]


def build_steps(repo: BookRepository, params: QueryConfig) -> list[Step]:
    """Numbered statements bound to their literal parameters."""
    return [
        (1, "crud", f"Find all books in genre '{params.genre}'",
         lambda: repo.find_by_genre(params.genre)),
        (2, "crud", f"Find books published after {params.year_threshold}",
         lambda: repo.find_published_after(params.year_threshold)),
        (3, "crud", f"Find books by {params.author}",
         lambda: repo.find_by_author(params.author)),
        (4, "crud", f"Set price of '{params.title}' to {params.new_price}",
         lambda: repo.update_price(params.title, params.new_price)),
        (5, "crud", f"Delete '{params.title}'",
         lambda: repo.delete_by_title(params.title)),
        (6, "advanced", f"In stock and published after {params.year_threshold}",
         lambda: repo.find_in_stock_published_after(params.year_threshold)),
        (7, "advanced", "Project title, author and price",
         repo.list_summaries),
        (8, "advanced", "Sort by price ascending",
         lambda: repo.sort_by_price(ascending=True)),
        (9, "advanced", "Sort by price descending",
         lambda: repo.sort_by_price(ascending=False)),
        (10, "advanced", f"Page 1 ({params.page_size} per page)",
         lambda: repo.get_page(1, params.page_size)),
        (10, "advanced", f"Page 2 ({params.page_size} per page)",
         lambda: repo.get_page(2, params.page_size)),
        (11, "aggregation", "Average price by genre",
         repo.average_price_by_genre),
        (12, "aggregation", "Author with the most books",
         repo.top_author),
        (13, "aggregation", "Books by publication decade",
         repo.count_by_decade),
        (14, "indexes", "Create index on title",
         repo.create_title_index),
        (15, "indexes", "Create compound index on author and published_year",
         repo.create_author_year_index),
        (16, "indexes", f"Explain title lookup for '{params.title}'",
         lambda: repo.explain_find_by_title(params.title)),
    ]


def run_walkthrough(
    repo: BookRepository,
    sections: list[Section] | None = None,
    *,
    params: QueryConfig | None = None,
) -> list[StepResult]:
    """
    Run the statements of the selected sections in order.

    A failing statement is recorded with its error and the walkthrough moves on;
    no statement depends on the result of another.
    """
    params = params or QueryConfig()
    selected = set(sections or SECTIONS)
    results: list[StepResult] = []

    for number, section, description, call in build_steps(repo, params):
        if section not in selected:
            continue

        logger.info(f"[{number}] {description}")
        try:
            result = call()
            results.append(
                StepResult(number=number, section=section, description=description, result=result)
            )
        except Exception as e:
            logger.error(f"[{number}] {description} failed: {e}", exc_info=True)
            results.append(
                StepResult(number=number, section=section, description=description, error=str(e))
            )

    failed = sum(1 for r in results if not r.ok)
    logger.info(f"Walkthrough complete: {len(results)} statement(s), {failed} failed")
    return results

"""Pydantic models for book records and query results."""

from __future__ import annotations

from typing import Any

from bson import ObjectId
from pydantic import BaseModel, ConfigDict, Field, field_validator


class Book(BaseModel):
    """A catalog entry in the books collection."""

    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    id: str | None = Field(default=None, alias="_id")
    title: str
    author: str
    genre: str
    published_year: int
    price: float
    in_stock: bool

    @field_validator("id", mode="before")
    @classmethod
    def stringify_object_id(cls, v: Any) -> str | None:
        if isinstance(v, ObjectId):
            return str(v)
        return v

    def to_document(self) -> dict[str, Any]:
        """Document suitable for insert; MongoDB assigns the _id."""
        return self.model_dump(exclude={"id"})


class BookSummary(BaseModel):
    """Title, author and price projection of a book."""

    title: str
    author: str
    price: float


class GenreAveragePrice(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    genre: str | None = Field(alias="_id")
    average_price: float = Field(alias="averagePrice")


class AuthorBookCount(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    author: str | None = Field(alias="_id")
    count: int


class DecadeCount(BaseModel):
    decade: str
    count: int


class WriteSummary(BaseModel):
    """Counts reported by a single-document update or delete."""

    matched: int = 0
    modified: int = 0
    deleted: int = 0

    @classmethod
    def from_update(cls, result: Any) -> WriteSummary:
        return cls(matched=result.matched_count, modified=result.modified_count)

    @classmethod
    def from_delete(cls, result: Any) -> WriteSummary:
        return cls(deleted=result.deleted_count)


class ExplainSummary(BaseModel):
    """Headline figures from an executionStats explain document."""

    stage: str = "UNKNOWN"
    index_name: str | None = None
    n_returned: int = 0
    total_docs_examined: int = 0
    total_keys_examined: int = 0
    execution_time_millis: int = 0
    raw: dict[str, Any] = Field(default_factory=dict, exclude=True)

    @property
    def used_index(self) -> bool:
        return self.index_name is not None

    @classmethod
    def from_explain(cls, data: dict[str, Any]) -> ExplainSummary:
        stats = data.get("executionStats", {})
        winning_plan = data.get("queryPlanner", {}).get("winningPlan", {})
        # Newer servers nest the classic plan under queryPlan
        plan = winning_plan.get("queryPlan", winning_plan)

        stage, index_name = _walk_plan(plan)
        return cls(
            stage=stage,
            index_name=index_name,
            n_returned=stats.get("nReturned", 0),
            total_docs_examined=stats.get("totalDocsExamined", 0),
            total_keys_examined=stats.get("totalKeysExamined", 0),
            execution_time_millis=stats.get("executionTimeMillis", 0),
            raw=data,
        )


def _walk_plan(plan: dict[str, Any]) -> tuple[str, str | None]:
    """Return the top stage name and the first index scanned below it."""
    stage = plan.get("stage", "UNKNOWN")
    node = plan
    while node:
        if node.get("stage") == "IXSCAN":
            return stage, node.get("indexName")
        node = node.get("inputStage")
    return stage, None

"""Query models — the immutable description of one search request."""

from __future__ import annotations

from enum import Enum
from typing import Union

from pydantic import BaseModel, ConfigDict, Field

from searchrecord.models.condition import ConditionNode

PageValue = Union[int, str, None]
"""A limit or offset as given by the caller: an int, a digit string, or unset."""


class SortDirection(str, Enum):
    """Sort direction for a single column."""

    ASC = "asc"
    DESC = "desc"


class QuerySpec(BaseModel):
    """Everything needed to run one query, frozen once built.

    Built by ``QueryBuilder.build()`` and handed whole to ``QueryExecutor``.
    """

    model_config = ConfigDict(frozen=True)

    where: ConditionNode | None = Field(default=None, description="Parsed filter condition")
    order_by: dict[str, SortDirection] = Field(default_factory=dict, description="Sort columns in priority order")
    limit: PageValue = Field(default=None, description="Maximum number of documents")
    offset: PageValue = Field(default=None, description="Number of documents to skip")
    fuzzy: bool = Field(default=False, description="Relax matching to any term instead of all terms")
    as_array: bool = Field(default=False, description="Return raw field mappings instead of records")
    index_by: str | None = Field(default=None, description="Column used to key the result set")


class CompiledQuery(BaseModel):
    """What was pushed onto the engine for one execution."""

    query: str = Field(default="", description="Compiled query expression")
    sort: dict[str, bool] = Field(default_factory=dict, description="Field -> ascending")
    limit: int | None = Field(default=None, description="Applied limit, None when not effective")
    offset: int | None = Field(default=None, description="Applied offset, None when no limit was applied")
    fuzzy: bool = Field(default=False, description="Whether fuzzy matching was enabled")

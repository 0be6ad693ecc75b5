"""Shared test fixtures and configuration."""

from __future__ import annotations

from typing import Any
from unittest.mock import MagicMock

import pytest

from searchrecord.adapters.base.search import Search
from searchrecord.config.settings import Settings
from searchrecord.models.document import Document
from searchrecord.models.record import Record


class Book(Record):
    """Record type used across the query tests."""

    __index_name__ = "books"

    title: str
    author: str | None = None
    year: int | None = None


@pytest.fixture
def settings() -> Settings:
    """Create a test Settings instance with defaults."""
    return Settings(
        _env_file=None,  # type: ignore[call-arg]
        debug=True,
        search={
            "default_adapter": "solr",
            "adapters": {"solr": {"hosts": ["http://localhost:8983/solr"], "index_pattern": "books"}},
        },
    )


@pytest.fixture
def book_rows() -> list[dict[str, Any]]:
    """Stored fields of three books, in engine result order."""
    return [
        {"id": "b1", "title": "The Left Hand of Darkness", "author": "Ursula K. Le Guin", "year": 1969},
        {"id": "b2", "title": "The Dispossessed", "author": "Ursula K. Le Guin", "year": 1974},
        {"id": "b3", "title": "Dune", "author": "Frank Herbert", "year": 1965},
    ]


@pytest.fixture
def search() -> MagicMock:
    """A mocked engine ``Search`` returning no documents."""
    mock = MagicMock(spec=Search)
    mock.search.return_value = []
    mock.count.return_value = 0
    return mock


@pytest.fixture
def connection(search: MagicMock) -> MagicMock:
    """A connection resolver that always hands out ``search``."""
    conn = MagicMock()
    conn.get_search.return_value = search
    return conn


@pytest.fixture
def book_model() -> type[Book]:
    return Book


@pytest.fixture
def book_docs(book_rows: list[dict[str, Any]]) -> list[Document]:
    """``book_rows`` as engine documents."""
    return [Document(id=row["id"], fields=row, score=1.0) for row in book_rows]

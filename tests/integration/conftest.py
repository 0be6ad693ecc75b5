"""Integration test fixtures — live search backends seeded with book data.

Expects backends to be running locally, e.g.:
    docker run -d -p 8983:8983 solr:9 solr-precreate books
    docker run -d -p 9201:9200 -e discovery.type=single-node \
        -e DISABLE_SECURITY_PLUGIN=true opensearchproject/opensearch:2

Seed data is loaded into each backend on first use; tests are skipped when
a backend is not reachable.
"""

from __future__ import annotations

import contextlib
import time
from typing import Any

import httpx
import pytest

from searchrecord.config.settings import SearchSettings
from searchrecord.core.connection import Connection
from searchrecord.models.record import Record

BOOKS: list[dict[str, Any]] = [
    {"id": "b1", "title": "The Left Hand of Darkness", "author": "Ursula K. Le Guin", "year": 1969, "genre": "sf"},
    {"id": "b2", "title": "The Dispossessed", "author": "Ursula K. Le Guin", "year": 1974, "genre": "sf"},
    {"id": "b3", "title": "A Wizard of Earthsea", "author": "Ursula K. Le Guin", "year": 1968, "genre": "fantasy"},
    {"id": "b4", "title": "Dune", "author": "Frank Herbert", "year": 1965, "genre": "sf"},
    {"id": "b5", "title": "Emma", "author": "Jane Austen", "year": 1815, "genre": "classic"},
]


class Book(Record):
    __index_name__ = "books"

    title: str
    author: str
    year: int
    genre: str


def _wait_for_service(url: str, timeout: float = 20.0) -> bool:
    """Block until *url* returns HTTP 200, or timeout."""
    deadline = time.monotonic() + timeout
    while time.monotonic() < deadline:
        try:
            r = httpx.get(url, timeout=5)
            if r.status_code == 200:
                return True
        except httpx.HTTPError:
            pass
        time.sleep(2)
    return False


@pytest.fixture
def book_model() -> type[Book]:
    return Book


# ── Solr ────────────────────────────────────────────────────────


def _seed_solr(host: str, collection: str = "books") -> None:
    with httpx.Client(base_url=host, timeout=30) as client:
        for field in [
            {"name": "title", "type": "text_general", "stored": True, "multiValued": False},
            {"name": "author", "type": "string", "stored": True},
            {"name": "year", "type": "pint", "stored": True},
            {"name": "genre", "type": "string", "stored": True},
        ]:
            with contextlib.suppress(httpx.HTTPError):
                client.post(f"/{collection}/schema", json={"add-field": field})

        client.post(f"/{collection}/update", json={"delete": {"query": "*:*"}}, params={"commit": "true"})
        resp = client.post(f"/{collection}/update", json=BOOKS, params={"commit": "true"})
        resp.raise_for_status()


@pytest.fixture(scope="session")
def solr_ready() -> str:
    """Ensure Solr is running and seeded."""
    host = "http://localhost:8983/solr"
    if not _wait_for_service(f"{host}/books/admin/ping"):
        pytest.skip("Solr not available at localhost:8983")
    _seed_solr(host)
    return host


@pytest.fixture
def solr_connection(solr_ready: str):
    settings = SearchSettings(
        default_adapter="solr",
        adapters={"solr": {"hosts": [solr_ready], "index_pattern": "books"}},
    )
    with Connection(settings) as conn:
        yield conn


# ── OpenSearch ──────────────────────────────────────────────────


def _seed_opensearch(host: str, index: str = "books") -> None:
    with httpx.Client(base_url=host, timeout=30) as client:
        client.delete(f"/{index}", params={"ignore_unavailable": "true"})

        mapping = {
            "mappings": {
                "properties": {
                    "title": {"type": "text"},
                    "author": {"type": "keyword"},
                    "year": {"type": "integer"},
                    "genre": {"type": "keyword"},
                }
            }
        }
        resp = client.put(f"/{index}", json=mapping)
        resp.raise_for_status()

        for doc in BOOKS:
            resp = client.put(f"/{index}/_doc/{doc['id']}", json=doc)
            resp.raise_for_status()

        client.post(f"/{index}/_refresh")


@pytest.fixture(scope="session")
def opensearch_ready() -> str:
    """Ensure OpenSearch is running and seeded."""
    pytest.importorskip("opensearchpy")
    host = "http://localhost:9201"
    if not _wait_for_service(host):
        pytest.skip("OpenSearch not available at localhost:9201")
    _seed_opensearch(host)
    return host


@pytest.fixture
def opensearch_connection(opensearch_ready: str):
    settings = SearchSettings(
        default_adapter="opensearch",
        adapters={"opensearch": {"hosts": [opensearch_ready], "index_pattern": "books"}},
    )
    with Connection(settings) as conn:
        yield conn

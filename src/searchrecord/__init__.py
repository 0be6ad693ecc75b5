"""searchrecord — ActiveRecord-style queries over full-text search engines.

Usage::

    from searchrecord import Connection, Record
    from searchrecord.config.settings import Settings

    class Book(Record):
        __index_name__ = "books"

    with Connection(Settings().search) as conn:
        books = Book.find(conn).where({"author": "Le Guin"}).order_by("year DESC").limit(10).all()
"""

from searchrecord.core.connection import Connection, ConnectionResolver
from searchrecord.core.query import ActiveQuery, QueryBuilder
from searchrecord.models.record import Record

__version__ = "0.1.0"

__all__ = [
    "ActiveQuery",
    "Connection",
    "ConnectionResolver",
    "QueryBuilder",
    "Record",
    "__version__",
]

"""Record base class — Typed application records hydrated from search hits."""

from __future__ import annotations

from collections.abc import Iterable
from typing import TYPE_CHECKING, Any, ClassVar

from pydantic import BaseModel, ConfigDict

if TYPE_CHECKING:
    from searchrecord.core.compiler import ConditionCompiler
    from searchrecord.core.connection import ConnectionResolver
    from searchrecord.core.query import ActiveQuery


class Record(BaseModel):
    """Base class for records stored in a search index.

    Subclasses declare the fields they care about; any other stored field is
    kept as an extra attribute.

    Example::

        class Book(Record):
            __index_name__ = "books"

            title: str
            year: int | None = None

        books = Book.find(conn).where({"year": 1969}).all()
    """

    model_config = ConfigDict(extra="allow")

    __index_name__: ClassVar[str | None] = None

    @classmethod
    def index_name(cls) -> str:
        """Name of the index or collection holding this record type."""
        return cls.__index_name__ or cls.__name__.lower()

    @classmethod
    def populate(cls, row: dict[str, Any]) -> Record:
        """Build a record from a document's field mapping."""
        return cls.model_validate(row)

    @classmethod
    def create_models(cls, rows: Iterable[dict[str, Any]]) -> list[Record]:
        return [cls.populate(row) for row in rows]

    def after_find(self) -> None:
        """Hook called once for each record loaded by a query."""

    @classmethod
    def find(cls, connection: ConnectionResolver, compiler: ConditionCompiler | None = None) -> ActiveQuery:
        """Start a query for this record type on ``connection``."""
        from searchrecord.core.query import ActiveQuery

        return ActiveQuery(cls, connection, compiler)

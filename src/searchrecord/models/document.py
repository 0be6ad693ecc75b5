"""Document model — A single hit returned by a search adapter."""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, Field


class Document(BaseModel):
    """Engine-neutral search hit.

    Adapters map their native hits to this shape; the executor only ever
    reads ``get_fields()``.
    """

    id: str = Field(default="", description="Engine document identifier")
    fields: dict[str, Any] = Field(default_factory=dict, description="Stored fields of the document")
    score: float | None = Field(default=None, description="Relevance score, if the engine reports one")

    def get_fields(self) -> dict[str, Any]:
        """Return a copy of the document's field mapping."""
        return dict(self.fields)

"""Response models — Results of document-level client operations.

All responses are transient values: they describe a single call and carry no
state across calls. "Not found" is represented inside the response
(``GetResponse.value is None``, ``DeleteResponse.found is False``), never as
an error.
"""

from __future__ import annotations

from typing import Any, Generic, TypeVar

from pydantic import BaseModel, Field

T = TypeVar("T")


class GetResponse(BaseModel, Generic[T]):
    """Result of fetching one document by id."""

    value: T | None = Field(default=None, description="The document, or None when it does not exist")
    version: int | None = Field(default=None, description="Document version (_version)")
    seq_no: int | None = Field(default=None, description="Sequence number (_seq_no)")
    primary_term: int | None = Field(default=None, description="Primary term (_primary_term)")

    @property
    def found(self) -> bool:
        return self.value is not None


class UpsertResponse(BaseModel, Generic[T]):
    """Acknowledgement of a single create-or-replace."""

    id: str = Field(description="Document id")
    index: str = Field(description="Index the document was written to")
    version: int | None = Field(default=None, description="Document version after the write")
    result: str = Field(default="", description="created, updated or noop")
    value: T | None = Field(default=None, description="The document that was written")

    @property
    def created(self) -> bool:
        return self.result == "created"


class BulkItemResult(BaseModel):
    """Outcome of one item in a bulk request."""

    id: str | None = Field(default=None, description="Document id, when one could be determined")
    index: str = Field(default="", description="Target index")
    status: int = Field(default=0, description="HTTP status reported for this item")
    result: str | None = Field(default=None, description="created, updated or noop on success")
    version: int | None = Field(default=None, description="Document version after the write")
    error: dict[str, Any] | None = Field(default=None, description="Error payload when the item failed")

    @property
    def ok(self) -> bool:
        return self.error is None

    @property
    def reason(self) -> str | None:
        """Short human-readable failure reason, if any."""
        if self.error is None:
            return None
        kind = self.error.get("type", "error")
        detail = self.error.get("reason")
        return f"{kind}: {detail}" if detail else str(kind)


class BulkUpsertResponse(BaseModel):
    """Aggregate result of a bulk upsert.

    A failing item never fails the whole batch; inspect ``failed`` instead.
    """

    took_ms: int = Field(default=0, description="Wall-clock time of the bulk call in ms")
    items: list[BulkItemResult] = Field(default_factory=list, description="Per-item results in input order")

    @property
    def errors(self) -> bool:
        return any(not item.ok for item in self.items)

    @property
    def succeeded(self) -> list[BulkItemResult]:
        return [item for item in self.items if item.ok]

    @property
    def failed(self) -> list[BulkItemResult]:
        return [item for item in self.items if not item.ok]


class DeleteResponse(BaseModel):
    """Acknowledgement of a single delete."""

    id: str = Field(description="Document id")
    index: str = Field(description="Index the delete targeted")
    found: bool = Field(description="Whether a document existed and was deleted")
    version: int | None = Field(default=None, description="Version recorded for the delete")

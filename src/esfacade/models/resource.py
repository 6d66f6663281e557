"""Resource descriptors — How a document type maps onto an Elasticsearch index.

A ``ResourceCompanion`` is handed to every document-level client call. It
names the target index, carries the document type tag, and knows how to turn
a typed document into an indexable body and back again.

Decoding never raises for a schema mismatch. It returns a ``DecodeResult``
that is either a ``DecodeSuccess`` or a ``DecodeError``.
"""

from __future__ import annotations

from typing import Any, Generic, TypeVar

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

T = TypeVar("T", bound=BaseModel)


class IndexName(BaseModel):
    """An Elasticsearch index (or alias) name.

    Call sites read ``.name`` explicitly; there is no string coercion.
    """

    model_config = ConfigDict(frozen=True)

    name: str = Field(description="Raw index name as sent to the cluster")

    @field_validator("name")
    @classmethod
    def _not_blank(cls, v: str) -> str:
        if not v or not v.strip():
            raise ValueError("Index name must not be empty")
        return v


class DecodeSuccess(BaseModel, Generic[T]):
    """A document that decoded cleanly into its model."""

    model_config = ConfigDict(frozen=True)

    value: T

    @property
    def ok(self) -> bool:
        return True


class DecodeError(BaseModel):
    """A document that did not match its model."""

    model_config = ConfigDict(frozen=True)

    detail: str = Field(description="Human-readable description of the mismatch")

    @property
    def ok(self) -> bool:
        return False


DecodeResult = DecodeSuccess[T] | DecodeError


class ResourceCompanion(Generic[T]):
    """Describes how to store documents of type ``T`` in Elasticsearch.

    Args:
        model: The pydantic model class documents decode into.
        index: Target index (an ``IndexName`` or a plain string).
        doc_type: Document type tag reported alongside responses.
        id_field: Attribute of the model holding the document id.

    Example:
        >>> class LogLine(BaseModel):
        ...     id: str
        ...     message: str
        >>> LOGS = ResourceCompanion(LogLine, index="logs-2024")
        >>> LOGS.index.name
        'logs-2024'
    """

    def __init__(
        self,
        model: type[T],
        index: IndexName | str,
        doc_type: str = "_doc",
        id_field: str = "id",
    ) -> None:
        self.model = model
        self.index = index if isinstance(index, IndexName) else IndexName(name=index)
        self.doc_type = doc_type
        self.id_field = id_field

    def __repr__(self) -> str:
        return f"ResourceCompanion({self.model.__name__}, index={self.index.name!r})"

    def id_of(self, obj: T) -> str:
        """Return the document id of ``obj``.

        Raises:
            ValueError: If the id attribute is missing or empty.
        """
        value = getattr(obj, self.id_field, None)
        if value is None or value == "":
            raise ValueError(f"{self.model.__name__} has no value for id field '{self.id_field}'")
        return str(value)

    def encode(self, obj: T) -> dict[str, Any]:
        """Serialize ``obj`` into a JSON-compatible ``_source`` body."""
        return obj.model_dump(mode="json")

    def decode(self, raw: dict[str, Any]) -> DecodeResult[T]:
        """Validate a raw ``_source`` body against the model."""
        try:
            return DecodeSuccess(value=self.model.model_validate(raw))
        except ValidationError as e:
            return DecodeError(detail=str(e.errors(include_url=False)))

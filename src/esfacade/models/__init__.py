"""Data models for documents, descriptors and client responses."""

from esfacade.models.resource import (
    DecodeError,
    DecodeResult,
    DecodeSuccess,
    IndexName,
    ResourceCompanion,
)
from esfacade.models.responses import (
    BulkItemResult,
    BulkUpsertResponse,
    DeleteResponse,
    GetResponse,
    UpsertResponse,
)

__all__ = [
    "BulkItemResult",
    "BulkUpsertResponse",
    "DecodeError",
    "DecodeResult",
    "DecodeSuccess",
    "DeleteResponse",
    "GetResponse",
    "IndexName",
    "ResourceCompanion",
    "UpsertResponse",
]

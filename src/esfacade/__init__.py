"""esfacade — Async typed client contract for an Elasticsearch cluster.

Quick start::

    from esfacade import AsyncElasticsearchClient, ResourceCompanion

    LOGS = ResourceCompanion(LogLine, index="logs-2024")

    async with AsyncElasticsearchClient(hosts=["http://localhost:9200"]) as es:
        await es.upsert(LOGS, LogLine(id="1", message="hello"))
        response = await es.get(LOGS, "1")
"""

from esfacade.client import AsyncElasticsearchClient, ElasticsearchClient, ESException
from esfacade.models import (
    BulkItemResult,
    BulkUpsertResponse,
    DeleteResponse,
    GetResponse,
    IndexName,
    ResourceCompanion,
    UpsertResponse,
)

__version__ = "0.1.0"

__all__ = [
    "AsyncElasticsearchClient",
    "BulkItemResult",
    "BulkUpsertResponse",
    "DeleteResponse",
    "ESException",
    "ElasticsearchClient",
    "GetResponse",
    "IndexName",
    "ResourceCompanion",
    "UpsertResponse",
    "__version__",
]

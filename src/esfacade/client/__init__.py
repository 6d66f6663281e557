"""Client layer — Abstract Elasticsearch contract and its async implementation."""

from esfacade.client.base import ElasticsearchClient, es_boundary
from esfacade.client.elasticsearch import AsyncElasticsearchClient
from esfacade.client.exceptions import ClientNotInitializedError, DocumentDecodeError, ESException

__all__ = [
    "AsyncElasticsearchClient",
    "ClientNotInitializedError",
    "DocumentDecodeError",
    "ESException",
    "ElasticsearchClient",
    "es_boundary",
]

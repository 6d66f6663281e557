"""Elasticsearch client — ``ElasticsearchClient`` backed by ``AsyncElasticsearch``.

Each primitive of the base contract maps onto a single call of the official
async client (the alias update issues a lookup first). The HTTP layer is
``elastic-transport``; by default it runs on ``httpx``
(``node_class="httpxasync"``).

Example::

    async with AsyncElasticsearchClient(hosts=["http://localhost:9200"]) as es:
        await es.create_index("logs-2024")
        await es.update_alias("logs-current", ["logs-2024"], ["logs-2023"])
"""

from __future__ import annotations

import logging
import time
from collections.abc import Iterable, Sequence
from typing import TYPE_CHECKING, Any

from elasticsearch import ApiError, AsyncElasticsearch, BadRequestError, NotFoundError
from elasticsearch.helpers import async_streaming_bulk

from esfacade.client.base import ElasticsearchClient, T, es_boundary
from esfacade.client.conversion import DEFAULT_UNHEALTHY_COLORS
from esfacade.client.exceptions import ClientNotInitializedError
from esfacade.models.resource import ResourceCompanion
from esfacade.models.responses import (
    BulkItemResult,
    BulkUpsertResponse,
    DeleteResponse,
    GetResponse,
    UpsertResponse,
)

if TYPE_CHECKING:
    from esfacade.config.settings import ElasticsearchSettings

logger = logging.getLogger(__name__)


def _body(response: Any) -> Any:
    """Unwrap an ``ApiResponse`` to its decoded body."""
    return getattr(response, "body", response)


def _error_type(err: ApiError) -> str | None:
    """Elasticsearch's ``error.type`` for a failed call, e.g. ``resource_already_exists_exception``."""
    body = err.body
    if isinstance(body, dict):
        error = body.get("error")
        if isinstance(error, dict):
            return error.get("type")
    return None


class AsyncElasticsearchClient(ElasticsearchClient):
    """Elasticsearch (v8+) client.

    Args:
        hosts: List of Elasticsearch node URLs.
        username: Optional HTTP basic-auth username.
        password: Optional HTTP basic-auth password.
        api_key: Optional API key (encoded string).
        verify_certs: Whether to verify TLS certificates.
        request_timeout: Per-request timeout in seconds.
        node_class: ``elastic-transport`` HTTP node class name.
        refresh: Refresh policy applied to document writes
            (``"false"``, ``"true"`` or ``"wait_for"``).
        chunk_size: Number of documents per ``_bulk`` request.
        unhealthy_colors: Health colours reported as unhealthy.
        client: A pre-built ``AsyncElasticsearch`` to use instead of creating one.
        **kwargs: Additional keyword arguments forwarded to ``AsyncElasticsearch``.
    """

    def __init__(
        self,
        hosts: list[str] | None = None,
        username: str | None = None,
        password: str | None = None,
        api_key: str | None = None,
        verify_certs: bool = True,
        request_timeout: float = 30.0,
        node_class: str = "httpxasync",
        refresh: str = "false",
        chunk_size: int = 500,
        unhealthy_colors: Iterable[str] = DEFAULT_UNHEALTHY_COLORS,
        client: AsyncElasticsearch | None = None,
        **kwargs: Any,
    ) -> None:
        super().__init__(unhealthy_colors=unhealthy_colors)
        self._hosts = hosts or ["http://localhost:9200"]
        self._username = username
        self._password = password
        self._api_key = api_key
        self._verify_certs = verify_certs
        self._request_timeout = request_timeout
        self._node_class = node_class
        self._refresh = refresh
        self._chunk_size = chunk_size
        self._extra_kwargs = kwargs
        self._client: AsyncElasticsearch | None = client

    @classmethod
    def from_settings(cls, settings: ElasticsearchSettings) -> AsyncElasticsearchClient:
        """Build a client from ``ElasticsearchSettings``."""
        return cls(
            hosts=settings.hosts,
            username=settings.username,
            password=settings.password,
            api_key=settings.api_key,
            verify_certs=settings.verify_certs,
            request_timeout=settings.request_timeout,
            node_class=settings.node_class,
            refresh=settings.refresh,
            chunk_size=settings.bulk_chunk_size,
            unhealthy_colors=settings.unhealthy_colors,
            **settings.extra,
        )

    # ── Lifecycle ────────────────────────────────────────────────────────

    async def initialize(self) -> None:
        """Create the ``AsyncElasticsearch`` transport and verify the connection."""
        if self._client is None:
            client_kwargs: dict[str, Any] = {
                "hosts": self._hosts,
                "verify_certs": self._verify_certs,
                "request_timeout": self._request_timeout,
                "node_class": self._node_class,
            }
            if self._api_key:
                client_kwargs["api_key"] = self._api_key
            elif self._username and self._password:
                client_kwargs["basic_auth"] = (self._username, self._password)
            client_kwargs.update(self._extra_kwargs)
            self._client = AsyncElasticsearch(**client_kwargs)

        try:
            info = _body(await self._client.info())
        except Exception as e:
            await self.shutdown()
            raise self.client_exception(e) from e

        version = info.get("version", {}).get("number", "unknown")
        cluster = info.get("cluster_name", "unknown")
        logger.info("Connected to Elasticsearch cluster: %s (v%s)", cluster, version)

    async def shutdown(self) -> None:
        """Close the Elasticsearch transport."""
        if self._client is not None:
            client, self._client = self._client, None
            await client.close()

    def _require_client(self) -> AsyncElasticsearch:
        if self._client is None:
            raise ClientNotInitializedError("Elasticsearch client not initialized. Call initialize() first.")
        return self._client

    # ── Documents ────────────────────────────────────────────────────────

    @es_boundary
    async def get_raw(self, typ: ResourceCompanion[Any], id_val: str) -> GetResponse[dict[str, Any]]:
        client = self._require_client()
        try:
            body = _body(await client.get(index=typ.index.name, id=id_val))
        except NotFoundError:
            logger.debug("Document %s/%s not found", typ.index.name, id_val)
            return GetResponse(value=None)

        if not body.get("found", True):
            return GetResponse(value=None)
        return GetResponse(
            value=body.get("_source", {}),
            version=body.get("_version"),
            seq_no=body.get("_seq_no"),
            primary_term=body.get("_primary_term"),
        )

    @es_boundary
    async def upsert(self, typ: ResourceCompanion[T], obj: T) -> UpsertResponse[T]:
        client = self._require_client()
        doc_id = typ.id_of(obj)
        body = _body(
            await client.index(
                index=typ.index.name,
                id=doc_id,
                document=typ.encode(obj),
                refresh=self._refresh,
            )
        )
        return UpsertResponse(
            id=body.get("_id", doc_id),
            index=body.get("_index", typ.index.name),
            version=body.get("_version"),
            result=body.get("result", ""),
            value=obj,
        )

    @es_boundary
    async def bulk_upsert(
        self,
        typ: ResourceCompanion[T],
        objs: Sequence[T],
        index_override: str | None = None,
    ) -> BulkUpsertResponse:
        client = self._require_client()
        index = index_override or typ.index.name

        # Slots are filled in input order; documents that cannot be encoded
        # are reported as failed items without being sent.
        items: list[BulkItemResult | None] = []
        pending: list[int] = []
        actions: list[dict[str, Any]] = []
        for obj in objs:
            try:
                doc_id = typ.id_of(obj)
                source = typ.encode(obj)
            except (TypeError, ValueError) as e:
                items.append(
                    BulkItemResult(
                        index=index,
                        status=400,
                        error={"type": type(e).__name__, "reason": str(e)},
                    )
                )
                continue
            pending.append(len(items))
            items.append(None)
            actions.append({"_op_type": "index", "_index": index, "_id": doc_id, "_source": source})

        start = time.monotonic()
        if actions:
            slots = iter(pending)
            async for _ok, item in async_streaming_bulk(
                client,
                actions,
                chunk_size=self._chunk_size,
                raise_on_error=False,
                refresh=self._refresh,
            ):
                items[next(slots)] = self._bulk_item(item)
        took_ms = int((time.monotonic() - start) * 1000)

        response = BulkUpsertResponse(took_ms=took_ms, items=[item for item in items if item is not None])
        logger.info(
            "Bulk upsert to %s: %d succeeded, %d failed in %dms",
            index,
            len(response.succeeded),
            len(response.failed),
            took_ms,
        )
        return response

    @staticmethod
    def _bulk_item(item: dict[str, Any]) -> BulkItemResult:
        """Convert one ``_bulk`` response item (``{"index": {...}}``) to a ``BulkItemResult``."""
        detail = next(iter(item.values()), {})
        error = detail.get("error")
        if error is not None and not isinstance(error, dict):
            error = {"type": "error", "reason": str(error)}
        return BulkItemResult(
            id=detail.get("_id"),
            index=detail.get("_index", ""),
            status=detail.get("status", 0),
            result=detail.get("result"),
            version=detail.get("_version"),
            error=error,
        )

    @es_boundary
    async def delete(self, typ: ResourceCompanion[Any], id_val: str) -> DeleteResponse:
        client = self._require_client()
        try:
            body = _body(await client.delete(index=typ.index.name, id=id_val, refresh=self._refresh))
        except NotFoundError:
            return DeleteResponse(id=id_val, index=typ.index.name, found=False)
        return DeleteResponse(
            id=body.get("_id", id_val),
            index=body.get("_index", typ.index.name),
            found=body.get("result") == "deleted",
            version=body.get("_version"),
        )

    # ── Cluster ──────────────────────────────────────────────────────────

    @es_boundary
    async def cluster_health_color(self) -> str:
        client = self._require_client()
        health = _body(await client.cluster.health())
        return str(health["status"])

    # ── Aliases ──────────────────────────────────────────────────────────

    @es_boundary
    async def get_aliases_by_index(self) -> dict[str, list[str]]:
        client = self._require_client()
        body = _body(await client.indices.get_alias())
        return {index: sorted(entry.get("aliases", {})) for index, entry in body.items()}

    @es_boundary
    async def get_indices_for_alias(self, alias_name: str) -> list[str]:
        client = self._require_client()
        try:
            body = _body(await client.indices.get_alias(name=alias_name))
        except NotFoundError:
            return []
        return sorted(index for index, entry in body.items() if alias_name in entry.get("aliases", {}))

    @es_boundary
    async def update_alias(
        self,
        alias_name: str,
        add_to_indices: Sequence[str],
        remove_from_indices: Sequence[str],
    ) -> bool:
        client = self._require_client()

        # A remove action for an index that does not hold the alias fails the
        # whole request, so only current holders are removed.
        holders = set(await self.get_indices_for_alias(alias_name))
        actions: list[dict[str, Any]] = [
            {"remove": {"index": index, "alias": alias_name}} for index in remove_from_indices if index in holders
        ]
        actions.extend({"add": {"index": index, "alias": alias_name}} for index in add_to_indices)
        if not actions:
            return True

        body = _body(await client.indices.update_aliases(actions=actions))
        acknowledged = bool(body.get("acknowledged", False))
        logger.info(
            "Updated alias %s (add=%s, remove=%s): acknowledged=%s",
            alias_name,
            list(add_to_indices),
            list(remove_from_indices),
            acknowledged,
        )
        return acknowledged

    # ── Indices ──────────────────────────────────────────────────────────

    @es_boundary
    async def get_all_indices(self) -> list[str]:
        client = self._require_client()
        rows = _body(await client.cat.indices(format="json", h="index"))
        return sorted(row["index"] for row in rows)

    @es_boundary
    async def get_matching_indices(self, matching: str) -> list[str]:
        client = self._require_client()
        try:
            rows = _body(await client.cat.indices(index=matching, format="json", h="index"))
        except NotFoundError:
            return []
        return sorted(row["index"] for row in rows)

    @es_boundary
    async def index_exists(self, index: str) -> bool:
        client = self._require_client()
        return bool(await client.indices.exists(index=index))

    @es_boundary
    async def delete_index(self, index: str) -> bool:
        client = self._require_client()
        try:
            body = _body(await client.indices.delete(index=index))
        except NotFoundError:
            logger.debug("Index %s does not exist, nothing to delete", index)
            return False
        logger.info("Deleted index %s", index)
        return bool(body.get("acknowledged", False))

    @es_boundary
    async def create_index(self, index: str) -> bool:
        client = self._require_client()
        try:
            body = _body(await client.indices.create(index=index))
        except BadRequestError as e:
            if _error_type(e) == "resource_already_exists_exception":
                logger.debug("Index %s already exists", index)
                return False
            raise
        logger.info("Created index %s", index)
        return bool(body.get("acknowledged", False))

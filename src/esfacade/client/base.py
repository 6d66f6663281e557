"""Base client interface — Abstract contract for talking to one Elasticsearch cluster.

Every backend implementation must provide the primitive operations:
  1. Document get / upsert / bulk upsert / delete
  2. Cluster health colour
  3. Alias listing and atomic alias updates
  4. Index listing, existence, creation and deletion

The composed operations (``get``, ``is_cluster_healthy``,
``get_indices_by_alias``) are implemented here on top of the primitives.

All failures leave the client as an ``ESException``. Implementations wrap
their primitives with ``es_boundary`` so each failure is logged exactly once
before it is re-raised.
"""

from __future__ import annotations

import functools
import logging
import traceback
from abc import ABC, abstractmethod
from collections.abc import Awaitable, Callable, Iterable, Sequence
from types import TracebackType
from typing import Any, TypeVar

from pydantic import BaseModel

from esfacade.client.conversion import DEFAULT_UNHEALTHY_COLORS, invert_string_map, is_healthy_color
from esfacade.client.exceptions import DocumentDecodeError, ESException
from esfacade.models.resource import DecodeError, ResourceCompanion
from esfacade.models.responses import BulkUpsertResponse, DeleteResponse, GetResponse, UpsertResponse

logger = logging.getLogger(__name__)

T = TypeVar("T", bound=BaseModel)
F = TypeVar("F", bound=Callable[..., Awaitable[Any]])


def es_boundary(func: F) -> F:
    """Normalize any exception raised by a client coroutine into ``ESException``.

    An ``ESException`` raised inside is re-raised untouched so that nested
    calls do not log the same failure twice.
    """

    @functools.wraps(func)
    async def wrapper(self: ElasticsearchClient, *args: Any, **kwargs: Any) -> Any:
        try:
            return await func(self, *args, **kwargs)
        except ESException:
            raise
        except Exception as e:
            raise self.client_exception(e) from e

    return wrapper  # type: ignore[return-value]


class ElasticsearchClient(ABC):
    """Abstract base class for Elasticsearch clients.

    The client is an async context manager; leaving the ``async with`` block
    always calls ``shutdown()``, including when the block raises.

    Args:
        unhealthy_colors: Cluster health colours that make
            ``is_cluster_healthy()`` return False. Defaults to ``("red",)``,
            so a yellow cluster is reported healthy.
    """

    def __init__(self, unhealthy_colors: Iterable[str] = DEFAULT_UNHEALTHY_COLORS) -> None:
        self.unhealthy_colors: tuple[str, ...] = tuple(unhealthy_colors)

    # ── Lifecycle ────────────────────────────────────────────────────────

    @abstractmethod
    async def initialize(self) -> None:
        """Open the connection to the cluster."""

    @abstractmethod
    async def shutdown(self) -> None:
        """Close the connection and release the transport."""

    async def __aenter__(self) -> ElasticsearchClient:
        await self.initialize()
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        await self.shutdown()

    # ── Error normalization ──────────────────────────────────────────────

    def client_exception(self, err: BaseException) -> ESException:
        """Map an arbitrary failure onto the client's error type."""
        if isinstance(err, ESException):
            return err
        return self.default_es_error(err)

    def default_es_error(self, err: BaseException) -> ESException:
        """Log ``err`` once at error level and wrap it in ``ESException``."""
        trace = "".join(traceback.format_exception(type(err), err, err.__traceback__))
        description = f"{type(err).__name__}: {err}\n{trace}"
        logger.error("Failed to execute against Elasticsearch - %s", description)
        return ESException(f"Unknown error connecting to Elasticsearch - {description}")

    # ── Documents ────────────────────────────────────────────────────────

    @abstractmethod
    async def get_raw(self, typ: ResourceCompanion[Any], id_val: str) -> GetResponse[dict[str, Any]]:
        """Fetch a document's untyped ``_source``.

        Returns:
            A response whose ``value`` is None when the document does not exist.
        """

    @es_boundary
    async def get(self, typ: ResourceCompanion[T], id_val: str) -> GetResponse[T]:
        """Fetch a document and decode it into ``typ``'s model.

        Raises:
            ESException: On transport failure, or when the stored document
                does not match the model.
        """
        response = await self.get_raw(typ, id_val)
        if response.value is None:
            return GetResponse(value=None)

        decoded = typ.decode(response.value)
        if isinstance(decoded, DecodeError):
            raise self.client_exception(DocumentDecodeError(f"Invalid JSON: {decoded.detail}"))
        return GetResponse(
            value=decoded.value,
            version=response.version,
            seq_no=response.seq_no,
            primary_term=response.primary_term,
        )

    @abstractmethod
    async def upsert(self, typ: ResourceCompanion[T], obj: T) -> UpsertResponse[T]:
        """Create or replace one document by id."""

    @abstractmethod
    async def bulk_upsert(
        self,
        typ: ResourceCompanion[T],
        objs: Sequence[T],
        index_override: str | None = None,
    ) -> BulkUpsertResponse:
        """Create or replace many documents in one request.

        Args:
            typ: Descriptor for the documents.
            objs: Documents to write.
            index_override: Write every document to this index instead of
                ``typ.index``.

        Returns:
            Per-item results. A failing item does not fail the batch.
        """

    @abstractmethod
    async def delete(self, typ: ResourceCompanion[Any], id_val: str) -> DeleteResponse:
        """Delete one document by id. A missing document yields ``found=False``."""

    # ── Cluster ──────────────────────────────────────────────────────────

    @abstractmethod
    async def cluster_health_color(self) -> str:
        """Health of the cluster: ``"green"``, ``"yellow"`` or ``"red"``."""

    @es_boundary
    async def is_cluster_healthy(self) -> bool:
        """Is the cluster healthy, i.e. not in one of ``unhealthy_colors``?"""
        return is_healthy_color(await self.cluster_health_color(), self.unhealthy_colors)

    # ── Aliases ──────────────────────────────────────────────────────────

    @abstractmethod
    async def get_aliases_by_index(self) -> dict[str, list[str]]:
        """Map every index to the aliases it carries."""

    @es_boundary
    async def get_indices_by_alias(self) -> dict[str, list[str]]:
        """Map every alias to the indices it points at."""
        return invert_string_map(await self.get_aliases_by_index())

    @abstractmethod
    async def get_indices_for_alias(self, alias_name: str) -> list[str]:
        """Indices associated with ``alias_name``; empty when the alias is unknown."""

    @abstractmethod
    async def update_alias(
        self,
        alias_name: str,
        add_to_indices: Sequence[str],
        remove_from_indices: Sequence[str],
    ) -> bool:
        """Atomically remove an alias from old indices and add it to new ones.

        Returns:
            Whether the cluster acknowledged the change.
        """

    # ── Indices ──────────────────────────────────────────────────────────

    @abstractmethod
    async def get_all_indices(self) -> list[str]:
        """Names of all indices."""

    @abstractmethod
    async def get_matching_indices(self, matching: str) -> list[str]:
        """Names of indices matching a glob pattern such as ``"logs-*"``."""

    @abstractmethod
    async def index_exists(self, index: str) -> bool:
        """Does the index exist?"""

    @abstractmethod
    async def delete_index(self, index: str) -> bool:
        """Delete an index. Returns False when it did not exist."""

    @abstractmethod
    async def create_index(self, index: str) -> bool:
        """Create an index. Returns True if created, False if it already existed."""

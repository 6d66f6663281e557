"""Integration tests for AsyncElasticsearchClient against a real Elasticsearch instance."""

from __future__ import annotations

import uuid
from typing import Any

import pytest
from pydantic import BaseModel

from esfacade.client.elasticsearch import AsyncElasticsearchClient
from esfacade.models.resource import ResourceCompanion

pytestmark = [pytest.mark.integration, pytest.mark.asyncio, pytest.mark.elasticsearch]


class Reading(BaseModel):
    id: str
    sensor: str
    value: Any


@pytest.fixture
def index_name() -> str:
    return f"esfacade-it-{uuid.uuid4().hex[:8]}"


@pytest.fixture
def readings(index_name: str) -> ResourceCompanion[Reading]:
    return ResourceCompanion(Reading, index=index_name)


@pytest.fixture
async def client(elasticsearch_ready):
    async with AsyncElasticsearchClient(hosts=[elasticsearch_ready], refresh="wait_for") as c:
        yield c


class TestClusterHealth:
    async def test_color(self, client):
        assert await client.cluster_health_color() in ("green", "yellow", "red")

    async def test_single_node_is_healthy(self, client):
        assert await client.is_cluster_healthy()


class TestDocuments:
    async def test_round_trip(self, client, readings):
        reading = Reading(id="r1", sensor="thermo-1", value=21.5)
        written = await client.upsert(readings, reading)
        assert written.created

        fetched = await client.get(readings, "r1")
        assert fetched.value == reading
        assert fetched.version == 1

    async def test_unknown_id(self, client, readings, index_name):
        await client.create_index(index_name)
        assert (await client.get(readings, "never-written")).value is None

    async def test_unknown_index(self, client):
        missing = ResourceCompanion(Reading, index=f"esfacade-it-missing-{uuid.uuid4().hex[:8]}")
        assert (await client.get(missing, "x")).value is None

    async def test_delete(self, client, readings):
        await client.upsert(readings, Reading(id="r1", sensor="thermo-1", value=1.0))
        assert (await client.delete(readings, "r1")).found
        assert (await client.delete(readings, "r1")).found is False

    async def test_bulk_with_one_bad_item(self, client, readings):
        # Establish a numeric mapping for "value" first
        await client.upsert(readings, Reading(id="seed", sensor="thermo-0", value=0.5))

        batch = [Reading(id=f"r{i}", sensor="thermo-1", value=float(i)) for i in range(5)]
        batch[2] = Reading(id="r2", sensor="thermo-1", value="not-a-number")

        response = await client.bulk_upsert(readings, batch)
        assert [item.id for item in response.failed] == ["r2"]
        assert len(response.succeeded) == 4
        assert (await client.get(readings, "r4")).value is not None


class TestIndicesAndAliases:
    async def test_create_twice(self, client, index_name):
        assert await client.create_index(index_name) is True
        assert await client.create_index(index_name) is False
        assert await client.index_exists(index_name)

    async def test_delete_missing(self, client, index_name):
        assert await client.delete_index(index_name) is False

    async def test_matching_indices(self, client, index_name):
        await client.create_index(index_name)
        assert index_name in await client.get_matching_indices("esfacade-it-*")
        assert index_name in await client.get_all_indices()
        assert await client.get_matching_indices(f"{index_name}-nomatch-*") == []

    async def test_rollover_scenario(self, client):
        suffix = uuid.uuid4().hex[:8]
        current = f"esfacade-it-logs-2024-{suffix}"
        previous = f"esfacade-it-logs-2023-{suffix}"
        alias = f"esfacade-it-logs-current-{suffix}"

        assert await client.create_index(current) is True
        assert await client.index_exists(current) is True
        assert await client.update_alias(alias, add_to_indices=[current], remove_from_indices=[previous]) is True
        assert await client.get_indices_for_alias(alias) == [current]

        assert alias in (await client.get_aliases_by_index())[current]
        assert (await client.get_indices_by_alias())[alias] == [current]

    async def test_unknown_alias(self, client):
        assert await client.get_indices_for_alias(f"esfacade-it-none-{uuid.uuid4().hex[:8]}") == []

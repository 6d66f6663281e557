"""Integration test fixtures — Elasticsearch running locally.

Expects a cluster to be running, e.g.:
    docker run -p 9200:9200 -e discovery.type=single-node \
        -e xpack.security.enabled=false elasticsearch:8.15.0

Test indices are prefixed with ``esfacade-it-`` and removed after the session.
"""

from __future__ import annotations

import asyncio
import time

import httpx
import pytest

ES_HOST = "http://localhost:9200"
INDEX_PREFIX = "esfacade-it-"


def _wait_for_service(url: str, timeout: float = 60.0) -> bool:
    """Block until *url* returns HTTP 200, or timeout."""
    deadline = time.monotonic() + timeout
    while time.monotonic() < deadline:
        try:
            r = httpx.get(url, timeout=30)
            if r.status_code == 200:
                return True
        except httpx.HTTPError:
            pass
        time.sleep(2)
    return False


async def _purge_test_indices(host: str) -> None:
    async with httpx.AsyncClient(base_url=host, timeout=30) as client:
        resp = await client.get(f"/_cat/indices/{INDEX_PREFIX}*", params={"format": "json", "h": "index"})
        if resp.status_code != 200:
            return
        for row in resp.json():
            await client.delete(f"/{row['index']}")


@pytest.fixture(scope="session")
def elasticsearch_ready():
    """Ensure Elasticsearch is running and free of leftover test indices."""
    if not _wait_for_service(ES_HOST, timeout=10.0):
        pytest.skip(f"Elasticsearch not available at {ES_HOST}")
    asyncio.run(_purge_test_indices(ES_HOST))
    yield ES_HOST
    asyncio.run(_purge_test_indices(ES_HOST))

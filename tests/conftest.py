"""Shared test fixtures and configuration."""

from __future__ import annotations

import pytest
from fakes import LOGS, InMemoryElasticsearchClient, LogLine

from esfacade.config.settings import Settings
from esfacade.models.resource import ResourceCompanion


@pytest.fixture
def settings() -> Settings:
    """Create a test Settings instance with defaults."""
    return Settings(
        _env_file=None,  # type: ignore[call-arg]
        elasticsearch={"hosts": ["http://localhost:9200"]},
    )


@pytest.fixture
def memory_client() -> InMemoryElasticsearchClient:
    return InMemoryElasticsearchClient()


@pytest.fixture
def sample_line() -> LogLine:
    return LogLine(id="line-1", level="info", message="service started")


@pytest.fixture
def logs() -> ResourceCompanion[LogLine]:
    return LOGS

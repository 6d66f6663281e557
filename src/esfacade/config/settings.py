"""Application settings — Pydantic-based configuration with YAML and env var support.

Configuration is loaded from (in order of precedence):
  1. Environment variables (ESFACADE_ prefix)
  2. YAML config file (if specified)
  3. Default values
"""

from __future__ import annotations

from pathlib import Path
from typing import Any, Literal

from pydantic import BaseModel, Field, field_validator
from pydantic_settings import BaseSettings


def _parse_str_list(v: Any) -> list[str]:
    """Parse a list from a JSON string (env var), a comma-separated string, or a list."""
    if isinstance(v, str):
        import json

        try:
            parsed = json.loads(v)
            if isinstance(parsed, list):
                return [str(item) for item in parsed]
        except (json.JSONDecodeError, TypeError):
            pass
        return [item.strip() for item in v.split(",") if item.strip()]
    return [str(item) for item in v]


class ElasticsearchSettings(BaseModel):
    """Connection and behaviour of the Elasticsearch client."""

    hosts: list[str] = Field(default=["http://localhost:9200"], description="Elasticsearch node URLs")
    username: str | None = Field(default=None, description="HTTP basic-auth username")
    password: str | None = Field(default=None, description="HTTP basic-auth password")
    api_key: str | None = Field(default=None, description="Encoded API key (takes precedence over basic auth)")
    verify_certs: bool = Field(default=True, description="Verify TLS certificates")
    request_timeout: float = Field(default=30.0, description="Per-request timeout in seconds")
    node_class: str = Field(default="httpxasync", description="elastic-transport HTTP node class")
    refresh: Literal["false", "true", "wait_for"] = Field(
        default="false", description="Refresh policy applied to document writes"
    )
    bulk_chunk_size: int = Field(default=500, ge=1, description="Documents per _bulk request")
    unhealthy_colors: list[str] = Field(
        default=["red"],
        description="Cluster health colours reported as unhealthy (add 'yellow' to be strict)",
    )
    extra: dict[str, Any] = Field(default_factory=dict, description="Extra AsyncElasticsearch options")

    @field_validator("hosts", "unhealthy_colors", mode="before")
    @classmethod
    def _parse_lists(cls, v: Any) -> list[str]:
        return _parse_str_list(v)

    @field_validator("unhealthy_colors")
    @classmethod
    def _known_colors(cls, v: list[str]) -> list[str]:
        unknown = set(v) - {"green", "yellow", "red"}
        if unknown:
            raise ValueError(f"Unknown health colours: {sorted(unknown)}")
        return v


class ObservabilitySettings(BaseModel):
    """Observability configuration."""

    log_level: str = Field(default="info", description="Log level: debug, info, warning, error")
    log_format: str = Field(default="json", description="Log format: json, console")


class Settings(BaseSettings):
    """Root settings.

    Configuration is loaded from environment variables with the ESFACADE_ prefix.
    Nested settings use double underscores.

    Example:
        ESFACADE_ELASTICSEARCH__HOSTS='["https://es1:9200","https://es2:9200"]'
        ESFACADE_ELASTICSEARCH__API_KEY=...
        ESFACADE_OBSERVABILITY__LOG_FORMAT=console
    """

    model_config = {
        "env_prefix": "ESFACADE_",
        "env_nested_delimiter": "__",
        "case_sensitive": False,
        "env_file": ".env",
        "env_file_encoding": "utf-8",
    }

    elasticsearch: ElasticsearchSettings = Field(default_factory=ElasticsearchSettings)
    observability: ObservabilitySettings = Field(default_factory=ObservabilitySettings)

    @classmethod
    def from_yaml(cls, path: str | Path) -> Settings:
        """Load settings from a YAML configuration file.

        Args:
            path: Path to the YAML config file.

        Returns:
            Populated Settings instance.
        """
        import yaml  # type: ignore[import-untyped]

        config_path = Path(path)
        if not config_path.exists():
            raise FileNotFoundError(f"Config file not found: {config_path}")

        with open(config_path) as f:
            data = yaml.safe_load(f) or {}

        return cls(**data)

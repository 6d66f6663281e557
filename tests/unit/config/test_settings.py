"""Tests for settings loading."""

from __future__ import annotations

from pathlib import Path

import pytest
from pydantic import ValidationError

from esfacade.config.settings import ElasticsearchSettings, Settings


class TestElasticsearchSettings:
    def test_defaults(self) -> None:
        es = ElasticsearchSettings()
        assert es.hosts == ["http://localhost:9200"]
        assert es.node_class == "httpxasync"
        assert es.refresh == "false"
        assert es.unhealthy_colors == ["red"]

    def test_hosts_from_json_string(self) -> None:
        es = ElasticsearchSettings(hosts='["http://es1:9200", "http://es2:9200"]')
        assert es.hosts == ["http://es1:9200", "http://es2:9200"]

    def test_hosts_from_comma_separated_string(self) -> None:
        es = ElasticsearchSettings(hosts="http://es1:9200, http://es2:9200")
        assert es.hosts == ["http://es1:9200", "http://es2:9200"]

    def test_strict_health_policy(self) -> None:
        es = ElasticsearchSettings(unhealthy_colors=["yellow", "red"])
        assert es.unhealthy_colors == ["yellow", "red"]

    def test_unknown_color_rejected(self) -> None:
        with pytest.raises(ValidationError):
            ElasticsearchSettings(unhealthy_colors=["purple"])

    def test_invalid_refresh_rejected(self) -> None:
        with pytest.raises(ValidationError):
            ElasticsearchSettings(refresh="sometimes")


class TestSettings:
    def test_fixture_settings(self, settings: Settings) -> None:
        assert settings.elasticsearch.hosts == ["http://localhost:9200"]
        assert settings.observability.log_format == "json"

    def test_env_overrides(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("ESFACADE_ELASTICSEARCH__HOSTS", '["https://es.internal:9200"]')
        monkeypatch.setenv("ESFACADE_ELASTICSEARCH__API_KEY", "secret")
        monkeypatch.setenv("ESFACADE_OBSERVABILITY__LOG_LEVEL", "debug")
        settings = Settings(_env_file=None)  # type: ignore[call-arg]
        assert settings.elasticsearch.hosts == ["https://es.internal:9200"]
        assert settings.elasticsearch.api_key == "secret"
        assert settings.observability.log_level == "debug"

    def test_from_yaml(self, tmp_path: Path) -> None:
        config = tmp_path / "esfacade.yaml"
        config.write_text(
            "elasticsearch:\n"
            "  hosts:\n"
            "    - http://es1:9200\n"
            "  refresh: wait_for\n"
            "  unhealthy_colors: [yellow, red]\n"
            "observability:\n"
            "  log_format: console\n"
        )
        settings = Settings.from_yaml(config)
        assert settings.elasticsearch.hosts == ["http://es1:9200"]
        assert settings.elasticsearch.refresh == "wait_for"
        assert settings.elasticsearch.unhealthy_colors == ["yellow", "red"]
        assert settings.observability.log_format == "console"

    def test_from_yaml_missing_file(self, tmp_path: Path) -> None:
        with pytest.raises(FileNotFoundError):
            Settings.from_yaml(tmp_path / "missing.yaml")

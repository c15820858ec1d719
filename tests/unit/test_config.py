"""Unit tests for YAML configuration loading."""

from __future__ import annotations

import pytest

from bidding_platform.config import get_server_config, parse_server_config
from bidding_platform.validation.validator import get_schema_registry


@pytest.fixture
def fresh_config():
    get_server_config.cache_clear()
    yield
    get_server_config.cache_clear()


class TestServerConfig:
    def test_packaged_defaults(self, fresh_config, monkeypatch):
        monkeypatch.delenv("BIDDING_CONFIG_PATH", raising=False)
        config = get_server_config()
        assert config.auction.default_duration_hours == 24.0
        assert config.presentation.backend == "log"
        assert config.presentation.options["output_path"] == "items.html"
        assert config.logging.level == "INFO"

    def test_env_path_override(self, fresh_config, monkeypatch, tmp_path):
        path = tmp_path / "server.yaml"
        path.write_text(
            "auction:\n"
            "  default_duration_hours: 2\n"
            "presentation:\n"
            "  backend: json\n"
            "  output_path: out/items.json\n"
            "logging:\n"
            "  level: debug\n"
        )
        monkeypatch.setenv("BIDDING_CONFIG_PATH", str(path))
        config = get_server_config()
        assert config.auction.default_duration_hours == 2.0
        assert config.auction.max_duration_hours is None
        assert config.presentation.backend == "json"
        assert dict(config.presentation.options) == {"output_path": "out/items.json"}
        assert config.logging.level == "DEBUG"

    def test_missing_file(self, fresh_config, monkeypatch, tmp_path):
        monkeypatch.setenv("BIDDING_CONFIG_PATH", str(tmp_path / "absent.yaml"))
        with pytest.raises(FileNotFoundError):
            get_server_config()

    def test_empty_mapping_uses_defaults(self):
        config = parse_server_config({})
        assert config.presentation.backend == "log"
        assert config.listen == {}


class TestSchemaRegistry:
    def test_request_schemas_loaded(self):
        assert get_schema_registry().names() == ["bid", "item_create", "user_registration"]

    def test_unknown_schema(self):
        with pytest.raises(ValueError):
            get_schema_registry().validate("payment", {})

"""Tests for configuration loading and environment overlays."""

import pytest
from shared.config import load_config

CONFIG = b"""
[databases.default]
database_uri = "sqlite:///base.db"

[ordering]
flat_shipping_fee = 5.0

[production.ordering]
flat_shipping_fee = 60.0

[production.identity]
require_verified_email = true
"""


@pytest.fixture()
def config_file(tmp_path, monkeypatch):
    monkeypatch.delenv("DATABASE_URL", raising=False)
    monkeypatch.delenv("LOG_LEVEL", raising=False)
    path = tmp_path / "config.toml"
    path.write_bytes(CONFIG)
    return path


class TestLoadConfig:
    def test_file_overrides_defaults(self, config_file):
        config = load_config(config_file, env="development")
        assert config["databases"]["default"]["database_uri"] == "sqlite:///base.db"
        assert config["databases"]["default"]["busy_timeout"] == 30
        assert config["ordering"]["flat_shipping_fee"] == 5.0
        assert config["env"] == "development"

    def test_environment_overlay(self, config_file):
        config = load_config(config_file, env="production")
        assert config["ordering"]["flat_shipping_fee"] == 60.0
        assert config["ordering"]["infrastructure_retries"] == 1
        assert config["identity"]["require_verified_email"] is True

    def test_missing_file_uses_defaults(self, tmp_path, monkeypatch):
        monkeypatch.delenv("DATABASE_URL", raising=False)
        config = load_config(tmp_path / "absent.toml", env="test")
        assert config["notifications"]["store_email"] == "orders@storefront.example"
        assert config["identity"]["require_verified_email"] is False
        assert config["notifications"]["retry_interval"] == 60
        assert config["notifications"]["max_failed"] == 500

    def test_environment_variables(self, config_file, monkeypatch):
        monkeypatch.setenv("DATABASE_URL", "postgresql://db/storefront")
        monkeypatch.setenv("LOG_LEVEL", "DEBUG")
        config = load_config(config_file, env="development")
        assert config["databases"]["default"]["database_uri"] == "postgresql://db/storefront"
        assert config["logging"]["level"] == "DEBUG"

    def test_keyword_overrides_win(self, config_file):
        config = load_config(config_file, env="production", ordering={"flat_shipping_fee": 0.0})
        assert config["ordering"]["flat_shipping_fee"] == 0.0

    def test_env_from_environment(self, config_file, monkeypatch):
        monkeypatch.setenv("STOREFRONT_ENV", "Production")
        assert load_config(config_file)["env"] == "production"

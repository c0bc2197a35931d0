"""Configuration loading.

Configuration lives in ``config.toml`` at the repository root (or the file named by
``STOREFRONT_CONFIG``). Top-level keys are the defaults; a table named after the
active environment (``STOREFRONT_ENV``, default ``development``) is deep-merged
on top of them:

    [databases.default]
    database_uri = "sqlite:///storefront.db"

    [test.databases.default]
    database_uri = "sqlite:///storefront-test.db"

``DATABASE_URL`` and ``LOG_LEVEL`` environment variables override the file.
"""

import copy
import os
import tomllib
from pathlib import Path
from typing import Any

ENVIRONMENTS = ("development", "test", "staging", "production")

DEFAULTS: dict[str, Any] = {
    "databases": {
        "default": {
            "database_uri": "sqlite:///storefront.db",
            "echo": False,
            "busy_timeout": 30,
        }
    },
    "ordering": {
        "flat_shipping_fee": 0.0,
        "infrastructure_retries": 1,
    },
    "identity": {
        "require_verified_email": False,
    },
    "notifications": {
        "store_email": "orders@storefront.example",
        "retry_interval": 60,
        "max_failed": 500,
        "max_attempts": 5,
    },
    "logging": {
        "level": None,
        "log_dir": "logs",
        "log_file_prefix": "storefront",
    },
}


def current_env() -> str:
    return (os.getenv("STOREFRONT_ENV") or "development").lower()


def _deep_merge(base: dict, overlay: dict) -> dict:
    merged = copy.deepcopy(base)
    for key, value in overlay.items():
        if isinstance(value, dict) and isinstance(merged.get(key), dict):
            merged[key] = _deep_merge(merged[key], value)
        else:
            merged[key] = copy.deepcopy(value)
    return merged


def _config_path() -> Path:
    explicit = os.getenv("STOREFRONT_CONFIG")
    if explicit:
        return Path(explicit)
    return Path(__file__).resolve().parents[2] / "config.toml"


def load_config(path: Path | None = None, env: str | None = None, **overrides: Any) -> dict[str, Any]:
    """Build the effective configuration dict.

    Args:
        path: TOML file to read. Defaults to ``config.toml`` / ``STOREFRONT_CONFIG``.
        env: Environment overlay to apply. Defaults to ``STOREFRONT_ENV``.
        overrides: Nested dicts merged last (handy in tests).
    """
    env = env or current_env()
    path = path or _config_path()

    config = copy.deepcopy(DEFAULTS)
    if path.exists():
        with path.open("rb") as fh:
            raw = tomllib.load(fh)

        base = {k: v for k, v in raw.items() if k not in ENVIRONMENTS}
        config = _deep_merge(config, base)
        config = _deep_merge(config, raw.get(env, {}))

    if os.getenv("DATABASE_URL"):
        config["databases"]["default"]["database_uri"] = os.environ["DATABASE_URL"]
    if os.getenv("LOG_LEVEL"):
        config["logging"]["level"] = os.environ["LOG_LEVEL"]

    config = _deep_merge(config, overrides)
    config["env"] = env
    return config

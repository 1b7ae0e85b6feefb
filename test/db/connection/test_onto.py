"""Tests for CockroachConfig loading from the environment and driver config."""

import pytest
from pydantic import ValidationError

from roachschema.db.connection.onto import (
    DEFAULT_PORT,
    CockroachConfig,
)

CRDB_VARS = (
    "USERNAME",
    "PASSWORD",
    "DATABASE",
    "HOSTNAME",
    "PORT",
    "SSLMODE",
    "SCHEMA_NAME",
    "WHITELIST",
    "BLACKLIST",
    "ADD_ENUM_TYPES",
    "ENUM_NULL_PREFIX",
)


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    """Keep CRDB_* settings of the host environment out of these tests."""
    for var in CRDB_VARS:
        monkeypatch.delenv(f"CRDB_{var}", raising=False)
        monkeypatch.delenv(f"DEV_CRDB_{var}", raising=False)


class TestCockroachConfigFromEnv:
    """Tests for CockroachConfig.from_env()."""

    def test_from_env_default_prefix(self, monkeypatch):
        monkeypatch.setenv("CRDB_USERNAME", "root")
        monkeypatch.setenv("CRDB_DATABASE", "sqlboiler")
        monkeypatch.setenv("CRDB_HOSTNAME", "localhost")

        config = CockroachConfig.from_env()

        assert config.username == "root"
        assert config.database == "sqlboiler"
        assert config.hostname == "localhost"
        assert config.port == DEFAULT_PORT
        assert config.sslmode == "disable"
        assert config.schema_name == "public"
        assert config.whitelist == []
        assert not config.add_enum_types
        assert config.enum_null_prefix == "Null"

    def test_from_env_with_prefix(self, monkeypatch):
        monkeypatch.setenv("DEV_CRDB_USERNAME", "dev")
        monkeypatch.setenv("DEV_CRDB_DATABASE", "devdb")
        monkeypatch.setenv("DEV_CRDB_HOSTNAME", "dev-host")
        monkeypatch.setenv("DEV_CRDB_PORT", "26300")
        monkeypatch.setenv("CRDB_HOSTNAME", "other-host")

        config = CockroachConfig.from_env(prefix="dev")

        assert config.hostname == "dev-host"
        assert config.port == 26300

    def test_from_env_lists_are_json(self, monkeypatch):
        monkeypatch.setenv("CRDB_USERNAME", "root")
        monkeypatch.setenv("CRDB_DATABASE", "sqlboiler")
        monkeypatch.setenv("CRDB_HOSTNAME", "localhost")
        monkeypatch.setenv("CRDB_WHITELIST", '["users", "videos.id"]')

        config = CockroachConfig.from_env()

        assert config.whitelist == ["users", "videos.id"]

    def test_from_env_missing_required(self, monkeypatch):
        monkeypatch.setenv("CRDB_USERNAME", "root")
        with pytest.raises(ValidationError):
            CockroachConfig.from_env()


class TestCockroachConfigFromDriverConfig:
    """Tests for CockroachConfig.from_driver_config()."""

    def test_driver_keys_are_mapped(self):
        config = CockroachConfig.from_driver_config(
            {
                "user": "root",
                "pass": "secret",
                "dbname": "sqlboiler",
                "host": "localhost",
                "port": 26257,
                "sslmode": "require",
                "schema": "app",
                "whitelist": ["users"],
                "blacklist": None,
                "add-enum-types": True,
                "enum-null-prefix": "nullable",
            }
        )

        assert config.username == "root"
        assert config.password == "secret"
        assert config.schema_name == "app"
        assert config.whitelist == ["users"]
        assert config.blacklist == []
        assert config.add_enum_types
        assert config.enum_null_prefix == "Nullable"
        assert config.use_schema

    def test_unknown_keys_are_ignored(self):
        config = CockroachConfig.from_driver_config(
            {"user": "root", "dbname": "db", "host": "h", "pkgname": "models"}
        )
        assert config.database == "db"
        assert not config.use_schema

    def test_missing_required_key(self):
        with pytest.raises(ValidationError):
            CockroachConfig.from_driver_config({"user": "root", "host": "h"})


def test_connection_params_include_password_only_when_set():
    config = CockroachConfig(username="root", database="db", hostname="h")
    assert "password" not in config.connection_params()

    config = CockroachConfig(
        username="root", database="db", hostname="h", password="pw"
    )
    assert config.connection_params()["password"] == "pw"

"""Connection configuration for CockroachDB introspection.

Configuration is read from ``CRDB_*`` environment variables by default, from
``<PREFIX>_CRDB_*`` variables via ``from_env(prefix=...)``, or from the
code-generation host's driver config mapping via ``from_driver_config``.

Example:
    >>> config = CockroachConfig.from_driver_config(
    ...     {"user": "root", "dbname": "app", "host": "localhost"}
    ... )
    >>> config.port
    26257
"""

from __future__ import annotations

import logging
from typing import Any, Mapping, Self

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from roachschema.util.naming import title_case

logger = logging.getLogger(__name__)

DEFAULT_PORT = 26257
DEFAULT_SCHEMA = "public"
DEFAULT_SSLMODE = "disable"
DEFAULT_ENUM_NULL_PREFIX = "Null"


class CockroachConfig(BaseSettings):
    """Settings for one introspection pass.

    Attributes:
        username: Database user (required)
        password: Password, optional
        database: Database name (required)
        hostname: Server host (required)
        port: Server port
        sslmode: libpq sslmode
        schema_name: Schema to introspect
        whitelist: Relations (``name``) or columns (``table.column``) to include
        blacklist: Relations or columns to exclude, ignored when whitelist is set
        add_enum_types: Emit enum types as native generated types
        enum_null_prefix: Prefix of the nullable variant of native enum types
    """

    model_config = SettingsConfigDict(
        env_prefix="CRDB_",
        extra="ignore",
        validate_assignment=True,
    )

    username: str
    password: str | None = None
    database: str
    hostname: str
    port: int = DEFAULT_PORT
    sslmode: str = DEFAULT_SSLMODE
    schema_name: str = DEFAULT_SCHEMA
    whitelist: list[str] = Field(default_factory=list)
    blacklist: list[str] = Field(default_factory=list)
    add_enum_types: bool = False
    enum_null_prefix: str = DEFAULT_ENUM_NULL_PREFIX

    @field_validator("whitelist", "blacklist", mode="before")
    @classmethod
    def _none_to_empty(cls, v: Any) -> Any:
        return [] if v is None else v

    @field_validator("enum_null_prefix", mode="after")
    @classmethod
    def _title_case_prefix(cls, v: str) -> str:
        return title_case(v) if v else DEFAULT_ENUM_NULL_PREFIX

    @property
    def use_schema(self) -> bool:
        """Generated SQL must qualify names when the schema is not the default one."""
        return self.schema_name != DEFAULT_SCHEMA

    def connection_params(self) -> dict[str, Any]:
        """Keyword arguments for ``psycopg2.connect``."""
        params: dict[str, Any] = {
            "host": self.hostname,
            "port": self.port,
            "dbname": self.database,
            "user": self.username,
            "sslmode": self.sslmode,
        }
        if self.password:
            params["password"] = self.password
        return params

    @classmethod
    def from_env(cls, prefix: str | None = None) -> Self:
        """Load from environment variables.

        Args:
            prefix: Optional prefix, e.g. ``DEV`` reads ``DEV_CRDB_HOSTNAME``

        Returns:
            CockroachConfig read from the environment
        """
        env_prefix = f"{prefix.upper()}_CRDB_" if prefix else "CRDB_"
        return cls(_env_prefix=env_prefix)

    @classmethod
    def from_driver_config(cls, config: Mapping[str, Any]) -> Self:
        """Build from the code-generation host's driver config mapping.

        Unknown keys are ignored; see ``DRIVER_CONFIG_KEYS`` for the mapping.
        """
        from .config_mapping import DRIVER_CONFIG_KEYS

        kwargs = {}
        for key, value in config.items():
            field_name = DRIVER_CONFIG_KEYS.get(key)
            if field_name is None:
                logger.debug(f"Ignoring unrecognized driver config key '{key}'")
                continue
            kwargs[field_name] = value
        return cls(**kwargs)

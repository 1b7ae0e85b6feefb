from .onto import (
    DEFAULT_ENUM_NULL_PREFIX,
    DEFAULT_PORT,
    DEFAULT_SCHEMA,
    DEFAULT_SSLMODE,
    CockroachConfig,
)

__all__ = [
    "DEFAULT_ENUM_NULL_PREFIX",
    "DEFAULT_PORT",
    "DEFAULT_SCHEMA",
    "DEFAULT_SSLMODE",
    "CockroachConfig",
]

"""Database access: connection settings, errors and the CockroachDB catalog reader."""

from .cockroach import CockroachConnection
from .conn import (
    CatalogShapeError,
    ConnectionCloseError,
    ConnectionFailure,
    IntrospectionError,
    MissingRowError,
    UnresolvableArrayTypeError,
)
from .connection import CockroachConfig

__all__ = [
    "CatalogShapeError",
    "CockroachConfig",
    "CockroachConnection",
    "ConnectionCloseError",
    "ConnectionFailure",
    "IntrospectionError",
    "MissingRowError",
    "UnresolvableArrayTypeError",
]

"""CockroachDB implementation of schema introspection.

CockroachDB is reached over the PostgreSQL wire protocol with psycopg2. This
package reads its catalog (relations, columns, keys, view capabilities and
enum types) and canonicalizes catalog types into TypeDescriptor values.

Key Components:
    - CockroachConnection: Caller-owned connection handle
    - CockroachTypeMapper / classify_type: Catalog type classification
    - load_enum_catalog: Enum types declared in a schema
    - list_tables, list_views, get_columns, get_primary_key, get_foreign_keys,
      get_view_capabilities: Catalog introspection
    - link_relations: Join tables, foreign key flags and relationships

Example:
    >>> from roachschema.db.cockroach import CockroachConnection, list_tables
    >>> from roachschema.db.connection import CockroachConfig
    >>> with CockroachConnection(CockroachConfig.from_env()) as conn:
    ...     tables = list_tables(conn, "public")
"""

from .conn import CockroachConnection
from .enums import load_enum_catalog
from .introspection import (
    get_columns,
    get_foreign_keys,
    get_primary_key,
    get_view_capabilities,
    list_relations,
    list_tables,
    list_views,
)
from .relationships import link_relations
from .types import CockroachTypeMapper, classify_type

__all__ = [
    "CockroachConnection",
    "CockroachTypeMapper",
    "classify_type",
    "get_columns",
    "get_foreign_keys",
    "get_primary_key",
    "get_view_capabilities",
    "link_relations",
    "list_relations",
    "list_tables",
    "list_views",
    "load_enum_catalog",
]

"""roachschema: schema introspection and type canonicalization for CockroachDB.

roachschema reads the catalog of a live CockroachDB database (tables, views,
columns, keys and enum types) and converts catalog types into portable type
descriptors for a code generator.

Example:
    >>> from roachschema import CockroachConfig, assemble
    >>> info = assemble(CockroachConfig.from_env())
    >>> print(info.to_yaml_str())
"""

__version__ = "0.1.0"

# --- Orchestration ---------------------------------------------------------
from .hq import CockroachDriver, assemble

# --- Architecture ----------------------------------------------------------
from .architecture import (
    Column,
    DBInfo,
    EnumType,
    ForeignKey,
    PrimaryKey,
    Relation,
    TypeDescriptor,
    ViewCapabilities,
)

# --- Database --------------------------------------------------------------
from .db import (
    CatalogShapeError,
    CockroachConfig,
    CockroachConnection,
    ConnectionCloseError,
    ConnectionFailure,
    IntrospectionError,
    MissingRowError,
    UnresolvableArrayTypeError,
)

# --- Enumerations ----------------------------------------------------------
from .onto import RelationKind, TypeKind

__all__ = [
    "CatalogShapeError",
    "CockroachConfig",
    "CockroachConnection",
    "CockroachDriver",
    "Column",
    "ConnectionCloseError",
    "ConnectionFailure",
    "DBInfo",
    "EnumType",
    "ForeignKey",
    "IntrospectionError",
    "MissingRowError",
    "PrimaryKey",
    "Relation",
    "RelationKind",
    "TypeDescriptor",
    "TypeKind",
    "UnresolvableArrayTypeError",
    "ViewCapabilities",
    "__version__",
    "assemble",
]

"""Driver facade exposing the introspection engine at the host boundary.

The code-generation host asks a driver for relation names, columns, keys and
view capabilities one call at a time, then for the canonical type of each
column. CockroachDriver answers those calls over one open connection and
caches the enum catalog per schema for the lifetime of the driver, which is
one introspection pass.
"""

from __future__ import annotations

import logging
from typing import Sequence

from roachschema.architecture.onto_sql import (
    Column,
    EnumType,
    ForeignKey,
    PrimaryKey,
    TypeDescriptor,
    ViewCapabilities,
)
from roachschema.db.cockroach.conn import CockroachConnection
from roachschema.db.cockroach.enums import load_enum_catalog
from roachschema.db.cockroach.introspection import (
    get_columns,
    get_foreign_keys,
    get_primary_key,
    get_view_capabilities,
    list_tables,
    list_views,
)
from roachschema.db.cockroach.types import CockroachTypeMapper
from roachschema.db.connection.onto import DEFAULT_SCHEMA

logger = logging.getLogger(__name__)


class CockroachDriver:
    """Boundary operations of the introspection engine.

    Attributes:
        conn: Open connection handle, owned by the caller
        type_mapper: Classifier used for column types
        schema: Active schema, used to resolve ``<schema>.<enum>`` types
    """

    def __init__(
        self,
        conn: CockroachConnection,
        type_mapper: CockroachTypeMapper | None = None,
        schema: str = DEFAULT_SCHEMA,
    ):
        self.conn = conn
        self.type_mapper = type_mapper or CockroachTypeMapper()
        self.schema = schema
        self._enums: dict[str, dict[str, EnumType]] = {}

    def enums(self, schema: str | None = None) -> dict[str, EnumType]:
        """Enum catalog of ``schema``, loaded once per driver."""
        schema = schema or self.schema
        if schema not in self._enums:
            self._enums[schema] = load_enum_catalog(self.conn, schema)
        return self._enums[schema]

    def table_names(
        self,
        schema: str,
        whitelist: Sequence[str] | None = None,
        blacklist: Sequence[str] | None = None,
    ) -> list[str]:
        return list_tables(self.conn, schema, whitelist, blacklist)

    def view_names(
        self,
        schema: str,
        whitelist: Sequence[str] | None = None,
        blacklist: Sequence[str] | None = None,
    ) -> list[str]:
        return list_views(self.conn, schema, whitelist, blacklist)

    def columns(
        self,
        schema: str,
        table: str,
        whitelist: Sequence[str] | None = None,
        blacklist: Sequence[str] | None = None,
    ) -> list[Column]:
        """Classified columns of a table, in ordinal order."""
        return get_columns(
            self.conn,
            schema,
            table,
            whitelist,
            blacklist,
            enums=self.enums(schema),
            type_mapper=self.type_mapper,
        )

    def view_columns(
        self,
        schema: str,
        view: str,
        whitelist: Sequence[str] | None = None,
        blacklist: Sequence[str] | None = None,
    ) -> list[Column]:
        """Classified columns of a view; views go through the same catalog query."""
        return self.columns(schema, view, whitelist, blacklist)

    def primary_key_info(self, schema: str, table: str) -> PrimaryKey | None:
        return get_primary_key(self.conn, schema, table)

    def foreign_key_info(self, schema: str, table: str) -> list[ForeignKey]:
        return get_foreign_keys(self.conn, schema, table)

    def view_capabilities(self, schema: str, view: str) -> ViewCapabilities:
        return get_view_capabilities(self.conn, schema, view)

    def translate_column_type(self, column: Column) -> Column:
        """Fill in the canonical descriptor of a column built elsewhere."""
        return self.type_mapper.translate_column(
            column, self.enums(self.schema), self.schema
        )

    def classify_type(
        self,
        raw_type: str,
        nullable: bool = False,
        array_element: str | None = None,
    ) -> TypeDescriptor:
        return self.type_mapper.classify(
            raw_type, nullable, array_element, self.enums(self.schema), self.schema
        )

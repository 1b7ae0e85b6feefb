"""Catalog introspection of CockroachDB relations.

Stateless functions over a caller-owned connection handle:

- list_relations / list_tables / list_views: relation names with whitelist/blacklist
- get_columns: ordered, classified columns of a table or view
- get_primary_key / get_foreign_keys: key constraints of a table
- get_view_capabilities: insert/upsert support of a view

Column introspection tolerates catalog differences between server releases
with an ordered chain of query variants. A variant is abandoned only when the
server reports that a column it references does not exist; every other
failure propagates.
"""

from __future__ import annotations

import logging
import re
from functools import partial
from typing import TYPE_CHECKING, Any, Mapping, NamedTuple, Sequence

import psycopg2
from psycopg2 import sql

from roachschema.architecture.onto_sql import (
    Column,
    EnumType,
    ForeignKey,
    PrimaryKey,
    ViewCapabilities,
)
from roachschema.db.conn import MissingRowError
from roachschema.filter.sql import columns_from_list, list_filter_clause, tables_from_list
from roachschema.onto import RelationKind

from .enums import load_enum_catalog
from .types import (
    ARRAY_DB_TYPE,
    CockroachTypeMapper,
    lookup_schema_enum,
    split_array_type,
    strip_type_modifiers,
)

if TYPE_CHECKING:
    from .conn import CockroachConnection

logger = logging.getLogger(__name__)

NULL_DEFAULT = "NULL"

_MISSING_COLUMN_RE = re.compile(r'column "([^"]+)" does not exist')

TABLES_QUERY = """SELECT table_name
FROM information_schema.tables
WHERE table_schema = %(schema)s AND table_type = 'BASE TABLE'"""

VIEWS_QUERY = """SELECT table_name
FROM information_schema.views
WHERE table_schema = %(schema)s"""

COLUMNS_QUERY = """SELECT
    DISTINCT
    c.column_name,
    c.ordinal_position,
    max({data_type_column}) AS data_type,
    max(c.column_default) AS column_default,
    bool_or(CASE WHEN c.is_nullable = 'NO' THEN false ELSE true END) AS is_nullable,
    bool_or(
        CASE WHEN pc.count < 2 AND pgc.contype IN ('p', 'u') THEN true ELSE false END
    ) AS is_unique
FROM
    information_schema.columns AS c
    LEFT JOIN (
        SELECT DISTINCT
            c.column_name,
            pgc.conname AS conname,
            pgc.contype AS contype
        FROM
            information_schema.columns AS c
            LEFT JOIN information_schema.key_column_usage AS kcu
                ON c.table_name = kcu.table_name
                AND c.table_schema = kcu.table_schema
                AND c.column_name = kcu.column_name
            LEFT JOIN pg_constraint AS pgc
                ON kcu.constraint_name = pgc.conname
        WHERE c.table_schema = %(schema)s AND c.table_name = %(table)s
    ) AS pgc
        ON c.column_name = pgc.column_name
    LEFT JOIN (
        SELECT
            kcu.table_schema,
            kcu.table_name,
            kcu.constraint_name,
            count(*)
        FROM information_schema.key_column_usage AS kcu
        GROUP BY kcu.table_schema, kcu.table_name, kcu.constraint_name
    ) AS pc
        ON c.table_schema = pc.table_schema
        AND c.table_name = pc.table_name
        AND pgc.conname = pc.constraint_name
WHERE
    c.table_schema = %(schema)s AND c.table_name = %(table)s{where_clause}
GROUP BY c.ordinal_position, c.column_name
ORDER BY c.ordinal_position ASC"""

HIDDEN_COLUMNS_CLAUSE = " AND c.is_hidden = 'NO'"

PRIMARY_KEY_QUERY = """SELECT tc.constraint_name
FROM information_schema.table_constraints AS tc
WHERE tc.table_name = %(table)s
    AND tc.constraint_type = 'PRIMARY KEY'
    AND tc.table_schema = %(schema)s"""

PRIMARY_KEY_COLUMNS_QUERY = """SELECT kcu.column_name
FROM information_schema.key_column_usage AS kcu
WHERE kcu.constraint_name = %(constraint)s
    AND kcu.table_schema = %(schema)s
    AND kcu.table_name = %(table)s
ORDER BY kcu.ordinal_position"""

FOREIGN_KEYS_QUERY = """SELECT
    DISTINCT
    pgcon.conname,
    pgc.relname AS source_table,
    kcu.column_name AS source_column,
    dstlookupname.relname AS dest_table,
    pgadst.attname AS dest_column
FROM
    pg_namespace AS pgn
    INNER JOIN pg_class AS pgc
        ON pgn.oid = pgc.relnamespace AND pgc.relkind = 'r'
    INNER JOIN pg_constraint AS pgcon
        ON pgn.oid = pgcon.connamespace AND pgc.oid = pgcon.conrelid
    INNER JOIN pg_class AS dstlookupname
        ON pgcon.confrelid = dstlookupname.oid
    LEFT JOIN information_schema.key_column_usage AS kcu
        ON pgcon.conname = kcu.constraint_name
        AND pgc.relname = kcu.table_name
    INNER JOIN pg_attribute AS pgadst
        ON pgcon.confrelid = pgadst.attrelid
        AND pgadst.attnum = ANY(pgcon.confkey)
WHERE
    pgn.nspname = %(schema)s
    AND pgc.relname = %(table)s
    AND pgcon.contype = 'f'
ORDER BY pgcon.conname DESC"""

VIEW_CAPABILITIES_QUERY = """SELECT
    is_insertable_into = 'YES' AS insertable,
    is_updatable = 'YES' AS updatable,
    is_trigger_insertable_into = 'YES' AS trigger_insertable,
    is_trigger_updatable = 'YES' AS trigger_updatable,
    is_trigger_deletable = 'YES' AS trigger_deletable
FROM information_schema.views
WHERE table_schema = %(schema)s AND table_name = %(view)s"""


class ColumnQueryVariant(NamedTuple):
    """One shape of the column query.

    Attributes:
        data_type_column: information_schema.columns column holding the type
        filter_hidden: Exclude hidden columns through ``is_hidden``
    """

    data_type_column: str
    filter_hidden: bool

    @property
    def referenced_columns(self) -> frozenset[str]:
        referenced = {self.data_type_column}
        if self.filter_hidden:
            referenced.add("is_hidden")
        return frozenset(referenced)

    def render(self, filter_clause: sql.Composable) -> sql.Composable:
        where_clause = filter_clause
        if self.filter_hidden:
            where_clause = filter_clause + sql.SQL(HIDDEN_COLUMNS_CLAUSE)
        return sql.SQL(COLUMNS_QUERY).format(
            data_type_column=sql.SQL(f"c.{self.data_type_column}"),
            where_clause=where_clause,
        )


# Tried in order; crdb_sql_type is missing before v2.2, is_hidden on some releases
COLUMN_QUERY_VARIANTS: tuple[ColumnQueryVariant, ...] = (
    ColumnQueryVariant("crdb_sql_type", True),
    ColumnQueryVariant("data_type", True),
    ColumnQueryVariant("data_type", False),
)


def missing_column(error: Exception) -> str | None:
    """Name of the column a ``column "x" does not exist`` error refers to."""
    match = _MISSING_COLUMN_RE.search(str(error))
    if match is None:
        return None
    return match.group(1).split(".")[-1]


def next_column_query_variant(index: int, missing: str | None) -> int | None:
    """Index of the variant to try after variant ``index`` failed.

    Returns None when the failure is not caused by a column the failed variant
    references, or when no later variant avoids that column.
    """
    if missing is None:
        return None
    if missing not in COLUMN_QUERY_VARIANTS[index].referenced_columns:
        return None
    for candidate in range(index + 1, len(COLUMN_QUERY_VARIANTS)):
        if missing not in COLUMN_QUERY_VARIANTS[candidate].referenced_columns:
            return candidate
    return None


def list_relations(
    conn: CockroachConnection,
    schema: str,
    whitelist: Sequence[str] | None = None,
    blacklist: Sequence[str] | None = None,
    kind: RelationKind = RelationKind.TABLE,
) -> list[str]:
    """List base tables or views of a schema.

    Args:
        conn: Open connection handle
        schema: Schema name
        whitelist: Only these relations (entries without a dot) when non-empty
        blacklist: Exclude these relations, ignored when a whitelist is given
        kind: Tables or views

    Returns:
        Relation names; views are sorted by name, tables come in catalog order
    """
    base_query = VIEWS_QUERY if kind == RelationKind.VIEW else TABLES_QUERY
    filter_clause, params = list_filter_clause(
        "table_name", whitelist, blacklist, tables_from_list, "relation"
    )
    query = sql.SQL(base_query) + filter_clause
    if kind == RelationKind.VIEW:
        query = query + sql.SQL(" ORDER BY table_name")

    rows = conn.read(query, {"schema": schema, **params})
    return [row["table_name"] for row in rows]


def list_tables(
    conn: CockroachConnection,
    schema: str,
    whitelist: Sequence[str] | None = None,
    blacklist: Sequence[str] | None = None,
) -> list[str]:
    """List base table names of a schema; see list_relations."""
    return list_relations(conn, schema, whitelist, blacklist, RelationKind.TABLE)


def list_views(
    conn: CockroachConnection,
    schema: str,
    whitelist: Sequence[str] | None = None,
    blacklist: Sequence[str] | None = None,
) -> list[str]:
    """List view names of a schema in alphabetical order; see list_relations."""
    return list_relations(conn, schema, whitelist, blacklist, RelationKind.VIEW)


def _read_column_rows(
    conn: CockroachConnection,
    filter_clause: sql.Composable,
    params: dict[str, Any],
    relation: str,
) -> list[dict[str, Any]]:
    index = 0
    while True:
        variant = COLUMN_QUERY_VARIANTS[index]
        try:
            return conn.read(variant.render(filter_clause), params)
        except psycopg2.Error as e:
            missing = missing_column(e)
            next_index = next_column_query_variant(index, missing)
            if next_index is None:
                raise
            logger.debug(
                f"Column query for '{relation}' failed on missing column "
                f"'{missing}', retrying with {COLUMN_QUERY_VARIANTS[next_index]}"
            )
            index = next_index


def column_from_row(
    row: Mapping[str, Any],
    enums: Mapping[str, EnumType] | None,
    schema: str,
) -> Column:
    """Build an unclassified Column from one row of the column query.

    Nullable columns without a default get the ``NULL`` default: they are
    implicitly ``DEFAULT NULL`` and must not look like columns with no default.
    """
    nullable = bool(row["is_nullable"])
    default = row["column_default"]
    if nullable and default is None:
        default = NULL_DEFAULT

    raw_type = row["data_type"]
    db_type = strip_type_modifiers(raw_type)
    arr_type = split_array_type(db_type)
    if arr_type is not None:
        db_type = ARRAY_DB_TYPE
    else:
        enum = lookup_schema_enum(db_type, enums, schema)
        if enum is not None:
            db_type = enum.marker

    return Column(
        name=row["column_name"],
        ordinal_position=row["ordinal_position"],
        raw_type=raw_type,
        db_type=db_type,
        nullable=nullable,
        unique=bool(row["is_unique"]),
        default=default,
        arr_type=arr_type,
    )


def get_columns(
    conn: CockroachConnection,
    schema: str,
    relation: str,
    whitelist: Sequence[str] | None = None,
    blacklist: Sequence[str] | None = None,
    enums: Mapping[str, EnumType] | None = None,
    type_mapper: CockroachTypeMapper | None = None,
) -> list[Column]:
    """Get the ordered, classified columns of a table or view.

    Args:
        conn: Open connection handle
        schema: Schema name
        relation: Table or view name
        whitelist: ``table.column`` / ``*.column`` entries to include
        blacklist: Entries to exclude, ignored when a whitelist is given
        enums: Enum catalog of the schema; loaded from the server when None
        type_mapper: Classifier to use; defaults to CockroachTypeMapper()

    Returns:
        Columns in ordinal order, hidden columns excluded where supported

    Raises:
        UnresolvableArrayTypeError: If an array column has no element type
    """
    filter_clause, filter_params = list_filter_clause(
        "c.column_name",
        whitelist,
        blacklist,
        partial(columns_from_list, table_name=relation),
        "column",
    )
    params = {"schema": schema, "table": relation, **filter_params}
    rows = _read_column_rows(conn, filter_clause, params, relation)

    if enums is None:
        enums = load_enum_catalog(conn, schema)
    if type_mapper is None:
        type_mapper = CockroachTypeMapper()

    columns = []
    for row in rows:
        column = column_from_row(row, enums, schema)
        columns.append(type_mapper.translate_column(column, enums, schema))
    logger.debug(f"Found {len(columns)} columns in '{schema}.{relation}'")
    return columns


def get_primary_key(
    conn: CockroachConnection, schema: str, relation: str
) -> PrimaryKey | None:
    """Get the primary key of a table.

    Returns:
        PrimaryKey with columns in key order, or None if the table has none
    """
    params = {"schema": schema, "table": relation}
    row = conn.read_one(PRIMARY_KEY_QUERY, params)
    if row is None:
        return None

    constraint = row["constraint_name"]
    rows = conn.read(PRIMARY_KEY_COLUMNS_QUERY, {"constraint": constraint, **params})
    return PrimaryKey(name=constraint, columns=[r["column_name"] for r in rows])


def get_foreign_keys(
    conn: CockroachConnection, schema: str, relation: str
) -> list[ForeignKey]:
    """Get the foreign keys owned by a table, ordered by constraint name descending."""
    rows = conn.read(FOREIGN_KEYS_QUERY, {"schema": schema, "table": relation})
    return [
        ForeignKey(
            name=row["conname"],
            table=relation,
            column=row["source_column"],
            foreign_table=row["dest_table"],
            foreign_column=row["dest_column"],
        )
        for row in rows
    ]


def get_view_capabilities(
    conn: CockroachConnection, schema: str, view: str
) -> ViewCapabilities:
    """Probe whether a view supports inserts and upserts.

    Raises:
        MissingRowError: If the view is not listed in information_schema.views
    """
    row = conn.read_one(VIEW_CAPABILITIES_QUERY, {"schema": schema, "view": view})
    if row is None:
        raise MissingRowError(f"view '{schema}.{view}' not found in information_schema.views")
    return ViewCapabilities.from_flags(
        insertable=bool(row["insertable"]),
        updatable=bool(row["updatable"]),
        trigger_insertable=bool(row["trigger_insertable"]),
        trigger_updatable=bool(row["trigger_updatable"]),
        trigger_deletable=bool(row["trigger_deletable"]),
    )

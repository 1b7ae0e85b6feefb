"""Loading of declared enum types from ``SHOW ENUMS``.

The shape of ``SHOW ENUMS`` differs across CockroachDB releases:

- before v20.2 the statement does not exist and fails with
  ``unrecognized configuration parameter "enums"``; that is read as "no enums"
- before v20.2.2 rows carry three columns: schema, name, values
- later releases add a fourth ``owner`` column
- before v21.1 values are one ``a|b|c`` string, later a ``{a,b,c}`` array
  literal (or a list, when the driver decodes the array itself)

Pipe-delimited values are split naively, so a value that itself contains
``|`` is mis-parsed. Releases that produce that format offer no escaping.

The catalog returned here is a lookup cache for one introspection pass.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any

import psycopg2
from psycopg2.extensions import STRINGARRAY

from roachschema.architecture.onto_sql import EnumType
from roachschema.db.conn import CatalogShapeError

if TYPE_CHECKING:
    from .conn import CockroachConnection

logger = logging.getLogger(__name__)

SHOW_ENUMS_QUERY = "SHOW ENUMS"
ENUMS_UNSUPPORTED_MESSAGE = 'unrecognized configuration parameter "enums"'
PIPE_SEPARATOR = "|"


def parse_enum_values(enum_name: str, raw_values: Any) -> list[str]:
    """Decode the values column of a ``SHOW ENUMS`` row.

    Args:
        enum_name: Enum the values belong to, for error messages
        raw_values: Column value: None, a list, a ``{...}`` literal or a ``|`` string

    Returns:
        Values in declaration order

    Raises:
        CatalogShapeError: If a ``{...}`` literal cannot be parsed
    """
    if raw_values is None:
        return []
    if isinstance(raw_values, (list, tuple)):
        return [str(v) for v in raw_values]
    text = str(raw_values)
    if not text:
        return []
    if text[0] == "{" and text[-1] == "}":
        message = f"failed to parse values of enum '{enum_name}': {text}"
        try:
            values = STRINGARRAY(text, None)
        except psycopg2.Error as e:
            raise CatalogShapeError(message) from e
        # nested arrays and NULL elements are not enum values
        if not all(isinstance(v, str) for v in values):
            raise CatalogShapeError(message)
        return values
    return text.split(PIPE_SEPARATOR)


def enum_from_row(row: dict[str, Any]) -> tuple[str, EnumType]:
    """Convert one ``SHOW ENUMS`` row into (schema, EnumType).

    Raises:
        CatalogShapeError: If the row has neither 3 nor 4 columns
    """
    fields = list(row.values())
    if len(fields) == 4:
        enum_schema, enum_name, raw_values, _owner = fields
    elif len(fields) == 3:
        enum_schema, enum_name, raw_values = fields
    else:
        raise CatalogShapeError(
            f"unexpected number of columns in enums table: {len(fields)}"
        )
    return enum_schema, EnumType(
        name=enum_name, values=parse_enum_values(enum_name, raw_values)
    )


def load_enum_catalog(conn: CockroachConnection, schema: str) -> dict[str, EnumType]:
    """Load the enums declared in ``schema``.

    Args:
        conn: Open connection handle
        schema: Schema whose enums are wanted; rows of other schemas are discarded

    Returns:
        Mapping of enum name to EnumType, in catalog order; empty when the
        server predates enum support
    """
    try:
        rows = conn.read(SHOW_ENUMS_QUERY)
    except psycopg2.Error as e:
        if ENUMS_UNSUPPORTED_MESSAGE in str(e):
            logger.debug("Server does not support enum types, assuming none")
            return {}
        raise

    enums: dict[str, EnumType] = {}
    for row in rows:
        enum_schema, enum = enum_from_row(row)
        if enum_schema == schema:
            enums[enum.name] = enum
    logger.debug(f"Loaded {len(enums)} enum types from schema '{schema}'")
    return enums

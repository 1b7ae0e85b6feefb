"""Classification of CockroachDB catalog types into canonical type descriptors.

The classifier is a pure function of its inputs: it never touches the
database. Unrecognized base types degrade to TEXT with a logged warning;
an array whose element type cannot be determined raises
UnresolvableArrayTypeError, and callers can tell the two outcomes apart.

Example:
    >>> classify_type("numeric(2,1)", nullable=True).signature
    'nullable<decimal>'
    >>> classify_type("int8[]").signature
    'array<integer64>'
"""

from __future__ import annotations

import logging
import re
from typing import Mapping

from roachschema.architecture.onto_sql import Column, EnumType, TypeDescriptor
from roachschema.db.conn import UnresolvableArrayTypeError
from roachschema.db.connection.onto import DEFAULT_ENUM_NULL_PREFIX, DEFAULT_SCHEMA
from roachschema.onto import TypeKind
from roachschema.util.naming import title_case

logger = logging.getLogger(__name__)

ARRAY_SUFFIX = "[]"
ARRAY_DB_TYPE = "array"

_TYPE_MODIFIER_RE = re.compile(r"\(([^\)]+)\)")

# base type name -> (kind, width)
SCALAR_TYPES: dict[str, tuple[TypeKind, int | None]] = {
    "int8": (TypeKind.INTEGER, 64),
    "bigint": (TypeKind.INTEGER, 64),
    "bigserial": (TypeKind.INTEGER, 64),
    "int4": (TypeKind.INTEGER, 32),
    "int": (TypeKind.INTEGER, 32),
    "integer": (TypeKind.INTEGER, 32),
    "serial": (TypeKind.INTEGER, 32),
    "int2": (TypeKind.INTEGER, 16),
    "smallint": (TypeKind.INTEGER, 16),
    "smallserial": (TypeKind.INTEGER, 16),
    "decimal": (TypeKind.DECIMAL, None),
    "numeric": (TypeKind.DECIMAL, None),
    "float8": (TypeKind.FLOAT, 64),
    "float": (TypeKind.FLOAT, 64),
    "double precision": (TypeKind.FLOAT, 64),
    "float4": (TypeKind.FLOAT, 32),
    "real": (TypeKind.FLOAT, 32),
    "string": (TypeKind.TEXT, None),
    "collate": (TypeKind.TEXT, None),
    "bit": (TypeKind.TEXT, None),
    "bit varying": (TypeKind.TEXT, None),
    "varbit": (TypeKind.TEXT, None),
    "character": (TypeKind.TEXT, None),
    "character varying": (TypeKind.TEXT, None),
    "char": (TypeKind.TEXT, None),
    "varchar": (TypeKind.TEXT, None),
    "text": (TypeKind.TEXT, None),
    "name": (TypeKind.TEXT, None),
    '"char"': (TypeKind.BYTE, None),
    "bytes": (TypeKind.BINARY, None),
    "bytea": (TypeKind.BINARY, None),
    "json": (TypeKind.JSON, None),
    "jsonb": (TypeKind.JSON, None),
    "bool": (TypeKind.BOOLEAN, None),
    "boolean": (TypeKind.BOOLEAN, None),
    "date": (TypeKind.DATE, None),
    "time": (TypeKind.TIMESTAMP, None),
    "timetz": (TypeKind.TIMESTAMP, None),
    "time without time zone": (TypeKind.TIMESTAMP, None),
    "time with time zone": (TypeKind.TIMESTAMP, None),
    "timestamp": (TypeKind.TIMESTAMP, None),
    "timestamptz": (TypeKind.TIMESTAMP, None),
    "timestamp without time zone": (TypeKind.TIMESTAMP, None),
    "timestamp with time zone": (TypeKind.TIMESTAMP, None),
    "interval": (TypeKind.INTERVAL, None),
    "inet": (TypeKind.NETWORK_ADDRESS, None),
    "uuid": (TypeKind.UUID, None),
}


def strip_type_modifiers(raw_type: str) -> str:
    """Remove every parenthesized qualifier and lowercase, e.g. ``DECIMAL(2,1)`` -> ``decimal``."""
    return _TYPE_MODIFIER_RE.sub("", raw_type).strip().lower()


def split_array_type(db_type: str) -> str | None:
    """Return the element type of ``<element>[]``, or None if not an array type."""
    if db_type.endswith(ARRAY_SUFFIX):
        return db_type[: -len(ARRAY_SUFFIX)]
    return None


def lookup_schema_enum(
    db_type: str, enums: Mapping[str, EnumType] | None, schema: str
) -> EnumType | None:
    """Resolve ``<schema>.<name>`` against the enum catalog of the active schema."""
    if not enums or "." not in db_type:
        return None
    parts = db_type.split(".")
    if len(parts) != 2 or parts[0] != schema:
        return None
    return enums.get(parts[1])


class CockroachTypeMapper:
    """Maps catalog type strings to TypeDescriptor.

    Attributes:
        add_enum_types: Attach a generated native type name to enum descriptors
        enum_null_prefix: Prefix of the native name of nullable enum descriptors
    """

    def __init__(
        self,
        add_enum_types: bool = False,
        enum_null_prefix: str = DEFAULT_ENUM_NULL_PREFIX,
    ):
        self.add_enum_types = add_enum_types
        self.enum_null_prefix = enum_null_prefix

    def classify(
        self,
        raw_type: str,
        nullable: bool = False,
        array_element: str | None = None,
        enums: Mapping[str, EnumType] | None = None,
        schema: str = DEFAULT_SCHEMA,
    ) -> TypeDescriptor:
        """Classify a catalog type.

        Args:
            raw_type: Catalog type, an already-normalized ``db_type`` or an enum marker
            nullable: Whether the column accepts NULL
            array_element: Element type when ``raw_type`` is the ``array`` marker
            enums: Enum catalog of the active schema, keyed by enum name
            schema: Active schema name

        Returns:
            TypeDescriptor for the type

        Raises:
            UnresolvableArrayTypeError: If an array's element type is unknown
        """
        enum = EnumType.from_marker(raw_type)
        if enum is not None:
            return self._enum_descriptor(enum, nullable)

        db_type = strip_type_modifiers(raw_type)

        element_type = split_array_type(db_type)
        if element_type is None and db_type == ARRAY_DB_TYPE:
            element_type = array_element
            if not element_type:
                raise UnresolvableArrayTypeError(
                    f"unable to determine the element type of array type '{raw_type}'"
                )
        if element_type is not None:
            element = self.classify(element_type, False, None, enums, schema)
            return TypeDescriptor(
                kind=TypeKind.ARRAY,
                nullable=nullable,
                db_type=ARRAY_DB_TYPE,
                element=element,
            )

        enum = lookup_schema_enum(db_type, enums, schema)
        if enum is not None:
            return self._enum_descriptor(enum, nullable)

        scalar = SCALAR_TYPES.get(db_type)
        if scalar is not None:
            kind, width = scalar
            return TypeDescriptor(
                kind=kind, nullable=nullable, width=width, db_type=db_type
            )

        qualifier = "nullable " if nullable else ""
        logger.warning(
            f"Unhandled {qualifier}data type '{db_type}', "
            f"falling back to {qualifier}text"
        )
        return TypeDescriptor(
            kind=TypeKind.TEXT, nullable=nullable, db_type=db_type, fallback=True
        )

    def translate_column(
        self,
        column: Column,
        enums: Mapping[str, EnumType] | None = None,
        schema: str = DEFAULT_SCHEMA,
    ) -> Column:
        """Return a copy of ``column`` with its canonical descriptor filled in.

        Raises:
            UnresolvableArrayTypeError: Naming the column whose element type is unknown
        """
        try:
            descriptor = self.classify(
                column.db_type, column.nullable, column.arr_type, enums, schema
            )
        except UnresolvableArrayTypeError as e:
            raise UnresolvableArrayTypeError(f"column '{column.name}': {e}") from e
        return column.model_copy(update={"type": descriptor})

    def _enum_descriptor(self, enum: EnumType, nullable: bool) -> TypeDescriptor:
        native_name = None
        if self.add_enum_types:
            native_name = title_case(enum.name)
            if nullable:
                native_name = self.enum_null_prefix + native_name
        return TypeDescriptor(
            kind=TypeKind.ENUM,
            nullable=nullable,
            db_type=enum.marker,
            enum=enum,
            native_name=native_name,
        )


def classify_type(
    raw_type: str,
    nullable: bool = False,
    array_element: str | None = None,
    enums: Mapping[str, EnumType] | None = None,
    schema: str = DEFAULT_SCHEMA,
) -> TypeDescriptor:
    """Classify a catalog type with default mapper options (no native enum names)."""
    return CockroachTypeMapper().classify(
        raw_type, nullable, array_element, enums, schema
    )

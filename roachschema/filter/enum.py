"""Textual enum markers embedded in a column's catalog type.

The external code generator only sees flat type strings, so an enum-typed
column carries its enum identity as ``enum.<name>('v1','v2',...)`` in
``Column.db_type``. This module owns both directions of that grammar: the
introspector renders markers, downstream filtering parses them back.

Values are quoted like SQL string literals, so a single quote inside a value
is written twice: ``enum.mood('it''s')``.
"""

from __future__ import annotations

import re
from typing import TYPE_CHECKING, Iterable

if TYPE_CHECKING:
    from roachschema.architecture.onto_sql import Column

ENUM_MARKER_PREFIX = "enum."

_QUOTED_VALUE = r"'(?:[^']|'')*'"
_ENUM_MARKER_RE = re.compile(
    rf"^enum\.([^()']+)\(((?:{_QUOTED_VALUE}(?:,{_QUOTED_VALUE})*)?)\)$"
)
_ENUM_VALUE_RE = re.compile(r"'((?:[^']|'')*)'")


def render_enum_marker(name: str, values: Iterable[str]) -> str:
    """Render the marker for enum ``name`` with ``values`` in declaration order."""
    # no values gives enum.<name>(); enum.<name>('') would read as one empty value
    quoted = ",".join("'{}'".format(value.replace("'", "''")) for value in values)
    return f"{ENUM_MARKER_PREFIX}{name}({quoted})"


def is_enum_marker(db_type: str | None) -> bool:
    """Check whether a catalog type string is an enum marker."""
    if not db_type:
        return False
    return _ENUM_MARKER_RE.match(db_type) is not None


def parse_enum_name(db_type: str) -> str | None:
    """Extract the enum name from a marker, or None if it is not one."""
    match = _ENUM_MARKER_RE.match(db_type)
    if match is None:
        return None
    return match.group(1)


def parse_enum_values(db_type: str) -> list[str] | None:
    """Extract the enum values from a marker, or None if it is not one."""
    match = _ENUM_MARKER_RE.match(db_type)
    if match is None:
        return None
    return [
        value.replace("''", "'") for value in _ENUM_VALUE_RE.findall(match.group(2))
    ]


def filter_columns_by_enum(columns: Iterable[Column]) -> list[Column]:
    """Return the columns whose catalog type is an enum marker."""
    return [column for column in columns if is_enum_marker(column.db_type)]

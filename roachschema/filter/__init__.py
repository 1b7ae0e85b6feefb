"""Filtering helpers: relation/column filter lists and enum type markers."""

from .enum import (
    filter_columns_by_enum,
    is_enum_marker,
    parse_enum_name,
    parse_enum_values,
    render_enum_marker,
)
from .sql import (
    columns_from_list,
    list_filter_clause,
    name_list_clause,
    tables_from_list,
)

__all__ = [
    "columns_from_list",
    "filter_columns_by_enum",
    "is_enum_marker",
    "list_filter_clause",
    "name_list_clause",
    "parse_enum_name",
    "parse_enum_values",
    "render_enum_marker",
    "tables_from_list",
]

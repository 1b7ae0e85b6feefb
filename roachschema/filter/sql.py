"""Whitelist/blacklist helpers for catalog queries.

Filter lists mix relation entries (``users``) and column entries
(``users.email``, or ``*.email`` for every relation). Relation enumeration only
looks at the former, column introspection only at the latter. When a whitelist
is given the blacklist is ignored entirely.

Placeholder lists are composed with ``psycopg2.sql`` using named placeholders,
so the same parameter dictionary can feed a query that references the schema
and relation more than once.
"""

from __future__ import annotations

from typing import Callable, Sequence

from psycopg2 import sql


def tables_from_list(names: Sequence[str] | None) -> list[str]:
    """Return the relation entries (entries without a dot) of a filter list."""
    if not names:
        return []
    return [name for name in names if "." not in name]


def columns_from_list(names: Sequence[str] | None, table_name: str) -> list[str]:
    """Return the column entries of a filter list addressed to ``table_name``.

    Entries are ``table.column`` or ``*.column``; entries addressed to another
    relation are ignored.
    """
    if not names:
        return []
    columns = []
    for name in names:
        parts = name.split(".")
        if len(parts) != 2:
            continue
        if parts[0] == table_name or parts[0] == "*":
            columns.append(parts[1])
    return columns


def name_list_clause(
    column: str, names: Sequence[str], negate: bool, param_prefix: str
) -> tuple[sql.Composable, dict[str, str]]:
    """Build `` AND <column> [NOT] IN (...)`` with one named placeholder per name.

    Args:
        column: Trusted column expression, e.g. ``c.column_name``
        names: Values to bind
        negate: Use ``NOT IN`` instead of ``IN``
        param_prefix: Prefix for the generated parameter names

    Returns:
        Tuple of (SQL fragment, parameter dictionary)
    """
    param_names = [f"{param_prefix}_{i}" for i in range(len(names))]
    clause = sql.SQL(" AND {column} {operator} ({placeholders})").format(
        column=sql.SQL(column),
        operator=sql.SQL("NOT IN" if negate else "IN"),
        placeholders=sql.SQL(", ").join(sql.Placeholder(p) for p in param_names),
    )
    return clause, dict(zip(param_names, names))


def list_filter_clause(
    column: str,
    whitelist: Sequence[str] | None,
    blacklist: Sequence[str] | None,
    select: Callable[[Sequence[str]], list[str]],
    param_prefix: str,
) -> tuple[sql.Composable, dict[str, str]]:
    """Build the inclusion or exclusion clause for a whitelist/blacklist pair.

    Args:
        column: Trusted column expression the names are matched against
        whitelist: Inclusion list; takes precedence when non-empty
        blacklist: Exclusion list, used only without a whitelist
        select: Picks the relevant entries out of a list
            (``tables_from_list`` or a ``columns_from_list`` partial)
        param_prefix: Prefix for the generated parameter names

    Returns:
        Tuple of (SQL fragment, parameter dictionary); both empty when nothing
        applies
    """
    if whitelist:
        names, negate = select(whitelist), False
    elif blacklist:
        names, negate = select(blacklist), True
    else:
        return sql.SQL(""), {}
    if not names:
        return sql.SQL(""), {}
    return name_list_clause(column, names, negate, param_prefix)

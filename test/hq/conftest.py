"""A psycopg2 stand-in that answers catalog queries for a small schema."""

import psycopg2
import pytest
from psycopg2 import sql

# table -> list of (name, data_type, nullable, unique)
TABLE_COLUMNS = {
    "users": [("id", "INT8", False, True)],
    "sponsors": [("id", "INT8", False, True)],
    "videos": [
        ("id", "INT8", False, True),
        ("user_id", "INT8", False, False),
        ("sponsor_id", "INT8", True, True),
        ("day", "public.workday", True, False),
    ],
    "user_videos": [
        ("user_id", "INT8", False, False),
        ("video_id", "INT8", False, False),
    ],
}


def query_text(query):
    if isinstance(query, sql.Composable):
        return query.as_string(None)
    return query


FOREIGN_KEYS = {
    "videos": [
        ("videos_user_id_fkey", "user_id", "users", "id"),
        ("videos_sponsor_id_fkey", "sponsor_id", "sponsors", "id"),
    ],
}


class CatalogCursor:
    def __init__(self, catalog):
        self.catalog = catalog
        self.result = []

    def __enter__(self):
        return self

    def __exit__(self, *exc):
        return False

    def execute(self, query, params=None):
        text = query_text(query)
        self.catalog.queries.append((text, params))
        self.result = self.catalog.answer(text, params or {})

    def fetchall(self):
        return self.result

    def fetchone(self):
        return self.result[0] if self.result else None


class CatalogConnection:
    """Raw connection serving TABLE_COLUMNS/FOREIGN_KEYS through SQL text matching."""

    def __init__(self, close_error=None, fail_on=None):
        self.autocommit = False
        self.closed = False
        self.close_error = close_error
        self.fail_on = fail_on
        self.queries = []

    def cursor(self, cursor_factory=None):
        return CatalogCursor(self)

    def close(self):
        if self.close_error is not None:
            raise self.close_error
        self.closed = True

    def answer(self, text, params):
        if self.fail_on is not None and self.fail_on in text:
            raise psycopg2.OperationalError(f"query failed: {self.fail_on}")
        if text == "SHOW ENUMS":
            return [
                {
                    "schema": "public",
                    "name": "workday",
                    "values": "{monday,friday}",
                    "owner": "root",
                }
            ]
        if "is_insertable_into" in text:
            return [
                {
                    "insertable": False,
                    "updatable": False,
                    "trigger_insertable": False,
                    "trigger_updatable": False,
                    "trigger_deletable": False,
                }
            ]
        if "BASE TABLE" in text:
            return [{"table_name": t} for t in ("users", "sponsors", "videos")]
        if "FROM information_schema.views" in text:
            return [{"table_name": "user_videos"}]
        if "bool_or" in text:
            return [
                {
                    "column_name": name,
                    "ordinal_position": i,
                    "data_type": data_type,
                    "column_default": None,
                    "is_nullable": nullable,
                    "is_unique": unique,
                }
                for i, (name, data_type, nullable, unique) in enumerate(
                    TABLE_COLUMNS[params["table"]], start=1
                )
            ]
        if "PRIMARY KEY" in text:
            return [{"constraint_name": f"{params['table']}_pkey"}]
        if "kcu.ordinal_position" in text:
            return [{"column_name": "id"}]
        if "pgcon.contype" in text:
            return [
                {
                    "conname": name,
                    "source_table": params["table"],
                    "source_column": column,
                    "dest_table": foreign_table,
                    "dest_column": foreign_column,
                }
                for name, column, foreign_table, foreign_column in FOREIGN_KEYS.get(
                    params["table"], []
                )
            ]
        raise AssertionError(f"unexpected query: {text}")


@pytest.fixture()
def catalog(monkeypatch):
    """Patch psycopg2.connect; returns a factory taking CatalogConnection options."""

    def _install(**kwargs):
        raw = CatalogConnection(**kwargs)
        monkeypatch.setattr(psycopg2, "connect", lambda **_: raw)
        return raw

    return _install


@pytest.fixture()
def driver_config():
    return {"user": "root", "dbname": "sqlboiler", "host": "localhost"}

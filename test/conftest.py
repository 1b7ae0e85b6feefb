"""Shared fixtures: a scripted stand-in for CockroachConnection."""

import logging

import pytest
from psycopg2 import sql

logger = logging.getLogger(__name__)


def query_text(query) -> str:
    """Render str or psycopg2.sql compositions built from SQL and Placeholder."""
    if isinstance(query, sql.Composable):
        return query.as_string(None)
    return query


class FakeConnection:
    """Answers read/read_one calls from a FIFO of scripted responses.

    A response is a list of row dicts (read), a dict or None (read_one), or an
    exception instance, which is raised instead of returning.
    """

    def __init__(self, *responses):
        self.responses = list(responses)
        self.queries: list[tuple[str, dict | None]] = []

    def queue(self, *responses):
        self.responses.extend(responses)
        return self

    def _answer(self, query, params):
        text = query_text(query)
        self.queries.append((text, params))
        if not self.responses:
            raise AssertionError(f"unexpected query: {text}")
        response = self.responses.pop(0)
        if isinstance(response, BaseException):
            raise response
        return response

    def read(self, query, params=None):
        return self._answer(query, params)

    def read_one(self, query, params=None):
        return self._answer(query, params)


@pytest.fixture(scope="function")
def fake_conn():
    return FakeConnection()


@pytest.fixture(scope="function")
def workday_enum_row():
    """SHOW ENUMS row as returned by releases with the owner column."""
    return {
        "schema": "public",
        "name": "workday",
        "values": "{monday,tuesday,wednesday,thursday,friday}",
        "owner": "root",
    }

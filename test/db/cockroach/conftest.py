"""Fixtures for tests against a live CockroachDB loaded with the fixture schema.

Connection settings come from CRDB_* environment variables; the tests are
skipped when they are missing or the server cannot be reached.
"""

import logging
from pathlib import Path

import pytest
from pydantic import ValidationError

from roachschema.db.cockroach import CockroachConnection
from roachschema.db.conn import ConnectionFailure
from roachschema.db.connection import CockroachConfig

logger = logging.getLogger(__name__)

FIXTURE_SQL = (
    Path(__file__).parent.parent.parent.parent
    / "docker"
    / "cockroach"
    / "testdatabase.sql"
)


def split_statements(sql_content: str) -> list[str]:
    """Split a SQL script into statements, dropping comment lines."""
    statements = []
    current = []
    for line in sql_content.split("\n"):
        line = line.strip()
        if not line or line.startswith("--"):
            continue
        current.append(line)
        if line.endswith(";"):
            statement = " ".join(current).rstrip(";").strip()
            if statement:
                statements.append(statement)
            current = []
    if current:
        statements.append(" ".join(current).strip())
    return statements


@pytest.fixture(scope="session")
def crdb_config():
    try:
        return CockroachConfig.from_env()
    except ValidationError:
        pytest.skip("CRDB_* settings not provided")


@pytest.fixture(scope="session")
def fixture_database(crdb_config):
    """Load testdatabase.sql once per session and return the config."""
    try:
        conn = CockroachConnection(crdb_config)
    except ConnectionFailure as e:
        pytest.skip(f"CockroachDB not reachable: {e}")

    with conn:
        for statement in split_statements(FIXTURE_SQL.read_text()):
            with conn.conn.cursor() as cursor:
                cursor.execute(statement)
    logger.info("Fixture schema loaded")
    return crdb_config


@pytest.fixture()
def crdb_conn(fixture_database):
    with CockroachConnection(fixture_database) as conn:
        yield conn

"""CockroachDB connection handle for schema introspection.

CockroachDB speaks the PostgreSQL wire protocol, so the handle is a thin
wrapper around a psycopg2 connection. It is caller-owned and threaded through
every introspection function; the engine holds no global connection state.

Key Features:
    - Connection management using psycopg2
    - Scoped cursors: every result set is drained before a call returns
    - Autocommit, so a failed catalog probe does not abort the session

Example:
    >>> from roachschema.db.cockroach import CockroachConnection
    >>> from roachschema.db.connection import CockroachConfig
    >>> config = CockroachConfig.from_env()
    >>> with CockroachConnection(config) as conn:
    ...     rows = conn.read("SELECT table_name FROM information_schema.tables")
"""

import logging
from typing import Any, Mapping, Sequence

import psycopg2
from psycopg2 import sql
from psycopg2.extras import RealDictCursor

from roachschema.db.conn import ConnectionCloseError, ConnectionFailure
from roachschema.db.connection.onto import CockroachConfig

logger = logging.getLogger(__name__)

Query = str | sql.Composable
Params = Sequence[Any] | Mapping[str, Any] | None


class CockroachConnection:
    """CockroachDB connection for schema introspection.

    Attributes:
        config: Connection configuration
        conn: psycopg2 connection instance
    """

    def __init__(self, config: CockroachConfig):
        """Open the connection.

        Args:
            config: CockroachDB connection configuration

        Raises:
            ConnectionFailure: If the server cannot be reached or rejects the login
        """
        self.config = config
        self.conn = None
        conn_params = config.connection_params()

        try:
            self.conn = psycopg2.connect(**conn_params)
            self.conn.autocommit = True
        except psycopg2.Error as e:
            logger.error(f"Failed to connect to CockroachDB: {e}", exc_info=True)
            raise ConnectionFailure(
                f"failed to connect to database '{config.database}' "
                f"at {config.hostname}:{config.port}: {e}"
            ) from e
        logger.info(
            f"Successfully connected to CockroachDB database '{config.database}'"
        )

    def read(self, query: Query, params: Params = None) -> list[dict[str, Any]]:
        """Execute a query and return all rows as dictionaries.

        Column order of each dictionary follows the result set, so callers can
        inspect ``len(row)`` to tell apart result shapes.

        Args:
            query: SQL text or a psycopg2 ``sql`` composition
            params: Positional or named parameters

        Returns:
            List of dictionaries, one per row
        """
        with self.conn.cursor(cursor_factory=RealDictCursor) as cursor:
            cursor.execute(query, params)
            return [dict(row) for row in cursor.fetchall()]

    def read_one(self, query: Query, params: Params = None) -> dict[str, Any] | None:
        """Execute a query and return its first row, or None if it returned none."""
        with self.conn.cursor(cursor_factory=RealDictCursor) as cursor:
            cursor.execute(query, params)
            row = cursor.fetchone()
            return dict(row) if row is not None else None

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_value, exc_traceback):
        """Close the connection on leaving the ``with`` block.

        A close failure after a successful block raises ConnectionCloseError.
        After a failed block it is logged, so it never masks the earlier error.
        """
        if exc_type is None:
            self.close()
            return False
        try:
            self.close()
        except ConnectionCloseError as e:
            logger.warning(f"Error closing CockroachDB connection: {e}")
        return False

    def close(self):
        """Close the connection.

        Raises:
            ConnectionCloseError: If the driver fails to close the connection
        """
        if self.conn is None:
            return
        try:
            self.conn.close()
        except psycopg2.Error as e:
            raise ConnectionCloseError(
                f"failed to close connection to database '{self.config.database}': {e}"
            ) from e
        finally:
            self.conn = None
        logger.debug("CockroachDB connection closed")

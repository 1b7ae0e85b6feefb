"""Assembly of a complete schema snapshot in one introspection pass.

Example:
    >>> from roachschema.db.connection import CockroachConfig
    >>> from roachschema.hq import assemble
    >>> info = assemble(CockroachConfig.from_env())
    >>> [t.name for t in info.tables]
"""

from __future__ import annotations

import logging

from roachschema.architecture.onto_sql import DBInfo, Dialect, Relation
from roachschema.db.cockroach.conn import CockroachConnection
from roachschema.db.cockroach.relationships import link_relations
from roachschema.db.cockroach.types import CockroachTypeMapper
from roachschema.db.connection.onto import CockroachConfig
from roachschema.hq.driver import CockroachDriver
from roachschema.onto import RelationKind

logger = logging.getLogger(__name__)


def build_tables(driver: CockroachDriver, config: CockroachConfig) -> list[Relation]:
    """Introspect every table of the configured schema."""
    schema = config.schema_name
    tables = []
    for name in driver.table_names(schema, config.whitelist, config.blacklist):
        logger.debug(f"Introspecting table '{schema}.{name}'")
        tables.append(
            Relation(
                name=name,
                schema_name=schema,
                kind=RelationKind.TABLE,
                columns=driver.columns(schema, name, config.whitelist, config.blacklist),
                primary_key=driver.primary_key_info(schema, name),
                foreign_keys=driver.foreign_key_info(schema, name),
            )
        )
    return tables


def build_views(driver: CockroachDriver, config: CockroachConfig) -> list[Relation]:
    """Introspect every view of the configured schema."""
    schema = config.schema_name
    views = []
    for name in driver.view_names(schema, config.whitelist, config.blacklist):
        logger.debug(f"Introspecting view '{schema}.{name}'")
        views.append(
            Relation(
                name=name,
                schema_name=schema,
                kind=RelationKind.VIEW,
                columns=driver.view_columns(
                    schema, name, config.whitelist, config.blacklist
                ),
                view_capabilities=driver.view_capabilities(schema, name),
            )
        )
    return views


def assemble(config: CockroachConfig) -> DBInfo:
    """Connect, introspect the configured schema and return its snapshot.

    The connection is closed on every path. A failure to close it after a
    successful pass raises ConnectionCloseError; after a failed pass the
    earlier error propagates and the close failure is only logged.

    Args:
        config: Connection and filter settings

    Returns:
        DBInfo with tables first, then views, and the dialect hints
    """
    type_mapper = CockroachTypeMapper(
        add_enum_types=config.add_enum_types,
        enum_null_prefix=config.enum_null_prefix,
    )
    with CockroachConnection(config) as conn:
        driver = CockroachDriver(conn, type_mapper, config.schema_name)
        driver.enums()
        tables = build_tables(driver, config)
        views = build_views(driver, config)

    link_relations(tables)
    logger.info(
        f"Introspected schema '{config.schema_name}': "
        f"{len(tables)} tables, {len(views)} views"
    )
    return DBInfo(
        schema_name=config.schema_name,
        dialect=Dialect(use_schema=config.use_schema),
        tables=tables + views,
    )

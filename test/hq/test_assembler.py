"""Tests for snapshot assembly over a patched psycopg2 connection."""

import psycopg2
import pytest

from roachschema.db.conn import ConnectionCloseError
from roachschema.db.connection.onto import CockroachConfig
from roachschema.hq.assembler import assemble
from roachschema.onto import TypeKind


@pytest.fixture()
def config(driver_config):
    return CockroachConfig.from_driver_config(driver_config)


def test_assemble_builds_tables_then_views(catalog, config):
    raw = catalog()
    info = assemble(config)

    assert [t.name for t in info.tables] == ["users", "sponsors", "videos", "user_videos"]
    assert [t.is_view for t in info.tables] == [False, False, False, True]
    assert info.schema_name == "public"
    assert not info.dialect.use_schema
    assert raw.closed


def test_enum_catalog_loaded_once(catalog, config):
    raw = catalog()
    info = assemble(config)

    assert sum(1 for text, _ in raw.queries if text == "SHOW ENUMS") == 1
    day = info.get_relation("videos").get_column("day")
    assert day.type.kind == TypeKind.ENUM
    assert day.db_type == "enum.workday('monday','friday')"


def test_keys_and_relationships(catalog, config):
    catalog()
    info = assemble(config)

    videos = info.get_relation("videos")
    assert videos.primary_key.columns == ["id"]
    assert [fk.name for fk in videos.foreign_keys] == [
        "videos_user_id_fkey",
        "videos_sponsor_id_fkey",
    ]

    sponsors = info.get_relation("sponsors")
    assert [r.foreign_table for r in sponsors.to_one_relationships] == ["videos"]
    users = info.get_relation("users")
    assert [r.foreign_table for r in users.to_many_relationships] == ["videos"]


def test_view_capabilities(catalog, config):
    catalog()
    view = assemble(config).get_relation("user_videos")

    assert view.view_capabilities.can_insert is False
    assert view.view_capabilities.can_upsert is False
    assert view.primary_key is None


def test_native_enum_names(catalog, driver_config):
    catalog()
    config = CockroachConfig.from_driver_config(
        {**driver_config, "add-enum-types": True}
    )
    day = assemble(config).get_relation("videos").get_column("day")
    assert day.type.native_name == "NullWorkday"


def test_dialect_uses_schema_outside_public(catalog, driver_config):
    raw = catalog()
    config = CockroachConfig.from_driver_config({**driver_config, "schema": "app"})

    info = assemble(config)

    assert info.dialect.use_schema
    assert all(params.get("schema") == "app" for _, params in raw.queries if params)


def test_failure_closes_connection(catalog, config):
    raw = catalog(fail_on="pgcon.contype")
    with pytest.raises(psycopg2.OperationalError):
        assemble(config)
    assert raw.closed


def test_close_failure_replaces_success(catalog, config):
    catalog(close_error=psycopg2.InterfaceError("already closed"))
    with pytest.raises(ConnectionCloseError):
        assemble(config)


def test_close_failure_does_not_mask_earlier_failure(catalog, config):
    catalog(
        fail_on="pgcon.contype",
        close_error=psycopg2.InterfaceError("already closed"),
    )
    with pytest.raises(psycopg2.OperationalError):
        assemble(config)

"""Tests for enum marker rendering and parsing."""

import pytest

from roachschema.architecture.onto_sql import Column
from roachschema.filter.enum import (
    filter_columns_by_enum,
    is_enum_marker,
    parse_enum_name,
    parse_enum_values,
    render_enum_marker,
)


def test_render_marker():
    assert (
        render_enum_marker("workday", ["monday", "tuesday"])
        == "enum.workday('monday','tuesday')"
    )


def test_render_marker_without_values():
    assert render_enum_marker("empty", []) == "enum.empty()"


def test_parse_marker():
    marker = "enum.workday('monday','tuesday')"
    assert parse_enum_name(marker) == "workday"
    assert parse_enum_values(marker) == ["monday", "tuesday"]


def test_parse_marker_without_values():
    assert parse_enum_name("enum.empty()") == "empty"
    assert parse_enum_values("enum.empty()") == []


def test_values_may_contain_commas_and_spaces():
    marker = render_enum_marker("mood", ["a, b", "c d"])
    assert parse_enum_values(marker) == ["a, b", "c d"]


def test_quotes_in_values_are_doubled():
    marker = render_enum_marker("mood", ["it's", "ok", "'"])
    assert marker == "enum.mood('it''s','ok','''')"
    assert is_enum_marker(marker)
    assert parse_enum_name(marker) == "mood"
    assert parse_enum_values(marker) == ["it's", "ok", "'"]


@pytest.mark.parametrize(
    "db_type",
    ["int8", "enum.workday", "public.workday", "enum.workday(monday)", "", None],
)
def test_not_a_marker(db_type):
    assert not is_enum_marker(db_type)


def test_parse_non_marker():
    assert parse_enum_name("int8") is None
    assert parse_enum_values("int8") is None


def test_filter_columns_by_enum():
    columns = [
        Column(name="id", db_type="int8"),
        Column(name="day", db_type="enum.workday('monday')"),
    ]
    assert [c.name for c in filter_columns_by_enum(columns)] == ["day"]

"""Tests for shared enumerations."""

import yaml

from roachschema.onto import RelationKind, TypeKind


def test_membership_on_raw_values():
    assert "array" in TypeKind
    assert "network_address" in TypeKind
    assert "matview" not in RelationKind
    assert TypeKind.ENUM in TypeKind


def test_str_is_value():
    assert str(TypeKind.INTEGER) == "integer"
    assert f"{RelationKind.VIEW}" == "view"


def test_yaml_dumps_plain_strings():
    assert yaml.dump({"kind": TypeKind.UUID}) == "kind: uuid\n"
    assert yaml.dump({"kind": RelationKind.TABLE}) == "kind: table\n"
    assert yaml.safe_dump({"kind": RelationKind.VIEW}) == "kind: view\n"

"""Core enumerations shared across the introspection engine.

Key Components:
    - BaseEnum: Base class for string-based enumerations with flexible membership testing
    - TypeKind: Canonical classification of a column type
    - RelationKind: Table or view

Example:
    >>> "array" in TypeKind  # True
    >>> "matview" in RelationKind  # False
"""

from enum import EnumMeta
from strenum import StrEnum


class MetaEnum(EnumMeta):
    """Metaclass allowing ``value in Enum`` membership tests on raw values."""

    def __contains__(self, member: object) -> bool:
        """Check if an item is a valid member of the enum.

        Args:
            member: Value to check for membership

        Returns:
            bool: True if the item is a valid enum member, False otherwise
        """
        if isinstance(member, self):
            return True
        try:
            self(member)
            return True
        except ValueError:
            return False


class BaseEnum(StrEnum, metaclass=MetaEnum):
    """Base class for string-based enumerations."""

    def __str__(self) -> str:
        return self.value

    def __repr__(self) -> str:
        return self.value


def _register_yaml_representer():
    """Serialize BaseEnum members as plain strings in YAML dumps."""
    import yaml

    def base_enum_representer(dumper, data):
        return dumper.represent_scalar("tag:yaml.org,2002:str", str(data.value))

    for dumper in (yaml.Dumper, yaml.SafeDumper):
        yaml.add_representer(BaseEnum, base_enum_representer, Dumper=dumper)
        yaml.add_multi_representer(BaseEnum, base_enum_representer, Dumper=dumper)


_register_yaml_representer()


class TypeKind(BaseEnum):
    """Canonical, generator-agnostic classification of a column type.

    Attributes:
        INTEGER: Signed integer, width 16, 32 or 64
        FLOAT: Floating point, width 32 or 64
        DECIMAL: Arbitrary precision fixed-point decimal
        BOOLEAN: Boolean
        TEXT: Character data (also the fallback for unknown types)
        BYTE: Single byte (the ``"char"`` type)
        BINARY: Byte string
        JSON: JSON document
        TIMESTAMP: Timestamp or time of day
        DATE: Calendar date
        INTERVAL: Time interval
        NETWORK_ADDRESS: Network address (inet)
        UUID: Unique identifier
        ENUM: User-declared enumerated type
        ARRAY: Array of another descriptor
    """

    INTEGER = "integer"
    FLOAT = "float"
    DECIMAL = "decimal"
    BOOLEAN = "boolean"
    TEXT = "text"
    BYTE = "byte"
    BINARY = "binary"
    JSON = "json"
    TIMESTAMP = "timestamp"
    DATE = "date"
    INTERVAL = "interval"
    NETWORK_ADDRESS = "network_address"
    UUID = "uuid"
    ENUM = "enum"
    ARRAY = "array"


class RelationKind(BaseEnum):
    """Kind of relation returned by the relation enumerator."""

    TABLE = "table"
    VIEW = "view"

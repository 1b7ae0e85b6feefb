"""Data model of an introspection pass."""

from .base import ConfigBaseModel
from .onto_sql import (
    Column,
    DBInfo,
    Dialect,
    EnumType,
    ForeignKey,
    PrimaryKey,
    Relation,
    ToManyRelationship,
    ToOneRelationship,
    TypeDescriptor,
    ViewCapabilities,
)

__all__ = [
    "Column",
    "ConfigBaseModel",
    "DBInfo",
    "Dialect",
    "EnumType",
    "ForeignKey",
    "PrimaryKey",
    "Relation",
    "ToManyRelationship",
    "ToOneRelationship",
    "TypeDescriptor",
    "ViewCapabilities",
]

"""Value objects produced by a CockroachDB introspection pass.

Every model here is constructed fresh per introspection call and owned by the
caller that requested it. Nothing is persisted across calls.

Key Components:
    - EnumType: Declared enumerated type and its textual marker
    - TypeDescriptor: Canonical, generator-agnostic column type
    - Column, PrimaryKey, ForeignKey, ViewCapabilities: Relation metadata
    - Relation: A table or view with its columns, keys and relationships
    - DBInfo: Snapshot of one schema handed to the code generator
"""

from __future__ import annotations

from pydantic import Field

from roachschema.architecture.base import ConfigBaseModel
from roachschema.filter.enum import (
    parse_enum_name,
    parse_enum_values,
    render_enum_marker,
)
from roachschema.onto import RelationKind, TypeKind


class EnumType(ConfigBaseModel):
    """Enumerated type declared in a schema.

    Attributes:
        name: Enum type name (unqualified)
        values: Declared values in declaration order; empty if declared without values
    """

    name: str
    values: list[str] = Field(default_factory=list)

    @property
    def marker(self) -> str:
        """Canonical marker string, e.g. ``enum.workday('monday','tuesday')``."""
        return render_enum_marker(self.name, self.values)

    @classmethod
    def from_marker(cls, marker: str) -> EnumType | None:
        """Rebuild an EnumType from its marker; None if ``marker`` is not one."""
        name = parse_enum_name(marker)
        if name is None:
            return None
        return cls(name=name, values=parse_enum_values(marker) or [])

    def __str__(self) -> str:
        return self.marker


class TypeDescriptor(ConfigBaseModel):
    """Canonical classification of a column type.

    Attributes:
        kind: Type classification
        nullable: Whether the nullable-wrapped variant of the type applies
        width: Bit width for INTEGER and FLOAT kinds
        db_type: Base catalog type the descriptor was derived from
        enum: Enum payload for ENUM kind
        element: Element descriptor for ARRAY kind
        native_name: Generated enum type name when enums are emitted as native types
        fallback: True when an unrecognized type was degraded to TEXT
    """

    kind: TypeKind
    nullable: bool = False
    width: int | None = None
    db_type: str = ""
    enum: EnumType | None = None
    element: TypeDescriptor | None = None
    native_name: str | None = None
    fallback: bool = False

    @property
    def is_array(self) -> bool:
        return self.kind == TypeKind.ARRAY

    @property
    def is_enum(self) -> bool:
        return self.kind == TypeKind.ENUM

    @property
    def signature(self) -> str:
        """Compact notation such as ``integer64``, ``array<text>`` or ``enum<workday>``."""
        if self.kind == TypeKind.ARRAY and self.element is not None:
            base = f"array<{self.element.signature}>"
        elif self.kind == TypeKind.ENUM and self.enum is not None:
            base = f"enum<{self.enum.name}>"
        elif self.width is not None:
            base = f"{self.kind}{self.width}"
        else:
            base = str(self.kind)
        return f"nullable<{base}>" if self.nullable else base

    def __str__(self) -> str:
        return self.signature


class Column(ConfigBaseModel):
    """Column of a table or view.

    ``db_type`` is the normalized catalog type: lowercase with any parenthesized
    qualifier stripped, the literal ``array`` for array columns (element type in
    ``arr_type``) or the enum marker for enum columns. ``raw_type`` keeps the
    string the catalog returned.
    """

    name: str
    ordinal_position: int | None = None
    raw_type: str = ""
    db_type: str
    type: TypeDescriptor | None = None
    nullable: bool = False
    unique: bool = False
    default: str | None = None
    arr_type: str | None = None

    @property
    def is_array(self) -> bool:
        return self.db_type == "array"

    @property
    def enum(self) -> EnumType | None:
        """Enum identity recovered from the marker in ``db_type``."""
        return EnumType.from_marker(self.db_type)


class PrimaryKey(ConfigBaseModel):
    """Primary key constraint and its member columns in key order."""

    name: str
    columns: list[str] = Field(default_factory=list)


class ForeignKey(ConfigBaseModel):
    """Single-column foreign key owned by ``table``.

    The nullability and uniqueness flags are filled in once every relation of
    the schema has been introspected.
    """

    name: str
    table: str
    column: str
    foreign_table: str
    foreign_column: str
    nullable: bool = False
    unique: bool = False
    foreign_column_nullable: bool = False
    foreign_column_unique: bool = False


class ViewCapabilities(ConfigBaseModel):
    """What a view allows, derived from information_schema.views flags."""

    can_insert: bool = False
    can_upsert: bool = False

    @classmethod
    def from_flags(
        cls,
        insertable: bool,
        updatable: bool,
        trigger_insertable: bool,
        trigger_updatable: bool = False,
        trigger_deletable: bool = False,
    ) -> ViewCapabilities:
        """Build capabilities from the five view flags.

        Trigger updatability and deletability are reported by the catalog but
        do not contribute to either capability.
        """
        return cls(
            can_insert=insertable or trigger_insertable,
            can_upsert=insertable and updatable,
        )


class ToOneRelationship(ConfigBaseModel):
    """Another table holds a unique foreign key pointing at this table."""

    name: str
    table: str
    column: str
    foreign_table: str
    foreign_column: str
    nullable: bool = False


class ToManyRelationship(ConfigBaseModel):
    """Another table references this one many times, directly or through a join table."""

    name: str
    table: str
    column: str
    foreign_table: str
    foreign_column: str
    nullable: bool = False
    to_join_table: bool = False
    join_table: str | None = None
    join_local_fkey_name: str | None = None
    join_local_column: str | None = None
    join_foreign_fkey_name: str | None = None
    join_foreign_column: str | None = None


class Relation(ConfigBaseModel):
    """A table or view within a schema."""

    name: str
    schema_name: str
    kind: RelationKind = RelationKind.TABLE
    columns: list[Column] = Field(default_factory=list)
    primary_key: PrimaryKey | None = None
    foreign_keys: list[ForeignKey] = Field(default_factory=list)
    is_join_table: bool = False
    view_capabilities: ViewCapabilities | None = None
    to_one_relationships: list[ToOneRelationship] = Field(default_factory=list)
    to_many_relationships: list[ToManyRelationship] = Field(default_factory=list)

    @property
    def is_view(self) -> bool:
        return self.kind == RelationKind.VIEW

    def get_column(self, name: str) -> Column | None:
        for column in self.columns:
            if column.name == name:
                return column
        return None


class Dialect(ConfigBaseModel):
    """SQL dialect hints for the code generator."""

    lq: str = '"'
    rq: str = '"'
    use_index_placeholders: bool = True
    use_schema: bool = False
    use_default_keyword: bool = True


class DBInfo(ConfigBaseModel):
    """Schema snapshot assembled by one introspection pass."""

    schema_name: str
    dialect: Dialect = Field(default_factory=Dialect)
    tables: list[Relation] = Field(default_factory=list)

    def get_relation(self, name: str) -> Relation | None:
        for relation in self.tables:
            if relation.name == name:
                return relation
        return None


TypeDescriptor.model_rebuild()

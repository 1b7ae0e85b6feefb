"""Snapshot post-processing: join tables, foreign key flags and relationships.

Runs after every table of a pass has been introspected, because each step
looks across relations. Views carry no keys and are left untouched.

Order matters: join-table flags feed both relationship builders, and the
foreign key nullability/uniqueness flags decide between to-one and to-many.
"""

from __future__ import annotations

import logging
from typing import Sequence

from roachschema.architecture.onto_sql import (
    ForeignKey,
    Relation,
    ToManyRelationship,
    ToOneRelationship,
)

logger = logging.getLogger(__name__)


def _find_relation(relations: Sequence[Relation], name: str) -> Relation | None:
    for relation in relations:
        if relation.name == name:
            return relation
    return None


def is_join_table(relation: Relation) -> bool:
    """Whether a table only links two other tables.

    A join table has a two-column primary key, every key column covered by a
    foreign key, at least two foreign keys and no columns besides the key.
    """
    if relation.primary_key is None or len(relation.primary_key.columns) != 2:
        return False
    if len(relation.foreign_keys) < 2 or len(relation.columns) > 2:
        return False
    fk_columns = {fk.column for fk in relation.foreign_keys}
    return all(column in fk_columns for column in relation.primary_key.columns)


def set_is_join_table(relation: Relation) -> None:
    relation.is_join_table = is_join_table(relation)


def set_foreign_key_constraints(
    relation: Relation, relations: Sequence[Relation]
) -> None:
    """Copy nullability and uniqueness of both ends onto each foreign key.

    Foreign keys pointing at a relation or column outside the snapshot (for
    example one excluded by a whitelist) keep their flags unset.
    """
    for fkey in relation.foreign_keys:
        local_column = relation.get_column(fkey.column)
        foreign_relation = _find_relation(relations, fkey.foreign_table)
        foreign_column = (
            foreign_relation.get_column(fkey.foreign_column)
            if foreign_relation is not None
            else None
        )
        if local_column is None or foreign_column is None:
            logger.debug(
                f"Foreign key '{fkey.name}' of '{relation.name}' references "
                f"'{fkey.foreign_table}.{fkey.foreign_column}' outside the snapshot"
            )
            continue
        fkey.nullable = local_column.nullable
        fkey.unique = local_column.unique
        fkey.foreign_column_nullable = foreign_column.nullable
        fkey.foreign_column_unique = foreign_column.unique


def to_one_relationships(
    relation: Relation, relations: Sequence[Relation]
) -> list[ToOneRelationship]:
    """Relationships where another table holds a unique key pointing at ``relation``.

    ``nullable`` tells whether the referencing column accepts NULL, i.e.
    whether the related row is optional.
    """
    relationships = []
    for other in relations:
        if other.is_join_table:
            continue
        for fkey in other.foreign_keys:
            if fkey.foreign_table != relation.name or not fkey.unique:
                continue
            relationships.append(
                ToOneRelationship(
                    name=fkey.name,
                    table=relation.name,
                    column=fkey.foreign_column,
                    foreign_table=other.name,
                    foreign_column=fkey.column,
                    nullable=fkey.nullable,
                )
            )
    return relationships


def _to_many_through_join_table(
    relation: Relation, fkey: ForeignKey, join_table: Relation
) -> ToManyRelationship:
    # the join table's other foreign key leads to the far side
    far = next((fk for fk in join_table.foreign_keys if fk.name != fkey.name), None)
    return ToManyRelationship(
        name=fkey.name,
        table=relation.name,
        column=fkey.foreign_column,
        foreign_table=far.foreign_table if far else "",
        foreign_column=far.foreign_column if far else "",
        nullable=fkey.nullable,
        to_join_table=True,
        join_table=join_table.name,
        join_local_fkey_name=fkey.name,
        join_local_column=fkey.column,
        join_foreign_fkey_name=far.name if far else None,
        join_foreign_column=far.column if far else None,
    )


def to_many_relationships(
    relation: Relation, relations: Sequence[Relation]
) -> list[ToManyRelationship]:
    """Relationships where many rows of another table refer to ``relation``.

    Covers plain one-to-many (a non-unique foreign key on the other table)
    and many-to-many through a join table.
    """
    relationships = []
    for other in relations:
        for fkey in other.foreign_keys:
            if fkey.foreign_table != relation.name:
                continue
            if other.is_join_table:
                relationships.append(_to_many_through_join_table(relation, fkey, other))
            elif not fkey.unique:
                relationships.append(
                    ToManyRelationship(
                        name=fkey.name,
                        table=relation.name,
                        column=fkey.foreign_column,
                        foreign_table=other.name,
                        foreign_column=fkey.column,
                        nullable=fkey.nullable,
                    )
                )
    return relationships


def set_relationships(relation: Relation, relations: Sequence[Relation]) -> None:
    relation.to_one_relationships = to_one_relationships(relation, relations)
    relation.to_many_relationships = to_many_relationships(relation, relations)


def link_relations(relations: Sequence[Relation]) -> None:
    """Run every post-processing step over the tables of a snapshot, in place."""
    tables = [r for r in relations if not r.is_view]
    for table in tables:
        set_is_join_table(table)
    for table in tables:
        set_foreign_key_constraints(table, tables)
    for table in tables:
        set_relationships(table, tables)
    joins = sum(1 for t in tables if t.is_join_table)
    logger.debug(f"Linked {len(tables)} tables, {joins} join tables")

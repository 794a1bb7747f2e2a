"""
Catalog models: Sources, their relationships and raw column facts
"""

from dataclasses import dataclass, field
from typing import List, Dict, Any, Optional, Tuple, Union


@dataclass(frozen=True)
class Relationship:
    """A foreign key edge between two Sources"""
    relation_name: str
    local_property: str
    foreign_property: str

    @classmethod
    def from_row(cls, row: Dict[str, Any]) -> 'Relationship':
        """Build from a catalog row shaped {name, from, to}"""
        return cls(
            relation_name=row['name'],
            local_property=row['from'],
            foreign_property=row['to']
        )


@dataclass(frozen=True)
class Column:
    """Raw catalog facts about a single column"""
    name: str
    type: str
    nullable: bool
    default: Optional[Union[str, int, float]] = None
    is_primary_key: bool = False
    constraints: Tuple[Optional[str], ...] = ()

    @classmethod
    def from_row(cls, row: Dict[str, Any]) -> 'Column':
        """Build from a catalog row as returned by the entity lookup query"""
        return cls(
            name=row['name'],
            type=row['type'],
            nullable=bool(row['nullable']),
            default=row.get('default'),
            is_primary_key=bool(row.get('isPrimaryKey', False)),
            constraints=tuple(row.get('constraints') or ())
        )


@dataclass(frozen=True)
class Source:
    """A table or view exposed for CRUD operations"""
    name: str
    identifying_properties: Tuple[str, ...] = ()
    has: Tuple[Relationship, ...] = ()
    belongs_to: Tuple[Relationship, ...] = ()
    schema: Optional[Dict[str, Any]] = field(default=None, compare=False, hash=False)
    actions: Tuple[str, ...] = ()

    def to_dict(self) -> Dict[str, Any]:
        """Plain representation used for printing the catalog"""
        return {
            'name': self.name,
            'identifyingProperties': list(self.identifying_properties),
            'has': [_relationship_dict(rel) for rel in self.has],
            'belongsTo': [_relationship_dict(rel) for rel in self.belongs_to],
            'actions': list(self.actions),
            'schema': self.schema
        }


def _relationship_dict(rel: Relationship) -> Dict[str, str]:
    return {
        'relationName': rel.relation_name,
        'localProperty': rel.local_property,
        'foreignProperty': rel.foreign_property
    }


@dataclass
class Entity:
    """An enumerated table or view, before its columns have been fetched"""
    table_schema: str
    table_name: str
    primary_keys: List[str] = field(default_factory=list)
    is_view: bool = False

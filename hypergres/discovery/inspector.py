"""
Schema introspection: enumerates tables and views and turns them into Sources
"""

import logging
from concurrent.futures import ThreadPoolExecutor
from pathlib import Path
from types import MappingProxyType
from typing import List, Dict, Any, Optional, Sequence

from sqlalchemy import and_, false, or_, text
from sqlalchemy.dialects import postgresql

from ..errors import DiscoveryError
from ..models import Column, Entity, Relationship, Source
from .config import DiscoveryConfig
from .schema import schema
from .scope import matches, scope_clause


logger = logging.getLogger(__name__)

SQL_DIR = Path(__file__).parent / 'sql'

# Catalog queries keyed by file name, read once
QUERIES = MappingProxyType({path.stem: path.read_text() for path in sorted(SQL_DIR.glob('*.sql'))})

TABLES = 'tables'
VIEWS = 'views'


def conditions(kind: str, configs: Sequence[DiscoveryConfig]) -> str:
    """
    WHERE condition selecting the entities of `kind` ('tables' or 'views')
    that any of the configs include.

    Each config contributes `<schema scope> AND <entity scope>`; configs are
    combined with OR. Without configs nothing is selected.
    """
    clauses = []
    for config in configs:
        entity_scope = config.tables if kind == TABLES else config.views
        clauses.append(and_(
            scope_clause('table_schema', config.schemas),
            scope_clause('table_name', entity_scope)
        ))

    clause = or_(*clauses) if clauses else false()
    return str(clause.compile(dialect=postgresql.dialect(), compile_kwargs={'literal_binds': True}))


def _enumeration(kind: str, configs: Sequence[DiscoveryConfig]):
    # Colons in rendered literals would otherwise be taken for bind parameters
    where = conditions(kind, configs).replace(':', '\\:')
    return text(QUERIES[kind].replace('{conditions}', where))


def inspect(context, configs: Sequence[DiscoveryConfig], max_workers: Optional[int] = None) -> List[Source]:
    """
    Discover the Sources selected by `configs`.

    `context` is an open SQLAlchemy Connection. Entities are enumerated on it,
    then the details of every entity are fetched concurrently, each batch on
    its own connection from the context's engine. Any failure fails the whole
    pass.
    """
    configs = list(configs)

    # Scope errors are configuration errors and propagate as they are
    tables_query = _enumeration(TABLES, configs)
    views_query = _enumeration(VIEWS, configs)

    try:
        entities = [
            Entity(
                table_schema=row['table_schema'],
                table_name=row['table_name'],
                primary_keys=list(row['primary_keys'] or [])
            )
            for row in context.execute(tables_query).mappings().all()
        ]
        entities += [
            Entity(table_schema=row['table_schema'], table_name=row['table_name'], is_view=True)
            for row in context.execute(views_query).mappings().all()
        ]
    except Exception as e:
        raise DiscoveryError("Failed to enumerate tables and views", err=e)

    _check_unique_names(entities)

    logger.info(f"Discovered {len(entities)} entities, fetching details")

    with ThreadPoolExecutor(max_workers=max_workers) as executor:
        futures = [executor.submit(_fetch_details, context.engine, entity) for entity in entities]
        try:
            details = [future.result() for future in futures]
        except Exception as e:
            for future in futures:
                future.cancel()
            raise DiscoveryError("Failed to fetch entity details", err=e)

    sources = []
    for entity, row in zip(entities, details):
        config = _config_for(entity, configs)
        if config is None:
            raise DiscoveryError(f"'{entity.table_schema}.{entity.table_name}' matched no discovery configuration")
        sources.append(_source(entity, row, config))

    logger.info(f"Built {len(sources)} sources")
    return sources


def _check_unique_names(entities: Sequence[Entity]):
    """Source names are unqualified, so two entities may not share a name"""
    by_name: Dict[str, List[str]] = {}
    for entity in entities:
        by_name.setdefault(entity.table_name, []).append(f"{entity.table_schema}.{entity.table_name}")

    clashes = [names for names in by_name.values() if len(names) > 1]
    if clashes:
        described = "; ".join(", ".join(names) for names in clashes)
        raise DiscoveryError(f"Discovered entities share a source name: {described}")


def _fetch_details(engine, entity: Entity) -> Dict[str, Any]:
    """Columns and relationships of one entity, in a single round trip"""
    logger.debug(f"Fetching details of {entity.table_schema}.{entity.table_name}")

    with engine.connect() as connection:
        row = connection.execute(
            text(QUERIES['entity']),
            {'schema': entity.table_schema, 'name': entity.table_name}
        ).mappings().one()

    return dict(row)


def _config_for(entity: Entity, configs: Sequence[DiscoveryConfig]) -> Optional[DiscoveryConfig]:
    """The first config whose scopes include the entity"""
    for config in configs:
        entity_scope = config.views if entity.is_view else config.tables
        if matches(config.schemas, entity.table_schema) and matches(entity_scope, entity.table_name):
            return config
    return None


def _source(entity: Entity, row: Dict[str, Any], config: DiscoveryConfig) -> Source:
    columns = [Column.from_row(column) for column in row.get('columns') or []]

    if entity.is_view:
        # Views have no keys and no foreign key constraints
        return Source(
            name=entity.table_name,
            schema=schema(entity.table_name, columns, config.options),
            actions=tuple(config.actions)
        )

    return Source(
        name=entity.table_name,
        identifying_properties=tuple(entity.primary_keys),
        has=tuple(Relationship.from_row(rel) for rel in row.get('has') or []),
        belongs_to=tuple(Relationship.from_row(rel) for rel in row.get('belongs_to') or []),
        schema=schema(entity.table_name, columns, config.options),
        actions=tuple(config.actions)
    )

"""
Discovery configuration
"""

from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Optional, Tuple

from ..errors import ConfigError
from .scope import Scope, parse_scope


DEFAULT_ACTIONS = ('CreateOne', 'ReadOne', 'ReadMany', 'UpdateOne', 'DeleteOne')


@dataclass(frozen=True)
class DiscoveryOptions:
    """Options applied when building Sources from discovered entities"""
    strict_numbers: bool = False


@dataclass(frozen=True)
class DiscoveryConfig:
    """Which schemas, tables and views to discover, and the actions to expose on them"""
    schemas: Optional[Scope]
    tables: Optional[Scope] = None
    views: Optional[Scope] = None
    actions: Tuple[str, ...] = DEFAULT_ACTIONS
    options: DiscoveryOptions = field(default_factory=DiscoveryOptions)

    @classmethod
    def from_dict(cls, data: Mapping) -> 'DiscoveryConfig':
        if not isinstance(data, Mapping):
            raise ConfigError(f"Discovery configuration must be a mapping, got {data!r}")
        if 'schemas' not in data:
            raise ConfigError("Discovery configuration is missing 'schemas'")

        options = data.get('options') or {}
        return cls(
            schemas=parse_scope(data['schemas']),
            tables=parse_scope(data.get('tables')),
            views=parse_scope(data.get('views')),
            actions=tuple(data.get('actions', DEFAULT_ACTIONS)),
            options=DiscoveryOptions(
                strict_numbers=bool(options.get('strictNumbers', options.get('strict_numbers', False)))
            )
        )

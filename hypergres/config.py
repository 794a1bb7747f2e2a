"""
Configuration for providers and discovery
"""

import os
from collections.abc import Mapping
from dataclasses import dataclass
from typing import List, Dict, Any, Optional, Tuple

from dotenv import load_dotenv
from sqlalchemy.engine import URL

from .discovery.config import DiscoveryConfig, DiscoveryOptions
from .discovery.scope import All, Only
from .errors import ConfigError, ErrorCode


@dataclass(frozen=True)
class ConnectionOptions:
    """Connection parameters for a PostgreSQL server"""
    host: str
    port: int = 5432
    user: Optional[str] = None
    password: Optional[str] = None
    database: Optional[str] = None

    def url(self) -> URL:
        return URL.create(
            'postgresql+psycopg2',
            username=self.user,
            password=self.password,
            host=self.host,
            port=self.port,
            database=self.database
        )


@dataclass(frozen=True)
class ProviderConfig:
    """Describes a single data provider"""
    id: str
    driver: str
    options: ConnectionOptions
    discovery: Tuple[DiscoveryConfig, ...] = ()

    @classmethod
    def from_dict(cls, data: Mapping) -> 'ProviderConfig':
        missing = [key for key in ('id', 'driver', 'options') if key not in data]
        if missing:
            raise ConfigError(f"Provider configuration is missing {missing}")

        options = data['options']
        if not isinstance(options, Mapping) or 'host' not in options:
            raise ConfigError(f"Provider '{data['id']}' options must include 'host'")

        try:
            port = int(options.get('port', 5432))
        except (TypeError, ValueError) as e:
            raise ConfigError(f"Provider '{data['id']}' has an invalid port", err=e)

        return cls(
            id=data['id'],
            driver=data['driver'],
            options=ConnectionOptions(
                host=options['host'],
                port=port,
                user=options.get('user'),
                password=options.get('password'),
                database=options.get('database')
            ),
            discovery=tuple(DiscoveryConfig.from_dict(item) for item in data.get('discovery', []))
        )


@dataclass(frozen=True)
class Config:
    """Top-level configuration"""
    providers: Tuple[ProviderConfig, ...]
    version: str = 'v1'

    @classmethod
    def from_dict(cls, data: Mapping) -> 'Config':
        if not data or not data.get('version'):
            raise ConfigError("Configuration is missing 'version' property", code=ErrorCode.CONFIG_VERSION_MISSING)

        version = str(data['version']).lower()
        if version != 'v1':
            raise ConfigError(f"Unsupported configuration version '{version}'")

        providers = data.get('providers')
        if not providers:
            raise ConfigError("Configuration must define at least one provider")

        return cls(
            providers=tuple(ProviderConfig.from_dict(provider) for provider in providers),
            version=version
        )

    @classmethod
    def from_env(cls, schemas: Optional[List[str]] = None, strict_numbers: Optional[bool] = None) -> 'Config':
        """Build a single-provider configuration from environment variables (and a .env file)"""
        load_dotenv()

        if schemas is None:
            schemas = [name.strip() for name in os.getenv('HYPERGRES_SCHEMAS', 'public').split(',') if name.strip()]

        if strict_numbers is None:
            strict_numbers = os.getenv('HYPERGRES_STRICT_NUMBERS', '').lower() in ('1', 'true', 'yes')

        host = os.getenv('POSTGRES_HOST')
        if not host:
            raise ConfigError("POSTGRES_HOST environment variable not found. Please check your .env file.")

        try:
            port = int(os.getenv('POSTGRES_PORT', 5432))
        except ValueError as e:
            raise ConfigError("POSTGRES_PORT must be a number", err=e)

        provider = ProviderConfig(
            id='default',
            driver='postgresql',
            options=ConnectionOptions(
                host=host,
                port=port,
                user=os.getenv('POSTGRES_USER'),
                password=os.getenv('POSTGRES_PASSWORD'),
                database=os.getenv('POSTGRES_DB')
            ),
            discovery=(
                DiscoveryConfig(
                    schemas=Only(schemas),
                    tables=All(),
                    views=All(),
                    options=DiscoveryOptions(strict_numbers=strict_numbers)
                ),
            )
        )

        return cls(providers=(provider,))


def provider_log_props(config: ProviderConfig) -> Dict[str, Any]:
    """Properties of a provider configuration that help make sense of log entries"""
    return {'id': config.id, 'driver': config.driver}

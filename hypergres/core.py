"""
Core: owns the providers and the catalog of discovered Sources
"""

from typing import List, Dict, Optional, Tuple

from .config import Config, provider_log_props
from .database import Provider, ProviderFactory
from .errors import CoreError, ErrorCode
from .models import Source
from .utils import SchemaAnalyzer, setup_logger


class Core:
    """Creates providers from a configuration and keeps the discovered catalog"""

    def __init__(self, factory=ProviderFactory):
        self.factory = factory
        self.config: Optional[Config] = None
        self.providers: Dict[str, Provider] = {}
        self.sources: Tuple[Source, ...] = ()
        self.graph: Optional[SchemaAnalyzer] = None
        self.logger = setup_logger()

    def configure(self, config: Config) -> Tuple[Source, ...]:
        """Create the configured providers and discover their Sources"""
        self.config = config
        self.providers = self._create_providers(config)
        return self.discover()

    def _create_providers(self, config: Config) -> Dict[str, Provider]:
        providers = {}
        for provider_config in config.providers:
            self.logger.info(f"Creating provider {provider_log_props(provider_config)}")
            providers[provider_config.id] = self.factory.create_provider(provider_config)
        return providers

    def discover(self) -> Tuple[Source, ...]:
        """
        Run discovery for every provider.

        The catalog is replaced only once every provider has succeeded, so a
        failed pass leaves the previous catalog in place.
        """
        if self.config is None:
            raise CoreError("Core has not been configured", code=ErrorCode.CORE_NOT_CONFIGURED)

        if not self.providers:
            raise CoreError("Core has no providers", code=ErrorCode.CORE_NO_PROVIDERS)

        sources: List[Source] = []
        for provider_id, provider in self.providers.items():
            self.logger.info(f"Discovering sources of provider '{provider_id}'")
            found = provider.with_context(provider.discover)
            self.logger.info(f"Provider '{provider_id}' exposes {len(found)} sources")
            sources.extend(found)

        self.sources = tuple(sources)
        self.graph = SchemaAnalyzer(self.sources)
        return self.sources

    def source(self, name: str) -> Optional[Source]:
        """Look up a discovered Source by name"""
        for source in self.sources:
            if source.name == name:
                return source
        return None

    def provider(self, provider_id: str) -> Provider:
        """Look up a provider by id"""
        if provider_id not in self.providers:
            raise CoreError(f"Unknown provider '{provider_id}'", code=ErrorCode.CORE_NO_PROVIDERS)
        return self.providers[provider_id]

"""
Provider factory for creating providers from their configuration
"""

from typing import List

from ..config import ProviderConfig
from ..errors import ProviderNotFoundError
from .adapters import Provider, PostgreSQLProvider


class ProviderFactory:
    """Factory class to create the Provider for a driver"""

    @staticmethod
    def create_provider(config: ProviderConfig) -> Provider:
        """Create a provider based on its driver"""
        if config.driver.lower() in ProviderFactory.get_supported_types():
            return PostgreSQLProvider(config)
        raise ProviderNotFoundError(
            f"Driver '{config.driver}' not found for provider '{config.id}', "
            f"supported drivers are {ProviderFactory.get_supported_types()}"
        )

    @staticmethod
    def get_supported_types() -> List[str]:
        """Get list of supported driver names"""
        return ['postgresql', 'postgres']

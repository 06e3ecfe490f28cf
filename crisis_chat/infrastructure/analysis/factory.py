"""Factory for creating and managing analysis clients."""

import inspect
import logging
import os
from typing import Dict, Optional, Type

from pydantic import ValidationError

from ...domain.ports.analysis_provider import AnalysisProvider
from .resilient_client import AnalysisClientConfig, ResilientAnalysisClient

logger = logging.getLogger(__name__)

# Config field -> environment variable
ENV_SETTINGS = {
    "base_url": "ANALYSIS_API_BASE_URL",
    "timeout": "ANALYSIS_API_TIMEOUT",
    "max_attempts": "ANALYSIS_API_MAX_ATTEMPTS",
}


class AnalysisClientFactory:
    """Factory for creating and managing analysis clients."""

    def __init__(self):
        """Initialize the factory."""
        self._clients: Dict[str, Type[AnalysisProvider]] = {}
        self._instances: Dict[str, AnalysisProvider] = {}

        # Register default clients
        self.register_client("resilient", ResilientAnalysisClient)

    def register_client(self, name: str, client_class: Type[AnalysisProvider]) -> None:
        """Register a new analysis client type.

        Args:
            name: Client name
            client_class: Client class
        """
        self._clients[name] = client_class

    @staticmethod
    def config_from_env(**overrides) -> AnalysisClientConfig:
        """Build client configuration from environment variables.

        Explicit keyword overrides win over the environment. Environment
        values that fail validation are logged and replaced by defaults.
        """
        env_settings = {
            field: value
            for field, var in ENV_SETTINGS.items()
            if (value := os.getenv(var))
        }
        try:
            return AnalysisClientConfig(**{**env_settings, **overrides})
        except ValidationError as e:
            invalid = {error["loc"][0] for error in e.errors() if error["loc"]}
            bad_env = (invalid & env_settings.keys()) - overrides.keys()
            if not bad_env:
                raise
            for field in sorted(bad_env):
                logger.warning(
                    f"⚠️ Ignoring invalid {ENV_SETTINGS[field]}={env_settings.pop(field)!r}, using default"
                )
            return AnalysisClientConfig(**{**env_settings, **overrides})

    async def create_client(
        self,
        name: str,
        **kwargs
    ) -> AnalysisProvider:
        """Create and initialize a client instance.

        Clients whose constructor takes ``config`` get an
        :class:`AnalysisClientConfig` built from the environment; keyword
        arguments naming config fields override it, the rest go to the
        constructor.

        Args:
            name: Client name
            **kwargs: Client-specific configuration

        Returns:
            Initialized client instance

        Raises:
            ValueError: If client not found
        """
        if name not in self._clients:
            raise ValueError(f"Client '{name}' not found")

        if name not in self._instances:
            client_class = self._clients[name]
            if "config" in inspect.signature(client_class).parameters and "config" not in kwargs:
                overrides = {
                    key: kwargs.pop(key)
                    for key in list(kwargs)
                    if key in AnalysisClientConfig.model_fields
                }
                kwargs["config"] = self.config_from_env(**overrides)
            client = client_class(**kwargs)

            await client.initialize()
            self._instances[name] = client
            logger.info(f"🔨 Created analysis client '{name}'")

        return self._instances[name]

    def get_client(self, name: str) -> Optional[AnalysisProvider]:
        """Get an existing client instance.

        Args:
            name: Client name

        Returns:
            Client instance if exists, None otherwise
        """
        return self._instances.get(name)

    @property
    def available_clients(self) -> Dict[str, bool]:
        """Get dictionary of registered clients and whether they are created."""
        return {
            name: name in self._instances
            for name in self._clients
        }

    async def shutdown(self) -> None:
        """Shutdown all client instances."""
        for client in self._instances.values():
            await client.shutdown()
        self._instances.clear()

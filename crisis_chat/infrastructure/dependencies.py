"""Dependency injection configuration."""

import logging
from functools import lru_cache
from typing import Any, Dict, Optional

from dotenv import load_dotenv

from ..domain.services.chat_service import ChatService
from .analysis.factory import AnalysisClientFactory

# Load environment variables from .env file if it exists
load_dotenv()

logger = logging.getLogger(__name__)


class ServiceContainer:
    """Service container for dependency injection."""

    def __init__(self, client_name: str = "resilient"):
        """Initialize service container.

        Args:
            client_name: Registered analysis client to use
        """
        self._client_name = client_name
        self._factory = AnalysisClientFactory()
        self._services: Dict[str, Any] = {"chat_service": None}

    @property
    def factory(self) -> AnalysisClientFactory:
        return self._factory

    async def get_chat_service(self) -> ChatService:
        """Get the chat service, creating its analysis client on first use."""
        if self._services["chat_service"] is None:
            logger.info("🔧 Creating ChatService...")
            client = await self._factory.create_client(self._client_name)
            self._services["chat_service"] = ChatService(client)
            logger.info("✅ ChatService ready")
        return self._services["chat_service"]

    def get(self, service_name: str) -> Optional[Any]:
        """Get a service by name.

        Raises:
            KeyError: If service not found
        """
        if service_name not in self._services:
            raise KeyError(f"Service '{service_name}' not found")
        return self._services[service_name]

    async def shutdown(self) -> None:
        """Close every client the container created."""
        await self._factory.shutdown()
        self._services = {"chat_service": None}


@lru_cache()
def get_service_container() -> ServiceContainer:
    """Get global service container instance."""
    return ServiceContainer()

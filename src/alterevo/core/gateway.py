"""Generation gateway contract and registry.

A gateway wraps the two remote operations a creation needs:

- ``transform_image``: restyle the user's image according to a prompt
- ``generate_caption``: write a caption from a prompt

Both are coroutines so the workflow can issue them together and wait for
both.  Any failure, remote or local, must surface as :class:`GenerationError`
carrying a message that can be shown to the user as-is.

Gateway Pattern
---------------
Concrete gateways register themselves with ``gateway_registry`` under their
``name`` and are instantiated from configuration:

    >>> from alterevo.core.gateway import gateway_registry
    >>> from alterevo.core.config import config
    >>> gateway = gateway_registry.instantiate(config.gateway, config)

See Also
--------
- GeminiGateway: Google Gemini implementation
- WorkflowController: issues the concurrent calls
"""

import logging
from abc import ABC, abstractmethod
from typing import Any

from .config import AlterevoConfig
from .models import ImageArtifact, UserImage

logger = logging.getLogger(__name__)


class GenerationError(Exception):
    """A generation call failed.

    The message is intended to be displayed directly to the user.
    """

    pass


class GenerationGateway(ABC):
    """Abstract base class for generation gateways.

    Attributes
    ----------
    name : str
        Registry name of the gateway (e.g., "Gemini")
    description : str
        Brief description of the backing service
    config : AlterevoConfig
        Configuration object containing gateway settings

    Notes
    -----
    - Implementations own their timeouts; the workflow applies none
    - Implementations must not retry on behalf of the user
    """

    name: str = "Base Gateway"
    description: str = "Base class for generation gateways"

    def __init__(self, config: AlterevoConfig) -> None:
        """Initialize the gateway.

        Args:
            config: Configuration object containing gateway settings
        """
        self.config = config
        logger.info(f"Initialized {self.name} gateway")

    @abstractmethod
    async def transform_image(self, image: UserImage, prompt: str) -> ImageArtifact:
        """Restyle ``image`` as described by ``prompt``.

        Raises:
            GenerationError: If the remote call fails or returns no image
        """
        pass

    @abstractmethod
    async def generate_caption(self, prompt: str) -> str:
        """Write a caption for ``prompt``.

        Raises:
            GenerationError: If the remote call fails or returns no text
        """
        pass

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(name='{self.name}')"


class GatewayRegistry:
    """Registry for discovering and instantiating generation gateways."""

    def __init__(self) -> None:
        """Initialize the gateway registry."""
        self._gateways: dict[str, type[GenerationGateway]] = {}

    def register(self, gateway_class: type[GenerationGateway]) -> type[GenerationGateway]:
        """Register a gateway class.

        Usable as a class decorator.

        Args:
            gateway_class: Gateway class to register

        Returns:
            The registered class, unchanged
        """
        gateway_name = gateway_class.name

        if gateway_name in self._gateways:
            logger.warning(f"Gateway '{gateway_name}' is already registered, overwriting")

        self._gateways[gateway_name] = gateway_class
        logger.debug(f"Registered gateway: {gateway_name}")
        return gateway_class

    def instantiate(self, gateway_name: str, config: AlterevoConfig) -> GenerationGateway:
        """Create an instance of a registered gateway.

        Args:
            gateway_name: Registered name of the gateway
            config: Configuration handed to the gateway

        Raises:
            KeyError: If gateway_name is not registered
        """
        if gateway_name not in self._gateways:
            available = ", ".join(self.list_available())
            raise KeyError(f"Gateway '{gateway_name}' not found. Available gateways: {available}")

        instance = self._gateways[gateway_name](config=config)
        logger.info(f"Instantiated gateway: {gateway_name}")
        return instance

    def list_available(self) -> list[str]:
        """List all registered gateway names."""
        return list(self._gateways.keys())

    def get_gateway_info(self, gateway_name: str) -> dict[str, Any] | None:
        """Get name and description of a registered gateway, or None."""
        gateway_class = self._gateways.get(gateway_name)
        if gateway_class is None:
            return None
        return {"name": gateway_class.name, "description": gateway_class.description}


# Global gateway registry instance
gateway_registry = GatewayRegistry()

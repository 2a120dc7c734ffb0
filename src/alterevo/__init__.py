"""Alterevo - restyle a photo, caption it, and keep a history of creations."""

__version__ = "0.1.0"

from alterevo.core.config import AlterevoConfig, config
from alterevo.core.gateway import GenerationError, GenerationGateway, gateway_registry

# Import adapters to ensure they're registered
from alterevo.core.adapters import GeminiGateway  # noqa: F401

__all__ = [
    "AlterevoConfig",
    "config",
    "GenerationError",
    "GenerationGateway",
    "gateway_registry",
    "GeminiGateway",
]

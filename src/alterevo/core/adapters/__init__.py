"""Generation gateway implementations.

Importing this package registers every gateway with ``gateway_registry``.
"""

from .gemini import GeminiGateway

__all__ = ["GeminiGateway"]

"""Core building blocks for Alterevo.

- **config**: Environment-based configuration (Pydantic Settings, ALTEREVO_ prefix)
- **models**: Frozen domain models (UserImage, Style, HistoryItem)
- **storage**: Key-value string stores (file-backed and in-memory)
- **history**: Bounded, persisted creation history
- **gateway**: Generation gateway contract and ``gateway_registry``
- **adapters**: Gateway implementations (Gemini)
- **styles**: JSON style catalog
- **images**: Upload decoding and verification with Pillow
"""

from alterevo.core.config import AlterevoConfig, config
from alterevo.core.gateway import GenerationError, GenerationGateway, gateway_registry
from alterevo.core.history import HistoryStore
from alterevo.core.models import History, HistoryItem, ImageArtifact, Style, UserImage

__all__ = [
    "AlterevoConfig",
    "config",
    "GenerationError",
    "GenerationGateway",
    "gateway_registry",
    "HistoryStore",
    "History",
    "HistoryItem",
    "ImageArtifact",
    "Style",
    "UserImage",
]

"""Domain models shared by the history store, the gateway and the workflow.

All models are frozen Pydantic models.  They serialize with camelCase keys
(``userImage``, ``generatedCaption``, ``mimeType`` ...) so the persisted
history stays readable by other clients of the same storage key, while
Python code uses the snake_case attribute names.
"""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class _FrozenModel(BaseModel):
    model_config = ConfigDict(
        frozen=True,
        alias_generator=to_camel,
        populate_by_name=True,
    )


class ImageArtifact(_FrozenModel):
    """Base64-encoded image bytes with their MIME type.

    Attributes:
        base64: Base64 payload (no ``data:`` prefix).
        mime_type: MIME type of the encoded image, e.g. ``image/png``.
    """

    base64: str = Field(..., min_length=1)
    mime_type: str = Field(..., pattern=r"^image/[\w.+-]+$")

    def to_data_url(self) -> str:
        """Return the image as a ``data:`` URL for direct display."""
        return f"data:{self.mime_type};base64,{self.base64}"


class UserImage(ImageArtifact):
    """Image supplied by the user, optionally remembering its file name."""

    name: str | None = None


class Style(_FrozenModel):
    """A named transform: what to do to the image and how to caption it."""

    id: str = Field(..., min_length=1)
    name: str = Field(..., min_length=1)
    image_prompt: str = Field(..., min_length=1)
    caption_prompt: str = Field(..., min_length=1)
    description: str = ""


class HistoryItem(_FrozenModel):
    """A completed creation.

    Attributes:
        id: Identifier derived from ``timestamp``.
        user_image: The image the user submitted.
        generated_image: The restyled image returned by the gateway.
        generated_caption: The caption returned by the gateway.
        style: The style that was applied.
        timestamp: Creation time in milliseconds since the epoch.
    """

    id: str
    user_image: UserImage
    generated_image: ImageArtifact
    generated_caption: str
    style: Style
    timestamp: int


History = tuple[HistoryItem, ...]

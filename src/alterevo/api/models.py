"""Pydantic request and response models for the Alterevo API.

Models
------
ImageUpload
    A user image sent as base64 (or a ``data:`` URL) with an optional name.
TransformRequest
    Payload for ``POST /api/transform``.
ClearHistoryRequest
    Payload for ``POST /api/history/clear``; nothing is deleted unless
    ``confirmed`` is true.
StateResponse
    The screen to show plus everything needed to render it.
"""

from __future__ import annotations

from pydantic import BaseModel, Field

from alterevo.core.models import HistoryItem, ImageArtifact, Style, UserImage
from alterevo.workflow.models import Loading, Result, Screen, Selecting, WorkflowState


class ImageUpload(BaseModel):
    """A user image as uploaded by the frontend.

    Attributes:
        data: Base64 image bytes, optionally as a ``data:`` URL.
        name: Original file name.
    """

    data: str = Field(
        ...,
        min_length=1,
        description="Base64-encoded image bytes or a data: URL.",
    )
    name: str | None = Field(
        default=None,
        description="Original file name of the upload.",
    )


class TransformRequest(BaseModel):
    """Request body for ``POST /api/transform``.

    Attributes:
        style_id: Identifier of the style from the catalog.
        image: Image to transform.  When omitted, the image previously
            selected with ``POST /api/image`` is used.
    """

    style_id: str = Field(
        ...,
        description="Style identifier (e.g. 'anime').",
    )
    image: ImageUpload | None = Field(
        default=None,
        description="Image to transform; defaults to the selected image.",
    )


class ClearHistoryRequest(BaseModel):
    """Request body for ``POST /api/history/clear``."""

    confirmed: bool = Field(
        default=False,
        description="Must be true for the history to be cleared.",
    )


class ClearHistoryResponse(BaseModel):
    cleared: bool
    history: list[HistoryItem]


class StateResponse(BaseModel):
    """Current screen and the fields needed to render it.

    ``user_image_url`` and ``generated_image_url`` are ``data:`` URLs the
    frontend can use directly as image sources.
    """

    screen: Screen
    user_image: UserImage | None = None
    style: Style | None = None
    generated_image: ImageArtifact | None = None
    generated_caption: str | None = None
    error: str | None = None
    user_image_url: str | None = None
    generated_image_url: str | None = None

    @classmethod
    def from_state(cls, screen: Screen, state: WorkflowState) -> StateResponse:
        """Flatten a workflow state into a response."""
        if isinstance(state, Selecting):
            return cls(
                screen=screen,
                user_image=state.user_image,
                error=state.error,
                user_image_url=_data_url(state.user_image),
            )
        if isinstance(state, Loading):
            return cls(
                screen=screen,
                user_image=state.user_image,
                style=state.style,
                user_image_url=_data_url(state.user_image),
            )
        if isinstance(state, Result):
            return cls(
                screen=screen,
                user_image=state.user_image,
                style=state.style,
                generated_image=state.generated_image,
                generated_caption=state.generated_caption,
                user_image_url=_data_url(state.user_image),
                generated_image_url=_data_url(state.generated_image),
            )
        raise TypeError(f"Unknown workflow state: {state!r}")


def _data_url(image: ImageArtifact | None) -> str | None:
    return image.to_data_url() if image is not None else None

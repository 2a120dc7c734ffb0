"""Workflow state, actions and side effects.

``WorkflowState`` is a tagged union of three frozen dataclasses:

- ``Selecting``: the user is choosing an image and a style (initial state,
  and where a failed attempt lands with ``error`` set)
- ``Loading``: both generation calls are in flight
- ``Result``: a finished creation is on screen

Every user action is an ``Action`` dataclass fed to
:func:`alterevo.workflow.reducer.reduce`, which returns the next state plus a
tuple of ``Effect`` values for the controller to perform.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Union

from alterevo.core.models import HistoryItem, ImageArtifact, Style, UserImage

DEFAULT_ERROR_MESSAGE = "An unexpected error occurred. Please try again."


class Screen(str, Enum):
    """Screens the presentation layer can show."""

    SELECTOR = "selector"
    LOADING = "loading"
    RESULT = "result"


# ----------------------------------------------------------------------------
# States
# ----------------------------------------------------------------------------


@dataclass(frozen=True)
class Selecting:
    """Choosing an image and a style; ``error`` is the dismissible banner."""

    user_image: UserImage | None = None
    error: str | None = None


@dataclass(frozen=True)
class Loading:
    """Waiting on the image transform and the caption."""

    user_image: UserImage | None = None
    style: Style | None = None


@dataclass(frozen=True)
class Result:
    """Showing a finished creation, fresh or replayed from history."""

    user_image: UserImage | None = None
    style: Style | None = None
    generated_image: ImageArtifact | None = None
    generated_caption: str | None = None


WorkflowState = Union[Selecting, Loading, Result]


# ----------------------------------------------------------------------------
# Actions
# ----------------------------------------------------------------------------


@dataclass(frozen=True)
class SelectImage:
    image: UserImage


@dataclass(frozen=True)
class SubmitTransform:
    image: UserImage
    style: Style


@dataclass(frozen=True)
class GenerationSucceeded:
    generated_image: ImageArtifact
    generated_caption: str
    timestamp: int


@dataclass(frozen=True)
class GenerationFailed:
    message: str | None = None


@dataclass(frozen=True)
class TryAnother:
    pass


@dataclass(frozen=True)
class ViewHistoryItem:
    item: HistoryItem


@dataclass(frozen=True)
class ClearHistory:
    confirmed: bool = False


@dataclass(frozen=True)
class DismissError:
    pass


Action = Union[
    SelectImage,
    SubmitTransform,
    GenerationSucceeded,
    GenerationFailed,
    TryAnother,
    ViewHistoryItem,
    ClearHistory,
    DismissError,
]


# ----------------------------------------------------------------------------
# Effects
# ----------------------------------------------------------------------------


@dataclass(frozen=True)
class InvokeGateway:
    """Start the image transform and caption calls for this image and style."""

    image: UserImage
    style: Style


@dataclass(frozen=True)
class AppendHistory:
    """Prepend ``item`` to the history and persist it."""

    item: HistoryItem


@dataclass(frozen=True)
class ClearStoredHistory:
    """Empty the history and remove the persisted record."""

    pass


Effect = Union[InvokeGateway, AppendHistory, ClearStoredHistory]


@dataclass(frozen=True)
class Transition:
    """Result of reducing one action: the next state and effects to run."""

    state: WorkflowState
    effects: tuple[Effect, ...] = field(default_factory=tuple)

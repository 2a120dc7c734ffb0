"""Pure transition function for the creation workflow.

``reduce(state, action)`` never performs I/O.  Anything that must touch the
generation gateway or durable storage is returned as an effect, and the
controller performs it.  Actions that make no sense in the current state are
ignored: the state is returned unchanged with no effects.
"""

import logging

from alterevo.core.history import make_id
from alterevo.core.models import HistoryItem

from .models import (
    DEFAULT_ERROR_MESSAGE,
    Action,
    AppendHistory,
    ClearHistory,
    ClearStoredHistory,
    DismissError,
    GenerationFailed,
    GenerationSucceeded,
    InvokeGateway,
    Loading,
    Result,
    Selecting,
    SelectImage,
    SubmitTransform,
    Transition,
    TryAnother,
    ViewHistoryItem,
    WorkflowState,
)

logger = logging.getLogger(__name__)


def _ignored(state: WorkflowState, action: Action) -> Transition:
    logger.debug(f"Ignoring {type(action).__name__} in {type(state).__name__} state")
    return Transition(state)


def reduce(state: WorkflowState, action: Action) -> Transition:
    """Compute the next state and side effects for ``action``.

    Args:
        state: Current workflow state
        action: User action or generation outcome

    Returns:
        Transition holding the next state and the effects to perform
    """
    if isinstance(action, SelectImage):
        if not isinstance(state, Selecting):
            return _ignored(state, action)
        return Transition(Selecting(user_image=action.image, error=state.error))

    if isinstance(action, SubmitTransform):
        # Loading is what blocks a second submission while calls are in flight.
        if not isinstance(state, Selecting):
            return _ignored(state, action)
        return Transition(
            Loading(user_image=action.image, style=action.style),
            (InvokeGateway(image=action.image, style=action.style),),
        )

    if isinstance(action, GenerationSucceeded):
        if not isinstance(state, Loading) or state.user_image is None or state.style is None:
            return _ignored(state, action)
        item = HistoryItem(
            id=make_id(action.timestamp),
            user_image=state.user_image,
            generated_image=action.generated_image,
            generated_caption=action.generated_caption,
            style=state.style,
            timestamp=action.timestamp,
        )
        return Transition(
            Result(
                user_image=state.user_image,
                style=state.style,
                generated_image=action.generated_image,
                generated_caption=action.generated_caption,
            ),
            (AppendHistory(item=item),),
        )

    if isinstance(action, GenerationFailed):
        if not isinstance(state, Loading):
            return _ignored(state, action)
        return Transition(Selecting(user_image=None, error=action.message or DEFAULT_ERROR_MESSAGE))

    if isinstance(action, TryAnother):
        if not isinstance(state, Result):
            return _ignored(state, action)
        return Transition(Selecting())

    if isinstance(action, ViewHistoryItem):
        if isinstance(state, Loading):
            return _ignored(state, action)
        item = action.item
        return Transition(
            Result(
                user_image=item.user_image,
                style=item.style,
                generated_image=item.generated_image,
                generated_caption=item.generated_caption,
            )
        )

    if isinstance(action, ClearHistory):
        if not action.confirmed:
            logger.info("History clear was not confirmed, keeping history")
            return Transition(state)
        return Transition(state, (ClearStoredHistory(),))

    if isinstance(action, DismissError):
        if isinstance(state, Selecting) and state.error is not None:
            return Transition(Selecting(user_image=state.user_image))
        return Transition(state)

    raise TypeError(f"Unknown workflow action: {action!r}")

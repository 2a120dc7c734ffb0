"""Map workflow state to the screen to show."""

import logging

from .models import Loading, Result, Screen, WorkflowState

logger = logging.getLogger(__name__)


def resolve_screen(state: WorkflowState) -> Screen:
    """Select the screen for ``state``.

    Inconsistent states fall back to the selector instead of raising:
    ``Loading`` without a style, or ``Result`` missing the user image, the
    generated image or the caption.
    """
    if isinstance(state, Loading):
        if state.style is None:
            logger.warning("Loading state has no style, showing selector")
            return Screen.SELECTOR
        return Screen.LOADING

    if isinstance(state, Result):
        complete = (
            state.user_image is not None
            and state.generated_image is not None
            and bool(state.generated_caption)
        )
        if not complete:
            logger.warning("Result state is incomplete, showing selector")
            return Screen.SELECTOR
        return Screen.RESULT

    return Screen.SELECTOR

"""Workflow controller: owns the state and history, performs effects.

The controller is the only mutator of the workflow state and the in-memory
history.  Each public method maps to one user action, runs it through
:func:`reduce`, then performs the effects the reducer asked for:

- ``InvokeGateway``: issue ``transform_image`` and ``generate_caption``
  together and wait for both (or the first failure)
- ``AppendHistory`` / ``ClearStoredHistory``: write through ``HistoryStore``

Generation failures never escape :meth:`submit`; they become a
``Selecting`` state carrying the error message.
"""

from __future__ import annotations

import asyncio
import logging
import time
from collections.abc import Callable

from alterevo.core.gateway import GenerationError, GenerationGateway
from alterevo.core.history import HistoryStore
from alterevo.core.models import History, HistoryItem, ImageArtifact, Style, UserImage

from .models import (
    Action,
    AppendHistory,
    ClearHistory,
    ClearStoredHistory,
    DismissError,
    GenerationFailed,
    GenerationSucceeded,
    InvokeGateway,
    Screen,
    Selecting,
    SelectImage,
    SubmitTransform,
    Transition,
    TryAnother,
    ViewHistoryItem,
    WorkflowState,
)
from .reducer import reduce
from .router import resolve_screen

logger = logging.getLogger(__name__)

INTERRUPTED_MESSAGE = "Generation was interrupted. Please try again."


def now_ms() -> int:
    """Current time in milliseconds since the epoch."""
    return time.time_ns() // 1_000_000


class WorkflowController:
    """Drive one user's creation workflow.

    Attributes:
        gateway: Generation gateway used for new creations
        history_store: Persistence for the creation history
        state: Current workflow state
        history: In-memory copy of the persisted history (newest first)
    """

    def __init__(
        self,
        gateway: GenerationGateway,
        history_store: HistoryStore,
        clock: Callable[[], int] = now_ms,
    ) -> None:
        """Initialize the controller and load the persisted history.

        Args:
            gateway: Generation gateway
            history_store: History persistence
            clock: Millisecond timestamp source for new history items
        """
        self.gateway = gateway
        self.history_store = history_store
        self._clock = clock
        self.state: WorkflowState = Selecting()
        self.history: History = history_store.load()

    @property
    def screen(self) -> Screen:
        return resolve_screen(self.state)

    def dispatch(self, action: Action) -> Transition:
        """Apply ``action`` and perform its storage effects.

        Gateway effects are returned to the caller in the transition; only
        :meth:`submit` acts on them.
        """
        transition = reduce(self.state, action)
        self.state = transition.state

        for effect in transition.effects:
            if isinstance(effect, AppendHistory):
                self.history = self.history_store.append(self.history, effect.item)
            elif isinstance(effect, ClearStoredHistory):
                self.history = self.history_store.clear()

        return transition

    def select_image(self, image: UserImage) -> WorkflowState:
        self.dispatch(SelectImage(image))
        return self.state

    async def submit(self, image: UserImage, style: Style) -> WorkflowState:
        """Run one creation attempt for ``image`` in ``style``.

        Returns:
            ``Result`` on success, ``Selecting`` with ``error`` set on failure,
            or the unchanged state if a submission is not allowed right now
        """
        transition = self.dispatch(SubmitTransform(image=image, style=style))
        invocation = next(
            (effect for effect in transition.effects if isinstance(effect, InvokeGateway)),
            None,
        )
        if invocation is None:
            logger.warning(f"Submission ignored while in {type(self.state).__name__} state")
            return self.state

        logger.info(f"Starting creation with style '{style.id}'")
        try:
            generated_image, caption = await self._generate(invocation.image, invocation.style)
        except GenerationError as e:
            logger.warning(f"Generation failed: {e}")
            self.dispatch(GenerationFailed(str(e) or None))
        except asyncio.CancelledError:
            logger.warning("Generation was cancelled")
            self.dispatch(GenerationFailed(INTERRUPTED_MESSAGE))
            raise
        except Exception as e:
            logger.error(f"Unexpected error during generation: {e}", exc_info=True)
            self.dispatch(GenerationFailed(str(e) or None))
        else:
            self.dispatch(
                GenerationSucceeded(
                    generated_image=generated_image,
                    generated_caption=caption,
                    timestamp=self._clock(),
                )
            )
            logger.info(f"Creation complete, history now has {len(self.history)} items")

        return self.state

    async def _generate(self, image: UserImage, style: Style) -> tuple[ImageArtifact, str]:
        """Issue both gateway calls together and wait for both.

        On the first failure the other call is cancelled and the failure
        propagates.
        """
        tasks = [
            asyncio.ensure_future(self.gateway.transform_image(image, style.image_prompt)),
            asyncio.ensure_future(self.gateway.generate_caption(style.caption_prompt)),
        ]
        try:
            generated_image, caption = await asyncio.gather(*tasks)
        except BaseException:
            for task in tasks:
                task.cancel()
            # Let the cancelled call unwind before the failure is handled.
            await asyncio.gather(*tasks, return_exceptions=True)
            raise

        if generated_image is None:
            raise GenerationError("The model did not return an image.")
        if not caption:
            raise GenerationError("The model did not return a caption.")
        return generated_image, caption

    def try_another(self) -> WorkflowState:
        self.dispatch(TryAnother())
        return self.state

    def find_history_item(self, item_id: str) -> HistoryItem:
        """Return the newest history item with ``item_id``.

        Raises:
            KeyError: If no item has that id
        """
        for item in self.history:
            if item.id == item_id:
                return item
        raise KeyError(f"History item not found: {item_id}")

    def view_history_item(self, item_id: str) -> WorkflowState:
        """Show a past creation.  Never calls the gateway.

        Raises:
            KeyError: If no item has that id
        """
        self.dispatch(ViewHistoryItem(self.find_history_item(item_id)))
        return self.state

    def clear_history(self, confirmed: bool) -> bool:
        """Empty the history if ``confirmed``.

        Returns:
            True if the history was cleared
        """
        transition = self.dispatch(ClearHistory(confirmed=confirmed))
        return any(isinstance(effect, ClearStoredHistory) for effect in transition.effects)

    def dismiss_error(self) -> WorkflowState:
        self.dispatch(DismissError())
        return self.state

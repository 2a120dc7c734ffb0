"""Creation workflow: state machine, reducer, screen routing and controller."""

from .controller import WorkflowController
from .models import Loading, Result, Screen, Selecting, WorkflowState
from .reducer import reduce
from .router import resolve_screen

__all__ = [
    "WorkflowController",
    "WorkflowState",
    "Selecting",
    "Loading",
    "Result",
    "Screen",
    "reduce",
    "resolve_screen",
]

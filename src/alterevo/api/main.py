"""Alterevo: FastAPI Application.

This module is the single entry point for the web application.  It defines
the FastAPI ``app`` instance, all REST API routes, and the ``main()`` CLI
function that launches the uvicorn server.

Architecture
------------
- **Configuration** comes from :data:`~alterevo.core.config.config`
  (``ALTEREVO_*`` environment variables).
- **Workflow state** lives in one :class:`WorkflowController` created at
  startup and stored on ``app.state``.  Routes translate HTTP requests into
  controller actions and render the resulting state; they hold no state of
  their own.
- **History persistence** goes through a file-backed key-value store under
  ``config.data_dir``.
- **Generation** uses the gateway named by ``config.gateway``.

Endpoints
---------
========  ==============================  ==================================
Method    Path                            Purpose
========  ==============================  ==================================
GET       ``/api/config``                 Styles, gateways, history capacity
GET       ``/api/state``                  Current screen and its data
POST      ``/api/image``                  Select the user image
POST      ``/api/transform``              Run a creation (image + style)
POST      ``/api/try-another``            Back to the selector, fresh start
POST      ``/api/error/dismiss``          Dismiss the error banner
GET       ``/api/history``                Past creations, newest first
POST      ``/api/history/{id}/view``      Show a past creation
POST      ``/api/history/clear``          Clear history (needs confirmation)
========  ==============================  ==================================

Usage
-----
CLI (installed entry point)::

    alterevo

Direct invocation::

    python -m alterevo.api.main
"""

from __future__ import annotations

import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from fastapi import FastAPI, HTTPException, Request
from fastapi.middleware.cors import CORSMiddleware

from alterevo import __version__
from alterevo.api.models import (
    ClearHistoryRequest,
    ClearHistoryResponse,
    ImageUpload,
    StateResponse,
    TransformRequest,
)
from alterevo.core.config import AlterevoConfig, config
from alterevo.core.gateway import gateway_registry
from alterevo.core.history import HistoryStore
from alterevo.core.images import ImageDecodeError, user_image_from_base64
from alterevo.core.models import HistoryItem, UserImage
from alterevo.core.storage import FileKeyValueStore
from alterevo.core.styles import StyleCatalog
from alterevo.workflow.controller import WorkflowController
from alterevo.workflow.models import Loading, Result, Selecting

logger = logging.getLogger(__name__)


def build_controller(cfg: AlterevoConfig) -> WorkflowController:
    """Wire storage, history, and gateway into a controller.

    Args:
        cfg: Application configuration.

    Returns:
        A controller with the persisted history already loaded.
    """
    storage = FileKeyValueStore(cfg.data_dir)
    history_store = HistoryStore(storage, key=cfg.history_key, capacity=cfg.history_capacity)
    gateway = gateway_registry.instantiate(cfg.gateway, cfg)
    return WorkflowController(gateway, history_store)


def build_style_catalog(cfg: AlterevoConfig) -> StyleCatalog:
    return StyleCatalog.from_file(cfg.styles_file)


# ---------------------------------------------------------------------------
# Application lifecycle.
# ---------------------------------------------------------------------------


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    """Create the controller and style catalog on startup.

    Args:
        app: The FastAPI application instance.

    Yields:
        Control back to the application for the duration of its lifetime.
    """
    app.state.controller = build_controller(config)
    app.state.styles = build_style_catalog(config)
    logger.info(
        f"Workflow ready: gateway={config.gateway}, "
        f"{len(app.state.controller.history)} history items, "
        f"{len(app.state.styles)} styles"
    )

    yield


app = FastAPI(
    title="Alterevo",
    description="Restyle a photo, caption it, and keep a history of creations.",
    version=__version__,
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


# ---------------------------------------------------------------------------
# Helpers.
# ---------------------------------------------------------------------------


def _controller(request: Request) -> WorkflowController:
    return request.app.state.controller


def _state_response(controller: WorkflowController) -> StateResponse:
    return StateResponse.from_state(controller.screen, controller.state)


def _decode_upload(upload: ImageUpload) -> UserImage:
    """Decode an upload or raise 422 with a user-facing message."""
    try:
        return user_image_from_base64(upload.data, name=upload.name)
    except ImageDecodeError as e:
        raise HTTPException(status_code=422, detail=str(e)) from e


# ---------------------------------------------------------------------------
# Routes.
# ---------------------------------------------------------------------------


@app.get("/api/config")
async def get_config(request: Request) -> dict:
    """Return version, styles, gateways, and history capacity for the frontend."""
    styles: StyleCatalog = request.app.state.styles
    controller = _controller(request)
    return {
        "version": __version__,
        "styles": [style.model_dump(by_alias=True) for style in styles.list_styles()],
        "gateway": controller.gateway.name,
        "gateways": [
            gateway_registry.get_gateway_info(name) for name in gateway_registry.list_available()
        ],
        "history_capacity": controller.history_store.capacity,
    }


@app.get("/api/state", response_model=StateResponse)
async def get_state(request: Request) -> StateResponse:
    """Return the screen to render and the data it needs."""
    return _state_response(_controller(request))


@app.post("/api/image", response_model=StateResponse)
async def select_image(upload: ImageUpload, request: Request) -> StateResponse:
    """Select the image for the next creation.

    Raises:
        HTTPException: 422 if the upload is not a readable image.
    """
    controller = _controller(request)
    controller.select_image(_decode_upload(upload))
    return _state_response(controller)


@app.post("/api/transform", response_model=StateResponse)
async def transform(req: TransformRequest, request: Request) -> StateResponse:
    """Run one creation and return the resulting state.

    Generation failures are not HTTP errors: the response is the selector
    screen with ``error`` set.

    Raises:
        HTTPException: 409 while another creation is running or a result
            is on screen, 404 for an unknown style, 422 for an unreadable
            image, 400 when no image was supplied or selected.
    """
    controller = _controller(request)
    styles: StyleCatalog = request.app.state.styles

    if isinstance(controller.state, Loading):
        raise HTTPException(status_code=409, detail="A creation is already in progress")
    if isinstance(controller.state, Result):
        raise HTTPException(
            status_code=409,
            detail="A creation is on screen; POST /api/try-another to start a new one",
        )

    try:
        style = styles.get(req.style_id)
    except KeyError as e:
        raise HTTPException(status_code=404, detail=f"Unknown style: {req.style_id}") from e

    if req.image is not None:
        image = _decode_upload(req.image)
    elif isinstance(controller.state, Selecting) and controller.state.user_image is not None:
        image = controller.state.user_image
    else:
        raise HTTPException(status_code=400, detail="No image selected")

    await controller.submit(image, style)
    return _state_response(controller)


@app.post("/api/try-another", response_model=StateResponse)
async def try_another(request: Request) -> StateResponse:
    controller = _controller(request)
    controller.try_another()
    return _state_response(controller)


@app.post("/api/error/dismiss", response_model=StateResponse)
async def dismiss_error(request: Request) -> StateResponse:
    controller = _controller(request)
    controller.dismiss_error()
    return _state_response(controller)


@app.get("/api/history", response_model=list[HistoryItem])
async def get_history(request: Request) -> list[HistoryItem]:
    """Return past creations, newest first."""
    return list(_controller(request).history)


@app.post("/api/history/{item_id}/view", response_model=StateResponse)
async def view_history_item(item_id: str, request: Request) -> StateResponse:
    """Show a past creation without generating anything.

    Raises:
        HTTPException: 404 if the item is not in the history, 409 while a
            creation is running.
    """
    controller = _controller(request)
    if isinstance(controller.state, Loading):
        raise HTTPException(status_code=409, detail="A creation is already in progress")
    try:
        controller.view_history_item(item_id)
    except KeyError as e:
        raise HTTPException(status_code=404, detail=f"History item not found: {item_id}") from e
    return _state_response(controller)


@app.post("/api/history/clear", response_model=ClearHistoryResponse)
async def clear_history(req: ClearHistoryRequest, request: Request) -> ClearHistoryResponse:
    """Clear the history when ``confirmed`` is true; otherwise do nothing."""
    controller = _controller(request)
    cleared = controller.clear_history(confirmed=req.confirmed)
    return ClearHistoryResponse(cleared=cleared, history=list(controller.history))


# ---------------------------------------------------------------------------
# CLI entry point.
# ---------------------------------------------------------------------------


def main() -> None:
    """Launch the uvicorn ASGI server.

    Reads host, port, and log level from :data:`~alterevo.core.config.config`.
    Registered as the ``alterevo`` console script in ``pyproject.toml``.
    """
    import uvicorn

    logging.basicConfig(
        level=config.log_level,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )

    uvicorn.run(
        "alterevo.api.main:app",
        host=config.server_host,
        port=config.server_port,
        reload=False,
    )


if __name__ == "__main__":
    main()

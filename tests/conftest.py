"""Shared pytest fixtures for Alterevo tests."""

import asyncio
import base64
import io
import shutil
import tempfile
from pathlib import Path
from typing import Callable, Generator

import pytest
from PIL import Image

from alterevo.core.config import AlterevoConfig
from alterevo.core.gateway import GenerationError, GenerationGateway
from alterevo.core.history import HistoryStore, make_id
from alterevo.core.models import HistoryItem, ImageArtifact, Style, UserImage
from alterevo.core.storage import MemoryKeyValueStore
from alterevo.core.styles import StyleCatalog
from alterevo.workflow.controller import WorkflowController


class StubGateway(GenerationGateway):
    """Gateway double that records calls and can be told to fail.

    Attributes:
        transform_calls: Number of transform_image calls
        caption_calls: Number of generate_caption calls
        transform_error: Exception raised by transform_image, if set
        caption_error: Exception raised by generate_caption, if set
        block_caption: If set, generate_caption waits on this event
    """

    name = "Stub"
    description = "In-process test gateway"

    def __init__(self, config: AlterevoConfig | None = None) -> None:
        super().__init__(config)
        self.image_result = ImageArtifact(base64="aW1nQQ==", mime_type="image/png")
        self.caption_result = "caption1"
        self.transform_error: Exception | None = None
        self.caption_error: Exception | None = None
        self.block_caption: asyncio.Event | None = None
        self.transform_calls = 0
        self.caption_calls = 0
        self.caption_cancelled = False
        self.prompts: list[str] = []

    @property
    def total_calls(self) -> int:
        return self.transform_calls + self.caption_calls

    async def transform_image(self, image: UserImage, prompt: str) -> ImageArtifact:
        self.transform_calls += 1
        self.prompts.append(prompt)
        await asyncio.sleep(0)
        if self.transform_error is not None:
            raise self.transform_error
        return self.image_result

    async def generate_caption(self, prompt: str) -> str:
        self.caption_calls += 1
        self.prompts.append(prompt)
        try:
            if self.block_caption is not None:
                await self.block_caption.wait()
            await asyncio.sleep(0)
        except asyncio.CancelledError:
            self.caption_cancelled = True
            raise
        if self.caption_error is not None:
            raise self.caption_error
        return self.caption_result


@pytest.fixture
def temp_dir() -> Generator[Path, None, None]:
    """Create a temporary directory for test files.

    Yields:
        Path to temporary directory

    Cleanup:
        Directory is removed after test completes
    """
    temp_path = Path(tempfile.mkdtemp())
    try:
        yield temp_path
    finally:
        shutil.rmtree(temp_path, ignore_errors=True)


@pytest.fixture
def test_config(temp_dir: Path) -> AlterevoConfig:
    """Create a test configuration rooted in a temporary directory."""
    return AlterevoConfig(
        data_dir=str(temp_dir / "data"),
        gateway="Gemini",
        gemini_api_key="test-key",
        _env_file=None,
    )


@pytest.fixture
def png_bytes() -> bytes:
    """A small valid PNG image."""
    buffer = io.BytesIO()
    Image.new("RGB", (8, 8), (200, 30, 30)).save(buffer, format="PNG")
    return buffer.getvalue()


@pytest.fixture
def user_image(png_bytes: bytes) -> UserImage:
    return UserImage(
        base64=base64.b64encode(png_bytes).decode("ascii"),
        mime_type="image/png",
        name="img1.png",
    )


@pytest.fixture
def anime_style() -> Style:
    return Style(
        id="anime",
        name="Anime",
        image_prompt="Redraw as an anime character",
        caption_prompt="Write an anime tagline",
    )


@pytest.fixture
def watercolor_style() -> Style:
    return Style(
        id="watercolor",
        name="Watercolor",
        image_prompt="Repaint as a watercolor",
        caption_prompt="Write a gentle caption",
    )


@pytest.fixture
def style_catalog(anime_style: Style, watercolor_style: Style) -> StyleCatalog:
    return StyleCatalog([anime_style, watercolor_style])


@pytest.fixture
def make_history_item(user_image: UserImage, anime_style: Style) -> Callable[[int], HistoryItem]:
    """Factory building a well-formed history item for timestamp ``n``."""

    def _make(n: int) -> HistoryItem:
        timestamp = 1_700_000_000_000 + n
        return HistoryItem(
            id=make_id(timestamp),
            user_image=user_image,
            generated_image=ImageArtifact(base64=f"Z2VuLXtu{n}", mime_type="image/png"),
            generated_caption=f"caption {n}",
            style=anime_style,
            timestamp=timestamp,
        )

    return _make


@pytest.fixture
def memory_store() -> MemoryKeyValueStore:
    return MemoryKeyValueStore()


@pytest.fixture
def history_store(memory_store: MemoryKeyValueStore) -> HistoryStore:
    return HistoryStore(memory_store)


@pytest.fixture
def stub_gateway() -> StubGateway:
    return StubGateway()


@pytest.fixture
def fixed_clock() -> Callable[[], int]:
    """Clock returning increasing millisecond timestamps."""
    ticks = iter(range(1_800_000_000_000, 1_800_000_000_000 + 10_000))
    return lambda: next(ticks)


@pytest.fixture
def controller(
    stub_gateway: StubGateway, history_store: HistoryStore, fixed_clock
) -> WorkflowController:
    return WorkflowController(stub_gateway, history_store, clock=fixed_clock)


@pytest.fixture
def failing_error() -> GenerationError:
    return GenerationError("Image generation failed: quota exceeded")

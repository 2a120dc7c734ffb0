"""Google Gemini generation gateway.

Uses the ``google-genai`` async client (``client.aio``) for both operations:

- the image transform sends the user image as an inline part followed by the
  style's image prompt and asks for IMAGE + TEXT response modalities
- the caption is a plain text generation from the style's caption prompt

Every exception raised by the SDK is wrapped in :class:`GenerationError`
with a short message suitable for the error banner.
"""

import base64
import logging

from google import genai
from google.genai import types

from ..config import AlterevoConfig
from ..gateway import GenerationError, GenerationGateway, gateway_registry
from ..models import ImageArtifact, UserImage

logger = logging.getLogger(__name__)


@gateway_registry.register
class GeminiGateway(GenerationGateway):
    """Gateway backed by the Gemini API."""

    name = "Gemini"
    description = "Google Gemini image editing and text generation"

    def __init__(self, config: AlterevoConfig) -> None:
        super().__init__(config)
        self._client: genai.Client | None = None

    @property
    def client(self) -> genai.Client:
        """Lazily created API client.

        Raises:
            GenerationError: If no API key is configured
        """
        if self._client is None:
            if not self.config.gemini_api_key:
                raise GenerationError(
                    "Gemini API key is not configured. Set ALTEREVO_GEMINI_API_KEY."
                )
            self._client = genai.Client(
                api_key=self.config.gemini_api_key,
                http_options=types.HttpOptions(timeout=self.config.request_timeout_ms),
            )
        return self._client

    async def transform_image(self, image: UserImage, prompt: str) -> ImageArtifact:
        try:
            image_bytes = base64.b64decode(image.base64, validate=True)
        except ValueError as e:
            raise GenerationError("The selected image could not be read.") from e

        logger.info(f"Requesting image transform from {self.config.image_model}")
        try:
            response = await self.client.aio.models.generate_content(
                model=self.config.image_model,
                contents=[
                    types.Part.from_bytes(data=image_bytes, mime_type=image.mime_type),
                    prompt,
                ],
                config=types.GenerateContentConfig(
                    response_modalities=[types.Modality.IMAGE, types.Modality.TEXT],
                ),
            )
        except GenerationError:
            raise
        except Exception as e:
            logger.error(f"Image transform request failed: {e}", exc_info=True)
            raise GenerationError(f"Image generation failed: {e}") from e

        for part in _response_parts(response):
            inline = getattr(part, "inline_data", None)
            if inline is not None and inline.data:
                return ImageArtifact(
                    base64=base64.b64encode(inline.data).decode("ascii"),
                    mime_type=inline.mime_type or "image/png",
                )

        logger.warning("Image transform response contained no image part")
        raise GenerationError("The model did not return an image. Please try another style.")

    async def generate_caption(self, prompt: str) -> str:
        logger.info(f"Requesting caption from {self.config.caption_model}")
        try:
            response = await self.client.aio.models.generate_content(
                model=self.config.caption_model,
                contents=prompt,
            )
        except GenerationError:
            raise
        except Exception as e:
            logger.error(f"Caption request failed: {e}", exc_info=True)
            raise GenerationError(f"Caption generation failed: {e}") from e

        caption = (response.text or "").strip()
        if not caption:
            raise GenerationError("The model did not return a caption.")
        return caption


def _response_parts(response) -> list:
    """Return the content parts of the first candidate, or an empty list."""
    candidates = getattr(response, "candidates", None) or []
    if not candidates or candidates[0].content is None:
        return []
    return list(candidates[0].content.parts or [])

"""Tests for alterevo.api.models: Pydantic request/response models."""

from __future__ import annotations

import pytest
from pydantic import ValidationError

from alterevo.api.models import ClearHistoryRequest, ImageUpload, StateResponse, TransformRequest
from alterevo.core.models import ImageArtifact
from alterevo.workflow.models import Loading, Result, Screen, Selecting


class TestRequests:
    """Request body validation."""

    def test_transform_requires_style(self):
        with pytest.raises(ValidationError):
            TransformRequest()

    def test_transform_image_optional(self):
        req = TransformRequest(style_id="anime")
        assert req.image is None

    def test_upload_requires_data(self):
        with pytest.raises(ValidationError):
            ImageUpload(data="")

    def test_clear_defaults_to_unconfirmed(self):
        assert ClearHistoryRequest().confirmed is False


class TestStateResponse:
    """Flattening workflow states."""

    def test_from_selecting(self, user_image):
        resp = StateResponse.from_state(
            Screen.SELECTOR, Selecting(user_image=user_image, error="boom")
        )

        assert resp.screen == Screen.SELECTOR
        assert resp.user_image == user_image
        assert resp.error == "boom"
        assert resp.generated_image is None
        assert resp.generated_image_url is None

    def test_from_loading(self, user_image, anime_style):
        resp = StateResponse.from_state(
            Screen.LOADING, Loading(user_image=user_image, style=anime_style)
        )

        assert resp.style == anime_style
        assert resp.error is None

    def test_from_result(self, user_image, anime_style):
        generated = ImageArtifact(base64="aW1nQQ==", mime_type="image/png")
        resp = StateResponse.from_state(
            Screen.RESULT,
            Result(
                user_image=user_image,
                style=anime_style,
                generated_image=generated,
                generated_caption="caption1",
            ),
        )

        assert resp.generated_image == generated
        assert resp.generated_caption == "caption1"
        assert resp.generated_image_url == "data:image/png;base64,aW1nQQ=="
        assert resp.user_image_url == user_image.to_data_url()
        assert resp.user_image_url.startswith("data:image/png;base64,")

    def test_empty_selector_has_no_urls(self):
        resp = StateResponse.from_state(Screen.SELECTOR, Selecting())

        assert resp.user_image_url is None
        assert resp.generated_image_url is None

    def test_unknown_state_rejected(self):
        with pytest.raises(TypeError):
            StateResponse.from_state(Screen.SELECTOR, object())

"""Unit tests for screen routing."""

import logging

import pytest

from alterevo.core.models import ImageArtifact
from alterevo.workflow.models import Loading, Result, Screen, Selecting
from alterevo.workflow.router import resolve_screen

GENERATED = ImageArtifact(base64="aW1nQQ==", mime_type="image/png")


def test_selecting_routes_to_selector():
    assert resolve_screen(Selecting()) == Screen.SELECTOR
    assert resolve_screen(Selecting(error="boom")) == Screen.SELECTOR


def test_loading_with_style_routes_to_loading(user_image, anime_style):
    assert resolve_screen(Loading(user_image=user_image, style=anime_style)) == Screen.LOADING


def test_loading_without_style_falls_back(user_image):
    assert resolve_screen(Loading(user_image=user_image, style=None)) == Screen.SELECTOR


def test_complete_result_routes_to_result(user_image, anime_style):
    state = Result(
        user_image=user_image,
        style=anime_style,
        generated_image=GENERATED,
        generated_caption="caption1",
    )
    assert resolve_screen(state) == Screen.RESULT


@pytest.mark.parametrize("missing", ["user_image", "generated_image", "generated_caption"])
def test_incomplete_result_falls_back(user_image, anime_style, missing):
    fields = {
        "user_image": user_image,
        "style": anime_style,
        "generated_image": GENERATED,
        "generated_caption": "caption1",
    }
    fields[missing] = None

    assert resolve_screen(Result(**fields)) == Screen.SELECTOR


def test_empty_caption_falls_back(user_image, anime_style):
    state = Result(
        user_image=user_image,
        style=anime_style,
        generated_image=GENERATED,
        generated_caption="",
    )
    assert resolve_screen(state) == Screen.SELECTOR


def test_fallback_logs_warning(caplog, user_image):
    with caplog.at_level(logging.WARNING, logger="alterevo.workflow.router"):
        resolve_screen(Loading(user_image=user_image, style=None))
        resolve_screen(Result(user_image=user_image))

    assert len(caplog.records) == 2
    assert all(record.levelname == "WARNING" for record in caplog.records)


def test_consistent_states_do_not_log(caplog, user_image, anime_style):
    with caplog.at_level(logging.WARNING, logger="alterevo.workflow.router"):
        resolve_screen(Selecting())
        resolve_screen(Loading(user_image=user_image, style=anime_style))

    assert caplog.records == []

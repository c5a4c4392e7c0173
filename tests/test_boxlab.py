from __future__ import annotations

import logging

import pygame
import pytest

import boxlab
from shapes.rectangle import Rectangle


@pytest.mark.parametrize(
    "sidebar_visible, expected",
    [
        (True, pygame.Rect(312, 12, 876, 776)),
        (False, pygame.Rect(12, 12, 1176, 776)),
    ],
)
def test_labeller_area_follows_sidebar(sidebar_visible, expected):
    assert boxlab.labeller_area(1200, 800, sidebar_visible) == expected


def test_labeller_area_never_negative():
    area = boxlab.labeller_area(100, 10, True)
    assert area.width == 0
    assert area.height == 0


def test_describe_rectangle_uses_whole_pixels():
    assert boxlab.describe_rectangle("ab12", Rectangle(150, 50.4, 200, 100)) == "ab12  150,50  200x100"


def test_log_level_comes_from_environment(monkeypatch):
    captured = {}
    monkeypatch.setenv("BOXLAB_LOG_LEVEL", "debug")
    monkeypatch.setattr(logging, "basicConfig", lambda **kwargs: captured.update(kwargs))
    boxlab.configure_logging()
    assert captured["level"] == logging.DEBUG


def test_unknown_log_level_falls_back_to_info(monkeypatch):
    captured = {}
    monkeypatch.setenv("BOXLAB_LOG_LEVEL", "chatty")
    monkeypatch.setattr(logging, "basicConfig", lambda **kwargs: captured.update(kwargs))
    boxlab.configure_logging()
    assert captured["level"] == logging.INFO


@pytest.mark.parametrize("level_name", ["basic_format", "root"])
def test_non_level_attribute_falls_back_to_info(monkeypatch, level_name):
    captured = {}
    monkeypatch.setenv("BOXLAB_LOG_LEVEL", level_name)
    monkeypatch.setattr(logging, "basicConfig", lambda **kwargs: captured.update(kwargs))
    boxlab.configure_logging()
    assert captured["level"] == logging.INFO


def test_startup_image_prefers_argument(monkeypatch):
    monkeypatch.setenv("BOXLAB_IMAGE", "from_env.png")
    assert boxlab.startup_image_path(["from_args.png"]) == "from_args.png"


def test_startup_image_falls_back_to_environment(monkeypatch):
    monkeypatch.setenv("BOXLAB_IMAGE", "from_env.png")
    assert boxlab.startup_image_path([]) == "from_env.png"


@pytest.mark.parametrize("value", [None, ""])
def test_startup_image_absent(monkeypatch, value):
    if value is None:
        monkeypatch.delenv("BOXLAB_IMAGE", raising=False)
    else:
        monkeypatch.setenv("BOXLAB_IMAGE", value)
    assert boxlab.startup_image_path([]) is None

from __future__ import annotations

import logging

import pygame

from labeller.images import FAILED, LOADED, LOADING, LoadedImage, load_image, scale_image
from shapes.dimensions import Dimensions


def test_load_image_reports_native_size(tmp_path):
    path = tmp_path / "photo.bmp"
    pygame.image.save(pygame.Surface((30, 20)), str(path))
    image = load_image(str(path))
    assert image.status == LOADED
    assert image.dimensions == Dimensions(30, 20)
    assert image.error is None


def test_load_failure_is_a_status(tmp_path, caplog):
    missing = str(tmp_path / "missing.png")
    with caplog.at_level(logging.WARNING, logger="BoxLab.Images"):
        image = load_image(missing)
    assert image.status == FAILED
    assert image.surface is None
    assert image.dimensions is None
    assert image.error
    assert "Failed to load image" in caplog.text


def test_loading_placeholder():
    image = LoadedImage.loading("a.png")
    assert image.status == LOADING
    assert image.path == "a.png"
    assert image.dimensions is None


def test_scale_image_to_displayed_size():
    scaled = scale_image(pygame.Surface((100, 50)), Dimensions(40, 20))
    assert scaled.get_size() == (40, 20)


def test_scale_image_same_size_returns_input():
    surface = pygame.Surface((40, 20))
    assert scale_image(surface, Dimensions(40, 20)) is surface

import logging
from dataclasses import dataclass
from typing import Any, Optional

import pygame

from shapes.dimensions import Dimensions

LOGGER = logging.getLogger("BoxLab.Images")

LOADING = 'loading'
LOADED = 'loaded'
FAILED = 'failed'

SUPPORTED_IMAGE_FORMATS = ("*.png", "*.jpg", "*.jpeg", "*.bmp", "*.gif")


@dataclass(frozen=True)
class LoadedImage:
    status: str
    surface: Optional[Any] = None
    path: Optional[str] = None
    error: Optional[str] = None

    @classmethod
    def loading(cls, path):
        return cls(LOADING, path=path)

    @property
    def dimensions(self):
        if self.surface is None:
            return None
        return Dimensions.of(self.surface)


def load_image(path):
    """Load an image from disk. Failures come back as a FAILED status, never raised."""
    try:
        surface = pygame.image.load(path)
    except (pygame.error, OSError) as e:
        LOGGER.warning("Failed to load image %s: %s", path, e)
        return LoadedImage(FAILED, path=path, error=str(e))
    # convert_alpha needs a display mode; headless callers keep the raw surface
    if pygame.display.get_init() and pygame.display.get_surface() is not None:
        surface = surface.convert_alpha()
    LOGGER.info("Loaded image %s (%dx%d)", path, *surface.get_size())
    return LoadedImage(LOADED, surface=surface, path=path)


def scale_image(surface, dimensions):
    size = (max(1, int(dimensions.width)), max(1, int(dimensions.height)))
    if surface.get_size() == size:
        return surface
    try:
        return pygame.transform.smoothscale(surface, size)
    except (pygame.error, ValueError):
        # smoothscale only handles 24/32 bit surfaces
        return pygame.transform.scale(surface, size)

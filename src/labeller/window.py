"""Labeller widgets: the scaled window plus the containers that feed it.

Owners keep rectangles in native image pixels. `ScaledLabellerWindow` is the
only place that converts between native and displayed pixels.
"""
import functools
import logging

import pygame

from labeller.fit import ContainerFitResolver, compute_fit
from labeller.images import FAILED, LOADED, LOADING
from labeller.surface import AnnotationSurface
from shapes.dimensions import Dimensions
from shapes.rectangle import scale_rectangles

LOGGER = logging.getLogger("BoxLab.Window")

FRAME_ASPECT = Dimensions(16, 9)
SKELETON_COLOR = (55, 55, 55)
ERROR_BG_COLOR = (90, 30, 30)
ERROR_TEXT_COLOR = (255, 210, 210)


def _noop(*_args):
    pass


class ScaledLabellerWindow:
    """Shows native rectangles on the surface at `scale` and scales edits back."""

    def __init__(self, surface):
        self.surface = surface

    def render(self, image, dimensions, scale, rectangles, on_rectangles_change,
               on_select_rectangle, selected_id=None, origin=(0, 0)):
        scaled_rectangles = scale_rectangles(rectangles, scale)
        # bound to this render's scale; a later resize renders a new callback
        set_scaled_rectangles = functools.partial(
            self._set_scaled_rectangles, scale, on_rectangles_change)
        self.surface.render(image, dimensions, scaled_rectangles, selected_id,
                            set_scaled_rectangles, on_select_rectangle, origin)
        return scaled_rectangles

    @staticmethod
    def _set_scaled_rectangles(scale, on_rectangles_change, scaled_rectangles):
        downscaled = scale_rectangles(scaled_rectangles, 1 / scale)
        LOGGER.debug("Rectangles edited at scale %.4f: %d total", scale, len(downscaled))
        on_rectangles_change(downscaled)


class LabellerContainer:
    """Measured region hosting the scaled window.

    The region exists before an image is shown so resize notifications are
    never lost; the window itself only renders once a fit is known.
    """

    def __init__(self, surface):
        self.resolver = ContainerFitResolver()
        self.window = ScaledLabellerWindow(surface)
        self.area = None

    def resize(self, area):
        self.area = pygame.Rect(area)
        return self.resolver.observe(Dimensions(self.area.width, self.area.height))

    def origin(self, dimensions):
        # center the image inside the region
        if self.area is None:
            return (0, 0)
        return (self.area.x + int((self.area.width - dimensions.width) // 2),
                self.area.y + int((self.area.height - dimensions.height) // 2))

    def render(self, image, rectangles, on_rectangles_change, on_select_rectangle,
               selected_id=None):
        self.resolver.set_native(Dimensions.of(image))
        fit = self.resolver.fit
        if fit is None:
            return None
        self.window.render(image, fit.displayed, fit.scale, rectangles,
                           on_rectangles_change, on_select_rectangle,
                           selected_id=selected_id, origin=self.origin(fit.displayed))
        return fit


class ImageLabeller:
    """Top-level widget: placeholder, load error, or the interactive labeller."""

    def __init__(self, surface=None, font=None):
        self.surface = surface or AnnotationSurface(font=font)
        self.font = font
        self.container = LabellerContainer(self.surface)
        self.frame = None
        self.image = None
        self.fit = None

    def resize(self, area):
        """Resize notification for the area the labeller may occupy."""
        area = pygame.Rect(area)
        frame_fit = compute_fit(FRAME_ASPECT, Dimensions(area.width, area.height))
        if frame_fit is None:
            self.frame = pygame.Rect(area.x, area.y, 0, 0)
        else:
            w, h = int(frame_fit.displayed.width), int(frame_fit.displayed.height)
            self.frame = pygame.Rect(area.x + (area.width - w) // 2,
                                     area.y + (area.height - h) // 2, w, h)
        return self.container.resize(self.frame)

    @property
    def ready(self):
        return self.fit is not None

    def render(self, image, rectangles, on_rectangles_change, on_select_rectangle=None,
               selected_id=None):
        self.image = image
        if image is None or image.status != LOADED:
            self.fit = None
            return None
        self.fit = self.container.render(
            image.surface, rectangles, on_rectangles_change,
            on_select_rectangle or _noop, selected_id=selected_id)
        return self.fit

    def handle_event(self, event):
        if not self.ready:
            return False
        return self.surface.handle_event(event)

    def draw(self, screen):
        if self.frame is None:
            return
        if self.image is not None and self.image.status == FAILED:
            self._draw_error(screen, "Failed to load image")
        elif self.image is None or self.image.status == LOADING or not self.ready:
            pygame.draw.rect(screen, SKELETON_COLOR, self.frame)
        else:
            self.surface.draw(screen)

    def _draw_error(self, screen, message):
        box = pygame.Rect(self.frame.x + 10, self.frame.y + 10, max(0, self.frame.width - 20), 40)
        pygame.draw.rect(screen, ERROR_BG_COLOR, box)
        if self.font is not None:
            img = self.font.render(message, True, ERROR_TEXT_COLOR)
            screen.blit(img, (box.x + 10, box.y + (box.height - img.get_height()) // 2))

"""Interactive rectangle surface.

Everything in here is in displayed-image pixels, relative to the top-left
corner of the drawn image. The surface has no idea the image is scaled.
"""
import logging
import uuid

import pygame

from labeller.images import scale_image
from shapes.rectangle import Rectangle

LOGGER = logging.getLogger("BoxLab.Surface")

RECT_COLOR = (255, 200, 50)
SELECTED_COLOR = (255, 220, 80)
PREVIEW_COLOR = (255, 150, 50)
LABEL_COLOR = (255, 220, 80)
SHADOW_COLOR = (10, 10, 10)
LINE_WIDTH = 2
HANDLE_SIZE = 8
HIT_TOLERANCE = 8

DRAW = 'draw'
MOVE = 'move'
RESIZE = 'resize'


def _noop(*_args):
    pass


def new_rectangle_id():
    return uuid.uuid4().hex


def square_from(anchor, point):
    # lock width == height, keeping the drag direction
    dx = point[0] - anchor[0]
    dy = point[1] - anchor[1]
    size = max(abs(dx), abs(dy))
    return (anchor[0] + (size if dx >= 0 else -size),
            anchor[1] + (size if dy >= 0 else -size))


class AnnotationSurface:

    def __init__(self, id_factory=None, label_for=None, font=None):
        self._new_id = id_factory or new_rectangle_id
        self.label_for = label_for
        self.font = font
        self.image = None
        self.dimensions = None
        self.rectangles = {}
        self.selected_id = None
        self.origin = (0, 0)
        self._on_rectangles_change = _noop
        self._on_select_rectangle = _noop
        self._scaled_image = None
        self._scaled_key = None
        self._shift = False
        self._reset_gesture()

    def _reset_gesture(self):
        self._gesture = None
        self._target_id = None
        self._handle = None
        self._start = None
        self._current = None
        self._preview = None

    @property
    def gesture(self):
        return self._gesture

    @property
    def preview(self):
        return self._preview

    def render(self, image, dimensions, rectangles, selected_id,
               on_rectangles_change, on_select_rectangle, origin=(0, 0)):
        if self._gesture and dimensions != self.dimensions:
            # the in-flight drag was measured in the old size
            LOGGER.debug("Dropping %s gesture after resize", self._gesture)
            self._reset_gesture()
        if self._gesture in (MOVE, RESIZE) and self._target_id not in rectangles:
            self._reset_gesture()
        self.image = image
        self.dimensions = dimensions
        self.rectangles = rectangles
        self.selected_id = selected_id
        self._on_rectangles_change = on_rectangles_change
        self._on_select_rectangle = on_select_rectangle
        self.origin = tuple(origin)

    def screen_rect(self):
        if self.dimensions is None:
            return pygame.Rect(0, 0, 0, 0)
        return pygame.Rect(self.origin[0], self.origin[1],
                           int(self.dimensions.width), int(self.dimensions.height))

    def to_local(self, pos):
        return (pos[0] - self.origin[0], pos[1] - self.origin[1])

    def _inside(self, point, tol=0):
        w, h = self.dimensions.width, self.dimensions.height
        return -tol <= point[0] <= w + tol and -tol <= point[1] <= h + tol

    def _clamp(self, point):
        return (min(max(point[0], 0), self.dimensions.width),
                min(max(point[1], 0), self.dimensions.height))

    def _find(self, point):
        """Top-most (rect_id, handle) under point; handle is None for a body hit."""
        ordered = list(self.rectangles.items())
        # the selected rectangle's handles win over anything stacked above it
        if self.selected_id in self.rectangles:
            handle = self.rectangles[self.selected_id].hit_test_handle(*point, tol=HIT_TOLERANCE)
            if handle is not None:
                return self.selected_id, handle
        for rect_id, rect in reversed(ordered):
            handle = rect.hit_test_handle(*point, tol=HIT_TOLERANCE)
            if handle is not None:
                return rect_id, handle
            if rect.contains(*point):
                return rect_id, None
        return None, None

    def _select(self, rect_id):
        if rect_id != self.selected_id:
            self.selected_id = rect_id
            self._on_select_rectangle(rect_id)

    def _emit(self, rectangles):
        self.rectangles = rectangles
        self._on_rectangles_change(rectangles)

    def handle_event(self, event):
        """Feed one pygame event. Returns True when the surface consumed it."""
        if self.dimensions is None:
            return False
        if event.type == pygame.KEYDOWN:
            return self._on_key_down(event)
        if event.type == pygame.KEYUP:
            if event.key in (pygame.K_LSHIFT, pygame.K_RSHIFT):
                self._shift = False
            return False
        if event.type == pygame.MOUSEBUTTONDOWN:
            return self._on_mouse_down(event)
        if event.type == pygame.MOUSEMOTION:
            return self._on_mouse_move(event)
        if event.type == pygame.MOUSEBUTTONUP:
            return self._on_mouse_up(event)
        return False

    def _on_key_down(self, event):
        if event.key in (pygame.K_LSHIFT, pygame.K_RSHIFT):
            self._shift = True
            return False
        if event.key == pygame.K_ESCAPE:
            if self._gesture:
                self._reset_gesture()
                return True
            if self.selected_id is not None:
                self._select(None)
                return True
            return False
        if event.key in (pygame.K_DELETE, pygame.K_BACKSPACE):
            if self.selected_id in self.rectangles and not self._gesture:
                removed = self.selected_id
                remaining = {k: r for k, r in self.rectangles.items() if k != removed}
                self._select(None)
                LOGGER.debug("Deleted rectangle %s", removed)
                self._emit(remaining)
                return True
        return False

    def _on_mouse_down(self, event):
        point = self.to_local(event.pos)
        if not self._inside(point, tol=HIT_TOLERANCE):
            return False
        if event.button == 3:
            self._reset_gesture()
            self._select(None)
            return True
        if event.button != 1:
            return False
        rect_id, handle = self._find(point)
        self._start = point
        self._current = point
        if rect_id is None:
            self._select(None)
            self._gesture = DRAW
            self._start = self._clamp(point)
            self._current = self._start
            self._preview = Rectangle.from_corners(self._start, self._start)
            return True
        self._select(rect_id)
        self._target_id = rect_id
        self._preview = self.rectangles[rect_id]
        if handle is not None:
            self._gesture = RESIZE
            self._handle = handle
        else:
            self._gesture = MOVE
        return True

    def _on_mouse_move(self, event):
        if not self._gesture:
            return False
        point = self.to_local(event.pos)
        self._current = point
        if self._gesture == DRAW:
            end = self._clamp(point)
            if self._shift:
                end = self._clamp(square_from(self._start, end))
            self._preview = Rectangle.from_corners(self._start, end)
        elif self._gesture == MOVE:
            original = self.rectangles[self._target_id]
            dx = point[0] - self._start[0]
            dy = point[1] - self._start[1]
            if dx or dy:
                self._preview = original.move_by(dx, dy).clamp_to(self.dimensions.width, self.dimensions.height)
            else:
                self._preview = original
        elif self._gesture == RESIZE:
            original = self.rectangles[self._target_id]
            target = self._clamp(point)
            if self._shift:
                target = self._clamp(square_from(original.opposite_corner(self._handle), target))
            self._preview = original.move_handle_to(self._handle, *target)
        return True

    def _on_mouse_up(self, event):
        if event.button != 1 or not self._gesture:
            return False
        # the release position counts as a final motion
        self._on_mouse_move(event)
        moved = self._current != self._start
        gesture, target_id, preview = self._gesture, self._target_id, self._preview
        self._reset_gesture()
        if gesture == DRAW:
            if preview.is_empty():
                return True
            rect_id = self._new_id()
            updated = dict(self.rectangles)
            updated[rect_id] = preview
            LOGGER.debug("Created rectangle %s at %s", rect_id, preview)
            self._emit(updated)
            self._select(rect_id)
            return True
        # a plain click selects; it must not rewrite the box
        if moved and preview != self.rectangles.get(target_id):
            updated = dict(self.rectangles)
            updated[target_id] = preview
            self._emit(updated)
        return True

    def _to_screen(self, rect):
        return pygame.Rect(int(self.origin[0] + rect.x), int(self.origin[1] + rect.y),
                           int(rect.width), int(rect.height))

    def _draw_label(self, screen, text, rect):
        if self.font is None:
            return
        try:
            shadow = self.font.render(text, True, SHADOW_COLOR)
            img = self.font.render(text, True, LABEL_COLOR)
        except pygame.error:
            return
        x = rect.x
        y = rect.y - img.get_height() - 2
        screen.blit(shadow, (x + 1, y + 1))
        screen.blit(img, (x, y))

    def draw(self, screen):
        if self.dimensions is None:
            return
        if self.image is not None:
            key = (id(self.image), self.dimensions)
            if key != self._scaled_key:
                self._scaled_image = scale_image(self.image, self.dimensions)
                self._scaled_key = key
            screen.blit(self._scaled_image, self.origin)
        for rect_id, rect in self.rectangles.items():
            if self._gesture in (MOVE, RESIZE) and rect_id == self._target_id:
                rect = self._preview
            srect = self._to_screen(rect)
            if rect_id == self.selected_id:
                pygame.draw.rect(screen, SELECTED_COLOR, srect, LINE_WIDTH + 1)
                half = HANDLE_SIZE // 2
                for cx, cy in ((srect.left, srect.top), (srect.right, srect.top),
                               (srect.left, srect.bottom), (srect.right, srect.bottom)):
                    pygame.draw.rect(screen, SELECTED_COLOR, (cx - half, cy - half, HANDLE_SIZE, HANDLE_SIZE))
            else:
                pygame.draw.rect(screen, RECT_COLOR, srect, LINE_WIDTH)
            if self.label_for is not None:
                self._draw_label(screen, self.label_for(rect_id), srect)
        if self._gesture == DRAW and self._preview is not None:
            pygame.draw.rect(screen, PREVIEW_COLOR, self._to_screen(self._preview), LINE_WIDTH)

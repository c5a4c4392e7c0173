import math
from dataclasses import dataclass


def round_half_away(value):
    """Round to the nearest integer, ties away from zero (2.5 -> 3, -2.5 -> -3).

    The builtin round() uses banker's rounding, which would send 0.5 to 0.
    """
    return int(math.copysign(math.floor(abs(value) + 0.5), value))


@dataclass(frozen=True)
class Rectangle:
    """Axis-aligned box. The coordinate space is whatever the caller says it is."""
    x: float
    y: float
    width: float
    height: float

    @classmethod
    def from_corners(cls, p1, p2):
        # p1/p2 may come in any order (dragging up/left)
        x1, y1 = p1
        x2, y2 = p2
        return cls(min(x1, x2), min(y1, y2), abs(x2 - x1), abs(y2 - y1))

    @property
    def right(self):
        return self.x + self.width

    @property
    def bottom(self):
        return self.y + self.height

    def is_empty(self):
        return self.width <= 0 or self.height <= 0

    def corners(self):
        # 0=top-left, 1=top-right, 2=bottom-left, 3=bottom-right
        return [
            (self.x, self.y),
            (self.right, self.y),
            (self.x, self.bottom),
            (self.right, self.bottom),
        ]

    def opposite_corner(self, idx):
        return self.corners()[3 - idx]

    def contains(self, px, py, tol=0):
        return (self.x - tol <= px <= self.right + tol
                and self.y - tol <= py <= self.bottom + tol)

    def hit_test_handle(self, px, py, tol=8):
        for i, (cx, cy) in enumerate(self.corners()):
            if (px - cx) ** 2 + (py - cy) ** 2 <= tol * tol:
                return i
        return None

    def move_by(self, dx, dy):
        return Rectangle(self.x + dx, self.y + dy, self.width, self.height)

    def move_handle_to(self, idx, px, py):
        """Return a copy with corner `idx` dragged to (px, py).

        The opposite corner stays put; dragging past it flips the box.
        """
        return Rectangle.from_corners(self.opposite_corner(idx), (px, py))

    def clamp_to(self, width, height):
        # keep the box inside [0, width] x [0, height] without changing its size
        x = min(max(self.x, 0), max(0, width - self.width))
        y = min(max(self.y, 0), max(0, height - self.height))
        return Rectangle(x, y, self.width, self.height)

    def as_tuple(self):
        return (self.x, self.y, self.width, self.height)

    def to_dict(self):
        return {'x': self.x, 'y': self.y, 'width': self.width, 'height': self.height}

    @classmethod
    def from_dict(cls, d):
        return cls(d.get('x', 0), d.get('y', 0), d.get('width', 0), d.get('height', 0))


def scale_rectangle(rect, factor):
    return Rectangle(
        round_half_away(rect.x * factor),
        round_half_away(rect.y * factor),
        round_half_away(rect.width * factor),
        round_half_away(rect.height * factor),
    )


def scale_rectangles(rectangles, factor):
    """Scale every rectangle of an id -> Rectangle mapping into a new dict.

    Going back to the original space is the same call with 1 / factor.
    """
    return {rect_id: scale_rectangle(rect, factor) for rect_id, rect in rectangles.items()}


project_rectangles = scale_rectangles

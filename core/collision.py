"""core/collision.py — Low-level AABB primitives.

These live in ``core/`` (not ``logic/``) because both the entity
components (key pickup, door range) and the physics step need them.
Keeping them here prevents a circular dependency.

Everything is a pure function of its arguments.  A box with a
non-positive width or height can never produce two positive overlaps,
so malformed boxes simply never collide.
"""

from __future__ import annotations
from dataclasses import dataclass


@dataclass(frozen=True, slots=True)
class Box:
    """Axis-aligned rectangle, top-left origin, y grows downward."""
    x: float
    y: float
    width: float
    height: float

    @property
    def left(self) -> float:
        return self.x

    @property
    def right(self) -> float:
        return self.x + self.width

    @property
    def top(self) -> float:
        return self.y

    @property
    def bottom(self) -> float:
        return self.y + self.height

    @property
    def center_x(self) -> float:
        return self.x + self.width / 2


def overlap(a: Box, b: Box) -> tuple[float, float]:
    """Return ``(overlap_x, overlap_y)`` between *a* and *b*.

    Either value may be zero or negative when the boxes are apart on
    that axis; only both-positive means the boxes intersect.
    """
    ox = min(a.right, b.right) - max(a.left, b.left)
    oy = min(a.bottom, b.bottom) - max(a.top, b.top)
    return ox, oy


def intersects(a: Box, b: Box) -> bool:
    """True iff *a* and *b* overlap by a positive amount on both axes."""
    ox, oy = overlap(a, b)
    return ox > 0 and oy > 0


def padded(box: Box, dx: float, dy: float = 0.0) -> Box:
    """Return *box* grown by *dx* on each side and *dy* top and bottom."""
    return Box(box.x - dx, box.y - dy, box.width + 2 * dx, box.height + 2 * dy)

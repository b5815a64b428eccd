"""Floating-point rectangles used for sprites, text and collision."""

from __future__ import annotations

from dataclasses import dataclass


@dataclass
class FRect:
    """An axis-aligned rectangle with a top-left corner and a size."""

    x: float = 0.0
    y: float = 0.0
    w: float = 0.0
    h: float = 0.0

    @property
    def right(self) -> float:
        return self.x + self.w

    @property
    def bottom(self) -> float:
        return self.y + self.h

    def is_empty(self) -> bool:
        """Return True if the rectangle has no area."""
        return self.w <= 0 or self.h <= 0

    def intersects(self, other: FRect) -> bool:
        """Return True if the rectangles overlap with positive area."""
        if self.is_empty() or other.is_empty():
            return False
        if min(self.right, other.right) <= max(self.x, other.x):
            return False
        return min(self.bottom, other.bottom) > max(self.y, other.y)

    def contains(self, x: float, y: float) -> bool:
        """Return True if the point lies inside; right and bottom edges excluded."""
        return self.x <= x < self.right and self.y <= y < self.bottom
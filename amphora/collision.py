"""Rectangle collision tests for sprites and map object groups."""

from __future__ import annotations

from collections.abc import Iterable
from enum import IntEnum
from typing import Any

from amphora.geometry import FRect


class Collision(IntEnum):
    """The side on which an object met an obstacle."""

    NONE = 0
    LEFT = 1
    RIGHT = 2
    TOP = 3
    BOTTOM = 4


_DIRECTIONS = (Collision.LEFT, Collision.RIGHT, Collision.TOP, Collision.BOTTOM)


def _rect(obj: Any) -> FRect:
    return obj if isinstance(obj, FRect) else obj.rectangle


def check_collision(obj_a: Any, obj_b: Any) -> bool:
    """Return True if the two objects' rectangles overlap."""
    return _rect(obj_a).intersects(_rect(obj_b))


def check_object_group_collision(obj: Any, rects: Iterable[FRect] | None) -> Collision:
    """Return the direction of the smallest overlap with the first hit rectangle."""
    if rects is None:
        return Collision.NONE
    own = _rect(obj)
    for rect in rects:
        if own.intersects(rect):
            overlaps = (
                abs(own.right - rect.x),
                abs(own.x - rect.right),
                abs(own.bottom - rect.y),
                abs(own.y - rect.bottom),
            )
            return _DIRECTIONS[min(range(4), key=overlaps.__getitem__)]
    return Collision.NONE
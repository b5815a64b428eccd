from types import SimpleNamespace

import pytest

from amphora.collision import Collision, check_collision, check_object_group_collision
from amphora.geometry import FRect


def _obj(x, y, w, h):
    return SimpleNamespace(rectangle=FRect(x, y, w, h))


def test_overlapping_objects_collide():
    assert check_collision(_obj(0, 0, 10, 10), _obj(5, 5, 10, 10)) is True


def test_touching_objects_do_not_collide():
    assert check_collision(_obj(0, 0, 10, 10), _obj(10, 0, 10, 10)) is False


def test_collision_is_symmetric():
    a, b = _obj(0, 0, 10, 10), _obj(9, 9, 3, 3)
    assert check_collision(a, b) == check_collision(b, a)


@pytest.mark.parametrize(
    "wall, expected",
    [
        (FRect(8, 0, 10, 10), Collision.LEFT),
        (FRect(-8, 0, 10, 10), Collision.RIGHT),
        (FRect(0, 8, 10, 10), Collision.TOP),
        (FRect(0, -8, 10, 10), Collision.BOTTOM),
    ],
)
def test_group_collision_direction(wall, expected):
    assert check_object_group_collision(_obj(0, 0, 10, 10), [wall]) is expected


def test_group_collision_none_when_apart():
    rects = [FRect(50, 50, 5, 5), FRect(10, 0, 5, 5)]
    assert check_object_group_collision(_obj(0, 0, 10, 10), rects) is Collision.NONE


def test_group_collision_missing_group():
    assert check_object_group_collision(_obj(0, 0, 10, 10), None) is Collision.NONE


def test_group_collision_uses_first_hit():
    rects = [FRect(100, 100, 1, 1), FRect(0, 8, 10, 10), FRect(8, 0, 10, 10)]
    assert check_object_group_collision(_obj(0, 0, 10, 10), rects) is Collision.TOP


def test_group_collision_accepts_plain_rect():
    assert check_object_group_collision(FRect(0, 0, 10, 10), [FRect(8, 0, 10, 10)]) is Collision.LEFT
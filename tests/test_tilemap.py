import base64
import struct

import pygame
import pytest

from amphora.geometry import FRect
from amphora.render import ObjectType, RenderList
from amphora.sprite import ImageLibrary
from amphora.tilemap import (
    MapManager,
    Orientation,
    tile_destination,
    tile_source_rect,
)

RED = (255, 0, 0, 255)
BLUE = (0, 0, 255, 255)
CLEAR = (0, 0, 0, 0)


class _Renderer:
    def __init__(self):
        self.render_list = RenderList()


def _map(orientation="orthogonal", ground=None):
    return {
        "orientation": orientation,
        "width": 2,
        "height": 1,
        "tilewidth": 4,
        "tileheight": 4,
        "tilesets": [{"name": "tiles", "tilewidth": 4}],
        "layers": [
            {"type": "tilelayer", "name": "ground", "data": ground or [1, 2]},
            {
                "type": "objectgroup",
                "name": "walls",
                "objects": [{"x": 1, "y": 2, "width": 3, "height": 4}],
            },
            {"type": "tilelayer", "name": "top", "data": [0, 2]},
        ],
    }


@pytest.fixture
def images(tmp_path):
    surface = pygame.Surface((8, 4))
    surface.fill(RED[:3], pygame.Rect(0, 0, 4, 4))
    surface.fill(BLUE[:3], pygame.Rect(4, 0, 4, 4))
    path = tmp_path / "tiles.bmp"
    pygame.image.save(surface, str(path))
    return ImageLibrary({"tiles": path})


@pytest.fixture
def manager(images):
    return MapManager(
        _Renderer(),
        images,
        {
            "level": _map(),
            "iso": _map("isometric"),
            "hex": _map("hexagonal"),
        },
    )


def test_tile_source_rect_first_tile():
    assert tile_source_rect(0, 4, 5, 16) == FRect(0, 0, 4, 5)


def test_tile_source_rect_wraps_to_next_row():
    assert tile_source_rect(4, 4, 5, 16) == FRect(0, 5, 4, 5)


def test_tile_source_rect_rejects_negative_index():
    with pytest.raises(ValueError):
        tile_source_rect(-1, 4, 4, 16)


def test_orthogonal_destinations_form_grid():
    a = tile_destination(0, Orientation.ORTHOGONAL, 3, 4, 5)
    b = tile_destination(1, Orientation.ORTHOGONAL, 3, 4, 5)
    c = tile_destination(3, Orientation.ORTHOGONAL, 3, 4, 5)
    assert a == (0, 0)
    assert (b[0] - a[0], b[1] - a[1]) == (4, 0)
    assert (c[0] - a[0], c[1] - a[1]) == (0, 5)


def test_isometric_destinations_step_diagonally():
    a = tile_destination(0, Orientation.ISOMETRIC, 3, 4, 2)
    b = tile_destination(1, Orientation.ISOMETRIC, 3, 4, 2)
    c = tile_destination(3, Orientation.ISOMETRIC, 3, 4, 2)
    assert (b[0] - a[0], b[1] - a[1]) == (4 // 2, 2 // 2)
    assert (c[0] - a[0], c[1] - a[1]) == (-(4 // 2), 2 - 2 // 2)


def test_set_map_draws_tiles(manager):
    manager.set_map("level", 1)
    ground, top = manager.layers
    assert [ground.name, top.name] == ["ground", "top"]
    assert ground.texture.get_size() == (8, 4)
    assert tuple(ground.texture.get_at((0, 0))) == RED
    assert tuple(ground.texture.get_at((4, 0))) == BLUE
    assert tuple(top.texture.get_at((0, 0))) == CLEAR
    assert tuple(top.texture.get_at((4, 0))) == BLUE


def test_set_map_base64_layer_matches_list(images):
    encoded = base64.b64encode(struct.pack("<2I", 1, 2)).decode()
    layer_map = _map()
    layer_map["layers"][0] = {
        "type": "tilelayer",
        "name": "ground",
        "encoding": "base64",
        "data": encoded,
    }
    mgr = MapManager(_Renderer(), images, {"enc": layer_map})
    mgr.set_map("enc", 1)
    texture = mgr.layers[0].texture
    assert tuple(texture.get_at((0, 0))) == RED
    assert tuple(texture.get_at((4, 0))) == BLUE


def test_set_map_adds_ordered_render_nodes(manager):
    manager.set_map("level", 1)
    nodes = list(manager.renderer.render_list)
    assert [n.order for n in nodes] == [0, 100]
    assert all(n.type is ObjectType.MAP for n in nodes)
    assert [n.data for n in nodes] == [layer.texture for layer in manager.layers]


def test_map_rect_is_scaled_texture(manager):
    manager.set_map("level", 2)
    w, h = manager.layers[0].texture.get_size()
    assert (manager.map_rect.w, manager.map_rect.h) == (w * 2, h * 2)


def test_zero_scale_means_one(manager):
    manager.set_map("level", 0)
    assert manager.scale == 1.0
    assert manager.rects_by_group("walls") == [FRect(1, 2, 3, 4)]


def test_object_groups_are_scaled(manager):
    manager.set_map("level", 2)
    assert manager.rects_by_group("walls") == [FRect(1 * 2, 2 * 2, 3 * 2, 4 * 2)]


def test_unknown_group_is_none(manager):
    manager.set_map("level", 1)
    assert manager.rects_by_group("doors") is None


def test_free_object_groups(manager):
    manager.set_map("level", 1)
    manager.free_object_groups()
    assert manager.rects_by_group("walls") is None


def test_isometric_texture_is_wider(manager):
    manager.set_map("iso", 1)
    assert manager.orientation is Orientation.ISOMETRIC
    assert manager.layers[0].texture.get_width() == 8 + 4 // 2


def test_unsupported_orientation_raises(manager):
    with pytest.raises(ValueError):
        manager.set_map("hex", 1)


def test_unknown_map_raises(manager):
    with pytest.raises(KeyError):
        manager.set_map("missing", 1)


def test_destroy_marks_nodes_garbage(manager):
    manager.set_map("level", 1)
    nodes = [layer.node for layer in manager.layers]
    manager.destroy_current_map()
    assert manager.layers == []
    assert all(node.garbage for node in nodes)


def test_set_map_none_clears(manager):
    manager.set_map("level", 1)
    manager.set_map(None)
    assert manager.layers == []


def test_hide_and_show_immediately(manager):
    manager.set_map("level", 1)
    node = manager.layers[0].node
    manager.hide_layer("ground", 0, 60)
    assert node.display is False
    manager.show_layer("ground", 0, 60)
    assert node.display is True
    assert manager.layers[0].a == 255


def test_hide_unknown_layer_changes_nothing(manager):
    manager.set_map("level", 1)
    manager.hide_layer("sky", 0, 60)
    assert all(layer.node.display for layer in manager.layers)


def test_fade_out_then_in(manager):
    manager.set_map("level", 1)
    layer = manager.layers[0]
    manager.hide_layer("ground", 1000, 60)
    assert manager.deferred_transition is layer
    for _ in range(200):
        if manager.deferred_transition is None:
            break
        manager.process_deferred_transition()
    assert manager.deferred_transition is None
    assert layer.node.display is False
    assert layer.a == 0
    assert layer.texture.get_alpha() == 0

    manager.show_layer("ground", 500, 60)
    assert layer.node.display is True
    for _ in range(200):
        if manager.deferred_transition is None:
            break
        manager.process_deferred_transition()
    assert manager.deferred_transition is None
    assert layer.a == 255
    assert layer.texture.get_alpha() == 255


def test_fade_requires_positive_fps(manager):
    manager.set_map("level", 1)
    with pytest.raises(ValueError):
        manager.hide_layer("ground", 500, 0)
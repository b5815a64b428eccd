"""Tiled maps drawn as layer textures, with object groups and layer fades."""

from __future__ import annotations

import base64
import gzip
import json
import logging
import struct
import zlib
from collections.abc import Mapping
from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import Any, Union

import pygame

from amphora.config import MAPS
from amphora.geometry import FRect
from amphora.render import ObjectType, RenderNode

log = logging.getLogger(__name__)

MapSource = Union[bytes, bytearray, str, Path, Mapping[str, Any]]

_OPAQUE = 0xFF
_LAYER_ORDER_STEP = 100


class Orientation(Enum):
    """Supported map projections."""

    ORTHOGONAL = "orthogonal"
    ISOMETRIC = "isometric"


@dataclass(eq=False)
class MapLayer:
    """One tile layer rendered to its own texture."""

    name: str
    texture: pygame.Surface
    node: RenderNode | None = None
    a: float = float(_OPAQUE)
    a_stp: float = 0.0
    hiding: bool = False


def tile_source_rect(
    tile_idx: int, tile_width: int, tile_height: int, tileset_width: int
) -> FRect:
    """Return the area of the tileset image holding tile ``tile_idx``.

    Tiles are laid out left to right, wrapping at ``tileset_width`` pixels.
    """
    if tile_idx < 0:
        raise ValueError(f"tile index must not be negative, got {tile_idx}")
    if tileset_width <= 0:
        raise ValueError(f"tileset width must be positive, got {tileset_width}")
    offset = tile_idx * tile_width
    return FRect(
        offset % tileset_width,
        (offset // tileset_width) * tile_height,
        tile_width,
        tile_height,
    )


def tile_destination(
    i: int,
    orientation: Orientation,
    map_width: int,
    tile_width: int,
    tile_height: int,
) -> tuple[int, int]:
    """Return the pixel position of the ``i``-th tile of a layer."""
    row_pixels = map_width * tile_width
    row = (i * tile_width) // row_pixels
    col_x = (i * tile_width) % row_pixels
    if orientation is Orientation.ORTHOGONAL:
        return col_x, row * tile_height
    col = i % map_width
    half_w = tile_width // 2
    half_h = tile_height // 2
    x = col_x + (row_pixels // 2 - col * half_w - row * half_w)
    y = row * tile_height + col * half_h - row * half_h
    return x, y


def _decode_layer_data(layer: Mapping[str, Any]) -> list[int]:
    data = layer.get("data", [])
    if isinstance(data, list):
        return [int(v) for v in data]
    encoding = layer.get("encoding", "csv")
    if encoding == "csv":
        return [int(v) for v in str(data).split(",") if v.strip()]
    if encoding != "base64":
        raise ValueError(f"unsupported layer encoding: {encoding}")
    raw = base64.b64decode(str(data).strip())
    compression = layer.get("compression") or ""
    if compression == "zlib":
        raw = zlib.decompress(raw)
    elif compression == "gzip":
        raw = gzip.decompress(raw)
    elif compression:
        raise ValueError(f"unsupported layer compression: {compression}")
    return list(struct.unpack(f"<{len(raw) // 4}I", raw[: len(raw) // 4 * 4]))


def _parse_map(source: MapSource) -> Mapping[str, Any]:
    if isinstance(source, Mapping):
        return source
    if isinstance(source, (bytes, bytearray)):
        return json.loads(bytes(source).decode("utf-8"))
    return json.loads(Path(source).read_text(encoding="utf-8"))


class MapManager:
    """Loads named maps, tracks their layers, object groups and fades."""

    def __init__(
        self,
        renderer: Any,
        images: Any,
        maps: Mapping[str, MapSource] | None = None,
    ) -> None:
        self.renderer = renderer
        self.images = images
        self.maps: dict[str, MapSource] = dict(MAPS if maps is None else maps)
        self.layers: list[MapLayer] = []
        self.scale = 1.0
        self.orientation = Orientation.ORTHOGONAL
        self.map_rect = FRect()
        self.object_groups: list[tuple[str, list[FRect]]] = []
        self.deferred_transition: MapLayer | None = None
        for name in self.maps:
            log.debug("Found map %s", name)

    def set_map(self, name: str | None, scale: float = 1.0) -> None:
        """Replace the current map with the named one; None just clears it."""
        self.destroy_current_map()
        if name is None:
            return
        try:
            source = self.maps[name]
        except KeyError:
            raise KeyError(f"unknown map: {name}") from None
        self.scale = scale if scale else 1.0
        data = _parse_map(source)

        try:
            orientation = Orientation(data.get("orientation"))
        except ValueError:
            raise ValueError(
                f"Failed to create texture from map {name}: "
                f"unsupported orientation {data.get('orientation')!r}"
            ) from None
        self.orientation = orientation

        width = int(data["width"])
        height = int(data["height"])
        tile_w = int(data["tilewidth"])
        tile_h = int(data["tileheight"])
        tileset = data["tilesets"][0]
        tileset_img = self.images.texture(tileset["name"])
        set_tile_w = int(tileset.get("tilewidth", tile_w))
        tex_w = width * tile_w
        if orientation is Orientation.ISOMETRIC:
            tex_w += tile_w // 2
        tex_size = (tex_w, height * tile_h)

        layers: list[MapLayer] = []
        for layer in data.get("layers", []):
            kind = layer.get("type")
            if kind == "tilelayer":
                texture = pygame.Surface(tex_size, pygame.SRCALPHA)
                tileset_width = tileset_img.get_width()
                for i, gid in enumerate(_decode_layer_data(layer)):
                    idx = gid - 1
                    if idx < 0:
                        continue
                    src = tile_source_rect(idx, set_tile_w, tile_h, tileset_width)
                    area = pygame.Rect(int(src.x), int(src.y), tile_w, tile_h)
                    dest = tile_destination(i, orientation, width, tile_w, tile_h)
                    texture.blit(tileset_img, dest, area)
                layers.append(MapLayer(name=str(layer.get("name", "")), texture=texture))
            elif kind == "objectgroup":
                self._parse_object_group(layer)

        if layers:
            base_w, base_h = layers[0].texture.get_size()
            self.map_rect.w = base_w * self.scale
            self.map_rect.h = base_h * self.scale
        for i, layer in enumerate(layers):
            node = self.renderer.render_list.add(_LAYER_ORDER_STEP * i)
            node.type = ObjectType.MAP
            node.data = layer.texture
            layer.node = node
        self.layers = layers

    def _parse_object_group(self, layer: Mapping[str, Any]) -> None:
        rects = [
            FRect(
                float(obj.get("x", 0)) * self.scale,
                float(obj.get("y", 0)) * self.scale,
                float(obj.get("width", 0)) * self.scale,
                float(obj.get("height", 0)) * self.scale,
            )
            for obj in layer.get("objects", [])
        ]
        self.object_groups.append((str(layer.get("name", "")), rects))

    def _layer(self, name: str) -> MapLayer | None:
        return next((layer for layer in self.layers if layer.name == name), None)

    @staticmethod
    def _fade_step(t: int, fps: float) -> float:
        if fps <= 0:
            raise ValueError(f"fps must be positive, got {fps}")
        return _OPAQUE / ((t / 1000) * fps)

    def hide_layer(self, name: str, t: int, fps: float) -> None:
        """Hide a layer at once, or fade it out over ``t`` milliseconds."""
        layer = self._layer(name)
        if layer is None:
            return
        if t < 1:
            layer.node.display = False
            return
        layer.a_stp = self._fade_step(t, fps)
        layer.hiding = True
        self.deferred_transition = layer

    def show_layer(self, name: str, t: int, fps: float) -> None:
        """Show a layer at once, or fade it in over ``t`` milliseconds."""
        layer = self._layer(name)
        if layer is None:
            return
        layer.node.display = True
        if t < 1:
            layer.a = float(_OPAQUE)
            return
        layer.a_stp = self._fade_step(t, fps)
        layer.hiding = False
        self.deferred_transition = layer

    def rects_by_group(self, name: str) -> list[FRect] | None:
        """Return the rectangles of the named object group, or None if absent."""
        for label, rects in self.object_groups:
            if label == name:
                return rects
        log.error("Could not find object group: %s", name)
        return None

    @staticmethod
    def _apply_alpha(layer: MapLayer) -> None:
        layer.texture.set_alpha(max(0, min(_OPAQUE, int(layer.a))))

    def process_deferred_transition(self) -> None:
        """Advance the pending layer fade by one frame."""
        layer = self.deferred_transition
        if layer is None:
            return
        if layer.hiding:
            layer.a -= layer.a_stp
            if layer.a <= 1:
                layer.node.display = False
                layer.a = 0.0
                self._apply_alpha(layer)
                self.deferred_transition = None
                return
        else:
            layer.a += layer.a_stp
            if layer.a >= _OPAQUE:
                layer.a = float(_OPAQUE)
                self._apply_alpha(layer)
                self.deferred_transition = None
                return
        self._apply_alpha(layer)

    def destroy_current_map(self) -> None:
        """Drop the current map's layers from the render list."""
        for layer in self.layers:
            if layer.node is not None:
                layer.node.garbage = True
        self.layers = []
        self.deferred_transition = None

    def free_object_groups(self) -> None:
        """Forget every loaded object group."""
        self.object_groups.clear()
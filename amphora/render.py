"""Window, camera and the ordered list of things drawn each frame."""

from __future__ import annotations

import bisect
from collections.abc import Iterator
from dataclasses import dataclass
from enum import Enum, auto
from operator import attrgetter
from typing import Any

import pygame

from amphora.config import GAME_TITLE, Color, WindowMode, color
from amphora.geometry import FRect

_SDL_FULLSCREEN = 0x00000001

Size = tuple[int, int]


class ObjectType(Enum):
    """Kinds of object a render node can hold."""

    SPRITE = auto()
    TEXT = auto()
    MAP = auto()
    NIL = auto()


class CameraMode(Enum):
    """Whether the camera is placed by hand or follows a sprite."""

    MANUAL = auto()
    TRACKING = auto()


@dataclass(eq=False)
class RenderNode:
    """One entry in the render list."""

    order: int
    type: ObjectType = ObjectType.NIL
    data: Any = None
    garbage: bool = False
    display: bool = True
    stationary: bool = False


class RenderList:
    """Render nodes kept sorted by draw order; equal orders keep insertion order."""

    def __init__(self) -> None:
        self._nodes: list[RenderNode] = []

    def add(self, order: int) -> RenderNode:
        """Insert and return a new visible node with the given draw order."""
        node = RenderNode(order=order)
        index = bisect.bisect_right(self._nodes, order, key=attrgetter("order"))
        self._nodes.insert(index, node)
        return node

    def collect_garbage(self) -> None:
        """Drop every node marked as garbage."""
        self._nodes = [node for node in self._nodes if not node.garbage]

    def __iter__(self) -> Iterator[RenderNode]:
        return iter(self._nodes)

    def __len__(self) -> int:
        return len(self._nodes)

    def clear(self) -> None:
        """Free the sprites and strings held by the list and empty it."""
        nodes, self._nodes = self._nodes, []
        for node in nodes:
            if node.type in (ObjectType.SPRITE, ObjectType.TEXT):
                free = getattr(node.data, "free", None)
                if callable(free):
                    free()


def _as_frect(rect: Any) -> FRect:
    if isinstance(rect, FRect):
        return rect
    if isinstance(rect, pygame.Rect):
        return FRect(rect.x, rect.y, rect.w, rect.h)
    x, y, w, h = rect
    return FRect(x, y, w, h)


def _trunc_div(a: int, b: int) -> int:
    q = abs(a) // abs(b)
    return q if (a >= 0) == (b >= 0) else -q


class Renderer:
    """The game window with a logical drawing size, a camera and a render list."""

    def __init__(self, size: Size, flags: int = WindowMode.FIXED) -> None:
        pygame.display.init()
        self.flags = int(flags)
        self._windowed_size: Size = (int(size[0]), int(size[1]))
        self._fullscreen = bool(self.flags & _SDL_FULLSCREEN)
        self.window = self._create_window()
        self.logical_size: Size = self.resolution()
        self.camera: tuple[float, float] = (0.0, 0.0)
        self.camera_mode = CameraMode.MANUAL
        self.camera_target: Any = None
        self.camera_boundary = FRect()
        self.bg: Color = color("black")
        self.render_list = RenderList()
        self._zoom_factor = 100
        self._zoom_steps: list[Size] | None = None
        self._zoom_index = 0
        self._zoom_count = 0

    def _create_window(self) -> pygame.Surface:
        pg_flags = 0
        size = self._windowed_size
        if self._fullscreen:
            pg_flags |= pygame.FULLSCREEN
            size = (0, 0)
        if self.flags & WindowMode.RESIZABLE:
            pg_flags |= pygame.RESIZABLE
        window = pygame.display.set_mode(size, pg_flags)
        pygame.display.set_caption(GAME_TITLE)
        return window

    def resolution(self) -> Size:
        """Return the window size in pixels."""
        w, h = self.window.get_size()
        return (w, h)

    def set_logical_size(self, size: Size) -> None:
        """Set the size of the drawing area that is scaled to fit the window."""
        self.logical_size = (int(size[0]), int(size[1]))

    def set_camera(self, x: float, y: float) -> None:
        """Place the camera's top-left corner."""
        self.camera = (x, y)

    def move_camera(self, delta_x: float, delta_y: float) -> None:
        """Move the camera by the given amounts."""
        self.camera = (self.camera[0] + delta_x, self.camera[1] + delta_y)

    def set_camera_target(self, target: Any) -> None:
        """Follow ``target``'s centre, or stop following when it is None."""
        self.camera_mode = CameraMode.TRACKING if target is not None else CameraMode.MANUAL
        self.camera_target = target

    def bound_camera(self, boundary: FRect) -> None:
        """Keep the tracking camera inside ``boundary``."""
        self.camera_boundary = _as_frect(boundary)

    def unbound_camera(self) -> None:
        """Remove the camera boundary."""
        self.camera_boundary = FRect()

    def set_camera_zoom(self, factor: int, delay: int) -> None:
        """Advance a zoom to ``factor`` percent spread over ``delay`` calls."""
        if factor <= 0:
            raise ValueError(f"zoom factor must be positive, got {factor}")
        res_x, res_y = self.resolution()
        log_x, log_y = self.logical_size
        divisor = delay if delay else 1
        step_x = _trunc_div(log_x - (res_x * 100) // factor, divisor)
        step_y = _trunc_div(log_y - (res_y * 100) // factor, divisor)

        if self._zoom_steps is None and delay > 0:
            self._zoom_count = delay
            if factor == self._zoom_factor:
                return
            self._zoom_factor = factor
            self._zoom_steps = [
                (log_x - step_x * (i + 1), log_y - step_y * (i + 1))
                for i in range(self._zoom_count)
            ]
        if (
            self._zoom_steps is None
            or self._zoom_index == self._zoom_count
            or factor != self._zoom_factor
        ):
            self._zoom_steps = None
            self._zoom_index = 0
            self._zoom_count = 0
            if self._zoom_factor == 100:
                self.set_logical_size((res_x, res_y))
            return
        self.set_logical_size(self._zoom_steps[self._zoom_index])
        self._zoom_index += 1

    def reset_camera_zoom(self, delay: int) -> None:
        """Advance a zoom back to 100 percent."""
        self.set_camera_zoom(100, delay)

    def update_camera(self) -> None:
        """Centre a tracking camera on its target, clamped to the boundary."""
        if self.camera_mode is CameraMode.MANUAL:
            return
        center_x, center_y = self.camera_target.center()
        log_x, log_y = self.logical_size
        cam_x = center_x - log_x / 2.0
        cam_y = center_y - log_y / 2.0
        bound = self.camera_boundary
        if bound.w or bound.h:
            if cam_x < bound.x or cam_x + log_x > bound.x + bound.w:
                cam_x = bound.x + bound.w - log_x if cam_x > 0 else 0.0
            if cam_y < bound.y or cam_y + log_y > bound.y + bound.h:
                cam_y = bound.y + bound.h - log_y if cam_y > 0 else 0.0
        self.camera = (cam_x, cam_y)

    def set_fullscreen(self) -> None:
        """Switch the window to desktop fullscreen."""
        self._fullscreen = True
        self.window = self._create_window()

    def set_windowed(self) -> None:
        """Switch the window back to its windowed size."""
        self._fullscreen = False
        self.window = self._create_window()

    def is_fullscreen(self) -> bool:
        """Return True if the window is fullscreen."""
        return self._fullscreen

    def clear(self) -> None:
        """Fill the window with the background colour."""
        self.window.fill(tuple(self.bg))

    def _scale_and_offset(self) -> tuple[float, float, float]:
        res_x, res_y = self.resolution()
        log_x, log_y = self.logical_size
        if log_x <= 0 or log_y <= 0:
            return 1.0, 0.0, 0.0
        scale = min(res_x / log_x, res_y / log_y)
        return scale, (res_x - log_x * scale) / 2, (res_y - log_y * scale) / 2

    def render_texture(
        self,
        texture: pygame.Surface,
        src: Any = None,
        dst: Any = None,
        flip: bool = False,
    ) -> None:
        """Draw part of ``texture`` into ``dst`` in logical coordinates."""
        image = texture
        if src is not None:
            s = _as_frect(src)
            area = pygame.Rect(int(s.x), int(s.y), int(s.w), int(s.h)).clip(
                texture.get_rect()
            )
            if area.w <= 0 or area.h <= 0:
                return
            image = texture.subsurface(area)
        d = (
            FRect(0, 0, *self.logical_size)
            if dst is None
            else _as_frect(dst)
        )
        scale, off_x, off_y = self._scale_and_offset()
        width = round(d.w * scale)
        height = round(d.h * scale)
        if width <= 0 or height <= 0:
            return
        if image.get_size() != (width, height):
            image = pygame.transform.scale(image, (width, height))
        if flip:
            image = pygame.transform.flip(image, True, False)
        self.window.blit(image, (round(off_x + d.x * scale), round(off_y + d.y * scale)))

    def process_render_list(self, map_rect: FRect | None = None) -> None:
        """Drop garbage nodes and draw every visible node in order."""
        self.render_list.collect_garbage()
        now = pygame.time.get_ticks()
        cam_x, cam_y = self.camera
        for node in list(self.render_list):
            if node.garbage or not node.display:
                continue
            if node.type is ObjectType.SPRITE:
                node.data.draw(self, now)
            elif node.type is ObjectType.TEXT:
                node.data.draw(self)
            elif node.type is ObjectType.MAP:
                if map_rect is None:
                    w, h = node.data.get_size()
                else:
                    w, h = map_rect.w, map_rect.h
                self.render_texture(node.data, None, FRect(-cam_x, -cam_y, w, h), False)

    def present(self) -> None:
        """Show the drawn frame."""
        pygame.display.flip()

    def close(self) -> None:
        """Close the window."""
        pygame.display.quit()
"""Animated sprites built from framesets and the image library behind them."""

from __future__ import annotations

import io
import logging
from collections.abc import Callable, Mapping
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, BinaryIO, Union

import pygame

from amphora.config import IMAGES
from amphora.errors import AmphoraError, StatusCode
from amphora.geometry import FRect
from amphora.render import ObjectType, RenderNode

log = logging.getLogger(__name__)

ImageSource = Union[bytes, bytearray, str, Path, BinaryIO]


@dataclass
class Frameset:
    """A strip of equally sized animation frames on a texture."""

    sx: int
    sy: int
    w: int
    h: int
    num_frames: int = 1
    delay: int = 0
    position_offset: tuple[float, float] = (0.0, 0.0)
    override_img: pygame.Surface | None = None
    current_frame: int = -1
    last_change: int = 0
    callback: Callable[[], None] | None = field(default=None, repr=False)
    playing_oneshot: bool = False

    def source_rect(self) -> FRect:
        """Return the area of the texture holding the current frame."""
        frame = max(self.current_frame, 0)
        return FRect(self.sx + self.w * frame, self.sy, self.w, self.h)


class Sprite:
    """An image placed in the world, animated through named framesets."""

    def __init__(
        self,
        renderer: Any,
        image: pygame.Surface,
        x: float = 0.0,
        y: float = 0.0,
        scale: float = 1.0,
        flip: bool = False,
        stationary: bool = False,
        order: int = 0,
    ) -> None:
        self.type = ObjectType.SPRITE
        self.image = image
        self.rectangle = FRect(x, y, 0.0, 0.0)
        self.scale = scale
        self.flipped = bool(flip)
        self.library: ImageLibrary | None = None
        self.framesets: dict[str, int] = {}
        self.frameset_list: list[Frameset] = []
        self.current_frameset = 0
        self.freed = False
        self._renderer = renderer
        node = renderer.render_list.add(order)
        node.type = ObjectType.SPRITE
        node.data = self
        node.stationary = bool(stationary)
        self.render_node: RenderNode = node

    def _current(self) -> Frameset:
        if not self.frameset_list:
            raise AmphoraError(
                StatusCode.FAIL_UNDEFINED, "sprite has no framesets"
            )
        return self.frameset_list[self.current_frameset]

    def _frameset(self, name: str) -> tuple[int, Frameset]:
        try:
            idx = self.framesets[name]
        except KeyError:
            raise KeyError(f"unknown frameset: {name}") from None
        return idx, self.frameset_list[idx]

    def _resize_to(self, frameset: Frameset) -> None:
        self.rectangle.w = float(frameset.w) * self.scale
        self.rectangle.h = float(frameset.h) * self.scale

    def position(self) -> tuple[float, float]:
        """Return the top-left corner in world pixels."""
        return (self.rectangle.x, self.rectangle.y)

    def center(self) -> tuple[float, float]:
        """Return the centre of the current frame in world pixels."""
        fs = self._current()
        off_x, off_y = fs.position_offset
        return (
            self.rectangle.x + fs.w / 2 - off_x,
            self.rectangle.y + fs.h / 2 - off_y,
        )

    def add_frameset(
        self,
        name: str,
        sx: int,
        sy: int,
        w: int,
        h: int,
        off_x: float = 0.0,
        off_y: float = 0.0,
        num_frames: int = 1,
        delay: int = 0,
        override_img: str | pygame.Surface | None = None,
    ) -> None:
        """Add a frameset; the first one added becomes current.

        ``override_img`` is a texture, or an image name looked up in the
        sprite's library, drawn instead of the sprite's own image.
        """
        override = override_img
        if isinstance(override_img, str):
            if self.library is None:
                raise AmphoraError(
                    StatusCode.FAIL_UNDEFINED,
                    f"cannot resolve image {override_img} without a library",
                )
            override = self.library.texture(override_img)
        self.frameset_list.append(
            Frameset(
                sx=sx,
                sy=sy,
                w=w,
                h=h,
                num_frames=num_frames,
                delay=delay,
                position_offset=(off_x, off_y),
                override_img=override,
            )
        )
        self.framesets[name] = len(self.frameset_list) - 1
        if len(self.frameset_list) == 1:
            self.current_frameset = 0
            self._resize_to(self.frameset_list[0])

    def set_frameset(self, name: str) -> None:
        """Switch to the named frameset, ending any one-shot on it."""
        idx, fs = self._frameset(name)
        if idx == self.current_frameset:
            return
        fs.playing_oneshot = False
        self.current_frameset = idx
        self._resize_to(fs)

    def play_oneshot(
        self,
        name: str,
        callback: Callable[[], None] | None = None,
        now: int | None = None,
    ) -> None:
        """Play the named frameset once, hold its last frame and run ``callback``."""
        idx, fs = self._frameset(name)
        if idx == self.current_frameset:
            return
        if now is None:
            now = pygame.time.get_ticks()
        fs.playing_oneshot = True
        self.current_frameset = idx
        self._resize_to(fs)
        fs.current_frame = -1
        fs.last_change = now
        fs.callback = callback

    def set_frameset_animation_time(self, name: str, delay: int) -> None:
        """Set the milliseconds between frames of the named frameset."""
        _, fs = self._frameset(name)
        fs.delay = delay

    def reorder(self, order: int) -> Sprite:
        """Move the sprite to a new draw order."""
        old = self.render_node
        node = self._renderer.render_list.add(order)
        node.type = ObjectType.SPRITE
        node.data = self
        node.display = old.display
        node.stationary = old.stationary
        old.garbage = True
        self.render_node = node
        return self

    def set_location(self, x: float, y: float) -> None:
        """Place the sprite's top-left corner."""
        self.rectangle.x = x
        self.rectangle.y = y

    def move(self, delta_x: float, delta_y: float) -> None:
        """Move the sprite by the given amounts."""
        self.rectangle.x += delta_x
        self.rectangle.y += delta_y

    def flip(self) -> None:
        """Draw the sprite mirrored horizontally."""
        self.flipped = True

    def unflip(self) -> None:
        """Draw the sprite unmirrored."""
        self.flipped = False

    def show(self) -> None:
        """Make the sprite visible."""
        self.render_node.display = True

    def hide(self) -> None:
        """Hide the sprite without freeing it."""
        self.render_node.display = False

    def free(self) -> None:
        """Release the sprite and drop it from the render list."""
        if self.freed:
            return
        if getattr(self._renderer, "camera_target", None) is self:
            self._renderer.set_camera_target(None)
        self.frameset_list.clear()
        self.framesets.clear()
        self.render_node.garbage = True
        self.freed = True

    def advance(self, now: int) -> FRect:
        """Step the animation to time ``now`` and return the frame's source area."""
        fs = self._current()
        if now - fs.last_change > fs.delay:
            fs.current_frame += 1
            if fs.current_frame == fs.num_frames:
                if fs.playing_oneshot:
                    fs.current_frame -= 1
                    if fs.callback is not None:
                        fs.callback()
                else:
                    fs.current_frame = 0
            fs.last_change = now
        if fs.current_frame == -1:
            fs.current_frame = 0
        return fs.source_rect()

    def draw(self, renderer: Any, now: int) -> None:
        """Advance the animation and draw the current frame."""
        if not (self.render_node.display and self.frameset_list):
            return
        fs = self._current()
        src = self.advance(now)
        w = float(fs.w) * self.scale
        h = float(fs.h) * self.scale
        rect = self.rectangle
        stationary = self.render_node.stationary
        if stationary:
            res_x, res_y = renderer.resolution()
            dst = FRect(
                rect.x if rect.x > 0 else res_x + rect.x - fs.w,
                rect.y if rect.y > 0 else res_y + rect.y - fs.h,
                w,
                h,
            )
            logical_size = renderer.logical_size
            renderer.set_logical_size(renderer.resolution())
        else:
            cam_x, cam_y = renderer.camera
            off_x, off_y = fs.position_offset
            dst = FRect(rect.x - off_x - cam_x, rect.y - off_y - cam_y, w, h)
        texture = fs.override_img if fs.override_img is not None else self.image
        renderer.render_texture(texture, src, dst, self.flipped)
        if stationary:
            renderer.set_logical_size(logical_size)


def _load_image(source: ImageSource) -> pygame.Surface:
    if isinstance(source, (bytes, bytearray)):
        return pygame.image.load(io.BytesIO(bytes(source)))
    if isinstance(source, (str, Path)):
        return pygame.image.load(str(source))
    return pygame.image.load(source)


class ImageLibrary:
    """Named image sources, loaded into textures the first time they are used."""

    def __init__(self, sources: Mapping[str, ImageSource] | None = None) -> None:
        self.sources: dict[str, ImageSource] = dict(
            IMAGES if sources is None else sources
        )
        self._open: dict[str, pygame.Surface] = {}
        for name in self.sources:
            log.debug("Found image %s", name)

    def texture(self, name: str) -> pygame.Surface:
        """Return the texture for ``name``, loading it on first use."""
        if name not in self._open:
            try:
                source = self.sources[name]
            except KeyError:
                raise KeyError(f"unknown image: {name}") from None
            self._open[name] = _load_image(source)
        return self._open[name]

    def create_sprite(
        self,
        renderer: Any,
        image_name: str,
        x: float = 0.0,
        y: float = 0.0,
        scale: float = 1.0,
        flip: bool = False,
        stationary: bool = False,
        order: int = 0,
    ) -> Sprite:
        """Create a sprite showing the named image."""
        sprite = Sprite(
            renderer, self.texture(image_name), x, y, scale, flip, stationary, order
        )
        sprite.library = self
        return sprite

    def close(self) -> None:
        """Drop every loaded texture."""
        self._open.clear()
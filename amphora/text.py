"""Text strings rendered with named TrueType fonts."""

from __future__ import annotations

import io
import logging
from collections.abc import Mapping
from pathlib import Path
from typing import Any, BinaryIO, Union

import pygame

from amphora.config import FONTS, Color
from amphora.geometry import FRect
from amphora.render import ObjectType, RenderNode

log = logging.getLogger(__name__)

MAX_STR_LEN = 4096

FontSource = Union[bytes, bytearray, str, Path, BinaryIO, None]


def visible_text(text: str, n: int) -> str:
    """Return the part of ``text`` shown when ``n`` characters are displayed.

    ``n`` of 0 shows everything; otherwise the first ``n - 1`` characters.
    """
    if n:
        return text[: n - 1]
    return text


def _bounded(text: str) -> str:
    return text[: MAX_STR_LEN - 1]


class TextString:
    """A piece of text placed on screen and kept rendered to a texture."""

    def __init__(
        self,
        renderer: Any,
        font: pygame.font.Font,
        pt: int,
        x: float,
        y: float,
        order: int,
        color: Color,
        stationary: bool,
        text: str,
    ) -> None:
        self.type = ObjectType.TEXT
        self.font = font
        self.pt = pt
        self.color = Color(*color)
        self.text = _bounded(text)
        self.n = 0
        self.rectangle = FRect(x, y, 0.0, 0.0)
        self.freed = False
        node = renderer.render_list.add(order)
        node.type = ObjectType.TEXT
        node.data = self
        node.stationary = bool(stationary)
        self.render_node: RenderNode = node
        self.texture: pygame.Surface | None = self._render()

    def _render(self) -> pygame.Surface:
        shown = visible_text(self.text, self.n)
        surface = self.font.render(shown, True, tuple(self.color))
        w, h = self.font.size(shown)
        self.rectangle.w = float(w)
        self.rectangle.h = float(h)
        return surface

    def __len__(self) -> int:
        return len(self.text)

    def update_text(self, text: str) -> TextString:
        """Replace the text and re-render it."""
        self.text = _bounded(text)
        self.texture = self._render()
        return self

    def set_chars_displayed(self, n: int) -> TextString:
        """Limit how much of the text is shown; 0, or ``n`` past the end, shows all."""
        if n >= len(self.text):
            n = 0
        self.n = n
        self.texture = self._render()
        return self

    def free(self) -> None:
        """Release the texture and drop the string from the render list."""
        if self.freed:
            return
        self.texture = None
        self.render_node.garbage = True
        self.freed = True

    def draw(self, renderer: Any) -> None:
        """Draw the text; stationary strings use screen coordinates."""
        if self.texture is None:
            return
        rect = self.rectangle
        stationary = self.render_node.stationary
        if stationary:
            res_x, res_y = renderer.resolution()
            pos = FRect(
                rect.x if rect.x > 0 else res_x + rect.x - rect.w,
                rect.y if rect.y > 0 else res_y + rect.y - rect.h,
                rect.w,
                rect.h,
            )
            logical_size = renderer.logical_size
            renderer.set_logical_size(renderer.resolution())
        else:
            cam_x, cam_y = renderer.camera
            pos = FRect(rect.x - cam_x, rect.y - cam_y, rect.w, rect.h)
        renderer.render_texture(self.texture, None, pos, False)
        if stationary:
            renderer.set_logical_size(logical_size)


class FontLibrary:
    """Named font sources, opened per point size on first use.

    A source of ``None`` selects pygame's built-in default font.
    """

    def __init__(self, sources: Mapping[str, FontSource] | None = None) -> None:
        pygame.font.init()
        self.sources: dict[str, FontSource] = dict(
            FONTS if sources is None else sources
        )
        self._open: dict[tuple[str, int], pygame.font.Font] = {}
        for name in self.sources:
            log.debug("Found font %s", name)

    def _font(self, name: str, pt: int) -> pygame.font.Font:
        if name not in self.sources:
            raise KeyError(f"Unable to locate font {name}")
        key = (name, pt)
        if key not in self._open:
            source = self.sources[name]
            if isinstance(source, (bytes, bytearray)):
                source = io.BytesIO(bytes(source))
            elif isinstance(source, Path):
                source = str(source)
            self._open[key] = pygame.font.Font(source, pt)
        return self._open[key]

    def create_string(
        self,
        renderer: Any,
        font_name: str,
        pt: int,
        x: float,
        y: float,
        order: int,
        color: Color,
        stationary: bool,
        text: str,
    ) -> TextString:
        """Create a string in the named font and add it to the render list."""
        font = self._font(font_name, pt)
        return TextString(renderer, font, pt, x, y, order, color, stationary, text)

    def close(self) -> None:
        """Drop every opened font."""
        self._open.clear()
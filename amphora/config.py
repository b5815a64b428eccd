"""Game settings, default key bindings, colours and resource lists."""

from __future__ import annotations

from dataclasses import dataclass
from enum import IntFlag
from typing import NamedTuple

GAME_TITLE = "Orientalis"
GAME_AUTHOR = "Syoma Codes"

FRAMERATE = 60
WINDOW_X = 1280
WINDOW_Y = 720


class WindowMode(IntFlag):
    """Window creation flags (SDL window flag values)."""

    FIXED = 0x00000004
    RESIZABLE = 0x00000020
    FULLSCREEN = 0x00001001


WINDOW_MODE = WindowMode.FIXED


class Color(NamedTuple):
    """An RGBA colour with 8-bit channels."""

    r: int
    g: int
    b: int
    a: int = 0xFF


COLORS: dict[str, Color] = {
    "black": Color(0x00, 0x00, 0x00),
    "white": Color(0xFF, 0xFF, 0xFF),
    "red": Color(0xFF, 0x00, 0x00),
    "green": Color(0x00, 0xFF, 0x00),
    "blue": Color(0x00, 0x00, 0xFF),
    "sky": Color(0x87, 0xCE, 0xEB),
}


def color(name: str) -> Color:
    """Return the named colour; raises ``KeyError`` for unknown names."""
    try:
        return COLORS[name]
    except KeyError:
        raise KeyError(f"unknown colour: {name}") from None


@dataclass(frozen=True)
class KeyBinding:
    """Default keyboard key and controller button for one action."""

    action: str
    key: int
    key_name: str
    button: int
    button_name: str


# Keycodes and controller buttons use SDL2 numbering.
DEFAULT_KEYMAP: tuple[KeyBinding, ...] = (
    KeyBinding("left", 97, "A", 13, "DPAD_LEFT"),
    KeyBinding("right", 100, "D", 14, "DPAD_RIGHT"),
    KeyBinding("up", 119, "W", 11, "DPAD_UP"),
    KeyBinding("down", 115, "S", 12, "DPAD_DOWN"),
    KeyBinding("attack", 32, "Space", 0, "A"),
    KeyBinding("menu", 0x400000E1, "Left Shift", 1, "B"),
)

MAX_ACTIONS = 32
if len(DEFAULT_KEYMAP) > MAX_ACTIONS:
    raise RuntimeError(f"Cannot define more than {MAX_ACTIONS} actions")


def action_names() -> tuple[str, ...]:
    """Return the action names in keymap order."""
    return tuple(binding.action for binding in DEFAULT_KEYMAP)


IMAGES: dict[str, str] = {}
FONTS: dict[str, str] = {
    "Merriweather": "../content/font/Merriweather/Merriweather-Regular.ttf",
}
MAPS: dict[str, str] = {}
SFX: dict[str, str] = {}
MUSIC: dict[str, str] = {}

SCENES: tuple[str, ...] = ()
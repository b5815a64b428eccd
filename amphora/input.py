"""Key and controller bindings, action state and mouse hit testing."""

from __future__ import annotations

import logging
from collections.abc import Callable, Iterator, Sequence
from typing import Any

from amphora.config import DEFAULT_KEYMAP, action_names
from amphora.geometry import FRect
from amphora.storage import GameDatabase

log = logging.getLogger(__name__)

MASK = 0xFFFFFFFE
MAX_CONTROLLERS = 4
_MASK32 = 0xFFFFFFFF
_SCANCODE_MASK = 1 << 30

_SPECIAL_KEY_NAMES = {
    8: "Backspace",
    9: "Tab",
    13: "Return",
    27: "Escape",
    32: "Space",
    127: "Delete",
    _SCANCODE_MASK | 0x4F: "Right",
    _SCANCODE_MASK | 0x50: "Left",
    _SCANCODE_MASK | 0x51: "Down",
    _SCANCODE_MASK | 0x52: "Up",
    _SCANCODE_MASK | 0xE0: "Left Ctrl",
    _SCANCODE_MASK | 0xE1: "Left Shift",
    _SCANCODE_MASK | 0xE2: "Left Alt",
    _SCANCODE_MASK | 0xE4: "Right Ctrl",
    _SCANCODE_MASK | 0xE5: "Right Shift",
    _SCANCODE_MASK | 0xE6: "Right Alt",
}
_SPECIAL_KEY_NAMES.update(
    {_SCANCODE_MASK | (0x3A + i): f"F{i + 1}" for i in range(12)}
)


def _key_name(keycode: int) -> str:
    if keycode in _SPECIAL_KEY_NAMES:
        return _SPECIAL_KEY_NAMES[keycode]
    if 33 <= keycode < 127:
        return chr(keycode).upper()
    return ""


def clear_mask(index: int) -> int:
    """Return a 32-bit mask with every bit set except bit ``index``."""
    if index == 0:
        return MASK
    return ((MASK << index) | (MASK >> (32 - index))) & _MASK32


class InputState:
    """Which actions are held, read by action name."""

    def __init__(self, bits: int = 0) -> None:
        self.bits = bits & _MASK32

    def pressed(self, action: str) -> bool:
        """Return True if ``action`` is held; raises ``KeyError`` for unknown actions."""
        names = action_names()
        if action not in names:
            raise KeyError(f"unknown action: {action}")
        return bool(self.bits >> names.index(action) & 1)

    def __getattr__(self, name: str) -> bool:
        if name in action_names():
            return self.pressed(name)
        raise AttributeError(name)

    def __repr__(self) -> str:
        held = [name for name in action_names() if self.pressed(name)]
        return f"InputState({held})"


def _rectangle_of(obj: Any) -> FRect | None:
    rect = getattr(obj, "rectangle", None)
    return rect if isinstance(rect, FRect) else None


def object_hovered(
    obj: Any, mouse_pos: tuple[int, int], camera: tuple[float, float]
) -> bool:
    """Return True if the mouse, offset by the camera, lies over ``obj``."""
    rect = _rectangle_of(obj)
    if rect is None:
        return False
    x, y = mouse_pos
    return rect.contains(float(x) + camera[0], float(y) + camera[1])


def _button_mask(pressed_buttons: int | Sequence[bool]) -> int:
    if isinstance(pressed_buttons, int):
        return pressed_buttons
    mask = 0
    for i, down in enumerate(pressed_buttons):
        if down:
            mask |= 1 << i
    return mask


def object_clicked(
    obj: Any,
    button: int,
    pressed_buttons: int | Sequence[bool],
    mouse_pos: tuple[int, int],
    camera: tuple[float, float],
    callback: Callable[[], None] | None = None,
) -> bool:
    """Return True and run ``callback`` if only ``button`` is down over ``obj``.

    ``button`` is numbered from 1 (left); ``pressed_buttons`` is either a bit
    mask with bit ``button - 1`` for each held button, or a sequence of flags.
    """
    if _rectangle_of(obj) is None:
        return False
    if _button_mask(pressed_buttons) != 1 << (button - 1):
        return False
    if object_hovered(obj, mouse_pos, camera):
        if callback is not None:
            callback()
        return True
    return False


class InputManager:
    """Maps keys and controller buttons to actions and tracks their state."""

    def __init__(self, db: GameDatabase) -> None:
        self.db = db
        self._names = action_names()
        self.keys: list[int] = [0] * len(self._names)
        self.buttons: list[int] = [-1] * len(self._names)
        self.bits = 0
        self.pressed_key = 0
        self.controllers: list[Any | None] = [None] * MAX_CONTROLLERS
        db.execute(
            "CREATE TABLE IF NOT EXISTS key_map("
            "idx INT NOT NULL PRIMARY KEY,"
            "action TEXT NOT NULL,"
            "key INT,"
            "key_name TEXT,"
            "gamepad INT,"
            "gamepad_name TEXT);"
        )

    @property
    def state(self) -> InputState:
        """The current action state."""
        return InputState(self.bits)

    def load_keymap(self) -> None:
        """Fill in default bindings that are missing, then load all bindings."""
        for idx, binding in enumerate(DEFAULT_KEYMAP):
            self.db.execute(
                "INSERT OR IGNORE INTO key_map "
                "(idx, action, key, key_name, gamepad, gamepad_name) "
                "VALUES (?, ?, ?, ?, ?, ?)",
                (
                    idx,
                    binding.action,
                    binding.key,
                    binding.key_name,
                    binding.button,
                    binding.button_name,
                ),
            )
        rows = self.db.execute(
            "SELECT key, gamepad FROM key_map ORDER BY idx"
        ).fetchall()
        for i, name in enumerate(self._names):
            if i >= len(rows):
                log.error("Failed to read keymap for action: %s", name)
                continue
            key, button = rows[i]
            self.keys[i] = int(key or 0)
            self.buttons[i] = int(button if button is not None else -1)

    def update_keymap(self, action: str, keycode: int) -> None:
        """Bind ``keycode`` to ``action`` in the database."""
        self.db.execute(
            "UPDATE key_map SET key=?, key_name=? WHERE action=?;",
            (keycode, _key_name(keycode), action),
        )

    def action_key_name(self, action: str) -> str | None:
        """Return the name of the key bound to ``action``, or None if unbound."""
        row = self.db.execute(
            "SELECT key_name FROM key_map WHERE action=?;", (action,)
        ).fetchone()
        return None if row is None else row[0]

    def actions(self) -> Iterator[tuple[str, int]]:
        """Yield each action name with its index."""
        for i, name in enumerate(self._names):
            yield name, i

    def _set(self, codes: list[int], code: int) -> None:
        if code in codes:
            self.bits |= 1 << codes.index(code)

    def _clear(self, codes: list[int], code: int) -> None:
        if code in codes:
            self.bits &= clear_mask(codes.index(code))

    def handle_key_down(self, key: int) -> None:
        """Record a key press."""
        self.pressed_key = key
        self._set(self.keys, key)

    def handle_key_up(self, key: int) -> None:
        """Record a key release."""
        if self.pressed_key == key:
            self.pressed_key = 0
        self._clear(self.keys, key)

    def handle_button_down(self, button: int) -> None:
        """Record a controller button press."""
        self._set(self.buttons, button)

    def handle_button_up(self, button: int) -> None:
        """Record a controller button release."""
        self._clear(self.buttons, button)

    def handle_axis(self, axis: int, value: int) -> tuple[float, float]:
        """Accept an axis motion; analogue sticks are not mapped to movement."""
        return (0.0, 0.0)

    def add_controller(self, index: int) -> int | None:
        """Open device ``index`` in the first free slot; return the slot or None."""
        import pygame

        for slot, controller in enumerate(self.controllers):
            if controller is None:
                pygame.joystick.init()
                joystick = pygame.joystick.Joystick(index)
                joystick.init()
                self.controllers[slot] = joystick
                log.debug(
                    "Added controller %d to slot %d", joystick.get_instance_id(), slot
                )
                return slot
        return None

    def remove_controller(self, instance_id: int) -> bool:
        """Close the controller with ``instance_id``; return True if one was found."""
        for slot, controller in enumerate(self.controllers):
            if controller is not None and controller.get_instance_id() == instance_id:
                controller.quit()
                self.controllers[slot] = None
                log.debug("Removed joystick %d from slot %d", instance_id, slot)
                return True
        return False

    def release_controllers(self) -> None:
        """Close every open controller."""
        for slot, controller in enumerate(self.controllers):
            if controller is not None:
                controller.quit()
                self.controllers[slot] = None
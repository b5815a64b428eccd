"""Dispatch of window, keyboard and controller events to the engine."""

from __future__ import annotations

from collections.abc import Iterable
from typing import Any

import pygame

from amphora.input import InputManager


def process_events(
    events: Iterable[pygame.event.Event] | None,
    inputs: InputManager,
    renderer: Any,
) -> bool:
    """Handle pending events; return True as soon as a quit event is seen.

    When ``events`` is None the pygame event queue is drained.
    """
    if events is None:
        events = pygame.event.get()
    for event in events:
        kind = event.type
        if kind == pygame.QUIT:
            return True
        if kind == pygame.KEYDOWN:
            inputs.handle_key_down(event.key)
        elif kind == pygame.KEYUP:
            inputs.handle_key_up(event.key)
        elif kind == pygame.JOYBUTTONDOWN:
            inputs.handle_button_down(event.button)
        elif kind == pygame.JOYBUTTONUP:
            inputs.handle_button_up(event.button)
        elif kind == pygame.JOYAXISMOTION:
            inputs.handle_axis(event.axis, event.value)
        elif kind == pygame.JOYDEVICEADDED:
            inputs.add_controller(event.device_index)
        elif kind == pygame.JOYDEVICEREMOVED:
            inputs.remove_controller(event.instance_id)
        elif kind == pygame.WINDOWRESIZED:
            renderer.set_logical_size(renderer.resolution())
    return False
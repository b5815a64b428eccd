"""Named scenes and the manager that switches between them."""

from __future__ import annotations

from collections.abc import Callable, Mapping
from dataclasses import dataclass, field
from typing import Any

from amphora.input import InputState

InitFunc = Callable[[], None]
UpdateFunc = Callable[[int, InputState], None]
DestroyFunc = Callable[[], None]


@dataclass(eq=False)
class Scene:
    """A game scene made of init, per-frame update and destroy hooks.

    Hooks left as None do nothing. Subclasses may override the methods
    instead. ``engine`` is set by the engine that runs the scene.
    """

    init_func: InitFunc | None = None
    update_func: UpdateFunc | None = None
    destroy_func: DestroyFunc | None = None
    engine: Any = field(default=None, repr=False)

    def init(self) -> None:
        """Set the scene up."""
        if self.init_func is not None:
            self.init_func()

    def update(self, frame_count: int, state: InputState) -> None:
        """Run one frame of the scene."""
        if self.update_func is not None:
            self.update_func(frame_count, state)

    def destroy(self) -> None:
        """Tear the scene down."""
        if self.destroy_func is not None:
            self.destroy_func()


class SceneManager:
    """Holds the named scenes and runs the current one.

    The first scene given is current at start. ``on_destroy`` runs after the
    current scene's own destroy hook, to release what the engine holds for it.
    """

    def __init__(
        self,
        scenes: Mapping[str, Scene] | None = None,
        on_destroy: Callable[[], None] | None = None,
    ) -> None:
        self._scenes: dict[str, Scene] = dict(scenes or {})
        self._current: str | None = next(iter(self._scenes), None)
        self.on_destroy = on_destroy

    @property
    def current_name(self) -> str | None:
        """The name of the current scene, or None when there are no scenes."""
        return self._current

    @property
    def current(self) -> Scene | None:
        """The current scene, or None when there are no scenes."""
        return None if self._current is None else self._scenes[self._current]

    def __contains__(self, name: object) -> bool:
        return name in self._scenes

    def __len__(self) -> int:
        return len(self._scenes)

    def __iter__(self):
        return iter(self._scenes.values())

    def load(self, name: str) -> None:
        """Destroy the current scene, then make ``name`` current and init it."""
        if name not in self._scenes:
            raise KeyError(f"unknown scene: {name}")
        self.destroy()
        self._current = name
        self.init_scene()

    def init_scene(self) -> None:
        """Initialise the current scene."""
        scene = self.current
        if scene is not None:
            scene.init()

    def update(self, frame_count: int, state: InputState) -> None:
        """Run one frame of the current scene."""
        scene = self.current
        if scene is not None:
            scene.update(frame_count, state)

    def destroy(self) -> None:
        """Destroy the current scene and release the engine's per-scene state."""
        scene = self.current
        if scene is not None:
            scene.destroy()
        if self.on_destroy is not None:
            self.on_destroy()
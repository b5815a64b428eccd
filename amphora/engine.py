"""The engine that owns every subsystem and runs the frame loop."""

from __future__ import annotations

import argparse
import logging
import time
from collections.abc import Iterable, Mapping
from pathlib import Path
from types import TracebackType

import pygame

from amphora.config import GAME_AUTHOR, GAME_TITLE, WindowMode
from amphora.errors import AmphoraError, StatusCode
from amphora.events import process_events
from amphora.input import InputManager, InputState
from amphora.mixer import Mixer
from amphora.render import Renderer
from amphora.rng import XorShift32
from amphora.scenes import Scene, SceneManager
from amphora.session import SessionData
from amphora.sprite import ImageLibrary
from amphora.storage import (
    DB_FILENAME,
    UUID_FILENAME,
    GameDatabase,
    Preferences,
    SaveData,
    load_or_create_uuid,
    preference_dir,
)
from amphora.text import FontLibrary
from amphora.tilemap import MapManager

log = logging.getLogger(__name__)


class Engine:
    """Sets up the window, storage, input, media and scenes, and runs frames."""

    def __init__(
        self,
        scenes: Mapping[str, Scene] | None = None,
        data_dir: str | Path | None = None,
    ) -> None:
        if data_dir is None:
            directory = preference_dir(GAME_AUTHOR, GAME_TITLE)
        else:
            directory = Path(data_dir)
            directory.mkdir(parents=True, exist_ok=True)
        self.data_dir = directory

        self.rng = XorShift32((int(time.time()) & 0xFFFFFFFF) or 1)
        self.db = GameDatabase(directory / DB_FILENAME)
        self.prefs = Preferences(self.db, load_or_create_uuid(directory / UUID_FILENAME))
        try:
            self.renderer = Renderer(
                (self.prefs.load_win_x(), self.prefs.load_win_y()),
                self.prefs.load_win_flags(),
            )
        except pygame.error as exc:
            self.db.close()
            raise AmphoraError(
                StatusCode.CORE_FAIL, f"Failed to init renderer: {exc}"
            ) from exc

        self.images = ImageLibrary()
        self.fonts = FontLibrary()
        self.maps = MapManager(self.renderer, self.images)
        try:
            self.mixer: Mixer | None = Mixer()
        except pygame.error as exc:
            log.warning("Audio is unavailable: %s", exc)
            self.mixer = None

        self.save_data = SaveData(self.db)
        self.session = SessionData()
        self.inputs = InputManager(self.db)
        self.inputs.load_keymap()

        self.scenes = SceneManager(scenes, on_destroy=self._release_scene_state)
        for scene in self.scenes:
            scene.engine = self

        self.framerate = self.prefs.load_fps()
        self.frame_count = 0
        self.quit_requested = False
        self.max_frames: int | None = None
        self._closed = False

        self.scenes.init_scene()

    def _release_scene_state(self) -> None:
        self.maps.destroy_current_map()
        self.maps.free_object_groups()
        self.renderer.render_list.clear()
        self.renderer.unbound_camera()

    def _input_state(self) -> InputState:
        state = getattr(self.inputs, "state", None)
        if callable(state):
            state = state()
        if isinstance(state, InputState):
            return state
        bits = getattr(self.inputs, "bits", 0)
        return InputState(bits if isinstance(bits, int) else 0)

    def quit(self) -> None:
        """Ask the engine to stop after the current frame."""
        self.quit_requested = True

    def fps(self) -> int:
        """Return the target framerate."""
        return self.framerate

    def load_scene(self, name: str) -> None:
        """Switch to the named scene."""
        self.scenes.load(name)

    def step(self, events: Iterable[pygame.event.Event] | None = None) -> bool:
        """Run one frame; return False once the game should stop.

        When ``events`` is None the pygame event queue is used.
        """
        self.frame_count += 1
        if process_events(events, self.inputs, self.renderer):
            self.quit_requested = True
        if self.quit_requested:
            return False
        self.renderer.clear()
        self.scenes.update(self.frame_count, self._input_state())
        self.maps.process_deferred_transition()
        self.renderer.process_render_list(self.maps.map_rect)
        self.renderer.update_camera()
        self.renderer.present()
        return True

    def run(self) -> StatusCode:
        """Run frames at the target framerate until quit, then shut down."""
        frame_ms = 1000 // self.framerate if self.framerate > 0 else 0
        try:
            while self.max_frames is None or self.frame_count < self.max_frames:
                start = pygame.time.get_ticks()
                if not self.step(None):
                    break
                elapsed = pygame.time.get_ticks() - start
                if elapsed < frame_ms:
                    pygame.time.delay(frame_ms - elapsed)
                elif elapsed > frame_ms:
                    log.debug(
                        "Lag on frame %d (frame took %d ticks, %d ticks per frame)",
                        self.frame_count,
                        elapsed,
                        frame_ms,
                    )
        finally:
            self.shutdown()
        return StatusCode.OK

    def _save_config(self) -> None:
        fullscreen = self.renderer.is_fullscreen()
        if not fullscreen:
            width, height = self.renderer.resolution()
            self.prefs.save_win_x(width)
            self.prefs.save_win_y(height)
        flags = self.renderer.flags
        if fullscreen:
            flags |= int(WindowMode.FULLSCREEN)
        else:
            flags &= ~int(WindowMode.FULLSCREEN)
        self.prefs.save_win_flags(flags)
        self.prefs.save_fps(self.framerate)

    def shutdown(self) -> None:
        """Save preferences and release every subsystem; safe to call twice."""
        if self._closed:
            return
        self._closed = True
        self._save_config()
        self.scenes.destroy()
        self.images.close()
        self.fonts.close()
        if self.mixer is not None:
            self.mixer.close()
            pygame.mixer.quit()
        self.maps.free_object_groups()
        self.inputs.release_controllers()
        self.renderer.close()
        pygame.font.quit()
        self.db.close()

    def __enter__(self) -> Engine:
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        self.shutdown()


def main(argv: list[str] | None = None) -> int:
    """Start the game and run it until the window is closed."""
    parser = argparse.ArgumentParser(prog="amphora", description=f"Run {GAME_TITLE}.")
    parser.add_argument(
        "--data-dir", type=Path, default=None, help="directory for saved data"
    )
    parser.add_argument(
        "--frames", type=int, default=0, help="stop after this many frames (0: no limit)"
    )
    args = parser.parse_args(argv)
    if args.frames < 0:
        parser.error("--frames must not be negative")
    try:
        engine = Engine({}, args.data_dir)
    except AmphoraError as exc:
        log.error("%s", exc.message)
        return int(exc.code)
    if args.frames:
        engine.max_frames = args.frames
    return int(engine.run())
"""Sound effects and a single music track, loaded from named sources."""

from __future__ import annotations

import io
import logging
from collections.abc import Mapping
from pathlib import Path
from typing import BinaryIO, Union

import pygame

from amphora.config import MUSIC, SFX
from amphora.errors import AmphoraError, StatusCode

log = logging.getLogger(__name__)

AudioSource = Union[bytes, bytearray, str, Path, BinaryIO]


def _open(source: AudioSource) -> str | BinaryIO:
    if isinstance(source, (bytes, bytearray)):
        return io.BytesIO(bytes(source))
    if isinstance(source, Path):
        return str(source)
    return source


class Mixer:
    """Plays named sound effects on channels and one music track at a time."""

    def __init__(
        self,
        sfx: Mapping[str, AudioSource] | None = None,
        music: Mapping[str, AudioSource] | None = None,
    ) -> None:
        if not pygame.mixer.get_init():
            pygame.mixer.init(44100, -16, 2, 2048)
        self.sfx: dict[str, AudioSource] = dict(SFX if sfx is None else sfx)
        self.music: dict[str, AudioSource] = dict(MUSIC if music is None else music)
        self._open_sfx: dict[str, pygame.mixer.Sound] = {}
        self.current_music: str | None = None
        self._music_stream: str | BinaryIO | None = None
        self._started = False
        self._paused = False
        for name in self.sfx:
            log.debug("Found sfx %s", name)
        for name in self.music:
            log.debug("Found music %s", name)

    def _free_music(self) -> None:
        pygame.mixer.music.unload()
        self.current_music = None
        self._music_stream = None
        self._started = False
        self._paused = False

    def _refresh(self) -> None:
        # A track that has run to its end is released, as on a finish hook.
        if self._started and not self._paused and not pygame.mixer.music.get_busy():
            self._free_music()

    def _playing(self) -> bool:
        self._refresh()
        return self._paused or pygame.mixer.music.get_busy()

    @property
    def playing(self) -> bool:
        """True while the music track is playing or paused."""
        return self._playing()

    @property
    def paused(self) -> bool:
        """True while the music track is paused."""
        self._refresh()
        return self._paused

    def _sound(self, name: str) -> pygame.mixer.Sound:
        if name not in self._open_sfx:
            try:
                source = self.sfx[name]
            except KeyError:
                raise KeyError(f"unknown sfx: {name}") from None
            self._open_sfx[name] = pygame.mixer.Sound(file=_open(source))
        return self._open_sfx[name]

    def play_sfx(
        self, name: str, channel: int = -1, repeat: int = 0
    ) -> pygame.mixer.Channel | None:
        """Play a sound effect, repeating it ``repeat`` extra times.

        A ``channel`` of -1 uses the first free channel; a given channel that
        is already busy is left alone and None is returned.
        """
        sound = self._sound(name)
        if channel > -1:
            target = pygame.mixer.Channel(channel)
            if target.get_busy():
                return None
            target.play(sound, loops=repeat)
            return target
        return sound.play(loops=repeat)

    def set_music(self, name: str) -> None:
        """Make the named track current, stopping any track that is playing."""
        try:
            source = self.music[name]
        except KeyError:
            raise KeyError(f"unknown music: {name}") from None
        if self._playing():
            pygame.mixer.music.stop()
            self._free_music()
        stream = _open(source)
        pygame.mixer.music.load(stream)
        self._music_stream = stream
        self.current_music = name
        self._started = False
        self._paused = False

    def _start(self, loops: int, ms: int) -> None:
        if self._playing():
            return
        if self.current_music is None:
            raise AmphoraError(StatusCode.FAIL_UNDEFINED, "no music track is set")
        pygame.mixer.music.play(loops=loops, fade_ms=ms)
        self._started = True

    def play_music(self, ms: int = 0) -> None:
        """Fade in the current track over ``ms`` milliseconds, looping forever."""
        self._start(-1, ms)

    def play_music_n(self, n: int, ms: int = 0) -> None:
        """Fade in the current track, playing it ``n`` times in all."""
        loops = -1 if n < 0 else max(n - 1, 0)
        self._start(loops, ms)

    def pause_music(self) -> None:
        """Pause the track if it is playing."""
        if not self._playing():
            return
        pygame.mixer.music.pause()
        self._paused = True

    def unpause_music(self) -> None:
        """Resume the track if it is paused."""
        if not self.paused:
            return
        pygame.mixer.music.unpause()
        self._paused = False

    def stop_music(self) -> None:
        """Stop the track at once and release it."""
        if not self._playing():
            return
        pygame.mixer.music.stop()
        self._free_music()

    def fade_out_music(self, ms: int) -> None:
        """Fade the track out over ``ms`` milliseconds; it is released when done."""
        if not self._playing():
            return
        pygame.mixer.music.fadeout(ms)

    def close(self) -> None:
        """Stop the music and drop every loaded sound."""
        if self.current_music is not None:
            pygame.mixer.music.stop()
            self._free_music()
        for sound in self._open_sfx.values():
            sound.stop()
        self._open_sfx.clear()
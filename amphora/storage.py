"""The game's SQLite database, window preferences and save data."""

from __future__ import annotations

import sqlite3
import uuid as _uuid
from pathlib import Path
from types import TracebackType
from typing import Any

from platformdirs import user_data_dir

from amphora.config import FRAMERATE, GAME_AUTHOR, GAME_TITLE, WINDOW_MODE, WINDOW_X, WINDOW_Y

DB_FILENAME = "amphora.db"
UUID_FILENAME = "uuid"
_UUID_BYTES = 16


def preference_dir(author: str, title: str) -> Path:
    """Return the per-user data directory for the game, creating it if needed."""
    path = Path(user_data_dir(appname=title, appauthor=author))
    path.mkdir(parents=True, exist_ok=True)
    return path


def load_or_create_uuid(path: str | Path) -> str:
    """Return this installation's identifier as 32 hex digits.

    The identifier is read from ``path`` when the file exists; otherwise a new
    random one is generated and written there as raw bytes.
    """
    path = Path(path)
    try:
        data = path.read_bytes()
    except FileNotFoundError:
        data = _uuid.uuid4().bytes
        path.write_bytes(data)
    return data[:_UUID_BYTES].ljust(_UUID_BYTES, b"\0").hex()


class GameDatabase:
    """An open connection to the game's SQLite database in autocommit mode."""

    def __init__(self, path: str | Path | None = None) -> None:
        if path is None:
            path = preference_dir(GAME_AUTHOR, GAME_TITLE) / DB_FILENAME
        self.path = str(path)
        self.connection = sqlite3.connect(self.path, isolation_level=None)

    def execute(self, sql: str, params: tuple[Any, ...] = ()) -> sqlite3.Cursor:
        """Run one statement and return its cursor."""
        return self.connection.execute(sql, params)

    def close(self) -> None:
        """Close the connection."""
        self.connection.close()

    def __enter__(self) -> GameDatabase:
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        self.close()


class Preferences:
    """Window size, window flags and framerate stored per installation."""

    _COLUMNS = ("win_x", "win_y", "win_flags", "framerate")

    def __init__(self, db: GameDatabase, uuid: str | None = None) -> None:
        self.db = db
        if uuid is None:
            uuid = load_or_create_uuid(
                preference_dir(GAME_AUTHOR, GAME_TITLE) / UUID_FILENAME
            )
        self.uuid = uuid
        db.execute(
            "CREATE TABLE IF NOT EXISTS prefs("
            "uuid TEXT PRIMARY KEY NOT NULL,"
            "win_x INT,"
            "win_y INT,"
            "win_flags INT,"
            "framerate INT);"
        )
        db.execute("INSERT OR IGNORE INTO prefs (uuid) VALUES (?);", (uuid,))

    def _save(self, column: str, value: int) -> None:
        if column not in self._COLUMNS:
            raise ValueError(f"unknown preference column: {column}")
        self.db.execute(
            f"UPDATE prefs SET {column}=? WHERE uuid=?;", (int(value), self.uuid)
        )

    def _load(self, column: str, default: int) -> int:
        if column not in self._COLUMNS:
            raise ValueError(f"unknown preference column: {column}")
        row = self.db.execute(
            f"SELECT {column} FROM prefs WHERE uuid=?", (self.uuid,)
        ).fetchone()
        if row is None or not row[0]:
            return default
        return int(row[0])

    def save_win_x(self, value: int) -> None:
        """Store the window width."""
        self._save("win_x", value)

    def save_win_y(self, value: int) -> None:
        """Store the window height."""
        self._save("win_y", value)

    def save_win_flags(self, value: int) -> None:
        """Store the window flags."""
        self._save("win_flags", value)

    def save_fps(self, value: int) -> None:
        """Store the framerate."""
        self._save("framerate", value)

    def load_win_x(self) -> int:
        """Return the stored window width, or the configured default."""
        return self._load("win_x", WINDOW_X)

    def load_win_y(self) -> int:
        """Return the stored window height, or the configured default."""
        return self._load("win_y", WINDOW_Y)

    def load_win_flags(self) -> int:
        """Return the stored window flags, or the configured window mode."""
        return self._load("win_flags", int(WINDOW_MODE))

    def load_fps(self) -> int:
        """Return the stored framerate, or the configured default."""
        return self._load("framerate", FRAMERATE)


class SaveData:
    """Named numbers and strings persisted across game sessions."""

    def __init__(self, db: GameDatabase) -> None:
        self.db = db
        db.execute(
            "CREATE TABLE IF NOT EXISTS save_data("
            "attribute TEXT PRIMARY KEY NOT NULL,"
            "value ANY);"
        )

    def save_number(self, attribute: str, value: float) -> None:
        """Store a number under ``attribute``, replacing any previous value."""
        self.db.execute(
            "INSERT OR REPLACE INTO save_data (attribute, value) VALUES (?, ?);",
            (attribute, float(value)),
        )

    def save_string(self, attribute: str, value: str) -> None:
        """Store a string under ``attribute``, replacing any previous value."""
        self.db.execute(
            "INSERT OR REPLACE INTO save_data (attribute, value) VALUES (?, ?);",
            (attribute, value),
        )

    def load_number(self, attribute: str, default: float = 0.0) -> float:
        """Return the number stored under ``attribute``, or ``default``."""
        row = self.db.execute(
            "SELECT CAST(value AS REAL) FROM save_data WHERE attribute=?",
            (attribute,),
        ).fetchone()
        if row is None:
            return default
        return 0.0 if row[0] is None else float(row[0])

    def load_string(self, attribute: str) -> str:
        """Return the value under ``attribute`` as text; raises ``KeyError`` if absent."""
        row = self.db.execute(
            "SELECT CAST(value AS TEXT) FROM save_data WHERE attribute=?",
            (attribute,),
        ).fetchone()
        if row is None:
            raise KeyError(attribute)
        return "" if row[0] is None else row[0]
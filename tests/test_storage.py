import sqlite3

import pytest

from amphora.config import FRAMERATE, WINDOW_MODE, WINDOW_X, WINDOW_Y
from amphora.storage import GameDatabase, Preferences, SaveData, load_or_create_uuid


@pytest.fixture
def db():
    database = GameDatabase(":memory:")
    yield database
    database.close()


def test_uuid_created_and_reused(tmp_path):
    path = tmp_path / "uuid"
    first = load_or_create_uuid(path)
    assert len(path.read_bytes()) == 16
    assert len(first) == 32
    assert all(c in "0123456789abcdef" for c in first)
    assert load_or_create_uuid(path) == first


def test_uuid_read_from_existing_file(tmp_path):
    path = tmp_path / "uuid"
    path.write_bytes(bytes(range(16)))
    assert load_or_create_uuid(path) == bytes(range(16)).hex()


def test_database_context_manager_closes(tmp_path):
    with GameDatabase(tmp_path / "game.db") as database:
        assert database.execute("SELECT 1").fetchone() == (1,)
    with pytest.raises(sqlite3.ProgrammingError):
        database.execute("SELECT 1")


def test_preferences_defaults(db):
    prefs = Preferences(db, "abc")
    assert prefs.load_win_x() == WINDOW_X
    assert prefs.load_win_y() == WINDOW_Y
    assert prefs.load_win_flags() == int(WINDOW_MODE)
    assert prefs.load_fps() == FRAMERATE


def test_preferences_round_trip(db):
    prefs = Preferences(db, "abc")
    prefs.save_win_x(800)
    prefs.save_win_y(600)
    prefs.save_win_flags(32)
    prefs.save_fps(30)
    again = Preferences(db, "abc")
    assert again.load_win_x() == 800
    assert again.load_win_y() == 600
    assert again.load_win_flags() == 32
    assert again.load_fps() == 30


def test_preferences_zero_falls_back_to_default(db):
    prefs = Preferences(db, "abc")
    prefs.save_fps(0)
    assert prefs.load_fps() == FRAMERATE


def test_preferences_rows_are_per_uuid(db):
    Preferences(db, "one").save_win_x(640)
    assert Preferences(db, "two").load_win_x() == WINDOW_X
    assert Preferences(db, "one").load_win_x() == 640


def test_preferences_persist_in_file(tmp_path):
    path = tmp_path / "game.db"
    with GameDatabase(path) as database:
        Preferences(database, "id").save_fps(144)
    with GameDatabase(path) as database:
        assert Preferences(database, "id").load_fps() == 144


def test_save_number_round_trip(db):
    save = SaveData(db)
    save.save_number("score", 12.5)
    assert save.load_number("score", -1.0) == 12.5


def test_load_number_default(db):
    save = SaveData(db)
    assert save.load_number("missing", 7.0) == 7.0


def test_save_number_overwrites(db):
    save = SaveData(db)
    save.save_number("lives", 3)
    save.save_number("lives", 2)
    assert save.load_number("lives", 0.0) == 2.0


def test_save_string_round_trip(db):
    save = SaveData(db)
    save.save_string("name", "hello")
    assert save.load_string("name") == "hello"


def test_load_string_missing_raises(db):
    save = SaveData(db)
    with pytest.raises(KeyError):
        save.load_string("missing")
import pytest

from amphora.session import SessionData


def test_store_and_get():
    data = SessionData()
    data.store("coins", 42)
    assert data.get("coins") == 42


def test_missing_key_is_zero():
    assert SessionData().get("nothing") == 0


def test_overwrite():
    data = SessionData()
    data.store("level", 1)
    data.store("level", 2)
    assert data.get("level") == 2
    assert len(data) == 1


def test_delete():
    data = SessionData()
    data.store("flag", 1)
    data.delete("flag")
    assert "flag" not in data
    assert data.get("flag") == 0


def test_delete_missing_raises():
    with pytest.raises(KeyError):
        SessionData().delete("absent")


def test_many_keys_survive_growth():
    data = SessionData()
    for i in range(50):
        data.store(f"k{i}", i)
    assert [data.get(f"k{i}") for i in range(50)] == list(range(50))
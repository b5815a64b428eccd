import pytest

from amphora.hashtable import FNV_OFFSET, INITIAL_SIZE, HashTable, fnv1a_hash


def test_hash_of_empty_string_is_offset_basis():
    assert fnv1a_hash("") == FNV_OFFSET


def test_hash_of_none_is_zero():
    assert fnv1a_hash(None) == 0


def test_hash_known_value():
    assert fnv1a_hash("a") == 0xE40C292C


def test_hash_fits_in_32_bits():
    for key in ["player", "enemy_count", "z" * 30]:
        assert 0 <= fnv1a_hash(key) <= 0xFFFFFFFF


def test_set_and_get():
    t = HashTable()
    t["score"] = 42
    assert t["score"] == 42
    assert len(t) == 1
    assert "score" in t


def test_overwrite_keeps_count():
    t = HashTable()
    t["k"] = 1
    t["k"] = 2
    assert t["k"] == 2
    assert len(t) == 1


def test_missing_key_raises():
    t = HashTable()
    t["present"] = 7
    with pytest.raises(KeyError):
        t["nope"]
    assert "nope" not in t
    assert t["present"] == 7
    assert len(t) == 1


def test_get_returns_default():
    t = HashTable()
    assert t.get("nope") is None
    assert t.get("nope", -1) == -1
    t["yes"] = 5
    assert t.get("yes", -1) == 5


def test_delete_removes_key():
    t = HashTable()
    t["a"] = 1
    t["b"] = 2
    del t["a"]
    assert "a" not in t
    assert t["b"] == 2
    assert len(t) == 1


def test_delete_missing_raises():
    t = HashTable()
    t["kept"] = 3
    with pytest.raises(KeyError):
        del t["ghost"]
    assert t["kept"] == 3
    assert len(t) == 1


def test_reinsert_after_delete():
    t = HashTable()
    t["x"] = 1
    del t["x"]
    t["x"] = 3
    assert t["x"] == 3
    assert len(t) == 1


def test_starts_with_initial_capacity():
    assert HashTable().capacity() == INITIAL_SIZE


def test_grows_past_seventy_percent():
    t = HashTable()
    for i in range(5):
        t[f"k{i}"] = i
    assert t.capacity() == INITIAL_SIZE
    t["k5"] = 5
    assert t.capacity() == INITIAL_SIZE * 2


def test_many_keys_survive_growth():
    t = HashTable()
    keys = [f"key{i}" for i in range(200)]
    for i, k in enumerate(keys):
        t[k] = i
    assert len(t) == 200
    assert all(t[k] == i for i, k in enumerate(keys))
    assert sorted(t) == sorted(keys)


def test_deleted_keys_do_not_return_after_growth():
    t = HashTable()
    t["gone"] = 1
    del t["gone"]
    for i in range(50):
        t[f"n{i}"] = i
    assert "gone" not in t
    assert len(t) == 50


def test_long_key_rejected():
    t = HashTable()
    with pytest.raises(ValueError):
        t["k" * 31] = 1
    t["k" * 30] = 1
    assert t["k" * 30] == 1


def test_non_string_key_rejected():
    t = HashTable()
    with pytest.raises(TypeError):
        t[1] = 1
    assert len(t) == 0
    assert t.capacity() == INITIAL_SIZE
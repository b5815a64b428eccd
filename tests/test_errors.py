import pytest

from amphora.errors import MSG_BUFF_SIZE, AmphoraError, StatusCode, require_not_none


@pytest.mark.parametrize(
    ("value", "expected"),
    [
        (0, StatusCode.OK),
        (1, StatusCode.ALLOC_FAIL),
        (2, StatusCode.CORE_FAIL),
        (3, StatusCode.FAIL_UNDEFINED),
    ],
)
def test_status_code_values_follow_declaration_order(value, expected):
    err = AmphoraError(value, "message")
    assert err.code is expected
    assert int(err.code) == value


def test_error_keeps_code_and_message():
    err = AmphoraError(StatusCode.CORE_FAIL, "Failed to init renderer")
    assert err.code is StatusCode.CORE_FAIL
    assert err.message == "Failed to init renderer"
    assert str(err) == "Failed to init renderer"


def test_error_accepts_integer_code():
    err = AmphoraError(1, "boom")
    assert err.code is StatusCode.ALLOC_FAIL


def test_error_message_is_bounded():
    err = AmphoraError(StatusCode.ALLOC_FAIL, "x" * 1000)
    assert len(err.message) == MSG_BUFF_SIZE - 1


def test_require_not_none_returns_value():
    obj = object()
    assert require_not_none(obj, "spr") is obj
    assert require_not_none(0, "n") == 0


def test_require_not_none_raises_for_none():
    with pytest.raises(AmphoraError) as info:
        require_not_none(None, "spr")
    assert info.value.code is StatusCode.FAIL_UNDEFINED
    assert "spr" in info.value.message
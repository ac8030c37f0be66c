import pytest

from chatadapter.errors import StackError, wrap_error


def test_wrap_none_is_none():
    assert wrap_error(None) is None


def test_wrap_records_origin_and_location():
    original = ValueError("boom")
    wrapped = wrap_error(original)
    assert isinstance(wrapped, StackError)
    assert wrapped.origin_error() is original
    assert "test_errors.py:" in wrapped.function_info
    assert wrapped.function_info.rsplit(":", 1)[1].isdigit()


def test_message_format():
    wrapped = wrap_error(ValueError("boom"))
    text = str(wrapped)
    assert text.startswith("===== STACK ERROR ")
    assert text.endswith(" =====\nboom")
    assert wrapped.function_info in text


def test_nested_wrap_uses_innermost():
    original = KeyError("k")
    inner = wrap_error(original)
    outer = wrap_error(inner)
    assert outer.origin_error() is original
    assert str(outer) == str(inner)


def test_inner_location_wins():
    inner = StackError(RuntimeError("x"), "inner.py:1")
    outer = StackError(inner, "outer.py:2")
    assert str(outer) == "===== STACK ERROR inner.py:1 =====\nx"


def test_can_be_raised_and_caught():
    original = OSError("disk")
    with pytest.raises(StackError) as info:
        raise wrap_error(original)
    assert info.value.origin_error() is original
    assert str(info.value).endswith("=====\ndisk")
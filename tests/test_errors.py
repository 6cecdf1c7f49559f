import pytest

from mbase.errors import TracedError


def test_message_is_kept():
    err = TracedError("boom")
    assert str(err) == "boom"
    assert err.message == "boom"


def test_stack_trace_records_creation_site():
    err = TracedError("boom")
    assert "test_stack_trace_records_creation_site" in err.stack_trace


def test_is_an_exception():
    err = TracedError("boom")
    assert isinstance(err, Exception)
    assert err.args == ("boom",)
    with pytest.raises(TracedError) as info:
        raise err
    assert info.value.message == "boom"
    assert str(info.value) == "boom"
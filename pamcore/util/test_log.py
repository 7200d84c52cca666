import pytest

from .log import timed


def test_timed_reports_elapsed():
    messages = []

    with timed("Took %.2f sec.", lambda msg, t: messages.append((msg, t))):
        pass

    assert len(messages) == 1
    assert messages[0][0] == "Took %.2f sec."
    assert messages[0][1] >= 0


def test_timed_reports_on_error():
    messages = []

    with pytest.raises(RuntimeError):
        with timed("%s", lambda msg, t: messages.append(t)):
            raise RuntimeError("boom")

    assert len(messages) == 1

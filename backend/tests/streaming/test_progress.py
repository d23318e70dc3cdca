"""
Tests for the monotonic progress channel.
"""
import threading
from unittest.mock import Mock, patch

from deep_research_agent.streaming.progress import ProgressChannel, stream_progress


def test_update_emits_in_order():
    """Test that increasing updates are all emitted."""
    emit = Mock()
    channel = ProgressChannel(emit=emit)

    assert channel.update("Searching", 10, node="run_round")
    assert channel.update("Searching", 10)
    assert channel.update("Analyzing", 42.123)

    assert [c.args for c in emit.call_args_list] == [
        ("run_round", "Searching", 10.0),
        ("engine", "Searching", 10.0),
        ("engine", "Analyzing", 42.12),
    ]
    assert channel.last == 42.12


def test_regression_is_dropped():
    """Test that an update below the last value is not emitted."""
    emit = Mock()
    channel = ProgressChannel(emit=emit)
    channel.update("Reflecting", 50)

    assert channel.update("Late query", 30) is False

    assert emit.call_count == 1
    assert channel.last == 50


def test_values_are_clamped():
    """Test clamping to the 0-100 range."""
    emit = Mock()
    channel = ProgressChannel(emit=emit)

    channel.update("Over", 150)

    assert emit.call_args.args[2] == 100.0
    assert channel.update("Still over", 101) is True
    assert channel.update("Below", -5) is False


def test_reset_returns_to_zero():
    """Test that reset is the only way back to zero."""
    emit = Mock()
    channel = ProgressChannel(emit=emit)
    channel.update("Halfway", 50)

    channel.reset("Starting research process...")

    assert channel.last == 0.0
    assert emit.call_args.args == ("start", "Starting research process...", 0.0)
    assert channel.update("Configured", 5)


def test_concurrent_updates_stay_monotonic():
    """Test that emitted values never decrease under concurrent updates."""
    emitted = []
    channel = ProgressChannel(emit=lambda node, message, percent: emitted.append(percent))

    def worker(offset):
        for value in range(offset, 100, 4):
            channel.update("working", value)

    threads = [threading.Thread(target=worker, args=(offset,)) for offset in range(4)]
    for thread in threads:
        thread.start()
    for thread in threads:
        thread.join()

    assert emitted == sorted(emitted)


@patch("deep_research_agent.streaming.stream_writer.get_stream_writer")
def test_default_emitter_streams_progress_event(mock_get_writer):
    """Test that the default emitter writes a progress envelope."""
    mock_writer = Mock()
    mock_get_writer.return_value = mock_writer

    stream_progress("reflect", "Reflecting on findings...", 48.0)

    event = mock_writer.call_args[0][0]
    assert event["type"] == "custom"
    assert event["node"] == "reflect"
    assert event["event"] == "progress"
    assert event["payload"] == {"message": "Reflecting on findings...", "percent": 48.0}

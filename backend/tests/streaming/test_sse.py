"""
Tests for SSE formatting and the async generator.
"""
import asyncio
import json

from deep_research_agent.streaming.event_serializers import serialize_progress_event
from deep_research_agent.streaming.sse import (
    create_sse_generator,
    format_completion_event,
    format_error_event,
    format_sse_event,
)


def collect(agen) -> list:
    async def _collect():
        return [item async for item in agen]

    return asyncio.run(_collect())


def parse(line: str) -> dict:
    assert line.startswith("data: ") and line.endswith("\n\n")
    return json.loads(line[len("data: "):])


def test_format_sse_event():
    """Test the SSE line format."""
    line = format_sse_event({"type": "custom", "payload": {"topic": "Österreich"}})

    assert line == 'data: {"type": "custom", "payload": {"topic": "Österreich"}}\n\n'


def test_completion_and_error_events():
    """Test the terminal envelopes."""
    complete = format_completion_event("# Report")
    error = format_error_event("Groq API key is not set.")

    assert complete["type"] == "complete"
    assert complete["node"] == "system"
    assert complete["payload"] == {"response": "# Report"}
    assert error["type"] == "error"
    assert error["payload"] == {"error": "Groq API key is not set."}


def test_sse_generator_streams_events():
    """Test that every envelope becomes one SSE line, in order."""
    events = [serialize_progress_event("start", "Starting", 0.0), format_completion_event("done")]

    lines = collect(create_sse_generator(iter(events)))

    assert [parse(line)["type"] for line in lines] == ["custom", "complete"]


def test_sse_generator_emits_error_when_iterator_fails():
    """Test that a failing iterator ends with one error event."""
    def events():
        yield serialize_progress_event("start", "Starting", 0.0)
        raise RuntimeError("graph crashed")

    lines = collect(create_sse_generator(events()))

    last = parse(lines[-1])
    assert last["type"] == "error"
    assert last["payload"]["error"] == "graph crashed"
    assert len(lines) == 2


def test_sse_generator_no_second_terminal_event():
    """Test that a failure after the terminal event adds nothing."""
    def events():
        yield format_completion_event("report")
        raise RuntimeError("late failure")

    lines = collect(create_sse_generator(events()))

    assert [parse(line)["type"] for line in lines] == ["complete"]

"""
SSE (Server-Sent Events) formatting and generator logic.

Formats standardized event envelopes as SSE lines and wraps a run's
envelope iterator in an async generator for FastAPI StreamingResponse.
"""
import json
from typing import Any, AsyncIterator, Dict, Iterable

from starlette.concurrency import iterate_in_threadpool

from deep_research_agent.logging import get_logger
from deep_research_agent.streaming.event_serializers import serialize_event

logger = get_logger(__name__)

TERMINAL_EVENT_TYPES = ("complete", "error")


def format_sse_event(event: Dict[str, Any]) -> str:
    """
    Format an event envelope as an SSE data line.

    Args:
        event: Event envelope dictionary (standardized format)

    Returns:
        SSE-formatted string: "data: {json}\n\n"
    """
    event_data = json.dumps(event, ensure_ascii=False)
    return f"data: {event_data}\n\n"


def format_completion_event(response: str) -> Dict[str, Any]:
    """
    Create a completion event envelope.

    Args:
        response: Final report

    Returns:
        Completion event envelope
    """
    return serialize_event("complete", "system", "complete", {"response": response})


def format_error_event(error: str) -> Dict[str, Any]:
    """
    Create an error event envelope.

    Args:
        error: Error message

    Returns:
        Error event envelope
    """
    return serialize_event("error", "system", "error", {"error": error})


async def create_sse_generator(events: Iterable[Dict[str, Any]]) -> AsyncIterator[str]:
    """
    Create an async SSE generator from a run's envelope iterator.

    The run is driven in a worker thread so the event loop stays free. If the
    iterator fails before delivering a terminal event, one error event is
    emitted in its place.

    Args:
        events: Iterator of event envelopes, e.g. ``RunHandle.events()``

    Yields:
        SSE-formatted strings ready for StreamingResponse
    """
    terminated = False
    try:
        async for event in iterate_in_threadpool(iter(events)):
            if event.get("type") in TERMINAL_EVENT_TYPES:
                terminated = True
            yield format_sse_event(event)
    except Exception as e:
        logger.error("sse_stream_failed", error=str(e), exc_info=True)
        if not terminated:
            yield format_sse_event(format_error_event(str(e)))

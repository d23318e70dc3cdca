"""Streaming module.

This module contains progress reporting, event envelopes and SSE formatting.
"""

from deep_research_agent.streaming.event_serializers import (
    is_envelope,
    serialize_custom_event,
    serialize_event,
    serialize_progress_event,
)
from deep_research_agent.streaming.progress import ProgressChannel
from deep_research_agent.streaming.sse import (
    create_sse_generator,
    format_completion_event,
    format_error_event,
    format_sse_event,
)
from deep_research_agent.streaming.stream_writer import (
    forward_event,
    stream_custom_event,
)

__all__ = [
    # Event serializers
    "serialize_event",
    "serialize_custom_event",
    "serialize_progress_event",
    "is_envelope",
    # Stream writers (for nodes)
    "stream_custom_event",
    "forward_event",
    # Progress
    "ProgressChannel",
    # SSE formatting
    "format_sse_event",
    "create_sse_generator",
    "format_completion_event",
    "format_error_event",
]

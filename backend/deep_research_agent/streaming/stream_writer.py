"""
Centralized streaming interface for nodes.

Nodes should use these functions instead of directly calling get_stream_writer().
All events are automatically serialized into the standardized envelope format.
"""
from typing import Any, Dict

from langgraph.config import get_stream_writer

from deep_research_agent.streaming.event_serializers import serialize_custom_event


def stream_custom_event(
    event_name: str,
    node: str,
    data: Dict[str, Any]
) -> None:
    """
    Stream a custom event in standardized envelope format.

    Args:
        event_name: Name of the custom event (e.g., "progress", "generated_queries")
        node: Name of the node that generated the event
        data: Event-specific data dictionary
    """
    writer = get_stream_writer()
    if writer:
        writer(serialize_custom_event(event_name, node, data))


def forward_event(event: Dict[str, Any]) -> None:
    """Re-emit an already serialized envelope, e.g. one streamed by a subgraph."""
    writer = get_stream_writer()
    if writer:
        writer(event)

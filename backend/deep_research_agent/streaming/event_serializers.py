"""
Event serializers for the standardized streaming envelope format.

All events share one envelope:
{
    "type": str,           # Event type (custom, complete, error)
    "timestamp": int,      # Unix timestamp in milliseconds
    "node": str,           # Node name that generated the event
    "event": str,          # Specific event name (e.g., "progress", "generated_queries")
    "payload": dict        # Event-specific data
}
"""
import time
from typing import Any, Dict

ENVELOPE_KEYS = ("type", "timestamp", "node", "event", "payload")


def current_timestamp() -> int:
    """Unix timestamp in milliseconds."""
    return int(time.time() * 1000)


def serialize_event(
    event_type: str,
    node: str,
    event: str,
    payload: Dict[str, Any]
) -> Dict[str, Any]:
    """
    Create a standardized event envelope.

    Args:
        event_type: Type of event (custom, complete, error)
        node: Name of the node that generated the event
        event: Specific event name (e.g., "progress")
        payload: Event-specific data dictionary

    Returns:
        Standardized event envelope dictionary
    """
    return {
        "type": event_type,
        "timestamp": current_timestamp(),
        "node": node,
        "event": event,
        "payload": payload
    }


def serialize_custom_event(
    event_name: str,
    node: str,
    data: Dict[str, Any]
) -> Dict[str, Any]:
    """
    Serialize a custom event into envelope format.

    Args:
        event_name: Name of the custom event (e.g., "progress", "section_graded")
        node: Name of the node that generated the event
        data: Event-specific data dictionary

    Returns:
        Standardized event envelope with custom event data in payload
    """
    return serialize_event(
        event_type="custom",
        node=node,
        event=event_name,
        payload=data
    )


def serialize_progress_event(node: str, message: str, percent: float) -> Dict[str, Any]:
    """Serialize a progress update; payload is ``{message, percent}``."""
    return serialize_custom_event("progress", node, {"message": message, "percent": percent})


def is_envelope(event: Any) -> bool:
    """Whether a streamed item already carries every envelope key."""
    return isinstance(event, dict) and all(key in event for key in ENVELOPE_KEYS)

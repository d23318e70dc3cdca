"""
Progress channel for one research run.

Reported percentages never decrease. An update below the last reported value
is dropped with a warning instead of being emitted; the only way back to zero
is an explicit ``reset`` at run start. Updates may come from parallel round
workers, so emission happens under a lock to keep the emitted order monotonic.
"""
import threading
from typing import Callable, Optional

from deep_research_agent.logging import get_logger
from deep_research_agent.streaming.event_serializers import serialize_progress_event
from deep_research_agent.streaming.stream_writer import forward_event

logger = get_logger(__name__)

# Called with (node, message, percent).
ProgressEmitter = Callable[[str, str, float], None]


def stream_progress(node: str, message: str, percent: float) -> None:
    """Default emitter: a ``progress`` custom event on the graph stream."""
    forward_event(serialize_progress_event(node, message, percent))


class ProgressChannel:
    """Monotonic progress reporter."""

    def __init__(self, emit: Optional[ProgressEmitter] = None):
        self._emit = emit or stream_progress
        self._lock = threading.Lock()
        self._last = 0.0

    @property
    def last(self) -> float:
        return self._last

    def reset(self, message: str, node: str = "start") -> None:
        """Return progress to zero; used once when a run starts."""
        with self._lock:
            self._last = 0.0
            self._emit(node, message, 0.0)

    def update(self, message: str, percent: float, node: str = "engine") -> bool:
        """
        Report progress.

        Args:
            message: Human-readable description of the current activity
            percent: Completion percentage, clamped to 0-100
            node: Node reporting the progress

        Returns:
            True if the update was emitted, False if it was dropped as a regression
        """
        percent = round(max(0.0, min(100.0, float(percent))), 2)
        with self._lock:
            if percent < self._last:
                logger.warning(
                    "progress_regression_ignored",
                    node=node,
                    percent=percent,
                    last_percent=self._last,
                    progress_message=message,
                )
                return False
            self._last = percent
            self._emit(node, message, percent)
            return True

"""
Exception hierarchy for the research engine.

All engine errors inherit from ``DeepResearchError`` so callers at the HTTP
boundary can catch the whole family with one ``except`` clause.
"""
from typing import Any, Dict, Optional


class DeepResearchError(Exception):
    """Base exception for all research engine errors."""

    def __init__(self, message: str = "", details: Optional[Dict[str, Any]] = None):
        super().__init__(message)
        self.details: Dict[str, Any] = details or {}


class ConfigurationError(DeepResearchError):
    """
    Raised when a run cannot start: missing credentials or an unsupported
    model/provider identifier. Detected before any network activity.
    """


class RateLimitedError(DeepResearchError):
    """Raised by a search provider when the backend signals throttling."""

    def __init__(self, message: str = "Rate limited", provider: str = "", details: Optional[Dict[str, Any]] = None):
        super().__init__(message, details)
        self.provider = provider


class InvalidTransitionError(DeepResearchError):
    """Raised when the orchestrator is asked to move between unconnected steps."""

    def __init__(self, current: str, requested: str):
        super().__init__(f"Illegal transition from '{current}' to '{requested}'")
        self.current = current
        self.requested = requested


class ResearchRunError(DeepResearchError):
    """Raised by ``run_research`` when the run ended with a terminal error event."""

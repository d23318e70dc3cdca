"""Logging module.

This module contains structured logging functionality.
"""
from deep_research_agent.logging.logger import bind_run_context, get_logger

__all__ = ["get_logger", "bind_run_context"]

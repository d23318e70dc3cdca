"""Configuration management module.

This module contains settings, credential lookup and per-run configuration
resolution.
"""
from deep_research_agent.config.resolver import ResearchConfiguration, resolve_configuration
from deep_research_agent.config.secrets import get_api_key, require_api_key
from deep_research_agent.config.settings import DEFAULT_REPORT_STRUCTURE, Settings

__all__ = [
    "Settings",
    "DEFAULT_REPORT_STRUCTURE",
    "ResearchConfiguration",
    "resolve_configuration",
    "get_api_key",
    "require_api_key",
]

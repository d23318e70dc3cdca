"""Graphs module.

This module contains the research graph definitions, their state and the
step transition tables they are built from.
"""
from deep_research_agent.graphs.context import RunContext
from deep_research_agent.graphs.report_graph import create_report_graph, create_section_graph
from deep_research_agent.graphs.research_graph import create_research_graph
from deep_research_agent.graphs.steps import (
    EngineStep,
    NARRATIVE_TRANSITIONS,
    SECTION_REPORT_TRANSITIONS,
    SECTION_TRANSITIONS,
    SectionStep,
    ensure_transition,
)

__all__ = [
    "EngineStep",
    "NARRATIVE_TRANSITIONS",
    "RunContext",
    "SECTION_REPORT_TRANSITIONS",
    "SECTION_TRANSITIONS",
    "SectionStep",
    "create_report_graph",
    "create_research_graph",
    "create_section_graph",
    "ensure_transition",
]

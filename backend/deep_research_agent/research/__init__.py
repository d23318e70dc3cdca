"""
Research components used by the graph nodes.
"""
from deep_research_agent.research.queries import fallback_queries, generate_queries
from deep_research_agent.research.reflection import refine, reflect
from deep_research_agent.research.report import assemble_narrative_report, assemble_section_report, no_findings_report
from deep_research_agent.research.rounds import analyze_result, research_query
from deep_research_agent.research.sections import (
    default_plan,
    grade_section,
    plan_sections,
    write_final_section,
    write_section,
)

__all__ = [
    "analyze_result",
    "assemble_narrative_report",
    "assemble_section_report",
    "default_plan",
    "fallback_queries",
    "generate_queries",
    "grade_section",
    "no_findings_report",
    "plan_sections",
    "refine",
    "reflect",
    "research_query",
    "write_final_section",
    "write_section",
]

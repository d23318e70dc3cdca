"""Section report graph nodes module.

This module contains nodes for the section report graph and the per-section
research subgraph.
"""
from deep_research_agent.graphs.nodes.sections.assemble_section_report import assemble_section_report_node
from deep_research_agent.graphs.nodes.sections.freeze_section import freeze_section_node
from deep_research_agent.graphs.nodes.sections.generate_section_queries import generate_section_queries_node
from deep_research_agent.graphs.nodes.sections.grade_section import grade_section_node, route_after_grade
from deep_research_agent.graphs.nodes.sections.plan_report import map_sections, plan_report_node
from deep_research_agent.graphs.nodes.sections.research_section import research_section_node
from deep_research_agent.graphs.nodes.sections.search_section import search_section_node
from deep_research_agent.graphs.nodes.sections.write_final_sections import write_final_sections_node
from deep_research_agent.graphs.nodes.sections.write_section import write_section_node

__all__ = [
    "assemble_section_report_node",
    "freeze_section_node",
    "generate_section_queries_node",
    "grade_section_node",
    "map_sections",
    "plan_report_node",
    "research_section_node",
    "route_after_grade",
    "search_section_node",
    "write_final_sections_node",
    "write_section_node",
]

"""Narrative research graph nodes module.

This module contains nodes for the depth-looped research graph.
"""
from deep_research_agent.graphs.nodes.research.assemble_report import assemble_report_node
from deep_research_agent.graphs.nodes.research.done import done_node
from deep_research_agent.graphs.nodes.research.generate_queries import generate_queries_node, map_queries
from deep_research_agent.graphs.nodes.research.refine import refine_node, route_after_refine
from deep_research_agent.graphs.nodes.research.reflect import reflect_node
from deep_research_agent.graphs.nodes.research.run_round import run_round_node
from deep_research_agent.graphs.nodes.research.start import start_node

__all__ = [
    "assemble_report_node",
    "done_node",
    "generate_queries_node",
    "map_queries",
    "refine_node",
    "reflect_node",
    "route_after_refine",
    "run_round_node",
    "start_node",
]

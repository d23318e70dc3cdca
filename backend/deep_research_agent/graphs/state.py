"""
State definitions for the research graphs.
Uses TypedDict for type safety and Annotated reducers for state accumulation.
"""
import operator
from typing import Annotated, Dict, List, Optional, TypedDict

from deep_research_agent.graphs.steps import SectionStep
from deep_research_agent.models import Section


def merge_sections(current: Dict[int, Section], update: Dict[int, Section]) -> Dict[int, Section]:
    """Reducer keeping completed sections keyed by their plan position."""
    return {**(current or {}), **(update or {})}


class ResearchState(TypedDict, total=False):
    """
    State schema for the narrative research graph.

    Flow: start -> (generate_queries -> run_round -> reflect -> refine) x depth -> assemble_report -> done

    Fields:
        topic: The research topic
        depth_index: 0-based depth level currently being researched
        queries: Queries of the current level
        findings: Ordered analyses from every round (uses operator.add)
        reflections: One reflection per completed level (uses operator.add)
        direction: Refined research direction from the last level
        report: The final report
    """
    topic: str
    depth_index: int
    queries: List[str]
    findings: Annotated[List[str], operator.add]
    reflections: Annotated[List[str], operator.add]
    direction: str
    report: str


class RoundItemState(TypedDict):
    """Payload sent to one ``run_round`` worker."""
    topic: str
    query: str
    query_index: int
    query_count: int
    depth_index: int


class ReportState(TypedDict, total=False):
    """
    State schema for the section report graph.

    Fields:
        topic: The research topic
        sections: Planned sections in plan order
        completed_sections: Written sections keyed by plan position (merged)
        report: The final report
    """
    topic: str
    sections: List[Section]
    completed_sections: Annotated[Dict[int, Section], merge_sections]
    report: str


class SectionState(TypedDict, total=False):
    """
    State schema for the per-section research subgraph.

    Fields:
        topic: The research topic
        section: The section being researched; its content is the latest draft
        section_index: Position of the section in the plan
        position: Position among the research sections
        research_count: Number of research sections in the plan
        queries: Queries of the current attempt
        sources: Formatted search results from every attempt (uses operator.add)
        attempts: Completed grading rounds
        grade: Latest grade ("pass" or "fail")
        follow_up_queries: Grader-suggested queries for the next attempt
        step: Last section step entered
    """
    topic: str
    section: Section
    section_index: int
    position: int
    research_count: int
    queries: List[str]
    sources: Annotated[List[str], operator.add]
    attempts: int
    grade: str
    follow_up_queries: List[str]
    step: Optional[SectionStep]

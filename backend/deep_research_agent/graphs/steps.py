"""
Engine steps and their transition tables.

The graphs are built from these tables, so an edge that is not listed here
does not exist at run time. ``ERROR`` is reachable from every non-terminal
step; it is entered by the run handle, never by a graph edge.
"""
from enum import Enum
from typing import Dict, Mapping, Optional, Tuple

from deep_research_agent.exceptions import InvalidTransitionError


class EngineStep(str, Enum):
    """Top-level steps of a research run."""

    START = "start"
    GENERATE_QUERIES = "generate_queries"
    RUN_ROUND = "run_round"
    REFLECT = "reflect"
    REFINE = "refine"
    PLAN_REPORT = "plan_report"
    RESEARCH_SECTIONS = "research_sections"
    WRITE_FINAL_SECTIONS = "write_final_sections"
    ASSEMBLE_REPORT = "assemble_report"
    DONE = "done"
    ERROR = "error"


class SectionStep(str, Enum):
    """Steps of the per-section research loop."""

    GENERATE_SECTION_QUERIES = "generate_section_queries"
    SEARCH_SECTION = "search_section"
    WRITE_SECTION = "write_section"
    GRADE_SECTION = "grade_section"
    FREEZE_SECTION = "freeze_section"


TERMINAL_STEPS = frozenset({EngineStep.DONE, EngineStep.ERROR})

NARRATIVE_TRANSITIONS: Dict[EngineStep, Tuple[EngineStep, ...]] = {
    EngineStep.START: (EngineStep.GENERATE_QUERIES,),
    EngineStep.GENERATE_QUERIES: (EngineStep.RUN_ROUND,),
    EngineStep.RUN_ROUND: (EngineStep.REFLECT,),
    EngineStep.REFLECT: (EngineStep.REFINE,),
    EngineStep.REFINE: (EngineStep.GENERATE_QUERIES, EngineStep.ASSEMBLE_REPORT),
    EngineStep.ASSEMBLE_REPORT: (EngineStep.DONE,),
    EngineStep.DONE: (),
    EngineStep.ERROR: (),
}

SECTION_REPORT_TRANSITIONS: Dict[EngineStep, Tuple[EngineStep, ...]] = {
    EngineStep.START: (EngineStep.PLAN_REPORT,),
    EngineStep.PLAN_REPORT: (EngineStep.RESEARCH_SECTIONS, EngineStep.WRITE_FINAL_SECTIONS),
    EngineStep.RESEARCH_SECTIONS: (EngineStep.WRITE_FINAL_SECTIONS,),
    EngineStep.WRITE_FINAL_SECTIONS: (EngineStep.ASSEMBLE_REPORT,),
    EngineStep.ASSEMBLE_REPORT: (EngineStep.DONE,),
    EngineStep.DONE: (),
    EngineStep.ERROR: (),
}

SECTION_TRANSITIONS: Dict[SectionStep, Tuple[SectionStep, ...]] = {
    SectionStep.GENERATE_SECTION_QUERIES: (SectionStep.SEARCH_SECTION,),
    SectionStep.SEARCH_SECTION: (SectionStep.WRITE_SECTION,),
    SectionStep.WRITE_SECTION: (SectionStep.GRADE_SECTION,),
    SectionStep.GRADE_SECTION: (SectionStep.GENERATE_SECTION_QUERIES, SectionStep.FREEZE_SECTION),
    SectionStep.FREEZE_SECTION: (),
}


def allowed_transitions(table: Mapping[Enum, Tuple[Enum, ...]], current: Enum) -> Tuple[Enum, ...]:
    """Successors of ``current``; ERROR is always allowed from a non-terminal engine step."""
    successors = tuple(table.get(current, ()))
    if isinstance(current, EngineStep) and current not in TERMINAL_STEPS:
        successors += (EngineStep.ERROR,)
    return successors


def ensure_transition(table: Mapping[Enum, Tuple[Enum, ...]], current: Enum, requested: Enum) -> Enum:
    """
    Validate a step change against a transition table.

    Args:
        table: Transition table of the graph
        current: Step the run is in
        requested: Step the run wants to enter

    Returns:
        The requested step

    Raises:
        InvalidTransitionError: If the table has no such edge
    """
    if requested not in allowed_transitions(table, current):
        raise InvalidTransitionError(current.value, requested.value)
    return requested


def advance_section(current: Optional[SectionStep], requested: SectionStep) -> SectionStep:
    """
    Validate a step change of the per-section loop.

    A section starts with no step; its first step must be query generation.

    Raises:
        InvalidTransitionError: If the section table has no such edge
    """
    if current is None:
        if requested is not SectionStep.GENERATE_SECTION_QUERIES:
            raise InvalidTransitionError("none", requested.value)
        return requested
    return ensure_transition(SECTION_TRANSITIONS, SectionStep(current), requested)

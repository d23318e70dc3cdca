"""
Grade section node for the section research subgraph, plus its router.

Each grading round uses one unit of the section's budget (the run's depth).
A failing grade with budget left sends the section back to query
generation; a pass, an exhausted budget or a grader failure freezes it.
"""
from deep_research_agent.graphs.budget import section_point
from deep_research_agent.graphs.context import RunContext
from deep_research_agent.graphs.state import SectionState
from deep_research_agent.graphs.steps import SectionStep, advance_section
from deep_research_agent.logging import get_logger
from deep_research_agent.research.sections import follow_up_texts, grade_section
from deep_research_agent.streaming import stream_custom_event

logger = get_logger(__name__)


def grade_section_node(state: SectionState, run: RunContext):
    """Grades the latest draft of a section."""
    step = advance_section(state.get("step"), SectionStep.GRADE_SECTION)
    section = state["section"]
    attempts = state.get("attempts", 0) + 1
    run.progress.update(
        f'Reviewing section "{section.name}"',
        section_point(state["position"], state["research_count"], attempts - 1, run.configuration.depth, 0.75),
        node=step.value,
    )
    try:
        grade = grade_section(run.model, state["topic"], section, "\n".join(state.get("sources", [])))
    except Exception as e:
        logger.warning("section_grade_failed", section=section.name, attempt=attempts, error=str(e), exc_info=True)
        stream_custom_event("section_graded", step.value, {"section": section.name, "grade": "error", "attempt": attempts})
        return {"attempts": attempts, "grade": "pass", "follow_up_queries": [], "step": step}

    follow_ups = follow_up_texts(grade)
    stream_custom_event(
        "section_graded",
        step.value,
        {"section": section.name, "grade": grade.grade, "attempt": attempts, "follow_up_queries": follow_ups},
    )
    logger.info("section_graded", section=section.name, grade=grade.grade, attempt=attempts)
    return {"attempts": attempts, "grade": grade.grade, "follow_up_queries": follow_ups, "step": step}


def route_after_grade(run: RunContext):
    """Builds the router deciding between another attempt and freezing."""
    def route(state: SectionState) -> str:
        if state.get("grade") == "fail" and state.get("attempts", 0) < run.configuration.depth:
            return SectionStep.GENERATE_SECTION_QUERIES.value
        return SectionStep.FREEZE_SECTION.value

    return route

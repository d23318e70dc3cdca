"""
Freeze section node: the last step of the section research subgraph.
"""
from deep_research_agent.graphs.budget import section_end
from deep_research_agent.graphs.context import RunContext
from deep_research_agent.graphs.state import SectionState
from deep_research_agent.graphs.steps import SectionStep, advance_section
from deep_research_agent.logging import get_logger
from deep_research_agent.streaming import stream_custom_event

logger = get_logger(__name__)


def freeze_section_node(state: SectionState, run: RunContext):
    """Marks the section final; its content no longer changes."""
    step = advance_section(state.get("step"), SectionStep.FREEZE_SECTION)
    section = state["section"]
    stream_custom_event(
        "section_completed",
        step.value,
        {"section": section.name, "attempts": state.get("attempts", 0), "grade": state.get("grade", "pass")},
    )
    run.progress.update(
        f'Section "{section.name}" complete',
        section_end(state["position"], state["research_count"]),
        node=step.value,
    )
    logger.info("section_frozen", section=section.name, attempts=state.get("attempts", 0))
    return {"step": step}

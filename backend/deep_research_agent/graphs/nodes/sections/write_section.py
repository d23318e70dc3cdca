"""
Write section node for the section research subgraph.

A failed write keeps the previous attempt's draft; a section that never got
one is rendered with a placeholder at assembly.
"""
from deep_research_agent.graphs.budget import section_point
from deep_research_agent.graphs.context import RunContext
from deep_research_agent.graphs.state import SectionState
from deep_research_agent.graphs.steps import SectionStep, advance_section
from deep_research_agent.logging import get_logger
from deep_research_agent.research.sections import write_section
from deep_research_agent.streaming import stream_custom_event

logger = get_logger(__name__)


def write_section_node(state: SectionState, run: RunContext):
    """Drafts the section from every source gathered so far."""
    step = advance_section(state.get("step"), SectionStep.WRITE_SECTION)
    section = state["section"]
    attempt = state.get("attempts", 0)
    run.progress.update(
        f'Writing section "{section.name}"',
        section_point(state["position"], state["research_count"], attempt, run.configuration.depth, 0.5),
        node=step.value,
    )
    try:
        content = write_section(run.model, state["topic"], section, "\n".join(state.get("sources", [])))
    except Exception as e:
        stream_custom_event("section_write_failed", step.value, {"section": section.name, "error": str(e)})
        logger.warning("section_write_failed", section=section.name, attempt=attempt + 1, error=str(e), exc_info=True)
        return {"step": step}
    return {"section": section.model_copy(update={"content": content}), "step": step}

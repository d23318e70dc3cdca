"""
Write final sections node: sections that need no web research.

They are written from the completed research sections. A failed write
leaves that section empty.
"""
from deep_research_agent.graphs.budget import ASSEMBLY_START
from deep_research_agent.graphs.context import RunContext
from deep_research_agent.graphs.state import ReportState
from deep_research_agent.graphs.steps import EngineStep
from deep_research_agent.logging import get_logger
from deep_research_agent.research.sections import format_research_materials, write_final_section
from deep_research_agent.streaming import stream_custom_event

logger = get_logger(__name__)


def write_final_sections_node(state: ReportState, run: RunContext):
    """Writes every non-research section."""
    try:
        run.enter(EngineStep.WRITE_FINAL_SECTIONS)
        sections = state.get("sections", [])
        completed = state.get("completed_sections", {}) or {}
        materials = format_research_materials([completed[i] for i in sorted(completed)])

        pending = [(index, s) for index, s in enumerate(sections) if not s.research]
        written = {}
        for count, (index, section) in enumerate(pending, start=1):
            run.progress.update(
                f'Writing section "{section.name}" ({count}/{len(pending)})',
                ASSEMBLY_START,
                node="write_final_sections",
            )
            try:
                content = write_final_section(run.model, state["topic"], section, materials)
            except Exception as e:
                logger.warning("final_section_write_failed", section=section.name, error=str(e), exc_info=True)
                content = ""
            written[index] = section.model_copy(update={"content": content})
            stream_custom_event("section_completed", "write_final_sections", {"section": section.name})

        if not written:
            return {}
        return {"completed_sections": written}
    except Exception as e:
        logger.error("write_final_sections_node_error", error=str(e), exc_info=True)
        raise

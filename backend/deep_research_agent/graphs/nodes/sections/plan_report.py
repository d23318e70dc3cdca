"""
Plan report node for the section report graph, plus the section fan-out.
"""
from typing import List, Union

from langgraph.types import Send

from deep_research_agent.graphs.budget import SETUP_END
from deep_research_agent.graphs.context import RunContext
from deep_research_agent.graphs.state import ReportState
from deep_research_agent.graphs.steps import EngineStep
from deep_research_agent.logging import get_logger
from deep_research_agent.research.sections import plan_sections
from deep_research_agent.streaming import stream_custom_event

logger = get_logger(__name__)


def plan_report_node(state: ReportState, run: RunContext):
    """Plans the report sections."""
    try:
        run.enter(EngineStep.PLAN_REPORT)
        sections = plan_sections(run.model, state["topic"], run.configuration.report_structure)
        stream_custom_event(
            "report_planned",
            "plan_report",
            {"sections": [{"name": s.name, "description": s.description, "research": s.research} for s in sections]},
        )
        run.progress.update("Report plan created", SETUP_END, node="plan_report")
        return {"sections": sections}
    except Exception as e:
        logger.error("plan_report_node_error", error=str(e), exc_info=True)
        raise


def map_sections(state: ReportState) -> Union[str, List[Send]]:
    """Maps research sections to parallel section research; skips ahead when there are none."""
    research = [(index, s) for index, s in enumerate(state.get("sections", [])) if s.research]
    if not research:
        return EngineStep.WRITE_FINAL_SECTIONS.value
    return [
        Send(
            EngineStep.RESEARCH_SECTIONS.value,
            {
                "topic": state["topic"],
                "section": section,
                "section_index": index,
                "position": position,
                "research_count": len(research),
            },
        )
        for position, (index, section) in enumerate(research)
    ]

"""
Assemble report node for the section report graph.
"""
from deep_research_agent.graphs.budget import ASSEMBLY_START
from deep_research_agent.graphs.context import RunContext
from deep_research_agent.graphs.state import ReportState
from deep_research_agent.graphs.steps import EngineStep
from deep_research_agent.logging import get_logger
from deep_research_agent.research.report import assemble_section_report

logger = get_logger(__name__)


def assemble_section_report_node(state: ReportState, run: RunContext):
    """Concatenates the sections in plan order."""
    try:
        run.enter(EngineStep.ASSEMBLE_REPORT)
        run.progress.update("Assembling final report...", ASSEMBLY_START, node="assemble_report")
        completed = state.get("completed_sections", {}) or {}
        sections = [completed.get(index, planned) for index, planned in enumerate(state.get("sections", []))]
        report = assemble_section_report(sections)
        logger.info("report_assembled", sections=len(sections), chars=len(report))
        return {"report": report}
    except Exception as e:
        logger.error("assemble_section_report_node_error", error=str(e), exc_info=True)
        raise

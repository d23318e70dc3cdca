"""
Assemble report node for the narrative research graph.
"""
from deep_research_agent.graphs.budget import ASSEMBLY_START
from deep_research_agent.graphs.context import RunContext
from deep_research_agent.graphs.state import ResearchState
from deep_research_agent.graphs.steps import EngineStep
from deep_research_agent.logging import get_logger
from deep_research_agent.research.report import assemble_narrative_report

logger = get_logger(__name__)


def assemble_report_node(state: ResearchState, run: RunContext):
    """Writes the final narrative report from findings and reflections."""
    try:
        run.enter(EngineStep.ASSEMBLE_REPORT)
        run.progress.update("Generating final report...", ASSEMBLY_START, node="assemble_report")
        findings = state.get("findings", [])
        report = assemble_narrative_report(run.model, state["topic"], findings, state.get("reflections", []))
        logger.info("report_assembled", findings=len(findings), chars=len(report))
        return {"report": report}
    except Exception as e:
        logger.error("assemble_report_node_error", error=str(e), exc_info=True)
        raise

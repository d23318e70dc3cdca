"""
Done node shared by both graph variants.
"""
from deep_research_agent.graphs.budget import COMPLETE
from deep_research_agent.graphs.context import RunContext
from deep_research_agent.graphs.steps import EngineStep
from deep_research_agent.logging import get_logger

logger = get_logger(__name__)


def done_node(state: dict, run: RunContext):
    """Marks the run complete."""
    run.enter(EngineStep.DONE)
    run.progress.update("Research complete", COMPLETE, node="done")
    logger.info("research_completed", report_chars=len(state.get("report", "")))
    return {}

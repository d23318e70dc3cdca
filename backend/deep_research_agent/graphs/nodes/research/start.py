"""
Start node shared by both graph variants.

Resets progress to zero and reports the end of setup.
"""
from deep_research_agent.graphs.budget import SETUP_END
from deep_research_agent.graphs.context import RunContext
from deep_research_agent.logging import get_logger
from deep_research_agent.streaming import stream_custom_event

logger = get_logger(__name__)


def start_node(state: dict, run: RunContext):
    """Opens the run: progress reset and configuration summary."""
    try:
        configuration = run.configuration
        run.progress.reset("Starting research process...", node="start")
        stream_custom_event(
            "research_started",
            "start",
            {
                "topic": state["topic"],
                "depth": configuration.depth,
                "breadth": configuration.breadth,
                "model_id": configuration.model_id,
                "search_provider": configuration.search_provider.value,
                "report_mode": configuration.report_mode.value,
            },
        )
        logger.info(
            "research_started",
            topic=state["topic"],
            depth=configuration.depth,
            breadth=configuration.breadth,
            report_mode=configuration.report_mode.value,
        )
        run.progress.update("Research configured", SETUP_END, node="start")
        return {}
    except Exception as e:
        logger.error("start_node_error", error=str(e), exc_info=True)
        raise

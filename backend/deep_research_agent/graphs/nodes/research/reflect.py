"""
Reflect node for the narrative research graph.
"""
from deep_research_agent.graphs.budget import level_point, REFLECT_AT, ROUND_END
from deep_research_agent.graphs.context import RunContext
from deep_research_agent.graphs.state import ResearchState
from deep_research_agent.graphs.steps import EngineStep
from deep_research_agent.logging import get_logger
from deep_research_agent.research.reflection import reflect

logger = get_logger(__name__)


def reflect_node(state: ResearchState, run: RunContext):
    """Reflects on all findings collected so far."""
    try:
        run.enter(EngineStep.REFLECT)
        depth = run.configuration.depth
        level = state.get("depth_index", 0)
        findings = state.get("findings", [])
        run.progress.update(
            f"Analyzing information... (phase {level + 1}/{depth})",
            level_point(level, depth, ROUND_END),
            node="reflect",
        )
        run.progress.update(
            f"Reflecting on findings... (phase {level + 1}/{depth})",
            level_point(level, depth, REFLECT_AT),
            node="reflect",
        )
        reflection = reflect(run.model, state["topic"], findings)
        logger.info("reflection_added", depth_index=level, findings=len(findings))
        return {"reflections": [reflection]}
    except Exception as e:
        logger.error("reflect_node_error", error=str(e), exc_info=True)
        raise

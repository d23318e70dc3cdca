"""
Refine node for the narrative research graph, plus the loop router.
"""
from deep_research_agent.graphs.budget import level_base, level_point, REFINE_AT
from deep_research_agent.graphs.context import RunContext
from deep_research_agent.graphs.state import ResearchState
from deep_research_agent.graphs.steps import EngineStep
from deep_research_agent.logging import get_logger
from deep_research_agent.research.reflection import refine

logger = get_logger(__name__)


def refine_node(state: ResearchState, run: RunContext):
    """Proposes the next research direction and closes the depth level."""
    try:
        run.enter(EngineStep.REFINE)
        depth = run.configuration.depth
        level = state.get("depth_index", 0)
        reflections = state.get("reflections", [])
        run.progress.update(
            f"Considering the next research direction... (phase {level + 1}/{depth})",
            level_point(level, depth, REFINE_AT),
            node="refine",
        )
        direction = refine(run.model, state["topic"], state.get("findings", []), reflections[-1] if reflections else "")
        run.progress.update(
            f"Research phase {level + 1}/{depth} complete",
            level_base(level + 1, depth),
            node="refine",
        )
        logger.info("level_completed", depth_index=level)
        return {"direction": direction, "depth_index": level + 1}
    except Exception as e:
        logger.error("refine_node_error", error=str(e), exc_info=True)
        raise


def route_after_refine(run: RunContext):
    """Builds the router deciding between another level and the report."""
    def route(state: ResearchState) -> str:
        if state.get("depth_index", 0) < run.configuration.depth:
            return EngineStep.GENERATE_QUERIES.value
        return EngineStep.ASSEMBLE_REPORT.value

    return route

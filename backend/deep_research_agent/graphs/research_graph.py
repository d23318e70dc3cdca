"""
Narrative research graph construction.

start -> generate_queries -> run_round (one worker per query) -> reflect ->
refine -> [generate_queries | assemble_report] -> done
"""
from deep_research_agent.graphs.builder import bind_node, build_graph_from_table
from deep_research_agent.graphs.context import RunContext
from deep_research_agent.graphs.nodes.research import (
    assemble_report_node,
    done_node,
    generate_queries_node,
    map_queries,
    refine_node,
    reflect_node,
    route_after_refine,
    run_round_node,
    start_node,
)
from deep_research_agent.graphs.state import ResearchState
from deep_research_agent.graphs.steps import EngineStep, NARRATIVE_TRANSITIONS
from deep_research_agent.logging import get_logger

logger = get_logger(__name__)


def create_research_graph(run: RunContext):
    """
    Create and compile the narrative research graph for one run.

    Args:
        run: Context of the run the graph executes

    Returns:
        Compiled LangGraph instance
    """
    nodes = {
        EngineStep.START: bind_node(start_node, run),
        EngineStep.GENERATE_QUERIES: bind_node(generate_queries_node, run),
        EngineStep.RUN_ROUND: bind_node(run_round_node, run),
        EngineStep.REFLECT: bind_node(reflect_node, run),
        EngineStep.REFINE: bind_node(refine_node, run),
        EngineStep.ASSEMBLE_REPORT: bind_node(assemble_report_node, run),
        EngineStep.DONE: bind_node(done_node, run),
    }
    routers = {
        EngineStep.GENERATE_QUERIES: map_queries,
        EngineStep.REFINE: route_after_refine(run),
    }
    graph = build_graph_from_table(ResearchState, NARRATIVE_TRANSITIONS, EngineStep.START, nodes, routers)
    logger.debug("research_graph_compiled", run_id=run.run_id)
    return graph

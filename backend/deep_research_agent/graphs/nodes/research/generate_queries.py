"""
Generate queries node for the narrative research graph.

The first level researches the topic itself; later levels research the topic
combined with the direction proposed by the previous refinement.
"""
from typing import List

from langgraph.types import Send

from deep_research_agent.graphs.budget import level_base, level_point, ROUND_START
from deep_research_agent.graphs.context import RunContext
from deep_research_agent.graphs.state import ResearchState
from deep_research_agent.graphs.steps import EngineStep
from deep_research_agent.logging import get_logger
from deep_research_agent.research.queries import generate_queries
from deep_research_agent.streaming import stream_custom_event

logger = get_logger(__name__)


def level_topic(topic: str, direction: str) -> str:
    """Query-generation subject for a level."""
    direction = (direction or "").strip()
    return f"{topic} {direction}" if direction else topic


def generate_queries_node(state: ResearchState, run: RunContext):
    """Generates the queries of the current depth level."""
    try:
        run.enter(EngineStep.GENERATE_QUERIES)
        depth = run.configuration.depth
        level = state.get("depth_index", 0)
        run.progress.update(
            f"Starting research phase {level + 1}/{depth}...",
            level_base(level, depth),
            node="generate_queries",
        )

        subject = state["topic"] if level == 0 else level_topic(state["topic"], state.get("direction", ""))
        queries = generate_queries(run.model, subject, run.configuration.breadth)

        stream_custom_event("generated_queries", "generate_queries", {"queries": queries, "depth_index": level})
        run.progress.update(
            f"Processing search queries... (phase {level + 1}/{depth})",
            level_point(level, depth, ROUND_START),
            node="generate_queries",
        )
        logger.info("level_queries_generated", depth_index=level, queries=queries)
        return {"queries": queries}
    except Exception as e:
        logger.error("generate_queries_node_error", error=str(e), exc_info=True)
        raise


def map_queries(state: ResearchState) -> List[Send]:
    """Maps the level's queries to parallel run_round invocations."""
    queries = state.get("queries", [])
    return [
        Send(
            EngineStep.RUN_ROUND.value,
            {
                "topic": state["topic"],
                "query": query,
                "query_index": index,
                "query_count": len(queries),
                "depth_index": state.get("depth_index", 0),
            },
        )
        for index, query in enumerate(queries)
    ]

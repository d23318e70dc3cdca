"""
Run round node: one query of a research round.

Runs once per query via Send. A failure here loses this query's findings
only; the round and the run carry on.
"""
from deep_research_agent.graphs.budget import round_point
from deep_research_agent.graphs.context import RunContext
from deep_research_agent.graphs.state import RoundItemState
from deep_research_agent.graphs.steps import EngineStep
from deep_research_agent.logging import get_logger
from deep_research_agent.models import SearchResult
from deep_research_agent.research.rounds import research_query
from deep_research_agent.streaming import stream_custom_event
from deep_research_agent.utils.helpers import format_search_url_markdown

logger = get_logger(__name__)


def run_round_node(state: RoundItemState, run: RunContext):
    """Searches one query and analyzes its top results."""
    query = state["query"]
    level = state["depth_index"]
    index = state["query_index"]
    count = state["query_count"]
    depth = run.configuration.depth
    try:
        run.enter(EngineStep.RUN_ROUND)
        run.progress.update(
            f'Processing search query ({index + 1}/{count}): "{query}"',
            round_point(level, depth, index, count),
            node="run_round",
        )

        def on_result(result_index: int, result_count: int, result: SearchResult) -> None:
            stream_custom_event(
                "web_search_url",
                "run_round",
                {"url": result.url, "markdown": format_search_url_markdown(result.url)},
            )
            run.progress.update(
                f"Analyzing web content ({result_index + 1}/{result_count}): {result.url}",
                round_point(level, depth, index, count, result_index, result_count),
                node="run_round",
            )

        analyses = research_query(
            run.model,
            run.fetcher,
            state["topic"],
            query,
            top_k=run.configuration.top_k_results,
            max_document_chars=run.configuration.max_document_chars,
            on_result=on_result,
        )
        logger.info("round_query_completed", query=query, depth_index=level, findings=len(analyses))
        return {"findings": [analysis.analysis for analysis in analyses]}
    except Exception as e:
        stream_custom_event("query_failed", "run_round", {"query": query, "error": str(e)})
        logger.warning("run_round_query_failed", query=query, depth_index=level, error=str(e), exc_info=True)
        return {"findings": []}

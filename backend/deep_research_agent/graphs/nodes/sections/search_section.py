"""
Search section node for the section research subgraph.

Executes the attempt's queries through the run's fetcher and formats the
results as markdown sources for the writer.
"""
from deep_research_agent.graphs.budget import section_point
from deep_research_agent.graphs.context import RunContext
from deep_research_agent.graphs.state import SectionState
from deep_research_agent.graphs.steps import SectionStep, advance_section
from deep_research_agent.logging import get_logger
from deep_research_agent.streaming import stream_custom_event
from deep_research_agent.utils.helpers import format_search_results, format_search_url_markdown

logger = get_logger(__name__)


def search_section_node(state: SectionState, run: RunContext):
    """Executes a section's queries and collects formatted sources."""
    step = advance_section(state.get("step"), SectionStep.SEARCH_SECTION)
    section = state["section"]
    attempt = state.get("attempts", 0)
    run.progress.update(
        f'Searching sources for section "{section.name}"',
        section_point(state["position"], state["research_count"], attempt, run.configuration.depth, 0.25),
        node=step.value,
    )

    sources = []
    for query in state.get("queries", []):
        try:
            results = run.fetcher.search(query)
        except Exception as e:
            logger.warning("section_search_failed", section=section.name, query=query, error=str(e))
            continue
        for result in results:
            stream_custom_event(
                "web_search_url",
                step.value,
                {"url": result.url, "markdown": format_search_url_markdown(result.url)},
            )
        if results:
            sources.append(format_search_results(results, query))

    logger.info("section_sources_collected", section=section.name, attempt=attempt + 1, sources=len(sources))
    return {"sources": sources, "step": step}

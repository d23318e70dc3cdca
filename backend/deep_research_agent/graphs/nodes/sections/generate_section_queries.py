"""
Generate section queries node for the section research subgraph.

The grader's follow-up queries are used when the previous attempt failed with
suggestions; otherwise new queries are generated for the section.
"""
from deep_research_agent.graphs.budget import section_point
from deep_research_agent.graphs.context import RunContext
from deep_research_agent.graphs.state import SectionState
from deep_research_agent.graphs.steps import SectionStep, advance_section
from deep_research_agent.logging import get_logger
from deep_research_agent.research.queries import generate_queries
from deep_research_agent.streaming import stream_custom_event

logger = get_logger(__name__)


def generate_section_queries_node(state: SectionState, run: RunContext):
    """Picks the queries for the next research attempt of a section."""
    step = advance_section(state.get("step"), SectionStep.GENERATE_SECTION_QUERIES)
    section = state["section"]
    attempt = state.get("attempts", 0)
    count = run.configuration.number_of_queries
    run.progress.update(
        f'Researching section "{section.name}" (attempt {attempt + 1}/{run.configuration.depth})',
        section_point(state["position"], state["research_count"], attempt, run.configuration.depth),
        node=step.value,
    )

    follow_ups = [q for q in state.get("follow_up_queries", []) if q.strip()]
    if follow_ups:
        queries = follow_ups[:count]
        logger.info("section_follow_up_queries_used", section=section.name, queries=queries)
    else:
        queries = generate_queries(run.model, state["topic"], count, section=section)

    stream_custom_event("generated_queries", step.value, {"section": section.name, "queries": queries})
    return {"queries": queries, "follow_up_queries": [], "step": step}

"""
Research section node for the section report graph.

Invokes the section research subgraph for one planned section and forwards
its custom events. A section whose research fails is kept with empty content
so the report still shows its heading.
"""
from deep_research_agent.graphs.context import RunContext
from deep_research_agent.graphs.steps import EngineStep
from deep_research_agent.logging import get_logger
from deep_research_agent.streaming import forward_event, is_envelope, stream_custom_event

logger = get_logger(__name__)


def research_section_node(state: dict, run: RunContext, section_graph):
    """Runs the research loop of one section."""
    section = state["section"]
    index = state["section_index"]
    try:
        run.enter(EngineStep.RESEARCH_SECTIONS)
        final_section = section
        for mode, data in section_graph.stream(
            {
                "topic": state["topic"],
                "section": section,
                "section_index": index,
                "position": state["position"],
                "research_count": state["research_count"],
                "attempts": 0,
            },
            config={"recursion_limit": 6 * run.configuration.depth + 10},
            stream_mode=["custom", "values"],
        ):
            if mode == "custom":
                items = data if isinstance(data, list) else [data]
                for item in items:
                    if is_envelope(item):
                        forward_event(item)
            elif mode == "values" and "section" in data:
                final_section = data["section"]
        return {"completed_sections": {index: final_section}}
    except Exception as e:
        stream_custom_event("section_failed", "research_sections", {"section": section.name, "error": str(e)})
        logger.warning("research_section_failed", section=section.name, error=str(e), exc_info=True)
        return {"completed_sections": {index: section.model_copy(update={"content": ""})}}

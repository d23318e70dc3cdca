"""
Section report graph construction.

Main graph: start -> plan_report -> research_sections (one worker per research
section) -> write_final_sections -> assemble_report -> done

Section subgraph: generate_section_queries -> search_section -> write_section
-> grade_section -> [generate_section_queries | freeze_section]
"""
from deep_research_agent.graphs.builder import bind_node, build_graph_from_table
from deep_research_agent.graphs.context import RunContext
from deep_research_agent.graphs.nodes.research import done_node, start_node
from deep_research_agent.graphs.nodes.sections import (
    assemble_section_report_node,
    freeze_section_node,
    generate_section_queries_node,
    grade_section_node,
    map_sections,
    plan_report_node,
    research_section_node,
    route_after_grade,
    search_section_node,
    write_final_sections_node,
    write_section_node,
)
from deep_research_agent.graphs.state import ReportState, SectionState
from deep_research_agent.graphs.steps import EngineStep, SECTION_REPORT_TRANSITIONS, SECTION_TRANSITIONS, SectionStep
from deep_research_agent.logging import get_logger

logger = get_logger(__name__)


def create_section_graph(run: RunContext):
    """
    Create and compile the per-section research subgraph.

    Args:
        run: Context of the run the subgraph executes in

    Returns:
        Compiled LangGraph instance
    """
    nodes = {
        SectionStep.GENERATE_SECTION_QUERIES: bind_node(generate_section_queries_node, run),
        SectionStep.SEARCH_SECTION: bind_node(search_section_node, run),
        SectionStep.WRITE_SECTION: bind_node(write_section_node, run),
        SectionStep.GRADE_SECTION: bind_node(grade_section_node, run),
        SectionStep.FREEZE_SECTION: bind_node(freeze_section_node, run),
    }
    routers = {SectionStep.GRADE_SECTION: route_after_grade(run)}
    return build_graph_from_table(
        SectionState, SECTION_TRANSITIONS, SectionStep.GENERATE_SECTION_QUERIES, nodes, routers
    )


def create_report_graph(run: RunContext):
    """
    Create and compile the section report graph for one run.

    Args:
        run: Context of the run the graph executes

    Returns:
        Compiled LangGraph instance
    """
    section_graph = create_section_graph(run)
    nodes = {
        EngineStep.START: bind_node(start_node, run),
        EngineStep.PLAN_REPORT: bind_node(plan_report_node, run),
        EngineStep.RESEARCH_SECTIONS: bind_node(research_section_node, run, section_graph),
        EngineStep.WRITE_FINAL_SECTIONS: bind_node(write_final_sections_node, run),
        EngineStep.ASSEMBLE_REPORT: bind_node(assemble_section_report_node, run),
        EngineStep.DONE: bind_node(done_node, run),
    }
    routers = {EngineStep.PLAN_REPORT: map_sections}
    graph = build_graph_from_table(ReportState, SECTION_REPORT_TRANSITIONS, EngineStep.START, nodes, routers)
    logger.debug("report_graph_compiled", run_id=run.run_id)
    return graph

"""
Graph construction from a transition table.

Every edge added to the StateGraph comes from the table: single-successor
steps get a plain edge, multi-successor steps a conditional edge whose path
map is exactly the allowed successors, and steps without successors end the
graph.
"""
from enum import Enum
from typing import Any, Callable, Dict, Mapping, Tuple

from langgraph.graph import END, START, StateGraph


def bind_node(node: Callable[..., Any], *bound: Any) -> Callable[[Any], Any]:
    """Close a node function over run-scoped arguments, leaving ``state`` free."""
    def bound_node(state):
        return node(state, *bound)

    bound_node.__name__ = getattr(node, "__name__", "node")
    return bound_node


def build_graph_from_table(
    state_schema: type,
    transitions: Mapping[Enum, Tuple[Enum, ...]],
    entry: Enum,
    nodes: Dict[Enum, Callable[[Any], Any]],
    routers: Dict[Enum, Callable[[Any], Any]],
):
    """
    Build and compile a graph whose edges are the table's transitions.

    Args:
        state_schema: TypedDict state of the graph
        transitions: Step -> allowed successor steps
        entry: First step after START
        nodes: Step -> node callable (steps without a node, such as ERROR, are skipped)
        routers: Step -> routing callable, required for steps with several successors

    Returns:
        Compiled graph

    Raises:
        ValueError: If a multi-successor step has no router
    """
    builder = StateGraph(state_schema)
    for step, node in nodes.items():
        builder.add_node(step.value, node)

    builder.add_edge(START, entry.value)
    for step, successors in transitions.items():
        if step not in nodes:
            continue
        targets = [target.value for target in successors if target in nodes]
        if step in routers:
            builder.add_conditional_edges(step.value, routers[step], targets)
        elif not targets:
            builder.add_edge(step.value, END)
        elif len(targets) == 1:
            builder.add_edge(step.value, targets[0])
        else:
            raise ValueError(f"Step {step.value} has several successors but no router")
    return builder.compile()

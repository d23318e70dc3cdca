"""
Progress allocation across the phases of a run.

Setup takes 0-5, the research body takes 90 and assembly starts at 95. In the
narrative variant each depth level gets an equal share of the body; within a
level the round runs from 10% to 60% of the share, reflection reports at 80%
and refinement at 90%. In the section variant each research section gets an
equal share of the body.
"""
SETUP_END = 5.0
BODY_SPAN = 90.0
ASSEMBLY_START = 95.0
COMPLETE = 100.0

ROUND_START = 0.1
ROUND_END = 0.6
REFLECT_AT = 0.8
REFINE_AT = 0.9


def level_share(depth: int) -> float:
    return BODY_SPAN / max(1, depth)


def level_base(level: int, depth: int) -> float:
    """Percent at which depth level ``level`` (0-based) starts."""
    return SETUP_END + level * level_share(depth)


def level_point(level: int, depth: int, fraction: float) -> float:
    """Percent at ``fraction`` of the way through a depth level."""
    return level_base(level, depth) + fraction * level_share(depth)


def round_point(level: int, depth: int, query_index: int, query_count: int, result_index: int = 0, result_count: int = 1) -> float:
    """
    Percent for one query (and one result within it) of a research round.

    The round's budget is split evenly across queries, and each query's part
    evenly across the results it analyzes.
    """
    round_span = (ROUND_END - ROUND_START) * level_share(depth)
    query_span = round_span / max(1, query_count)
    start = level_point(level, depth, ROUND_START) + query_index * query_span
    return start + result_index * (query_span / max(1, result_count))


def section_point(position: int, count: int, attempt: int = 0, attempts: int = 1, fraction: float = 0.0) -> float:
    """
    Percent inside one research section's share.

    Args:
        position: 0-based position among the research sections
        count: Number of research sections
        attempt: 0-based research attempt of the section
        attempts: Attempt budget of the section
        fraction: Position within the attempt (0.0-1.0)
    """
    share = BODY_SPAN / max(1, count)
    attempt_span = share / max(1, attempts)
    attempt = min(attempt, max(1, attempts) - 1)
    return SETUP_END + position * share + attempt * attempt_span + fraction * attempt_span


def section_end(position: int, count: int) -> float:
    return SETUP_END + (position + 1) * (BODY_SPAN / max(1, count))

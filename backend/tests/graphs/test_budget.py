"""
Tests for progress allocation.
"""
import pytest

from deep_research_agent.graphs.budget import (
    ASSEMBLY_START,
    REFINE_AT,
    REFLECT_AT,
    ROUND_END,
    SETUP_END,
    level_base,
    level_point,
    round_point,
    section_end,
    section_point,
)


@pytest.mark.parametrize("depth", [1, 2, 3, 5])
def test_levels_cover_the_body(depth):
    """Test that the levels span setup end to assembly start."""
    assert level_base(0, depth) == SETUP_END
    assert level_base(depth, depth) == pytest.approx(ASSEMBLY_START)


@pytest.mark.parametrize("depth,breadth,top_k", [(1, 1, 1), (2, 3, 3), (3, 10, 3)])
def test_narrative_points_increase(depth, breadth, top_k):
    """Test that the narrative schedule is non-decreasing."""
    points = []
    for level in range(depth):
        points.append(level_base(level, depth))
        for query in range(breadth):
            for result in range(top_k):
                points.append(round_point(level, depth, query, breadth, result, top_k))
        points.append(level_point(level, depth, ROUND_END))
        points.append(level_point(level, depth, REFLECT_AT))
        points.append(level_point(level, depth, REFINE_AT))
    points.append(level_base(depth, depth))

    assert points == sorted(points)
    assert points[-1] <= ASSEMBLY_START


@pytest.mark.parametrize("count,attempts", [(1, 1), (2, 3), (4, 2)])
def test_section_points_increase(count, attempts):
    """Test that the section schedule is non-decreasing and ends at assembly."""
    points = []
    for position in range(count):
        for attempt in range(attempts):
            for fraction in (0.0, 0.25, 0.5, 0.75):
                points.append(section_point(position, count, attempt, attempts, fraction))
        points.append(section_end(position, count))

    assert points == sorted(points)
    assert section_end(count - 1, count) == pytest.approx(ASSEMBLY_START)


def test_section_attempt_is_capped():
    """Test that attempts beyond the budget stay inside the section's share."""
    assert section_point(0, 1, attempt=9, attempts=3) < section_end(0, 1)

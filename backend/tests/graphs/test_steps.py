"""
Tests for the step transition tables and the run context.
"""
import pytest

from deep_research_agent.exceptions import InvalidTransitionError
from deep_research_agent.graphs.steps import (
    EngineStep,
    NARRATIVE_TRANSITIONS,
    SECTION_REPORT_TRANSITIONS,
    SectionStep,
    TERMINAL_STEPS,
    advance_section,
    allowed_transitions,
    ensure_transition,
)


def test_narrative_loop_edges():
    """Test the depth loop of the narrative table."""
    assert NARRATIVE_TRANSITIONS[EngineStep.REFINE] == (EngineStep.GENERATE_QUERIES, EngineStep.ASSEMBLE_REPORT)
    assert ensure_transition(NARRATIVE_TRANSITIONS, EngineStep.START, EngineStep.GENERATE_QUERIES)


@pytest.mark.parametrize("table", [NARRATIVE_TRANSITIONS, SECTION_REPORT_TRANSITIONS])
def test_error_reachable_from_every_non_terminal_step(table):
    """Test that ERROR is allowed from every non-terminal step."""
    for step in table:
        if step in TERMINAL_STEPS:
            assert EngineStep.ERROR not in allowed_transitions(table, step)
        else:
            assert EngineStep.ERROR in allowed_transitions(table, step)


@pytest.mark.parametrize("table", [NARRATIVE_TRANSITIONS, SECTION_REPORT_TRANSITIONS])
def test_terminal_steps_have_no_successors(table):
    """Test that DONE and ERROR are terminal."""
    assert allowed_transitions(table, EngineStep.DONE) == ()
    assert allowed_transitions(table, EngineStep.ERROR) == ()


@pytest.mark.parametrize(
    "table,current,requested",
    [
        (NARRATIVE_TRANSITIONS, EngineStep.START, EngineStep.REFLECT),
        (NARRATIVE_TRANSITIONS, EngineStep.RUN_ROUND, EngineStep.ASSEMBLE_REPORT),
        (NARRATIVE_TRANSITIONS, EngineStep.DONE, EngineStep.START),
        (SECTION_REPORT_TRANSITIONS, EngineStep.START, EngineStep.GENERATE_QUERIES),
        (SECTION_REPORT_TRANSITIONS, EngineStep.RESEARCH_SECTIONS, EngineStep.PLAN_REPORT),
    ],
)
def test_illegal_transitions_raise(table, current, requested):
    """Test that unlisted edges are rejected."""
    with pytest.raises(InvalidTransitionError) as exc_info:
        ensure_transition(table, current, requested)

    assert exc_info.value.current == current.value
    assert exc_info.value.requested == requested.value


def test_section_loop_must_start_with_queries():
    """Test the first step of the section loop."""
    assert advance_section(None, SectionStep.GENERATE_SECTION_QUERIES) == SectionStep.GENERATE_SECTION_QUERIES
    with pytest.raises(InvalidTransitionError):
        advance_section(None, SectionStep.WRITE_SECTION)


def test_section_loop_edges():
    """Test the grade branch and the frozen end of the section loop."""
    assert advance_section(SectionStep.GRADE_SECTION, SectionStep.GENERATE_SECTION_QUERIES)
    assert advance_section(SectionStep.GRADE_SECTION, SectionStep.FREEZE_SECTION)
    with pytest.raises(InvalidTransitionError):
        advance_section(SectionStep.FREEZE_SECTION, SectionStep.WRITE_SECTION)
    with pytest.raises(InvalidTransitionError):
        advance_section(SectionStep.SEARCH_SECTION, SectionStep.GRADE_SECTION)


def test_run_context_enter_and_fail(make_run):
    """Test the run context's step bookkeeping."""
    run = make_run()

    run.enter(EngineStep.START)
    run.enter(EngineStep.GENERATE_QUERIES)
    run.enter(EngineStep.GENERATE_QUERIES)
    assert run.step == EngineStep.GENERATE_QUERIES

    with pytest.raises(InvalidTransitionError):
        run.enter(EngineStep.DONE)

    run.fail()
    assert run.step == EngineStep.ERROR


def test_run_context_fail_after_done_keeps_done(make_run):
    """Test that a finished run is not marked failed."""
    run = make_run()
    for step in (
        EngineStep.GENERATE_QUERIES,
        EngineStep.RUN_ROUND,
        EngineStep.REFLECT,
        EngineStep.REFINE,
        EngineStep.ASSEMBLE_REPORT,
        EngineStep.DONE,
    ):
        run.enter(step)

    run.fail()

    assert run.step == EngineStep.DONE


def test_run_contexts_are_independent(make_run):
    """Test that two runs never share ids, caches or steps."""
    first, second = make_run(), make_run()

    first.enter(EngineStep.GENERATE_QUERIES)

    assert first.run_id != second.run_id
    assert first.fetcher is not second.fetcher
    assert second.step == EngineStep.START

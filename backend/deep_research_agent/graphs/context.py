"""
Per-run context shared by every node of one research run.

Nothing in here is global: each ``start_research`` call builds its own
context (collaborators, fetcher cache, progress channel, current step), so two
concurrent runs never share state.
"""
import threading
import uuid
from enum import Enum
from typing import Dict, Mapping, Optional, Tuple

from deep_research_agent.config.resolver import ResearchConfiguration
from deep_research_agent.graphs.steps import EngineStep, TERMINAL_STEPS, ensure_transition
from deep_research_agent.llm import ModelInvoker
from deep_research_agent.logging import get_logger
from deep_research_agent.search.fetcher import RateLimitedFetcher
from deep_research_agent.streaming.progress import ProgressChannel

logger = get_logger(__name__)


class RunContext:
    """Collaborators and mutable bookkeeping of a single run."""

    def __init__(
        self,
        topic: str,
        configuration: ResearchConfiguration,
        model: ModelInvoker,
        fetcher: RateLimitedFetcher,
        transitions: Mapping[EngineStep, Tuple[EngineStep, ...]],
        progress: Optional[ProgressChannel] = None,
        run_id: Optional[str] = None,
    ):
        self.topic = topic
        self.configuration = configuration
        self.model = model
        self.fetcher = fetcher
        self.transitions: Dict[Enum, Tuple[Enum, ...]] = dict(transitions)
        self.progress = progress or ProgressChannel()
        self.run_id = run_id or uuid.uuid4().hex
        self._step = EngineStep.START
        self._step_lock = threading.Lock()

    @property
    def step(self) -> EngineStep:
        return self._step

    def enter(self, step: EngineStep) -> None:
        """
        Move the run to ``step``.

        Re-entering the current step is a no-op; parallel workers of one step
        all call this.

        Raises:
            InvalidTransitionError: If the transition table has no such edge
        """
        with self._step_lock:
            if step == self._step:
                return
            ensure_transition(self.transitions, self._step, step)
            logger.debug("step_entered", previous=self._step.value, step=step.value)
            self._step = step

    def fail(self) -> None:
        """Mark the run as failed unless it already reached a terminal step."""
        with self._step_lock:
            if self._step not in TERMINAL_STEPS:
                self._step = EngineStep.ERROR

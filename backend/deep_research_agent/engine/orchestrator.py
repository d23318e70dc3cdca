"""
Engine entry points.

``start_research`` resolves configuration, checks credentials and builds the
run's collaborators and graph; nothing touches the network until the caller
iterates ``RunHandle.events()``. Every run owns its context, cache and
progress channel, so concurrent runs never share state.
"""
import threading
from typing import Any, Dict, Iterator, Optional

from deep_research_agent.config import Settings, require_api_key, resolve_configuration
from deep_research_agent.config.resolver import ResearchConfiguration
from deep_research_agent.exceptions import ResearchRunError
from deep_research_agent.graphs.context import RunContext
from deep_research_agent.graphs.report_graph import create_report_graph
from deep_research_agent.graphs.research_graph import create_research_graph
from deep_research_agent.graphs.steps import EngineStep, NARRATIVE_TRANSITIONS, SECTION_REPORT_TRANSITIONS
from deep_research_agent.llm import ChatModelInvoker, ModelInvoker, resolve_model_provider
from deep_research_agent.logging import bind_run_context, get_logger
from deep_research_agent.models import ReportMode, ResearchParams
from deep_research_agent.search import create_fetcher, create_search_provider
from deep_research_agent.search.base import SearchProvider
from deep_research_agent.streaming import format_completion_event, format_error_event, is_envelope
from deep_research_agent.utils.helpers import create_llm_model

logger = get_logger(__name__)

PROGRESS_EVENT = "progress"


def recursion_limit_for(configuration: ResearchConfiguration) -> int:
    """Superstep budget of a run: a fixed overhead plus a share per depth level."""
    return 10 + configuration.depth * 6


def graph_config_for(configuration: ResearchConfiguration) -> Dict[str, Any]:
    """
    LangGraph run config of a research run.

    Parallel provider calls are bounded by the fetcher's semaphore, so no
    ``max_concurrency`` is set here; LangGraph's synchronous stream stalls
    when it is limited to a single task.
    """
    return {"recursion_limit": recursion_limit_for(configuration)}


class RunHandle:
    """
    Caller-side handle of one research run.

    ``events()`` drives the run lazily and can be iterated once. ``cancel()``
    detaches the caller: no event is delivered after it returns, while model
    and provider calls already in flight finish on their own.
    """

    def __init__(self, graph: Any, initial_state: Dict[str, Any], run: RunContext):
        self._graph = graph
        self._initial_state = initial_state
        self._run = run
        self._cancelled = threading.Event()
        self._started = False
        self._start_lock = threading.Lock()
        self._last_percent = 0.0

    @property
    def run_id(self) -> str:
        return self._run.run_id

    @property
    def step(self) -> EngineStep:
        """Current step of the run; ``done`` or ``error`` once it has ended."""
        return self._run.step

    @property
    def cancelled(self) -> bool:
        return self._cancelled.is_set()

    def cancel(self) -> None:
        """Detach from the run; no further events are delivered."""
        if not self._cancelled.is_set():
            self._cancelled.set()
            logger.info("run_cancelled", run_id=self.run_id, step=self.step.value)

    def _deliverable(self, item: Any) -> bool:
        """Drop non-envelopes and progress that arrives behind an already delivered value."""
        if not is_envelope(item):
            return False
        if item.get("event") == PROGRESS_EVENT:
            percent = (item.get("payload") or {}).get("percent", 0.0)
            if percent < self._last_percent:
                return False
            self._last_percent = percent
        return True

    def events(self) -> Iterator[Dict[str, Any]]:
        """
        Iterate the run's event envelopes.

        Yields:
            Progress and other custom envelopes, then exactly one terminal
            ``complete`` (payload ``response``) or ``error`` (payload ``error``)
            envelope. Nothing is yielded after ``cancel()``.

        Runs are not restartable: a second subscription yields nothing.
        """
        with self._start_lock:
            if self._started:
                logger.debug("events_already_subscribed", run_id=self.run_id, step=self.step.value)
                return iter(())
            self._started = True
        return self._drive()

    def _drive(self) -> Iterator[Dict[str, Any]]:
        config = graph_config_for(self._run.configuration)
        report = ""
        stream = None
        log_context = {"run_id": self.run_id, "topic": self._run.topic}
        try:
            with bind_run_context(**log_context):
                logger.info("run_started", step=self.step.value)
                stream = iter(self._graph.stream(self._initial_state, config=config, stream_mode=["custom", "values"]))
            while not self._cancelled.is_set():
                with bind_run_context(**log_context):
                    chunk = next(stream, None)
                if chunk is None:
                    break
                mode, data = chunk
                if mode == "custom":
                    items = data if isinstance(data, list) else [data]
                    for item in items:
                        if self._cancelled.is_set():
                            break
                        if self._deliverable(item):
                            yield item
                elif mode == "values" and isinstance(data, dict):
                    report = data.get("report", report) or report
        except Exception as e:
            self._run.fail()
            with bind_run_context(**log_context):
                logger.error("research_run_failed", error=str(e), step=self.step.value, exc_info=True)
            if not self._cancelled.is_set():
                yield format_error_event(str(e))
            return

        if self._cancelled.is_set():
            if stream is not None:
                stream.close()
            with bind_run_context(**log_context):
                logger.info("run_detached", step=self.step.value)
            return
        if self.step != EngineStep.DONE:
            self._run.fail()
            message = f"Research ended before completion (step: {self.step.value})"
            logger.error("research_run_incomplete", run_id=self.run_id, step=self.step.value)
            yield format_error_event(message)
            return
        yield format_completion_event(report)


def _build_model(configuration: ResearchConfiguration, params: ResearchParams, settings: Settings) -> ModelInvoker:
    provider = resolve_model_provider(configuration.model_id)
    api_key = require_api_key(provider, params.credentials, settings)
    chat_model = create_llm_model(
        configuration.model_id,
        provider,
        api_key=api_key,
        temperature=configuration.temperature,
        max_tokens=configuration.max_tokens,
    )
    return ChatModelInvoker(chat_model, configuration.model_id)


def start_research(
    params: ResearchParams,
    settings: Optional[Settings] = None,
    model: Optional[ModelInvoker] = None,
    search_provider: Optional[SearchProvider] = None,
) -> RunHandle:
    """
    Prepare a research run.

    Credentials are checked here, synchronously, for every collaborator that
    is not injected; a missing key or an unsupported model raises before any
    network call.

    Args:
        params: Research request
        settings: Environment settings (creates default if None)
        model: Model capability to use instead of building one from the model id
        search_provider: Search provider to use instead of the configured one

    Returns:
        RunHandle whose ``events()`` drives the run

    Raises:
        ConfigurationError: If a credential is missing or the model is unsupported
    """
    if settings is None:
        settings = Settings()
    configuration = resolve_configuration(params, settings)

    if model is None:
        model = _build_model(configuration, params, settings)
    if search_provider is None:
        api_key = require_api_key(configuration.search_provider.value, params.credentials, settings)
        search_provider = create_search_provider(configuration, api_key)

    if configuration.report_mode == ReportMode.SECTIONS:
        transitions, create_graph = SECTION_REPORT_TRANSITIONS, create_report_graph
    else:
        transitions, create_graph = NARRATIVE_TRANSITIONS, create_research_graph

    run = RunContext(
        topic=params.topic,
        configuration=configuration,
        model=model,
        fetcher=create_fetcher(configuration, search_provider),
        transitions=transitions,
    )
    graph = create_graph(run)
    logger.info(
        "run_prepared",
        run_id=run.run_id,
        report_mode=configuration.report_mode.value,
        search_provider=configuration.search_provider.value,
        model_id=configuration.model_id,
    )
    return RunHandle(graph, {"topic": params.topic}, run)


def run_research(
    params: ResearchParams,
    settings: Optional[Settings] = None,
    model: Optional[ModelInvoker] = None,
    search_provider: Optional[SearchProvider] = None,
) -> str:
    """
    Run research to completion and return the report.

    Raises:
        ConfigurationError: If the run cannot start
        ResearchRunError: If the run ended with an error event
    """
    handle = start_research(params, settings=settings, model=model, search_provider=search_provider)
    for event in handle.events():
        if event.get("type") == "complete":
            return event["payload"]["response"]
        if event.get("type") == "error":
            raise ResearchRunError(event["payload"]["error"], details={"run_id": handle.run_id})
    raise ResearchRunError("Research ended without a result", details={"run_id": handle.run_id})

"""
Shared pytest fixtures for all tests.

This module provides scripted stand-ins for the model and search
capabilities, zero-delay settings, and helpers for building run contexts.
"""
import threading
from typing import Any, Callable, Dict, List, Optional, Sequence, Union
from unittest.mock import Mock

import pytest

from deep_research_agent.config import Settings, resolve_configuration
from deep_research_agent.graphs.context import RunContext
from deep_research_agent.graphs.steps import NARRATIVE_TRANSITIONS
from deep_research_agent.models import ResearchParams, SearchResult, WebDocument
from deep_research_agent.search.base import SearchProvider
from deep_research_agent.search.fetcher import RateLimitedFetcher
from deep_research_agent.streaming.progress import ProgressChannel

# Prompt markers identifying which research step a model call belongs to.
PROMPT_KINDS = (
    ("queries", "effective search queries"),
    ("section_queries", "search query expert"),
    ("analysis", "Analyze the following web content"),
    ("reflection", "reflecting on the current state of research"),
    ("refine", "Aspects to explore further"),
    ("report", "Create a comprehensive and structured research report"),
    ("plan", "skilled research planner"),
    ("grade", "quality control expert"),
    ("write_section", "creates well-researched report sections"),
    ("final_section", "without additional web research"),
)

Reply = Union[str, Exception, Callable[[str], str]]


def prompt_kind(prompt: str) -> str:
    for kind, marker in PROMPT_KINDS:
        if marker in prompt:
            return kind
    return "unknown"


class FakeModel:
    """
    Model capability scripted per prompt kind.

    Each kind takes either a single reply used for every call or a list of
    replies consumed in order (the last one repeats). A reply may be a string,
    an exception to raise or a callable receiving the prompt.
    """

    DEFAULTS = {
        "queries": '{"queries": [{"search_query": "default query"}]}',
        "section_queries": '{"queries": [{"search_query": "section query"}]}',
        "analysis": "Analysis of the page.",
        "reflection": "Reflection on the findings.",
        "refine": "Look deeper into recent developments.",
        "report": "# Final Report\n\nReport body.",
        "plan": "[]",
        "grade": '{"grade": "pass", "follow_up_queries": []}',
        "write_section": '{"content": "Section draft."}',
        "final_section": '{"content": "Final section."}',
    }

    def __init__(self, replies: Optional[Dict[str, Union[Reply, Sequence[Reply]]]] = None):
        self.replies = {**self.DEFAULTS, **(replies or {})}
        self.calls: List[Dict[str, str]] = []
        self._lock = threading.Lock()

    def invoke(self, system_prompt: str, user_prompt: str) -> str:
        kind = prompt_kind(user_prompt)
        with self._lock:
            index = sum(1 for call in self.calls if call["kind"] == kind)
            self.calls.append({"kind": kind, "system": system_prompt, "prompt": user_prompt})
        reply = self.replies.get(kind, "")
        if isinstance(reply, (list, tuple)):
            reply = reply[min(index, len(reply) - 1)]
        if isinstance(reply, Exception):
            raise reply
        if callable(reply):
            return reply(user_prompt)
        return reply

    def calls_of(self, kind: str) -> List[Dict[str, str]]:
        return [call for call in self.calls if call["kind"] == kind]


class FakeSearchProvider(SearchProvider):
    """In-memory search provider returning canned results and pages."""

    name = "fake"

    def __init__(
        self,
        results: Optional[Dict[str, List[SearchResult]]] = None,
        documents: Optional[Dict[str, WebDocument]] = None,
        default_results: Optional[List[SearchResult]] = None,
    ):
        self.results = results or {}
        self.documents = documents or {}
        self.default_results = default_results or []
        self.searches: List[str] = []
        self.fetches: List[str] = []

    def search(self, query: str) -> List[SearchResult]:
        self.searches.append(query)
        return list(self.results.get(query, self.default_results))

    def fetch_content(self, url: str) -> Optional[WebDocument]:
        self.fetches.append(url)
        return self.documents.get(url)


@pytest.fixture
def test_settings() -> Settings:
    """Create Settings with no pacing delays and no environment credentials.

    Returns:
        Settings instance configured for testing.
    """
    return Settings(
        _env_file=None,
        search_call_delay_seconds=0,
        fetch_call_delay_seconds=0,
        retry_base_delay_seconds=0,
        groq_api_key=None,
        openai_api_key=None,
        anthropic_api_key=None,
        firecrawl_api_key=None,
        tavily_api_key=None,
    )


@pytest.fixture
def fake_model() -> FakeModel:
    """Create a FakeModel answering every prompt kind with a default reply.

    Returns:
        FakeModel instance.
    """
    return FakeModel()


@pytest.fixture
def sample_result() -> SearchResult:
    """Create a single search result.

    Returns:
        SearchResult pointing at an example page.
    """
    return SearchResult(title="Example Page", url="https://www.example.com/page", snippet="An example snippet.")


@pytest.fixture
def sample_document() -> WebDocument:
    """Create the fetched content of the sample page.

    Returns:
        WebDocument with a short text.
    """
    return WebDocument(title="Example Page", text="Quantum computers use qubits.")


@pytest.fixture
def fake_provider(sample_result, sample_document) -> FakeSearchProvider:
    """Create a provider returning the sample result for every query.

    Returns:
        FakeSearchProvider instance.
    """
    return FakeSearchProvider(
        default_results=[sample_result],
        documents={sample_result.url: sample_document},
    )


@pytest.fixture
def progress_events() -> List[Dict[str, Any]]:
    """Collect progress updates emitted through a test ProgressChannel.

    Returns:
        List receiving one dict per emitted update.
    """
    return []


@pytest.fixture
def make_run(test_settings, fake_model, fake_provider, progress_events):
    """Factory building a RunContext outside of any graph.

    Returns:
        Callable accepting ResearchParams overrides and optional collaborators.
    """
    def _make_run(transitions=NARRATIVE_TRANSITIONS, model=None, provider=None, **overrides) -> RunContext:
        params = ResearchParams(**{"topic": "quantum computing", "depth": 1, "breadth": 1, **overrides})
        configuration = resolve_configuration(params, test_settings)
        fetcher = RateLimitedFetcher(
            provider or fake_provider,
            search_delay=0,
            fetch_delay=0,
            retry_base_delay=0,
            max_retries=configuration.max_retries,
        )
        progress = ProgressChannel(
            emit=lambda node, message, percent: progress_events.append(
                {"node": node, "message": message, "percent": percent}
            )
        )
        return RunContext(
            topic=params.topic,
            configuration=configuration,
            model=model or fake_model,
            fetcher=fetcher,
            transitions=transitions,
            progress=progress,
        )

    return _make_run


@pytest.fixture
def mock_stream_writer() -> Mock:
    """Mock LangGraph stream writer collecting emitted envelopes.

    Returns:
        Mock writer; emitted events are in ``call_args_list``.
    """
    return Mock()


@pytest.fixture
def make_model():
    """Factory for FakeModel instances with scripted replies.

    Returns:
        The FakeModel class.
    """
    return FakeModel


@pytest.fixture
def make_provider():
    """Factory for FakeSearchProvider instances.

    Returns:
        The FakeSearchProvider class.
    """
    return FakeSearchProvider

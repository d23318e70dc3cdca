"""
Research round execution: search, fetch and analyze for one query.

Failures are isolated at the smallest unit. A failed search yields no
findings for that query; a failed fetch or analysis skips that result only.
"""
from typing import Callable, List, Optional

from deep_research_agent.llm import ModelInvoker
from deep_research_agent.logging import get_logger
from deep_research_agent.models import AnalysisResult, SearchResult
from deep_research_agent.parsing import extract_text_field
from deep_research_agent.prompts.research import ANALYZE_CONTENT_PROMPT_TEMPLATE, RESEARCH_SYSTEM_PROMPT
from deep_research_agent.search.fetcher import RateLimitedFetcher
from deep_research_agent.utils.helpers import format_date, truncate_text

logger = get_logger(__name__)

# Called with (result index, result count, search result) before each analysis.
ResultCallback = Callable[[int, int, SearchResult], None]


def analyze_result(
    model: ModelInvoker,
    fetcher: RateLimitedFetcher,
    topic: str,
    result: SearchResult,
    max_document_chars: int = 10000,
) -> Optional[AnalysisResult]:
    """
    Fetch one search result and analyze it against the topic.

    Args:
        model: Model capability
        fetcher: Rate-limited fetcher of the run
        topic: Research topic
        result: Search hit to analyze
        max_document_chars: Document text is cut to this length before prompting

    Returns:
        AnalysisResult, or None when the page had no content or analysis failed
    """
    try:
        document = fetcher.fetch_content(result.url)
        if document is None or not document.text.strip():
            logger.info("no_content_for_url", url=result.url)
            return None

        title = document.title or result.title
        prompt = ANALYZE_CONTENT_PROMPT_TEMPLATE.format(
            current_date=format_date(),
            topic=topic,
            title=title,
            url=result.url,
            text=truncate_text(document.text, max_document_chars),
        )
        raw = model.invoke(RESEARCH_SYSTEM_PROMPT, prompt)
        analysis = extract_text_field(raw, "content").strip()
        if not analysis:
            logger.info("empty_analysis", url=result.url)
            return None
        return AnalysisResult(url=result.url, title=title, analysis=analysis)
    except Exception as e:
        logger.warning("analyze_result_failed", url=result.url, error=str(e), exc_info=True)
        return None


def research_query(
    model: ModelInvoker,
    fetcher: RateLimitedFetcher,
    topic: str,
    query: str,
    top_k: int = 3,
    max_document_chars: int = 10000,
    on_result: Optional[ResultCallback] = None,
) -> List[AnalysisResult]:
    """
    Run one query of a research round.

    Args:
        model: Model capability
        fetcher: Rate-limited fetcher of the run
        topic: Research topic the analysis is framed against
        query: Search query
        top_k: Number of top search results to analyze
        max_document_chars: Document truncation limit
        on_result: Optional callback invoked before each result is analyzed

    Returns:
        Analyses in search-result order; empty when nothing was usable
    """
    try:
        results = fetcher.search(query)
    except Exception as e:
        logger.warning("round_search_failed", query=query, error=str(e), exc_info=True)
        return []

    top_results = results[:max(1, top_k)]
    logger.debug("round_query_results", query=query, total=len(results), analyzed=len(top_results))

    analyses: List[AnalysisResult] = []
    for index, result in enumerate(top_results):
        if on_result is not None:
            on_result(index, len(top_results), result)
        analysis = analyze_result(model, fetcher, topic, result, max_document_chars)
        if analysis is not None:
            analyses.append(analysis)
    return analyses

"""
Pydantic models shared across the research engine.

Request parameters, canonical search/document records, and the structured
shapes the extractor recovers from language-model responses.
"""
from enum import Enum
from typing import Any, Dict, List, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator


class SearchProviderName(str, Enum):
    """Supported search backends."""

    FIRECRAWL = "firecrawl"
    TAVILY = "tavily"


class ReportMode(str, Enum):
    """Report pipeline variants."""

    NARRATIVE = "narrative"
    SECTIONS = "sections"


class ResearchParams(BaseModel):
    """
    Per-request research parameters.

    Immutable once a run starts. Optional fields left as None fall back to the
    environment and then to hard-coded defaults during configuration resolution.
    Enum-valued fields are plain text so an unknown provider name degrades to
    the default instead of failing validation.
    """

    model_config = ConfigDict(frozen=True)

    topic: str = Field(min_length=1, description="Research topic.")
    depth: int = Field(default=2, ge=1, le=5, description="Number of reflect/refine cycles.")
    breadth: int = Field(default=3, ge=1, le=10, description="Maximum queries executed per cycle.")
    model_id: Optional[str] = Field(default=None, description="Language model identifier.")
    search_provider: Optional[str] = Field(default=None, description="'firecrawl' or 'tavily'.")
    credentials: Dict[str, str] = Field(
        default_factory=dict,
        repr=False,
        description="Provider name to API key, e.g. {'tavily': '...'}.",
    )
    report_mode: Optional[str] = Field(default=None, description="'narrative' or 'sections'.")
    number_of_queries: Optional[int] = Field(default=None, ge=1, le=10)
    concurrency_limit: Optional[int] = Field(default=None)
    report_structure: Optional[str] = Field(default=None)


class SearchResult(BaseModel):
    """Canonical search hit produced by every provider adapter."""

    title: str = ""
    url: str
    snippet: str = ""


class WebDocument(BaseModel):
    """Fetched page content for one search result."""

    title: str = ""
    text: str


class AnalysisResult(BaseModel):
    """Model analysis of one fetched document."""

    url: str
    title: str = ""
    analysis: str


class SearchQuery(BaseModel):
    """One generated search query."""

    search_query: str = Field(description="A web search query.")


class SearchQueries(BaseModel):
    """
    Output model for generating search queries.

    Accepts both ``[{"search_query": ...}]`` and a bare list of strings.
    """

    queries: List[SearchQuery] = Field(default_factory=list, description="List of distinct search queries.")

    @field_validator("queries", mode="before")
    @classmethod
    def coerce_plain_strings(cls, value: Any) -> Any:
        if isinstance(value, list):
            return [{"search_query": item} if isinstance(item, str) else item for item in value]
        return value

    def texts(self) -> List[str]:
        """Return the non-empty, stripped query strings in order."""
        return [q.search_query.strip() for q in self.queries if q.search_query and q.search_query.strip()]


class Section(BaseModel):
    """One planned section of a section-oriented report."""

    name: str
    description: str = ""
    research: bool = True
    content: str = ""


class SectionPlan(BaseModel):
    """Output model for the report planner."""

    sections: List[Section] = Field(default_factory=list)


class SectionContent(BaseModel):
    """Output model for the section writers."""

    content: str = ""


class SectionGrade(BaseModel):
    """Output model for the section grader."""

    grade: Literal["pass", "fail"] = "pass"
    follow_up_queries: List[SearchQuery] = Field(default_factory=list)

    @field_validator("grade", mode="before")
    @classmethod
    def lowercase_grade(cls, value: Any) -> Any:
        if isinstance(value, str):
            return value.strip().lower()
        return value

    @field_validator("follow_up_queries", mode="before")
    @classmethod
    def coerce_plain_strings(cls, value: Any) -> Any:
        if isinstance(value, list):
            return [{"search_query": item} if isinstance(item, str) else item for item in value]
        return value

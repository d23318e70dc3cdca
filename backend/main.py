"""
FastAPI application that wraps the research engine with SSE streaming support.

The deep_research_agent package must be importable (``pip install -e .`` from
the repository root). Run with:
    uvicorn main:app --app-dir backend
"""
from typing import Dict, Optional

from fastapi import FastAPI, HTTPException, status
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import StreamingResponse
from pydantic import BaseModel, Field

from deep_research_agent.engine import start_research
from deep_research_agent.exceptions import ConfigurationError
from deep_research_agent.logging import get_logger
from deep_research_agent.models import ResearchParams
from deep_research_agent.streaming import create_sse_generator

logger = get_logger(__name__)

app = FastAPI()

# Add CORS middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=["http://localhost:3000"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


class ResearchRequest(BaseModel):
    topic: str = Field(min_length=1)
    depth: int = Field(default=2, ge=1, le=5)
    breadth: int = Field(default=3, ge=1, le=10)
    model: Optional[str] = None
    search_provider: Optional[str] = None
    report_mode: Optional[str] = None
    credentials: Dict[str, str] = Field(default_factory=dict, repr=False)

    def to_params(self) -> ResearchParams:
        return ResearchParams(
            topic=self.topic,
            depth=self.depth,
            breadth=self.breadth,
            model_id=self.model,
            search_provider=self.search_provider,
            report_mode=self.report_mode,
            credentials=self.credentials,
        )


@app.post("/research")
async def research(request: ResearchRequest):
    """
    Research endpoint that streams run events using Server-Sent Events (SSE).

    Args:
        request: Request body with the topic, depth/breadth and optional overrides

    Returns:
        StreamingResponse with SSE events containing:
        - Progress events (payload: message, percent)
        - Other custom events (generated_queries, web_search_url, section_graded, ...)
        - Exactly one final complete or error event

    Raises:
        HTTPException: 400 when the run cannot start (missing credential, unsupported model)
    """
    try:
        handle = start_research(request.to_params())
    except ConfigurationError as e:
        logger.warning("research_request_rejected", error=str(e))
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))

    return StreamingResponse(
        create_sse_generator(handle.events()),
        media_type="text/event-stream"
    )


@app.get("/health")
async def health():
    """Health check endpoint."""
    return {"status": "ok"}

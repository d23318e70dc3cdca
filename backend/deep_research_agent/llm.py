"""
Model-invocation capability.

The engine only ever calls ``invoke(system_prompt, user_prompt) -> str``.
``ChatModelInvoker`` fulfils it over any LangChain chat model; which provider
backs a model identifier is decided by one ordered pattern table.
"""
import re
from typing import Any, List, Optional, Protocol, Tuple

from langchain_core.language_models.chat_models import BaseChatModel
from langchain_core.messages import BaseMessage, HumanMessage, SystemMessage

from deep_research_agent.exceptions import ConfigurationError
from deep_research_agent.logging import get_logger

logger = get_logger(__name__)

# First match wins.
MODEL_PROVIDER_PATTERNS: Tuple[Tuple[re.Pattern, str], ...] = (
    (re.compile(r"^claude", re.IGNORECASE), "anthropic"),
    (re.compile(r"^(gpt-|o\d|chatgpt)", re.IGNORECASE), "openai"),
    (
        re.compile(
            r"^(openai/|meta-llama/|moonshotai/|qwen/|llama|gemma|mixtral|qwen|deepseek|compound)",
            re.IGNORECASE,
        ),
        "groq",
    ),
)


def resolve_model_provider(model_id: str) -> str:
    """
    Map a model identifier to its provider.

    Args:
        model_id: Model identifier, e.g. "claude-3-5-sonnet-latest"

    Returns:
        Provider name: "anthropic", "openai" or "groq"

    Raises:
        ConfigurationError: If no provider serves the identifier
    """
    for pattern, provider in MODEL_PROVIDER_PATTERNS:
        if pattern.search(model_id or ""):
            return provider
    raise ConfigurationError(f"Model {model_id} is not supported.", details={"model_id": model_id})


class ModelInvoker(Protocol):
    """Capability shape consumed by the research components."""

    def invoke(self, system_prompt: str, user_prompt: str) -> str:
        ...


def message_text(content: Any) -> str:
    """
    Flatten a chat message's content to plain text.

    Providers return either a string or a list of content blocks.
    """
    if isinstance(content, str):
        return content
    if isinstance(content, list):
        parts: List[str] = []
        for block in content:
            if isinstance(block, str):
                parts.append(block)
            elif isinstance(block, dict) and block.get("type", "text") == "text":
                parts.append(str(block.get("text", "")))
        return "".join(parts)
    return "" if content is None else str(content)


class ChatModelInvoker:
    """Adapts a LangChain chat model to ``invoke(system, user) -> str``."""

    def __init__(self, model: BaseChatModel, model_id: Optional[str] = None):
        self.model = model
        self.model_id = model_id

    def invoke(self, system_prompt: str, user_prompt: str) -> str:
        messages: List[BaseMessage] = []
        if system_prompt:
            messages.append(SystemMessage(content=system_prompt))
        messages.append(HumanMessage(content=user_prompt))
        response = self.model.invoke(messages)
        text = message_text(getattr(response, "content", response))
        logger.debug("model_invoked", model_id=self.model_id, prompt_chars=len(user_prompt), response_chars=len(text))
        return text

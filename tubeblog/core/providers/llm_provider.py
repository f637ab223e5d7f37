"""
Abstract base class for LLM providers.

This module defines a vendor-neutral interface for interacting with
Large Language Models. Concrete implementations (Azure OpenAI, OpenRouter,
Groq, Gemini) must implement this interface and translate their SDK errors
into ``ProviderRateLimitError`` / ``ProviderError``.
"""
from abc import ABC, abstractmethod
from typing import Any, Optional

from pydantic import BaseModel, ConfigDict

from tubeblog.core.exceptions import InvalidProviderResponseError
from tubeblog.models.enums import LLMRole

RATE_LIMIT_MARKERS = ("429", "exceeded call rate limit")


class LLMMessage(BaseModel):
    """Vendor-neutral message format for LLM conversations."""

    role: LLMRole
    content: str

    model_config = ConfigDict(frozen=True)


class LLMResponse(BaseModel):
    """Standardized response from an LLM provider."""

    content: str
    model: str
    provider: str
    usage: Optional[dict[str, int]] = None

    model_config = ConfigDict(frozen=True)


class LLMProvider(ABC):
    """
    Abstract interface for LLM providers.

    Example:
        provider = GroqProvider(api_key="...", model_name="llama-3.3-70b-versatile")
        response = await provider.generate_text([
            LLMMessage(role=LLMRole.SYSTEM, content="You write blog posts."),
            LLMMessage(role=LLMRole.USER, content="Summarize: ..."),
        ])
        print(response.content)
    """

    name: str = "LLM"

    @abstractmethod
    async def generate_text(
        self,
        messages: list[LLMMessage],
        temperature: float = 0.7,
        max_tokens: Optional[int] = None,
    ) -> LLMResponse:
        """
        Generate text completion from messages.

        Args:
            messages: List of conversation messages.
            temperature: Sampling temperature (0.0-1.0).
            max_tokens: Maximum tokens to generate (None for model default).

        Returns:
            LLMResponse containing generated content and metadata.

        Raises:
            ProviderRateLimitError: The provider refused the call because of its quota.
            InvalidProviderResponseError: The response had no usable content.
            ProviderError: Any other provider failure.
        """
        ...


def looks_rate_limited(error: BaseException) -> bool:
    """True when an error message carries a rate-limit signal."""
    message = str(error).lower()
    return any(marker in message for marker in RATE_LIMIT_MARKERS)


def completion_content(provider: str, response: Any) -> str:
    """
    Extract ``choices[0].message.content`` from a chat completion.

    Raises:
        InvalidProviderResponseError: When any level is missing or the content is blank.
    """
    choices = getattr(response, "choices", None)
    if not choices:
        raise InvalidProviderResponseError(provider)

    message = getattr(choices[0], "message", None)
    content = getattr(message, "content", None)
    if not isinstance(content, str) or not content.strip():
        raise InvalidProviderResponseError(provider)
    return content


def completion_usage(response: Any) -> Optional[dict[str, int]]:
    usage = getattr(response, "usage", None)
    if not usage:
        return None
    return {
        "prompt_tokens": usage.prompt_tokens,
        "completion_tokens": usage.completion_tokens,
        "total_tokens": usage.total_tokens,
    }

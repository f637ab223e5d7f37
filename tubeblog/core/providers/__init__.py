"""
Provider abstraction layer for model-agnostic summary generation.
"""
from tubeblog.core.providers.llm_provider import (
    LLMProvider,
    LLMMessage,
    LLMResponse,
)
from tubeblog.core.providers.factory import create_llm_provider

__all__ = [
    "LLMProvider",
    "LLMMessage",
    "LLMResponse",
    "create_llm_provider",
]

"""
Groq (Llama) implementation of LLMProvider.
"""
import groq
from groq import AsyncGroq

from tubeblog.core.providers.openai_provider import OpenAICompatibleProvider


class GroqProvider(OpenAICompatibleProvider):
    """
    Llama models served by Groq.

    Example:
        provider = GroqProvider(api_key="...", model_name="llama-3.3-70b-versatile")
    """

    name = "Groq"
    sdk = groq

    def __init__(self, api_key: str, model_name: str = "llama-3.3-70b-versatile"):
        super().__init__(client=AsyncGroq(api_key=api_key), model_name=model_name)

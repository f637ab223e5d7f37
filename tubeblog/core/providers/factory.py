"""
Construction of LLM providers from settings.
"""
from typing import Optional

from loguru import logger

from tubeblog.core.config import Settings
from tubeblog.core.providers.gemini_provider import GeminiProvider
from tubeblog.core.providers.groq_provider import GroqProvider
from tubeblog.core.providers.llm_provider import LLMProvider
from tubeblog.core.providers.openai_provider import AzureOpenAIProvider, OpenRouterProvider
from tubeblog.models.enums import LLMProviderType


def create_llm_provider(
    provider_type: LLMProviderType, settings: Settings
) -> Optional[LLMProvider]:
    """
    Build the provider selected by ``provider_type``.

    Returns:
        The provider, or None when its credentials are not configured.
    """
    if provider_type == LLMProviderType.AZURE_OPENAI:
        if not (settings.AZURE_OPENAI_KEY and settings.AZURE_OPENAI_ENDPOINT):
            logger.warning("Azure OpenAI credentials not configured")
            return None
        return AzureOpenAIProvider(
            api_key=settings.AZURE_OPENAI_KEY,
            endpoint=settings.AZURE_OPENAI_ENDPOINT,
            deployment=settings.AZURE_OPENAI_DEPLOYMENT_NAME,
            api_version=settings.AZURE_OPENAI_API_VERSION,
        )
    elif provider_type == LLMProviderType.OPENROUTER:
        if not settings.OPENROUTER_API_KEY:
            logger.warning("OpenRouter API key not configured")
            return None
        return OpenRouterProvider(
            api_key=settings.OPENROUTER_API_KEY,
            model_name=settings.OPENROUTER_MODEL,
            app_url=settings.APP_URL,
        )
    elif provider_type == LLMProviderType.GROQ:
        if not settings.GROQ_API_KEY:
            logger.warning("Groq API key not configured")
            return None
        return GroqProvider(
            api_key=settings.GROQ_API_KEY,
            model_name=settings.GROQ_MODEL_NAME,
        )
    elif provider_type == LLMProviderType.GEMINI:
        if not settings.GEMINI_API_KEY:
            logger.warning("Gemini API key not configured")
            return None
        return GeminiProvider(
            api_key=settings.GEMINI_API_KEY,
            model_name=settings.GEMINI_MODEL_NAME,
        )
    else:
        raise ValueError(f"Unknown LLM provider: {provider_type}")

"""
Enums for type-safe values across the application.
"""
from enum import Enum


class LLMRole(str, Enum):
    """Role for LLM provider messages (OpenAI/Gemini/Groq compatible)."""
    SYSTEM = "system"
    USER = "user"
    ASSISTANT = "assistant"


class LLMProviderType(str, Enum):
    """Supported LLM provider types for configuration."""
    AZURE_OPENAI = "azure_openai"
    OPENROUTER = "openrouter"
    GROQ = "groq"
    GEMINI = "gemini"


# Display names for caption language codes
LANGUAGE_NAMES: dict[str, str] = {
    "en": "English",
    "hi": "Hindi",
    "es": "Spanish",
    "fr": "French",
    "de": "German",
    "pt": "Portuguese",
    "ru": "Russian",
    "ja": "Japanese",
    "ko": "Korean",
    "zh": "Chinese",
}


def language_name(code: str) -> str:
    """Human readable name for a caption language code, falling back to the code."""
    return LANGUAGE_NAMES.get(code, code)

"""
Application configuration using pydantic-settings.
"""
from typing import List, Optional, Union

from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from tubeblog.models.enums import LLMProviderType


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    PROJECT_NAME: str = "Blog Automator Wizard"
    BACKEND_CORS_ORIGINS: Union[List[str], str] = [
        "http://localhost:8080",
        "http://localhost:5173",
        "http://localhost:3000",
    ]

    @field_validator("BACKEND_CORS_ORIGINS", "TRANSCRIPT_LANGUAGES", mode="before")
    @classmethod
    def split_comma_separated(cls, v: Union[str, List[str]]) -> Union[List[str], str]:
        if isinstance(v, str) and not v.startswith("["):
            return [i.strip() for i in v.split(",") if i.strip()]
        return v

    # Logging
    LOG_LEVEL: str = "INFO"
    LOG_FILE: Optional[str] = "logs/app.log"

    # Caches
    CACHE_DIR: str = "data/cache"
    MEMORY_CACHE_TTL_SECONDS: float = 3600
    MEMORY_CACHE_SWEEP_SECONDS: float = 300
    TRANSCRIPT_CACHE_TTL_SECONDS: float = 24 * 3600
    VIDEO_CACHE_TTL_SECONDS: float = 3600

    # Captions
    TRANSCRIPT_LANGUAGES: Union[List[str], str] = [
        "en", "hi", "es", "fr", "de", "pt", "ru", "ja", "ko", "zh",
    ]
    CAPTIONS_PROXY_HTTP: Optional[str] = None
    CAPTIONS_PROXY_HTTPS: Optional[str] = None

    # YouTube Data API
    YOUTUBE_API_KEY: Optional[str] = None
    YOUTUBE_MAX_RESULTS: int = 50

    # Summary providers
    USE_PRIMARY_PROVIDER: bool = True
    SUMMARY_PRIMARY_PROVIDER: LLMProviderType = LLMProviderType.AZURE_OPENAI
    SUMMARY_FALLBACK_PROVIDER: LLMProviderType = LLMProviderType.OPENROUTER

    # Azure OpenAI
    AZURE_OPENAI_KEY: Optional[str] = None
    AZURE_OPENAI_ENDPOINT: Optional[str] = None
    AZURE_OPENAI_DEPLOYMENT_NAME: str = "gpt-4o-mini"
    AZURE_OPENAI_API_VERSION: str = "2024-12-01-preview"

    # OpenRouter
    OPENROUTER_API_KEY: Optional[str] = None
    OPENROUTER_MODEL: str = "mistralai/mixtral-8x7b-instruct"
    APP_URL: str = "http://localhost:3005"

    # Groq API
    GROQ_API_KEY: Optional[str] = None
    GROQ_MODEL_NAME: str = "llama-3.3-70b-versatile"

    # Gemini API
    GEMINI_API_KEY: Optional[str] = None
    GEMINI_MODEL_NAME: str = "gemini-2.5-flash"

    model_config = SettingsConfigDict(env_file=".env", extra="ignore")


settings = Settings()

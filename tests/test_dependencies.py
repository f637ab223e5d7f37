import pytest

from tubeblog.core.config import Settings
from tubeblog.api.dependencies import build_services, build_summarizer
from tubeblog.models import LLMProviderType


def make_settings(tmp_path, **overrides):
    values = dict(
        _env_file=None,
        CACHE_DIR=str(tmp_path / "cache"),
        LOG_FILE=None,
        YOUTUBE_API_KEY=None,
        AZURE_OPENAI_KEY=None,
        AZURE_OPENAI_ENDPOINT=None,
        OPENROUTER_API_KEY=None,
        GROQ_API_KEY=None,
        GEMINI_API_KEY=None,
    )
    values.update(overrides)
    return Settings(**values)


@pytest.mark.asyncio
async def test_build_services_loads_caches_and_starts_sweep(tmp_path):
    services = await build_services(make_settings(tmp_path, TRANSCRIPT_LANGUAGES="en,hi"))
    try:
        assert (tmp_path / "cache").is_dir()
        assert services.transcripts.languages == ["en", "hi"]
        assert services.videos.summary_cache is services.summary_cache
        assert services.memory_cache._sweep_task is not None
    finally:
        await services.aclose()

    assert services.memory_cache._sweep_task is None


def test_summarizer_without_credentials_has_no_providers(tmp_path):
    summarizer = build_summarizer(make_settings(tmp_path))

    assert summarizer.primary is None
    assert summarizer.fallback is None


def test_summarizer_with_fallback_only(tmp_path):
    summarizer = build_summarizer(
        make_settings(
            tmp_path,
            OPENROUTER_API_KEY="key",
            SUMMARY_FALLBACK_PROVIDER=LLMProviderType.OPENROUTER,
        )
    )

    assert summarizer.primary is None
    assert summarizer.fallback.provider.name == "OpenRouter"
    assert summarizer.fallback.limiter.reservoir is None

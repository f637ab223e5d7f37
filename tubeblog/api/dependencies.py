"""
Service construction and dependency injection for FastAPI.

Caches, limiters and services are built once per process by
:func:`build_services` (called from the application lifespan) and kept on
``app.state``. Request handlers receive them through the ``get_*`` factories
below, which tests replace with ``app.dependency_overrides``.
"""
from dataclasses import dataclass
from pathlib import Path

from fastapi import Request
from loguru import logger

from tubeblog.core.cache import MemoryCache
from tubeblog.core.config import Settings
from tubeblog.core.constants import CacheFiles, FallbackLimiterConfig, PrimaryLimiterConfig
from tubeblog.core.providers import create_llm_provider
from tubeblog.core.rate_limit import RequestLimiter
from tubeblog.repositories.summaries import SummaryCache
from tubeblog.repositories.transcripts import TranscriptCache
from tubeblog.repositories.videos import VideoCache
from tubeblog.services.captions import CaptionsClient
from tubeblog.services.summarization import SummarizationService
from tubeblog.services.transcripts import TranscriptService
from tubeblog.services.videos import VideoService
from tubeblog.services.youtube import YouTubeService


@dataclass
class Services:
    """Everything the request handlers need, built once at startup."""

    memory_cache: MemoryCache
    transcript_cache: TranscriptCache
    summary_cache: SummaryCache
    video_cache: VideoCache
    youtube: YouTubeService
    transcripts: TranscriptService
    summarizer: SummarizationService
    videos: VideoService

    async def aclose(self) -> None:
        await self.memory_cache.stop()
        await self.youtube.aclose()


# =============================================================================
# CONSTRUCTION
# =============================================================================

def build_summarizer(settings: Settings) -> SummarizationService:
    """Build the summarization service with its provider-specific limiters."""
    primary = create_llm_provider(settings.SUMMARY_PRIMARY_PROVIDER, settings)
    fallback = create_llm_provider(settings.SUMMARY_FALLBACK_PROVIDER, settings)

    if settings.USE_PRIMARY_PROVIDER and primary is None:
        logger.warning("Primary summary provider unavailable, using fallback only")
    if fallback is None and primary is None:
        logger.warning("No summary provider configured; summaries will fail")

    primary_limiter = RequestLimiter(
        name=f"{settings.SUMMARY_PRIMARY_PROVIDER.value} limiter",
        min_time=PrimaryLimiterConfig.MIN_TIME_SECONDS,
        max_concurrent=PrimaryLimiterConfig.MAX_CONCURRENT,
        reservoir=PrimaryLimiterConfig.RESERVOIR,
        reservoir_refresh_amount=PrimaryLimiterConfig.RESERVOIR_REFRESH_AMOUNT,
        reservoir_refresh_interval=PrimaryLimiterConfig.RESERVOIR_REFRESH_INTERVAL_SECONDS,
    )
    fallback_limiter = RequestLimiter(
        name=f"{settings.SUMMARY_FALLBACK_PROVIDER.value} limiter",
        min_time=FallbackLimiterConfig.MIN_TIME_SECONDS,
        max_concurrent=FallbackLimiterConfig.MAX_CONCURRENT,
    )

    return SummarizationService.from_providers(
        primary=primary,
        fallback=fallback,
        primary_limiter=primary_limiter,
        fallback_limiter=fallback_limiter,
        use_primary=settings.USE_PRIMARY_PROVIDER,
    )


async def build_services(settings: Settings) -> Services:
    """
    Construct and start every cache and service.

    Persisted caches are loaded from ``settings.CACHE_DIR`` and the memory
    cache sweep is started on the running loop.
    """
    cache_dir = Path(settings.CACHE_DIR)

    memory_cache = MemoryCache(
        default_ttl=settings.MEMORY_CACHE_TTL_SECONDS,
        sweep_interval=settings.MEMORY_CACHE_SWEEP_SECONDS,
    )
    transcript_cache = TranscriptCache(
        cache_dir / CacheFiles.TRANSCRIPTS,
        ttl=settings.TRANSCRIPT_CACHE_TTL_SECONDS,
    )
    summary_cache = SummaryCache(cache_dir / CacheFiles.SUMMARIES)
    video_cache = VideoCache(
        cache_dir / CacheFiles.VIDEOS,
        ttl=settings.VIDEO_CACHE_TTL_SECONDS,
    )
    for store in (transcript_cache, summary_cache, video_cache):
        await store.load()
    memory_cache.start()

    youtube = YouTubeService(
        api_key=settings.YOUTUBE_API_KEY,
        memory_cache=memory_cache,
        video_cache=video_cache,
        max_results=settings.YOUTUBE_MAX_RESULTS,
    )
    transcripts = TranscriptService(
        captions=CaptionsClient(
            proxy_http=settings.CAPTIONS_PROXY_HTTP,
            proxy_https=settings.CAPTIONS_PROXY_HTTPS,
        ),
        cache=transcript_cache,
        languages=settings.TRANSCRIPT_LANGUAGES,
    )
    summarizer = build_summarizer(settings)
    videos = VideoService(
        youtube=youtube,
        transcripts=transcripts,
        summarizer=summarizer,
        transcript_cache=transcript_cache,
        summary_cache=summary_cache,
        video_cache=video_cache,
    )

    return Services(
        memory_cache=memory_cache,
        transcript_cache=transcript_cache,
        summary_cache=summary_cache,
        video_cache=video_cache,
        youtube=youtube,
        transcripts=transcripts,
        summarizer=summarizer,
        videos=videos,
    )


# =============================================================================
# REQUEST-SCOPED ACCESSORS
# =============================================================================

def get_services(request: Request) -> Services:
    return request.app.state.services


def get_video_service(request: Request) -> VideoService:
    return get_services(request).videos


def get_transcript_service(request: Request) -> TranscriptService:
    return get_services(request).transcripts


def get_summarization_service(request: Request) -> SummarizationService:
    return get_services(request).summarizer


def get_youtube_service(request: Request) -> YouTubeService:
    return get_services(request).youtube

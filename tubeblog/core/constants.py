"""
Application-wide constants and configuration limits.

Grouped into static classes for namespace management and discoverability.
Values that operators are expected to tune live in ``config.Settings`` instead.
"""

class CacheFiles:
    """File names of the persisted caches inside ``settings.CACHE_DIR``."""
    TRANSCRIPTS = "transcripts.json"
    SUMMARIES = "summaries.json"
    VIDEOS = "videos.json"
    JSON_INDENT = 2


class PrimaryLimiterConfig:
    """Reservoir limiter for the quota-limited primary provider."""
    MIN_TIME_SECONDS = 6.0
    MAX_CONCURRENT = 1
    RESERVOIR = 10
    RESERVOIR_REFRESH_AMOUNT = 10
    RESERVOIR_REFRESH_INTERVAL_SECONDS = 60.0


class FallbackLimiterConfig:
    """Spacing-only limiter for the fallback provider."""
    MIN_TIME_SECONDS = 1.0
    MAX_CONCURRENT = 1


class SummaryConfig:
    """Generation parameters for blog summaries."""
    PRIMARY_MAX_TOKENS = 10_000
    FALLBACK_MAX_TOKENS = 1000
    TEMPERATURE = 0.7


class TranscriptConfig:
    """Transcript acquisition behaviour."""
    PREVIEW_CHARS = 100  # Characters of a fresh transcript echoed to the log
    UNAVAILABLE_ERROR = "No transcript available"
    SUGGESTIONS = (
        "The video might not have captions enabled",
        "The captions might be in a different language than the ones we tried",
        "The video might be too new and captions are still being processed",
        "Try checking if captions are available on YouTube directly",
        "Try a different video that you know has captions",
    )


class YouTubeConfig:
    """Configuration for the YouTube Data API client."""
    API_BASE_URL = "https://www.googleapis.com/youtube/v3"
    REQUEST_TIMEOUT_SECONDS = 15.0
    RETRY_ATTEMPTS = 3

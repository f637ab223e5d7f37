"""
YouTube Data API client for video metadata and channel video lists.
"""
from typing import Any, List, Optional

import httpx
from loguru import logger
from tenacity import retry, retry_if_exception_type, stop_after_attempt, wait_exponential

from tubeblog.core.cache import MemoryCache
from tubeblog.core.constants import YouTubeConfig
from tubeblog.core.exceptions import NotFoundError, UpstreamServiceError
from tubeblog.models import (
    ApiSearchListResponse,
    ApiVideoListResponse,
    VideoMetadata,
    VideoSummary,
)
from tubeblog.repositories.videos import VideoCache

SERVICE_NAME = "YouTube Data API"


class YouTubeService:
    """
    Service for fetching video metadata and channel video lists from YouTube.

    This service handles:
    1. Looking up a video's snippet, memoised in the in-memory TTL cache.
    2. Listing a channel's latest videos, cached per channel on disk.
    3. Retrying transient transport failures; HTTP errors are not retried.
    """

    def __init__(
        self,
        api_key: Optional[str],
        memory_cache: MemoryCache,
        video_cache: VideoCache,
        client: Optional[httpx.AsyncClient] = None,
        max_results: int = 50,
    ):
        """
        Initialize the YouTubeService.

        Args:
            api_key: YouTube Data API key.
            memory_cache: Process-wide TTL cache for video metadata.
            video_cache: Persisted per-channel video list cache.
            client: HTTP client; one is created when omitted.
            max_results: Number of videos requested per channel listing.
        """
        self.api_key = api_key
        self.memory_cache = memory_cache
        self.video_cache = video_cache
        self.max_results = max_results
        self.client = client or httpx.AsyncClient(
            base_url=YouTubeConfig.API_BASE_URL,
            timeout=YouTubeConfig.REQUEST_TIMEOUT_SECONDS,
        )

    @retry(
        stop=stop_after_attempt(YouTubeConfig.RETRY_ATTEMPTS),
        wait=wait_exponential(multiplier=1, min=1, max=8),
        retry=retry_if_exception_type(httpx.TransportError),
        reraise=True,
    )
    async def _request(self, endpoint: str, params: dict[str, Any]) -> dict[str, Any]:
        if not self.api_key:
            raise UpstreamServiceError(SERVICE_NAME, "API key is not configured")

        response = await self.client.get(f"/{endpoint}", params={**params, "key": self.api_key})

        if response.status_code == 403:
            raise UpstreamServiceError(SERVICE_NAME, "quota exceeded or API key is invalid")
        if response.is_error:
            logger.error(f"{SERVICE_NAME} error {response.status_code} for /{endpoint}")
            raise UpstreamServiceError(
                SERVICE_NAME, f"HTTP {response.status_code} {response.reason_phrase}"
            )
        return response.json()

    async def _get(self, endpoint: str, params: dict[str, Any]) -> dict[str, Any]:
        """
        Call one Data API endpoint, retrying transient network failures.

        Raises:
            UpstreamServiceError: Missing API key, quota exhausted, any HTTP error,
                a network failure after all retries, or a body that is not JSON.
        """
        try:
            return await self._request(endpoint, params)
        except httpx.TransportError as e:
            logger.error(f"{SERVICE_NAME} unreachable for /{endpoint}: {e!r}")
            raise UpstreamServiceError(SERVICE_NAME, f"network error: {type(e).__name__}") from e
        except ValueError as e:
            logger.error(f"{SERVICE_NAME} returned invalid JSON for /{endpoint}")
            raise UpstreamServiceError(SERVICE_NAME, "invalid JSON response") from e

    async def get_video_metadata(self, video_id: str) -> VideoMetadata:
        """
        Return title, description, thumbnail and publish date of a video.

        Raises:
            NotFoundError: YouTube knows no video with this ID.
        """
        cache_key = f"video:{video_id}"
        cached = self.memory_cache.get(cache_key)
        if cached is not None:
            return cached

        data = ApiVideoListResponse.model_validate(
            await self._get("videos", {"part": "snippet", "id": video_id})
        )
        if not data.items:
            logger.warning(f"Video {video_id} not found")
            raise NotFoundError("Video", video_id)

        snippet = data.items[0].snippet
        metadata = VideoMetadata(
            id=video_id,
            title=snippet.title,
            description=snippet.description,
            thumbnail=snippet.thumbnails.best_url,
            published_at=snippet.published_at,
        )
        self.memory_cache.set(cache_key, metadata)
        return metadata

    async def list_channel_videos(
        self, channel_id: str, refresh: bool = False
    ) -> List[VideoSummary]:
        """
        Return the latest videos of a channel, newest first.

        Args:
            channel_id: YouTube channel ID.
            refresh: Skip the cache and replace its entry with a fresh listing.
        """
        if not refresh:
            cached = await self.video_cache.get(channel_id)
            if cached is not None:
                logger.info(f"Found {len(cached)} cached videos for channel {channel_id}")
                return cached

        logger.info(f"Fetching {self.max_results} videos for channel {channel_id}")
        data = ApiSearchListResponse.model_validate(
            await self._get(
                "search",
                {
                    "part": "snippet",
                    "channelId": channel_id,
                    "maxResults": self.max_results,
                    "order": "date",
                    "type": "video",
                },
            )
        )

        videos = [
            VideoSummary(
                id=item.id.video_id,
                title=item.snippet.title,
                thumbnail=item.snippet.thumbnails.best_url,
                published_at=item.snippet.published_at,
            )
            for item in data.items
            if item.id.video_id
        ]
        await self.video_cache.set(channel_id, videos)
        logger.info(f"Fetched {len(videos)} videos for channel {channel_id}")
        return videos

    async def aclose(self) -> None:
        await self.client.aclose()

"""
Video content orchestration: metadata, transcript, then summary.
"""
from typing import Optional

from loguru import logger

from tubeblog.models import (
    TranscriptUnavailable,
    VideoDetailsResponse,
)
from tubeblog.repositories.summaries import SummaryCache
from tubeblog.repositories.transcripts import TranscriptCache
from tubeblog.repositories.videos import VideoCache
from tubeblog.services.summarization import SummarizationService
from tubeblog.services.transcripts import TranscriptService
from tubeblog.services.youtube import YouTubeService


class VideoService:
    """
    Builds the full content of a video page and manages the caches behind it.

    Flow of :meth:`get_video_details`:
    1. Metadata from the YouTube Data API (memoised in memory).
    2. Transcript from the transcript cache or the language fallback chain.
    3. Summary from the summary cache, or generated and cached on a miss.

    A missing transcript is reported in the ``error`` field rather than
    raised, so the metadata still reaches the client.
    """

    def __init__(
        self,
        youtube: YouTubeService,
        transcripts: TranscriptService,
        summarizer: SummarizationService,
        transcript_cache: TranscriptCache,
        summary_cache: SummaryCache,
        video_cache: VideoCache,
    ):
        self.youtube = youtube
        self.transcripts = transcripts
        self.summarizer = summarizer
        self.transcript_cache = transcript_cache
        self.summary_cache = summary_cache
        self.video_cache = video_cache

    async def get_video_details(self, video_id: str) -> VideoDetailsResponse:
        """
        Assemble metadata, transcript and summary for ``video_id``.

        Raises:
            NotFoundError: The video does not exist.
            UpstreamServiceError: The YouTube Data API failed.
            ProviderError: Summary generation failed (nothing is cached).
        """
        logger.info(f"Fetching video details for {video_id}")
        metadata = await self.youtube.get_video_metadata(video_id)

        result = await self.transcripts.get_transcript(video_id)
        transcript = ""
        error: Optional[str] = None
        if isinstance(result, TranscriptUnavailable):
            error = result.error
        else:
            transcript = result.transcript

        summary = ""
        if transcript:
            summary = await self.get_or_create_summary(video_id, transcript)

        return VideoDetailsResponse(
            id=video_id,
            title=metadata.title,
            description=metadata.description,
            thumbnail=metadata.thumbnail,
            published_at=metadata.published_at,
            transcript=transcript,
            summary=summary,
            error=error,
        )

    async def get_or_create_summary(self, video_id: str, transcript: str) -> str:
        cached = await self.summary_cache.get(video_id)
        if cached:
            logger.info(f"Found summary for {video_id} in cache")
            return cached

        response = await self.summarizer.generate_summary(transcript)
        await self.summary_cache.set(video_id, response.content)
        logger.info(f"Generated and cached summary for {video_id}")
        return response.content

    async def clear_transcripts(self, video_id: Optional[str] = None) -> None:
        """Drop cached transcripts, with the summaries derived from them."""
        if video_id is None:
            await self.transcript_cache.clear_all()
            await self.summary_cache.clear_all()
            logger.info("Cleared transcript and summary caches")
        else:
            await self.transcript_cache.delete(video_id)
            await self.summary_cache.delete(video_id)
            logger.info(f"Cleared transcript and summary cache for {video_id}")

    async def clear_summaries(self, video_id: Optional[str] = None) -> None:
        if video_id is None:
            await self.summary_cache.clear_all()
            logger.info("Cleared summary cache")
        else:
            await self.summary_cache.delete(video_id)
            logger.info(f"Cleared summary cache for {video_id}")

    async def clear_channel_videos(self, channel_id: str) -> None:
        await self.video_cache.delete(channel_id)
        logger.info(f"Cleared video cache for channel {channel_id}")

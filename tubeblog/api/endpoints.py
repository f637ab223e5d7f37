"""
API endpoints for video content, transcripts, summaries and cache management.
"""
import time

from fastapi import APIRouter, Depends, Query
from fastapi.responses import JSONResponse
from loguru import logger

from tubeblog.api.dependencies import (
    get_summarization_service,
    get_transcript_service,
    get_video_service,
    get_youtube_service,
)
from tubeblog.models import (
    CacheClearedResponse,
    ChannelVideosResponse,
    SummarizeRequest,
    SummaryResponse,
    TranscriptDetailResponse,
    TranscriptErrorResponse,
    TranscriptResponse,
    TranscriptUnavailable,
    VideoDetailsResponse,
)
from tubeblog.services.summarization import SummarizationService
from tubeblog.services.transcripts import TranscriptService
from tubeblog.services.videos import VideoService
from tubeblog.services.youtube import YouTubeService


router = APIRouter()


# =============================================================================
# VIDEOS
# =============================================================================

@router.get("/videos/channel/{channel_id}", response_model=ChannelVideosResponse)
async def get_channel_videos(
    channel_id: str,
    refresh: bool = Query(default=False, description="Bypass the channel video cache"),
    youtube_service: YouTubeService = Depends(get_youtube_service),
):
    """
    Lists the latest videos of a channel, served from the per-channel cache
    while it is fresh.

    Args:
        channel_id: YouTube channel ID.
        refresh: Force a new listing from YouTube.
        youtube_service: The service talking to the YouTube Data API.

    Returns:
        ChannelVideosResponse: The channel's videos, newest first.
    """
    videos = await youtube_service.list_channel_videos(channel_id, refresh=refresh)
    return ChannelVideosResponse(videos=videos)


@router.delete("/videos/summary-cache", response_model=CacheClearedResponse)
async def clear_all_summaries(
    video_service: VideoService = Depends(get_video_service),
):
    """Clears every cached summary."""
    await video_service.clear_summaries()
    return CacheClearedResponse(
        message="All summary cache cleared successfully",
        cleared={"summary": True},
    )


@router.get("/videos/{video_id}", response_model=VideoDetailsResponse)
async def get_video_details(
    video_id: str,
    video_service: VideoService = Depends(get_video_service),
):
    """
    Returns metadata, transcript and blog summary of a video.

    A missing transcript does not fail the request: the response carries the
    metadata with an ``error`` describing the missing piece.

    Args:
        video_id: YouTube video ID.
        video_service: The service orchestrating metadata, transcript and summary.

    Returns:
        VideoDetailsResponse: The assembled video content.
    """
    start_time = time.perf_counter()
    details = await video_service.get_video_details(video_id)
    duration = time.perf_counter() - start_time
    logger.info(f"Video details for {video_id} assembled in {duration:.2f}s")
    return details


@router.get(
    "/videos/{video_id}/transcript",
    response_model=TranscriptResponse,
    responses={404: {"model": TranscriptErrorResponse}},
)
async def get_video_transcript(
    video_id: str,
    transcript_service: TranscriptService = Depends(get_transcript_service),
):
    """Returns the transcript of a video, or 404 when no language has captions."""
    result = await transcript_service.get_transcript(video_id)
    if isinstance(result, TranscriptUnavailable):
        error = TranscriptErrorResponse(error=result.error, details=result.details)
        return JSONResponse(status_code=404, content=error.model_dump(by_alias=True, exclude_none=True))
    return TranscriptResponse(transcript=result.transcript)


@router.delete("/videos/{video_id}/summary-cache", response_model=CacheClearedResponse)
async def clear_video_summary(
    video_id: str,
    video_service: VideoService = Depends(get_video_service),
):
    """Clears the cached summary of one video."""
    await video_service.clear_summaries(video_id)
    return CacheClearedResponse(
        message="Summary cache cleared successfully",
        cleared={"summary": True},
    )


@router.delete("/videos/{channel_id}/cache", response_model=CacheClearedResponse)
async def clear_channel_videos(
    channel_id: str,
    video_service: VideoService = Depends(get_video_service),
):
    """Clears the cached video list of one channel."""
    await video_service.clear_channel_videos(channel_id)
    return CacheClearedResponse(
        message="Cache cleared successfully",
        cleared={"videos": True},
    )


# =============================================================================
# TRANSCRIPTS
# =============================================================================

@router.get(
    "/transcript/{video_id}",
    response_model=TranscriptDetailResponse,
    response_model_exclude_none=True,
    responses={404: {"model": TranscriptErrorResponse}},
)
async def get_transcript(
    video_id: str,
    transcript_service: TranscriptService = Depends(get_transcript_service),
):
    """
    Returns the transcript of a video along with the caption language used.

    On failure the 404 body lists per-language errors, the languages that
    answered without captions, and suggestions for the user.
    """
    result = await transcript_service.get_transcript(video_id)
    if isinstance(result, TranscriptUnavailable):
        error = TranscriptErrorResponse(
            error=result.error,
            details=result.details,
            available_languages=result.available_languages,
            suggestions=result.suggestions,
        )
        return JSONResponse(status_code=404, content=error.model_dump(by_alias=True))
    return TranscriptDetailResponse(
        transcript=result.transcript,
        language=result.language,
        total_captions=result.total_captions,
    )


@router.delete("/transcript-cache", response_model=CacheClearedResponse)
async def clear_all_transcripts(
    video_service: VideoService = Depends(get_video_service),
):
    """Clears every cached transcript together with every cached summary."""
    await video_service.clear_transcripts()
    return CacheClearedResponse(
        message="Transcript and summary caches cleared successfully",
        cleared={"transcript": True, "summary": True},
    )


@router.delete("/transcript-cache/{video_id}", response_model=CacheClearedResponse)
async def clear_video_transcript(
    video_id: str,
    video_service: VideoService = Depends(get_video_service),
):
    """Clears the cached transcript and summary of one video."""
    await video_service.clear_transcripts(video_id)
    return CacheClearedResponse(
        message=f"Cache cleared for video ID: {video_id}",
        cleared={"transcript": True, "summary": True},
    )


# =============================================================================
# SUMMARIES
# =============================================================================

@router.post("/summarize", response_model=SummaryResponse)
async def summarize_transcript(
    payload: SummarizeRequest,
    summarizer: SummarizationService = Depends(get_summarization_service),
):
    """
    Summarizes an arbitrary transcript into a blog post. Nothing is cached.

    Args:
        payload: The request body containing the transcript.
        summarizer: The summary generation service.

    Returns:
        SummaryResponse: The generated summary and the provider that wrote it.
    """
    logger.info(f"Incoming summary request ({len(payload.transcript)} chars)")
    start_time = time.perf_counter()
    response = await summarizer.generate_summary(payload.transcript)
    duration = time.perf_counter() - start_time
    logger.info(f"Summarization completed in {duration:.2f}s")
    return SummaryResponse(summary=response.content, provider=response.provider)

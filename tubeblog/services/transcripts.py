"""
Transcript acquisition: cache first, then a language fallback chain.

Each configured language is one strategy. Strategies run in priority order and
each returns a tagged ``LanguageAttempt`` (fetched / empty / failed); the
first one that yields non-blank caption text wins and is cached. A failing language
never aborts the chain. When every language is exhausted the caller gets a
``TranscriptUnavailable`` result listing what went wrong, not an exception.
"""
import asyncio
from typing import Dict, List, Sequence

from loguru import logger

from tubeblog.core.constants import TranscriptConfig
from tubeblog.models import (
    CaptionsEmpty,
    CaptionsFailed,
    CaptionsFetched,
    LanguageAttempt,
    TranscriptFetched,
    TranscriptResult,
    TranscriptUnavailable,
    language_name,
)
from tubeblog.repositories.transcripts import TranscriptCache
from tubeblog.services.captions import CaptionsClient


def _describe_error(error: Exception) -> str:
    # youtube-transcript-api messages span several lines of advice
    for line in str(error).splitlines():
        if line.strip():
            return line.strip()
    return type(error).__name__


class TranscriptService:
    """
    Service returning the transcript of a video.

    Concurrent requests for the same video share a single acquisition, so a
    cold video is fetched (and cached) once.
    """

    def __init__(
        self,
        captions: CaptionsClient,
        cache: TranscriptCache,
        languages: Sequence[str],
    ):
        """
        Initialize the TranscriptService.

        Args:
            captions: Client fetching captions for one language.
            cache: Persisted transcript cache.
            languages: Caption language codes in priority order.
        """
        self.captions = captions
        self.cache = cache
        self.languages = list(languages)
        self._in_flight: Dict[str, asyncio.Task] = {}

    async def _try_language(self, video_id: str, language: str) -> LanguageAttempt:
        name = language_name(language)
        logger.info(f"Attempting to fetch {name} ({language}) subtitles for {video_id}")
        try:
            cues = await self.captions.fetch(video_id, language)
        except Exception as e:
            logger.warning(f"Subtitles not found for {video_id} in {name}: {_describe_error(e)}")
            return CaptionsFailed(language=language, error=_describe_error(e))

        attempt = CaptionsFetched(language=language, cues=cues)
        if not attempt.text.strip():
            return CaptionsEmpty(language=language)
        return attempt

    async def _acquire(self, video_id: str) -> TranscriptResult:
        errors: List[str] = []
        available_languages: List[str] = []

        for language in self.languages:
            attempt = await self._try_language(video_id, language)

            if isinstance(attempt, CaptionsFetched):
                name = language_name(language)
                transcript = attempt.text
                logger.info(
                    f"Fetched {len(attempt.cues)} captions in {name} for {video_id}: "
                    f"{transcript[:TranscriptConfig.PREVIEW_CHARS]}..."
                )
                if await self.cache.set(video_id, transcript):
                    logger.info(f"Cached transcript for {video_id}")
                return TranscriptFetched(
                    video_id=video_id,
                    transcript=transcript,
                    language=name,
                    total_captions=len(attempt.cues),
                )
            elif isinstance(attempt, CaptionsEmpty):
                available_languages.append(language_name(language))
            elif isinstance(attempt, CaptionsFailed):
                errors.append(f"{language_name(language)}: {attempt.error}")

        logger.warning(f"No transcript found for {video_id} in any of {len(self.languages)} languages")
        return TranscriptUnavailable(
            video_id=video_id,
            error=TranscriptConfig.UNAVAILABLE_ERROR,
            errors=errors,
            available_languages=available_languages,
            suggestions=list(TranscriptConfig.SUGGESTIONS),
        )

    def _forget(self, video_id: str, task: asyncio.Task) -> None:
        if self._in_flight.get(video_id) is task:
            del self._in_flight[video_id]

    async def get_transcript(self, video_id: str) -> TranscriptResult:
        """
        Return the transcript of ``video_id``.

        A cached transcript is returned without any network call. Otherwise
        the language chain runs (once, however many callers are waiting).

        Args:
            video_id: YouTube video ID.

        Returns:
            TranscriptFetched on success, TranscriptUnavailable when no
            language produced captions.
        """
        cached = await self.cache.get(video_id)
        # A blank cached transcript is treated as a miss
        if cached:
            logger.info(f"Found transcript for {video_id} in cache")
            return TranscriptFetched(video_id=video_id, transcript=cached, from_cache=True)

        task = self._in_flight.get(video_id)
        if task is None:
            task = asyncio.create_task(self._acquire(video_id))
            self._in_flight[video_id] = task
            task.add_done_callback(lambda done: self._forget(video_id, done))
        else:
            logger.debug(f"Joining in-flight transcript fetch for {video_id}")

        return await asyncio.shield(task)

"""
Caption fetching through youtube-transcript-api.
"""
import asyncio
from typing import List, Optional

from youtube_transcript_api import YouTubeTranscriptApi
from youtube_transcript_api.proxies import GenericProxyConfig

from tubeblog.models import CaptionCue


class CaptionsClient:
    """
    Fetches caption cues for one video in one language.

    The underlying library is blocking, so every fetch runs in a worker thread
    to keep the event loop free.
    """

    def __init__(self, proxy_http: Optional[str] = None, proxy_https: Optional[str] = None):
        """
        Initialize the client.

        Args:
            proxy_http: Optional HTTP proxy URL for caption requests.
            proxy_https: Optional HTTPS proxy URL for caption requests.
        """
        self.proxy_config = None
        if proxy_http or proxy_https:
            self.proxy_config = GenericProxyConfig(http_url=proxy_http, https_url=proxy_https)

    def _fetch_sync(self, video_id: str, language: str) -> List[CaptionCue]:
        api = YouTubeTranscriptApi(proxy_config=self.proxy_config)
        fetched = api.fetch(video_id, languages=[language])
        return [
            CaptionCue(text=snippet.text, start=snippet.start, duration=snippet.duration)
            for snippet in fetched
        ]

    async def fetch(self, video_id: str, language: str) -> List[CaptionCue]:
        """
        Fetch the captions of ``video_id`` in ``language``.

        Returns:
            The caption cues, possibly empty.

        Raises:
            youtube_transcript_api.CouldNotRetrieveTranscript: No captions in that
                language, captions disabled, video unavailable, and similar.
        """
        return await asyncio.to_thread(self._fetch_sync, video_id, language)

from pathlib import Path
from typing import Any, Callable, List, Optional
import time

from loguru import logger
from pydantic import ValidationError

from tubeblog.models import VideoSummary
from tubeblog.repositories.json_store import ExpiringJsonStore


class VideoCache(ExpiringJsonStore):
    """
    Persisted per-channel video lists.

    File layout: ``{channel_id: {"videos": [VideoSummary, ...], "timestamp": ms}}``.
    A bare list (older layout) is read as a fresh entry. Lists are replaced
    wholesale on every refresh and expire after ``ttl`` seconds.
    """

    def __init__(
        self,
        path: str | Path,
        ttl: float = 3600,
        clock: Callable[[], float] = time.time,
    ):
        super().__init__(path, ttl=ttl, name="video", clock=clock)

    def _normalize(self, data: dict[str, Any]) -> dict[str, Any]:
        normalized = {}
        for channel_id, entry in data.items():
            if isinstance(entry, list):
                entry = {"videos": entry, "timestamp": self.now_ms()}
            if not isinstance(entry, dict) or not isinstance(entry.get("videos"), list):
                logger.warning(f"Dropping malformed video cache entry for channel {channel_id}")
                continue
            normalized[channel_id] = entry
        return normalized

    async def get(self, channel_id: str) -> Optional[List[VideoSummary]]:
        entry = await self.get_fresh(channel_id)
        if entry is None:
            return None
        try:
            return [VideoSummary.model_validate(v) for v in entry["videos"]]
        except ValidationError as e:
            logger.warning(f"Unreadable video cache entry for channel {channel_id}: {e}")
            return None

    async def set(self, channel_id: str, videos: List[VideoSummary]) -> bool:
        entry = {
            "videos": [v.model_dump(by_alias=True) for v in videos],
            "timestamp": self.now_ms(),
        }
        return await super().set(channel_id, entry)

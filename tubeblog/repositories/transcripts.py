from pathlib import Path
from typing import Any, Callable, Optional
import time

from loguru import logger
from pydantic import ValidationError

from tubeblog.models import TranscriptRecord
from tubeblog.repositories.json_store import ExpiringJsonStore


class TranscriptCache(ExpiringJsonStore):
    """
    Persisted transcripts keyed by video ID.

    File layout: ``{video_id: {"transcript": str, "timestamp": ms}}``. Older
    layouts (a bare string, or ``{"data": str, "timestamp": ms}``) are
    upgraded when read. Entries expire after ``ttl`` seconds.
    """

    def __init__(
        self,
        path: str | Path,
        ttl: float = 24 * 3600,
        clock: Callable[[], float] = time.time,
    ):
        super().__init__(path, ttl=ttl, name="transcript", clock=clock)

    def _normalize(self, data: dict[str, Any]) -> dict[str, Any]:
        normalized = {}
        for video_id, entry in data.items():
            if isinstance(entry, str):
                entry = {"transcript": entry, "timestamp": self.now_ms()}
            elif isinstance(entry, dict) and "transcript" not in entry and "data" in entry:
                entry = {"transcript": entry["data"], "timestamp": entry.get("timestamp")}

            try:
                normalized[video_id] = TranscriptRecord.model_validate(entry).model_dump()
            except ValidationError:
                logger.warning(f"Dropping malformed transcript cache entry for {video_id}")
        return normalized

    async def get(self, video_id: str) -> Optional[str]:
        record = await self.get_record(video_id)
        return record.transcript if record else None

    async def get_record(self, video_id: str) -> Optional[TranscriptRecord]:
        entry = await self.get_fresh(video_id)
        if entry is None:
            return None
        return TranscriptRecord.model_validate(entry)

    async def set(self, video_id: str, transcript: Any) -> bool:
        """
        Cache a transcript.

        Only plain strings are accepted; anything else is logged and
        rejected without touching the file.

        Returns:
            True when the transcript was written to disk.
        """
        if not isinstance(transcript, str):
            logger.warning(
                f"Rejected transcript for {video_id}: expected str, got {type(transcript).__name__}"
            )
            return False

        record = TranscriptRecord(transcript=transcript, timestamp=self.now_ms())
        return await super().set(video_id, record.model_dump())

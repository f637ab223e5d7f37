from pathlib import Path
from typing import Any, Optional

from loguru import logger

from tubeblog.repositories.json_store import JsonFileStore


class SummaryCache(JsonFileStore):
    """Persisted blog summaries, ``{video_id: str}``, kept until cleared."""

    def __init__(self, path: str | Path):
        super().__init__(path, name="summary")

    def _normalize(self, data: dict[str, Any]) -> dict[str, Any]:
        summaries = {k: v for k, v in data.items() if isinstance(v, str)}
        if len(summaries) != len(data):
            logger.warning(f"Dropped {len(data) - len(summaries)} non-text summary cache entries")
        return summaries

    async def get(self, video_id: str) -> Optional[str]:
        return await super().get(video_id)

    async def set(self, video_id: str, summary: str) -> bool:
        return await super().set(video_id, summary)
